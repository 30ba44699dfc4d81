import io
import os


class BitInputStream: # reads MSB-first bits from bytes, a path, or a binary file
    def __init__(self, source):
        self._owns_file = False
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._file = io.BytesIO(bytes(source))
        elif isinstance(source, (str, os.PathLike)):
            self._file = open(source, "rb")
            self._owns_file = True
        else:
            self._file = source
        self._buffer = 0 # holds at most n_bits unread bits
        self._n_bits = 0
        self.bits_read = 0

    def read_bits(self, width: int) -> int:
        """
        Read width bits as an unsigned int.
        Returns -1 once fewer than width bits are left in the source
        """
        if width <= 0:
            raise ValueError(f"bit width must be positive, got {width}")

        while self._n_bits < width:
            chunk = self._file.read(1)
            if not chunk:
                return -1
            self._buffer = (self._buffer << 8) | chunk[0]
            self._n_bits += 8

        self._n_bits -= width
        value = self._buffer >> self._n_bits
        self._buffer &= (1 << self._n_bits) - 1 # drop consumed bits
        self.bits_read += width
        return value

    def reset(self) -> None: # rewind to the first bit of the source
        seekable = getattr(self._file, "seekable", None)
        if seekable is None or not seekable():
            raise ValueError("cannot reset a bit source that is not seekable")
        self._file.seek(0)
        self._buffer = 0
        self._n_bits = 0

    def close(self) -> None:
        if self._owns_file:
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class BitOutputStream: # writes MSB-first bits to a path or a binary file
    def __init__(self, sink):
        self._owns_file = False
        if isinstance(sink, (str, os.PathLike)):
            self._file = open(sink, "wb")
            self._owns_file = True
        else:
            self._file = sink
        self._buffer = 0
        self._n_bits = 0
        self._closed = False
        self.bits_written = 0

    def write_bits(self, width: int, value: int) -> None:
        if width < 0:
            raise ValueError(f"bit width must not be negative, got {width}")
        if value < 0 or value >= (1 << width):
            raise ValueError(f"value {value} does not fit in {width} bits")
        if self._closed:
            raise ValueError("write to a closed bit stream")

        self._buffer = (self._buffer << width) | value
        self._n_bits += width
        self.bits_written += width

        out = bytearray()
        while self._n_bits >= 8:
            self._n_bits -= 8
            out.append(self._buffer >> self._n_bits)
            self._buffer &= (1 << self._n_bits) - 1
        if out:
            self._file.write(bytes(out))

    def close(self) -> None:
        """
        Pad the last partial byte with zeros and flush.
        The underlying file is closed only if this stream opened it
        """
        if self._closed:
            return
        self._closed = True
        if self._n_bits > 0:
            self._file.write(bytes([self._buffer << (8 - self._n_bits)]))
            self._buffer = 0
            self._n_bits = 0
        self._file.flush()
        if self._owns_file:
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
