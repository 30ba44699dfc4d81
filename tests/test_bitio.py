import io

import pytest

from bitio import BitInputStream, BitOutputStream


def test_write_bits_packs_msb_first_and_pads_on_close():
    sink = io.BytesIO()
    out = BitOutputStream(sink)
    out.write_bits(1, 1)
    out.write_bits(9, 256)
    out.write_bits(3, 0b101)
    out.close()
    # 1 100000000 101 + 000 padding
    assert sink.getvalue() == bytes([0b11000000, 0b00101000])
    assert out.bits_written == 13


def test_close_is_idempotent_and_blocks_writes():
    sink = io.BytesIO()
    out = BitOutputStream(sink)
    out.write_bits(4, 0xF)
    out.close()
    out.close()
    assert sink.getvalue() == b"\xf0"
    with pytest.raises(ValueError):
        out.write_bits(1, 0)


def test_write_bits_rejects_value_wider_than_width():
    out = BitOutputStream(io.BytesIO())
    with pytest.raises(ValueError):
        out.write_bits(3, 8)


def test_read_bits_returns_minus_one_when_exhausted():
    bit_in = BitInputStream(b"\xab")
    assert bit_in.read_bits(4) == 0xA
    assert bit_in.read_bits(8) == -1
    assert bit_in.read_bits(4) == 0xB
    assert bit_in.read_bits(1) == -1
    assert bit_in.bits_read == 8


def test_read_32_bits():
    bit_in = BitInputStream(bytes([0xFA, 0xCE, 0x82, 0x01, 0x7F]))
    assert bit_in.read_bits(32) == 0xFACE8201
    assert bit_in.read_bits(8) == 0x7F


def test_reset_rewinds_to_start():
    bit_in = BitInputStream(b"hi")
    assert bit_in.read_bits(8) == ord("h")
    assert bit_in.read_bits(3) == ord("i") >> 5
    bit_in.reset()
    assert bit_in.read_bits(8) == ord("h")
    assert bit_in.read_bits(8) == ord("i")


def test_reset_requires_seekable_source():
    class Pipe(io.RawIOBase):
        def readable(self):
            return True

        def seekable(self):
            return False

    bit_in = BitInputStream(Pipe())
    with pytest.raises(ValueError):
        bit_in.reset()


def test_path_streams_own_their_files(tmp_path):
    path = tmp_path / "bits.bin"
    with BitOutputStream(path) as out:
        out.write_bits(16, 0xBEEF)
        out.write_bits(2, 0b11)

    assert path.read_bytes() == b"\xbe\xef\xc0"

    with BitInputStream(path) as bit_in:
        assert bit_in.read_bits(16) == 0xBEEF
        assert bit_in.read_bits(2) == 0b11
