import heapq
import io

from bitio import BitInputStream, BitOutputStream

BITS_PER_WORD = 8
BITS_PER_INT = 32
ALPH_SIZE = 1 << BITS_PER_WORD
PSEUDO_EOF = ALPH_SIZE # end-of-stream symbol, never appears in the input
HUFF_NUMBER = 0xface8200
HUFF_TREE = HUFF_NUMBER | 1 # magic marker for the tree-header format

DEBUG_NONE = 0
DEBUG_LOW = 1
DEBUG_HIGH = 4


class HuffException(ValueError):
    pass

class FormatError(HuffException): # stream does not start with HUFF_TREE
    pass

class StreamCorrupt(HuffException): # tree header is incomplete or malformed
    pass

class BadInput(HuffException): # payload ran out before PSEUDO_EOF
    pass


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, weight, left=None, right=None):
        self.symbol = symbol # 0..256 for leaves, None for internal nodes
        self.weight = weight
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


def read_for_counts(bit_in: BitInputStream) -> list: # one full pass over the input
    counts = [0] * (ALPH_SIZE + 1)
    while True:
        val = bit_in.read_bits(BITS_PER_WORD)
        if val == -1:
            break
        counts[val] += 1
        counts[PSEUDO_EOF] = 1
    return counts

def counts_from_bytes(data: bytes) -> list: # same table as read_for_counts, from memory
    counts = [0] * (ALPH_SIZE + 1)
    for b in data:
        counts[b] += 1
    if data:
        counts[PSEUDO_EOF] = 1
    return counts


def make_tree_from_counts(counts) -> HuffmanNode:
    """
    Builds the Huffman tree from a 257-entry count table.

    Heap entries are (weight, seq, node). Leaves are numbered in symbol
    order and every merged node takes the next number, so ties always
    resolve the same way. The first node popped becomes the left child.

    The root is always internal: PSEUDO_EOF is added when its count is 0
    (empty input), and a lone leaf is paired with a zero-weight filler leaf.
    """
    counts = list(counts)
    if counts[PSEUDO_EOF] == 0:
        counts[PSEUDO_EOF] = 1

    priority_queue = []
    for symbol, weight in enumerate(counts):
        if weight > 0:
            priority_queue.append((weight, len(priority_queue), HuffmanNode(symbol, weight)))

    if len(priority_queue) == 1:
        filler = next(s for s in range(ALPH_SIZE) if counts[s] == 0)
        priority_queue.insert(0, (0, -1, HuffmanNode(filler, 0)))

    heapq.heapify(priority_queue)
    seq = len(priority_queue)

    # Build the tree
    while len(priority_queue) > 1:
        left_weight, _, left = heapq.heappop(priority_queue)
        right_weight, _, right = heapq.heappop(priority_queue)
        weight = left_weight + right_weight
        heapq.heappush(priority_queue, (weight, seq, HuffmanNode(None, weight, left, right)))
        seq += 1

    return priority_queue[0][2] # root of the tree


def make_codings_from_tree(root: HuffmanNode, debug: int = DEBUG_NONE) -> dict:
    if root.is_leaf():
        raise ValueError("a single-leaf tree has no usable codes")

    codes = {}
    def coding_helper(node, path): # recursive helper, '0' for left and '1' for right
        if node is None:
            return

        # Leaf node -> record the path
        if node.is_leaf():
            codes[node.symbol] = path
            if debug >= DEBUG_HIGH:
                print(f"encoding for {node.symbol} is {path}")
            return

        coding_helper(node.left, path + "0")
        coding_helper(node.right, path + "1")

    coding_helper(root, "")
    return codes


def write_header(root: HuffmanNode, bit_out: BitOutputStream) -> None: # pre-order
    if root.is_leaf():
        bit_out.write_bits(1, 1)
        bit_out.write_bits(BITS_PER_WORD + 1, root.symbol)
        return
    bit_out.write_bits(1, 0)
    write_header(root.left, bit_out)
    write_header(root.right, bit_out)


def read_tree_header(bit_in: BitInputStream, depth: int = 0) -> HuffmanNode:
    # no tree over 257 symbols is deeper than ALPH_SIZE
    if depth > ALPH_SIZE:
        raise StreamCorrupt("reading tree header failed: tree is too deep")

    bit = bit_in.read_bits(1)
    if bit == -1:
        raise StreamCorrupt("reading tree header failed: stream ended inside the header")
    if bit == 0:
        left = read_tree_header(bit_in, depth + 1)
        right = read_tree_header(bit_in, depth + 1)
        return HuffmanNode(None, 0, left, right)

    symbol = bit_in.read_bits(BITS_PER_WORD + 1)
    if symbol == -1:
        raise StreamCorrupt("reading tree header failed: stream ended inside a leaf")
    if symbol > PSEUDO_EOF:
        raise StreamCorrupt(f"reading tree header failed: leaf symbol {symbol} out of range")
    return HuffmanNode(symbol, 0)


def write_compressed_bits(codings: dict, bit_in: BitInputStream, bit_out: BitOutputStream) -> None:
    while True:
        val = bit_in.read_bits(BITS_PER_WORD)
        if val == -1:
            break
        code = codings[val]
        bit_out.write_bits(len(code), int(code, 2))
    code = codings[PSEUDO_EOF]
    bit_out.write_bits(len(code), int(code, 2))


def read_compressed_bits(root: HuffmanNode, bit_in: BitInputStream, bit_out: BitOutputStream) -> None:
    current = root
    while True:
        bit = bit_in.read_bits(1)
        if bit == -1:
            raise BadInput("bad input: unexpected end of stream before PSEUDO_EOF")

        current = current.left if bit == 0 else current.right
        if current is None:
            raise StreamCorrupt("decoding payload failed: walked off the tree")

        if current.is_leaf(): # reached a leaf
            if current.symbol == PSEUDO_EOF:
                return
            bit_out.write_bits(BITS_PER_WORD, current.symbol)
            current = root # start again at the root


def compress(bit_in: BitInputStream, bit_out: BitOutputStream, debug: int = DEBUG_NONE) -> None:
    """
    Compresses bit_in into bit_out: magic marker, tree header, then payload.
    bit_in is read twice, so it must support reset(). bit_out is always closed
    """
    try:
        counts = read_for_counts(bit_in)
        root = make_tree_from_counts(counts)
        codings = make_codings_from_tree(root, debug)

        bit_out.write_bits(BITS_PER_INT, HUFF_TREE)
        write_header(root, bit_out)
        header_bits = bit_out.bits_written - BITS_PER_INT

        bit_in.reset()
        write_compressed_bits(codings, bit_in, bit_out)
    finally:
        bit_out.close()

    if debug >= DEBUG_LOW:
        print(f"compress: {len(codings)} symbols, header {header_bits} bits, "
              f"read {bit_in.bits_read} bits, wrote {bit_out.bits_written} bits")


def decompress(bit_in: BitInputStream, bit_out: BitOutputStream, debug: int = DEBUG_NONE) -> None:
    try:
        bits = bit_in.read_bits(BITS_PER_INT)
        if bits != HUFF_TREE:
            raise FormatError(f"illegal header starts with {bits}")

        root = read_tree_header(bit_in)
        read_compressed_bits(root, bit_in, bit_out)
    finally:
        bit_out.close()

    if debug >= DEBUG_LOW:
        print(f"decompress: read {bit_in.bits_read} bits, wrote {bit_out.bits_written} bits")


def compress_bytes(data: bytes, debug: int = DEBUG_NONE) -> bytes:
    sink = io.BytesIO()
    compress(BitInputStream(data), BitOutputStream(sink), debug)
    return sink.getvalue()

def decompress_bytes(blob: bytes, debug: int = DEBUG_NONE) -> bytes:
    sink = io.BytesIO()
    decompress(BitInputStream(blob), BitOutputStream(sink), debug)
    return sink.getvalue()
