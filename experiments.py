"""
Overhead study for the tree-header Huffman format

For skewed inputs of several sizes and alphabet widths, splits each compressed
stream into its parts (magic marker, tree header, symbol codes, PSEUDO_EOF code,
final padding) and checks that it decodes back to the input

Outputs (in --outdir):
  - metrics.csv              (one row per run)
  - header_overhead.png      (share of the stream spent on marker + header)

How to run:
  python experiments.py --outdir results
  python experiments.py --sizes 64,1024,16384 --alphabets 2,16,256 --runs 3
"""

from __future__ import annotations

import argparse
import csv
import math
import random
import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import List

import matplotlib.pyplot as plt

import huffman as huff


def zipf_bytes(size: int, alphabet: int, seed: int, s: float = 1.1) -> bytes:
    """Byte i of the alphabet is drawn with weight 1 / (i + 1) ** s"""
    if not 1 <= alphabet <= huff.ALPH_SIZE:
        raise ValueError(f"alphabet must be in 1..{huff.ALPH_SIZE}, got {alphabet}")
    rng = random.Random(seed)
    weights = [(i + 1) ** -s for i in range(alphabet)]
    return bytes(rng.choices(range(alphabet), weights=weights, k=size))


def entropy_bits(counts: List[int], total: int) -> float: # Shannon entropy, bits per byte
    if total == 0:
        return 0.0
    return -sum(c / total * math.log2(c / total) for c in counts if c)


@dataclass
class StreamBreakdown:
    alphabet: int
    input_bytes: int
    run_id: int
    distinct_symbols: int # PSEUDO_EOF excluded

    compressed_bytes: int
    header_bits: int
    code_bits: int        # payload without the PSEUDO_EOF code
    eof_bits: int
    padding_bits: int

    entropy_bits_per_byte: float
    code_bits_per_byte: float
    encode_ms: float
    decode_ms: float
    round_trip_ok: int    # 1 or 0

    @property
    def overhead_fraction(self) -> float: # marker + header + EOF + padding, over the whole stream
        fixed = huff.BITS_PER_INT + self.header_bits + self.eof_bits + self.padding_bits
        return fixed / (self.compressed_bytes * 8)


def measure(data: bytes, alphabet: int = 0, run_id: int = 0) -> StreamBreakdown:
    counts = huff.counts_from_bytes(data)
    root = huff.make_tree_from_counts(counts)
    codings = huff.make_codings_from_tree(root)

    leaves = len(codings)
    internal = leaves - 1
    header_bits = internal + leaves * (1 + huff.BITS_PER_WORD + 1)
    code_bits = sum(c * len(codings[s]) for s, c in enumerate(counts[:huff.ALPH_SIZE]) if c)
    eof_bits = len(codings[huff.PSEUDO_EOF])

    started = time.perf_counter()
    compressed = huff.compress_bytes(data)
    encoded_at = time.perf_counter()
    decoded = huff.decompress_bytes(compressed)
    decoded_at = time.perf_counter()

    used = huff.BITS_PER_INT + header_bits + code_bits + eof_bits
    return StreamBreakdown(
        alphabet=alphabet,
        input_bytes=len(data),
        run_id=run_id,
        distinct_symbols=sum(1 for c in counts[:huff.ALPH_SIZE] if c),
        compressed_bytes=len(compressed),
        header_bits=header_bits,
        code_bits=code_bits,
        eof_bits=eof_bits,
        padding_bits=len(compressed) * 8 - used,
        entropy_bits_per_byte=entropy_bits(counts[:huff.ALPH_SIZE], len(data)),
        code_bits_per_byte=code_bits / len(data) if data else 0.0,
        encode_ms=(encoded_at - started) * 1000,
        decode_ms=(decoded_at - encoded_at) * 1000,
        round_trip_ok=int(decoded == data),
    )


def save_metrics(path: Path, rows: List[StreamBreakdown]) -> None:
    names = [f.name for f in fields(StreamBreakdown)] + ["overhead_fraction"]
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(names)
        for row in rows:
            writer.writerow([getattr(row, n) for n in names])


def plot_overhead(rows: List[StreamBreakdown], path: Path) -> None:
    plt.figure()
    for alphabet in sorted({r.alphabet for r in rows}):
        by_size = {}
        for r in rows:
            if r.alphabet == alphabet:
                by_size.setdefault(r.input_bytes, []).append(r.overhead_fraction)
        sizes = sorted(by_size)
        plt.plot(sizes, [sum(by_size[s]) / len(by_size[s]) for s in sizes], marker="o",
                 label=f"{alphabet} symbols")
    plt.xscale("log", base=2)
    plt.xlabel("Input Size (bytes)")
    plt.ylabel("Marker + Header + EOF + Padding / Stream")
    plt.title("Fixed Cost of the Tree-Header Format")
    plt.legend()
    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close()


def _int_list(text: str) -> List[int]:
    return [int(part) for part in text.split(",") if part.strip()]


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Measure header and EOF overhead of the Huffman format")
    ap.add_argument("--outdir", type=Path, default=Path("results"), help="Where metrics.csv and the chart go")
    ap.add_argument("--sizes", type=_int_list, default=[64, 256, 1024, 4096, 16384],
                    help="Comma-separated input sizes in bytes")
    ap.add_argument("--alphabets", type=_int_list, default=[4, 32, 256],
                    help="Comma-separated alphabet widths for the skewed generator")
    ap.add_argument("--runs", type=int, default=2, help="Runs per (size, alphabet) pair")
    ap.add_argument("--seed", type=int, default=7, help="Base random seed")
    args = ap.parse_args(argv)

    args.outdir.mkdir(parents=True, exist_ok=True)

    rows = [
        measure(zipf_bytes(size, alphabet, seed=args.seed + run_id * 7919 + size), alphabet, run_id)
        for alphabet in args.alphabets
        for size in args.sizes
        for run_id in range(args.runs)
    ]

    save_metrics(args.outdir / "metrics.csv", rows)
    plot_overhead(rows, args.outdir / "header_overhead.png")

    failures = sum(1 for r in rows if not r.round_trip_ok)
    print(f"{len(rows)} runs, {failures} round-trip failures; results in {args.outdir.resolve()}")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
