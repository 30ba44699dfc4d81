import csv

import matplotlib

matplotlib.use("Agg")

import pytest

import experiments as exp
import huffman as huff


def test_zipf_bytes_is_seeded_and_stays_in_alphabet():
    a = exp.zipf_bytes(400, alphabet=8, seed=3)
    assert a == exp.zipf_bytes(400, alphabet=8, seed=3)
    assert a != exp.zipf_bytes(400, alphabet=8, seed=4)
    assert len(a) == 400
    assert max(a) < 8


def test_zipf_bytes_rejects_bad_alphabet():
    with pytest.raises(ValueError):
        exp.zipf_bytes(10, alphabet=0, seed=1)
    with pytest.raises(ValueError):
        exp.zipf_bytes(10, alphabet=257, seed=1)


def test_entropy_bits():
    assert exp.entropy_bits([5, 5], 10) == pytest.approx(1.0)
    assert exp.entropy_bits([7], 7) == 0.0
    assert exp.entropy_bits([0, 0], 0) == 0.0


def test_breakdown_adds_up_to_the_stream():
    data = exp.zipf_bytes(3000, alphabet=40, seed=9)
    row = exp.measure(data, alphabet=40)
    assert row.round_trip_ok == 1
    total = huff.BITS_PER_INT + row.header_bits + row.code_bits + row.eof_bits + row.padding_bits
    assert total == row.compressed_bytes * 8
    assert 0 <= row.padding_bits < 8
    # Huffman codes stay within one bit of the entropy
    assert row.entropy_bits_per_byte <= row.code_bits_per_byte < row.entropy_bits_per_byte + 1


def test_header_size_matches_leaf_count():
    row = exp.measure(b"A" * 100)
    # one internal node plus two 10-bit leaves (A and PSEUDO_EOF)
    assert row.header_bits == 1 + 2 * 10
    assert row.distinct_symbols == 1
    assert row.code_bits_per_byte == 1.0
    assert row.eof_bits == 1


def test_empty_input_is_all_overhead():
    row = exp.measure(b"")
    assert row.round_trip_ok == 1
    assert row.code_bits == 0
    assert row.overhead_fraction == 1.0


def test_overhead_shrinks_as_input_grows():
    small = exp.measure(exp.zipf_bytes(64, alphabet=32, seed=1))
    large = exp.measure(exp.zipf_bytes(8192, alphabet=32, seed=1))
    assert large.overhead_fraction < small.overhead_fraction


def test_save_metrics(tmp_path):
    rows = [exp.measure(exp.zipf_bytes(200, alphabet=4, seed=s), alphabet=4, run_id=s) for s in (0, 1)]
    path = tmp_path / "metrics.csv"
    exp.save_metrics(path, rows)

    with path.open(newline="", encoding="utf-8") as fh:
        saved = list(csv.DictReader(fh))
    assert len(saved) == 2
    assert saved[1]["run_id"] == "1"
    assert float(saved[0]["overhead_fraction"]) == pytest.approx(rows[0].overhead_fraction)


def test_main_writes_outputs(tmp_path, capsys):
    outdir = tmp_path / "results"
    rc = exp.main(["--outdir", str(outdir), "--sizes", "32,128", "--alphabets", "2,64", "--runs", "1"])
    assert rc == 0
    assert (outdir / "metrics.csv").exists()
    assert (outdir / "header_overhead.png").exists()
    assert "4 runs, 0 round-trip failures" in capsys.readouterr().out
