from __future__ import annotations

import random
import tracemalloc

from compress_lab.core.codec_huffman import CodecHuffman
from compress_lab.core.codec_lzw import CodecLZW
from compress_lab.core.codec_rle import rle_encode
from compress_lab.core.trace import StepTrace, TraceCursor, TraceStep


def test_trace_is_restartable() -> None:
    steps = CodecLZW().encode("TOBEORNOT").steps
    first = [s.kind for s in steps]
    second = [s.kind for s in steps]
    assert first == second
    assert len(first) == len(steps)


def test_trace_slice_stays_a_trace() -> None:
    steps = rle_encode("AABBBC").steps
    head = steps[:2]
    assert isinstance(head, StepTrace)
    assert len(head) == 2
    assert head[0] == steps[0]


def test_trace_to_list_omits_unset_fields() -> None:
    step = TraceStep(kind="table", description="code table built")
    d = step.to_dict()
    assert d == {"kind": "table", "description": "code table built", "current_encoded": ""}

    emit = CodecLZW().encode("AAAA").steps[1].to_dict()
    assert emit["dict_add"] == {"entry": "AA", "code": 256}
    assert emit["code"] == 65


def test_cursor_moves_are_clamped() -> None:
    cur = TraceCursor(rle_encode("AABBBC").steps)  # 3 runs
    assert cur.at_start
    assert cur.current.symbol == "A"

    assert cur.prev().symbol == "A"
    assert cur.position == 0

    assert cur.next().symbol == "B"
    assert cur.last().symbol == "C"
    assert cur.at_end
    assert cur.next().symbol == "C"
    assert cur.progress == 1.0

    assert cur.seek(99).symbol == "C"
    assert cur.seek(-5).symbol == "A"
    assert cur.first().symbol == "A"


def test_cursor_on_empty_trace() -> None:
    cur = TraceCursor(StepTrace())
    assert cur.current is None
    assert cur.next() is None
    assert cur.last() is None
    assert cur.progress == 0.0
    assert cur.at_start and cur.at_end


def _peak_bytes(fn) -> int:
    tracemalloc.start()
    try:
        fn()
        return tracemalloc.get_traced_memory()[1]
    finally:
        tracemalloc.stop()


def test_steps_share_the_output_instead_of_copying_it() -> None:
    res = CodecHuffman().encode("abracadabra" * 100)
    assert all(s.encoded is res.encoded for s in res.steps)
    mid = res.steps[500]
    assert mid.current_encoded == res.encoded[: mid.end]
    assert res.steps[:10].encoded is res.encoded


def test_trace_size_is_linear_in_input() -> None:
    rng = random.Random(5)
    text = "".join(rng.choice("AAAABBBCCD xyz") for _ in range(50_000))

    # a prefix copy per step would need over a gigabyte here
    for codec in (CodecHuffman(), CodecLZW()):
        peak = _peak_bytes(lambda: codec.encode(text))
        assert peak < 128 * 1024 * 1024, (codec.codec_id, peak)

    lzw = CodecLZW().encode(text)
    assert lzw.steps[-1].current_encoded == lzw.encoded
    emits = [s for s in lzw.steps if s.kind == "emit"]
    assert lzw.encoded.startswith(emits[-1].current_encoded)
