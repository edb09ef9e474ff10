from __future__ import annotations

import pytest

from compress_lab.core.codec_rle import CodecRLE, iter_runs, rle_decode, rle_encode


def test_rle_encode_runs_and_sizes() -> None:
    res = rle_encode("AAAAABBBCCCCC")
    assert res.encoded == "A5B3C5"
    assert res.original_length == 13
    assert res.encoded_length == 6
    assert res.unit == "chars"
    assert res.ratio == pytest.approx(6 / 13 * 100)


def test_rle_empty_input() -> None:
    res = rle_encode("")
    assert res.encoded == ""
    assert res.ratio == 0
    assert res.steps == []
    assert len(res.steps) == 0


def test_rle_single_symbol_doubles() -> None:
    # "A" -> "A1": 2 chars for 1
    assert rle_encode("A").ratio == 200.0


def test_rle_multi_digit_counts() -> None:
    text = "x" * 12 + "y"
    res = rle_encode(text)
    assert res.encoded == "x12y1"
    assert rle_decode(res.encoded) == text


def test_rle_trace_one_record_per_run() -> None:
    res = rle_encode("AAB")
    assert [s.kind for s in res.steps] == ["run", "run"]

    first, second = res.steps
    assert (first.index, first.length, first.symbol) == (0, 2, "A")
    assert first.output_chunk == "A2"
    assert first.current_encoded == "A2"

    assert (second.index, second.length, second.symbol) == (2, 1, "B")
    assert second.output_chunk == "B1"
    assert second.current_encoded == "A2B1"
    assert "B" in second.description


def test_iter_runs() -> None:
    assert list(iter_runs("aabccc")) == [(0, "a", 2), (2, "b", 1), (3, "c", 3)]
    assert list(iter_runs("")) == []


@pytest.mark.parametrize(
    "text",
    [
        "A",
        "AAAAABBBCCCCC",
        "abcdef",
        "   leading and trailing   ",
        "ééééé ñ ß",
        "日本日本語語語",
        "\n\n\t\t",
    ],
)
def test_rle_roundtrip_without_digits(text: str) -> None:
    assert rle_decode(rle_encode(text).encoded) == text


def test_rle_decode_skips_non_matching_fragments() -> None:
    # designator followed by another symbol: "A" is skipped, "B3" decodes
    assert rle_decode("AB3") == "BBB"
    # trailing garbage is ignored
    assert rle_decode("A5garbage") == "AAAAA"
    assert rle_decode("xyz A2") == "AA"
    assert rle_decode("123") == ""


def test_rle_digit_symbols_are_ambiguous() -> None:
    # documented limitation: a digit symbol reads as part of a count
    enc = rle_encode("111").encoded
    assert enc == "13"
    assert rle_decode(enc) == ""


def test_codec_decode_returns_value() -> None:
    c = CodecRLE()
    out = c.decode("A5B3C5")
    assert out.ok
    assert out.text == "AAAAABBBCCCCC"
    assert out.message == "AAAAABBBCCCCC"


def test_rle_description_is_static() -> None:
    d1 = CodecRLE.description()
    d2 = CodecRLE().description()
    assert d1 == d2
    assert d1.summary and d1.strengths and d1.weaknesses
