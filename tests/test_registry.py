from __future__ import annotations

import pytest

from compress_lab.baseline import BaselineZlib, baseline_bits, get_baseline
from compress_lab.errors import UsageError
from compress_lab.registry import CODEC_IDS, CodecRegistry, codec_ids, get_codec


def test_codec_ids_display_order() -> None:
    assert codec_ids() == CODEC_IDS == ("rle", "huffman", "lzw")


@pytest.mark.parametrize("name", ["rle", "HUFFMAN", " lzw "])
def test_get_codec_by_name(name: str) -> None:
    c = get_codec(name)
    assert c.codec_id == name.strip().lower()


def test_get_codec_unknown() -> None:
    with pytest.raises(UsageError):
        get_codec("arith")
    with pytest.raises(UsageError):
        CodecRegistry.default().get("")


def test_registry_lzw_width() -> None:
    reg = CodecRegistry.default(lzw_code_bits=16)
    assert reg.get("lzw").code_bits == 16


def test_every_codec_has_a_description() -> None:
    for cid in CODEC_IDS:
        d = get_codec(cid).description()
        assert d.summary and d.strengths and d.weaknesses


def test_zlib_baseline_measures_bits() -> None:
    b = get_baseline("zlib")
    assert isinstance(b, BaselineZlib)
    text = "hello " * 50
    assert baseline_bits("zlib", text) == len(b.compress(text.encode("utf-8"))) * 8
    assert baseline_bits("zlib", text) < len(text) * 8
    with pytest.raises(UsageError):
        get_baseline("lz4")
