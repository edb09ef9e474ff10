from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from compress_lab.core.codec_base import Codec
from compress_lab.core.codec_huffman import CodecHuffman
from compress_lab.core.codec_lzw import LZW_DISPLAY_CODE_BITS, CodecLZW
from compress_lab.core.codec_rle import CodecRLE
from compress_lab.errors import UsageError

# display order (menus, compare table)
CODEC_IDS: tuple[str, ...] = ("rle", "huffman", "lzw")


def codec_ids() -> tuple[str, ...]:
    return CODEC_IDS


def normalize_codec_id(name: str) -> str:
    cid = (name or "").strip().lower()
    if cid not in CODEC_IDS:
        raise UsageError(f"unknown codec: {name!r} (choose from {', '.join(CODEC_IDS)})")
    return cid


@dataclass
class CodecRegistry:
    codecs: Dict[str, Codec]

    @classmethod
    def default(cls, *, lzw_code_bits: int = LZW_DISPLAY_CODE_BITS) -> "CodecRegistry":
        codecs: Dict[str, Codec] = {
            "rle": CodecRLE(),
            "huffman": CodecHuffman(),
            "lzw": CodecLZW(code_bits=lzw_code_bits),
        }
        return cls(codecs=codecs)

    def get(self, name: str) -> Codec:
        return self.codecs[normalize_codec_id(name)]


def get_codec(name: str, *, lzw_code_bits: int = LZW_DISPLAY_CODE_BITS) -> Codec:
    """Fresh codec instance by name (rle, huffman, lzw)."""
    return CodecRegistry.default(lzw_code_bits=lzw_code_bits).get(name)
