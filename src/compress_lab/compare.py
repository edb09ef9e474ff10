"""Side-by-side size comparison of the teaching codecs (plus optional baselines).

Every row is expressed in bits so that the columns are comparable:
  - original: 8 bits per symbol
  - rle: encoded characters x 8 bits
  - huffman: length of the bit string
  - lzw: emitted codes x display code width
  - zlib / zstd (optional): real compressed size of the UTF-8 bytes
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from compress_lab.baseline import baseline_bits
from compress_lab.core.codec_lzw import LZW_DISPLAY_CODE_BITS
from compress_lab.core.result import BITS_PER_SYMBOL, EncodeResult, compute_ratio
from compress_lab.registry import CODEC_IDS, CodecRegistry

LABELS: dict[str, str] = {
    "original": "Original",
    "rle": "RLE",
    "huffman": "Huffman",
    "lzw": "LZW",
    "zlib": "zlib (reference)",
    "zstd": "zstd (reference)",
}


@dataclass(frozen=True)
class ComparisonRow:
    key: str
    bits: int | None  # None: the codec could not encode this input
    ratio: float | None
    reference: bool = False
    error: str | None = None

    @property
    def available(self) -> bool:
        return self.bits is not None

    @property
    def label(self) -> str:
        return LABELS.get(self.key, self.key)


@dataclass(frozen=True)
class Comparison:
    text: str
    rows: tuple[ComparisonRow, ...] = ()
    results: dict[str, EncodeResult] = field(default_factory=dict)

    def row(self, key: str) -> ComparisonRow:
        for r in self.rows:
            if r.key == key:
                return r
        raise KeyError(key)

    def best(self) -> ComparisonRow | None:
        """Smallest teaching codec row (ties: display order)."""
        cands = [r for r in self.rows if r.key in CODEC_IDS and r.available]
        if not cands:
            return None
        return min(cands, key=lambda r: r.bits)

    def to_dict(self) -> dict[str, Any]:
        best = self.best()
        return {
            "original_symbols": len(self.text),
            "rows": [
                {
                    "key": r.key,
                    "label": r.label,
                    "bits": r.bits,
                    "ratio": round(r.ratio, 3) if r.ratio is not None else None,
                    "reference": r.reference,
                    "error": r.error,
                }
                for r in self.rows
            ],
            "best": best.key if best else None,
        }


def bits_of(result: EncodeResult) -> int:
    if result.is_bits:
        return result.encoded_length
    return result.encoded_length * BITS_PER_SYMBOL


def compare_all(
    text: str,
    baselines: Iterable[str] = (),
    *,
    lzw_code_bits: int = LZW_DISPLAY_CODE_BITS,
    zstd_level: int = 19,
) -> Comparison:
    if not text:
        return Comparison(text="")

    registry = CodecRegistry.default(lzw_code_bits=lzw_code_bits)
    original_bits = len(text) * BITS_PER_SYMBOL

    rows: list[ComparisonRow] = [ComparisonRow("original", original_bits, 100.0)]
    results: dict[str, EncodeResult] = {}
    for cid in CODEC_IDS:
        out = registry.get(cid).try_encode(text)
        if not out.ok:
            rows.append(ComparisonRow(cid, None, None, error=out.message))
            continue
        res = out.unwrap()
        results[cid] = res
        bits = bits_of(res)
        rows.append(ComparisonRow(cid, bits, compute_ratio(bits, original_bits)))

    for b in baselines:
        bid = b.strip().lower()
        bits = baseline_bits(bid, text, zstd_level=zstd_level)
        rows.append(ComparisonRow(bid, bits, compute_ratio(bits, original_bits), reference=True))

    return Comparison(text=text, rows=tuple(rows), results=results)


def render_table(cmp: Comparison) -> str:
    """Plain-text bar table for terminals."""
    if not cmp.rows:
        return "(empty input)\n"
    width = 32
    top = max(r.bits or 0 for r in cmp.rows) or 1
    label_w = max(len(r.label) for r in cmp.rows)
    lines: list[str] = []
    for r in cmp.rows:
        if not r.available:
            lines.append(f"{r.label:<{label_w}}  n/a ({r.error})")
            continue
        bar = "#" * max(1 if r.bits else 0, round(r.bits / top * width))
        lines.append(f"{r.label:<{label_w}}  {r.bits:>7} bits  {r.ratio:7.1f}%  {bar}")
    best = cmp.best()
    if best is not None:
        lines.append(f"best: {best.label}")
    return "\n".join(lines) + "\n"
