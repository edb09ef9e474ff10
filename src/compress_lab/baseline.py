"""
General-purpose byte compressors, used only as a yardstick in comparisons.

They work on the UTF-8 bytes of the input and report real compressed sizes,
unlike the teaching codecs whose sizes are modelled.
"""

from __future__ import annotations

import zlib
from dataclasses import dataclass

try:
    import zstandard as zstd  # type: ignore
except Exception:  # pragma: no cover
    zstd = None

from compress_lab.errors import UsageError

BASELINE_IDS: tuple[str, ...] = ("zlib", "zstd")


class BaselineZlib:
    """zlib/DEFLATE (stdlib)."""

    baseline_id: str = "zlib"

    def __init__(self, level: int = 9):
        if not (0 <= level <= 9):
            raise ValueError(f"zlib level must be 0..9, got {level}")
        self.level = level

    def compress(self, data: bytes) -> bytes:
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("data must be bytes")
        return zlib.compress(bytes(data), self.level)


@dataclass
class BaselineZstd:
    """
    Zstandard via the 'zstandard' package.

    Frames carry neither content size nor checksum, so the reported size is
    close to the payload itself.
    """

    level: int = 19
    baseline_id: str = "zstd"

    def _require(self) -> None:
        if zstd is None:
            raise RuntimeError(
                "Module 'zstandard' not available. Install with: python3 -m pip install zstandard"
            )

    def compress(self, data: bytes) -> bytes:
        self._require()
        c = zstd.ZstdCompressor(
            level=int(self.level),
            write_content_size=False,
            write_checksum=False,
        )
        return c.compress(data)


def get_baseline(name: str, *, zstd_level: int = 19):
    bid = (name or "").strip().lower()
    if bid == "zlib":
        return BaselineZlib()
    if bid == "zstd":
        return BaselineZstd(level=zstd_level)
    raise UsageError(f"unknown baseline: {name!r} (choose from {', '.join(BASELINE_IDS)})")


def baseline_bits(name: str, text: str, *, zstd_level: int = 19) -> int:
    """Compressed size of text's UTF-8 bytes, in bits."""
    comp = get_baseline(name, zstd_level=zstd_level).compress(text.encode("utf-8"))
    return len(comp) * 8
