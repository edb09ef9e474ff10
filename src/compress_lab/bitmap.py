"""8x8 black/white image mode.

Not a codec of its own: the grid is flattened row-major into a 64-symbol
"0"/"1" string and handed to the RLE codec as-is.

The cells are digits, so the RLE stream of an image cannot be parsed back
("064" reads as a count, not as '0' x 64). The grid is rebuilt from the
flattened cells with ``unflatten``, never from the encoded form.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from compress_lab.core.codec_rle import CodecRLE
from compress_lab.core.trace import StepTrace
from compress_lab.errors import FormatError, UsageError

GRID_SIZE = 8
CELLS = GRID_SIZE * GRID_SIZE

# Cost model of the image view: 1 bit per cell before, 4 bits per encoded
# character after (enough for a 0/1 symbol or a count digit).
BITS_PER_CELL = 1
BITS_PER_ENCODED_CHAR = 4

Grid = list[list[int]]


@dataclass(frozen=True)
class ImageResult:
    cells: str
    encoded: str
    original_bits: int
    compressed_bits: int
    ratio: float
    steps: StepTrace

    def to_dict(self, *, with_steps: bool = False) -> dict:
        out = {
            "cells": self.cells,
            "encoded": self.encoded,
            "original_bits": self.original_bits,
            "compressed_bits": self.compressed_bits,
            "ratio": round(self.ratio, 3),
        }
        if with_steps:
            out["steps"] = self.steps.to_list()
        return out


def blank_grid() -> Grid:
    return [[0] * GRID_SIZE for _ in range(GRID_SIZE)]


def checker_grid() -> Grid:
    return [[(r + c) % 2 for c in range(GRID_SIZE)] for r in range(GRID_SIZE)]


def split_grid() -> Grid:
    """Top half off, bottom half on."""
    return [[0 if r < GRID_SIZE // 2 else 1] * GRID_SIZE for r in range(GRID_SIZE)]


def toggle(grid: Grid, row: int, col: int) -> Grid:
    """Copy of grid with one cell flipped."""
    if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
        raise UsageError(f"bitmap: cell ({row}, {col}) is outside the {GRID_SIZE}x{GRID_SIZE} grid")
    out = [list(r) for r in grid]
    out[row][col] = 1 - out[row][col]
    return out


def flatten(grid: Sequence[Sequence[int]]) -> str:
    if len(grid) != GRID_SIZE or any(len(r) != GRID_SIZE for r in grid):
        raise UsageError(f"bitmap: grid must be {GRID_SIZE}x{GRID_SIZE}")
    out: list[str] = []
    for r in grid:
        for v in r:
            if v not in (0, 1):
                raise UsageError(f"bitmap: cells must be 0 or 1, got {v!r}")
            out.append(str(int(v)))
    return "".join(out)


def unflatten(cells: str) -> Grid:
    if len(cells) != CELLS or any(ch not in "01" for ch in cells):
        raise FormatError(f"bitmap: expected {CELLS} cells of 0/1, got {len(cells)} symbols")
    return [[int(ch) for ch in cells[i : i + GRID_SIZE]] for i in range(0, CELLS, GRID_SIZE)]


def parse_rows(rows: Sequence[str]) -> Grid:
    """Grid from 8 strings like '00111100'."""
    if len(rows) != GRID_SIZE:
        raise UsageError(f"bitmap: need {GRID_SIZE} rows, got {len(rows)}")
    grid: Grid = []
    for i, r in enumerate(rows):
        s = r.strip()
        if len(s) != GRID_SIZE or any(ch not in "01" for ch in s):
            raise UsageError(f"bitmap: row {i} must be {GRID_SIZE} characters of 0/1, got {r!r}")
        grid.append([int(ch) for ch in s])
    return grid


def render_grid(grid: Grid, *, on: str = "#", off: str = ".") -> str:
    return "\n".join("".join(on if v else off for v in r) for r in grid) + "\n"


def compress_grid(grid: Sequence[Sequence[int]]) -> ImageResult:
    cells = flatten(grid)
    res = CodecRLE().encode(cells)
    original_bits = len(cells) * BITS_PER_CELL
    compressed_bits = len(res.encoded) * BITS_PER_ENCODED_CHAR
    return ImageResult(
        cells=cells,
        encoded=res.encoded,
        original_bits=original_bits,
        compressed_bits=compressed_bits,
        ratio=compressed_bits / original_bits * 100,
        steps=res.steps,
    )


PRESETS = {
    "blank": blank_grid,
    "checker": checker_grid,
    "split": split_grid,
}
