from __future__ import annotations

import re

from compress_lab.core.codec_base import Codec, CodecDescription
from compress_lab.core.result import EncodeResult, compute_ratio
from compress_lab.core.trace import StepTrace, TraceStep

# one non-digit symbol followed by its decimal run length
_RUN_RE = re.compile(r"([^0-9])([0-9]+)")


def iter_runs(text: str):
    """Yield (start, symbol, length) for each maximal run, left to right."""
    i = 0
    n = len(text)
    while i < n:
        sym = text[i]
        run = 1
        while i + run < n and text[i + run] == sym:
            run += 1
        yield i, sym, run
        i += run


def rle_encode(text: str) -> EncodeResult:
    if not text:
        return EncodeResult(
            codec_id="rle", encoded="", original_length=0, encoded_length=0, unit="chars", ratio=0.0
        )

    steps: list[TraceStep] = []
    parts: list[str] = []
    end = 0
    for start, sym, run in iter_runs(text):
        chunk = f"{sym}{run}"
        parts.append(chunk)
        end += len(chunk)
        steps.append(
            TraceStep(
                kind="run",
                description=f"'{sym}' repeats {run} time(s) from position {start} -> '{chunk}'",
                index=start,
                length=run,
                symbol=sym,
                output_chunk=chunk,
                end=end,
            )
        )

    encoded = "".join(parts)
    return EncodeResult(
        codec_id="rle",
        encoded=encoded,
        original_length=len(text),
        encoded_length=len(encoded),
        unit="chars",
        ratio=compute_ratio(len(encoded), len(text)),
        steps=StepTrace(steps, encoded),
    )


def rle_decode(text: str) -> str:
    """
    Expand every 'symbol+count' pair, leftmost first.

    Fragments that are not such a pair are skipped, and a digit symbol cannot
    be told apart from a count: "1" x 3 encodes to "13" and decodes to "".
    """
    out: list[str] = []
    for m in _RUN_RE.finditer(text):
        out.append(m.group(1) * int(m.group(2)))
    return "".join(out)


class CodecRLE(Codec):
    codec_id = "rle"

    def encode(self, text: str) -> EncodeResult:
        return rle_encode(text)

    def _decode(self, data: str, auxiliary: object | None = None) -> str:
        return rle_decode(data)

    @staticmethod
    def description() -> CodecDescription:
        return CodecDescription(
            summary="Replaces each run of identical symbols with the symbol and its repeat count.",
            strengths=(
                "Very effective when the same value repeats for long stretches, "
                "such as the background of a black-and-white image."
            ),
            weaknesses=(
                "Input without runs (ordinary prose) grows instead of shrinking: "
                "'A' becomes 'A1', twice the size."
            ),
        )
