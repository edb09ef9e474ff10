from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal

from compress_lab.core.trace import StepTrace
from compress_lab.errors import CompressLabError

SizeUnit = Literal["chars", "bits"]

# Baseline cost of one input symbol for the bit-based codecs.
BITS_PER_SYMBOL = 8


def compute_ratio(encoded_length: int, original_length: int) -> float:
    """encoded/original in percent; 0 when there is nothing to compress."""
    if original_length <= 0:
        return 0.0
    return encoded_length / original_length * 100


@dataclass(frozen=True)
class EncodeResult:
    codec_id: str
    encoded: str
    original_length: int
    encoded_length: int
    unit: SizeUnit
    ratio: float
    steps: StepTrace = field(default_factory=StepTrace)
    # huffman only:
    code_table: dict[str, str] | None = None
    freq_table: tuple[tuple[str, int], ...] | None = None

    @property
    def is_bits(self) -> bool:
        return self.unit == "bits"

    def serialized_table(self) -> str | None:
        """Code table as JSON text, the form Huffman decode accepts back."""
        if self.code_table is None:
            return None
        return json.dumps(self.code_table, ensure_ascii=False, separators=(",", ":"))

    def to_dict(self, *, with_steps: bool = False) -> dict[str, Any]:
        out: dict[str, Any] = {
            "codec": self.codec_id,
            "encoded": self.encoded,
            "original_length": self.original_length,
            "encoded_length": self.encoded_length,
            "unit": self.unit,
            "ratio": round(self.ratio, 3),
        }
        if self.code_table is not None:
            out["code_table"] = dict(self.code_table)
        if self.freq_table is not None:
            out["freq_table"] = [[sym, n] for sym, n in self.freq_table]
        if with_steps:
            out["steps"] = self.steps.to_list()
        return out


@dataclass(frozen=True)
class DecodeResult:
    """
    Tagged decode outcome.

    Exactly one of ``text`` / ``error`` is set. ``message`` is what a UI shows:
    the decoded text on success, the error text otherwise.
    """

    text: str | None = None
    error: CompressLabError | None = None

    @classmethod
    def success(cls, text: str) -> DecodeResult:
        return cls(text=text)

    @classmethod
    def failure(cls, error: CompressLabError) -> DecodeResult:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if self.error is not None:
            return str(self.error)
        return self.text or ""

    def unwrap(self) -> str:
        if self.error is not None:
            raise self.error
        return self.text or ""


@dataclass(frozen=True)
class EncodeOutcome:
    """Tagged encode outcome, the encode-side twin of DecodeResult."""

    result: EncodeResult | None = None
    error: CompressLabError | None = None

    @classmethod
    def success(cls, result: EncodeResult) -> EncodeOutcome:
        return cls(result=result)

    @classmethod
    def failure(cls, error: CompressLabError) -> EncodeOutcome:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if self.error is not None:
            return str(self.error)
        return self.result.encoded if self.result is not None else ""

    def unwrap(self) -> EncodeResult:
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result
