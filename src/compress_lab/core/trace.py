"""Step trace: what each codec did, one record per discrete step.

The trace is produced in the same pass as the encoded output but is never
needed to decode it. ``StepTrace`` is immutable and restartable: iterating it
twice yields the same records from the start.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Literal, overload

StepKind = Literal["run", "table", "lookup", "hit", "emit", "flush"]


@dataclass(frozen=True, slots=True)
class TraceStep:
    kind: StepKind
    description: str
    index: int = -1              # position in the input (-1: whole input / n.a.)
    length: int = 0              # symbols covered by this step
    symbol: str | None = None
    code: str | int | None = None
    w: str | None = None         # LZW working prefix after this step
    dict_add: tuple[str, int] | None = None
    output_chunk: str = ""
    end: int = 0                 # length of the encoded output after this step
    # full output, shared by every step of one trace (a reference, not a copy)
    encoded: str = field(default="", repr=False, compare=False)

    @property
    def current_encoded(self) -> str:
        return self.encoded[: self.end]

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"kind": self.kind, "description": self.description}
        if self.index >= 0:
            out["index"] = self.index
            out["length"] = self.length
        if self.symbol is not None:
            out["symbol"] = self.symbol
        if self.code is not None:
            out["code"] = self.code
        if self.w is not None:
            out["w"] = self.w
        if self.dict_add is not None:
            out["dict_add"] = {"entry": self.dict_add[0], "code": self.dict_add[1]}
        if self.output_chunk:
            out["output_chunk"] = self.output_chunk
        out["current_encoded"] = self.current_encoded
        return out


class StepTrace(Sequence[TraceStep]):
    """
    Finite, immutable sequence of trace records.

    Steps only record where the output ended (``end``); ``encoded`` is the
    final output, attached to every step so ``current_encoded`` is a slice
    taken on access. Memory stays linear in the number of steps.
    """

    __slots__ = ("_steps", "_encoded")

    def __init__(self, steps: Iterable[TraceStep] = (), encoded: str = ""):
        self._encoded = encoded
        self._steps: tuple[TraceStep, ...] = tuple(
            s if s.encoded is encoded else replace(s, encoded=encoded) for s in steps
        )

    @property
    def encoded(self) -> str:
        return self._encoded

    @overload
    def __getitem__(self, i: int) -> TraceStep: ...

    @overload
    def __getitem__(self, i: slice) -> StepTrace: ...

    def __getitem__(self, i):
        if isinstance(i, slice):
            return StepTrace(self._steps[i], self._encoded)
        return self._steps[i]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[TraceStep]:
        return iter(self._steps)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StepTrace):
            return self._steps == other._steps and self._encoded == other._encoded
        if isinstance(other, (list, tuple)):
            return list(self._steps) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._steps)

    def __repr__(self) -> str:
        return f"StepTrace({len(self._steps)} steps)"

    def to_list(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self._steps]


class TraceCursor:
    """
    Replay position over a StepTrace (first / prev / play-next / last).

    All moves are clamped to the trace bounds; an empty trace has no current
    step and a progress of 0.0.
    """

    def __init__(self, trace: StepTrace):
        self.trace = trace
        self.position = 0

    @property
    def current(self) -> TraceStep | None:
        if not self.trace:
            return None
        return self.trace[self.position]

    @property
    def at_start(self) -> bool:
        return self.position == 0

    @property
    def at_end(self) -> bool:
        return self.position >= max(len(self.trace) - 1, 0)

    @property
    def progress(self) -> float:
        if not self.trace:
            return 0.0
        return (self.position + 1) / len(self.trace)

    def seek(self, i: int) -> TraceStep | None:
        self.position = min(max(int(i), 0), max(len(self.trace) - 1, 0))
        return self.current

    def first(self) -> TraceStep | None:
        return self.seek(0)

    def last(self) -> TraceStep | None:
        return self.seek(len(self.trace) - 1)

    def next(self) -> TraceStep | None:
        return self.seek(self.position + 1)

    def prev(self) -> TraceStep | None:
        return self.seek(self.position - 1)
