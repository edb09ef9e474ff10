from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List

from compress_lab.core.codec_base import Codec, CodecDescription
from compress_lab.core.result import BITS_PER_SYMBOL, EncodeResult, compute_ratio
from compress_lab.core.trace import StepTrace, TraceStep
from compress_lab.errors import FormatError, InvalidCodeError

SEED_SIZE = 256  # chr(0)..chr(255) map to their own ordinal
FIRST_FREE_CODE = SEED_SIZE

# Display-only estimate of one emitted code's width. Codes themselves are
# unbounded ints and the dictionary is never reset.
LZW_DISPLAY_CODE_BITS = 12

_CODE_RE = re.compile(r"[0-9]+")


def seed_encode_dict() -> Dict[str, int]:
    return {chr(i): i for i in range(SEED_SIZE)}


def seed_decode_dict() -> Dict[int, str]:
    return {i: chr(i) for i in range(SEED_SIZE)}


def lzw_encode_codes(text: str) -> tuple[List[int], List[TraceStep]]:
    """Return the emitted codes and one trace record per input symbol (+ final flush)."""
    dictionary = seed_encode_dict()
    next_code = FIRST_FREE_CODE
    w = ""
    codes: List[int] = []
    steps: List[TraceStep] = []
    end = 0  # length of ",".join(codes) so far

    for i, c in enumerate(text):
        if c not in dictionary:
            raise FormatError(
                f"lzw: symbol {c!r} at position {i} is outside the 0-255 seed range"
            )
        wc = w + c
        if wc in dictionary:
            w = wc
            steps.append(
                TraceStep(
                    kind="hit",
                    description=f"'{wc}' is already in the dictionary, keep reading",
                    index=i,
                    length=1,
                    symbol=c,
                    w=w,
                    end=end,
                )
            )
            continue

        out = dictionary[w]
        end += len(str(out)) + (1 if codes else 0)
        codes.append(out)
        dictionary[wc] = next_code
        steps.append(
            TraceStep(
                kind="emit",
                description=(
                    f"'{wc}' is new: output {out} for '{w}', "
                    f"add '{wc}' = {next_code}, continue from '{c}'"
                ),
                index=i,
                length=1,
                symbol=c,
                code=out,
                w=c,
                dict_add=(wc, next_code),
                output_chunk=str(out),
                end=end,
            )
        )
        next_code += 1
        w = c

    if w:
        out = dictionary[w]
        end += len(str(out)) + (1 if codes else 0)
        codes.append(out)
        steps.append(
            TraceStep(
                kind="flush",
                description=f"End of input: output {out} for '{w}'",
                index=len(text),
                length=0,
                code=out,
                w=w,
                output_chunk=str(out),
                end=end,
            )
        )

    return codes, steps


def parse_codes(data: str) -> List[int]:
    codes: List[int] = []
    for tok in data.split(","):
        t = tok.strip()
        if not _CODE_RE.fullmatch(t):
            raise FormatError(
                f"lzw: expected comma separated integers (e.g. 65,66,256), got {tok!r}"
            )
        codes.append(int(t))
    return codes


def lzw_decode_codes(codes: List[int]) -> str:
    """Rebuild the encoder's dictionary in lockstep while expanding the codes."""
    if not codes:
        return ""

    dictionary = seed_decode_dict()
    next_code = FIRST_FREE_CODE

    first = codes[0]
    if first not in dictionary:
        raise InvalidCodeError(f"lzw: first code must be a seed code (0-255), got {first}")
    w = dictionary[first]
    out: List[str] = [w]

    for k in codes[1:]:
        if k in dictionary:
            entry = dictionary[k]
        elif k == next_code:
            # the encoder used the entry it created on the previous step
            entry = w + w[0]
        else:
            raise InvalidCodeError(f"lzw: invalid dictionary code {k} (next free code is {next_code})")

        out.append(entry)
        dictionary[next_code] = w + entry[0]
        next_code += 1
        w = entry

    return "".join(out)


@dataclass
class CodecLZW(Codec):
    code_bits: int = LZW_DISPLAY_CODE_BITS
    codec_id: str = "lzw"

    def __post_init__(self) -> None:
        if int(self.code_bits) <= 0:
            raise ValueError(f"lzw: code_bits must be > 0, got {self.code_bits}")

    def encode(self, text: str) -> EncodeResult:
        if not text:
            return EncodeResult(
                codec_id=self.codec_id,
                encoded="",
                original_length=0,
                encoded_length=0,
                unit="bits",
                ratio=0.0,
            )

        codes, steps = lzw_encode_codes(text)
        original_bits = len(text) * BITS_PER_SYMBOL
        encoded_bits = len(codes) * int(self.code_bits)
        encoded = ",".join(map(str, codes))
        return EncodeResult(
            codec_id=self.codec_id,
            encoded=encoded,
            original_length=original_bits,
            encoded_length=encoded_bits,
            unit="bits",
            ratio=compute_ratio(encoded_bits, original_bits),
            steps=StepTrace(steps, encoded),
        )

    def _decode(self, data: str, auxiliary: object | None = None) -> str:
        if not data or not data.strip():
            return ""
        return lzw_decode_codes(parse_codes(data))

    @staticmethod
    def description() -> CodecDescription:
        return CodecDescription(
            summary=(
                "Builds a dictionary of sequences while encoding; the decoder rebuilds "
                "the same dictionary, so it never has to be sent."
            ),
            strengths=(
                "Learns repeated patterns as it goes, which suits long data with many "
                "repetitions. Used by GIF and TIFF."
            ),
            weaknesses=(
                "The dictionary is immature at the start, so short inputs gain little. "
                "Its patents (now expired) were historically controversial."
            ),
        )
