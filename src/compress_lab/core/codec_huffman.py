from __future__ import annotations

import heapq
import itertools
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from compress_lab.core.codec_base import Codec, CodecDescription
from compress_lab.core.result import BITS_PER_SYMBOL, EncodeResult, compute_ratio
from compress_lab.core.trace import StepTrace, TraceStep
from compress_lab.errors import AuxiliaryParseError, MissingAuxiliaryData

# -------------------
# Huffman building blocks
# -------------------
@dataclass
class HuffmanNode:
    freq: int
    symbol: Optional[str] = None  # set on leaves, None on internal nodes
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

def build_freq_table(text: str) -> Dict[str, int]:
    """Symbol counts, keys in order of first appearance."""
    freq: Dict[str, int] = {}
    for ch in text:
        freq[ch] = freq.get(ch, 0) + 1
    return freq

def build_huffman_tree(freq: Mapping[str, int]) -> Optional[HuffmanNode]:
    """
    Merge the two lightest nodes until one is left.

    Ties are broken by insertion order: leaves in first-appearance order,
    then each parent as it is created. The first node popped becomes the
    left child.
    """
    heap: List[tuple[int, int, HuffmanNode]] = []
    counter = itertools.count()

    for sym, f in freq.items():
        if f > 0:
            node = HuffmanNode(freq=f, symbol=sym)
            heapq.heappush(heap, (f, next(counter), node))

    if not heap:
        return None

    while len(heap) > 1:
        f1, _, n1 = heapq.heappop(heap)
        f2, _, n2 = heapq.heappop(heap)
        parent = HuffmanNode(freq=f1 + f2, symbol=None, left=n1, right=n2)
        heapq.heappush(heap, (parent.freq, next(counter), parent))

    return heap[0][2]

def build_code_table(root: HuffmanNode) -> Dict[str, str]:
    codes: Dict[str, str] = {}

    def dfs(node: HuffmanNode, path: str):
        if node.is_leaf:
            # a lone root leaf would get "", which can never be matched on decode
            codes[node.symbol] = path or "0"
            return
        if node.left is not None:
            dfs(node.left, path + "0")
        if node.right is not None:
            dfs(node.right, path + "1")

    dfs(root, "")
    return codes

def parse_code_table(table: object) -> Dict[str, str]:
    """
    Accept the JSON text from EncodeResult.serialized_table() or a mapping.
    Raises MissingAuxiliaryData when there is nothing to use.
    """
    if table is None or table == "":
        raise MissingAuxiliaryData("huffman: a code table (dictionary) is required to decode")

    if isinstance(table, (str, bytes, bytearray)):
        try:
            obj = json.loads(table)
        except (ValueError, RecursionError) as e:
            # RecursionError: pathologically nested JSON
            raise AuxiliaryParseError(f"huffman: could not parse the code table: {e}") from e
    else:
        obj = table

    if not isinstance(obj, Mapping):
        raise AuxiliaryParseError("huffman: the code table must be a JSON object {symbol: code}")
    if not obj:
        raise MissingAuxiliaryData("huffman: a code table (dictionary) is required to decode")

    codes: Dict[str, str] = {}
    for sym, code in obj.items():
        if not isinstance(sym, str) or not isinstance(code, str) or not code:
            raise AuxiliaryParseError(f"huffman: bad code table entry {sym!r}: {code!r}")
        codes[sym] = code
    return codes

def decode_bits(bits: str, codes: Mapping[str, str]) -> str:
    """
    Walk the bit string, emitting a symbol whenever the pending bits equal a code.
    Trailing bits that never complete a code are dropped.
    """
    reverse = {code: sym for sym, code in codes.items()}
    out: List[str] = []
    current = ""
    for bit in bits:
        current += bit
        sym = reverse.get(current)
        if sym is not None:
            out.append(sym)
            current = ""
    return "".join(out)

def huffman_encode(text: str) -> EncodeResult:
    if not text:
        return EncodeResult(
            codec_id="huffman",
            encoded="",
            original_length=0,
            encoded_length=0,
            unit="bits",
            ratio=0.0,
            code_table={},
            freq_table=(),
        )

    freq = build_freq_table(text)
    root = build_huffman_tree(freq)
    codes = build_code_table(root)

    # sorted() is stable: equal counts keep first-appearance order
    freq_sorted: Tuple[Tuple[str, int], ...] = tuple(
        sorted(freq.items(), key=lambda kv: kv[1], reverse=True)
    )

    table_desc = ", ".join(f"{sym}={codes[sym]}" for sym, _ in freq_sorted)
    steps: List[TraceStep] = [
        TraceStep(kind="table", description=f"Code table built from frequencies: {table_desc}")
    ]

    parts: List[str] = []
    end = 0
    for i, ch in enumerate(text):
        code = codes[ch]
        parts.append(code)
        end += len(code)
        steps.append(
            TraceStep(
                kind="lookup",
                description=f"'{ch}' -> {code}",
                index=i,
                length=1,
                symbol=ch,
                code=code,
                output_chunk=code,
                end=end,
            )
        )

    encoded = "".join(parts)
    original_bits = len(text) * BITS_PER_SYMBOL
    return EncodeResult(
        codec_id="huffman",
        encoded=encoded,
        original_length=original_bits,
        encoded_length=len(encoded),
        unit="bits",
        ratio=compute_ratio(len(encoded), original_bits),
        steps=StepTrace(steps, encoded),
        code_table=codes,
        freq_table=freq_sorted,
    )

def huffman_decode(bits: str, table: object | None) -> str:
    if not bits:
        raise MissingAuxiliaryData("huffman: a bit string and its code table are required to decode")
    codes = parse_code_table(table)
    return decode_bits(bits, codes)

class CodecHuffman(Codec):
    codec_id = "huffman"

    def encode(self, text: str) -> EncodeResult:
        return huffman_encode(text)

    def _decode(self, data: str, auxiliary: object | None = None) -> str:
        return huffman_decode(data, auxiliary)

    @staticmethod
    def description() -> CodecDescription:
        return CodecDescription(
            summary=(
                "Variable-length code: frequent symbols get short bit strings, "
                "rare symbols get long ones."
            ),
            strengths=(
                "Exploits skewed symbol frequencies efficiently; it is a building "
                "block of ZIP, JPEG and many other formats."
            ),
            weaknesses=(
                "The decoder needs the code table (or the tree), so it has to be "
                "stored or sent alongside the data."
            ),
        )
