from __future__ import annotations

from dataclasses import dataclass, field

from compress_lab.core.codec_lzw import LZW_DISPLAY_CODE_BITS
from compress_lab.core.result import DecodeResult, EncodeOutcome, EncodeResult
from compress_lab.core.trace import TraceCursor
from compress_lab.errors import MissingAuxiliaryData
from compress_lab.registry import CodecRegistry, normalize_codec_id


@dataclass
class LabSession:
    """
    What the presentation layer keeps between clicks.

    The codecs are stateless; the one thing that has to survive from an
    encode to a later decode is the Huffman code table, and it lives here
    (inside ``last_result``).
    """

    codec_id: str = "rle"
    text: str = ""
    lzw_code_bits: int = LZW_DISPLAY_CODE_BITS
    last_result: EncodeResult | None = None
    decode_input: str = ""
    last_decoded: DecodeResult | None = None
    _registry: CodecRegistry = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.codec_id = normalize_codec_id(self.codec_id)
        self._registry = CodecRegistry.default(lzw_code_bits=self.lzw_code_bits)

    def reset(self) -> None:
        self.last_result = None
        self.decode_input = ""
        self.last_decoded = None

    def select(self, codec_id: str | None = None, text: str | None = None) -> None:
        """Change codec and/or input; any retained result is dropped."""
        if codec_id is not None:
            self.codec_id = normalize_codec_id(codec_id)
        if text is not None:
            self.text = text
        self.reset()

    def compress(self, codec_id: str | None = None, text: str | None = None) -> EncodeOutcome | None:
        """
        Encode the current text. None when there is no text; an encode error
        (LZW symbol outside 0-255) comes back inside the outcome.
        """
        if codec_id is not None or text is not None:
            self.select(codec_id, text)
        if not self.text:
            return None

        out = self._registry.get(self.codec_id).try_encode(self.text)
        if not out.ok:
            self.reset()
            return out
        res = out.unwrap()
        self.last_result = res
        self.decode_input = res.encoded
        self.last_decoded = None
        return out

    def decompress(self, data: str | None = None) -> DecodeResult:
        payload = self.decode_input if data is None else data
        codec = self._registry.get(self.codec_id)

        if self.codec_id == "huffman":
            table = self.last_result.serialized_table() if self.last_result else None
            if table is None:
                out = DecodeResult.failure(
                    MissingAuxiliaryData(
                        "huffman: decoding needs the code table; compress first"
                    )
                )
            else:
                out = codec.decode(payload, table)
        else:
            out = codec.decode(payload)

        self.last_decoded = out
        return out

    def roundtrip_ok(self) -> bool:
        return (
            self.last_decoded is not None
            and self.last_decoded.ok
            and self.last_decoded.text == self.text
        )

    def cursor(self) -> TraceCursor | None:
        if self.last_result is None:
            return None
        return TraceCursor(self.last_result.steps)
