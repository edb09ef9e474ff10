from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from compress_lab.core.result import DecodeResult, EncodeOutcome, EncodeResult
from compress_lab.errors import CompressLabError


@dataclass(frozen=True)
class CodecDescription:
    summary: str
    strengths: str
    weaknesses: str


class Codec(ABC):
    """
    Minimal interface shared by the teaching codecs.

    Each codec keeps no state between calls: every encode/decode builds its
    own tables. ``decode`` and ``try_encode`` never raise CompressLabError;
    ``encode`` and ``_decode`` hold the real work and raise freely.
    """

    codec_id: str

    @abstractmethod
    def encode(self, text: str) -> EncodeResult:
        raise NotImplementedError

    def try_encode(self, text: str) -> EncodeOutcome:
        """Like encode, but a CompressLabError comes back as a value."""
        try:
            return EncodeOutcome.success(self.encode(text))
        except CompressLabError as e:
            return EncodeOutcome.failure(e)

    @abstractmethod
    def _decode(self, data: str, auxiliary: object | None = None) -> str:
        raise NotImplementedError

    def decode(self, data: str, auxiliary: object | None = None) -> DecodeResult:
        try:
            return DecodeResult.success(self._decode(data, auxiliary))
        except CompressLabError as e:
            return DecodeResult.failure(e)

    @staticmethod
    @abstractmethod
    def description() -> CodecDescription:
        raise NotImplementedError
