"""Typed errors for compress-lab.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- Codecs raise these internally; their public ``decode`` turns them into a
  ``DecodeResult`` value so a UI can render the message as-is.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_MISSING_AUXILIARY = 12
EXIT_AUXILIARY_PARSE = 13
EXIT_FORMAT = 14
EXIT_INVALID_CODE = 15


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (invalid args, unknown codec, invalid run spec)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (unexpected error)"),
    ExitCodeInfo(EXIT_MISSING_AUXILIARY, "MISSING_AUXILIARY", "Huffman decode without a code table"),
    ExitCodeInfo(EXIT_AUXILIARY_PARSE, "AUXILIARY_PARSE", "Huffman code table could not be parsed"),
    ExitCodeInfo(EXIT_FORMAT, "FORMAT", "Malformed input (LZW code list, bitmap shape, symbol out of range)"),
    ExitCodeInfo(EXIT_INVALID_CODE, "INVALID_CODE", "LZW code neither known nor the next assignable code"),
)

# For convenience (fast lookup)
_EXIT_CODE_BY_NAME: dict[str, int] = {e.name: e.code for e in EXIT_CODES}
_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def exit_code_by_name(name: str) -> int | None:
    return _EXIT_CODE_BY_NAME.get(name.strip().upper())


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE - do not edit manually.\n")
    lines.append("> Source of truth: `src/compress_lab/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Every internal error extends `CompressLabError` and carries an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append(
        "- Codec `decode` never raises: it returns a `DecodeResult` whose `message` is the error text.\n"
    )
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class CompressLabError(Exception):
    """Base error for compress-lab."""

    exit_code: int = EXIT_GENERIC


class UsageError(CompressLabError):
    exit_code = EXIT_USAGE


class MissingAuxiliaryData(CompressLabError):
    """Huffman decode was called without the code table from encode."""

    exit_code = EXIT_MISSING_AUXILIARY


class AuxiliaryParseError(CompressLabError):
    """The supplied Huffman code table failed to deserialize."""

    exit_code = EXIT_AUXILIARY_PARSE


class FormatError(CompressLabError):
    exit_code = EXIT_FORMAT


class InvalidCodeError(CompressLabError):
    exit_code = EXIT_INVALID_CODE
