"""Typed errors for naivecomp.

Exit codes are defined here and nowhere else.

Policy:
- Codecs only classify failures; they never print or retry.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_CORRUPT_STREAM = 11
EXIT_TRUNCATED_STREAM = 12
EXIT_IO = 13


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (invalid args, invalid codec spec, etc.)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (unexpected error)"),
    ExitCodeInfo(
        EXIT_CORRUPT_STREAM,
        "CORRUPT_STREAM",
        "Compressed input does not match the selected format (bad magic/header, unknown LZW code)",
    ),
    ExitCodeInfo(
        EXIT_TRUNCATED_STREAM, "TRUNCATED_STREAM", "Compressed input ends before all symbols are decoded"
    ),
    ExitCodeInfo(EXIT_IO, "IO", "Input file missing or unreadable, output not writable"),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE, do not edit manually.\n")
    lines.append("> Source of truth: `src/naivecomp/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Most internal errors extend `NaiveCompError` and carry an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append("- LZW streams carry no header: decompress with the same `--max-code-width`/`--reset-policy`.\n")
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class NaiveCompError(Exception):
    """Base error for naivecomp."""

    exit_code: int = EXIT_GENERIC


class UsageError(NaiveCompError):
    exit_code = EXIT_USAGE


class InputFileError(NaiveCompError):
    exit_code = EXIT_IO


class UnexpectedEof(NaiveCompError):
    """Bit reader exhausted in the middle of a read."""


class CorruptPayload(NaiveCompError):
    exit_code = EXIT_CORRUPT_STREAM


class BadMagic(CorruptPayload):
    pass


class BadHeader(CorruptPayload):
    pass


class CorruptStream(CorruptPayload):
    """LZW code not resolvable by any dictionary rule."""


class TruncatedStream(CorruptPayload):
    """Huffman stream ends before the stored symbol count is reached."""

    exit_code = EXIT_TRUNCATED_STREAM
