"""Reader for the ``.properties`` file format.

Supports the standard syntax:

- ``key=value``, ``key: value`` and ``key value`` assignments
- ``#`` and ``!`` comment lines
- line continuation with a trailing backslash
- escape sequences (``\\t``, ``\\n``, ``\\r``, ``\\f``, ``\\uXXXX``)

Files are read as UTF-8.
"""

import logging
from pathlib import Path

from .errors import PropertiesFormatError

logger = logging.getLogger(__name__)

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"


def _ends_with_continuation(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> list[tuple[int, str]]:
    """Join continued natural lines, returning (first line number, logical line) pairs."""
    result: list[tuple[int, str]] = []
    current: list[str] = []
    start = 0

    for number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.lstrip(_WHITESPACE)
        if not current:
            if not line or line[0] in "#!":
                continue
            start = number
        if _ends_with_continuation(line):
            current.append(line[:-1])
            continue
        current.append(line)
        result.append((start, "".join(current)))
        current = []

    if current:
        # continuation on the last line of the file
        result.append((start, "".join(current)))
    return result


def _unescape(value: str, path: Path | None, line: int) -> str:
    out: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        i += 1
        if i >= len(value):
            break
        ch = value[i]
        if ch == "u":
            digits = value[i + 1 : i + 5]
            if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise PropertiesFormatError(f"Malformed \\uxxxx escape: \\u{digits}", path, line)
            out.append(chr(int(digits, 16)))
            i += 5
            continue
        out.append(_ESCAPES.get(ch, ch))
        i += 1
    return "".join(out)


def _split_key_value(line: str) -> tuple[str, str]:
    key_end = len(line)
    escaped = False
    for i, ch in enumerate(line):
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
            continue
        if ch in _SEPARATORS or ch in _WHITESPACE:
            key_end = i
            break

    rest = line[key_end:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return line[:key_end], rest


def parse_properties(text: str, path: Path | None = None) -> dict[str, str]:
    """Parse properties text into a dict. Later assignments of a key win.

    Raises:
        PropertiesFormatError: On a malformed unicode escape
    """
    properties: dict[str, str] = {}
    for number, line in _logical_lines(text):
        key, value = _split_key_value(line)
        properties[_unescape(key, path, number)] = _unescape(value, path, number)
    return properties


def load_properties(path: Path) -> dict[str, str]:
    """Load a properties file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        PropertiesFormatError: If the file is not valid UTF-8 or is malformed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise PropertiesFormatError(f"File is not valid UTF-8: {e}", path) from e

    properties = parse_properties(text, path)
    logger.debug(f"Loaded {len(properties)} properties from {path}")
    return properties
