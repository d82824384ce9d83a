"""Exception hierarchy for konfig.

Every failure raised by the resolver, the converters or the properties loader
derives from :class:`KonfigError`, and additionally from the builtin exception
that best describes it, so callers can catch either.
"""

from pathlib import Path
from typing import Any


class KonfigError(Exception):
    """Base class for all konfig errors."""

    pass


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or str(target)


class UnsupportedConversionError(KonfigError, TypeError):
    """Raised when no converter is registered for the requested target type."""

    def __init__(self, target: Any):
        self.target = target
        super().__init__(f"Conversion to {_type_name(target)} is not supported")


class ConversionError(KonfigError, ValueError):
    """Raised when a raw string cannot be parsed into the requested type."""

    def __init__(self, raw: str, target: Any, reason: str | None = None):
        self.raw = raw
        self.target = target
        self.reason = reason
        message = f"Cannot convert {raw!r} to {_type_name(target)}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MissingPropertyError(KonfigError, LookupError):
    """Raised when a required property is absent from every source."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"{key} was not found")


class PropertiesFormatError(KonfigError, ValueError):
    """Raised when a bundled properties file cannot be parsed."""

    def __init__(self, message: str, path: Path | None = None, line: int | None = None):
        self.path = path
        self.line = line
        location = ""
        if path is not None:
            location = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(f"{location}{message}")
