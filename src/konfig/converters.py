"""Converters from raw property strings to typed values.

Each supported target type has a :class:`TypeTag` and a converter class. The
registry is a static table keyed by tag; plain Python types are mapped onto
tags by a second table, so ``converter_for(timedelta)`` and
``converter_for(TypeTag.DURATION)`` return the same kind of converter.

Example:
    >>> from datetime import timedelta
    >>> convert("PT5M", TypeTag.DURATION)
    datetime.timedelta(seconds=300)
    >>> converter_for(timedelta).parse("P1DT2H")
    datetime.timedelta(days=1, seconds=7200)
"""

import re
from abc import ABC, abstractmethod
from datetime import date, timedelta
from enum import Enum
from typing import Any, Generic, TypeVar
from urllib.parse import SplitResult, urlsplit

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import ConversionError, UnsupportedConversionError
from .models import Period

T = TypeVar("T")

INT_MIN, INT_MAX = -(2**31), 2**31 - 1
LONG_MIN, LONG_MAX = -(2**63), 2**63 - 1

TRUE_VALUES = frozenset({"true", "yes", "on", "1"})
FALSE_VALUES = frozenset({"false", "no", "off", "0"})

# ISO-8601 durations: [-]PnDTnHnMn.nS, every component may carry its own sign
DURATION_PATTERN = re.compile(
    r"([-+]?)P(?:([-+]?\d+)D)?"
    r"(T(?:([-+]?\d+)H)?(?:([-+]?\d+)M)?(?:([-+]?\d+)(?:[.,](\d{0,6}))?S)?)?",
    re.IGNORECASE,
)
# ISO-8601 periods: [-]PnYnMnWnD
PERIOD_PATTERN = re.compile(
    r"([-+]?)P(?:([-+]?\d+)Y)?(?:([-+]?\d+)M)?(?:([-+]?\d+)W)?(?:([-+]?\d+)D)?",
    re.IGNORECASE,
)
LOCAL_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
# Characters that must be percent-encoded in a URI
URI_ILLEGAL_CHARS = re.compile(r"[\s<>\"{}|\\^`]")


class TypeTag(str, Enum):
    """Semantic target types a raw property value can be converted to."""

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    BOOLEAN = "boolean"
    DURATION = "duration"
    PERIOD = "period"
    LOCAL_DATE = "local-date"
    URI = "uri"
    URL = "url"


class Converter(ABC, Generic[T]):
    """Parses a raw property string into a value of one target type.

    Converters are stateless. ``parse`` raises :class:`ConversionError` on
    malformed input and never falls back to a default.
    """

    tag: TypeTag

    @abstractmethod
    def parse(self, raw: str) -> T:
        """Parse ``raw`` into the target type."""
        pass

    def fail(self, raw: str, reason: str | None = None) -> ConversionError:
        return ConversionError(raw, self.tag.value, reason)


class NoConverter(Converter[str]):
    """Identity converter for plain strings."""

    tag = TypeTag.STRING

    def parse(self, raw: str) -> str:
        return raw


class _BoundedIntConverter(Converter[int]):
    minimum: int
    maximum: int

    def parse(self, raw: str) -> int:
        # int() would also accept surrounding whitespace and "1_000"
        if not re.fullmatch(r"[-+]?\d+", raw):
            raise self.fail(raw, "not a base-10 integer")
        value = int(raw)
        if not self.minimum <= value <= self.maximum:
            raise self.fail(raw, f"out of range [{self.minimum}, {self.maximum}]")
        return value


class IntegerConverter(_BoundedIntConverter):
    tag = TypeTag.INTEGER
    minimum = INT_MIN
    maximum = INT_MAX


class LongConverter(_BoundedIntConverter):
    tag = TypeTag.LONG
    minimum = LONG_MIN
    maximum = LONG_MAX


class BooleanConverter(Converter[bool]):
    tag = TypeTag.BOOLEAN

    def parse(self, raw: str) -> bool:
        value = raw.strip().lower()
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        raise self.fail(raw)


class DurationConverter(Converter[timedelta]):
    """Parses ISO-8601 durations such as ``PT5M``, ``P2DT3H`` or ``-PT1.5S``."""

    tag = TypeTag.DURATION

    def parse(self, raw: str) -> timedelta:
        match = DURATION_PATTERN.fullmatch(raw.strip())
        if not match:
            raise self.fail(raw)
        negate, days, time_part, hours, minutes, seconds, fraction = match.groups()
        if days is None and time_part is None:
            raise self.fail(raw, "no components")
        if time_part is not None and time_part.upper() == "T":
            raise self.fail(raw, "empty time section")

        micros = 0
        if fraction:
            micros = int(fraction.ljust(6, "0"))
            if seconds.startswith("-"):
                micros = -micros
        try:
            result = timedelta(
                days=int(days or 0),
                hours=int(hours or 0),
                minutes=int(minutes or 0),
                seconds=int(seconds or 0),
                microseconds=micros,
            )
        except OverflowError as e:
            raise self.fail(raw, str(e)) from e
        return -result if negate == "-" else result


class PeriodConverter(Converter[Period]):
    """Parses ISO-8601 periods such as ``P1Y2M3D`` or ``P2W``."""

    tag = TypeTag.PERIOD

    def parse(self, raw: str) -> Period:
        match = PERIOD_PATTERN.fullmatch(raw.strip())
        if not match:
            raise self.fail(raw)
        negate, years, months, weeks, days = match.groups()
        if years is None and months is None and weeks is None and days is None:
            raise self.fail(raw, "no components")

        sign = -1 if negate == "-" else 1
        return Period(
            years=sign * int(years or 0),
            months=sign * int(months or 0),
            days=sign * (int(weeks or 0) * 7 + int(days or 0)),
        )


class LocalDateConverter(Converter[date]):
    """Parses ISO local dates (``YYYY-MM-DD``)."""

    tag = TypeTag.LOCAL_DATE

    def parse(self, raw: str) -> date:
        text = raw.strip()
        # date.fromisoformat accepts more than the extended calendar form
        if not LOCAL_DATE_PATTERN.fullmatch(text):
            raise self.fail(raw, "expected YYYY-MM-DD")
        try:
            return date.fromisoformat(text)
        except ValueError as e:
            raise self.fail(raw, str(e)) from e


class UriConverter(Converter[SplitResult]):
    """Parses absolute or relative URI references."""

    tag = TypeTag.URI

    def parse(self, raw: str) -> SplitResult:
        if URI_ILLEGAL_CHARS.search(raw):
            raise self.fail(raw, "illegal character")
        try:
            result = urlsplit(raw)
            # port is only validated on access
            _ = result.port
        except ValueError as e:
            raise self.fail(raw, str(e)) from e
        return result


class UrlConverter(Converter[AnyUrl]):
    """Parses absolute URLs (a scheme is required)."""

    tag = TypeTag.URL

    _adapter = TypeAdapter(AnyUrl)

    def parse(self, raw: str) -> AnyUrl:
        try:
            return self._adapter.validate_python(raw.strip())
        except PydanticValidationError as e:
            reason = e.errors()[0]["msg"] if e.errors() else None
            raise self.fail(raw, reason) from e


_CONVERTERS: dict[TypeTag, type[Converter[Any]]] = {
    TypeTag.STRING: NoConverter,
    TypeTag.INTEGER: IntegerConverter,
    TypeTag.LONG: LongConverter,
    TypeTag.BOOLEAN: BooleanConverter,
    TypeTag.DURATION: DurationConverter,
    TypeTag.PERIOD: PeriodConverter,
    TypeTag.LOCAL_DATE: LocalDateConverter,
    TypeTag.URI: UriConverter,
    TypeTag.URL: UrlConverter,
}

# Python types that can be used in place of a tag
_PYTHON_TYPES: dict[Any, TypeTag] = {
    str: TypeTag.STRING,
    int: TypeTag.LONG,
    bool: TypeTag.BOOLEAN,
    timedelta: TypeTag.DURATION,
    Period: TypeTag.PERIOD,
    date: TypeTag.LOCAL_DATE,
    SplitResult: TypeTag.URI,
    AnyUrl: TypeTag.URL,
}


def tag_for(target: Any) -> TypeTag:
    """Map a target (a TypeTag or a supported Python type) to its TypeTag.

    Raises:
        UnsupportedConversionError: If the target has no registered converter
    """
    if isinstance(target, TypeTag):
        return target
    try:
        tag = _PYTHON_TYPES.get(target)
    except TypeError:
        # unhashable targets cannot be registered
        tag = None
    if tag is None:
        raise UnsupportedConversionError(target)
    return tag


def converter_for(target: Any) -> Converter[Any]:
    """Return a fresh converter for ``target``.

    Args:
        target: A :class:`TypeTag` or one of ``str``, ``int``, ``bool``,
            ``timedelta``, ``Period``, ``date``, ``SplitResult``, ``AnyUrl``

    Raises:
        UnsupportedConversionError: If the target has no registered converter
    """
    return _CONVERTERS[tag_for(target)]()


def convert(raw: str, target: Any) -> Any:
    """Convert a single raw string to ``target``."""
    return converter_for(target).parse(raw)


def supported_tags() -> list[TypeTag]:
    return list(_CONVERTERS)


def format_duration(value: timedelta) -> str:
    """Render a timedelta as an ISO-8601 duration that DurationConverter reads back.

    Days are folded into hours (``P1D`` renders as ``PT24H``).
    """
    if not value:
        return "PT0S"
    sign = "-" if value < timedelta(0) else ""
    total_micros = abs(value) // timedelta(microseconds=1)
    total_seconds, micros = divmod(total_micros, 1_000_000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = [f"{sign}PT"]
    if hours:
        parts.append(f"{hours}H")
    if minutes:
        parts.append(f"{minutes}M")
    if seconds or micros:
        if micros:
            fraction = f"{micros:06d}".rstrip("0")
            parts.append(f"{seconds}.{fraction}S")
        else:
            parts.append(f"{seconds}S")
    return "".join(parts)


def format_value(value: Any) -> str:
    """Render a converted value back to the string form its converter accepts."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, SplitResult):
        return value.geturl()
    return str(value)
