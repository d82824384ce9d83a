"""
Tests for konfig.converters.

Covers:
- Dispatch from TypeTag and Python types to converters
- Parsing of every supported type, including malformed input
- Formatting converted values back to parseable strings
"""

from datetime import date, timedelta
from urllib.parse import SplitResult

import pytest
from pydantic import AnyUrl

from konfig.converters import (
    BooleanConverter,
    DurationConverter,
    IntegerConverter,
    LongConverter,
    NoConverter,
    TypeTag,
    convert,
    converter_for,
    format_duration,
    format_value,
    supported_tags,
)
from konfig.errors import ConversionError, UnsupportedConversionError
from konfig.models import Period


class TestDispatch:
    """Test mapping targets to converters."""

    def test_every_tag_has_a_converter(self):
        """Test that all tags are registered."""
        assert set(supported_tags()) == set(TypeTag)
        for tag in TypeTag:
            assert converter_for(tag).tag is tag

    @pytest.mark.parametrize(
        "python_type,expected",
        [
            (str, NoConverter),
            (int, LongConverter),
            (bool, BooleanConverter),
            (timedelta, DurationConverter),
        ],
    )
    def test_python_types(self, python_type, expected):
        """Test that plain Python types map onto converters."""
        assert isinstance(converter_for(python_type), expected)

    def test_integer_tag(self):
        assert isinstance(converter_for(TypeTag.INTEGER), IntegerConverter)

    def test_fresh_instance_per_request(self):
        """Test that converters are not shared between requests."""
        assert converter_for(TypeTag.DURATION) is not converter_for(TypeTag.DURATION)

    def test_unsupported_type(self):
        """Test that unknown targets are rejected with the type name."""
        with pytest.raises(UnsupportedConversionError, match="float"):
            converter_for(float)

    def test_unsupported_error_is_type_error(self):
        with pytest.raises(TypeError):
            converter_for(list[int])

    def test_unhashable_target(self):
        with pytest.raises(UnsupportedConversionError):
            converter_for({})


class TestStringAndNumbers:
    """Test the string, integer and long converters."""

    def test_string_is_passthrough(self):
        assert convert("  raw value ", TypeTag.STRING) == "  raw value "
        assert convert("", str) == ""

    @pytest.mark.parametrize("raw,expected", [("42", 42), ("-7", -7), ("+3", 3)])
    def test_integer(self, raw, expected):
        assert convert(raw, TypeTag.INTEGER) == expected

    def test_integer_range(self):
        """Test that INTEGER is 32-bit while LONG is 64-bit."""
        assert convert("2147483647", TypeTag.INTEGER) == 2147483647
        with pytest.raises(ConversionError, match="out of range"):
            convert("2147483648", TypeTag.INTEGER)
        assert convert("2147483648", TypeTag.LONG) == 2147483648
        with pytest.raises(ConversionError):
            convert("9223372036854775808", TypeTag.LONG)

    @pytest.mark.parametrize("raw", ["", "abc", "1.5", "1_000", "0x10", " 12 ", "12\n"])
    def test_malformed_integer(self, raw):
        with pytest.raises(ConversionError):
            convert(raw, TypeTag.INTEGER)

    def test_conversion_error_details(self):
        """Test that the error carries the raw string and target."""
        with pytest.raises(ConversionError) as exc_info:
            convert("abc", TypeTag.INTEGER)
        assert exc_info.value.raw == "abc"
        assert exc_info.value.target == "integer"
        assert isinstance(exc_info.value, ValueError)


class TestBoolean:
    @pytest.mark.parametrize("raw", ["true", "TRUE", "True", "yes", "on", "1", " true "])
    def test_true_values(self, raw):
        assert convert(raw, bool) is True

    @pytest.mark.parametrize("raw", ["false", "FALSE", "no", "off", "0"])
    def test_false_values(self, raw):
        assert convert(raw, bool) is False

    @pytest.mark.parametrize("raw", ["", "maybe", "truthy", "2"])
    def test_malformed(self, raw):
        with pytest.raises(ConversionError):
            convert(raw, TypeTag.BOOLEAN)


class TestDuration:
    """Test ISO-8601 duration parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("PT5M", timedelta(minutes=5)),
            ("PT30S", timedelta(seconds=30)),
            ("PT1.5S", timedelta(seconds=1, milliseconds=500)),
            ("PT0,25S", timedelta(milliseconds=250)),
            ("P2D", timedelta(days=2)),
            ("P2DT3H4M", timedelta(days=2, hours=3, minutes=4)),
            ("pt10s", timedelta(seconds=10)),
            ("-PT5M", timedelta(minutes=-5)),
            ("PT-5M", timedelta(minutes=-5)),
            ("PT1H-30M", timedelta(minutes=30)),
            ("PT-1.5S", timedelta(seconds=-1, milliseconds=-500)),
            ("PT0S", timedelta(0)),
        ],
    )
    def test_parse(self, raw, expected):
        assert convert(raw, TypeTag.DURATION) == expected

    @pytest.mark.parametrize("raw", ["", "P", "PT", "5M", "PT5X", "P1Y", "P1DT", "PT1.1234567S"])
    def test_malformed(self, raw):
        with pytest.raises(ConversionError):
            convert(raw, timedelta)

    @pytest.mark.parametrize(
        "value,expected",
        [
            (timedelta(0), "PT0S"),
            (timedelta(minutes=5), "PT5M"),
            (timedelta(days=1), "PT24H"),
            (timedelta(hours=1, seconds=1, microseconds=500000), "PT1H1.5S"),
            (timedelta(minutes=-5), "-PT5M"),
        ],
    )
    def test_format(self, value, expected):
        assert format_duration(value) == expected


class TestPeriod:
    """Test ISO-8601 period parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("P1Y2M3D", Period(years=1, months=2, days=3)),
            ("P6M", Period(months=6)),
            ("P2W", Period(days=14)),
            ("P1W2D", Period(days=9)),
            ("-P1Y2M", Period(years=-1, months=-2)),
            ("P-1D", Period(days=-1)),
            ("P0D", Period()),
        ],
    )
    def test_parse(self, raw, expected):
        assert convert(raw, Period) == expected

    @pytest.mark.parametrize("raw", ["", "P", "1Y", "P1H", "PT1M", "P1.5Y"])
    def test_malformed(self, raw):
        with pytest.raises(ConversionError):
            convert(raw, TypeTag.PERIOD)

    def test_str(self):
        assert str(Period(years=1, months=2, days=3)) == "P1Y2M3D"
        assert str(Period(days=14)) == "P14D"
        assert str(Period()) == "P0D"
        assert Period().is_zero


class TestLocalDate:
    def test_parse(self):
        assert convert("2024-02-29", date) == date(2024, 2, 29)

    @pytest.mark.parametrize("raw", ["2023-02-29", "20240101", "2024-1-01", "01.01.2024", ""])
    def test_malformed(self, raw):
        with pytest.raises(ConversionError):
            convert(raw, TypeTag.LOCAL_DATE)


class TestUriAndUrl:
    def test_absolute_uri(self):
        uri = convert("https://example.com:8443/a/b?c=d#e", TypeTag.URI)
        assert isinstance(uri, SplitResult)
        assert uri.scheme == "https"
        assert uri.hostname == "example.com"
        assert uri.port == 8443
        assert uri.path == "/a/b"
        assert uri.query == "c=d"
        assert uri.fragment == "e"

    def test_relative_uri(self):
        uri = convert("docs/index.html", SplitResult)
        assert uri.scheme == ""
        assert uri.path == "docs/index.html"

    @pytest.mark.parametrize(
        "raw", ["http://exa mple.com", "http://host:99999/", "http://host:abc/", "a<b>"]
    )
    def test_malformed_uri(self, raw):
        with pytest.raises(ConversionError):
            convert(raw, TypeTag.URI)

    def test_url(self):
        url = convert("https://example.com/path?q=1", TypeTag.URL)
        assert isinstance(url, AnyUrl)
        assert url.scheme == "https"
        assert url.host == "example.com"
        assert url.path == "/path"

    @pytest.mark.parametrize("raw", ["", "not a url", "example.com/path"])
    def test_malformed_url(self, raw):
        with pytest.raises(ConversionError):
            convert(raw, AnyUrl)


class TestFormatValue:
    """Test that formatted values parse back to the same value."""

    @pytest.mark.parametrize(
        "tag,raw",
        [
            (TypeTag.STRING, "hello"),
            (TypeTag.INTEGER, "-12"),
            (TypeTag.LONG, "9000000000"),
            (TypeTag.BOOLEAN, "YES"),
            (TypeTag.DURATION, "PT5M"),
            (TypeTag.DURATION, "P1DT2H0.5S"),
            (TypeTag.PERIOD, "P1Y2W"),
            (TypeTag.LOCAL_DATE, "2020-01-31"),
            (TypeTag.URI, "mailto:someone@example.com"),
            (TypeTag.URL, "https://example.com/x"),
        ],
    )
    def test_round_trip(self, tag, raw):
        value = convert(raw, tag)
        assert convert(format_value(value), tag) == value

    def test_booleans_format_lowercase(self):
        assert format_value(True) == "true"
        assert format_value(False) == "false"
