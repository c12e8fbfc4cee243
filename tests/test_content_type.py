"""Tests for Content-Type resolution and charset parsing."""
import pytest

from httpform.core.content_type import ContentType, parse_charset
from httpform.core.exceptions import EncodeError


@pytest.mark.parametrize(
    "value, expected",
    [
        ("multipart/form-data", ContentType.MULTIPART),
        ("multipart/form-data; boundary=ignored; charset=utf-8", ContentType.MULTIPART),
        ("  application/x-www-form-urlencoded ", ContentType.URLENCODED),
        ("application/x-www-form-urlencoded;charset=UTF-8", ContentType.URLENCODED),
        ("application/json", None),
        ("Multipart/Form-Data", None),
        ("multipart/form-data-extended", None),
        ("", None),
        (None, None),
    ],
)
def test_content_type_of(value, expected):
    assert ContentType.of(value) is expected


def test_header_is_mime_string():
    assert ContentType.MULTIPART.header == "multipart/form-data"
    assert ContentType.URLENCODED.header == "application/x-www-form-urlencoded"


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "utf-8"),
        ("multipart/form-data", "utf-8"),
        ("multipart/form-data; boundary=ignored; charset=utf-8", "utf-8"),
        ("application/x-www-form-urlencoded; charset=ISO-8859-1", "ISO-8859-1"),
        ("application/x-www-form-urlencoded; CHARSET = latin1", "latin1"),
        ('text/plain; charset="windows-1251"', "windows-1251"),
        ("text/plain; charset=", "utf-8"),
        ("text/plain; charset", "utf-8"),
    ],
)
def test_parse_charset(value, expected):
    assert parse_charset(value) == expected


def test_parse_charset_unknown_name_raises():
    with pytest.raises(EncodeError) as excinfo:
        parse_charset("text/plain; charset=no-such-charset")
    assert isinstance(excinfo.value.cause, LookupError)
