"""Form content types and Content-Type header parsing."""

import codecs
import re
from enum import Enum
from typing import Optional

from httpform.config import DEFAULT_CHARSET
from httpform.core.exceptions import EncodeError

_CHARSET_VALUE = re.compile(r"[\w-]+")


class ContentType(Enum):
    """Form content types handled by FormEncoder."""

    MULTIPART = "multipart/form-data"
    URLENCODED = "application/x-www-form-urlencoded"

    @property
    def header(self) -> str:
        return self.value

    @classmethod
    def of(cls, value: Optional[str]) -> Optional["ContentType"]:
        """
        Resolve a Content-Type header value, ignoring its parameters.

        The MIME type must match exactly (case-sensitive); any other value,
        including None, returns None.
        """
        if value is None:
            return None
        mime = value.split(";", 1)[0].strip()
        for content_type in cls:
            if content_type.header == mime:
                return content_type
        return None


def parse_charset(value: Optional[str]) -> str:
    """
    Return the charset declared in a Content-Type header value.

    The label is returned as declared so it can be echoed on the wire.
    Falls back to utf-8 when the parameter is absent or malformed. A
    well-formed name that no codec answers to raises EncodeError.
    """
    if not value:
        return DEFAULT_CHARSET
    # first segment is the MIME type itself
    for segment in value.split(";")[1:]:
        key, sep, param = segment.partition("=")
        if not sep or key.strip().lower() != "charset":
            continue
        match = _CHARSET_VALUE.match(param.strip().strip("\"'"))
        if match is None:
            return DEFAULT_CHARSET
        label = match.group(0)
        try:
            codecs.lookup(label)
        except LookupError as exc:
            raise EncodeError(f"Unsupported charset: {label}", exc) from exc
        return label
    return DEFAULT_CHARSET
