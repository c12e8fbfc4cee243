"""Mutable request template filled in by encoders."""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

HeaderSource = Union[
    Mapping[str, Union[str, Iterable[Optional[str]]]], Iterable[Tuple[str, str]]
]


class RequestTemplate:
    """Headers and body of one outgoing request, as seen by an encoder."""

    def __init__(self, headers: Optional[Dict[str, List[Optional[str]]]] = None):
        self.headers: Dict[str, List[Optional[str]]] = headers or {}
        self.body: Optional[bytes] = None
        self.charset: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Optional[HeaderSource]) -> "RequestTemplate":
        """Build a template from a header mapping or (name, value) pairs."""
        collected: Dict[str, List[Optional[str]]] = {}
        if headers is None:
            return cls(collected)
        items: Iterable[Tuple[str, Any]] = (
            headers.items() if isinstance(headers, Mapping) else headers
        )
        for name, value in items:
            values = collected.setdefault(name, [])
            if value is None or isinstance(value, str):
                values.append(value)
            else:
                values.extend(value)
        return cls(collected)

    def header(self, name: str, *values: str) -> "RequestTemplate":
        """
        Replace every value of header `name` (matched ignoring case).

        Calling it without values removes the header.
        """
        for existing in [k for k in self.headers if k.lower() == name.lower()]:
            del self.headers[existing]
        if values:
            self.headers[name] = list(values)
        return self

    def get_header(self, name: str) -> Optional[str]:
        """Return the first non-null value of header `name`, ignoring case."""
        for key, values in self.headers.items():
            if key.lower() != name.lower():
                continue
            for value in values:
                if value is not None:
                    return value
        return None

    def set_body(self, data: Optional[bytes], charset: Optional[str] = None) -> None:
        self.body = data
        self.charset = charset
