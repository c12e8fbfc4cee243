"""FormEncoder: form-aware encoder wrapping a delegate encoder."""

import logging
import typing
from collections.abc import Mapping
from typing import Any, Dict, Optional, Protocol

from pydantic_core import to_json

from httpform.config import CONTENT_TYPE_HEADER, DEFAULT_CHARSET, JSON_CONTENT_TYPE
from httpform.core.content_type import ContentType, parse_charset
from httpform.core.exceptions import EncodeError
from httpform.core.processors import (
    ContentProcessor,
    MultipartFormContentProcessor,
    UrlencodedFormContentProcessor,
)
from httpform.core.records import is_user_record, to_map
from httpform.core.template import RequestTemplate

__all__ = ["Encoder", "DefaultEncoder", "JSONEncoder", "FormEncoder"]

logger = logging.getLogger(__name__)


class Encoder(Protocol):
    """Encodes an object into the body of a request template."""

    def encode(self, obj: Any, body_type: Any, template: RequestTemplate) -> None:
        ...


class DefaultEncoder:
    """Accepts only text and bytes bodies."""

    def encode(self, obj: Any, body_type: Any, template: RequestTemplate) -> None:
        if isinstance(obj, str):
            charset = template.charset or DEFAULT_CHARSET
            template.set_body(obj.encode(charset), charset)
        elif isinstance(obj, (bytes, bytearray)):
            template.set_body(bytes(obj), template.charset)
        else:
            raise EncodeError(
                f"{getattr(body_type, '__name__', body_type)} is not a type "
                "supported by this encoder."
            )


class JSONEncoder:
    """Serializes any JSON-compatible object, pydantic models included."""

    def encode(self, obj: Any, body_type: Any, template: RequestTemplate) -> None:
        try:
            body = to_json(obj)
        except ValueError as exc:
            raise EncodeError(f"Unable to serialize {type(obj).__name__}", exc) from exc
        if template.get_header(CONTENT_TYPE_HEADER) is None:
            template.header(CONTENT_TYPE_HEADER, JSON_CONTENT_TYPE)
        template.set_body(body, DEFAULT_CHARSET)


def _is_form_mapping(body_type: Any) -> bool:
    """True for Mapping types keyed by str, e.g. dict or Dict[str, Any]."""
    origin = typing.get_origin(body_type) or body_type
    if not isinstance(origin, type) or not issubclass(origin, Mapping):
        return False
    args = typing.get_args(body_type)
    return not args or args[0] is str


class FormEncoder:
    """
    Encoder for form bodies that falls back to a delegate for everything else.

    The request Content-Type selects the processor: multipart/form-data and
    application/x-www-form-urlencoded bodies are built from a mapping or a
    structured record; any other content type, or any other kind of object,
    is handed to the delegate unchanged.
    """

    def __init__(self, delegate: Optional[Encoder] = None) -> None:
        self.delegate = delegate if delegate is not None else DefaultEncoder()
        processors = [
            MultipartFormContentProcessor(self.delegate),
            UrlencodedFormContentProcessor(),
        ]
        self._processors: Dict[ContentType, ContentProcessor] = {
            p.supported_content_type: p for p in processors
        }

    def encode(self, obj: Any, body_type: Any, template: RequestTemplate) -> None:
        """Encode `obj` into `template`; a None body_type means type(obj)."""
        if body_type is None:
            body_type = type(obj)

        content_type_value = template.get_header(CONTENT_TYPE_HEADER)
        content_type = ContentType.of(content_type_value)
        processor = self._processors.get(content_type)
        if processor is None:
            logger.debug(f"Delegating body for content type {content_type_value!r}")
            self.delegate.encode(obj, body_type, template)
            return

        if _is_form_mapping(body_type) and isinstance(obj, Mapping):
            data = obj
        elif isinstance(body_type, type) and is_user_record(body_type):
            data = to_map(obj)
        else:
            logger.debug(
                f"Delegating {getattr(body_type, '__name__', body_type)} body: "
                "not a mapping or record"
            )
            self.delegate.encode(obj, body_type, template)
            return

        charset = parse_charset(content_type_value)
        logger.debug(f"Encoding {content_type.name} form body with charset {charset}")
        processor.process(template, charset, data)

    def get_content_processor(
        self, content_type: ContentType
    ) -> Optional[ContentProcessor]:
        """Return the processor registered for a content type, or None."""
        return self._processors.get(content_type)
