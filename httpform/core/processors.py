"""Content processors encoding field mappings for one form content type."""

import logging
import secrets
from collections.abc import Iterable, Mapping
from typing import Any, List, Optional, Protocol, Tuple
from urllib.parse import quote_plus

from httpform.config import BOUNDARY_BYTES, CONTENT_TYPE_HEADER, CRLF
from httpform.core.content_type import ContentType
from httpform.core.exceptions import EncodeError
from httpform.core.records import is_user_record
from httpform.core.template import RequestTemplate
from httpform.multipart.output import Output
from httpform.multipart.writers import (
    ByteArrayWriter,
    DelegateWriter,
    FormDataWriter,
    ManyParametersWriter,
    PojoWriter,
    SingleFileWriter,
    SingleParameterWriter,
    Writer,
    find_applicable_writer,
)

logger = logging.getLogger(__name__)


class ContentProcessor(Protocol):
    """Encodes a field mapping into a request template."""

    @property
    def supported_content_type(self) -> ContentType:
        ...

    def process(
        self, template: RequestTemplate, charset: str, data: Mapping[str, Any]
    ) -> None:
        ...


class UrlencodedFormContentProcessor:
    """Processor for application/x-www-form-urlencoded bodies."""

    @property
    def supported_content_type(self) -> ContentType:
        return ContentType.URLENCODED

    def process(
        self, template: RequestTemplate, charset: str, data: Mapping[str, Any]
    ) -> None:
        pairs: List[str] = []
        for key, value in data.items():
            if key is None:
                continue
            try:
                pairs.extend(self._key_value_pairs(key, value, charset))
            except EncodeError:
                raise
            except Exception as exc:
                raise EncodeError(f"Unable to encode field '{key}'", exc) from exc
        body = "&".join(pairs).encode("ascii")
        template.set_body(body, charset)
        logger.debug(f"Encoded {len(pairs)} urlencoded pairs ({len(body)} bytes)")

    def _key_value_pairs(self, key: str, value: Any, charset: str) -> List[str]:
        encoded_key = quote_plus(key, encoding=charset)
        if _is_multi_value(value):
            return [f"{encoded_key}={self._encode(v, charset)}" for v in value]
        return [f"{encoded_key}={self._encode(value, charset)}"]

    @staticmethod
    def _encode(value: Any, charset: str) -> str:
        if value is None:
            return ""
        return quote_plus(str(value), encoding=charset)


def _is_multi_value(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Iterable) and not is_user_record(value)


class MultipartFormContentProcessor:
    """
    Processor for multipart/form-data bodies.

    Each field is written by the first applicable writer, in registration
    order. Fields that no writer accepts are dropped.
    """

    def __init__(self, delegate=None) -> None:
        self.delegate = delegate
        self._writers: List[Writer] = []
        self.add_last_writer(SingleParameterWriter())
        self.add_last_writer(ByteArrayWriter())
        self.add_last_writer(FormDataWriter())
        self.add_last_writer(SingleFileWriter())
        # record and collection writers dispatch back into the same list
        self.add_last_writer(PojoWriter(self._writers))
        self.add_last_writer(ManyParametersWriter(self._writers))

    @property
    def supported_content_type(self) -> ContentType:
        return ContentType.MULTIPART

    @property
    def writers(self) -> Tuple[Writer, ...]:
        return tuple(self._writers)

    def add_first_writer(self, writer: Writer) -> None:
        """Register a writer taking precedence over all others."""
        self._writers.insert(0, writer)

    def add_last_writer(self, writer: Writer) -> None:
        """Register a writer tried after all others."""
        self._writers.append(writer)

    def add_delegate_writer(self) -> None:
        """Register a writer rendering otherwise dropped values with the delegate."""
        if self.delegate is None:
            raise ValueError("No delegate encoder configured for this processor")
        self.add_last_writer(DelegateWriter(self.delegate))

    def find_applicable_writer(self, value: Any) -> Optional[Writer]:
        return find_applicable_writer(self._writers, value)

    def process(
        self, template: RequestTemplate, charset: str, data: Mapping[str, Any]
    ) -> None:
        boundary = secrets.token_hex(BOUNDARY_BYTES)
        output = Output(charset)
        for key, value in data.items():
            if key is None:
                continue
            writer = self.find_applicable_writer(value)
            if writer is None:
                continue
            try:
                writer.write(output, boundary, key, value)
            except EncodeError:
                raise
            except Exception as exc:
                raise EncodeError(f"Unable to write field '{key}'", exc) from exc
        output.write("--").write(boundary).write("--").write(CRLF)

        template.header(
            CONTENT_TYPE_HEADER,
            f"{self.supported_content_type.header}; boundary={boundary}",
        )
        template.set_body(output.to_bytes(), charset)
        logger.debug(f"Encoded multipart body ({output.size} bytes), boundary {boundary}")
