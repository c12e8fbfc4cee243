"""Part writers turning form field values into multipart parts."""

import io
import mimetypes
import os
import uuid
from collections.abc import Iterable, Mapping
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Protocol, Sequence

from httpform.config import CRLF, DEFAULT_FILE_CONTENT_TYPE
from httpform.core.exceptions import EncodeError
from httpform.core.models import FormData
from httpform.core.records import is_user_record, to_map
from httpform.core.template import RequestTemplate
from httpform.multipart.output import Output

__all__ = [
    "Writer",
    "AbstractWriter",
    "SingleParameterWriter",
    "ByteArrayWriter",
    "FormDataWriter",
    "SingleFileWriter",
    "PojoWriter",
    "ManyParametersWriter",
    "DelegateWriter",
    "find_applicable_writer",
]

_SCALAR_TYPES = (str, int, float, Decimal, Enum, uuid.UUID, date, time)
_BINARY_TYPES = (bytes, bytearray, memoryview)
# percent-escapes for quoted Content-Disposition values (RFC 7578 / WHATWG)
_DISPOSITION_ESCAPES = str.maketrans({'"': "%22", "\r": "%0D", "\n": "%0A"})


def _disposition(name: str, file_name: Optional[str] = None) -> str:
    name = name.translate(_DISPOSITION_ESCAPES)
    header = f'Content-Disposition: form-data; name="{name}"'
    if file_name is not None:
        header += f'; filename="{file_name.translate(_DISPOSITION_ESCAPES)}"'
    return header


class Writer(Protocol):
    """Writes one form field value as one or more multipart parts."""

    def is_applicable(self, value: Any) -> bool:
        ...

    def write(self, output: Output, boundary: str, key: str, value: Any) -> None:
        ...


def find_applicable_writer(writers: Sequence[Writer], value: Any) -> Optional[Writer]:
    """Return the first writer accepting `value`, or None."""
    for writer in writers:
        if writer.is_applicable(value):
            return writer
    return None


class AbstractWriter:
    """Base writer framing a single part between boundary and trailing CRLF."""

    def is_applicable(self, value: Any) -> bool:
        raise NotImplementedError

    def write(self, output: Output, boundary: str, key: str, value: Any) -> None:
        output.write("--").write(boundary).write(CRLF)
        self.write_part(output, key, value)
        output.write(CRLF)

    def write_part(self, output: Output, key: str, value: Any) -> None:
        """Write the part headers and payload. To be implemented by subclasses."""
        raise NotImplementedError

    def write_file_metadata(
        self,
        output: Output,
        name: str,
        file_name: Optional[str],
        content_type: Optional[str],
    ) -> None:
        if content_type is None and file_name:
            content_type, _ = mimetypes.guess_type(file_name)
        output.write(_disposition(name, file_name)).write(CRLF)
        output.write(f"Content-Type: {content_type or DEFAULT_FILE_CONTENT_TYPE}")
        output.write(CRLF)
        output.write("Content-Transfer-Encoding: binary").write(CRLF)
        output.write(CRLF)


class SingleParameterWriter(AbstractWriter):
    """Text part for strings, numbers, booleans, enums, UUIDs and dates."""

    def is_applicable(self, value: Any) -> bool:
        return isinstance(value, _SCALAR_TYPES)

    def write_part(self, output: Output, key: str, value: Any) -> None:
        if isinstance(value, Enum):
            value = value.value
        output.write(_disposition(key)).write(CRLF)
        output.write(f"Content-Type: text/plain; charset={output.charset}")
        output.write(CRLF).write(CRLF)
        output.write(str(value))


class ByteArrayWriter(AbstractWriter):
    """File part for raw bytes; the field name doubles as the filename."""

    def is_applicable(self, value: Any) -> bool:
        return isinstance(value, _BINARY_TYPES)

    def write_part(self, output: Output, key: str, value: Any) -> None:
        self.write_file_metadata(output, key, key, None)
        output.write(value)


class FormDataWriter(AbstractWriter):
    """File part for FormData, honoring its declared filename and MIME type."""

    def is_applicable(self, value: Any) -> bool:
        return isinstance(value, FormData)

    def write_part(self, output: Output, key: str, value: FormData) -> None:
        self.write_file_metadata(output, key, value.file_name, value.content_type)
        output.write(value.data)


class SingleFileWriter(AbstractWriter):
    """File part for filesystem paths and readable file objects."""

    def is_applicable(self, value: Any) -> bool:
        if isinstance(value, os.PathLike):
            return True
        return callable(getattr(value, "read", None))

    def write_part(self, output: Output, key: str, value: Any) -> None:
        try:
            if isinstance(value, os.PathLike):
                file_name = os.path.basename(os.fspath(value))
                with open(value, "rb") as f:
                    data = f.read()
            else:
                name = getattr(value, "name", None)
                file_name = os.path.basename(name) if isinstance(name, str) else key
                data = value.read()
        except OSError as exc:
            raise EncodeError(f"Unable to read file for field '{key}'", exc) from exc
        self.write_file_metadata(output, key, file_name, None)
        output.write(data)


class PojoWriter:
    """
    Flattens a structured record into sibling parts.

    Each field is written under its own name with the first applicable writer
    of the shared writer list, so nested records are not namespaced: two
    nested records sharing a field name produce parts with the same name.
    """

    def __init__(self, writers: Sequence[Writer]) -> None:
        self.writers = writers

    def is_applicable(self, value: Any) -> bool:
        return is_user_record(value)

    def write(self, output: Output, boundary: str, key: str, value: Any) -> None:
        for field, field_value in to_map(value).items():
            writer = find_applicable_writer(self.writers, field_value)
            if writer is None:
                continue
            writer.write(output, boundary, field, field_value)


class ManyParametersWriter:
    """Writes each element of a collection as a repeated part under one key."""

    def __init__(self, writers: Sequence[Writer]) -> None:
        self.writers = writers

    def is_applicable(self, value: Any) -> bool:
        if isinstance(value, (str, Mapping, io.IOBase) + _BINARY_TYPES):
            return False
        return isinstance(value, Iterable) and not is_user_record(value)

    def write(self, output: Output, boundary: str, key: str, value: Any) -> None:
        for element in value:
            writer = find_applicable_writer(self.writers, element)
            if writer is None:
                continue
            writer.write(output, boundary, key, element)


class DelegateWriter(AbstractWriter):
    """
    Renders any non-null value with a delegate encoder as a text part.

    Not registered by default; add it last to keep values no other writer
    accepts.
    """

    def __init__(self, delegate) -> None:
        self.delegate = delegate
        self._parameter_writer = SingleParameterWriter()

    def is_applicable(self, value: Any) -> bool:
        return value is not None

    def write_part(self, output: Output, key: str, value: Any) -> None:
        scratch = RequestTemplate()
        self.delegate.encode(value, type(value), scratch)
        text = (scratch.body or b"").decode(output.charset).replace("\r\n", "\n")
        self._parameter_writer.write_part(output, key, text)
