"""In-memory output buffer for multipart bodies."""

from typing import Union


class Output:
    """Accumulates a multipart body; text is encoded with the form charset."""

    def __init__(self, charset: str) -> None:
        self.charset = charset
        self._buffer = bytearray()

    def write(self, data: Union[str, bytes, bytearray, memoryview]) -> "Output":
        if isinstance(data, str):
            data = data.encode(self.charset)
        self._buffer.extend(data)
        return self

    @property
    def size(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)
