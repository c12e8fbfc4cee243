"""HTTPX client that encodes `data=` bodies with a FormEncoder."""
import httpx

from httpform.config import CONTENT_LENGTH_HEADER
from httpform.core.encoder import Encoder, FormEncoder, JSONEncoder
from httpform.core.template import RequestTemplate


class FormClient(httpx.Client):
    """HTTPX client whose request Content-Type decides how `data` is encoded."""

    def __init__(self, *, encoder: Encoder | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.encoder = encoder if encoder is not None else FormEncoder(JSONEncoder())

    def build_request(self, method: str, url: str, **kwargs) -> httpx.Request:
        # Only encode when the user explicitly passed `data`
        if kwargs.get("data") is not None:
            data = kwargs.pop("data")
            headers = httpx.Headers(self.headers)
            headers.update(kwargs.get("headers") or {})

            template = RequestTemplate.from_headers(headers.multi_items())
            self.encoder.encode(data, type(data), template)
            body = template.body or b""

            template.header(CONTENT_LENGTH_HEADER, str(len(body)))
            kwargs["content"] = body
            kwargs["headers"] = [
                (name, value)
                for name, values in template.headers.items()
                for value in values
                if value is not None
            ]

        return super().build_request(method, url, **kwargs)
