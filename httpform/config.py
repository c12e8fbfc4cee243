"""Configuration for httpform encoders."""

CONTENT_TYPE_HEADER = "Content-Type"
CONTENT_LENGTH_HEADER = "Content-Length"
JSON_CONTENT_TYPE = "application/json"
DEFAULT_CHARSET = "utf-8"
DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"
CRLF = "\r\n"
BOUNDARY_BYTES = 16  # hex token of 32 characters
