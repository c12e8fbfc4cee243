"""Pydantic models for form payloads."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class FormData(BaseModel):
    """Binary payload uploaded as a file part of a multipart form."""

    content_type: Optional[str] = Field(
        None, alias="contentType", description="MIME type of the data"
    )
    file_name: Optional[str] = Field(
        None, alias="fileName", description="File name sent in Content-Disposition"
    )
    data: bytes = Field(..., description="Raw file content")

    model_config = ConfigDict(populate_by_name=True)
