"""Introspection of structured records: pydantic models, dataclasses and plain objects."""

import dataclasses
import io
import os
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel

from httpform.core.models import FormData

# Types that carry their own form representation and are never flattened
_NOT_RECORDS = (Mapping, Iterable, Enum, bytes, bytearray, io.IOBase, os.PathLike)


def is_user_record(value: Any) -> bool:
    """Tell whether a value (or a type) is a record with named public fields."""
    cls = value if isinstance(value, type) else type(value)
    if issubclass(cls, FormData):
        return False
    if issubclass(cls, BaseModel) or dataclasses.is_dataclass(cls):
        return True
    if cls.__module__ == "builtins" or issubclass(cls, _NOT_RECORDS):
        return False
    return "__dict__" in dir(cls)


def to_map(obj: Any) -> Dict[str, Any]:
    """
    Enumerate the public fields of a record in a stable order.

    Nested records, collections and None values are returned as-is.
    """
    if isinstance(obj, type) or not is_user_record(obj):
        raise TypeError(f"{type(obj).__name__} is not a structured record")
    if isinstance(obj, BaseModel):
        # declared order, aliases win, values are not serialized
        return {
            (field.alias or name): getattr(obj, name)
            for name, field in type(obj).model_fields.items()
        }
    if dataclasses.is_dataclass(obj):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
