"""
Shared input configuration and the patch helpers.

Records in the data file are plain dicts. Inputs are validated into the
models in this package and turned back into dicts with `to_fields` (for
creates) or merged with `apply_patch` (for updates).
"""

from typing import Any
from pydantic import BaseModel

INPUT_CONFIG = {
    "extra": "forbid",
    "populate_by_name": True,
    "coerce_numbers_to_str": True,
}


def to_fields(data: BaseModel) -> dict[str, Any]:
    """Wire-named fields that were actually supplied."""
    return data.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


def apply_patch(record: dict[str, Any], patch: BaseModel) -> dict[str, Any]:
    """
    Shallow-merge a patch over a record and return the result.

    Fields present in the patch overwrite, absent (or null) fields keep the
    record's value. The input record is left untouched.
    """
    return {**record, **to_fields(patch)}
