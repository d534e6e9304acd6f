"""
Shared pydantic base for request/response schemas.

The API speaks camelCase JSON (companyHandle, numEmployees) while models and
Python code use snake_case.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that reads and writes camelCase field names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class StrictCamelModel(CamelModel):
    """CamelModel that rejects unknown fields in request bodies."""

    class Config:
        extra = "forbid"


def reject_null(v):
    """Field validator body for optional-but-not-nullable update fields."""
    if v is None:
        raise ValueError("may not be null")
    return v
