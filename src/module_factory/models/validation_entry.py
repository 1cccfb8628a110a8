"""Structured validation error entry."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ValidationErrorEntry(BaseModel):
    """One reason a value was rejected.

    Attributes:
        field: Dotted path of the offending field ("n/a" when not field-specific)
        actual: The value that was found
        expected: What the schema expected
        message: Human readable description
        type: Kind of failure (the failing keyword, "typeof", "conflict", ...)
    """

    field: str = Field(default="n/a", description="Offending field path")
    actual: Any = Field(default=None, description="Actual value")
    expected: Any = Field(default=None, description="Expected value or constraint")
    message: str = Field(default="", description="Error message")
    type: str = Field(default="n/a", description="Error kind")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "field": "doIt",
                    "actual": None,
                    "expected": ["name", "id", "doIt"],
                    "message": "'doIt' is a required property",
                    "type": "required",
                }
            ]
        }
    )

    @classmethod
    def from_raw(cls, raw: "ValidationErrorEntry | Mapping[str, Any] | str") -> "ValidationErrorEntry":
        """Normalize an entry produced by a caller-supplied check function."""
        if isinstance(raw, ValidationErrorEntry):
            return raw
        if isinstance(raw, str):
            return cls(message=raw, type="custom")
        return cls.model_validate(dict(raw))


__all__ = ["ValidationErrorEntry"]
