"""
Externally tagged unions.

Storage payloads spell enums the way serde does by default:

- Unit variants are bare strings: ``"CreateAccount"``
- Struct variants are single-key objects: ``{"Transfer": {"deposit": "1"}}``
- Newtype variants are single-key objects around a scalar:
  ``{"SuccessValue": "aGk="}``

Each variant is a pydantic model that knows its own tag. A callable
discriminator reads the tag so pydantic can pick the right model, and the
model unwraps its body before field validation.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import model_validator

from lake_stream.types import WireModel


class TaggedView(WireModel):
    """Base for one variant of an externally tagged union."""

    TAG: ClassVar[str]
    """The key (or bare string) naming this variant on the wire."""

    NEWTYPE_FIELD: ClassVar[str | None] = None
    """Field receiving the body when the variant wraps a scalar."""

    @model_validator(mode="before")
    @classmethod
    def unwrap_tag(cls, data: Any) -> Any:
        if isinstance(data, str) and data == cls.TAG:
            return {}
        if isinstance(data, dict) and len(data) == 1 and cls.TAG in data:
            body = data[cls.TAG]
            if cls.NEWTYPE_FIELD is not None:
                return {cls.NEWTYPE_FIELD: body}
            return body if body is not None else {}
        return data


def external_tag(value: Any) -> str | None:
    """
    Read the variant tag of an externally tagged value.

    Returns None when the value has no recognizable tag. Pydantic then
    reports a missing-tag validation error.
    """
    if isinstance(value, TaggedView):
        return value.TAG
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and len(value) == 1:
        return next(iter(value))
    return None
