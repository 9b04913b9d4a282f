"""Reusable, strict base models for wire views and domain objects."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class LakeModel(BaseModel):
    """Shared configuration for every model in the package."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )

    def copy(self: Self, **kwargs: Any) -> Self:
        """Create a new instance of the model with updated fields."""
        return self.__class__(**(self.model_dump(exclude_unset=True) | kwargs))


class WireModel(LakeModel):
    """
    Base for models parsed from storage payloads.

    Payloads carry many fields the decoder has no use for. They are ignored
    rather than rejected so that additive format changes keep decoding.
    """

    model_config = LakeModel.model_config | {"extra": "ignore", "frozen": True}


class StrictBaseModel(LakeModel):
    """A strict, immutable pydantic base model for domain objects."""

    model_config = LakeModel.model_config | {"extra": "forbid", "frozen": True, "strict": True}
