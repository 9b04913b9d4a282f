"""Unsigned Integer Type Specification."""

from __future__ import annotations

from typing import Any, ClassVar, SupportsInt

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from typing_extensions import Self


class BaseUint(int):
    """
    A base class for bounded unsigned integers that inherits from `int`.

    Storage payloads encode 64-bit values as JSON numbers and 128-bit
    balances as decimal strings. Both spellings are accepted.
    """

    BITS: ClassVar[int]
    """The number of bits in the integer (overridden by subclasses)."""

    def __new__(cls, value: SupportsInt | str) -> Self:
        """
        Create and validate a new Uint instance.

        Raises:
            TypeError: If `value` is a float or a bool.
            OverflowError: If `value` is outside the allowed range [0, 2**BITS - 1].
        """
        # Floats and bools are rejected.
        if isinstance(value, (bool, float)):
            raise TypeError(f"{cls.__name__} cannot be built from {type(value).__name__}")
        int_value = int(value)
        if not (0 <= int_value < (2**cls.BITS)):
            raise OverflowError(f"{int_value} is out of range for {cls.__name__}")
        return super().__new__(cls, int_value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Hook into Pydantic's validation system."""

        def validate(value: Any) -> BaseUint:
            """Pydantic validation function that calls the class constructor."""
            if isinstance(value, cls):
                return value
            try:
                return cls(value)
            except (OverflowError, TypeError) as e:
                raise ValueError(str(e)) from e

        # The same validator serves JSON and Python input.
        #
        # A plain int schema would reject the string-encoded balances.
        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda instance: int(instance)
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        """Hook into Pydantic's JSON Schema generation system."""
        return {"type": "integer", "minimum": 0, "format": f"uint{cls.BITS}"}

    def __repr__(self) -> str:
        """Return a string representation of the Uint."""
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        """Return the informal, user-friendly string representation."""
        return str(int(self))


class Uint32(BaseUint):
    """A 32-bit unsigned integer. Used for protocol versions."""

    BITS = 32


class Uint64(BaseUint):
    """A 64-bit unsigned integer. Used for heights, nonces, gas and shard ids."""

    BITS = 64


class Uint128(BaseUint):
    """A 128-bit unsigned integer. Used for balances and gas prices."""

    BITS = 128
