"""Exception hierarchy for the lake streamer."""

from __future__ import annotations

from typing import Any


class LakeError(Exception):
    """
    Base exception for all lake-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class DecodeError(LakeError):
    """
    Raised when a payload cannot be turned into a wire view or domain object.

    Decode errors are fatal to the streamer. They mean the storage format or
    the protocol changed in a way the decoder does not understand.

    Attributes:
        type_name: The type being decoded.
        detail: Description of what went wrong.
    """

    def __init__(self, type_name: str, detail: str) -> None:
        self.type_name = type_name
        self.detail = detail

        super().__init__(f"Failed to decode {type_name}: {detail}")


class UnknownVariantError(DecodeError):
    """
    Raised when a tagged payload names no known variant.

    Attributes:
        variant: The offending tag (may be truncated for display).
    """

    def __init__(self, type_name: str, variant: Any) -> None:
        variant_repr = repr(variant)
        if len(variant_repr) > 50:
            variant_repr = variant_repr[:47] + "..."
        self.variant = variant

        super().__init__(type_name, f"unknown variant {variant_repr}")


class NestedDelegateError(DecodeError):
    """Raised when a delegate action contains another delegate action."""

    def __init__(self) -> None:
        super().__init__("DelegateAction", "Cannot delegate DelegateAction")


class FetchError(LakeError):
    """
    Base class for storage fetch failures.

    Attributes:
        key: The object key or URL path that was requested.
    """

    def __init__(self, key: str, detail: str | None = None) -> None:
        self.key = key
        self.detail = detail

        msg = f"Failed to fetch {key}"
        if detail:
            msg = f"{msg}: {detail}"

        super().__init__(msg)


class ObjectNotFoundError(FetchError):
    """The object has not been written to storage yet."""


class TransientFetchError(FetchError):
    """A network, throttling or body-read failure on an object that may exist."""


class HeightSkippedError(FetchError):
    """The provider reports that no block was produced at this height."""


class FastNearError(TransientFetchError):
    """
    Raised for unexpected HTTP responses from a FastNear endpoint.

    Attributes:
        status: The HTTP status code.
        error_type: The `type` field of the error body, when present.
    """

    def __init__(
        self,
        key: str,
        *,
        status: int,
        error_type: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.status = status
        self.error_type = error_type

        summary = f"HTTP {status}"
        if error_type:
            summary = f"{summary} {error_type}"
        if detail:
            summary = f"{summary}: {detail[:200]}"

        super().__init__(key, summary)
