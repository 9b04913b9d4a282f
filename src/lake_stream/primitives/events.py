"""
Structured events emitted by contracts through their logs.

Contracts following the events standard write a log line made of a fixed
prefix and a JSON object::

    EVENT_JSON:{"standard":"nep171","version":"1.0.0","event":"nft_mint","data":[...]}

Parsing is best-effort. Most log lines are ordinary debug output, so a line
without the prefix or with a malformed body is skipped, never an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from lake_stream.types import AccountId, CryptoHash, StrictBaseModel, WireModel

if TYPE_CHECKING:
    from .receipts import Receipt

EVENT_LOG_PREFIX: Final = "EVENT_JSON:"
"""Prefix marking a log line as an event."""


class RawEvent(WireModel):
    """The JSON body of an event log line."""

    event: str
    standard: str
    version: str
    data: Any = None

    @classmethod
    def from_log(cls, log: str) -> RawEvent | None:
        """
        Parse one log line.

        Returns None when the line is not an event.
        """
        if not log.startswith(EVENT_LOG_PREFIX):
            return None
        try:
            return cls.model_validate_json(log[len(EVENT_LOG_PREFIX) :].strip())
        except ValidationError:
            return None


class Event(StrictBaseModel):
    """An event together with the receipt that emitted it."""

    event: str
    """Event name, e.g. `nft_mint`."""

    standard: str
    """Standard the event belongs to, e.g. `nep171`."""

    version: str
    """Version of the standard."""

    data: Any = None
    """Free-form payload. Its shape is defined by the standard."""

    related_receipt_id: CryptoHash
    """Receipt whose execution emitted the event."""

    receiver_id: AccountId
    """Receiver of that receipt, i.e. the emitting contract."""

    predecessor_id: AccountId
    """Predecessor of that receipt."""

    def is_emitted_by_contract(self, contract_account_id: AccountId) -> bool:
        """Whether the given contract emitted this event."""
        return self.receiver_id == contract_account_id


def events_from_receipt(receipt: Receipt) -> list[Event]:
    """Parse the events of a receipt, in log order."""
    events = []
    for log in receipt.logs:
        raw_event = RawEvent.from_log(log)
        if raw_event is None:
            continue
        events.append(
            Event(
                event=raw_event.event,
                standard=raw_event.standard,
                version=raw_event.version,
                data=raw_event.data,
                related_receipt_id=receipt.receipt_id,
                receiver_id=receipt.receiver_id,
                predecessor_id=receipt.predecessor_id,
            )
        )
    return events
