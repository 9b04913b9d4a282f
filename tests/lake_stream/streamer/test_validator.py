"""Tests for the hash chain validator."""

from __future__ import annotations

from lake_stream.streamer import ChainValidator
from tests.lake_stream.helpers import make_streamer_message


class TestChainValidator:
    """Tests for accepting linked blocks only."""

    def test_first_block_is_accepted(self) -> None:
        validator = ChainValidator()

        assert validator.validate(make_streamer_message(100, prev_hash="anything"))
        assert validator.last_accepted_height == 100

    def test_linked_block_is_accepted(self) -> None:
        validator = ChainValidator()
        validator.validate(make_streamer_message(100))

        assert validator.validate(make_streamer_message(101))
        assert validator.last_accepted_hash == make_streamer_message(101).hash

    def test_unlinked_block_is_refused_and_state_kept(self) -> None:
        validator = ChainValidator()
        validator.validate(make_streamer_message(100))

        assert not validator.validate(make_streamer_message(101, prev_hash="stale"))
        assert validator.last_accepted_height == 100

    def test_gap_with_matching_hash_is_accepted(self) -> None:
        """Only the hash link matters, not consecutive heights."""
        validator = ChainValidator()
        first = make_streamer_message(100)
        validator.validate(first)

        assert validator.validate(make_streamer_message(105, prev_hash=first.hash))

    def test_restart_height(self) -> None:
        validator = ChainValidator()
        assert validator.restart_height(100) == 100

        validator.accept(make_streamer_message(250))

        assert validator.restart_height(100) == 251
