"""Streamer state machine."""

from __future__ import annotations

from enum import Enum, auto


class StreamerState(Enum):
    """
    Lifecycle of one streamer run.

    State Machine Diagram
    ---------------------
    ::

        IDLE --> STREAMING <--> RESETTING
                     |              |
                     v              v
                  STOPPED <---------+

    Transitions
    -----------
    IDLE -> STREAMING
        - Triggered when: The run starts
        - Action: Open a cursor and a prefetch window at the start height

    STREAMING -> RESETTING
        - Triggered when: A block does not link to the last accepted one
        - Action: Discard the window, wait, reopen after the last accepted height

    RESETTING -> STREAMING
        - Triggered when: The reset delay elapsed

    Any -> STOPPED
        - Triggered when: The sink closed, a fatal error escaped, or the run was cancelled
    """

    IDLE = auto()
    """Created, not running yet."""

    STREAMING = auto()
    """Fetching, validating and delivering blocks."""

    RESETTING = auto()
    """Recovering from a broken hash chain."""

    STOPPED = auto()
    """Finished. A streamer is never restarted."""

    def can_transition_to(self, target: StreamerState) -> bool:
        """
        Check if transition to target state is valid.

        Args:
            target: The proposed target state.

        Returns:
            True if the transition is allowed by the state machine rules.
        """
        return target in _VALID_TRANSITIONS.get(self, set())

    @property
    def is_running(self) -> bool:
        """Whether the streamer is between start and stop."""
        return self in {StreamerState.STREAMING, StreamerState.RESETTING}


_VALID_TRANSITIONS: dict[StreamerState, set[StreamerState]] = {
    StreamerState.IDLE: {StreamerState.STREAMING, StreamerState.STOPPED},
    StreamerState.STREAMING: {StreamerState.RESETTING, StreamerState.STOPPED},
    StreamerState.RESETTING: {StreamerState.STREAMING, StreamerState.STOPPED},
    StreamerState.STOPPED: set(),
}
"""Valid state transitions for the streamer state machine."""
