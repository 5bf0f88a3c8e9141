"""
Game Events
===========

Discrete cues emitted by state transitions. The core owns no audio state;
a host-provided AudioSink turns cues into sound.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Protocol

logger = logging.getLogger(__name__)


class GameEvent(str, Enum):
    POSITIVE_HIT = "positive_hit"
    NEGATIVE_HIT = "negative_hit"
    TERMINAL_HIT = "terminal_hit"
    BULL_MARKET_START = "bull_market_start"
    BULL_MARKET_END = "bull_market_end"
    AMBIENT_ON = "ambient_on"
    AMBIENT_OFF = "ambient_off"
    GAME_OVER = "game_over"
    NEW_HIGH_SCORE = "new_high_score"


class AudioSink(Protocol):
    """Receives cue notifications and the ambient toggle."""

    def cue(self, event: GameEvent) -> None:
        ...

    def set_ambient(self, on: bool) -> None:
        ...


class NullAudio:
    """Audio sink that ignores everything (headless runs, tests)."""

    def cue(self, event: GameEvent) -> None:
        pass

    def set_ambient(self, on: bool) -> None:
        pass


class RecordingAudio:
    """Audio sink that remembers what it was told."""

    def __init__(self):
        self.cues = []
        self.ambient = False

    def cue(self, event: GameEvent) -> None:
        self.cues.append(event)

    def set_ambient(self, on: bool) -> None:
        self.ambient = on


def dispatch_events(events: Iterable[GameEvent], sink: AudioSink) -> None:
    """Route a frame's events to the audio sink."""
    for event in events:
        if event == GameEvent.AMBIENT_ON:
            sink.set_ambient(True)
        elif event == GameEvent.AMBIENT_OFF:
            sink.set_ambient(False)
        else:
            sink.cue(event)
        logger.debug("event %s", event.value)
