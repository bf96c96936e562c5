"""Timing-only animation: frame durations without pixel data."""

from __future__ import annotations

import time
from enum import Enum
from typing import Iterable

TICK_MS = 50


class AnimationState(Enum):
    """The creature's current animation state."""

    IDLE = "idle"
    EATING = "eating"
    SLEEPING = "sleeping"
    PLAYING = "playing"

    def encoded_index(self) -> int:
        """Index of this state's encoded sprite set (3 is reserved for Recall)."""
        return _ENCODED_INDEX[self]


_ENCODED_INDEX = {
    AnimationState.IDLE: 0,
    AnimationState.EATING: 1,
    AnimationState.SLEEPING: 2,
    AnimationState.PLAYING: 4,
}


class Animation:
    """Per-frame durations for one looping animation cycle."""

    def __init__(self, frame_count: int, tick_durations: Iterable[int]) -> None:
        ticks = list(tick_durations)[: max(frame_count, 0)]
        self.durations_ms: list[int] = [t * TICK_MS for t in ticks]
        self.total_ms: int = sum(self.durations_ms)

    def __repr__(self) -> str:
        return f"Animation(durations_ms={self.durations_ms!r}, total_ms={self.total_ms})"

    def frame_index_at(self, elapsed_ms: int) -> int:
        """Frame index for an elapsed time in milliseconds, looping forever."""
        if self.total_ms == 0 or not self.durations_ms:
            return 0
        in_cycle = elapsed_ms % self.total_ms
        accumulated = 0
        for index, duration in enumerate(self.durations_ms):
            accumulated += duration
            if in_cycle < accumulated:
                return index
        return len(self.durations_ms) - 1


class Animator:
    """Tracks animation state and picks the current frame index by elapsed time."""

    def __init__(self) -> None:
        self._state = AnimationState.IDLE
        self._state_start = time.monotonic()
        self._idle: Animation | None = None
        self._eat: Animation | None = None
        self._sleep: Animation | None = None
        self._hop: Animation | None = None

    @property
    def state(self) -> AnimationState:
        return self._state

    def load_animations(self, idle: Animation, eat: Animation, sleep: Animation) -> None:
        """Set the timing for the Idle, Eating and Sleeping states."""
        self._idle = idle
        self._eat = eat
        self._sleep = sleep

    def set_hop_animation(self, hop: Animation) -> None:
        """Set the timing for the Playing state."""
        self._hop = hop

    def set_state(self, state: AnimationState) -> None:
        """Switch state, restarting the timer only if the state changes."""
        if self._state != state:
            self._state = state
            self._state_start = time.monotonic()

    def current_frame_index(self) -> int | None:
        """Current frame index, or ``None`` if no timing is loaded for the state."""
        elapsed_ms = int((time.monotonic() - self._state_start) * 1000)
        if self._state is AnimationState.IDLE:
            anim = self._idle
        elif self._state is AnimationState.EATING:
            anim = self._eat
        elif self._state is AnimationState.SLEEPING:
            anim = self._sleep
        else:
            anim = self._hop if self._hop is not None else self._idle
        if anim is None:
            return None
        return anim.frame_index_at(elapsed_ms)