"""Creature slots in the shared pen: XP, wandering movement and collisions."""

from __future__ import annotations

import itertools
import math
import os
import random
import threading
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterable

from pocpen.animation import AnimationState, Animator

MAX_CACHED_FRAMES = 8
"""Maximum frames cached per animation; longer sheets are sampled evenly."""

SPRITE_W = 32
"""Sprite width in terminal cells."""
SPRITE_H = 10
"""Sprite height for image-protocol terminals."""
SPRITE_H_HALFBLOCKS = 16
"""Sprite height for half-block terminals (32 pixel rows)."""

LABEL_H = 4
LABEL_OVERLAP = 0
OVERLAP_STACK_THRESHOLD = 0.60
RECALL_TICKS = 18
RECALL_FLASH_SHRINK_DELAY_TICKS = 10

DEBUG_LOG_ENV = "POCPEN_DEBUG_LOG"

_TICK_SECS = 0.05
_U32_MAX = 2**32 - 1
_XP_STATES = (AnimationState.EATING, AnimationState.PLAYING)

_debug_lock = threading.Lock()


class Direction(IntEnum):
    """Cardinal facing direction; the value is the sprite-sheet row."""

    DOWN = 0
    LEFT = 1
    UP = 2
    RIGHT = 3

    def as_index(self) -> int:
        """Array index for this direction (0-3)."""
        return int(self)


def _per_direction() -> list[list[Any]]:
    return [[] for _ in Direction]


@dataclass
class SpriteCache:
    """Pixel frames and terminal-encoded frames for one creature slot.

    ``encoded`` is indexed by [state][direction][frame], where state is
    0=Idle, 1=Eat, 2=Sleep, 3=Recall, 4=Playing.
    """

    idle: list[list[Any]] = field(default_factory=_per_direction)
    eat: list[list[Any]] = field(default_factory=_per_direction)
    sleep: list[list[Any]] = field(default_factory=_per_direction)
    recall: list[list[Any]] = field(default_factory=_per_direction)
    hop: list[list[Any]] = field(default_factory=_per_direction)
    encoded: list[list[list[Any]]] = field(
        default_factory=lambda: [_per_direction() for _ in range(5)]
    )
    encoded_rect: Any = None


def debug_log(msg: str) -> None:
    """Append a timestamped line to the file named by ``POCPEN_DEBUG_LOG``, if set."""
    path = os.environ.get(DEBUG_LOG_ENV)
    if not path:
        return
    ts_ms = time.time_ns() // 1_000_000
    with _debug_lock:
        try:
            with open(path, "a", encoding="utf-8") as sink:
                sink.write(f"{ts_ms} {msg}\n")
        except OSError:
            pass


def _signum(value: float) -> float:
    return math.copysign(1.0, value)


class CreatureSlot:
    """A single creature in the shared pen; pixel data lives in ``sprites``."""

    def __init__(self, creature_id: int, creature_name: str) -> None:
        self.creature_id = creature_id
        self.slot_id = random.getrandbits(64)
        self.creature_name = creature_name
        self.animator = Animator()
        self.sprites = SpriteCache()
        self.xp = 0
        self.xp_frac = 0.0
        self.level = 1
        self.anim_active_secs = 0.0
        self.pos_x = 0.0
        self.pos_y = 0.0
        self.vel_x = 0.0
        self.vel_y = 0.0
        self.current_dir = Direction.DOWN
        self.dir_hold_ticks = 0
        self.pause_ticks = 0
        self.pause_face_down = False
        self.dir_cooldown_ticks = 0
        self.rng = random.Random()

    def __repr__(self) -> str:
        return (
            f"CreatureSlot(creature_id={self.creature_id}, "
            f"creature_name={self.creature_name!r}, level={self.level}, xp={self.xp})"
        )

    def tick_xp(self) -> int | None:
        """Accrue XP for one 50 ms tick; return the new level on a level-up.

        XP accrues only while Eating or Playing: 2 xp/s for the first 10 s,
        1 xp/s until 40 s, then nothing.
        """
        if self.animator.state not in _XP_STATES:
            return None

        self.anim_active_secs += _TICK_SECS
        if self.anim_active_secs <= 10.0:
            rate = 2.0
        elif self.anim_active_secs <= 40.0:
            rate = 1.0
        else:
            rate = 0.0

        self.xp_frac += rate * _TICK_SECS
        whole = math.floor(self.xp_frac)
        if whole > 0:
            self.xp = min(self.xp + whole, _U32_MAX)
            self.xp_frac -= whole

        if self.xp >= 50 * self.level:
            self.xp = 0
            self.level += 1
            return self.level
        return None

    def _log_wall(self, axis: str) -> None:
        debug_log(
            f"wall_bounce id={self.creature_id} axis={axis} "
            f"dir={self.current_dir.as_index()} vx={self.vel_x:.3f} vy={self.vel_y:.3f}"
        )

    def update_position(
        self, pen_w: int, pen_h: int, sprite_w: int, sprite_h: int, is_moving: bool
    ) -> None:
        """Advance movement timers and, if ``is_moving``, position for one tick."""
        rng = self.rng

        if self.dir_cooldown_ticks > 0:
            self.dir_cooldown_ticks -= 1

        if self.pause_ticks > 0:
            self.pause_ticks -= 1
            if self.pause_ticks == 0:
                self.current_dir = velocity_to_dir(self.vel_x, self.vel_y)
                self.dir_cooldown_ticks = 3
                self.pause_face_down = False
                debug_log(
                    f"pause_end id={self.creature_id} dir={self.current_dir.as_index()} "
                    f"vx={self.vel_x:.3f} vy={self.vel_y:.3f}"
                )
            elif self.pause_face_down:
                self.current_dir = Direction.DOWN
            return

        if self.dir_hold_ticks == 0:
            new_vx = rng.uniform(-0.4, 0.4)
            new_vy = rng.uniform(-0.4, 0.4)
            if abs(new_vx) < 0.12:
                new_vx = 0.18 * _signum(new_vx)
            if abs(new_vy) < 0.12:
                new_vy = 0.18 * _signum(new_vy)

            old_dir = velocity_to_dir(self.vel_x, self.vel_y)
            new_dir = velocity_to_dir(new_vx, new_vy)
            if new_dir != old_dir:
                self.pause_ticks = rng.randrange(20, 40)
                self.pause_face_down = rng.random() < 0.30
                self.current_dir = Direction.DOWN if self.pause_face_down else old_dir
                debug_log(
                    f"heading_change id={self.creature_id} old_dir={old_dir.as_index()} "
                    f"new_dir={new_dir.as_index()} hold={self.dir_hold_ticks} "
                    f"pause={self.pause_ticks} "
                    f"face_down={str(self.pause_face_down).lower()}"
                )
            else:
                self.pause_face_down = False

            self.vel_x = new_vx
            self.vel_y = new_vy

            if self.pause_ticks == 0:
                self.current_dir = velocity_to_dir(new_vx, new_vy)
                self.dir_cooldown_ticks = 3
                debug_log(
                    f"heading_apply id={self.creature_id} dir={self.current_dir.as_index()} "
                    f"vx={self.vel_x:.3f} vy={self.vel_y:.3f}"
                )

            self.dir_hold_ticks = rng.randrange(40, 160)
        else:
            self.dir_hold_ticks -= 1

        if not is_moving:
            return

        self.pos_x += self.vel_x
        self.pos_y += self.vel_y

        max_x = max(float(pen_w) - sprite_w, 0.0)
        max_y = max(float(pen_h) - sprite_h - LABEL_H + LABEL_OVERLAP, 0.0)

        if self.pos_x < 0.0:
            self.pos_x = 0.0
            self.vel_x = abs(self.vel_x)
            self._log_wall("x")
        if self.pos_x > max_x:
            self.pos_x = max_x
            self.vel_x = -abs(self.vel_x)
            self._log_wall("x")
        if self.pos_y < 0.0:
            self.pos_y = 0.0
            self.vel_y = abs(self.vel_y)
            self._log_wall("y")
        if self.pos_y > max_y:
            self.pos_y = max_y
            self.vel_y = -abs(self.vel_y)
            self._log_wall("y")


def sprite_stack_h(sprite_h: int) -> int:
    """Height of a sprite together with its name plate."""
    return sprite_h + LABEL_H - LABEL_OVERLAP


def velocity_to_dir(vel_x: float, vel_y: float) -> Direction:
    """Map a velocity to a cardinal direction; near-stationary faces down."""
    if abs(vel_x) < 0.01 and abs(vel_y) < 0.01:
        return Direction.DOWN
    if abs(vel_x) > abs(vel_y):
        return Direction.RIGHT if vel_x > 0.0 else Direction.LEFT
    return Direction.UP if vel_y > 0.0 else Direction.DOWN


def stable_velocity_to_dir(vel_x: float, vel_y: float, current_dir: Direction) -> Direction:
    """Map a velocity to a direction, keeping ``current_dir`` when barely moving."""
    ax, ay = abs(vel_x), abs(vel_y)
    threshold = 0.12
    if ax < threshold and ay < threshold:
        return current_dir
    if ax > ay:
        return Direction.RIGHT if vel_x > 0.0 else Direction.LEFT
    return Direction.UP if vel_y > 0.0 else Direction.DOWN


def maybe_update_facing_from_velocity(slot: CreatureSlot) -> None:
    """Turn an idle, walking creature to face its velocity, with a cooldown."""
    if slot.animator.state is not AnimationState.IDLE or slot.pause_ticks > 0:
        return
    if slot.dir_cooldown_ticks > 0:
        return
    if slot.vel_x * slot.vel_x + slot.vel_y * slot.vel_y < 0.02:
        return
    new_dir = stable_velocity_to_dir(slot.vel_x, slot.vel_y, slot.current_dir)
    if new_dir != slot.current_dir:
        slot.current_dir = new_dir
        slot.dir_cooldown_ticks = 5
        debug_log(
            f"facing_update id={slot.creature_id} dir={slot.current_dir.as_index()} "
            f"vx={slot.vel_x:.3f} vy={slot.vel_y:.3f}"
        )


def resolve_collisions(
    slots: Iterable[CreatureSlot], sprite_w: int, sprite_h: int, pen_w: int, pen_h: int
) -> None:
    """Push overlapping creatures apart and bounce their velocities.

    Pairs overlapping by more than ``OVERLAP_STACK_THRESHOLD`` of a sprite's
    area are left alone. All positions are then clamped to the pen.
    """
    slots = list(slots)
    half_w = sprite_w / 2.0
    half_h = sprite_h / 2.0
    sprite_area = float(sprite_w) * sprite_h

    for a, b in itertools.combinations(slots, 2):
        overlap_x = min(a.pos_x + sprite_w, b.pos_x + sprite_w) - max(a.pos_x, b.pos_x)
        overlap_y = min(a.pos_y + sprite_h, b.pos_y + sprite_h) - max(a.pos_y, b.pos_y)
        if overlap_x <= 0.0 or overlap_y <= 0.0:
            continue
        if sprite_area > 0 and (overlap_x * overlap_y) / sprite_area > OVERLAP_STACK_THRESHOLD:
            continue

        push = max(overlap_x, overlap_y) / 2.0 + 0.01
        if overlap_x > overlap_y:
            b_is_right = b.pos_x + half_w >= a.pos_x + half_w
            if b_is_right:
                a.pos_x -= push
                b.pos_x += push
                a.vel_x = -abs(a.vel_x)
                b.vel_x = abs(b.vel_x)
            else:
                a.pos_x += push
                b.pos_x -= push
                a.vel_x = abs(a.vel_x)
                b.vel_x = -abs(b.vel_x)
        else:
            b_is_below = b.pos_y + half_h >= a.pos_y + half_h
            if b_is_below:
                a.pos_y -= push
                b.pos_y += push
                a.vel_y = -abs(a.vel_y)
                b.vel_y = abs(b.vel_y)
            else:
                a.pos_y += push
                b.pos_y -= push
                a.vel_y = abs(a.vel_y)
                b.vel_y = -abs(b.vel_y)

        debug_log(
            f"collision i={a.creature_id} j={b.creature_id} ox={overlap_x:.2f} "
            f"oy={overlap_y:.2f} dir_i={a.current_dir.as_index()} "
            f"dir_j={b.current_dir.as_index()} vix={a.vel_x:.3f} viy={a.vel_y:.3f} "
            f"vjx={b.vel_x:.3f} vjy={b.vel_y:.3f}"
        )

    max_x = max(float(pen_w) - sprite_w, 0.0)
    max_y = max(float(pen_h) - sprite_h, 0.0)
    for slot in slots:
        slot.pos_x = min(max(slot.pos_x, 0.0), max_x)
        slot.pos_y = min(max(slot.pos_y, 0.0), max_y)