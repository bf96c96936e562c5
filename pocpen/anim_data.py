"""Parser for sprite-collection AnimData.xml files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

TICK_MS = 50
_U32_MAX = 2**32 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


@dataclass
class AnimInfo:
    """Information about a single animation such as "Idle", "Sleep" or "Eat"."""

    frame_width: int
    frame_height: int
    durations: list[int] = field(default_factory=list)

    def frame_count(self) -> int:
        """Number of frames in this animation."""
        return len(self.durations)

    def total_duration_ms(self) -> int:
        """Duration of one full animation cycle in milliseconds (1 tick = 50 ms)."""
        return sum(d * TICK_MS for d in self.durations)


def _parse_u32(text: str) -> int | None:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _U32_MAX else None


def _extract_tag_value(block: str, tag: str) -> str | None:
    """Return the trimmed text of the first ``<tag>...</tag>`` in ``block``."""
    open_tag = f"<{tag}>"
    close_tag = f"</{tag}>"
    start = block.find(open_tag)
    if start < 0:
        return None
    start += len(open_tag)
    end = block.find(close_tag, start)
    if end < 0:
        return None
    return block[start:end].strip()


def _extract_durations(block: str) -> list[int]:
    durations = []
    for part in block.split("<Duration>")[1:]:
        end = part.find("</Duration>")
        if end < 0:
            continue
        value = _parse_u32(part[:end].strip())
        if value is not None:
            durations.append(value)
    return durations


def parse_anim_data(xml: str) -> dict[str, AnimInfo]:
    """Parse AnimData.xml text into a mapping of animation name to ``AnimInfo``.

    Blocks missing a name, a valid frame size, or any durations are skipped.
    """
    result: dict[str, AnimInfo] = {}
    for anim_block in xml.split("<Anim>")[1:]:
        block = anim_block.split("</Anim>", 1)[0]

        name = _extract_tag_value(block, "Name")
        if name is None:
            continue

        width_text = _extract_tag_value(block, "FrameWidth")
        frame_width = _parse_u32(width_text) if width_text is not None else None
        if frame_width is None:
            continue

        height_text = _extract_tag_value(block, "FrameHeight")
        frame_height = _parse_u32(height_text) if height_text is not None else None
        if frame_height is None:
            continue

        durations = _extract_durations(block)
        if not durations:
            continue

        result[name] = AnimInfo(frame_width, frame_height, durations)
    return result