"""Idle creature pen engine: animation metadata and timing, movement physics, XP and roster configuration."""

__version__ = "0.4.0"
__all__ = ["anim_data", "animation", "creature", "config", "cli"]