"""Game configuration: TOML roster files, validation and persistence."""

from __future__ import annotations

import os
import random
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol

import tomli_w

MAX_ACTIVE_CREATURES = 6
DEFAULT_SCALE = 3
CONFIG_FILE_NAME = "pocpen.toml"
DEFAULT_CREATURES = ("bulbasaur", "charmander", "squirtle")

_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")

_DEFAULT_ROSTER = (
    (1, "Bulbasaur"),
    (4, "Charmander"),
    (7, "Squirtle"),
    (25, "Pikachu"),
    (133, "Eevee"),
)


class _Creature(Protocol):
    id: int
    name: str


FindById = Callable[[int], "_Creature | None"]
FindByName = Callable[[str], "_Creature | None"]


class ConfigError(Exception):
    """Raised when a config file cannot be read, parsed, validated or written."""


def _new_slot_id() -> int:
    return random.getrandbits(64)


def _parse_error(message: str) -> ConfigError:
    return ConfigError(f"Failed to parse config: {message}")


def _validation_error(message: str) -> ConfigError:
    return ConfigError(f"Validation error: {message}")


def _table(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise _parse_error(f"'{where}' must be a table")
    return value


def _unsigned(value: Any, where: str, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise _parse_error(f"'{where}' must be an unsigned integer no larger than {maximum}")
    return value


def _string(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise _parse_error(f"'{where}' must be a string")
    return value


def _required(table: dict[str, Any], key: str, where: str) -> Any:
    if key not in table:
        raise _parse_error(f"missing field '{key}' in '{where}'")
    return table[key]


def _parse_u32(text: str) -> int | None:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _U32_MAX else None


def _toml_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass
class SlotEntry:
    """One ``[[slot]]`` entry of the config file."""

    id: int
    slot_id: int
    name: str
    level: int = 0
    xp: int = 0

    @classmethod
    def _from_table(cls, table: dict[str, Any]) -> SlotEntry:
        return cls(
            id=_unsigned(_required(table, "id", "slot"), "slot.id", _U32_MAX),
            slot_id=_unsigned(_required(table, "slot_id", "slot"), "slot.slot_id", _U64_MAX),
            name=_string(_required(table, "name", "slot"), "slot.name"),
            level=_unsigned(table.get("level", 0), "slot.level", _U32_MAX),
            xp=_unsigned(table.get("xp", 0), "slot.xp", _U32_MAX),
        )

    def _to_table(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slot_id": self.slot_id,
            "name": self.name,
            "level": self.level,
            "xp": self.xp,
        }


@dataclass
class DisplayConfig:
    """The ``[display]`` section."""

    scale: int = DEFAULT_SCALE


@dataclass
class RosterConfig:
    """The legacy ``[roster]`` section: creature names or Pokédex numbers."""

    creatures: list[str] = field(default_factory=lambda: list(DEFAULT_CREATURES))


@dataclass
class TomlConfig:
    """The raw config file contents.

    When ``slot`` is non-empty it takes precedence over ``roster.creatures``.
    """

    display: DisplayConfig = field(default_factory=DisplayConfig)
    roster: RosterConfig = field(default_factory=RosterConfig)
    slot: list[SlotEntry] = field(default_factory=list)

    @classmethod
    def from_str(cls, text: str) -> TomlConfig:
        """Parse TOML text, filling in defaults for missing sections and fields."""
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise _parse_error(str(exc)) from exc

        display = DisplayConfig()
        if "display" in data:
            table = _table(data["display"], "display")
            display.scale = _unsigned(table.get("scale", DEFAULT_SCALE), "display.scale", _U32_MAX)

        roster = RosterConfig()
        if "roster" in data:
            table = _table(data["roster"], "roster")
            if "creatures" in table:
                creatures = table["creatures"]
                if not isinstance(creatures, list):
                    raise _parse_error("'roster.creatures' must be an array")
                roster.creatures = [_string(c, "roster.creatures") for c in creatures]

        slots: list[SlotEntry] = []
        if "slot" in data:
            entries = data["slot"]
            if not isinstance(entries, list):
                raise _parse_error("'slot' must be an array of tables")
            slots = [SlotEntry._from_table(_table(e, "slot")) for e in entries]

        return cls(display=display, roster=roster, slot=slots)

    def to_toml(self) -> str:
        """Serialise this config as TOML text."""
        doc: dict[str, Any] = {
            "display": {"scale": self.display.scale},
            "roster": {"creatures": list(self.roster.creatures)},
        }
        if self.slot:
            doc["slot"] = [entry._to_table() for entry in self.slot]
        return tomli_w.dumps(doc)


@dataclass
class RosterSlot:
    """A resolved roster entry with its persisted progress."""

    creature_id: int
    name: str
    slot_id: int
    level: int = 1
    xp: int = 0


@dataclass
class GameConfig:
    """Validated game configuration."""

    scale: int
    roster: list[RosterSlot]

    @classmethod
    def default(cls) -> GameConfig:
        """The built-in five-creature roster at scale 3."""
        return cls(
            scale=DEFAULT_SCALE,
            roster=[RosterSlot(cid, name, _new_slot_id()) for cid, name in _DEFAULT_ROSTER],
        )

    @classmethod
    def load(
        cls, path: str | os.PathLike[str], find_by_id: FindById, find_by_name: FindByName
    ) -> GameConfig:
        """Read, parse and validate a config file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Failed to read config file: {exc}") from exc
        return cls.from_toml(TomlConfig.from_str(text), find_by_id, find_by_name)

    @classmethod
    def load_default(cls, find_by_id: FindById, find_by_name: FindByName) -> GameConfig:
        """Load the default config file, creating it with defaults if absent."""
        path = default_config_path()
        if path.exists():
            return cls.load(path, find_by_id, find_by_name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(TomlConfig().to_toml(), encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to read config file: {exc}") from exc
        return cls.default()

    @classmethod
    def from_creature_name(cls, name: str, find_by_name: FindByName) -> GameConfig:
        """A single-creature config for a command-line override."""
        creature = find_by_name(name)
        if creature is None:
            raise _validation_error(f"Unknown creature: '{name}'")
        return cls(
            scale=DEFAULT_SCALE,
            roster=[RosterSlot(creature.id, creature.name, _new_slot_id())],
        )

    @classmethod
    def from_toml(
        cls, toml: TomlConfig, find_by_id: FindById, find_by_name: FindByName
    ) -> GameConfig:
        """Validate a parsed config and resolve its creatures."""
        if toml.slot:
            if len(toml.slot) > MAX_ACTIVE_CREATURES:
                raise _validation_error(
                    f"Maximum {MAX_ACTIVE_CREATURES} creatures allowed in roster"
                )
            roster = []
            for entry in toml.slot:
                creature = find_by_id(entry.id)
                if creature is None:
                    raise _validation_error(f"Unknown creature ID: {entry.id}")
                roster.append(
                    RosterSlot(
                        creature_id=creature.id,
                        name=creature.name,
                        slot_id=entry.slot_id or _new_slot_id(),
                        level=entry.level or 1,
                        xp=entry.xp,
                    )
                )
            return cls(scale=toml.display.scale, roster=roster)

        creatures = toml.roster.creatures
        if len(creatures) > MAX_ACTIVE_CREATURES:
            raise _validation_error(f"Maximum {MAX_ACTIVE_CREATURES} creatures allowed in roster")
        if not creatures:
            raise _validation_error("Roster must contain at least one creature")

        roster = []
        for entry in creatures:
            number = _parse_u32(entry)
            if number is not None:
                creature = find_by_id(number)
                if creature is None:
                    raise _validation_error(f"Unknown creature ID: {number}")
            else:
                creature = find_by_name(entry)
                if creature is None:
                    raise _validation_error(f"Unknown creature: '{entry}'")
            roster.append(RosterSlot(creature.id, creature.name, _new_slot_id()))
        return cls(scale=toml.display.scale, roster=roster)

    @staticmethod
    def save(path: str | os.PathLike[str], scale: int, slots: Iterable[Any]) -> None:
        """Write ``[display]`` and one ``[[slot]]`` per creature slot to ``path``."""
        lines = ["[display]", f"scale = {scale}"]
        for slot in slots:
            lines += [
                "",
                "[[slot]]",
                f"id = {slot.creature_id}",
                f"slot_id = {slot.slot_id}",
                f"name = {_toml_string(slot.creature_name)}",
                f"level = {slot.level}",
                f"xp = {slot.xp}",
            ]
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to read config file: {exc}") from exc


def default_config_path() -> Path:
    """``$HOME/.config/pocpen.toml``, or relative to the working directory without HOME."""
    home = os.environ.get("HOME")
    base = Path(home) if home else Path(".")
    return base / ".config" / CONFIG_FILE_NAME