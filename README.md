# pocpen

The engine behind a small idle "pet pen" game. A handful of creatures wander
around a rectangular pen, bounce off the walls and off each other, eat, sleep
and play, and slowly level up while they do. This package holds the parts
that don't depend on any particular terminal: sprite animation metadata,
frame timing, movement physics, XP accrual and the roster configuration file.

Requires Python 3.11 or later; the only third-party dependency is `tomli-w`.

## Animation metadata (`pocpen.anim_data`)

Sprite sheets come with an `AnimData.xml` description. `parse_anim_data`
turns it into a dict from animation name to `AnimInfo`:

```python
from pocpen.anim_data import parse_anim_data

anims = parse_anim_data(xml_text)
idle = anims["Idle"]
idle.frame_width, idle.frame_height   # size of one frame in pixels
idle.durations                        # per-frame durations in ticks
idle.frame_count()                    # number of frames
idle.total_duration_ms()              # one full cycle; 1 tick = 50 ms
```

Blocks that lack a name, a valid frame width or height, or any durations are
skipped rather than reported as errors.

## Frame timing (`pocpen.animation`)

`Animation` holds per-frame durations only; no pixels. `Animator` tracks the
creature's current `AnimationState` (`IDLE`, `EATING`, `SLEEPING`,
`PLAYING`) and tells you which frame to draw now.

```python
from pocpen.animation import Animation, AnimationState, Animator

walk = Animation(3, [2, 2, 2])    # three frames, 100 ms each
walk.frame_index_at(250)          # -> 2, looping forever

animator = Animator()
animator.load_animations(idle=walk, eat=walk, sleep=walk)
animator.set_hop_animation(walk)  # optional; PLAYING falls back to idle timing
animator.set_state(AnimationState.EATING)
animator.state                    # AnimationState.EATING
animator.current_frame_index()    # None until timing for the state is loaded
```

`set_state` restarts the timer only when the state actually changes.
`AnimationState.encoded_index()` gives the sprite-set index of a state
(0 idle, 1 eat, 2 sleep, 4 playing; 3 is kept for a recall effect).

## Creatures and the pen (`pocpen.creature`)

`CreatureSlot` is one creature in the pen: position, velocity, facing
`Direction`, level and XP. Each game tick is 50 ms.

```python
from pocpen.creature import CreatureSlot, SPRITE_W, SPRITE_H, resolve_collisions, sprite_stack_h

slot = CreatureSlot(25, "Pikachu")
slot.update_position(pen_w, pen_h, SPRITE_W, SPRITE_H, is_moving=True)
new_level = slot.tick_xp()        # the new level on a level-up, otherwise None
```

XP is earned only while eating or playing: 2 XP/s for the first 10 seconds of
a session, 1 XP/s up to 40 seconds, then nothing. Reaching `50 * level` XP
raises the level and resets XP to zero. The session clock is
`slot.anim_active_secs`; reset it to `0.0` when the creature leaves an
XP-earning state.

`update_position` picks a new random heading every 2–8 seconds, pauses for
1–2 seconds when the heading's direction changes, and bounces off the pen
walls (leaving room below for a name plate of `LABEL_H` rows). Each slot has
its own `random.Random` in `slot.rng`, which you can seed for reproducible
movement.

`resolve_collisions(slots, sprite_w, sprite_h, pen_w, pen_h)` pushes
overlapping creatures apart along the axis of greater overlap, bounces their
velocities, leaves heavily stacked pairs alone, and clamps everyone inside
the pen. `sprite_stack_h(sprite_h)` gives the height of a sprite plus its
name plate. `maybe_update_facing_from_velocity(slot)` turns an idle,
walking creature to face where it is going. `velocity_to_dir` and
`stable_velocity_to_dir` map velocities to a `Direction`.

`SpriteCache` is a plain container for per-direction frames of each
animation and their encoded forms; it holds whatever objects you put in it.

Setting the environment variable `POCPEN_DEBUG_LOG` to a file path makes
`debug_log` append timestamped movement and collision events to that file.

## Configuration (`pocpen.config`)

The roster lives in a TOML file, by default `$HOME/.config/pocpen.toml`
(`default_config_path()`):

```toml
[display]
scale = 3

[[slot]]
id = 25
slot_id = 8675309
name = "Pikachu"
level = 3
xp = 42
```

The older form, `[roster] creatures = ["pikachu", "25"]`, is still read when
there are no `[[slot]]` entries. Rosters hold at most six creatures
(`MAX_ACTIVE_CREATURES`).

The package carries no creature database, so the loading functions take the
lookups to validate against. `find_by_id(int)` and `find_by_name(str)` must
return an object with `id` and `name` attributes, or `None`:

```python
from pocpen.config import GameConfig, TomlConfig

config = GameConfig.load("pen.toml", find_by_id, find_by_name)
config = GameConfig.from_toml(TomlConfig.from_str(text), find_by_id, find_by_name)
config = GameConfig.from_creature_name("eevee", find_by_name)
config = GameConfig.load_default(find_by_id, find_by_name)
```

`load_default` writes a default file (`TomlConfig().to_toml()`) if none
exists and returns `GameConfig.default()`, a five-creature roster at scale 3.
Unknown creatures, empty or oversized rosters, malformed TOML and unreadable
or unwritable files raise `ConfigError`. A `slot_id` of 0 is replaced with a
fresh random id and a `level` of 0 becomes 1.

`GameConfig.save(path, scale, slots)` writes the roster back in the
`[[slot]]` form; each slot needs `creature_id`, `slot_id`, `creature_name`,
`level` and `xp` attributes, as `CreatureSlot` has.

## Command-line options (`pocpen.cli`)

`parse_args(argv)` parses `--config PATH` / `-c PATH`, `--creature NAME` /
`-n NAME` and `--version` into an `argparse.Namespace` with `config` (a
`Path` or `None`) and `creature` attributes.

## What this package does not do

There is no runnable game here and no installed command: nothing draws the
pen on a terminal, reads the keyboard, downloads or decodes sprite sheets, or
runs the tick loop. The package also has no list of creatures; you supply the
`find_by_id` and `find_by_name` lookups. It provides the pieces such a
program is built from.