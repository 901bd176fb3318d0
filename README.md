# wipdungeon

The game logic of a small grid-based dungeon crawler. A player walks through
rooms made of tiles. The player opens locked doors with keys, passes through
gates, picks up books, keys and potions, and fights snakes and cobras.

## Modules

- `wipdungeon.dungeon` reads the plain-text dungeon format.
  - `read_dungeon(path, state)` reads a file and `parse_dungeon(text, state, name)`
    reads text. Each returns a `Dungeon` and fills the given `State` with the
    player's start and the entities.
  - Both raise `DungeonError` on malformed input.
  - The format has `room`, `deco`, `model`, `player`, `entity`, `msg` and `script`
    records. Lines starting with `!` are skipped.
  - A `msg` record reads its message text from the file it names.
- `wipdungeon.game` provides `Game`, which applies the rules:
  - moving and using things ahead: `action`, `turn_left`, `turn_right`;
  - enemy turns: `entity_act(chance)`;
  - toasts: `send_toast`;
  - the keyring grid: `keyring_text`;
  - one frame of input: `handle_input`, `update`;
  - saving and loading the state as JSON: `save`, `load`;
  - the main and pause menu choices: `main_menu_choice`, `pause_menu_choice`.

  Randomness comes from an injectable `random.Random` and time from an
  injectable clock. Scripted (`L`) entities are driven by `ScriptHandler`
  objects passed in the `scripts` mapping.
- `wipdungeon.menu` provides `Menu` and `MenuItem`, along with the ready-made
  `main_menu()` and `pause_menu()`. `Menu.move` wraps the selection around, and
  `Menu.reset` selects the first item again.
- `wipdungeon.input` covers keys and motions:
  - key codes: `Key`, `find_key`;
  - a bounded ring buffer of `KeyEvent`s: `KeyQueue`;
  - `InputMap`, which turns key events into named motions such as `UP`, `USE`
    or `ESC`. `InputMap.load_bindings` rebinds motions from `keys.<NAME>`
    settings.
- `wipdungeon.conf` provides `Config`, a parser for libconfig-style text.
  - It has typed lookups by dotted path: `get_int`, `get_float`, `get_str`,
    `get_bool`, each with `find_` and `set_` companions.
  - `config_path` gives the location of the user's file, and `load_config`
    reads that file or falls back to default text.
  - It raises `ConfigError` on a parse error.
- `wipdungeon.event` provides timed `Event`s and easing functions for
  animations: `interpolate`, `ease_linear`, `ease_in`, `ease_out`, `ease_in_out`.
- `wipdungeon.obj` provides `Object` transforms (position, scale and rotation
  quaternion), along with `quat_rotate`, `to_rad` and `to_deg`. `load_object`
  builds a column-major 4×4 model matrix, controlled by `ObjFlags`.
- `wipdungeon.hashmap` provides a fixed-capacity open-addressing `HashMap`
  keyed by the `djb2` string hash.
- `wipdungeon.arg` provides the command-line option handling:
  - `parse_options` handles `-h/--help`, `-V/--version` and `-u/--usage`, and
    returns the first non-option argument.
  - `show_help` and `show_usage` print the help and usage text.
- `wipdungeon.fn` provides small helpers: `log` with `LogType`, `parse_int`,
  `parse_uint`, `read_file` and `sleep`.

## Example

```python
from wipdungeon.event import interpolate, ease_in_out

# Halfway through an eased animation from x=0 to x=10.
x = interpolate(0.0, 10.0, ease_in_out(0.5))
```

```python
from wipdungeon.dungeon import State, read_dungeon

state = State()
dungeon = read_dungeon("res/map/main.df", state)
print(state.room, state.player.x, state.player.y)
```

## What it does not do

The package holds rules and data only. It does not include:

- a window, graphics, text rendering or model and texture loading (model
  names are kept as plain strings);
- a built-in script interpreter;
- a command that starts the game.

To play, drive `Game.update` from your own loop with an `InputMap` and draw
the state yourself.

## Requirements

Python 3.10 or newer. No third-party packages are needed at run time. The
tests use pytest.