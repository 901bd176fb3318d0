"""Key codes, a key event queue and named motions bound to keys."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass
from typing import Iterable

from .conf import Config

__all__ = [
    "Key",
    "KeyAction",
    "KeyEvent",
    "MotionType",
    "Motion",
    "KeyQueue",
    "InputMap",
    "find_key",
    "KEY_END",
    "DUNGEON_KEY_BUFFER",
    "FLIPDOT_KEY_BUFFER",
    "DUNGEON_MOTIONS",
    "FLIPDOT_MOTIONS",
]


class Key(enum.IntEnum):
    """Engine key codes; letters use their lower-case character code."""

    UNKNOWN = 0
    KP_NUM_LOCK = 1
    KP = 2
    KP_ENTER = 4
    BACKSPACE = 8
    TAB = 9
    PRINT_SCREEN = 10
    SCROLL_LOCK = 11
    PAUSE = 12
    ENTER = 13
    L_CTRL = 14
    L_SHIFT = 15
    L_GUI = 16
    L_ALT = 17
    R_CTRL = 18
    R_SHIFT = 19
    R_GUI = 20
    R_ALT = 21
    INSERT = 22
    HOME = 23
    END = 24
    PAGEUP = 25
    PAGEDOWN = 26
    ESCAPE = 27
    RIGHT = 28
    LEFT = 29
    DOWN = 30
    UP = 31
    SPACE = 32
    CAPS_LOCK = 65
    MENU = 90
    DELETE = 127
    LOCKED = 255
    # Alternative names.
    BS = 8
    PRINT = 10
    SCROLL = 11
    RETURN = 13
    CTRL = 14
    SHIFT = 15
    GUI = 16
    ALT = 17
    ESC = 27
    R = 28
    L = 29
    D = 30
    U = 31
    SPACEBAR = 32
    NUM = 48
    NUMBER = 48
    CAPS = 65
    F = 65
    FUNCTION = 65
    ALPHA = 97
    DEL = 127
    KP_NUM = 128
    KP_NUM_LAST = 137


KEY_END = 138

_PRIMARY_NAMES = (
    "UNKNOWN", "KP_NUM_LOCK", "KP", "KP_ENTER", "BACKSPACE", "TAB",
    "PRINT_SCREEN", "SCROLL_LOCK", "PAUSE", "ENTER", "L_CTRL", "L_SHIFT",
    "L_GUI", "L_ALT", "R_CTRL", "R_SHIFT", "R_GUI", "R_ALT", "INSERT",
    "HOME", "END", "PAGEUP", "PAGEDOWN", "ESCAPE", "RIGHT", "LEFT", "DOWN",
    "UP", "SPACE", "CAPS_LOCK", "MENU", "DELETE", "LOCKED",
)
# Only names whose code falls below KEY_END can be looked up.
_KEY_BY_NAME = {name: Key[name] for name in _PRIMARY_NAMES if Key[name] < KEY_END}

DUNGEON_KEY_BUFFER = 16
FLIPDOT_KEY_BUFFER = 8


def find_key(name: str) -> int:
    """Key code for a key name or single letter; UNKNOWN if there is none."""
    if len(name) == 1:
        if "A" <= name <= "Z":
            return ord(name.lower())
        if "a" <= name <= "z":
            return ord(name)
        return Key.UNKNOWN
    return _KEY_BY_NAME.get(name, Key.UNKNOWN)


class KeyAction(enum.IntEnum):
    NONE = 0
    PRESS = 1
    RELEASE = 2


@dataclass(frozen=True)
class KeyEvent:
    """A key being pressed or released."""

    action: KeyAction
    key: int


class MotionType(enum.IntEnum):
    """How a motion reacts to its key."""

    ONCE = 0
    ONCE_PRESS = 0
    ONCE_RELEASE = 1
    HOLD = 2


@dataclass
class Motion:
    """A named game action bound to a key."""

    name: str
    type: MotionType
    key: int
    state: bool = False


DUNGEON_MOTIONS = (
    ("UP", MotionType.ONCE, Key.UP),
    ("DOWN", MotionType.ONCE, Key.DOWN),
    ("LEFT", MotionType.ONCE, Key.LEFT),
    ("RIGHT", MotionType.ONCE, Key.RIGHT),
    ("USE", MotionType.ONCE, Key.ENTER),
    ("HELP", MotionType.ONCE, ord("h")),
    ("ESC", MotionType.ONCE, Key.ESC),
)

FLIPDOT_MOTIONS = (
    ("UP", MotionType.ONCE, Key.UP),
    ("DOWN", MotionType.ONCE, Key.DOWN),
    ("LEFT", MotionType.ONCE, Key.LEFT),
    ("RIGHT", MotionType.ONCE, Key.RIGHT),
    ("EVENT", MotionType.ONCE, Key.SPACE),
    ("QUIT", MotionType.ONCE, ord("q")),
)


class KeyQueue:
    """Ring buffer of key events; holds one fewer event than its size."""

    def __init__(self, size: int = DUNGEON_KEY_BUFFER) -> None:
        if size < 2:
            raise ValueError("size must be at least 2")
        self._capacity = size - 1
        self._events: deque[KeyEvent] = deque()
        self.locked = False

    def __len__(self) -> int:
        return len(self._events)

    def write(self, event: KeyEvent) -> bool:
        """Queue an event; False if the queue is full and it was dropped."""
        if len(self._events) >= self._capacity:
            return False
        self._events.append(event)
        return True

    def read(self) -> KeyEvent:
        """Next event; a NONE action signals an empty or locked queue."""
        if self.locked:
            return KeyEvent(KeyAction.NONE, Key.LOCKED)
        if not self._events:
            return KeyEvent(KeyAction.NONE, Key.UNKNOWN)
        return self._events.popleft()


class InputMap:
    """Motions and the keys that drive them."""

    def __init__(self, motions: Iterable[tuple[str, MotionType, int]] = DUNGEON_MOTIONS) -> None:
        self.motions = [Motion(name, kind, key) for name, kind, key in motions]
        self._by_key: dict[int, Motion] = {m.key: m for m in self.motions}
        self.locked = False

    def _motion(self, name: str) -> Motion:
        for motion in self.motions:
            if motion.name == name:
                return motion
        raise KeyError(name)

    def clear(self) -> None:
        """Reset every motion's state."""
        for motion in self.motions:
            motion.state = False

    def find(self, name: str) -> int:
        """Index of the motion called ``name``, or 0 if there is none."""
        return next((i for i, m in enumerate(self.motions) if m.name == name), 0)

    def read(self, name: str) -> bool:
        """Whether the motion is active; one-shot motions are reset by reading."""
        if self.locked:
            return False
        motion = self._motion(name)
        state = motion.state
        if motion.type in (MotionType.ONCE_PRESS, MotionType.ONCE_RELEASE):
            motion.state = False
        return state

    def write(self, event: KeyEvent) -> bool:
        """Apply a key event; False if no motion is bound to the key."""
        if event.key == Key.LOCKED:
            return True
        motion = self._by_key.get(event.key)
        if motion is None:
            return False
        if motion.type == MotionType.HOLD:
            if event.action == KeyAction.RELEASE:
                motion.state = False
            if event.action == KeyAction.PRESS:
                motion.state = True
        elif motion.type == MotionType.ONCE_PRESS:
            if event.action == KeyAction.PRESS:
                motion.state = True
        elif motion.type == MotionType.ONCE_RELEASE:
            if event.action == KeyAction.RELEASE:
                motion.state = True
        return True

    def bind(self, name: str, key: int) -> None:
        """Bind the motion called ``name`` to ``key``."""
        motion = self._motion(name)
        self._by_key.pop(motion.key, None)
        self._by_key[key] = motion
        motion.key = key

    def load_bindings(self, config: Config) -> None:
        """Rebind motions from ``keys.<NAME>`` string settings."""
        for motion in self.motions:
            path = f"keys.{motion.name}"
            if config.find_str(path):
                self.bind(motion.name, find_key(config.get_str(path)))