"""Menus: a header, a list of items and the current selection."""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = [
    "MenuItem",
    "Menu",
    "MainMenuItem",
    "PauseMenuItem",
    "main_menu",
    "pause_menu",
]


class MainMenuItem(enum.IntEnum):
    NEW_GAME = 0
    LOAD_GAME = 1
    CREDITS = 2
    QUIT_GAME = 3


class PauseMenuItem(enum.IntEnum):
    CONTINUE = 0
    NEW_GAME = 1
    SAVE_GAME = 2
    LOAD_GAME = 3
    QUIT_GAME = 4


@dataclass(frozen=True)
class MenuItem:
    """One entry of a menu with an optional description."""

    id: int
    name: str
    desc: str | None = None


@dataclass
class Menu:
    """A menu whose selection wraps around at both ends."""

    header: str
    items: tuple[MenuItem, ...]
    selected: int = 0

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("a menu needs at least one item")
        self.items = tuple(self.items)
        self.selected %= len(self.items)

    def move(self, delta: int) -> int:
        """Move the selection by ``delta`` items and return the new index."""
        self.selected = (self.selected + delta) % len(self.items)
        return self.selected

    def reset(self) -> None:
        """Select the first item again."""
        self.selected = 0


def main_menu() -> Menu:
    """The title-screen menu."""
    return Menu(
        "Dungeon",
        (
            MenuItem(MainMenuItem.NEW_GAME, "New Game", "Start a new game"),
            MenuItem(MainMenuItem.LOAD_GAME, "Load Game", "Load a saved game"),
            MenuItem(MainMenuItem.CREDITS, "Credits", "Show game credits"),
            MenuItem(MainMenuItem.QUIT_GAME, "Quit Game", None),
        ),
    )


def pause_menu() -> Menu:
    """The menu shown while a game is paused."""
    return Menu(
        "Paused",
        (
            MenuItem(PauseMenuItem.CONTINUE, "Continue", "Continue current game"),
            MenuItem(PauseMenuItem.NEW_GAME, "New Game", "Start a new game"),
            MenuItem(PauseMenuItem.SAVE_GAME, "Save Game", "Save your progress"),
            MenuItem(PauseMenuItem.LOAD_GAME, "Load Game", "Load a saved game"),
            MenuItem(PauseMenuItem.QUIT_GAME, "Quit Game", None),
        ),
    )