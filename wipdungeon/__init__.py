"""Game logic for a small grid-based dungeon crawler: dungeon files, input, events, menus and rules."""

__version__ = "0.1.0"