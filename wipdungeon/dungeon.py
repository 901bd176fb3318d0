"""Dungeon map format, rooms, entities and game state."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .fn import parse_int, parse_uint, read_file

__all__ = [
    "Direction",
    "TileType",
    "Tile",
    "Deco",
    "Room",
    "Dungeon",
    "EntityType",
    "Entity",
    "Player",
    "State",
    "DungeonError",
    "parse_dungeon",
    "read_dungeon",
    "MSG_MAX",
    "ENT_MAX",
    "SCR_MAX",
    "MDL_MAX",
]

MSG_MAX = 128
ENT_MAX = 512
SCR_MAX = 128
MDL_MAX = 1024

FLOOR_MODEL = "d_floor"
WALL_MODEL = "d_wall"
DOOR_CLOSED_MODEL = "d_door_closed"
DOOR_OPEN_MODEL = "d_door_open"
GATE_MODEL = "d_gate"


class DungeonError(Exception):
    """A dungeon file could not be read."""


class Direction(enum.IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


_DIRECTIONS = {
    "0": Direction.NORTH,
    "1": Direction.EAST,
    "2": Direction.SOUTH,
    "4": Direction.WEST,
    "N": Direction.NORTH,
    "E": Direction.EAST,
    "S": Direction.SOUTH,
    "W": Direction.WEST,
    "^": Direction.NORTH,
    ">": Direction.EAST,
    "v": Direction.SOUTH,
    "<": Direction.WEST,
}


def _direction(char: str) -> Direction:
    return _DIRECTIONS.get(char, Direction.NORTH)


class TileType(enum.IntEnum):
    FLOOR = 0
    WALL = 1
    DOOR = 2
    GATE = 3


@dataclass
class Tile:
    """A map cell; ``id`` is a key id for doors and a room id for gates."""

    type: TileType = TileType.FLOOR
    id: int = 0
    data: Any = None


@dataclass
class Deco:
    """A model drawn on a cell, facing ``direction``."""

    direction: Direction = Direction.NORTH
    model: str | None = None


@dataclass
class Room:
    width: int = 0
    height: int = 0
    tiles: list[Tile] = field(default_factory=list)
    deco: list[list[Deco] | None] = field(default_factory=lambda: [None])


@dataclass
class Dungeon:
    rooms: list[Room] = field(default_factory=list)
    models: dict[str, str] = field(default_factory=dict)
    messages: dict[int, str | None] = field(default_factory=dict)
    scripts: dict[int, str] = field(default_factory=dict)


class EntityType(enum.IntEnum):
    NONE = 0
    BOOK = 1
    KEY = 2
    HEAL = 3
    COBRA = 4
    SNAKE = 5
    LUA = 6


_ENTITY_LETTERS = {
    "B": EntityType.BOOK,
    "K": EntityType.KEY,
    "H": EntityType.HEAL,
    "C": EntityType.COBRA,
    "S": EntityType.SNAKE,
    "L": EntityType.LUA,
}


@dataclass
class Entity:
    room: int = 0
    type: EntityType = EntityType.NONE
    id: int = 0
    x: int = 0
    y: int = 0
    direction: Direction = Direction.NORTH


@dataclass
class Player:
    x: int = 0
    y: int = 0
    direction: Direction = Direction.NORTH
    health: int = 0


@dataclass
class State:
    dungeon: str = ""
    room: int = 0
    keyring: list[int] = field(default_factory=lambda: [0] * 9)
    entities: list[Entity] = field(default_factory=lambda: [Entity() for _ in range(ENT_MAX)])
    player: Player = field(default_factory=Player)


_SPLIT = re.compile(r"[ \t]+")


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    for line in text.split("\n"):
        if line.startswith("!"):
            continue
        tokens.extend(t for t in _SPLIT.split(line) if t)
    return tokens


def _token(tokens: list[str], index: int) -> str:
    if index >= len(tokens):
        raise DungeonError("Unexpected end of dungeon file.")
    return tokens[index]


def _uint(tokens: list[str], index: int, what: str) -> int:
    text = _token(tokens, index)
    try:
        return parse_uint(text)
    except ValueError:
        raise DungeonError(f"Unexpected token: {text}, expected {what} (uint).") from None


def _int(tokens: list[str], index: int, what: str) -> int:
    text = _token(tokens, index)
    try:
        return parse_int(text)
    except ValueError:
        raise DungeonError(f"Unexpected token: {text}, expected {what} (int).") from None


def _ensure_room(dungeon: Dungeon, room_id: int) -> Room:
    while len(dungeon.rooms) <= room_id:
        dungeon.rooms.append(Room())
    return dungeon.rooms[room_id]


def _layer(room: Room, index: int) -> list[Deco]:
    size = room.width * room.height
    layer = room.deco[index]
    if layer is None or len(layer) < size:
        layer = [Deco() for _ in range(size)]
        room.deco[index] = layer
    return layer


def _cells(tokens: list[str], start: int, room: Room) -> list[str]:
    size = room.width * room.height
    if start + size > len(tokens):
        raise DungeonError("Unexpected end of dungeon file.")
    return tokens[start:start + size]


def _read_room(tokens: list[str], start: int, room: Room) -> int:
    cells = _cells(tokens, start, room)
    room.tiles = [Tile() for _ in cells]
    base = _layer(room, 0)
    for token, tile, deco in zip(cells, room.tiles, base):
        kind = token[0]
        deco.direction = Direction.NORTH
        if kind == "-":
            tile.type = TileType.FLOOR
            deco.model = FLOOR_MODEL
        elif kind == "#":
            tile.type = TileType.WALL
            deco.model = WALL_MODEL
        elif kind == "D":
            tile.type = TileType.DOOR
            tile.data = DOOR_OPEN_MODEL
            try:
                tile.id = parse_uint(token[1:])
            except ValueError:
                raise DungeonError(
                    f"Unexpected token: {token[1:]}, expected key id (uint)."
                ) from None
            deco.model = DOOR_OPEN_MODEL if tile.id == 0 else DOOR_CLOSED_MODEL
        elif kind == "G":
            tile.type = TileType.GATE
            deco.model = GATE_MODEL
            try:
                tile.id = parse_uint(token[1:])
            except ValueError:
                raise DungeonError(
                    f"Unexpected token: {token[1:]}, expected room id (uint)."
                ) from None
        else:
            raise DungeonError(f"Unknown tile: {token}.")
    return len(cells)


_BUILTIN_DECO = {
    "-": FLOOR_MODEL,
    "#": WALL_MODEL,
    "D": DOOR_CLOSED_MODEL,
    "G": GATE_MODEL,
}


def _read_deco(tokens: list[str], start: int, room: Room, layer: int, models: dict[str, str]) -> int:
    cells = _cells(tokens, start, room)
    target = _layer(room, layer)
    base = _layer(room, 0)
    for token, deco, ground in zip(cells, target, base):
        kind = token[0]
        if kind == "=" and layer == 0:
            pass
        elif kind in ("=", "."):
            deco.model = None
        elif kind in _BUILTIN_DECO:
            deco.model = _BUILTIN_DECO[kind]
            ground.direction = Direction.NORTH
        elif kind in models:
            deco.model = models[kind]
        else:
            raise DungeonError(f"Unknown deco: {token}.")
        if token[1:2] != kind:
            deco.direction = _direction(token[1:2])
    return len(cells)


def _gather(tokens: list[str], dungeon: Dungeon) -> None:
    """First pass: create rooms and layers, load models, messages and scripts."""
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == "room":
            _ensure_room(dungeon, _uint(tokens, i + 1, "room id"))
            i += 4
        elif token == "deco":
            room = _ensure_room(dungeon, _uint(tokens, i + 1, "room id"))
            layer = _uint(tokens, i + 2, "layer")
            if layer >= len(room.deco):
                room.deco.extend([None] * (layer + 1 - len(room.deco)))
            i += 3
        elif token == "model" and len(letter := _token(tokens, i + 1)) == 1 and "A" < letter < "Z":
            dungeon.models[letter] = _token(tokens, i + 2)
            i += 2
        elif token == "player":
            i += 4
        elif token == "entity":
            i += 6
        elif token == "msg":
            msg_id = _uint(tokens, i + 1, "message id")
            if msg_id >= MSG_MAX:
                raise DungeonError(f"Message id {msg_id} is out of range.")
            try:
                dungeon.messages[msg_id] = read_file(_token(tokens, i + 2))
            except OSError:
                dungeon.messages[msg_id] = None
            i += 2
        elif token == "script":
            script_id = _uint(tokens, i + 1, "script id")
            if script_id >= SCR_MAX:
                raise DungeonError(f"Script id {script_id} is out of range.")
            dungeon.scripts[script_id] = _token(tokens, i + 2)
            i += 2
        i += 1


def _build(tokens: list[str], dungeon: Dungeon, state: State) -> None:
    """Second pass: fill rooms and decorations, place the player and entities."""
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == "room":
            room = dungeon.rooms[_uint(tokens, i + 1, "room id")]
            room.width = _uint(tokens, i + 2, "width")
            room.height = _uint(tokens, i + 3, "height")
            start = i + 4
            i = start + _read_room(tokens, start, room)
            continue
        if token == "deco":
            room = dungeon.rooms[_uint(tokens, i + 1, "room id")]
            layer = _uint(tokens, i + 2, "layer")
            start = i + 3
            i = start + _read_deco(tokens, start, room, layer, dungeon.models)
            continue
        if token == "model":
            i += 2
        elif token == "player":
            room_id = _uint(tokens, i + 1, "room id")
            if room_id < len(dungeon.rooms):
                state.room = room_id
            state.player.x = _int(tokens, i + 2, "X pos")
            state.player.y = _int(tokens, i + 3, "Y pos")
            state.player.direction = _direction(_token(tokens, i + 4)[0])
            i += 4
        elif token == "entity":
            entity = next((e for e in state.entities if e.type == EntityType.NONE), None)
            if entity is None:
                raise DungeonError("No free entity slot.")
            kind = _ENTITY_LETTERS.get(_token(tokens, i + 1)[0])
            if kind is not None:
                entity.type = kind
            entity.id = _int(tokens, i + 2, "entity id")
            entity.room = _uint(tokens, i + 3, "room id")
            entity.x = _int(tokens, i + 4, "X pos")
            entity.y = _int(tokens, i + 5, "Y pos")
            entity.direction = _direction(_token(tokens, i + 6)[0])
            i += 6
        elif token in ("msg", "script"):
            i += 2
        else:
            raise DungeonError(f"Unknown token: {token}.")
        i += 1


def parse_dungeon(text: str, state: State, name: str = "") -> Dungeon:
    """Parse dungeon text, resetting the player in ``state`` and adding entities to it."""
    tokens = _tokenize(text)
    state.dungeon = name
    state.room = 0
    state.player.x = 0
    state.player.y = 0
    state.player.direction = Direction.NORTH

    dungeon = Dungeon()
    _gather(tokens, dungeon)
    _build(tokens, dungeon, state)
    if not dungeon.rooms:
        raise DungeonError("No found rooms in dungeon.")
    return dungeon


def read_dungeon(path: str | Path, state: State) -> Dungeon:
    """Read and parse a dungeon file."""
    try:
        text = read_file(path)
    except OSError as exc:
        raise DungeonError(f"Couldn't open {path}.") from exc
    return parse_dungeon(text, state, str(path))