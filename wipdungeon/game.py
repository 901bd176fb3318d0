"""Dungeon game rules: moving, fighting, menus, saving and loading."""

from __future__ import annotations

import json
import math
import random
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol

from .dungeon import (
    ENT_MAX,
    Direction,
    Dungeon,
    Entity,
    EntityType,
    Player,
    Room,
    State,
    TileType,
    read_dungeon,
)
from .event import Event, ease_linear
from .fn import LogType, log
from .input import InputMap
from .menu import MainMenuItem, Menu, PauseMenuItem, main_menu, pause_menu

__all__ = ["Game", "ScriptHandler", "EntityAnim"]

DUNGEON_PATH = "./res/map/main.df"
SAVE_PATH = "./save.bin"
START_HEALTH = 12

WON_MESSAGE = (
    "# YOU WON!\n"
    "\n"
    "You reached the end of the dungeon and slain all foes.\n"
    "This adventure ends here but don't worry, you can\n"
    "always start again. See if you can find any secrets.\n"
)
LOST_MESSAGE = (
    "# YOU LOST!\n"
    "\n"
    "You were defeated by dungeon snakes! Most of your body\n"
    "will soon be devoured and the rest will rot forever in\n"
    "this dungeon... Beter luck next time.\n"
)
HELP_MESSAGE = (
    "# Help\n"
    "## Controls\n"
    "- WIP_UP = Forward/Attack/Use\n"
    "- WIP_LEFT = Turn left\n"
    "- WIP_RIGHT = Turn right\n"
    "- WIP_ENTER = Show inventory\n"
    "- 'H' = Show help message\n"
    "- WIP_ESC = Pause game\n"
)
CREDITS_MESSAGE = (
    "# Credits\n"
    "\n"
    "See the licence file for the authors of this game\n"
    "and of the libraries it uses.\n"
)
LOAD_ERROR = "# Error\n\nFailed to load, check console output.\n"
SAVE_ERROR = "# Error\n\nFailed to save, check console output.\n"


def _save_message(path: str | Path) -> str:
    return (
        "# Save\n"
        "\n"
        f"Your progress has been saved to {path}\n"
        "Keep in mind this file is binary and may or\n"
        "may not load on another system.\n"
    )


class ScriptHandler(Protocol):
    """Behaviour of a scripted entity."""

    def act(self, index: int) -> None: ...

    def action(self, index: int) -> bool: ...


@dataclass
class EntityAnim:
    """Where an entity was before its last move or turn."""

    rotate_event: Event
    move_event: Event
    direction: Direction = Direction.NORTH
    x: int = 0
    y: int = 0


def _ahead(x: int, y: int, direction: int) -> tuple[int, int]:
    return x - abs(direction - 1) + 1, y - abs(direction - 2) + 1


def _with_digit(text: str, index: int, value: int) -> str:
    chars = list(text)
    chars[index] = chr((ord("0") + value) % 256)
    return "".join(chars)


def _state_from_dict(data: Mapping[str, Any]) -> State:
    player = data["player"]
    return State(
        dungeon=str(data["dungeon"]),
        room=int(data["room"]),
        keyring=[int(k) for k in data["keyring"]],
        entities=[
            Entity(
                room=int(e["room"]),
                type=EntityType(e["type"]),
                id=int(e["id"]),
                x=int(e["x"]),
                y=int(e["y"]),
                direction=Direction(e["direction"]),
            )
            for e in data["entities"]
        ],
        player=Player(
            x=int(player["x"]),
            y=int(player["y"]),
            direction=Direction(player["direction"]),
            health=int(player["health"]),
        ),
    )


class Game:
    """Game state and the rules that change it."""

    def __init__(
        self,
        dungeon_path: str | Path = DUNGEON_PATH,
        save_path: str | Path = SAVE_PATH,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
        scripts: Mapping[int, ScriptHandler] | None = None,
    ) -> None:
        self.dungeon_path = dungeon_path
        self.save_path = save_path
        self.clock = clock
        self.rng = rng if rng is not None else random.Random()
        self.scripts: dict[int, ScriptHandler] = dict(scripts or {})
        self.state = State()
        self.dungeon: Dungeon | None = None
        self.message: str | None = None
        self.toast: str | None = None
        self.started = False
        self.paused = False
        self.quit = False
        self.camera_event = self._event()
        self.rotate_event = self._event()
        self.move_event = self._event()
        self.bump_event = self._event()
        self.toast_event = self._event()
        self.attack_event = self._event()
        self.old_pos = (0, 0)
        self.old_dir = Direction.NORTH
        self.entity_anim = [EntityAnim(self._event(), self._event()) for _ in range(ENT_MAX)]
        self.main_menu: Menu = main_menu()
        self.pause_menu: Menu = pause_menu()

    def _event(self) -> Event:
        return Event(clock=self.clock)

    @property
    def room(self) -> Room:
        if self.dungeon is None:
            raise RuntimeError("no game has been started")
        return self.dungeon.rooms[self.state.room]

    def new_game(self) -> None:
        """Start over from the dungeon file."""
        self.state = State()
        self.dungeon = read_dungeon(self.dungeon_path, self.state)
        player = self.state.player
        self.old_pos = (player.x, player.y)
        self.old_dir = player.direction
        self.camera_event.start(0.5)
        self.rotate_event.start(0.5)
        self.move_event.start(0.25)
        self.bump_event.start(0.125)
        self.attack_event.start(0.001)
        self.send_toast("Welcome to the dungeon!")
        player.health = START_HEALTH

    def set_up(self) -> None:
        """Align the animation state with the current game state."""
        player = self.state.player
        self.old_dir = player.direction
        self.old_pos = (player.x, player.y)
        for anim, entity in zip(self.entity_anim, self.state.entities):
            anim.direction = entity.direction
            anim.x, anim.y = entity.x, entity.y
            anim.rotate_event.start(0.5)
            anim.move_event.start(0.5)

    def send_toast(self, text: str) -> None:
        """Show a short message for two seconds."""
        self.toast_event.start(2.0)
        self.toast = text

    @property
    def toast_visible(self) -> bool:
        return self.toast is not None and self.toast_event.part(ease_linear) != 0.0

    def action(self) -> None:
        """Step forward, opening doors, taking gates, picking up or attacking."""
        state = self.state
        player = state.player
        room = self.room
        tx, ty = _ahead(player.x, player.y, player.direction)
        if not (0 <= tx < room.width and 0 <= ty < room.height):
            return
        index = room.width * ty + tx
        tile = room.tiles[index]

        if tile.type == TileType.DOOR and tile.id != 0:
            if state.keyring[tile.id - 1]:
                self.send_toast("Unlocked door")
                room.deco[0][index].model = tile.data
                tile.id = 0
                return
            self.send_toast(_with_digit("This door is locked! You need key X", -1, tile.id))
            self.bump_event.start(0.125)
            return
        if tile.type == TileType.WALL:
            self.bump_event.start(0.125)
            return
        if tile.type == TileType.GATE:
            self._take_gate(tile.id)
            return

        for i, entity in enumerate(state.entities):
            if (
                entity.type == EntityType.NONE
                or entity.room != state.room
                or entity.x != tx
                or entity.y != ty
            ):
                continue
            if entity.type == EntityType.BOOK:
                self.message = self.dungeon.messages.get(entity.id)
                entity.type = EntityType.NONE
            elif entity.type == EntityType.KEY:
                self.send_toast(_with_digit("You found key X", -1, entity.id))
                state.keyring[entity.id - 1] = 1
                entity.type = EntityType.NONE
            elif entity.type == EntityType.HEAL:
                self.send_toast("The potion refreshes your body")
                player.health += entity.id
                entity.type = EntityType.NONE
            elif entity.type in (EntityType.COBRA, EntityType.SNAKE):
                damage = self.rng.randrange(state.room or 1) + 1
                self.send_toast(_with_digit("You dealt X damage!", 10, damage))
                self.attack_event.start(0.10)
                entity.id -= damage
                if entity.id <= 0:
                    entity.type = EntityType.NONE
                return
            elif entity.type == EntityType.LUA:
                handler = self.scripts.get(entity.id)
                if handler is not None and handler.action(i):
                    return

        self.move_event.start(0.25)
        self.old_pos = (player.x, player.y)
        player.x, player.y = tx, ty

    def _take_gate(self, target_room: int) -> None:
        state = self.state
        player = state.player
        if state.room == target_room:
            self.started = False
            self.message = WON_MESSAGE
        previous = state.room
        state.room = target_room
        room = self.room
        fallback = (0, 0)
        for y in range(room.height):
            for x in range(room.width):
                index = room.width * y + x
                tile = room.tiles[index]
                if tile.type == TileType.FLOOR:
                    fallback = (x, y)
                elif tile.type == TileType.GATE and tile.id == previous:
                    self.send_toast(_with_digit("Gate to room X", -1, state.room))
                    player.x, player.y = x, y
                    player.direction = room.deco[0][index].direction
                    return
        log(
            LogType.WARN,
            f"action: Couldn't find gate with id {previous} in room {state.room}, "
            "using first floor tile.",
        )
        player.x, player.y = fallback

    def entity_act(self, chance: int) -> None:
        """Let each entity in the room act with probability ``1 / chance``."""
        state = self.state
        player = state.player
        player_pos = (player.x, player.y)
        for i, entity in enumerate(state.entities):
            if (
                entity.type == EntityType.NONE
                or entity.room != state.room
                or self.rng.randrange(chance) != 0
            ):
                continue
            tx, ty = _ahead(entity.x, entity.y, entity.direction)
            damage = self.rng.randrange(2)
            if entity.type in (EntityType.BOOK, EntityType.KEY, EntityType.HEAL):
                continue
            if entity.type == EntityType.LUA:
                handler = self.scripts.get(entity.id)
                if handler is not None:
                    handler.act(i)
                continue
            if entity.type == EntityType.COBRA:
                damage += 1
            anim = self.entity_anim[i]
            current = math.dist((entity.x, entity.y), player_pos)
            target = math.dist((tx, ty), player_pos)
            if target == 0:
                if damage:
                    self.bump_event.start(0.25)
                    player.health -= damage
            elif target < current and entity.type == EntityType.SNAKE:
                anim.x, anim.y = entity.x, entity.y
                entity.x, entity.y = tx, ty
                anim.move_event.start(0.5)
            else:
                anim.direction = entity.direction
                plus = (entity.direction + 1) % 4
                minus = (entity.direction - 1) % 4
                plus_dist = math.dist(_ahead(entity.x, entity.y, plus), player_pos)
                minus_dist = math.dist(_ahead(entity.x, entity.y, minus), player_pos)
                entity.direction = Direction(plus if plus_dist < minus_dist else minus)
                anim.rotate_event.start(0.5)

    def _turn(self, step: int) -> None:
        player = self.state.player
        self.rotate_event.start(0.5)
        self.old_dir = player.direction
        player.direction = Direction((player.direction + step) % 4)
        self.entity_act(2)

    def turn_left(self) -> None:
        self._turn(1)

    def turn_right(self) -> None:
        self._turn(-1)

    def keyring_text(self) -> str:
        """The keyring as a three-by-three grid of key slots."""
        cells = [
            f"[{n}]" if held else f" {n} "
            for n, held in enumerate(self.state.keyring, start=1)
        ]
        rows = (" ".join(cells[r:r + 3]) for r in range(0, 9, 3))
        return "# Keyring\n" + "\n".join(rows)

    def handle_input(self, inputs: InputMap) -> None:
        """Apply one frame of player input to a running game."""
        if inputs.read("ESC"):
            self.paused = True
            return
        if self.state.player.health <= 0:
            self.started = False
            self.message = LOST_MESSAGE
        if inputs.read("HELP"):
            self.message = HELP_MESSAGE
        if inputs.read("USE"):
            self.send_toast(self.keyring_text())
        if self.move_event.remainder() == 0 and inputs.read("UP"):
            self.action()
            self.entity_act(1)
        if self.rotate_event.remainder() == 0:
            if inputs.read("RIGHT"):
                self.turn_right()
            if inputs.read("LEFT"):
                self.turn_left()

    def _locked_input(self, inputs: InputMap) -> None:
        inputs.locked = True
        try:
            self.handle_input(inputs)
        finally:
            inputs.locked = False

    def _menu_step(self, menu: Menu, inputs: InputMap, choose: Callable[[int], None]) -> None:
        if inputs.read("DOWN"):
            menu.move(1)
        if inputs.read("UP"):
            menu.move(-1)
        if inputs.read("USE"):
            inputs.clear()
            choose(menu.selected)
            menu.reset()

    def update(self, inputs: InputMap) -> None:
        """Run one frame: message screen, pause menu, game or main menu."""
        if self.message is not None:
            self.toast_event.length = 0
            if self.started:
                self._locked_input(inputs)
            if inputs.read("USE") or inputs.read("ESC"):
                inputs.clear()
                self.message = None
        elif self.started:
            if self.paused:
                self.message = None
                self._menu_step(self.pause_menu, inputs, self.pause_menu_choice)
                self._locked_input(inputs)
            else:
                self.handle_input(inputs)
        else:
            self._menu_step(self.main_menu, inputs, self.main_menu_choice)

    def save(self, path: str | Path) -> None:
        """Write the game state to ``path``."""
        Path(path).write_text(json.dumps(asdict(self.state)))

    def load(self, path: str | Path) -> None:
        """Start a new game and replace its state with the one saved at ``path``."""
        state = _state_from_dict(json.loads(Path(path).read_text()))
        self.new_game()
        self.state = state
        self.set_up()

    def _try_load(self, caller: str) -> bool:
        try:
            self.load(self.save_path)
        except OSError as exc:
            log(LogType.ERROR, f"{caller}: Couldn't open {self.save_path}: {exc.strerror}")
        except (ValueError, KeyError, TypeError) as exc:
            log(LogType.ERROR, f"{caller}: Couldn't read {self.save_path}: {exc}")
        else:
            return True
        self.message = LOAD_ERROR
        return False

    def main_menu_choice(self, selected: int) -> None:
        if selected == MainMenuItem.NEW_GAME:
            self.new_game()
            self.set_up()
            self.started = True
        elif selected == MainMenuItem.LOAD_GAME:
            if self._try_load("main_menu_choice"):
                self.started = True
        elif selected == MainMenuItem.CREDITS:
            self.message = CREDITS_MESSAGE
        elif selected == MainMenuItem.QUIT_GAME:
            self.quit = True

    def pause_menu_choice(self, selected: int) -> None:
        if selected == PauseMenuItem.NEW_GAME:
            self.new_game()
            self.set_up()
            self.paused = False
        elif selected == PauseMenuItem.CONTINUE:
            self.paused = False
        elif selected == PauseMenuItem.SAVE_GAME:
            try:
                self.save(self.save_path)
            except OSError as exc:
                log(
                    LogType.ERROR,
                    f"pause_menu_choice: Couldn't open {self.save_path}: {exc.strerror}",
                )
                self.message = SAVE_ERROR
                return
            self.message = _save_message(self.save_path)
        elif selected == PauseMenuItem.LOAD_GAME:
            if self._try_load("pause_menu_choice"):
                self.paused = False
        elif selected == PauseMenuItem.QUIT_GAME:
            self.quit = True