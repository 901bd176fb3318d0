import random

import pytest

from wipdungeon.dungeon import Direction, DungeonError, EntityType, TileType
from wipdungeon.game import Game
from wipdungeon.input import InputMap, Key, KeyAction, KeyEvent
from wipdungeon.menu import MainMenuItem, PauseMenuItem

DOOR_MAP = """\
room 0 4 4
# D1 # #
# - - #
# - G1 #
# # # #
room 1 3 3
# # #
# G0 #
# - #
player 0 1 1 N
entity K 1 0 2 1 N
"""

ARENA_MAP = """\
room 0 5 5
# # # # #
# - - - #
# - - - #
# - - - #
# # # # #
player 0 1 1 N
"""


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_game(tmp_path, text, extra=""):
    path = tmp_path / "main.df"
    path.write_text(text + extra)
    clock = Clock()
    game = Game(
        dungeon_path=path,
        save_path=tmp_path / "save.bin",
        clock=clock,
        rng=random.Random(1),
    )
    game.new_game()
    game.set_up()
    return game, clock


def press(inputs, key):
    inputs.write(KeyEvent(KeyAction.PRESS, key))


def test_new_game_sets_health_and_toast(tmp_path):
    game, _ = make_game(tmp_path, DOOR_MAP)
    assert game.state.player.health == 12
    assert game.toast == "Welcome to the dungeon!"
    assert (game.state.player.x, game.state.player.y) == (1, 1)


def test_new_game_missing_dungeon(tmp_path):
    game = Game(dungeon_path=tmp_path / "nothing.df")
    with pytest.raises(DungeonError):
        game.new_game()


def test_locked_door_bumps(tmp_path):
    game, _ = make_game(tmp_path, DOOR_MAP)
    game.action()
    assert game.toast.startswith("This door is locked!")
    assert game.toast[-1] == "1"
    assert (game.state.player.x, game.state.player.y) == (1, 1)
    assert game.bump_event.length == 0.125


def test_pick_up_key_then_unlock(tmp_path):
    game, _ = make_game(tmp_path, DOOR_MAP)
    player = game.state.player
    player.direction = Direction.EAST
    game.action()
    assert (player.x, player.y) == (2, 1)
    assert game.state.keyring[0] == 1
    assert game.state.entities[0].type == EntityType.NONE
    assert game.toast.startswith("You found key")

    player.x, player.y, player.direction = 1, 1, Direction.NORTH
    game.action()
    assert game.toast == "Unlocked door"
    door = game.room.tiles[1]
    assert door.type == TileType.DOOR and door.id == 0
    assert game.room.deco[0][1].model == door.data


def test_wall_blocks(tmp_path):
    game, _ = make_game(tmp_path, DOOR_MAP)
    game.state.player.direction = Direction.WEST
    game.action()
    assert (game.state.player.x, game.state.player.y) == (1, 1)


def test_gate_moves_to_other_room(tmp_path):
    game, _ = make_game(tmp_path, DOOR_MAP)
    player = game.state.player
    player.x, player.y, player.direction = 1, 2, Direction.EAST
    game.action()
    assert game.state.room == 1
    assert (player.x, player.y) == (1, 1)
    assert game.toast.startswith("Gate to room")
    assert game.toast[-1] == "1"


def test_gate_to_same_room_wins(tmp_path):
    text = "room 0 3 3\n# # #\n# - G0\n# # #\nplayer 0 1 1 E\n"
    game, _ = make_game(tmp_path, text)
    game.started = True
    game.action()
    assert game.started is False
    assert game.message.startswith("# YOU WON!")
    assert (game.state.player.x, game.state.player.y) == (2, 1)


def test_attack_snake(tmp_path):
    game, _ = make_game(tmp_path, ARENA_MAP, "entity S 5 0 1 2 N\n")
    game.state.player.direction = Direction.SOUTH
    game.action()
    snake = game.state.entities[0]
    assert snake.id == 4
    assert game.toast == "You dealt 1 damage!"
    assert (game.state.player.x, game.state.player.y) == (1, 1)


def test_heal_potion(tmp_path):
    game, _ = make_game(tmp_path, ARENA_MAP, "entity H 4 0 1 2 N\n")
    before = game.state.player.health
    game.state.player.direction = Direction.SOUTH
    game.action()
    assert game.state.player.health == before + 4
    assert game.toast == "The potion refreshes your body"


def test_book_shows_message(tmp_path):
    note = tmp_path / "note.txt"
    note.write_text("hello reader")
    game, _ = make_game(tmp_path, ARENA_MAP, f"msg 0 {note}\nentity B 0 0 2 1 N\n")
    game.state.player.direction = Direction.EAST
    game.action()
    assert game.message == "hello reader"


def test_snake_approaches(tmp_path):
    game, _ = make_game(tmp_path, ARENA_MAP, "entity S 5 0 1 3 N\n")
    game.entity_act(1)
    snake = game.state.entities[0]
    assert (snake.x, snake.y) == (1, 2)
    assert (game.entity_anim[0].x, game.entity_anim[0].y) == (1, 3)


def test_snake_turns_toward_player(tmp_path):
    game, _ = make_game(tmp_path, ARENA_MAP, "entity S 5 0 1 3 W\n")
    game.entity_act(1)
    snake = game.state.entities[0]
    assert snake.direction == Direction.NORTH
    assert (snake.x, snake.y) == (1, 3)
    assert game.entity_anim[0].direction == Direction.WEST


def test_cobra_always_bites(tmp_path):
    game, _ = make_game(tmp_path, ARENA_MAP, "entity C 5 0 1 2 N\n")
    before = game.state.player.health
    game.entity_act(1)
    assert before - 2 <= game.state.player.health <= before - 1


def test_turning(tmp_path):
    game, _ = make_game(tmp_path, ARENA_MAP)
    game.turn_left()
    assert game.state.player.direction == Direction.EAST
    game.turn_right()
    game.turn_right()
    assert game.state.player.direction == Direction.WEST
    assert game.old_dir == Direction.NORTH


def test_keyring_text(tmp_path):
    game, _ = make_game(tmp_path, ARENA_MAP)
    game.state.keyring[0] = 1
    text = game.keyring_text()
    assert text.startswith("# Keyring\n")
    assert "[1]" in text and "[2]" not in text
    assert len(text.splitlines()) == 4


def test_handle_input_escape_pauses(tmp_path):
    game, _ = make_game(tmp_path, ARENA_MAP)
    inputs = InputMap()
    press(inputs, Key.ESC)
    game.handle_input(inputs)
    assert game.paused is True


def test_handle_input_help_and_death(tmp_path):
    game, _ = make_game(tmp_path, ARENA_MAP)
    game.started = True
    game.state.player.health = 0
    inputs = InputMap()
    game.handle_input(inputs)
    assert game.started is False
    assert game.message.startswith("# YOU LOST!")
    press(inputs, ord("h"))
    game.handle_input(inputs)
    assert game.message.startswith("# Help")


def test_handle_input_up_waits_for_move(tmp_path):
    game, clock = make_game(tmp_path, ARENA_MAP)
    game.state.player.direction = Direction.EAST
    inputs = InputMap()
    press(inputs, Key.UP)
    game.handle_input(inputs)
    assert game.state.player.x == 1
    clock.now = 10.0
    game.handle_input(inputs)
    assert game.state.player.x == 2


def test_save_and_load_round_trip(tmp_path):
    game, _ = make_game(tmp_path, DOOR_MAP)
    game.state.player.x = 2
    game.state.keyring[3] = 1
    saved = game.state
    game.save(game.save_path)
    other, _ = make_game(tmp_path, DOOR_MAP)
    other.load(game.save_path)
    assert other.state == saved


def test_load_missing_save_reports_error(tmp_path):
    game = Game(dungeon_path=tmp_path / "main.df", save_path=tmp_path / "none.bin")
    game.main_menu_choice(MainMenuItem.LOAD_GAME)
    assert game.message == "# Error\n\nFailed to load, check console output.\n"
    assert game.started is False


def test_main_menu_choices(tmp_path):
    game, _ = make_game(tmp_path, DOOR_MAP)
    game.main_menu_choice(MainMenuItem.NEW_GAME)
    assert game.started is True
    game.main_menu_choice(MainMenuItem.QUIT_GAME)
    assert game.quit is True


def test_pause_menu_save_and_continue(tmp_path):
    game, _ = make_game(tmp_path, DOOR_MAP)
    game.paused = True
    game.pause_menu_choice(PauseMenuItem.SAVE_GAME)
    assert game.message.startswith("# Save")
    assert game.save_path.exists()
    game.pause_menu_choice(PauseMenuItem.CONTINUE)
    assert game.paused is False


def test_update_navigates_main_menu(tmp_path):
    game = Game(dungeon_path=tmp_path / "main.df")
    inputs = InputMap()
    press(inputs, Key.DOWN)
    game.update(inputs)
    press(inputs, Key.DOWN)
    game.update(inputs)
    assert game.main_menu.selected == 2
    press(inputs, Key.ENTER)
    game.update(inputs)
    assert game.message.startswith("# Credits")
    assert game.main_menu.selected == 0