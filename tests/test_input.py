import pytest

from wipdungeon.conf import Config
from wipdungeon.input import (
    FLIPDOT_MOTIONS,
    InputMap,
    Key,
    KeyAction,
    KeyEvent,
    KeyQueue,
    MotionType,
    find_key,
)


def press(key):
    return KeyEvent(KeyAction.PRESS, key)


def release(key):
    return KeyEvent(KeyAction.RELEASE, key)


def test_find_key_letters_are_lower_case_codes():
    assert find_key("A") == ord("a")
    assert find_key("z") == ord("z")


def test_find_key_single_non_letter_is_unknown():
    assert find_key("1") == Key.UNKNOWN


def test_find_key_by_primary_name():
    assert find_key("ENTER") == 13
    assert find_key("DELETE") == 127
    assert find_key("UP") == Key.UP


def test_find_key_alternative_and_locked_names_not_found():
    assert find_key("ESC") == Key.UNKNOWN
    assert find_key("LOCKED") == Key.UNKNOWN
    assert find_key("NOPE") == Key.UNKNOWN


def test_key_aliases_match_primary_names():
    assert find_key("ESCAPE") == Key.ESC
    assert find_key("BACKSPACE") == Key.BS
    assert find_key("SPACE") == Key.SPACEBAR == ord(" ")
    assert Key.KP_NUM_LAST == Key.KP_NUM + 9


def test_queue_is_fifo():
    queue = KeyQueue()
    assert queue.write(press(Key.UP))
    assert queue.write(release(Key.UP))
    assert queue.read() == press(Key.UP)
    assert queue.read() == release(Key.UP)
    assert queue.read() == KeyEvent(KeyAction.NONE, Key.UNKNOWN)


def test_queue_drops_when_full():
    queue = KeyQueue(8)
    results = [queue.write(press(Key.UP)) for _ in range(8)]
    assert results == [True] * 7 + [False]
    assert len(queue) == 7


def test_queue_locked():
    queue = KeyQueue()
    queue.write(press(Key.UP))
    queue.locked = True
    assert queue.read() == KeyEvent(KeyAction.NONE, Key.LOCKED)
    queue.locked = False
    assert queue.read() == press(Key.UP)


def test_once_motion_is_consumed_by_reading():
    inputs = InputMap()
    assert inputs.write(press(Key.UP))
    assert inputs.read("UP") is True
    assert inputs.read("UP") is False


def test_once_press_ignores_release():
    inputs = InputMap()
    inputs.write(release(Key.ENTER))
    assert inputs.read("USE") is False


def test_hold_motion():
    inputs = InputMap([("RUN", MotionType.HOLD, Key.SHIFT)])
    inputs.write(press(Key.SHIFT))
    assert inputs.read("RUN") is True
    assert inputs.read("RUN") is True
    inputs.write(release(Key.SHIFT))
    assert inputs.read("RUN") is False


def test_once_release_motion():
    inputs = InputMap([("JUMP", MotionType.ONCE_RELEASE, Key.SPACE)])
    inputs.write(press(Key.SPACE))
    assert inputs.read("JUMP") is False
    inputs.write(release(Key.SPACE))
    assert inputs.read("JUMP") is True


def test_write_unbound_and_locked_keys():
    inputs = InputMap()
    assert inputs.write(press(Key.TAB)) is False
    assert inputs.write(press(Key.LOCKED)) is True


def test_locked_read_does_not_consume():
    inputs = InputMap()
    inputs.write(press(ord("h")))
    inputs.locked = True
    assert inputs.read("HELP") is False
    inputs.locked = False
    assert inputs.read("HELP") is True


def test_find_motion():
    inputs = InputMap()
    assert inputs.find("HELP") == 5
    assert inputs.find("MISSING") == 0


def test_read_unknown_motion_raises():
    with pytest.raises(KeyError):
        InputMap().read("MISSING")


def test_bind_moves_key():
    inputs = InputMap()
    inputs.bind("UP", ord("w"))
    assert inputs.write(press(Key.UP)) is False
    assert inputs.write(press(ord("w"))) is True
    assert inputs.read("UP") is True


def test_clear():
    inputs = InputMap()
    inputs.write(press(Key.LEFT))
    inputs.clear()
    assert inputs.read("LEFT") is False


def test_load_bindings_from_config():
    config = Config()
    config.read_string('keys = { UP = "W"; ESC = "DELETE"; };')
    inputs = InputMap()
    inputs.load_bindings(config)
    inputs.write(press(ord("w")))
    inputs.write(press(Key.DELETE))
    assert inputs.read("UP") is True
    assert inputs.read("ESC") is True
    assert inputs.write(press(Key.ESCAPE)) is False


def test_flipdot_quit_on_q():
    inputs = InputMap(FLIPDOT_MOTIONS)
    inputs.write(press(ord("q")))
    assert inputs.read("QUIT") is True
    assert inputs.write(press(Key.ENTER)) is False