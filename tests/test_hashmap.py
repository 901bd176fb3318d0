import pytest

from wipdungeon.hashmap import HashMap, djb2


def test_djb2_empty_is_seed():
    assert djb2("") == 5381


def test_djb2_stays_in_int32():
    value = djb2("a much longer key that overflows many times over")
    assert -(2**31) <= value < 2**31


def test_insert_then_get():
    m = HashMap(16)
    m.insert("snake", 1)
    m.insert("cobra", 2)
    assert m.get("snake") == 1
    assert m.get("cobra") == 2
    assert m.get("missing") is None
    assert len(m) == 2


def test_insert_returns_home_slot_when_free():
    m = HashMap(8)
    assert m.insert("key", "v") == djb2("key") % 8


def test_collisions_wrap_around():
    m = HashMap(2)
    first = m.insert("x", "a")
    second = m.insert("x2", "b")
    assert {first, second} == {0, 1}
    assert m.get("x") == "a"
    assert m.get("x2") == "b"


def test_full_map_raises():
    m = HashMap(1)
    m.insert("a", 1)
    with pytest.raises(IndexError):
        m.insert("b", 2)


def test_none_value_rejected():
    with pytest.raises(ValueError):
        HashMap(4).insert("a", None)