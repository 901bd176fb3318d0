"""Fixed-capacity open-addressing map keyed by strings."""

from __future__ import annotations

from typing import Any

__all__ = ["HashMap", "djb2"]


def djb2(key: str) -> int:
    """djb2 (xor variant) hash with signed 32-bit wrap-around."""
    value = 5381
    for byte in key.encode():
        value = ((33 * value) ^ byte) & 0xFFFFFFFF
    return value - 2**32 if value >= 2**31 else value


class HashMap:
    """A map of fixed capacity that probes linearly from the key's hash slot."""

    def __init__(self, capacity: int = 1024) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._slots: list[tuple[str, Any] | None] = [None] * capacity

    def __len__(self) -> int:
        return sum(slot is not None for slot in self._slots)

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def _probe(self, key: str):
        start = djb2(key) % len(self._slots)
        yield from range(start, len(self._slots))
        yield from range(start)

    def get(self, key: str) -> Any:
        """Return the value stored under ``key``, or None."""
        for index in self._probe(key):
            slot = self._slots[index]
            if slot is not None and slot[0] == key:
                return slot[1]
        return None

    def insert(self, key: str, value: Any) -> int:
        """Store ``value`` in the first free slot and return the slot index."""
        if value is None:
            raise ValueError("None cannot be stored")
        for index in self._probe(key):
            if self._slots[index] is None:
                self._slots[index] = (key, value)
                return index
        raise IndexError("hashmap is full")