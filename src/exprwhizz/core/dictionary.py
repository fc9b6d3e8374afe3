"""
Variable environment for ExpressionWhizz.

A string -> float dictionary backed by a hash table that resolves
collisions with open addressing (linear probing). Deleted entries leave
tombstones so that probe sequences running through them stay intact;
tombstones are discarded whenever the table is rehashed.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from enum import StrEnum, auto

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 8
REHASH_THRESHOLD = 0.6

_HASH_MULTIPLIER = 1000003
_HASH_MASK = 0xFFFFFFFF


class SlotStatus(StrEnum):
    """State of a single hash table slot."""

    UNUSED = auto()
    IN_USE = auto()
    DELETED = auto()


class _Slot:
    """One slot of the table."""

    __slots__ = ("status", "key", "value")

    def __init__(self) -> None:
        self.status = SlotStatus.UNUSED
        self.key: str | None = None
        self.value: float | None = None


def hash_key(key: str, capacity: int) -> int:
    """Return the slot index for ``key`` in a table of ``capacity`` slots.

    Multiplicative string hash computed in 32-bit unsigned arithmetic:
    seeded by the first byte, folded left to right, then XORed with the
    length. Deterministic across processes.
    """
    data = key.encode("utf-8")
    if not data:
        return 0

    x = (data[0] << 7) & _HASH_MASK
    for byte in data:
        x = ((_HASH_MULTIPLIER * x) ^ byte) & _HASH_MASK
    x ^= len(data)

    return x % capacity


class Dictionary:
    """Open-addressing hash table mapping variable names to floats."""

    def __init__(self) -> None:
        self._capacity = DEFAULT_CAPACITY
        self._stored = 0
        self._deleted = 0
        self._slots = [_Slot() for _ in range(self._capacity)]

    # -- Introspection --

    def size(self) -> int:
        """Number of keys currently stored."""
        return self._stored

    def capacity(self) -> int:
        """Number of slots in the table (always a power of two)."""
        return self._capacity

    def deleted(self) -> int:
        """Number of tombstoned slots."""
        return self._deleted

    def load_factor(self) -> float:
        """Fraction of slots that are in use or tombstoned."""
        return (self._stored + self._deleted) / self._capacity

    def __len__(self) -> int:
        return self._stored

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def __repr__(self) -> str:
        return (
            f"Dictionary(size={self._stored}, capacity={self._capacity}, "
            f"deleted={self._deleted})"
        )

    # -- Probing --

    def _find(self, key: str) -> int | None:
        """Index of the slot holding ``key``, or None if absent."""
        index = hash_key(key, self._capacity)
        for _ in range(self._capacity):
            slot = self._slots[index]
            if slot.status == SlotStatus.UNUSED:
                return None
            if slot.status == SlotStatus.IN_USE and slot.key == key:
                return index
            index = (index + 1) % self._capacity
        return None

    # -- CRUD --

    def contains(self, key: str) -> bool:
        """True if ``key`` is stored."""
        return self._find(key) is not None

    def retrieve(self, key: str) -> float | None:
        """Return the value stored under ``key``, or None if absent."""
        index = self._find(key)
        if index is None:
            return None
        return self._slots[index].value

    def store(self, key: str, value: float) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        NaN is never stored; such a call leaves the table untouched.
        """
        if math.isnan(value):
            logger.debug("Refusing to store NaN under %r", key)
            return

        index = hash_key(key, self._capacity)
        reusable: int | None = None
        for _ in range(self._capacity):
            slot = self._slots[index]
            if slot.status == SlotStatus.UNUSED:
                break
            if slot.status == SlotStatus.DELETED:
                if reusable is None:
                    reusable = index
            elif slot.key == key:
                slot.value = value
                logger.debug("Updated %r = %g", key, value)
                return
            index = (index + 1) % self._capacity

        if reusable is not None:
            index = reusable
            self._deleted -= 1

        slot = self._slots[index]
        slot.status = SlotStatus.IN_USE
        slot.key = key
        slot.value = value
        self._stored += 1
        logger.debug("Inserted %r = %g at slot %d", key, value, index)

        if self.load_factor() > REHASH_THRESHOLD:
            self._rehash()

    def delete(self, key: str) -> None:
        """Remove ``key``, leaving a tombstone in its slot.

        Raises:
            KeyError: If ``key`` is not stored.
        """
        index = self._find(key)
        if index is None:
            raise KeyError(key)

        slot = self._slots[index]
        slot.status = SlotStatus.DELETED
        slot.key = None
        slot.value = None
        self._stored -= 1
        self._deleted += 1
        logger.debug("Deleted %r from slot %d", key, index)

    def clear(self) -> None:
        """Drop every entry and shrink back to the default capacity."""
        self._capacity = DEFAULT_CAPACITY
        self._stored = 0
        self._deleted = 0
        self._slots = [_Slot() for _ in range(self._capacity)]

    # -- Iteration --

    def items(self) -> Iterator[tuple[str, float]]:
        """Yield ``(key, value)`` pairs in slot order."""
        for slot in self._slots:
            if slot.status == SlotStatus.IN_USE:
                assert slot.key is not None and slot.value is not None
                yield slot.key, slot.value

    def __iter__(self) -> Iterator[str]:
        for key, _ in self.items():
            yield key

    def for_each(self, visit: Callable[[str, float], None]) -> None:
        """Call ``visit(key, value)`` for every stored entry, in slot order."""
        for key, value in self.items():
            visit(key, value)

    def dump(self) -> list[str]:
        """Describe the table slot by slot, for debugging."""
        lines = [
            f"*** capacity: {self._capacity} stored: {self._stored} "
            f"deleted: {self._deleted} load_factor: {self.load_factor():.2f}"
        ]
        for i, slot in enumerate(self._slots):
            if slot.status == SlotStatus.UNUSED:
                lines.append(f"{i:02d}: unused")
            elif slot.status == SlotStatus.DELETED:
                lines.append(f"{i:02d}: DELETED")
            else:
                assert slot.key is not None and slot.value is not None
                lines.append(
                    f"{i:02d}: IN_USE key={slot.key} "
                    f"hash={hash_key(slot.key, self._capacity)} value={slot.value:g}"
                )
        return lines

    # -- Resizing --

    def _rehash(self) -> None:
        """Double the capacity, reinsert live entries and drop tombstones."""
        old_slots = self._slots
        old_capacity = self._capacity

        self._capacity = old_capacity * 2
        self._slots = [_Slot() for _ in range(self._capacity)]

        for old in old_slots:
            if old.status != SlotStatus.IN_USE:
                continue
            assert old.key is not None
            index = hash_key(old.key, self._capacity)
            while self._slots[index].status == SlotStatus.IN_USE:
                index = (index + 1) % self._capacity
            self._slots[index] = old

        self._deleted = 0
        logger.debug("Rehashed dictionary from %d to %d slots", old_capacity, self._capacity)
