from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator


@dataclass
class CacheLine:
    """A resident memory block. Ticks come from the engine's logical clock."""
    address: int  # full address of the access that brought the block in
    birth_tick: int
    last_access_tick: int
    access_count: int = 0

    def touch(self, tick: int):
        self.last_access_tick = tick
        self.access_count += 1


class CacheSet:
    """Lines of one set, keyed by tag, bounded by the set's capacity."""

    def __init__(self, capacity: int):
        assert capacity > 0, "a set must hold at least one line"
        self.capacity = capacity
        self.lines: Dict[int, CacheLine] = {}

    def __len__(self) -> int:
        return len(self.lines)

    def __contains__(self, tag: int) -> bool:
        return tag in self.lines

    def __iter__(self) -> Iterator[int]:
        return iter(self.lines)

    def get(self, tag: int) -> CacheLine | None:
        return self.lines.get(tag)

    def is_full(self) -> bool:
        assert len(self.lines) <= self.capacity, "set exceeded its capacity"
        return len(self.lines) == self.capacity

    def insert(self, tag: int, line: CacheLine):
        assert tag not in self.lines, f"tag {tag:#x} already resident"
        assert not self.is_full(), "insert into a full set"
        self.lines[tag] = line

    def remove(self, tag: int) -> CacheLine:
        assert tag in self.lines, f"cannot evict tag {tag:#x}, it is not resident"
        return self.lines.pop(tag)
