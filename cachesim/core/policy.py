from __future__ import annotations
from enum import Enum

from .storage import CacheSet


class ReplacementPolicy(str, Enum):
    """Chooses which line of a full set gets evicted."""

    LRU = "lru"    # least recently touched
    FIFO = "fifo"  # oldest inserted; hits do not reorder

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_selector(cls, text: str) -> ReplacementPolicy:
        """'l' or 'L' selects LRU, anything else selects FIFO."""
        if text.strip().lower() == "l":
            return cls.LRU
        return cls.FIFO

    def select_victim(self, cache_set: CacheSet) -> int:
        """Returns the tag to evict from a full set.

        Ties on the tick are broken by the lowest tag.
        """
        assert len(cache_set) > 0, "no victim in an empty set"
        lines = cache_set.lines

        def lru_key(tag: int):
            return lines[tag].last_access_tick, tag

        def fifo_key(tag: int):
            return lines[tag].birth_tick, tag

        return min(cache_set, key=lru_key if self is ReplacementPolicy.LRU else fifo_key)
