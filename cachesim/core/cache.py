from __future__ import annotations
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping

from ..utils.logging import get_logger
from .address import BitVector, split
from .geometry import Geometry
from .policy import ReplacementPolicy
from .storage import CacheLine, CacheSet

logger = get_logger(__name__)


class AccessOutcome(str, Enum):
    HIT = "hit"
    MISS = "miss"

    def __str__(self) -> str:
        return self.value


class CacheEngine:
    """
    Hit/miss model of a single cache level.

    Sets are created on first reference and hold at most lines_per_set lines.
    All ordering decisions use a logical clock that advances once per access,
    so replaying the same accesses always gives the same outcomes.
    Loads and stores are not distinguished and nothing is ever written back.
    """
    def __init__(self, geometry: Geometry, policy: ReplacementPolicy):
        self.geometry = geometry
        self.policy = ReplacementPolicy(policy)
        self._sets: Dict[int, CacheSet] = {}
        self._clock = 0
        self.evictions = 0

    @property
    def clock(self) -> int:
        return self._clock

    @property
    def sets(self) -> Mapping[int, CacheSet]:
        return MappingProxyType(self._sets)

    def resident_lines(self) -> int:
        return sum(len(s) for s in self._sets.values())

    def _get_or_create_set(self, set_index: int) -> CacheSet:
        cache_set = self._sets.get(set_index)
        if cache_set is None:
            assert 0 <= set_index < self.geometry.num_sets, f"set index {set_index} out of range"
            cache_set = CacheSet(self.geometry.lines_per_set)
            self._sets[set_index] = cache_set
            assert len(self._sets) <= self.geometry.num_sets, "more sets than the geometry allows"
        return cache_set

    def access(self, tag: int, set_index: int, address: int | None = None) -> AccessOutcome:
        """Looks up a block, filling it on a miss. Returns HIT or MISS."""
        self._clock += 1
        now = self._clock

        cache_set = self._get_or_create_set(set_index)
        line = cache_set.get(tag)
        if line is not None:
            line.touch(now)
            return AccessOutcome.HIT

        if cache_set.is_full():
            victim = self.policy.select_victim(cache_set)
            cache_set.remove(victim)
            self.evictions += 1
            logger.debug(f"[{self.policy}] set {set_index:#x}: evicted tag {victim:#x} for {tag:#x} at tick {now}")

        if address is None:
            address = (tag << (self.geometry.set_bits + self.geometry.offset_bits)) \
                | (set_index << self.geometry.offset_bits)
        cache_set.insert(tag, CacheLine(address=address, birth_tick=now, last_access_tick=now))
        return AccessOutcome.MISS

    def access_address(self, bits: BitVector) -> AccessOutcome:
        """Splits a 32-bit address for this geometry and accesses it."""
        fields = split(bits, self.geometry)
        return self.access(fields.tag, fields.set_index, address=bits.value)
