import random
import pytest
from cachesim.core.address import decode_hex
from cachesim.core.cache import CacheEngine, AccessOutcome
from cachesim.core.geometry import Geometry
from cachesim.core.policy import ReplacementPolicy

HIT, MISS = AccessOutcome.HIT, AccessOutcome.MISS


@pytest.fixture
def two_way():
    """32 B cache, 4 B lines, 2 lines per set -> 4 sets."""
    return Geometry.set_associative(5, 2, 1)


def test_miss_then_hit(two_way):
    engine = CacheEngine(two_way, ReplacementPolicy.LRU)
    assert engine.access(tag=7, set_index=1) is MISS
    assert engine.access(tag=7, set_index=1) is HIT
    assert engine.access(tag=7, set_index=2) is MISS  # same tag, other set


def test_hit_updates_line_bookkeeping(two_way):
    engine = CacheEngine(two_way, ReplacementPolicy.FIFO)
    engine.access(3, 0)
    engine.access(4, 0)
    engine.access(3, 0)
    line = engine.sets[0].get(3)
    assert line.birth_tick == 1
    assert line.last_access_tick == 3
    assert line.access_count == 1
    assert engine.sets[0].get(4).access_count == 0


def test_clock_advances_once_per_access(two_way):
    engine = CacheEngine(two_way, ReplacementPolicy.LRU)
    for i in range(5):
        engine.access(i % 2, 0)
    assert engine.clock == 5


@pytest.mark.parametrize("policy, evicted, kept", [
    (ReplacementPolicy.LRU, "B", "A"),
    (ReplacementPolicy.FIFO, "A", "B"),
])
def test_lru_and_fifo_diverge(two_way, policy, evicted, kept):
    tags = {"A": 0x10, "B": 0x20, "C": 0x30}
    engine = CacheEngine(two_way, policy)
    outcomes = [engine.access(tags[name], 0) for name in "ABAC"]
    assert outcomes == [MISS, MISS, HIT, MISS]
    assert tags[evicted] not in engine.sets[0]
    assert tags[kept] in engine.sets[0]
    assert tags["C"] in engine.sets[0]
    assert engine.evictions == 1


def test_direct_mapped_conflict_evicts_previous_block():
    engine = CacheEngine(Geometry.direct_mapped(5, 2), ReplacementPolicy.LRU)
    a, b = decode_hex("0x00000010"), decode_hex("0x00000030")  # both set 4
    assert engine.access_address(a) is MISS
    assert engine.access_address(b) is MISS
    assert engine.access_address(a) is MISS
    assert engine.access_address(decode_hex("0x00000011")) is HIT  # same line, other offset


def test_fully_associative_uses_single_set():
    engine = CacheEngine(Geometry.fully_associative(5, 2), ReplacementPolicy.LRU)
    for i in range(8):
        engine.access_address(decode_hex(f"0x{i * 0x100:08x}"))
    assert list(engine.sets) == [0]
    assert len(engine.sets[0]) == 8
    assert engine.evictions == 0


def test_line_remembers_originating_address(two_way):
    engine = CacheEngine(two_way, ReplacementPolicy.LRU)
    engine.access_address(decode_hex("0x0000003f"))
    line = next(iter(engine.sets[3].lines.values()))
    assert line.address == 0x3F


@pytest.mark.parametrize("geometry", [
    Geometry.direct_mapped(6, 2),
    Geometry.set_associative(6, 2, 2),
    Geometry.fully_associative(6, 2),
])
@pytest.mark.parametrize("policy", list(ReplacementPolicy))
def test_capacity_bounds_hold_for_random_accesses(geometry, policy):
    rng = random.Random(1234)
    engine = CacheEngine(geometry, policy)
    for _ in range(2000):
        engine.access_address(decode_hex(f"0x{rng.randrange(0, 1 << 10):08x}"))
        assert all(len(s) <= geometry.lines_per_set for s in engine.sets.values())
        assert len(engine.sets) <= geometry.num_sets
    assert engine.resident_lines() <= geometry.num_lines


def test_sets_view_is_read_only(two_way):
    engine = CacheEngine(two_way, ReplacementPolicy.LRU)
    engine.access(1, 0)
    with pytest.raises(TypeError):
        engine.sets[1] = None
