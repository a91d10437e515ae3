from cachesim.core.geometry import Geometry
from cachesim.core.policy import ReplacementPolicy
from cachesim.runtime.simulator import TraceRunner


def hot_block_trace(rounds: int):
    """One hot block touched between every pair of streaming blocks in the same set."""
    # 2-way, 4 sets, 4 B lines -> blocks 16 bytes apart share set 0
    records = []
    for i in range(rounds):
        records.append(("l", "0x00000000"))
        records.append(("l", f"0x{(i + 1) * 16:08x}"))
    return records


def test_lru_keeps_hot_block_fifo_does_not():
    geometry = Geometry.set_associative(5, 2, 1)
    trace = hot_block_trace(100)

    lru = TraceRunner(geometry, ReplacementPolicy.LRU).run(trace)
    fifo = TraceRunner(geometry, ReplacementPolicy.FIFO).run(trace)

    print(f"\nLRU hit rate: {lru.hit_rate:.2%}, FIFO hit rate: {fifo.hit_rate:.2%}")
    # Under LRU the hot block is refreshed before every eviction
    assert lru.hits == 99
    assert fifo.hits < lru.hits


def test_associativity_removes_conflict_misses():
    # Two blocks that collide in a direct-mapped cache, accessed alternately
    trace = [("l", "0x00000000"), ("l", "0x00000020")] * 50

    dm = TraceRunner(Geometry.direct_mapped(5, 2), ReplacementPolicy.LRU).run(trace)
    fa = TraceRunner(Geometry.fully_associative(5, 2), ReplacementPolicy.LRU).run(trace)

    assert dm.hits == 0
    assert fa.hits == 98
