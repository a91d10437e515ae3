from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List, Iterable, Sequence, Tuple

from ..config import SimConfig
from ..core.address import decode_hex, split
from ..core.cache import CacheEngine, AccessOutcome
from ..core.geometry import Geometry
from ..core.policy import ReplacementPolicy
from ..errors import ConfigurationError, TraceError
from ..utils.logging import get_logger
from .trace import Operation, TraceRecord, read_trace

logger = get_logger(__name__)


@dataclass
class SimResult:
    """Totals of one run plus the cumulative counts after every record."""
    hits: int = 0
    accesses: int = 0
    hit_history: List[int] = field(default_factory=list)
    access_history: List[int] = field(default_factory=list)

    @property
    def misses(self) -> int:
        return self.accesses - self.hits

    @property
    def hit_rate(self) -> float:
        return self.hits / self.accesses if self.accesses else 0.0

    @property
    def miss_rate(self) -> float:
        return self.misses / self.accesses if self.accesses else 0.0

    def record(self, hit: bool):
        self.accesses += 1
        if hit:
            self.hits += 1
        self.access_history.append(self.accesses)
        self.hit_history.append(self.hits)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "accesses": self.accesses,
            "hit_rate": self.hit_rate,
            "miss_rate": self.miss_rate,
            "hit_history": list(self.hit_history),
            "access_history": list(self.access_history),
        }


class TraceRunner:
    """Replays trace records, in order, against a fresh cache engine per run."""

    def __init__(self, geometry: Geometry, policy: ReplacementPolicy):
        self.geometry = geometry
        self.policy = ReplacementPolicy(policy)
        self.engine: CacheEngine | None = None

    def run(self, records: Iterable[TraceRecord | Tuple[str, str]]) -> SimResult:
        """Processes every record and returns the accumulated statistics.

        The first bad record aborts the run; its error carries the record's
        line number (or 1-based position when records are plain pairs).
        """
        self.engine = CacheEngine(self.geometry, self.policy)
        result = SimResult()

        for index, record in enumerate(records, start=1):
            if isinstance(record, TraceRecord):
                op, address = record.op, record.address
                line_number = record.line_number or index
                text = record.text or f"{op} {address}"
            else:
                op, address = record
                line_number, text = index, f"{op} {address}"

            try:
                Operation.parse(op)
                fields = split(decode_hex(address), self.geometry)
            except TraceError as e:
                raise e.with_context(line_number, text)

            outcome = self.engine.access(fields.tag, fields.set_index)
            result.record(outcome is AccessOutcome.HIT)

        return result


def run(config: SimConfig) -> SimResult:
    """
    Runs the trace named in the config through the configured cache.

    This is the main entry point for a single simulation.
    """
    geometry = config.geometry()
    policy = config.policy()
    logger.info(f"Simulating {config.trace} on a {geometry.mode} cache "
                f"({geometry.num_sets} sets x {geometry.lines_per_set} lines) with {policy}")

    runner = TraceRunner(geometry, policy)
    result = runner.run(read_trace(config.trace))

    logger.info(f"Finished: {result.hits}/{result.accesses} hits ({result.hit_rate:.2%}), "
                f"{runner.engine.evictions} evictions")
    return result


def compare(config: SimConfig,
            policies: Sequence[ReplacementPolicy] = tuple(ReplacementPolicy),
            cache_types: Sequence[str] = ("fa", "dm", "sa")) -> List[Dict[str, Any]]:
    """Replays the configured trace under every policy and cache type.

    Set-associative runs use the config's ways, or 2 lines per set if unset.
    Every geometry is resolved before any trace is replayed; a set-associative
    shape the cache cannot hold is skipped with a warning.
    Returns one row per combination, in the order given.
    """
    geometries = []
    for cache_type in cache_types:
        ways = (config.ways or 1) if cache_type == "sa" else None
        variant = SimConfig(
            trace=config.trace,
            cache_size_exp=config.cache_size_exp,
            line_size_exp=config.line_size_exp,
            cache_type=cache_type,
            ways=ways,
        )
        try:
            geometries.append((cache_type, variant.geometry()))
        except ConfigurationError as e:
            if cache_type != "sa":
                raise
            logger.warning(f"Skipping set-associative run: {e}")

    rows = []
    for cache_type, geometry in geometries:
        for policy in policies:
            result = TraceRunner(geometry, policy).run(read_trace(config.trace))
            logger.info(f"{cache_type}/{policy}: {result.hit_rate:.2%} hit rate")
            rows.append({
                "cache_type": cache_type,
                "policy": str(ReplacementPolicy(policy)),
                "lines_per_set": geometry.lines_per_set,
                "num_sets": geometry.num_sets,
                **{k: v for k, v in result.to_dict().items() if not k.endswith("_history")},
            })
    return rows
