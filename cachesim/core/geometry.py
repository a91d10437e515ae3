from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from ..errors import ConfigurationError

ADDRESS_BITS = 32


class AssociativityMode(str, Enum):
    """How lines are grouped into sets."""

    FULLY_ASSOCIATIVE = "fa"
    DIRECT_MAPPED = "dm"
    SET_ASSOCIATIVE = "sa"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Geometry:
    """Shape of a cache, derived from size exponents and associativity.

    Sizes are given as powers of two: a cache_size_exp of 10 is a 1 KiB cache.
    For set-associative caches, ways_exp is the exponent of the number of
    lines per set (1 -> 2 lines, 4 -> 16 lines). It must be left as None for
    the other two modes, whose lines-per-set are implied.
    """
    cache_size_exp: int
    line_size_exp: int
    mode: AssociativityMode = AssociativityMode.DIRECT_MAPPED
    ways_exp: int | None = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "mode", AssociativityMode(self.mode))
        except ValueError:
            raise ConfigurationError(f"Unknown associativity mode: {self.mode!r}") from None

        for name in ("cache_size_exp", "line_size_exp"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")

        if self.cache_size_exp < self.line_size_exp:
            raise ConfigurationError(
                f"Cache size exponent ({self.cache_size_exp}) must be >= "
                f"line size exponent ({self.line_size_exp})."
            )

        if self.mode is AssociativityMode.SET_ASSOCIATIVE:
            w = self.ways_exp
            if not isinstance(w, int) or isinstance(w, bool) or w < 0:
                raise ConfigurationError(f"Set-associative caches need a non-negative ways exponent, got {w!r}")
            if w > self.num_lines_exp:
                raise ConfigurationError(
                    f"Ways exponent ({w}) exceeds the number of lines exponent ({self.num_lines_exp})."
                )
        elif self.ways_exp is not None:
            raise ConfigurationError(f"A ways exponent only applies to set-associative caches, not '{self.mode}'.")

        if self.set_bits + self.offset_bits > ADDRESS_BITS:
            raise ConfigurationError(
                f"Set and offset fields ({self.set_bits} + {self.offset_bits} bits) "
                f"do not fit in a {ADDRESS_BITS}-bit address."
            )

    @classmethod
    def direct_mapped(cls, cache_size_exp: int, line_size_exp: int) -> Geometry:
        return cls(cache_size_exp, line_size_exp, AssociativityMode.DIRECT_MAPPED)

    @classmethod
    def fully_associative(cls, cache_size_exp: int, line_size_exp: int) -> Geometry:
        return cls(cache_size_exp, line_size_exp, AssociativityMode.FULLY_ASSOCIATIVE)

    @classmethod
    def set_associative(cls, cache_size_exp: int, line_size_exp: int, ways_exp: int) -> Geometry:
        return cls(cache_size_exp, line_size_exp, AssociativityMode.SET_ASSOCIATIVE, ways_exp)

    @property
    def address_bits(self) -> int:
        return ADDRESS_BITS

    @property
    def num_lines_exp(self) -> int:
        return self.cache_size_exp - self.line_size_exp

    @property
    def set_size_exp(self) -> int:
        """log2 of the number of lines per set."""
        if self.mode is AssociativityMode.FULLY_ASSOCIATIVE:
            return self.num_lines_exp
        if self.mode is AssociativityMode.DIRECT_MAPPED:
            return 0
        return self.ways_exp

    @property
    def num_lines(self) -> int:
        return 1 << self.num_lines_exp

    @property
    def lines_per_set(self) -> int:
        return 1 << self.set_size_exp

    @property
    def num_sets(self) -> int:
        return self.num_lines // self.lines_per_set

    @property
    def set_bits(self) -> int:
        return self.num_lines_exp - self.set_size_exp

    @property
    def offset_bits(self) -> int:
        return self.line_size_exp

    @property
    def tag_bits(self) -> int:
        return ADDRESS_BITS - self.set_bits - self.offset_bits

    def describe(self) -> Dict[str, Any]:
        """Returns the configured and derived values as a JSON-friendly dict."""
        return {
            "mode": self.mode.value,
            "cache_size_bytes": 1 << self.cache_size_exp,
            "line_size_bytes": 1 << self.line_size_exp,
            "num_lines": self.num_lines,
            "lines_per_set": self.lines_per_set,
            "num_sets": self.num_sets,
            "tag_bits": self.tag_bits,
            "set_bits": self.set_bits,
            "offset_bits": self.offset_bits,
        }
