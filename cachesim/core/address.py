from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from ..errors import FormatError, PrefixError, LengthMismatch
from .geometry import Geometry, ADDRESS_BITS

HEX_PREFIX = "0x"

# Each hex digit expands to exactly one nibble.
NIBBLES = {c: i for i, c in enumerate("0123456789abcdef")}


@dataclass(frozen=True)
class BitVector:
    """A fixed-width unsigned integer. len() is the width in bits."""
    value: int
    width: int

    def __len__(self) -> int:
        return self.width

    def __str__(self) -> str:
        return format(self.value, f"0{self.width}b") if self.width else ""


@dataclass(frozen=True)
class AddressFields:
    tag: int
    set_index: int
    offset: int

    def to_bits(self, geometry: Geometry) -> Tuple[str, str, str]:
        """Renders (tag, set, offset) as zero-padded binary strings."""
        return (
            str(BitVector(self.tag, geometry.tag_bits)),
            str(BitVector(self.set_index, geometry.set_bits)),
            str(BitVector(self.offset, geometry.offset_bits)),
        )

    def join(self, geometry: Geometry) -> BitVector:
        """Reassembles the full address from its three fields."""
        value = (self.tag << (geometry.set_bits + geometry.offset_bits)) \
            | (self.set_index << geometry.offset_bits) \
            | self.offset
        return BitVector(value, ADDRESS_BITS)


def decode_hex(text: str) -> BitVector:
    """Decodes a '0x'-prefixed hex string into a BitVector of 4 bits per digit.

    Digits are case-insensitive; the prefix must be the literal '0x'.
    """
    if not text.startswith(HEX_PREFIX):
        raise PrefixError(f"Hex address must start with '{HEX_PREFIX}': {text!r}", text=text)
    digits = text[len(HEX_PREFIX):]
    if not digits:
        raise FormatError(f"Hex address has no digits: {text!r}", text=text)

    value = 0
    for c in digits:
        nibble = NIBBLES.get(c.lower())
        if nibble is None:
            raise FormatError(f"Invalid hex digit {c!r} in address {text!r}", text=text)
        value = (value << 4) | nibble
    return BitVector(value, 4 * len(digits))


def split(bits: BitVector, geometry: Geometry) -> AddressFields:
    """Splits a 32-bit address into (tag, set_index, offset) for a geometry."""
    if len(bits) != ADDRESS_BITS:
        raise LengthMismatch(f"Address is {len(bits)} bits wide, expected {ADDRESS_BITS}: {bits}")

    offset_mask = (1 << geometry.offset_bits) - 1
    set_mask = (1 << geometry.set_bits) - 1

    offset = bits.value & offset_mask
    set_index = (bits.value >> geometry.offset_bits) & set_mask
    tag = bits.value >> (geometry.offset_bits + geometry.set_bits)
    return AddressFields(tag, set_index, offset)
