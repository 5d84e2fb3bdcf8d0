"""
Value Types and Capabilities

A backend represents values of a handful of native types. Each
(backend, type) pair may support a different subset of primitive
operations; the subset is published as a Capability flag set.

Types:
    BOOL - single truth value
    U8   - unsigned 8-bit word
    U32  - unsigned 32-bit word
"""

from enum import Enum, IntFlag
from typing import Union


class ValueType(Enum):
    """Native value types a backend can represent."""

    BOOL = ('bool', 1)
    U8 = ('u8', 8)
    U32 = ('u32', 32)

    def __init__(self, label: str, width: int):
        self.label = label
        self.width = width

    @property
    def mask(self) -> int:
        """All-ones value of this width."""
        return (1 << self.width) - 1

    @property
    def is_word(self) -> bool:
        return self is not ValueType.BOOL

    def validate(self, value: Union[bool, int]) -> Union[bool, int]:
        """
        Check that a concrete value is in range and normalize it.

        BOOL accepts bools and the ints 0/1 and returns a bool; word types
        accept non-negative ints up to the mask.
        """
        if self is ValueType.BOOL:
            if isinstance(value, bool):
                return value
            if isinstance(value, int) and value in (0, 1):
                return bool(value)
            raise ValueError(f"Not a bool value: {value!r}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{self.label} value must be an int, got {type(value).__name__}")
        if not 0 <= value <= self.mask:
            raise ValueError(f"{self.label} value out of range: {value}")
        return value

    def __repr__(self) -> str:
        return f"ValueType.{self.name}"


class Capability(IntFlag):
    """Primitive operations a backend may support for a value type."""

    NONE = 0
    AND = 1 << 0
    OR = 1 << 1
    XOR = 1 << 2
    NOT = 1 << 3
    SHIFT = 1 << 4          # shl / shr by a known amount
    ROTATE = 1 << 5         # rotl / rotr by a known amount
    WRAPPING_ADD = 1 << 6
    ADD = 1 << 7            # checked (non-wrapping) addition
    ASSERT = 1 << 8
    ASSERT_EQ = 1 << 9

    # Common groupings
    BOOLEAN = AND | OR | XOR | NOT
    WORD = BOOLEAN | SHIFT | ROTATE | WRAPPING_ADD
