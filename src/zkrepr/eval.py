"""
Direct Evaluation Backend

The handle is the value itself: bool for BOOL, int for word types.
Every operation is the native one, masked to the type width, so this
backend is the ground truth every other backend is tested against.
"""

from typing import Union

from .system import System, check_shift
from .types import Capability, ValueType


Value = Union[bool, int]


class Eval(System):
    """A system that directly evaluates values."""

    capabilities = {
        ValueType.BOOL: Capability.BOOLEAN | Capability.ASSERT | Capability.ASSERT_EQ,
        ValueType.U8: Capability.WORD | Capability.ADD | Capability.ASSERT_EQ,
        ValueType.U32: Capability.WORD | Capability.ADD | Capability.ASSERT_EQ,
    }

    def constant(self, ty: ValueType, value: Value) -> Value:
        return ty.validate(value)

    def and_(self, ty: ValueType, a: Value, b: Value) -> Value:
        self.require(ty, Capability.AND, "and")
        return a & b

    def or_(self, ty: ValueType, a: Value, b: Value) -> Value:
        self.require(ty, Capability.OR, "or")
        return a | b

    def xor(self, ty: ValueType, a: Value, b: Value) -> Value:
        self.require(ty, Capability.XOR, "xor")
        return a ^ b

    def not_(self, ty: ValueType, a: Value) -> Value:
        self.require(ty, Capability.NOT, "not")
        if ty is ValueType.BOOL:
            return not a
        return ~a & ty.mask

    def shl(self, ty: ValueType, a: int, amount: int) -> int:
        self.require(ty, Capability.SHIFT, "shl")
        return (a << check_shift(ty, amount)) & ty.mask

    def shr(self, ty: ValueType, a: int, amount: int) -> int:
        self.require(ty, Capability.SHIFT, "shr")
        return a >> check_shift(ty, amount)

    def rotl(self, ty: ValueType, a: int, amount: int) -> int:
        self.require(ty, Capability.ROTATE, "rotl")
        k = check_shift(ty, amount, rotate=True)
        return ((a << k) | (a >> (ty.width - k))) & ty.mask

    def rotr(self, ty: ValueType, a: int, amount: int) -> int:
        self.require(ty, Capability.ROTATE, "rotr")
        k = check_shift(ty, amount, rotate=True)
        return ((a >> k) | (a << (ty.width - k))) & ty.mask

    def wrapping_add(self, ty: ValueType, a: int, b: int) -> int:
        self.require(ty, Capability.WRAPPING_ADD, "wrapping_add")
        return (a + b) & ty.mask

    def add(self, ty: ValueType, a: int, b: int) -> int:
        self.require(ty, Capability.ADD, "add")
        total = a + b
        if total > ty.mask:
            raise OverflowError(f"{ty.label} addition overflow: {a} + {b}")
        return total

    def assert_true(self, a: bool) -> None:
        if not a:
            raise AssertionError("Assertion failed: value is false")

    def assert_eq(self, ty: ValueType, a: Value, b: Value) -> None:
        if a != b:
            raise AssertionError(f"Assertion failed: {a!r} != {b!r}")
