"""
Binary Emulation

Lifts any system with boolean AND/OR/XOR/NOT to fixed-width unsigned
words by bit-slicing: a word is a tuple of boolean handles of the inner
system, least significant bit first.

    U32 handle = (b_0, b_1, ..., b_31)

- AND/OR/XOR/NOT: per bit
- shifts and rotations: re-indexing, no inner operation
- wrapping addition: ripple-carry adder, carry out of the top bit dropped
"""

from typing import Callable, Sequence, Tuple

from .field import FieldElement
from .system import Handle, System, check_shift
from .types import Capability, ValueType


Bits = Tuple[Handle, ...]


class BinaryEmulate(System):
    """
    Augments a boolean system with word types represented as bit strings.

    Example:
        >>> sys = BinaryEmulate(Eval())
        >>> a = sys.constant(ValueType.U32, 1234)
        >>> decode_bits(sys.wrapping_add(ValueType.U32, a, a))
        2468
    """

    WORD_TYPES = (ValueType.U8, ValueType.U32)

    def __init__(self, inner: System):
        inner.require(ValueType.BOOL, Capability.BOOLEAN, "binary emulation")
        self.inner = inner

        bool_caps = Capability.BOOLEAN
        word_caps = Capability.WORD
        for extra in (Capability.ASSERT, Capability.ASSERT_EQ):
            if inner.supports(ValueType.BOOL, extra):
                bool_caps |= extra
        if inner.supports(ValueType.BOOL, Capability.ASSERT_EQ):
            word_caps |= Capability.ASSERT_EQ

        self.capabilities = {ValueType.BOOL: bool_caps}
        for ty in self.WORD_TYPES:
            self.capabilities[ty] = word_caps

    def _bits(self, ty: ValueType, a: Sequence[Handle]) -> Bits:
        if len(a) != ty.width:
            raise ValueError(f"{ty.label} handle must have {ty.width} bits, got {len(a)}")
        return tuple(a)

    def _bitwise(self, ty: ValueType, op: Callable, a: Bits, b: Bits) -> Bits:
        a = self._bits(ty, a)
        b = self._bits(ty, b)
        return tuple(op(ValueType.BOOL, x, y) for x, y in zip(a, b))

    # =========================================================================
    # System Operations
    # =========================================================================

    def constant(self, ty: ValueType, value):
        self.require(ty, Capability.NONE, "constant")
        value = ty.validate(value)
        if ty is ValueType.BOOL:
            return self.inner.constant(ValueType.BOOL, value)
        return tuple(
            self.inner.constant(ValueType.BOOL, bool((value >> i) & 1))
            for i in range(ty.width)
        )

    def and_(self, ty: ValueType, a, b):
        self.require(ty, Capability.AND, "and")
        if ty is ValueType.BOOL:
            return self.inner.and_(ty, a, b)
        return self._bitwise(ty, self.inner.and_, a, b)

    def or_(self, ty: ValueType, a, b):
        self.require(ty, Capability.OR, "or")
        if ty is ValueType.BOOL:
            return self.inner.or_(ty, a, b)
        return self._bitwise(ty, self.inner.or_, a, b)

    def xor(self, ty: ValueType, a, b):
        self.require(ty, Capability.XOR, "xor")
        if ty is ValueType.BOOL:
            return self.inner.xor(ty, a, b)
        return self._bitwise(ty, self.inner.xor, a, b)

    def not_(self, ty: ValueType, a):
        self.require(ty, Capability.NOT, "not")
        if ty is ValueType.BOOL:
            return self.inner.not_(ty, a)
        return tuple(self.inner.not_(ValueType.BOOL, x) for x in self._bits(ty, a))

    def shl(self, ty: ValueType, a: Bits, amount: int) -> Bits:
        self.require(ty, Capability.SHIFT, "shl")
        k = check_shift(ty, amount)
        a = self._bits(ty, a)
        zero = self.inner.constant(ValueType.BOOL, False)
        return (zero,) * k + a[:ty.width - k]

    def shr(self, ty: ValueType, a: Bits, amount: int) -> Bits:
        self.require(ty, Capability.SHIFT, "shr")
        k = check_shift(ty, amount)
        a = self._bits(ty, a)
        zero = self.inner.constant(ValueType.BOOL, False)
        return a[k:] + (zero,) * k

    def rotl(self, ty: ValueType, a: Bits, amount: int) -> Bits:
        self.require(ty, Capability.ROTATE, "rotl")
        k = check_shift(ty, amount, rotate=True)
        a = self._bits(ty, a)
        return a[ty.width - k:] + a[:ty.width - k]

    def rotr(self, ty: ValueType, a: Bits, amount: int) -> Bits:
        self.require(ty, Capability.ROTATE, "rotr")
        k = check_shift(ty, amount, rotate=True)
        a = self._bits(ty, a)
        return a[k:] + a[:k]

    def wrapping_add(self, ty: ValueType, a: Bits, b: Bits) -> Bits:
        """Ripple-carry addition modulo 2^width."""
        self.require(ty, Capability.WRAPPING_ADD, "wrapping_add")
        a = self._bits(ty, a)
        b = self._bits(ty, b)
        inner = self.inner
        B = ValueType.BOOL

        carry = inner.constant(B, False)
        out = []
        for i, (x, y) in enumerate(zip(a, b)):
            p = inner.xor(B, x, y)
            out.append(inner.xor(B, p, carry))
            # carry out of the top bit is discarded
            if i < ty.width - 1:
                carry = inner.or_(B, inner.and_(B, x, y), inner.and_(B, carry, p))
        return tuple(out)

    def assert_true(self, a) -> None:
        self.require(ValueType.BOOL, Capability.ASSERT, "assert")
        self.inner.assert_true(a)

    def assert_eq(self, ty: ValueType, a, b) -> None:
        self.require(ty, Capability.ASSERT_EQ, "assert_eq")
        if ty is ValueType.BOOL:
            self.inner.assert_eq(ty, a, b)
            return
        for x, y in zip(self._bits(ty, a), self._bits(ty, b)):
            self.inner.assert_eq(ValueType.BOOL, x, y)


def decode_bits(bits: Sequence) -> int:
    """
    Integer value of concrete bits, least significant first.

    Bits may be bools, the ints 0/1 or field elements equal to 0 or 1.
    """
    value = 0
    for i, bit in enumerate(bits):
        if isinstance(bit, FieldElement):
            bit = bit.value
        if bit not in (0, 1):
            raise ValueError(f"Bit {i} is not 0 or 1: {bit!r}")
        value |= int(bit) << i
    return value
