"""
Value-Representation Systems

A System interprets primitive operations on abstract handles. The same
algorithm, written only against this interface, can be run by any
backend:

- Eval: the handle is the concrete value
- ArithmeticSystem: the handle is a linear combination over a field and
  operations grow a rank-1 constraint system
- BinaryEmulate: words are tuples of boolean handles of another system

Every operation takes the ValueType of its operands first, e.g.

    >>> sys = Eval()
    >>> a = sys.constant(ValueType.U32, 0xF0)
    >>> sys.rotr(ValueType.U32, a, 4)
    15

Operations a backend does not declare in `capabilities` raise TypeError.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Tuple

from .types import Capability, ValueType


Handle = Any


class System(ABC):
    """
    Abstract interpreter for operations on values of native types.

    Subclasses set `capabilities` and override the operations they list.
    OR is derived here from AND and NOT (de Morgan) for every backend
    that does not provide its own.
    """

    capabilities: Dict[ValueType, Capability] = {}

    # =========================================================================
    # Capability Queries
    # =========================================================================

    def supports(self, ty: ValueType, capability: Capability) -> bool:
        """True iff every operation in `capability` is available for `ty`."""
        caps = self.capabilities.get(ty, Capability.NONE)
        if Capability.AND in caps and Capability.NOT in caps:
            caps |= Capability.OR
        return (caps & capability) == capability

    def represents(self, ty: ValueType) -> bool:
        """True iff constants of `ty` can be built."""
        return ty in self.capabilities

    def require(self, ty: ValueType, capability: Capability, op: str = "") -> None:
        """Raise TypeError unless `capability` is available for `ty`."""
        if not self.represents(ty):
            raise TypeError(f"{type(self).__name__} cannot represent {ty.label}")
        if not self.supports(ty, capability):
            what = op or str(capability)
            raise TypeError(f"{type(self).__name__} does not support {what} on {ty.label}")

    # =========================================================================
    # Constants
    # =========================================================================

    @abstractmethod
    def constant(self, ty: ValueType, value) -> Handle:
        """Build the handle of a known value."""

    def constant_array(self, ty: ValueType, values: Iterable) -> Tuple[Handle, ...]:
        """Build a tuple of constant handles, one per value."""
        return tuple(self.constant(ty, v) for v in values)

    # =========================================================================
    # Operations
    # =========================================================================

    def and_(self, ty: ValueType, a: Handle, b: Handle) -> Handle:
        self.require(ty, Capability.AND, "and")
        raise NotImplementedError

    def or_(self, ty: ValueType, a: Handle, b: Handle) -> Handle:
        """a | b, computed as not(not a & not b)."""
        self.require(ty, Capability.OR, "or")
        na = self.not_(ty, a)
        nb = self.not_(ty, b)
        return self.not_(ty, self.and_(ty, na, nb))

    def xor(self, ty: ValueType, a: Handle, b: Handle) -> Handle:
        self.require(ty, Capability.XOR, "xor")
        raise NotImplementedError

    def not_(self, ty: ValueType, a: Handle) -> Handle:
        self.require(ty, Capability.NOT, "not")
        raise NotImplementedError

    def shl(self, ty: ValueType, a: Handle, amount: int) -> Handle:
        self.require(ty, Capability.SHIFT, "shl")
        raise NotImplementedError

    def shr(self, ty: ValueType, a: Handle, amount: int) -> Handle:
        self.require(ty, Capability.SHIFT, "shr")
        raise NotImplementedError

    def rotl(self, ty: ValueType, a: Handle, amount: int) -> Handle:
        self.require(ty, Capability.ROTATE, "rotl")
        raise NotImplementedError

    def rotr(self, ty: ValueType, a: Handle, amount: int) -> Handle:
        self.require(ty, Capability.ROTATE, "rotr")
        raise NotImplementedError

    def wrapping_add(self, ty: ValueType, a: Handle, b: Handle) -> Handle:
        self.require(ty, Capability.WRAPPING_ADD, "wrapping_add")
        raise NotImplementedError

    def add(self, ty: ValueType, a: Handle, b: Handle) -> Handle:
        self.require(ty, Capability.ADD, "add")
        raise NotImplementedError

    def assert_true(self, a: Handle) -> None:
        """Assert a boolean handle is true (check or constraint)."""
        self.require(ValueType.BOOL, Capability.ASSERT, "assert")
        raise NotImplementedError

    def assert_eq(self, ty: ValueType, a: Handle, b: Handle) -> None:
        """Assert two handles hold equal values (check or constraint)."""
        self.require(ty, Capability.ASSERT_EQ, "assert_eq")
        raise NotImplementedError


def check_shift(ty: ValueType, amount: int, rotate: bool = False) -> int:
    """
    Validate a shift or rotation amount for `ty`.

    Shifts accept [0, width]; rotations accept [0, width).
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Shift amount must be an int, got {type(amount).__name__}")
    upper = ty.width - 1 if rotate else ty.width
    if not 0 <= amount <= upper:
        kind = "Rotation" if rotate else "Shift"
        raise ValueError(f"{kind} amount {amount} out of range for {ty.label}")
    return amount
