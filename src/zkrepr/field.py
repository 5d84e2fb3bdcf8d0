"""
Prime Field Arithmetic

Field: F_p for a caller-chosen prime p.

The constraint backend only needs a narrow slice of field arithmetic:
- additive and multiplicative identities
- addition, subtraction, multiplication
- embedding of small unsigned integers
- a zero test (used to detect characteristic 2)

Presets:
- GOLDILOCKS: p = 2^64 - 2^32 + 1
- BN254: scalar field of the bn128 curve
- GF2: p = 2, the characteristic-2 field where XOR is addition
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union


# Goldilocks prime: p = 2^64 - 2^32 + 1
GOLDILOCKS_PRIME = (1 << 64) - (1 << 32) + 1

# bn128 scalar field order
BN254_PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617


@dataclass(frozen=True)
class PrimeField:
    """
    Parameters of a prime field F_p.

    Immutable and hashable; two fields are the same field iff their
    moduli are equal. Calling the field embeds an integer:

        >>> F = PrimeField(7)
        >>> F(9)
        FieldElement(2 mod 7)
    """

    modulus: int
    """Field order p (assumed prime)."""

    name: str = ""
    """Human-readable label, informational only."""

    def __post_init__(self):
        if self.modulus < 2:
            raise ValueError(f"Field modulus must be at least 2, got {self.modulus}")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PrimeField):
            return self.modulus == other.modulus
        return False

    def __hash__(self) -> int:
        return hash(self.modulus)

    def __call__(self, value: int) -> FieldElement:
        return FieldElement(value, self)

    def zero(self) -> FieldElement:
        """Additive identity."""
        return FieldElement(0, self)

    def one(self) -> FieldElement:
        """Multiplicative identity."""
        return FieldElement(1, self)

    @property
    def is_characteristic_two(self) -> bool:
        """True iff 1 + 1 = 0 in this field."""
        return (self.one() + self.one()).is_zero()

    @property
    def capacity_bits(self) -> int:
        """Number of bits every unsigned integer below 2^capacity_bits embeds injectively."""
        return self.modulus.bit_length() - 1


GOLDILOCKS = PrimeField(GOLDILOCKS_PRIME, "goldilocks")
BN254 = PrimeField(BN254_PRIME, "bn254")
GF2 = PrimeField(2, "gf2")


class FieldElement:
    """
    Element of a prime field F_p.

    Operands must belong to the same field; plain ints are embedded
    into the field of the other operand.
    """

    __slots__ = ('value', 'field')

    def __init__(self, value: int, field: PrimeField):
        """Create field element from integer."""
        self.field = field
        self.value = value % field.modulus

    def _coerce(self, other: Union[FieldElement, int]) -> int:
        if isinstance(other, FieldElement):
            if other.field != self.field:
                raise ValueError(
                    f"Field mismatch: {self.field.modulus} vs {other.field.modulus}"
                )
            return other.value
        if isinstance(other, int):
            return other
        raise TypeError(f"Cannot combine FieldElement with {type(other).__name__}")

    # =========================================================================
    # Arithmetic Operations
    # =========================================================================

    def __add__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Addition in F_p."""
        return FieldElement(self.value + self._coerce(other), self.field)

    __radd__ = __add__

    def __sub__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Subtraction in F_p."""
        return FieldElement(self.value - self._coerce(other), self.field)

    def __rsub__(self, other: Union[FieldElement, int]) -> FieldElement:
        return FieldElement(self._coerce(other) - self.value, self.field)

    def __mul__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Multiplication in F_p."""
        return FieldElement(self.value * self._coerce(other), self.field)

    __rmul__ = __mul__

    def __neg__(self) -> FieldElement:
        """Negation in F_p."""
        return FieldElement(-self.value, self.field)

    # =========================================================================
    # Comparison Operations
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldElement):
            return self.field == other.field and self.value == other.value
        if isinstance(other, int):
            return self.value == (other % self.field.modulus)
        return False

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f"FieldElement({self.value} mod {self.field.modulus})"

    def __str__(self) -> str:
        return str(self.value)

    def to_int(self) -> int:
        """Convert to integer."""
        return self.value

    # =========================================================================
    # Predicates
    # =========================================================================

    def is_zero(self) -> bool:
        return self.value == 0

    def is_one(self) -> bool:
        return self.value == 1
