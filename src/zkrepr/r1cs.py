"""
Rank-1 Constraint System Backend

Handles are linear combinations of indexed variables over a prime field:

    L = c + Σ_i k_i · x_i

Composing operations accumulates product constraints

    A × B = C        (A, B, C linear combinations)

into an append-only list. Boolean handles evaluate to 0 or 1 at every
satisfying assignment.

Cost per boolean operation:
- NOT: 1 - a                     (no constraint)
- AND: new c, a × b = c          (1 constraint)
- OR:  de Morgan over AND/NOT    (1 constraint)
- XOR: a + b in characteristic 2 (no constraint)
       a + b - 2(a ∧ b) otherwise (1 constraint)

Byte handles share the representation; range-checking is opt-in via
ArithmeticSystem.decompose_byte.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union
import logging

from .field import FieldElement, GOLDILOCKS, PrimeField
from .system import System
from .types import Capability, ValueType


logger = logging.getLogger(__name__)

# Emit a progress record every this many constraints
LOG_EVERY = 10_000

Assignment = Sequence[FieldElement]


@dataclass(frozen=True)
class Variable:
    """An indexed unknown of a constraint system."""
    index: int


# =============================================================================
# Linear Combinations
# =============================================================================

class LinearCombination:
    """
    A constant term plus a weighted sum of variables.

    Coefficients are stored sparsely; absent indices have coefficient
    zero and zero coefficients are never stored. Instances are treated
    as immutable.
    """

    __slots__ = ('field', 'constant_term', 'coeffs')

    def __init__(
        self,
        field: PrimeField,
        constant_term: Optional[FieldElement] = None,
        coeffs: Optional[Dict[int, FieldElement]] = None,
    ):
        self.field = field
        self.constant_term = field.zero() if constant_term is None else constant_term
        self.coeffs: Dict[int, FieldElement] = {}
        if coeffs:
            for index, coeff in coeffs.items():
                if not coeff.is_zero():
                    self.coeffs[index] = coeff

    @classmethod
    def constant(cls, value: FieldElement) -> LinearCombination:
        """Combination with the given constant and no variables."""
        return cls(value.field, value)

    @classmethod
    def variable(cls, var: Variable, field: PrimeField) -> LinearCombination:
        """Combination consisting solely of `var` with coefficient 1."""
        return cls(field, None, {var.index: field.one()})

    def dim(self) -> int:
        """One more than the last variable index referenced, 0 if none."""
        return max(self.coeffs) + 1 if self.coeffs else 0

    def is_constant(self) -> bool:
        return not self.coeffs

    def _check_field(self, other: LinearCombination) -> None:
        if other.field != self.field:
            raise ValueError(
                f"Field mismatch: {self.field.modulus} vs {other.field.modulus}"
            )

    def __add__(self, other: LinearCombination) -> LinearCombination:
        self._check_field(other)
        coeffs = dict(self.coeffs)
        for index, coeff in other.coeffs.items():
            if index in coeffs:
                coeffs[index] = coeffs[index] + coeff
            else:
                coeffs[index] = coeff
        return LinearCombination(self.field, self.constant_term + other.constant_term, coeffs)

    def __sub__(self, other: LinearCombination) -> LinearCombination:
        self._check_field(other)
        coeffs = dict(self.coeffs)
        for index, coeff in other.coeffs.items():
            if index in coeffs:
                coeffs[index] = coeffs[index] - coeff
            else:
                coeffs[index] = -coeff
        return LinearCombination(self.field, self.constant_term - other.constant_term, coeffs)

    def __neg__(self) -> LinearCombination:
        return LinearCombination(
            self.field,
            -self.constant_term,
            {index: -coeff for index, coeff in self.coeffs.items()},
        )

    def __mul__(self, scalar: Union[FieldElement, int]) -> LinearCombination:
        """Scale by a field element or int."""
        if isinstance(scalar, FieldElement) and scalar.field != self.field:
            raise ValueError(
                f"Field mismatch: {self.field.modulus} vs {scalar.field.modulus}"
            )
        return LinearCombination(
            self.field,
            self.constant_term * scalar,
            {index: coeff * scalar for index, coeff in self.coeffs.items()},
        )

    __rmul__ = __mul__

    def evaluate(self, assignment: Assignment) -> FieldElement:
        """Value of this combination with variable i set to assignment[i]."""
        total = self.constant_term
        for index, coeff in self.coeffs.items():
            if index >= len(assignment):
                raise IndexError(f"No value assigned to variable {index}")
            total = total + coeff * assignment[index]
        return total

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinearCombination):
            return NotImplemented
        return (
            self.field == other.field
            and self.constant_term == other.constant_term
            and self.coeffs == other.coeffs
        )

    def __hash__(self) -> int:
        return hash((self.field, self.constant_term, frozenset(self.coeffs.items())))

    def __repr__(self) -> str:
        terms = [str(self.constant_term)]
        terms += [f"{coeff}*x{index}" for index, coeff in sorted(self.coeffs.items())]
        return f"LinearCombination({' + '.join(terms)})"


# =============================================================================
# Constraints
# =============================================================================

@dataclass(frozen=True)
class ProductConstraint:
    """Asserts operand_a × operand_b = result."""

    operand_a: LinearCombination
    operand_b: LinearCombination
    result: LinearCombination

    def dim(self) -> int:
        """One more than the last variable index referenced in this constraint."""
        return max(self.operand_a.dim(), self.operand_b.dim(), self.result.dim())

    def is_satisfied(self, assignment: Assignment) -> bool:
        a = self.operand_a.evaluate(assignment)
        b = self.operand_b.evaluate(assignment)
        return a * b == self.result.evaluate(assignment)


# =============================================================================
# Constraint System
# =============================================================================

class ArithmeticSystem(System):
    """
    A constraint system consisting of ProductConstraints.

    Variables are declared, never freed; constraints are appended, never
    removed. `max_terms` bounds the size of XOR results: a larger result
    is replaced by a fresh variable v with the constraint result × 1 = v.
    None (the default) never compacts. Gadgets the size of a SHA-256
    compression need a bound (e.g. `max_terms=8`): unbounded XOR results
    grow toward the whole variable set and construction slows to a crawl.

    Example:
        >>> cs = ArithmeticSystem(GF2)
        >>> a = cs.alloc_bool()
        >>> b = cs.alloc_bool()
        >>> c = cs.and_(ValueType.BOOL, a, b)
        >>> cs.num_vars, len(cs.constraints)
        (3, 3)
    """

    def __init__(self, field: PrimeField = GOLDILOCKS, max_terms: Optional[int] = None):
        if max_terms is not None and max_terms < 1:
            raise ValueError(f"max_terms must be positive, got {max_terms}")
        self.field = field
        self.max_terms = max_terms
        self._char_two = field.is_characteristic_two
        self._num_vars = 0
        self._constraints: List[ProductConstraint] = []

        bool_caps = (
            Capability.AND | Capability.XOR | Capability.NOT
            | Capability.ASSERT | Capability.ASSERT_EQ
        )
        self.capabilities = {ValueType.BOOL: bool_caps}
        # Bytes embed injectively only when p > 255
        if field.capacity_bits >= ValueType.U8.width:
            self.capabilities[ValueType.U8] = Capability.ASSERT_EQ

    @property
    def num_vars(self) -> int:
        return self._num_vars

    @property
    def constraints(self) -> Tuple[ProductConstraint, ...]:
        return tuple(self._constraints)

    def declare(self) -> Variable:
        """Declares a new variable in this system."""
        var = Variable(self._num_vars)
        self._num_vars += 1
        if self._num_vars % LOG_EVERY == 0:
            logger.debug("%d variables declared", self._num_vars)
        return var

    def satisfy(self, constraint: ProductConstraint) -> None:
        """Introduces a constraint into this system."""
        for lc in (constraint.operand_a, constraint.operand_b, constraint.result):
            if lc.field != self.field:
                raise ValueError(
                    f"Constraint over field {lc.field.modulus}, system is over {self.field.modulus}"
                )
        if constraint.dim() > self._num_vars:
            raise IndexError(
                f"Constraint references variable {constraint.dim() - 1}, "
                f"only {self._num_vars} declared"
            )
        self._constraints.append(constraint)
        if len(self._constraints) % LOG_EVERY == 0:
            logger.debug(
                "%d constraints over %d variables", len(self._constraints), self._num_vars
            )

    def is_satisfied(self, assignment: Assignment) -> bool:
        """True iff every constraint holds under `assignment`."""
        return all(c.is_satisfied(assignment) for c in self._constraints)

    def unsatisfied(self, assignment: Assignment) -> List[int]:
        """Indices of constraints violated by `assignment`."""
        return [i for i, c in enumerate(self._constraints) if not c.is_satisfied(assignment)]

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_handles(self, *handles: LinearCombination) -> None:
        for h in handles:
            if h.field != self.field:
                raise ValueError(
                    f"Handle over field {h.field.modulus}, system is over {self.field.modulus}"
                )

    def _one(self) -> LinearCombination:
        return LinearCombination.constant(self.field.one())

    def _fresh(self) -> LinearCombination:
        return LinearCombination.variable(self.declare(), self.field)

    def _compact(self, lc: LinearCombination) -> LinearCombination:
        if self.max_terms is None or len(lc.coeffs) <= self.max_terms:
            return lc
        v = self._fresh()
        self.satisfy(ProductConstraint(lc, self._one(), v))
        return v

    def alloc_bool(self) -> LinearCombination:
        """Declare a variable constrained to 0 or 1 and return its handle."""
        v = self._fresh()
        self.satisfy(ProductConstraint(v, v, v))
        return v

    def decompose_byte(self, value: LinearCombination) -> Tuple[LinearCombination, ...]:
        """
        Range-check a byte handle by bit decomposition.

        Declares 8 boolean variables b_0..b_7 and constrains
        Σ 2^i · b_i = value. Returns the bits, least significant first.
        """
        self.require(ValueType.U8, Capability.ASSERT_EQ, "decompose_byte")
        bits = tuple(self.alloc_bool() for _ in range(ValueType.U8.width))
        total = LinearCombination(self.field)
        for i, bit in enumerate(bits):
            total = total + bit * (1 << i)
        self.satisfy(ProductConstraint(total, self._one(), value))
        return bits

    # =========================================================================
    # System Operations
    # =========================================================================

    def constant(self, ty: ValueType, value) -> LinearCombination:
        self.require(ty, Capability.NONE, "constant")
        value = ty.validate(value)
        return LinearCombination.constant(self.field(int(value)))

    def and_(self, ty: ValueType, a: LinearCombination, b: LinearCombination) -> LinearCombination:
        self.require(ty, Capability.AND, "and")
        self._check_handles(a, b)
        c = self._fresh()
        self.satisfy(ProductConstraint(a, b, c))
        return c

    def xor(self, ty: ValueType, a: LinearCombination, b: LinearCombination) -> LinearCombination:
        self.require(ty, Capability.XOR, "xor")
        self._check_handles(a, b)
        if self._char_two:
            return self._compact(a + b)
        ab = self.and_(ty, a, b)
        return self._compact(a + b - ab * 2)

    def not_(self, ty: ValueType, a: LinearCombination) -> LinearCombination:
        self.require(ty, Capability.NOT, "not")
        self._check_handles(a)
        return self._one() - a

    def assert_true(self, a: LinearCombination) -> None:
        self.require(ValueType.BOOL, Capability.ASSERT, "assert")
        self.satisfy(ProductConstraint(a, self._one(), self._one()))

    def assert_eq(self, ty: ValueType, a: LinearCombination, b: LinearCombination) -> None:
        self.require(ty, Capability.ASSERT_EQ, "assert_eq")
        self.satisfy(ProductConstraint(a - b, self._one(), LinearCombination(self.field)))
