"""
zkrepr: One Algorithm, Many Interpretations

Write a bit/word-level algorithm once against the System interface and
run it either as a direct computation or as the construction of a
rank-1 constraint system over a prime field.

Backends:
- Eval: handles are concrete values
- ArithmeticSystem: handles are linear combinations, operations append
  product constraints
- BinaryEmulate: adds U8/U32 words to any boolean system by bit-slicing

Usage:
    from zkrepr import Eval, ArithmeticSystem, BinaryEmulate, GF2
    from zkrepr.crypto import Sha256, sha256_digest

    # Concrete hash
    digest = Sha256(sha256_digest(Eval(), b"abc")).hexdigest()

    # Constraint system for the same computation
    cs = ArithmeticSystem(GF2, max_terms=8)
    words = sha256_digest(BinaryEmulate(cs), b"abc")
    print(cs.num_vars, len(cs.constraints))
"""

# Types
from .types import ValueType, Capability

# Abstraction
from .system import System, Handle

# Backends
from .eval import Eval
from .field import (
    PrimeField,
    FieldElement,
    GOLDILOCKS,
    BN254,
    GF2,
)
from .r1cs import (
    Variable,
    LinearCombination,
    ProductConstraint,
    ArithmeticSystem,
)
from .binary import BinaryEmulate, decode_bits

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Types
    "ValueType",
    "Capability",
    # Abstraction
    "System",
    "Handle",
    # Direct evaluation
    "Eval",
    # Fields
    "PrimeField",
    "FieldElement",
    "GOLDILOCKS",
    "BN254",
    "GF2",
    # Constraint system
    "Variable",
    "LinearCombination",
    "ProductConstraint",
    "ArithmeticSystem",
    # Binary emulation
    "BinaryEmulate",
    "decode_bits",
]
