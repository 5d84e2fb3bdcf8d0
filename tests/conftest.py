"""
Shared fixtures.

Witness generation is not part of the library, but every constraint the
library emits has the shape A × B = v for a fresh variable v (or a result
that is already known), in declaration order. That makes a forward pass
enough to compute a witness from the input variables.
"""

import pytest

from zkrepr import ArithmeticSystem, LinearCombination


def forward_witness(system: ArithmeticSystem, inputs: dict) -> list:
    """Assign every variable of `system` given values for its inputs."""
    values = [None] * system.num_vars
    for index, value in inputs.items():
        values[index] = system.field(int(value))

    for constraint in system.constraints:
        result = constraint.result
        if len(result.coeffs) != 1 or not result.constant_term.is_zero():
            continue
        (index, coeff), = result.coeffs.items()
        if values[index] is not None or not coeff.is_one():
            continue
        a = constraint.operand_a.evaluate(values)
        b = constraint.operand_b.evaluate(values)
        values[index] = a * b

    missing = [i for i, v in enumerate(values) if v is None]
    assert not missing, f"Unassigned variables: {missing[:10]}"
    return values


def input_bit(system: ArithmeticSystem, inputs: dict, bit: bool) -> LinearCombination:
    """Declare an input variable carrying `bit` in the witness."""
    var = system.declare()
    inputs[var.index] = int(bit)
    return LinearCombination.variable(var, system.field)


@pytest.fixture(scope="session")
def solve():
    return forward_witness


@pytest.fixture(scope="session")
def new_input():
    return input_bit
