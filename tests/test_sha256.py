"""
Tests for the SHA-256 gadget.

The gadget is run three ways on the same input:
- Eval: concrete hashing, compared with hashlib and known vectors
- BinaryEmulate(Eval): bit-sliced evaluation
- BinaryEmulate(ArithmeticSystem): constraint construction, checked by
  substituting the input bits as a witness
"""

import hashlib

import pytest

from zkrepr import (
    ArithmeticSystem,
    BinaryEmulate,
    Capability,
    Eval,
    GF2,
    GOLDILOCKS,
    System,
    ValueType,
    decode_bits,
)
from zkrepr.crypto import Sha256, pad_message, sha256_digest, sha256_new, sha256_update
from zkrepr.crypto.sha256 import H, K


U32 = ValueType.U32

EMPTY_CHUNK = [0x80000000] + [0] * 15
EMPTY_DIGEST = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ABC_DIGEST = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


class TestConstants:

    def test_table_sizes(self):
        assert len(H) == 8
        assert len(K) == 64

    def test_initial_state(self):
        assert sha256_new(Eval()) == H
        assert Sha256().words == H


class TestPadding:

    def test_empty(self):
        assert pad_message(b"") == [EMPTY_CHUNK]

    def test_abc(self):
        (chunk,) = pad_message(b"abc")
        assert chunk[0] == 0x61626380
        assert chunk[15] == 24

    @pytest.mark.parametrize("size,chunks", [(55, 1), (56, 2), (64, 2), (119, 2), (120, 3)])
    def test_chunk_count(self, size, chunks):
        assert len(pad_message(b"x" * size)) == chunks


class TestEval:
    """Concrete hashing through the direct evaluation backend."""

    def test_empty_message(self):
        state = sha256_update(Eval(), sha256_new(Eval()), EMPTY_CHUNK)
        assert Sha256(state).hexdigest() == EMPTY_DIGEST

    def test_abc(self):
        assert Sha256(sha256_digest(Eval(), b"abc")).hexdigest() == ABC_DIGEST

    @pytest.mark.parametrize("data", [
        b"",
        b"The quick brown fox jumps over the lazy dog",
        bytes(range(256)),
        b"a" * 1000,
    ])
    def test_matches_hashlib(self, data):
        digest = Sha256(sha256_digest(Eval(), data)).digest()
        assert digest == hashlib.sha256(data).digest()

    def test_update_does_not_mutate_state(self):
        state = sha256_new(Eval())
        sha256_update(Eval(), state, EMPTY_CHUNK)
        assert state == H

    def test_digest_is_zero_padded(self):
        assert Sha256((0, 1, 2, 3, 4, 5, 6, 7)).hexdigest().startswith("0000000000000001")


class TestValidation:

    def test_chunk_length(self):
        with pytest.raises(ValueError):
            sha256_update(Eval(), H, [0] * 15)

    def test_state_length(self):
        with pytest.raises(ValueError):
            sha256_update(Eval(), H[:7], EMPTY_CHUNK)

    def test_state_dataclass_length(self):
        with pytest.raises(ValueError):
            Sha256((1, 2, 3))

    def test_backend_without_words(self):
        with pytest.raises(TypeError):
            sha256_new(ArithmeticSystem(GF2))

    def test_backend_missing_capability(self):
        class NoAdd(Eval):
            capabilities = {U32: Capability.BOOLEAN | Capability.SHIFT | Capability.ROTATE}

        with pytest.raises(TypeError):
            sha256_update(NoAdd(), H, EMPTY_CHUNK)


class TestBitSliced:
    """Same gadget, words emulated as bit tuples."""

    def test_empty_message_over_eval(self):
        sys = BinaryEmulate(Eval())
        state = sha256_update(sys, sha256_new(sys), EMPTY_CHUNK)
        words = tuple(decode_bits(word) for word in state)
        assert Sha256(words).hexdigest() == EMPTY_DIGEST


@pytest.fixture(scope="module", params=[GF2, GOLDILOCKS], ids=["gf2", "goldilocks"])
def compressed_empty(request, solve, new_input):
    """Constraint system for one compression with the chunk bits as inputs."""
    cs = ArithmeticSystem(request.param, max_terms=8)
    sys = BinaryEmulate(cs)
    inputs = {}
    chunk = [
        tuple(new_input(cs, inputs, (word >> i) & 1) for i in range(32))
        for word in EMPTY_CHUNK
    ]
    state = sha256_update(sys, sha256_new(sys), chunk)
    witness = solve(cs, inputs)
    return cs, state, witness


class TestConstraintSystem:
    """SHA-256 as a rank-1 constraint system."""

    def test_witness_satisfies_all_constraints(self, compressed_empty):
        cs, _, witness = compressed_empty
        assert cs.unsatisfied(witness) == []

    def test_output_decodes_to_digest(self, compressed_empty):
        _, state, witness = compressed_empty
        words = tuple(
            decode_bits([bit.evaluate(witness) for bit in word]) for word in state
        )
        assert Sha256(words).hexdigest() == EMPTY_DIGEST

    def test_dimensions_within_declared(self, compressed_empty):
        cs, _, _ = compressed_empty
        assert all(c.dim() <= cs.num_vars for c in cs.constraints)

    def test_tampered_witness_rejected(self, compressed_empty):
        cs, _, witness = compressed_empty
        field = cs.field
        # the first AND variable follows the 512 input bits
        tampered = list(witness)
        tampered[512] = field.one() - tampered[512]
        assert cs.unsatisfied(tampered)

    def test_max_terms_respected(self, compressed_empty):
        cs, state, _ = compressed_empty
        assert all(len(bit.coeffs) <= 8 for word in state for bit in word)
