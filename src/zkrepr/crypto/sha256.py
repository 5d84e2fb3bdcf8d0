"""
SHA-256 Compression Gadget

FIPS 180-4 SHA-256, written only against the System interface so that it
runs under any backend offering U32 AND/XOR/NOT/SHIFT/ROTATE and
WRAPPING_ADD:

    >>> sys = Eval()
    >>> state = sha256_new(sys)
    >>> state = sha256_update(sys, state, [0x80000000] + [0] * 15)
    >>> Sha256(state).hexdigest()[:16]
    'e3b0c44298fc1c14'

Under BinaryEmulate(ArithmeticSystem(...)) the same calls build the
constraint system of the compression function instead.

The gadget consumes padded 16-word chunks; pad_message performs the
standard padding for callers hashing raw bytes.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple
import logging
import struct

from ..system import Handle, System
from ..types import Capability, ValueType


logger = logging.getLogger(__name__)

U32 = ValueType.U32

# Operations the compression function needs on words
REQUIRED = Capability.AND | Capability.XOR | Capability.NOT | Capability.SHIFT \
    | Capability.ROTATE | Capability.WRAPPING_ADD

CHUNK_WORDS = 16
BLOCK_SIZE = 64
DIGEST_SIZE = 32

# Initial hash value
H: Tuple[int, ...] = (
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a, 0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19,
)

# Round constants
K: Tuple[int, ...] = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5, 0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3, 0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc, 0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7, 0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13, 0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3, 0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5, 0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208, 0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
)


@dataclass(frozen=True)
class Sha256:
    """Concrete SHA-256 chaining state: eight 32-bit words."""

    words: Tuple[int, ...] = H

    def __post_init__(self):
        if len(self.words) != 8:
            raise ValueError(f"SHA-256 state must have 8 words, got {len(self.words)}")

    def digest(self) -> bytes:
        """Big-endian serialization (32 bytes)."""
        return struct.pack('>8I', *self.words)

    def hexdigest(self) -> str:
        return self.digest().hex()

    def __str__(self) -> str:
        return self.hexdigest()


def sha256_new(system: System) -> Tuple[Handle, ...]:
    """Initial chaining state as constants of `system`."""
    system.require(U32, Capability.NONE, "sha256")
    return system.constant_array(U32, Sha256().words)


def _big_sigma(system: System, x: Handle, r0: int, r1: int, r2: int) -> Handle:
    t = system.xor(U32, system.rotr(U32, x, r0), system.rotr(U32, x, r1))
    return system.xor(U32, t, system.rotr(U32, x, r2))


def _small_sigma(system: System, x: Handle, r0: int, r1: int, s: int) -> Handle:
    t = system.xor(U32, system.rotr(U32, x, r0), system.rotr(U32, x, r1))
    return system.xor(U32, t, system.shr(U32, x, s))


def _word(system: System, w) -> Handle:
    # ints are injected as constants, anything else is taken as a handle
    if isinstance(w, int) and not isinstance(w, bool):
        return system.constant(U32, w)
    return w


def sha256_update(system: System, state: Sequence[Handle], chunk: Sequence) -> Tuple[Handle, ...]:
    """
    Run one SHA-256 compression of `chunk` into `state`.

    `chunk` holds 16 words, each an int or a U32 handle of `system`.
    Returns the new state; `state` itself is left untouched.
    """
    system.require(U32, REQUIRED, "sha256")
    if len(state) != 8:
        raise ValueError(f"SHA-256 state must have 8 words, got {len(state)}")
    if len(chunk) != CHUNK_WORDS:
        raise ValueError(f"SHA-256 chunk must have {CHUNK_WORDS} words, got {len(chunk)}")

    logger.debug("sha256 compression on %s", type(system).__name__)
    add = system.wrapping_add

    # Message schedule
    w: List[Handle] = [_word(system, x) for x in chunk]
    for i in range(16, 64):
        s0 = _small_sigma(system, w[i - 15], 7, 18, 3)
        s1 = _small_sigma(system, w[i - 2], 17, 19, 10)
        w.append(add(U32, add(U32, add(U32, w[i - 16], s0), w[i - 7]), s1))

    a, b, c, d, e, f, g, h = state

    # Compression function main loop
    for i in range(64):
        s1 = _big_sigma(system, e, 6, 11, 25)
        ch = system.xor(
            U32,
            system.and_(U32, e, f),
            system.and_(U32, system.not_(U32, e), g),
        )
        temp1 = add(U32, h, s1)
        temp1 = add(U32, temp1, ch)
        temp1 = add(U32, temp1, system.constant(U32, K[i]))
        temp1 = add(U32, temp1, w[i])

        s0 = _big_sigma(system, a, 2, 13, 22)
        maj = system.xor(U32, system.and_(U32, a, b), system.and_(U32, a, c))
        maj = system.xor(U32, maj, system.and_(U32, b, c))
        temp2 = add(U32, s0, maj)

        h = g
        g = f
        f = e
        e = add(U32, d, temp1)
        d = c
        c = b
        b = a
        a = add(U32, temp1, temp2)

    return tuple(add(U32, x, y) for x, y in zip(state, (a, b, c, d, e, f, g, h)))


# =============================================================================
# Padding and Convenience
# =============================================================================

def pad_message(data: bytes) -> List[List[int]]:
    """
    Standard SHA-256 padding, split into 16-word big-endian chunks.

    data || 0x80 || 0x00... || bit length (64-bit big-endian)
    """
    bit_length = len(data) * 8
    padded = bytearray(data)
    padded.append(0x80)
    while len(padded) % BLOCK_SIZE != BLOCK_SIZE - 8:
        padded.append(0)
    padded += struct.pack('>Q', bit_length & 0xFFFFFFFFFFFFFFFF)
    return [
        list(struct.unpack('>16I', padded[i:i + BLOCK_SIZE]))
        for i in range(0, len(padded), BLOCK_SIZE)
    ]


def sha256_digest(system: System, data: bytes) -> Tuple[Handle, ...]:
    """Hash `data` under `system`, returning the final state handles."""
    state = sha256_new(system)
    for chunk in pad_message(data):
        state = sha256_update(system, state, chunk)
    return state
