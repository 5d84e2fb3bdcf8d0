"""
Cryptographic gadgets written against the System interface.
"""

from .sha256 import (
    Sha256,
    sha256_new,
    sha256_update,
    sha256_digest,
    pad_message,
)

__all__ = [
    "Sha256",
    "sha256_new",
    "sha256_update",
    "sha256_digest",
    "pad_message",
]
