"""
Merkle Tree Proofs - Hashing Capabilities

Provides the hasher protocol consumed by the tree, concrete hashers for the
supported algorithms, and the order-independent pair hash.

A hasher carries reset/update/digest state. One instance must never be used
from two threads at once: give each concurrent user its own instance via
new_hasher().
"""

import hashlib
from typing import Protocol

from eth_utils import keccak

from merkle_tree.core.config import SUPPORTED_HASH_ALGORITHMS, settings
from merkle_tree.crypto.errors import UnsupportedHashAlgorithmError

# Fixed byte length of every node in a tree
DIGEST_LENGTH = 32


class Hasher(Protocol):
    """Reset, accumulate bytes, finalize digest."""

    name: str
    digest_size: int

    def reset(self) -> None: ...

    def update(self, data: bytes) -> None: ...

    def digest(self) -> bytes: ...


class HashlibHasher:
    """
    Hasher backed by a hashlib algorithm.

    hashlib objects cannot be reset, so reset() swaps in a fresh one.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._hash = hashlib.new(name)
        self.digest_size = self._hash.digest_size

    def reset(self) -> None:
        self._hash = hashlib.new(self.name)

    def update(self, data: bytes) -> None:
        self._hash.update(data)

    def digest(self) -> bytes:
        return self._hash.digest()

    def __repr__(self) -> str:
        return f"HashlibHasher({self.name!r})"


class Keccak256Hasher:
    """
    Legacy Ethereum keccak256 (not NIST SHA3-256).

    eth_utils only exposes one-shot hashing, so input is buffered until
    digest() is called.
    """

    name = "keccak256"
    digest_size = 32

    def __init__(self) -> None:
        self._buffer = bytearray()

    def reset(self) -> None:
        self._buffer.clear()

    def update(self, data: bytes) -> None:
        self._buffer.extend(data)

    def digest(self) -> bytes:
        return keccak(bytes(self._buffer))

    def __repr__(self) -> str:
        return "Keccak256Hasher()"


def new_hasher(algorithm: str | None = None) -> Hasher:
    """
    Create a new, exclusively owned hasher.

    Args:
        algorithm: Algorithm name, defaults to settings.HASH_ALGORITHM

    Returns:
        Fresh hasher instance

    Raises:
        UnsupportedHashAlgorithmError: If algorithm is not supported
    """
    name = (algorithm or settings.HASH_ALGORITHM).lower()

    if name not in SUPPORTED_HASH_ALGORITHMS:
        raise UnsupportedHashAlgorithmError(
            f"Unsupported hash algorithm {name!r}, "
            f"expected one of {', '.join(SUPPORTED_HASH_ALGORITHMS)}"
        )

    if name == "keccak256":
        return Keccak256Hasher()
    return HashlibHasher(name)


def hash_pair(hasher: Hasher, a: bytes, b: bytes) -> bytes:
    """
    Hash two digests into one, independent of argument order.

    The byte-wise smaller digest is written first (a first on ties), so
    hash_pair(h, a, b) == hash_pair(h, b, a) and a verifier never needs to
    know which side of the pair a sibling was on.

    Args:
        hasher: Hashing capability, reset before use
        a: First digest
        b: Second digest

    Returns:
        Digest of the ordered concatenation
    """
    hasher.reset()
    if a <= b:
        hasher.update(a + b)
    else:
        hasher.update(b + a)
    return hasher.digest()
