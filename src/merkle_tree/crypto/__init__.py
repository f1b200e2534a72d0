"""
Merkle Tree Proofs - Cryptographic Utilities

Provides Merkle tree construction, proof generation, and verification.
"""

from merkle_tree.crypto.errors import (
    EmptyInputError,
    InvalidDigestLengthError,
    InvalidEncodingError,
    InvalidIndexError,
    MerkleTreeError,
    MissingHasherError,
    NotALeafError,
    ShapeError,
    UnsupportedHashAlgorithmError,
)
from merkle_tree.crypto.hashers import (
    DIGEST_LENGTH,
    Hasher,
    HashlibHasher,
    Keccak256Hasher,
    hash_pair,
    new_hasher,
)
from merkle_tree.crypto.merkle import (
    InclusionProof,
    MerkleTree,
    is_valid_tree,
    process_proof,
    verify_inclusion_proof,
    verify_proof,
)

__all__ = [
    "DIGEST_LENGTH",
    "EmptyInputError",
    "Hasher",
    "HashlibHasher",
    "InclusionProof",
    "InvalidDigestLengthError",
    "InvalidEncodingError",
    "InvalidIndexError",
    "Keccak256Hasher",
    "MerkleTree",
    "MerkleTreeError",
    "MissingHasherError",
    "NotALeafError",
    "ShapeError",
    "UnsupportedHashAlgorithmError",
    "hash_pair",
    "is_valid_tree",
    "new_hasher",
    "process_proof",
    "verify_inclusion_proof",
    "verify_proof",
]
