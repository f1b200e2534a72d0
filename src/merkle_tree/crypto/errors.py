"""
Merkle Tree Proofs - Errors

Every failure here is an input or structural error: none is transient and
none is retried inside the package.
"""


class MerkleTreeError(ValueError):
    """Base exception for Merkle tree errors."""

    pass


class EmptyInputError(MerkleTreeError):
    """No leaves were supplied to the builder."""

    pass


class ShapeError(MerkleTreeError):
    """Leaf count does not form a complete binary tree."""

    pass


class InvalidDigestLengthError(MerkleTreeError):
    """A leaf, proof element or node is not exactly DIGEST_LENGTH bytes."""

    pass


class MissingHasherError(MerkleTreeError):
    """No hashing capability was supplied."""

    pass


class NotALeafError(MerkleTreeError):
    """Requested proof target is not a leaf position or leaf value."""

    pass


class InvalidIndexError(MerkleTreeError, IndexError):
    """Index arithmetic requested on a position that does not support it."""

    pass


class UnsupportedHashAlgorithmError(MerkleTreeError):
    """Requested hash algorithm has no hashing capability."""

    pass


class InvalidEncodingError(MerkleTreeError):
    """A serialized digest or proof cannot be decoded."""

    pass
