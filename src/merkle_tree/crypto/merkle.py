"""
Merkle Tree Proofs - Merkle Tree Implementation

Builds a complete binary Merkle tree over pre-hashed leaves, generates
inclusion proofs and verifies them against a root digest.

The tree is stored as a flat node array:
- Index 0 is the root
- The children of node i are at 2i+1 and 2i+2
- For k leaves the array holds 2k-1 nodes and the leaves occupy
  [k-1, 2k-2] in input order

Leaf count must be a power of two. Parent digests use hash_pair(), which
orders its operands, so proofs carry no left/right flags.
"""

import hmac
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from merkle_tree.crypto.errors import (
    EmptyInputError,
    InvalidDigestLengthError,
    InvalidEncodingError,
    InvalidIndexError,
    MissingHasherError,
    NotALeafError,
    ShapeError,
)
from merkle_tree.crypto.hashers import DIGEST_LENGTH, Hasher, hash_pair
from merkle_tree.crypto.indexing import (
    is_leaf_node,
    is_power_of_two,
    leaf_range,
    left_child_index,
    parent_index,
    right_child_index,
    sibling_index,
    tree_height,
)
from merkle_tree.metrics import get_tree_metrics

logger = structlog.get_logger(__name__)

# Keys of the serialized InclusionProof
PROOF_FIELDS = ("leaf", "leaf_index", "siblings", "root", "leaf_count")


def is_valid_digest(value: Any) -> bool:
    """Check if value is a byte string of exactly DIGEST_LENGTH bytes."""
    return isinstance(value, (bytes, bytearray)) and len(value) == DIGEST_LENGTH


def _check_digest(value: Any, what: str) -> bytes:
    if not is_valid_digest(value):
        length = len(value) if isinstance(value, (bytes, bytearray)) else None
        raise InvalidDigestLengthError(
            f"{what} must be {DIGEST_LENGTH} bytes, got "
            + (f"{length} bytes" if length is not None else type(value).__name__)
        )
    return bytes(value)


def _check_hasher(hasher: Hasher | None) -> Hasher:
    if hasher is None:
        raise MissingHasherError("No hasher supplied")
    if hasher.digest_size != DIGEST_LENGTH:
        raise InvalidDigestLengthError(
            f"Hasher {hasher.name!r} produces {hasher.digest_size}-byte digests, "
            f"expected {DIGEST_LENGTH}"
        )
    return hasher


def _from_hex(value: str, what: str) -> bytes:
    if not isinstance(value, str):
        raise InvalidEncodingError(f"{what} must be a hex string, got {type(value).__name__}")
    if value.startswith(("0x", "0X")):
        value = value[2:]
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise InvalidEncodingError(f"{what} is not valid hex: {e}") from e


def _to_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise InvalidEncodingError(f"{what} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidEncodingError(f"{what} must be an integer, got {value!r}") from e


@dataclass
class InclusionProof:
    """
    Portable inclusion proof for one leaf.

    Attributes:
        leaf: Leaf digest being proven
        leaf_index: Position of the leaf among the leaves (0-based)
        siblings: Sibling digests from the leaf up to, not including, the root
        root: Expected Merkle root
        leaf_count: Total number of leaves in the tree
    """

    leaf: bytes
    leaf_index: int
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = b""
    leaf_count: int = 1

    def to_dict(self) -> dict[str, Any]:
        """Serialize proof to dictionary of hex strings."""
        return {
            "leaf": self.leaf.hex(),
            "leaf_index": self.leaf_index,
            "siblings": [s.hex() for s in self.siblings],
            "root": self.root.hex(),
            "leaf_count": self.leaf_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InclusionProof":
        """
        Deserialize proof from dictionary. Hex values may carry a 0x prefix.

        Raises:
            InvalidEncodingError: If a field is missing or cannot be decoded
        """
        missing = [key for key in PROOF_FIELDS if key not in data]
        if missing:
            raise InvalidEncodingError(f"Inclusion proof is missing {', '.join(missing)}")

        siblings = data["siblings"]
        if not isinstance(siblings, list):
            raise InvalidEncodingError("Inclusion proof siblings must be a list")

        return cls(
            leaf=_from_hex(data["leaf"], "leaf"),
            leaf_index=_to_int(data["leaf_index"], "leaf_index"),
            siblings=[_from_hex(s, f"siblings[{i}]") for i, s in enumerate(siblings)],
            root=_from_hex(data["root"], "root"),
            leaf_count=_to_int(data["leaf_count"], "leaf_count"),
        )


class MerkleTree:
    """
    Complete binary Merkle tree over 32-byte leaf digests.

    Immutable after construction. The tree keeps the hasher it was built
    with and uses it for proof processing and validation, so a tree must
    not be used from several threads at once unless its hasher is guarded.

    Example:
        >>> tree = MerkleTree.from_leaves(leaves, new_hasher("keccak256"))
        >>> proof = tree.get_proof_by_index(3)
        >>> process_proof(tree.hasher, tree.nodes[3], proof) == tree.root
        True
    """

    def __init__(self, nodes: Sequence[bytes], hasher: Hasher | None) -> None:
        """
        Initialize Merkle tree (internal use).

        Use from_leaves() or from_hex_leaves() to construct trees. Node
        arrays passed here are not checked; see is_valid_tree().
        """
        self._nodes = tuple(nodes)
        self._hasher = hasher

    @classmethod
    def from_leaves(cls, leaves: Sequence[bytes], hasher: Hasher | None) -> "MerkleTree":
        """
        Construct a Merkle tree from leaf digests.

        Args:
            leaves: Leaf digests, DIGEST_LENGTH bytes each
            hasher: Hashing capability used for every pair hash

        Returns:
            Constructed MerkleTree

        Raises:
            EmptyInputError: If leaves is empty
            ShapeError: If the leaf count is not a power of two
            InvalidDigestLengthError: If a leaf is not DIGEST_LENGTH bytes
            InvalidDigestLengthError: If the hasher does not produce
                DIGEST_LENGTH-byte digests
            MissingHasherError: If hasher is None
        """
        leaf_count = len(leaves)
        if leaf_count == 0:
            raise EmptyInputError("Cannot create Merkle tree from empty leaves")

        if not is_power_of_two(leaf_count):
            raise ShapeError(
                f"Leaf count must be a power of two for a complete binary tree, got {leaf_count}"
            )

        checked = [_check_digest(leaf, f"Leaf {i}") for i, leaf in enumerate(leaves)]

        hasher = _check_hasher(hasher)

        started = time.perf_counter()

        nodes: list[bytes] = [b""] * (2 * leaf_count - 1)
        nodes[leaf_count - 1:] = checked

        # Bottom-up: every internal index is smaller than its children
        for i in range(leaf_count - 2, -1, -1):
            nodes[i] = hash_pair(hasher, nodes[left_child_index(i)], nodes[right_child_index(i)])

        duration = time.perf_counter() - started
        get_tree_metrics().record_build(duration, leaf_count)

        logger.debug(
            "Built Merkle tree",
            leaf_count=leaf_count,
            hasher=hasher.name,
            root=nodes[0].hex(),
        )

        return cls(nodes, hasher)

    @classmethod
    def from_hex_leaves(cls, hex_leaves: Sequence[str], hasher: Hasher | None) -> "MerkleTree":
        """
        Construct a Merkle tree from hex-encoded leaf digests.

        Useful when leaves arrive as text (e.g., from JSON). A 0x prefix
        is accepted.
        """
        return cls.from_leaves(
            [_from_hex(h, f"Leaf {i}") for i, h in enumerate(hex_leaves)], hasher
        )

    @property
    def nodes(self) -> tuple[bytes, ...]:
        """Get the full node array, root first."""
        return self._nodes

    @property
    def hasher(self) -> Hasher | None:
        return self._hasher

    @property
    def root(self) -> bytes:
        """Get the root digest."""
        if not self._nodes:
            raise EmptyInputError("Tree has no nodes")
        return self._nodes[0]

    @property
    def leaf_count(self) -> int:
        return (len(self._nodes) + 1) // 2

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """Get the leaf digests in input order."""
        return self._nodes[len(self._nodes) // 2:]

    @property
    def height(self) -> int:
        """Number of levels, counting the leaf level and the root."""
        return tree_height(len(self._nodes))

    def is_leaf(self, i: int) -> bool:
        return is_leaf_node(len(self._nodes), i)

    def get_proof_by_index(self, i: int) -> list[bytes]:
        """
        Generate the proof for the leaf at node position i.

        Args:
            i: Position in the node array, not among the leaves

        Returns:
            Sibling digests ordered from the leaf to just below the root

        Raises:
            NotALeafError: If i is not a leaf position
        """
        if not self.is_leaf(i):
            raise NotALeafError(f"Node {i} is not a leaf of a {len(self._nodes)}-node tree")

        started = time.perf_counter()

        proof = []
        while i > 0:
            proof.append(self._nodes[sibling_index(i)])
            i = parent_index(i)

        get_tree_metrics().record_proof(time.perf_counter() - started)
        return proof

    def get_proof(self, leaf: bytes) -> list[bytes]:
        """
        Generate the proof for a leaf value.

        Scans the leaves in array order. With duplicate leaves the first
        match wins; use get_proof_by_index() when the position is known.

        Raises:
            NotALeafError: If no leaf equals the given value
        """
        for i in leaf_range(len(self._nodes)):
            if self._nodes[i] == leaf:
                return self.get_proof_by_index(i)

        raise NotALeafError("Value is not a leaf of this tree")

    def get_inclusion_proof(self, leaf_index: int) -> InclusionProof:
        """
        Generate a portable inclusion proof for a leaf.

        Args:
            leaf_index: Position among the leaves (0-based)

        Raises:
            InvalidIndexError: If leaf_index is out of bounds
        """
        if leaf_index < 0 or leaf_index >= self.leaf_count:
            raise InvalidIndexError(f"Leaf index {leaf_index} out of bounds")

        position = self.leaf_count - 1 + leaf_index
        return InclusionProof(
            leaf=self._nodes[position],
            leaf_index=leaf_index,
            siblings=self.get_proof_by_index(position),
            root=self.root,
            leaf_count=self.leaf_count,
        )

    def get_all_inclusion_proofs(self) -> list[InclusionProof]:
        return [self.get_inclusion_proof(i) for i in range(self.leaf_count)]

    def process_proof(self, leaf: bytes, proof: Sequence[bytes]) -> bytes:
        """Recompute a candidate root with this tree's hasher."""
        if self._hasher is None:
            raise MissingHasherError("Tree has no hasher")
        return process_proof(self._hasher, leaf, proof)

    def verify(self) -> bool:
        """Check the tree is internally consistent."""
        return is_valid_tree(self)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        root = self._nodes[0].hex() if self._nodes else None
        return f"MerkleTree(leaf_count={self.leaf_count}, root={root})"


def process_proof(hasher: Hasher, leaf: bytes, proof: Sequence[bytes]) -> bytes:
    """
    Recompute a candidate root from a leaf and its proof.

    This never accepts or rejects anything. Compare the result with a
    trusted root, or use verify_proof().

    Args:
        hasher: Hashing capability, same algorithm as the tree
        leaf: Leaf digest
        proof: Sibling digests in leaf-to-root order

    Returns:
        Candidate root digest

    Raises:
        InvalidDigestLengthError: If the leaf or any proof element is not
            DIGEST_LENGTH bytes
        MissingHasherError: If hasher is None
    """
    node = _check_digest(leaf, "Leaf")
    siblings = [_check_digest(s, f"Proof element {i}") for i, s in enumerate(proof)]
    hasher = _check_hasher(hasher)

    for sibling in siblings:
        node = hash_pair(hasher, node, sibling)

    return node


def verify_proof(hasher: Hasher, leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
    """
    Verify that leaf is included under root.

    Returns False for a proof that does not lead to root. Malformed input
    still raises InvalidDigestLengthError, so callers can tell it apart
    from a forged or stale proof.
    """
    expected = _check_digest(root, "Root")
    candidate = process_proof(hasher, leaf, proof)
    valid = hmac.compare_digest(candidate, expected)

    get_tree_metrics().record_verification(valid)
    if not valid:
        logger.debug("Proof does not match root", proof_length=len(proof))
    return valid


def verify_inclusion_proof(proof: InclusionProof, hasher: Hasher) -> bool:
    """
    Verify a portable inclusion proof against its own root.

    The proof length must match the depth implied by leaf_count.
    """
    _check_digest(proof.leaf, "Leaf")
    _check_digest(proof.root, "Root")

    if not is_power_of_two(proof.leaf_count) or not 0 <= proof.leaf_index < proof.leaf_count:
        logger.debug(
            "Inclusion proof has invalid shape",
            leaf_count=proof.leaf_count,
            leaf_index=proof.leaf_index,
        )
        get_tree_metrics().record_verification(False)
        return False

    expected_depth = proof.leaf_count.bit_length() - 1
    if len(proof.siblings) != expected_depth:
        logger.debug(
            "Inclusion proof length does not match tree depth",
            expected=expected_depth,
            actual=len(proof.siblings),
        )
        get_tree_metrics().record_verification(False)
        return False

    return verify_proof(hasher, proof.leaf, proof.siblings, proof.root)


def is_valid_tree(tree: MerkleTree) -> bool:
    """
    Check a tree's node array is a consistent Merkle tree.

    Re-hashes every internal node, so this is O(k) in the leaf count.

    Returns:
        True if the array encodes a complete binary tree of DIGEST_LENGTH
        nodes and every internal node equals hash_pair() of its children
    """
    valid, reason, index = _check_tree(tree)

    get_tree_metrics().record_validation(valid)
    if not valid:
        logger.debug("Merkle tree failed validation", reason=reason, index=index)
    return valid


def _check_tree(tree: MerkleTree) -> tuple[bool, str | None, int | None]:
    nodes = tree.nodes
    node_count = len(nodes)

    if node_count == 0:
        return False, "empty", None

    if not is_power_of_two(node_count + 1):
        return False, "not a complete binary tree", None

    if tree.hasher is None:
        return False, "no hasher", None

    for i, node in enumerate(nodes):
        if not is_valid_digest(node):
            return False, "invalid digest length", i

    for i, node in enumerate(nodes):
        left = left_child_index(i)
        right = right_child_index(i)

        if right >= node_count:
            # Complete tree: a node has both children or none
            if left < node_count:
                return False, "missing right child", i
        elif node != hash_pair(tree.hasher, nodes[left], nodes[right]):
            return False, "digest mismatch", i

    return True, None, None
