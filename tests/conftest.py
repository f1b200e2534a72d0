"""
Pytest configuration and shared fixtures for Merkle tree tests.
"""

import pytest
from eth_utils import keccak

from merkle_tree.crypto.hashers import Hasher, new_hasher
from merkle_tree.crypto.merkle import MerkleTree


def make_leaves(count: int) -> list[bytes]:
    """keccak256 of the decimal strings "0", "1", ... as leaf digests."""
    return [keccak(str(i).encode()) for i in range(count)]


@pytest.fixture
def keccak_hasher() -> Hasher:
    """Create a fresh keccak256 hasher."""
    return new_hasher("keccak256")


@pytest.fixture
def four_leaves() -> list[bytes]:
    """Leaves L0..L3."""
    return make_leaves(4)


@pytest.fixture
def four_leaf_tree(keccak_hasher: Hasher, four_leaves: list[bytes]) -> MerkleTree:
    """Create the 7-node reference tree."""
    return MerkleTree.from_leaves(four_leaves, keccak_hasher)
