"""
Merkle Tree Proofs - Metrics Module

Prometheus metrics for Merkle tree operations.

Exports:
- Tree build times and sizes
- Proof generation times
- Verification and validation outcomes
"""

from merkle_tree.metrics.tree_metrics import (
    TreeMetrics,
    get_tree_metrics,
)

__all__ = [
    "TreeMetrics",
    "get_tree_metrics",
]
