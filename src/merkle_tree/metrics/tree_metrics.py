"""
Merkle Tree Proofs - Tree Metrics

Prometheus metrics for tree construction, proof generation, proof
verification and structural validation.
"""

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

import structlog

from merkle_tree.core.config import settings

logger = structlog.get_logger(__name__)


class TreeMetrics:
    """
    Centralized metrics for Merkle tree operations.

    Recording methods are no-ops when METRICS_ENABLED is false.
    """

    def __init__(
        self,
        enabled: bool = settings.METRICS_ENABLED,
        registry: CollectorRegistry = REGISTRY,
    ) -> None:
        """Initialize all tree metrics."""
        self.enabled = enabled
        self._registry = registry
        self._init_build_metrics()
        self._init_proof_metrics()

    def _init_build_metrics(self) -> None:
        """Initialize tree build metrics."""
        self.build_duration = Histogram(
            "merkle_tree_build_duration_seconds",
            "Merkle tree build time",
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
            registry=self._registry,
        )

        self.tree_size = Histogram(
            "merkle_tree_leaf_count",
            "Number of leaves in Merkle tree",
            buckets=[1, 2, 16, 128, 1024, 8192, 65536, 524288],
            registry=self._registry,
        )

        self.validations = Counter(
            "merkle_tree_validations_total",
            "Structural validations of Merkle trees",
            ["result"],
            registry=self._registry,
        )

    def _init_proof_metrics(self) -> None:
        """Initialize proof metrics."""
        self.proof_generation = Histogram(
            "merkle_tree_proof_duration_seconds",
            "Merkle proof generation time",
            buckets=[0.00001, 0.0001, 0.0005, 0.001, 0.005, 0.01],
            registry=self._registry,
        )

        self.verifications = Counter(
            "merkle_tree_proof_verifications_total",
            "Merkle proof verifications",
            ["result"],
            registry=self._registry,
        )

    # Convenience methods

    def record_build(self, duration: float, leaf_count: int) -> None:
        """Record Merkle tree build."""
        if not self.enabled:
            return
        self.build_duration.observe(duration)
        self.tree_size.observe(leaf_count)

    def record_proof(self, duration: float) -> None:
        """Record proof generation."""
        if not self.enabled:
            return
        self.proof_generation.observe(duration)

    def record_verification(self, valid: bool) -> None:
        """Record Merkle proof verification."""
        if not self.enabled:
            return
        result = "valid" if valid else "invalid"
        self.verifications.labels(result=result).inc()

    def record_validation(self, valid: bool) -> None:
        """Record structural tree validation."""
        if not self.enabled:
            return
        result = "valid" if valid else "invalid"
        self.validations.labels(result=result).inc()


# Singleton instance
_tree_metrics: TreeMetrics | None = None


def get_tree_metrics() -> TreeMetrics:
    """Get global tree metrics instance."""
    global _tree_metrics
    if _tree_metrics is None:
        _tree_metrics = TreeMetrics()
        logger.debug("Tree metrics initialized", enabled=_tree_metrics.enabled)
    return _tree_metrics
