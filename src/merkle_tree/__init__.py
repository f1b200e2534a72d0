"""
Merkle Tree Proofs

Complete binary Merkle trees over pre-hashed leaves, with inclusion proof
generation and verification.

Logging is configured on import unless CONFIGURE_LOGGING is false.
"""

from merkle_tree.core.config import settings
from merkle_tree.core.logging import setup_logging

__version__ = settings.VERSION

if settings.CONFIGURE_LOGGING:
    setup_logging()
