"""
Merkle Tree Proofs - Core Package

Settings and logging setup shared by the rest of the package.
"""

from merkle_tree.core.config import Settings, get_settings, settings
from merkle_tree.core.logging import setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "setup_logging",
]
