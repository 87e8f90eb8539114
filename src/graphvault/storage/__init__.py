"""
GraphVault Storage Module

Whole-graph JSON persistence.
"""

from graphvault.storage.storage import Storage

__all__ = [
    "Storage",
]
