"""Auth record persistence.

This module provides the AuthStore protocol plus a file-based store and an
in-memory store.
"""

from opal.store.base import AuthStore, MemoryAuthStore
from opal.store.file import FileAuthStore

__all__ = [
    "AuthStore",
    "FileAuthStore",
    "MemoryAuthStore",
]
