"""Tree sync engine for pyazfile - recursive upload and delete operations."""

from .engine import TreeSync
from .operations import SyncOperations
from .scanner import LocalFileSystem

__all__ = [
    "TreeSync",
    "SyncOperations",
    "LocalFileSystem",
]
