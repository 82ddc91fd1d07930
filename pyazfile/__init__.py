"""pyazfile - interactive shell for navigating and syncing Azure file shares."""

from .api import AzureFileClient, StorageClient
from .exceptions import (
    InvalidArgumentError,
    LocalPathError,
    NotFoundError,
    NotInShareError,
    PyAzFileError,
    RemoteOperationError,
)
from .listing import PagedLister
from .models import ChildEntry, DirectoryRef, EntryKind, ShareEntry
from .namespace import RemoteNamespace
from .shell import FileShell, ShellState

__all__ = [
    "AzureFileClient",
    "StorageClient",
    "PyAzFileError",
    "InvalidArgumentError",
    "LocalPathError",
    "NotFoundError",
    "NotInShareError",
    "RemoteOperationError",
    "PagedLister",
    "ChildEntry",
    "DirectoryRef",
    "EntryKind",
    "ShareEntry",
    "RemoteNamespace",
    "FileShell",
    "ShellState",
]
