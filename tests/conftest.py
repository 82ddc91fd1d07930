"""Shared fixtures for pyazfile tests."""

import tempfile
import threading
from pathlib import Path
from typing import Optional

import pytest

from pyazfile.exceptions import NotFoundError, RemoteOperationError
from pyazfile.models import ChildEntry, DirectoryRef, EntryKind, ShareEntry
from pyazfile.output import OutputFormatter

BASE_URI = "https://testaccount.file.core.windows.net"


class InMemoryStorageClient:
    """StorageClient keeping shares in memory.

    Every mutating call is appended to ``calls`` as ``(operation, path)`` so
    tests can check ordering. Listings are split into pages of at most
    ``max_page_size`` entries. Paths listed in ``fail_on`` make the matching
    operation raise RemoteOperationError.
    """

    def __init__(self, max_page_size: int = 2):
        self.max_page_size = max_page_size
        self.directories: dict[str, set[str]] = {}
        self.files: dict[str, dict[str, bytes]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[tuple[str, str]] = set()
        self.list_requests: list[tuple[str, Optional[str]]] = []
        self._lock = threading.Lock()

    # -- test helpers ------------------------------------------------------

    def add_share(self, name: str) -> None:
        self.directories[name] = {""}
        self.files[name] = {}

    def add_directory(self, share: str, path: str) -> None:
        parts = path.split("/")
        for i in range(1, len(parts) + 1):
            self.directories[share].add("/".join(parts[:i]))

    def add_file(self, share: str, path: str, content: bytes = b"data") -> None:
        if "/" in path:
            self.add_directory(share, path.rsplit("/", 1)[0])
        self.files[share][path] = content

    def index_of(self, operation: str, path: str) -> int:
        return self.calls.index((operation, path))

    def _record(self, operation: str, path: str) -> None:
        with self._lock:
            if (operation, path) in self.fail_on:
                raise RemoteOperationError(f"Injected failure: {operation} {path}")
            self.calls.append((operation, path))

    def _page(self, items: list, token: Optional[str], page_size: Optional[int]):
        size = min(page_size or self.max_page_size, self.max_page_size)
        start = int(token) if token else 0
        end = start + size
        next_token = str(end) if end < len(items) else None
        return items[start:end], next_token

    # -- StorageClient -----------------------------------------------------

    def base_uri(self) -> str:
        return BASE_URI

    def directory_uri(self, directory: DirectoryRef) -> str:
        return f"{BASE_URI}/{directory}"

    def list_shares(self, token, page_size=None):
        self.list_requests.append(("", token))
        entries = [ShareEntry(name) for name in sorted(self.directories)]
        return self._page(entries, token, page_size)

    def share_exists(self, name: str) -> bool:
        return name in self.directories

    def get_share_root(self, share: str) -> DirectoryRef:
        return DirectoryRef(share)

    def get_subdirectory(self, directory: DirectoryRef, name: str) -> DirectoryRef:
        return directory.child(name)

    def get_parent_directory(self, directory: DirectoryRef) -> DirectoryRef:
        return directory.parent()

    def directory_exists(self, directory: DirectoryRef) -> bool:
        return directory.path in self.directories.get(directory.share, set())

    def create_directory_if_not_exists(self, directory: DirectoryRef) -> bool:
        if not self.directory_exists(directory.parent()):
            raise RemoteOperationError(f"Parent of {directory} does not exist")
        self._record("create_directory", str(directory))
        with self._lock:
            if directory.path in self.directories[directory.share]:
                return False
            self.directories[directory.share].add(directory.path)
        return True

    def list_children(self, directory: DirectoryRef, token, page_size=None):
        if not self.directory_exists(directory):
            raise NotFoundError(f"List directory '{directory}': not found")
        self.list_requests.append((str(directory), token))
        prefix = f"{directory.path}/" if directory.path else ""
        with self._lock:
            subdirectories = [
                ChildEntry(path[len(prefix) :], EntryKind.DIRECTORY)
                for path in self.directories[directory.share]
                if path
                and path.startswith(prefix)
                and "/" not in path[len(prefix) :]
            ]
            files = [
                ChildEntry(path[len(prefix) :], EntryKind.FILE)
                for path in self.files[directory.share]
                if path.startswith(prefix) and "/" not in path[len(prefix) :]
            ]
        entries = sorted(subdirectories + files, key=lambda e: e.name)
        return self._page(entries, token, page_size)

    def upload_file(self, directory: DirectoryRef, name: str, local_path: Path) -> None:
        if not self.directory_exists(directory):
            raise RemoteOperationError(f"Parent {directory} does not exist")
        path = directory.file_path(name)
        content = Path(local_path).read_bytes()
        self._record("upload", f"{directory.share}/{path}")
        with self._lock:
            self.files[directory.share][path] = content

    def delete_file_if_exists(self, directory: DirectoryRef, name: str) -> bool:
        path = directory.file_path(name)
        with self._lock:
            exists = path in self.files.get(directory.share, {})
        if not exists:
            return False
        self._record("delete_file", f"{directory.share}/{path}")
        with self._lock:
            del self.files[directory.share][path]
        return True

    def delete_directory(self, directory: DirectoryRef) -> None:
        if not self.directory_exists(directory):
            raise NotFoundError(f"Delete directory '{directory}': not found")
        prefix = f"{directory.path}/"
        with self._lock:
            not_empty = any(
                p.startswith(prefix) for p in self.directories[directory.share]
            ) or any(p.startswith(prefix) for p in self.files[directory.share])
        if not_empty:
            raise RemoteOperationError(f"Directory {directory} is not empty")
        self._record("delete_directory", str(directory))
        with self._lock:
            self.directories[directory.share].discard(directory.path)


@pytest.fixture
def storage():
    """Provide an empty in-memory storage client."""
    return InMemoryStorageClient()


@pytest.fixture
def quiet_output():
    """Provide an output formatter that suppresses informational output."""
    return OutputFormatter(quiet=True)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
