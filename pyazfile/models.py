"""Value types describing the remote namespace."""

from dataclasses import dataclass
from enum import Enum

from .utils import REMOTE_PATH_SEPARATOR, join_remote_path, split_path


class EntryKind(Enum):
    """Kind of an entry returned by a directory listing."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class ShareEntry:
    """A share returned by a share listing."""

    name: str


@dataclass(frozen=True)
class ChildEntry:
    """A file or directory returned by a directory listing."""

    name: str
    kind: EntryKind

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


@dataclass(frozen=True)
class DirectoryRef:
    """Addressable handle to a remote directory.

    A reference does not imply that the directory exists. ``path`` holds the
    components below the share root joined with ``/``; the empty string is
    the share root itself.
    """

    share: str
    """Name of the share containing the directory"""

    path: str = ""
    """Directory path inside the share ("" for the root directory)"""

    @property
    def is_root(self) -> bool:
        return self.path == ""

    @property
    def name(self) -> str:
        """Last path component (empty for the root directory)."""
        if self.is_root:
            return ""
        return self.path.rsplit(REMOTE_PATH_SEPARATOR, 1)[-1]

    @property
    def parts(self) -> list[str]:
        return split_path(self.path, REMOTE_PATH_SEPARATOR)

    def child(self, name: str) -> "DirectoryRef":
        """Reference to the subdirectory ``name``."""
        return DirectoryRef(self.share, join_remote_path([self.path, name]))

    def parent(self) -> "DirectoryRef":
        """Reference to the parent directory; the root is its own parent."""
        if self.is_root:
            return self
        return DirectoryRef(self.share, join_remote_path(self.parts[:-1]))

    def file_path(self, name: str) -> str:
        """Share-relative path of the file ``name`` in this directory."""
        return join_remote_path([self.path, name])

    def __str__(self) -> str:
        return join_remote_path([self.share, self.path])
