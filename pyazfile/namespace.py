"""Navigation state of the shell within the remote namespace."""

import logging
from typing import Optional

from .api import StorageClient
from .exceptions import InvalidArgumentError, NotFoundError, NotInShareError
from .models import DirectoryRef
from .utils import CURRENT_DIRECTORY, PARENT_DIRECTORY

logger = logging.getLogger(__name__)


class RemoteNamespace:
    """Current share, directory and URI of an interactive session.

    The namespace is either at the client root (no share selected) or inside
    a share, in which case ``directory`` is always set as well. ``uri`` is
    the primary URI of the deepest selected scope and is what the shell
    prompt shows.

    Only the foreground thread mutates a namespace; worker threads only read
    the :class:`DirectoryRef` values it hands out, which are immutable.
    """

    def __init__(self, client: StorageClient):
        """Initialize the namespace at the client root.

        Args:
            client: Storage client for existence checks and URIs
        """
        self.client = client
        self.share: Optional[str] = None
        self.directory: Optional[DirectoryRef] = None
        self.uri: str = client.base_uri()

    @property
    def in_share(self) -> bool:
        return self.share is not None

    def require_share(self) -> DirectoryRef:
        """Return the current directory, failing when no share is selected.

        Raises:
            NotInShareError: If no share is selected
        """
        if self.directory is None:
            raise NotInShareError("Not in a share root directory")
        return self.directory

    def change_directory(self, name: str) -> None:
        """Navigate like the `cd` command.

        Enters a share when at the client root, otherwise moves between
        directories of the current share.
        """
        if self.in_share:
            self.enter_directory(name)
        else:
            self.enter_share(name)

    def enter_share(self, name: str) -> None:
        """Select a share and move to its root directory.

        Args:
            name: Share name

        Raises:
            InvalidArgumentError: If a share is already selected, or the name
                is "." or ".."
            NotFoundError: If the share does not exist
        """
        if self.in_share:
            raise InvalidArgumentError("A share is already selected")
        if name in (CURRENT_DIRECTORY, PARENT_DIRECTORY):
            raise InvalidArgumentError("Invalid share name")

        if not self.client.share_exists(name):
            raise NotFoundError(f"Invalid share name: {name}")

        self.share = name
        self._set_directory(self.client.get_share_root(name))
        logger.debug("Entered share %s", name)

    def enter_directory(self, name: str) -> None:
        """Move to a subdirectory, the parent directory, or stay put.

        ".." at the share root leaves the share entirely.

        Args:
            name: Subdirectory name, "." or ".."

        Raises:
            NotInShareError: If no share is selected
            NotFoundError: If the subdirectory does not exist
        """
        current = self.require_share()

        if name == CURRENT_DIRECTORY:
            return

        if name == PARENT_DIRECTORY:
            if current.is_root:
                self.exit_to_root()
            else:
                self._set_directory(self.client.get_parent_directory(current))
            return

        subdirectory = self.client.get_subdirectory(current, name)
        if not self.client.directory_exists(subdirectory):
            raise NotFoundError(f"Invalid directory name: {name}")

        self._set_directory(subdirectory)

    def exit_to_root(self) -> None:
        """Deselect the share and return to the client root."""
        self.share = None
        self.directory = None
        self.uri = self.client.base_uri()
        logger.debug("Returned to client root")

    def _set_directory(self, directory: DirectoryRef) -> None:
        self.directory = directory
        self.uri = self.client.directory_uri(directory)
