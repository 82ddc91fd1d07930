"""Remote operations used by the tree sync engine."""

import logging
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from ..api import StorageClient
from ..models import DirectoryRef

logger = logging.getLogger(__name__)


class SyncOperations:
    """Thin layer over a StorageClient adding timing logs and chain creation."""

    def __init__(self, client: StorageClient):
        """Initialize sync operations.

        Args:
            client: Storage client
        """
        self.client = client

    def resolve_directory(
        self, root: DirectoryRef, parts: Iterable[str]
    ) -> DirectoryRef:
        """Reference the directory reached by following ``parts`` from ``root``.

        No remote call is made; the directories are not checked or created.
        """
        directory = root
        for part in parts:
            directory = self.client.get_subdirectory(directory, part)
        return directory

    def ensure_directories(
        self,
        root: DirectoryRef,
        parts: Iterable[str],
        known: Optional[set[DirectoryRef]] = None,
    ) -> tuple[DirectoryRef, int]:
        """Create each directory of a chain below ``root`` if missing.

        Args:
            root: Existing directory the chain starts from
            parts: Path components below ``root``, outermost first
            known: Directories already ensured during this job; these are
                not created again and newly ensured ones are added

        Returns:
            Tuple of (innermost directory of the chain, number of
            directories newly created)
        """
        directory = root
        created_count = 0
        for part in parts:
            directory = self.client.get_subdirectory(directory, part)
            if known is not None and directory in known:
                continue
            created = self.client.create_directory_if_not_exists(directory)
            if created:
                created_count += 1
            logger.debug(
                "Directory %s %s", directory, "created" if created else "exists"
            )
            if known is not None:
                known.add(directory)
        return directory, created_count

    def upload_file(self, directory: DirectoryRef, name: str, local_path: Path) -> int:
        """Upload a local file into a remote directory, overwriting.

        Returns:
            Number of bytes uploaded
        """
        start = time.time()
        size = local_path.stat().st_size
        self.client.upload_file(directory, name, local_path)
        logger.debug(
            "Upload of %s took %.2fs", directory.file_path(name), time.time() - start
        )
        return size

    def delete_file(self, directory: DirectoryRef, name: str) -> bool:
        """Delete a remote file if it exists.

        Returns:
            True if a file was deleted
        """
        deleted = self.client.delete_file_if_exists(directory, name)
        logger.debug(
            "Delete file %s: %s",
            directory.file_path(name),
            "deleted" if deleted else "absent",
        )
        return deleted

    def delete_directory(self, directory: DirectoryRef) -> None:
        """Delete an empty remote directory."""
        self.client.delete_directory(directory)
        logger.debug("Deleted directory %s", directory)
