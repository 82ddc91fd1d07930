"""Tree sync engine: recursive uploads and deletes against a remote share."""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..api import StorageClient
from ..config import config
from ..exceptions import InvalidArgumentError
from ..listing import PagedLister
from ..models import DirectoryRef
from ..output import OutputFormatter
from ..utils import split_path
from .operations import SyncOperations
from .scanner import LocalFileSystem

logger = logging.getLogger(__name__)


class TreeSync:
    """Uploads local trees into, and removes subtrees from, remote directories.

    Work inside one directory level fans out onto a thread pool and is joined
    before the level counts as finished:

    - uploads create a directory (on the calling thread) before any file in
      it is transferred;
    - deletes remove a directory's files, then its subdirectories, and only
      then the directory itself.
    """

    def __init__(
        self,
        client: StorageClient,
        local_fs: Optional[LocalFileSystem] = None,
        output: Optional[OutputFormatter] = None,
        lister: Optional[PagedLister] = None,
        max_workers: Optional[int] = None,
    ):
        """Initialize the engine.

        Args:
            client: Storage client
            local_fs: Local file system (default: LocalFileSystem())
            output: Output formatter for per-file messages and progress
            lister: Paged lister for remote listings
            max_workers: Parallel workers per directory level
                (default: config.max_workers)
        """
        self.client = client
        self.local_fs = local_fs or LocalFileSystem()
        self.output = output or OutputFormatter()
        self.lister = lister or PagedLister(client)
        self.max_workers = max_workers or config.max_workers
        self.operations = SyncOperations(client)

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    def upload_single_file(
        self,
        local_path: Path,
        destination: DirectoryRef,
        remote_name: Optional[str] = None,
    ) -> dict:
        """Upload one file, replacing any remote file of the same name."""
        if not self.local_fs.exists(local_path):
            raise InvalidArgumentError(f"Local path does not exist: {local_path}")

        name = remote_name or self.local_fs.base_name(local_path)
        stats = self._create_empty_upload_stats()
        stats["bytes"] = self.operations.upload_file(destination, name, local_path)
        stats["uploads"] = 1
        return stats

    def upload_tree(self, local_root: Path, destination: DirectoryRef) -> dict:
        """Mirror a local directory tree below ``destination``.

        The contents of ``local_root`` (not the root folder itself) land in
        ``destination``; subdirectories are created as needed. Existing
        remote files are overwritten.

        Args:
            local_root: Local directory to upload
            destination: Existing remote directory

        Returns:
            Dictionary with upload statistics
        """
        start_time = time.time()
        stats = self._create_empty_upload_stats()
        lock = threading.Lock()
        ensured: set[DirectoryRef] = set()

        progress: Optional[Progress] = None
        task = None
        if not self.output.quiet:
            progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=self.output.console,
                transient=True,
            )
            task = progress.add_task("Uploading...", total=None)

        def on_directory(path: Path) -> None:
            parts = split_path(self.local_fs.relative_path(local_root, path))
            if parts:
                _, created = self.operations.ensure_directories(
                    destination, parts, known=ensured
                )
                with lock:
                    stats["directories"] += created

        def on_file(path: Path) -> None:
            parts = split_path(self.local_fs.relative_path(local_root, path))
            directory = self.operations.resolve_directory(destination, parts[:-1])
            size = self.operations.upload_file(directory, parts[-1], path)
            with lock:
                stats["bytes"] += size
            self.output.info(f"Uploaded {path}")
            if progress is not None:
                progress.update(task, advance=1, description=f"Uploaded {parts[-1]}")

        if progress is not None:
            progress.start()
        try:
            walk_stats = self.local_fs.walk(
                local_root, on_directory, on_file, max_workers=self.max_workers
            )
        finally:
            if progress is not None:
                progress.stop()

        stats["uploads"] = walk_stats["files"]
        stats["errors"] = walk_stats["errors"]
        stats["skipped_directories"] = walk_stats["skipped_directories"]

        logger.debug(
            "Upload of %s finished in %.2fs: %s",
            local_root,
            time.time() - start_time,
            stats,
        )
        return stats

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, directory: DirectoryRef, name: str) -> dict:
        """Delete the file or directory ``name`` inside ``directory``.

        A file is tried first. Otherwise ``name`` is treated as a
        subdirectory and removed recursively, bottom-up.

        Args:
            directory: Remote directory containing the item
            name: File or subdirectory name

        Returns:
            Dictionary with delete statistics

        Raises:
            NotFoundError: If neither a file nor a directory has that name
        """
        stats = self._create_empty_delete_stats()

        if self.operations.delete_file(directory, name):
            stats["files"] = 1
            return stats

        target = self.client.get_subdirectory(directory, name)
        self.delete_tree(target, stats)
        return stats

    def delete_tree(
        self,
        directory: DirectoryRef,
        stats: Optional[dict] = None,
        lock: Optional[threading.Lock] = None,
        slots: Optional[threading.BoundedSemaphore] = None,
    ) -> bool:
        """Recursively delete a directory and everything below it.

        Files at this level are deleted concurrently and joined, then the
        subdirectories are deleted concurrently (each recursively) and
        joined, then the directory itself. A failure in any branch is logged
        and counted, the other branches continue, and the directory is left
        in place because it is not empty.

        Each level uses its own thread pool, so a level waiting on its
        children never holds workers those children need. Idle threads can
        therefore pile up on deep trees, but remote calls (listings, file
        and directory deletes) across the whole job share ``slots`` and
        never exceed ``max_workers`` at a time. A slot is only held for a
        single remote call, never while waiting on children.

        Args:
            directory: Directory to delete
            stats: Statistics dictionary (modified in place)
            lock: Lock guarding ``stats`` across worker threads
            slots: Semaphore bounding concurrent remote calls for the job

        Returns:
            True if the directory was deleted

        Raises:
            NotFoundError: If ``directory`` does not exist
            RemoteOperationError: If listing or deleting ``directory`` fails
        """
        if stats is None:
            stats = self._create_empty_delete_stats()
        if lock is None:
            lock = threading.Lock()
        if slots is None:
            slots = threading.BoundedSemaphore(self.max_workers)

        with slots:
            children = self.lister.get_all_children(directory)

        files = []
        subdirectories = []
        for entry in children:
            if entry.is_directory:
                subdirectories.append(self.client.get_subdirectory(directory, entry.name))
            else:
                files.append(entry.name)

        failed = 0

        if files:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {
                    executor.submit(self._delete_file, directory, name, slots): name
                    for name in files
                }
                for future in as_completed(futures):
                    name = futures[future]
                    try:
                        deleted = future.result()
                        if deleted:
                            with lock:
                                stats["files"] += 1
                    except Exception as e:
                        logger.warning(
                            f"Failed to delete {directory.file_path(name)}: {e}"
                        )
                        failed += 1
                        with lock:
                            stats["errors"] += 1

        if subdirectories:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {
                    executor.submit(
                        self.delete_tree, subdirectory, stats, lock, slots
                    ): subdirectory
                    for subdirectory in subdirectories
                }
                for future in as_completed(futures):
                    subdirectory = futures[future]
                    try:
                        if not future.result():
                            failed += 1
                    except Exception as e:
                        logger.warning(f"Failed to delete {subdirectory}: {e}")
                        failed += 1
                        with lock:
                            stats["errors"] += 1

        if failed:
            logger.warning(
                f"Leaving {directory} in place: {failed} item(s) below it "
                "could not be deleted"
            )
            with lock:
                stats["skipped_directories"] += 1
            return False

        with slots:
            self.operations.delete_directory(directory)
        with lock:
            stats["directories"] += 1
        return True

    def _delete_file(
        self,
        directory: DirectoryRef,
        name: str,
        slots: threading.BoundedSemaphore,
    ) -> bool:
        with slots:
            return self.operations.delete_file(directory, name)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def _create_empty_upload_stats(self) -> dict:
        return {
            "uploads": 0,
            "directories": 0,
            "bytes": 0,
            "errors": 0,
            "skipped_directories": 0,
        }

    def _create_empty_delete_stats(self) -> dict:
        return {
            "files": 0,
            "directories": 0,
            "errors": 0,
            "skipped_directories": 0,
        }
