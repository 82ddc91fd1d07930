"""Local file system enumeration for tree uploads."""

import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Callable, Union

from ..exceptions import PyAzFileError
from ..utils import relative_path

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class LocalFileSystem:
    """Classifies local paths and walks local directory trees.

    Examples:
        >>> fs = LocalFileSystem()
        >>> stats = fs.walk(Path("/data/photos"), print, print)
        >>> stats["files"]
        42
    """

    def is_directory(self, path: PathLike) -> bool:
        return Path(path).is_dir()

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def base_name(self, path: PathLike) -> str:
        return Path(path).name

    def relative_path(self, root: PathLike, full_path: PathLike) -> str:
        """Path of ``full_path`` relative to ``root`` ("" for the root itself).

        Paths below ``root`` are compared component-wise, so a root of "."
        keeps the names of dotfiles intact. Anything else falls back to a
        plain string-prefix strip.
        """
        try:
            relative = Path(full_path).relative_to(root)
        except ValueError:
            return relative_path(str(root), str(full_path))
        if relative == Path("."):
            return ""
        return relative.as_posix()

    def walk(
        self,
        root: PathLike,
        on_directory: Callable[[Path], Any],
        on_file: Callable[[Path], Any],
        max_workers: int = 1,
    ) -> dict:
        """Visit every directory and file below ``root``, breadth-first.

        For each directory, ``on_directory`` runs first on the calling
        thread. The directory's files are then passed to ``on_file``
        concurrently on up to ``max_workers`` threads, and all of them finish
        before the next directory is visited.

        A directory whose callback or enumeration fails is logged and its
        whole subtree skipped. A failing ``on_file`` call is logged and
        counted; the other files still run.

        Args:
            root: Directory to walk
            on_directory: Called with each directory path (root included)
            on_file: Called with each file path
            max_workers: Number of parallel workers per directory

        Returns:
            Dictionary with counts of visited directories, processed files,
            failed files and skipped directories
        """
        if not str(root):
            raise ValueError("root must not be empty")

        stats = {
            "directories": 0,
            "files": 0,
            "errors": 0,
            "skipped_directories": 0,
        }
        directories: deque[Path] = deque([Path(root)])
        visited: set[Path] = set()

        while directories:
            directory = directories.popleft()

            # Prevent infinite loops through symlinked directories
            resolved = directory.resolve()
            if resolved in visited:
                logger.debug(f"Skipping already visited directory: {directory}")
                continue
            visited.add(resolved)

            try:
                on_directory(directory)
                files: list[Path] = []
                for item in sorted(directory.iterdir()):
                    if item.is_dir():
                        directories.append(item)
                    elif item.is_file():
                        files.append(item)
            except (OSError, PyAzFileError) as e:
                logger.warning(f"Skipping {directory}: {e}")
                stats["skipped_directories"] += 1
                continue

            stats["directories"] += 1
            processed, failed = self._process_files(files, on_file, max_workers)
            stats["files"] += processed
            stats["errors"] += failed

        return stats

    def _process_files(
        self,
        files: list[Path],
        on_file: Callable[[Path], Any],
        max_workers: int,
    ) -> tuple[int, int]:
        """Run ``on_file`` for one directory's files and wait for all of them.

        Returns:
            Tuple of (succeeded, failed) counts
        """
        if not files:
            return 0, 0

        succeeded = 0
        failed = 0

        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
            futures = {executor.submit(on_file, path): path for path in files}

            for future in as_completed(futures):
                path = futures[future]
                try:
                    future.result()
                    succeeded += 1
                except Exception as e:
                    logger.warning(f"Failed to process {path}: {e}")
                    failed += 1

        return succeeded, failed
