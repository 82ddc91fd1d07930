"""Utility functions for pyazfile."""

from collections.abc import Iterable
from urllib.parse import quote, urlsplit, urlunsplit

# =============================================================================
# Constants for shell operations
# =============================================================================

# Separators accepted when splitting relative local paths
LOCAL_PATH_SEPARATORS: str = "/\\"

# Separator between components of a remote directory path
REMOTE_PATH_SEPARATOR: str = "/"

# Navigation names with special meaning for `cd`
CURRENT_DIRECTORY: str = "."
PARENT_DIRECTORY: str = ".."


# =============================================================================
# Path utilities
# =============================================================================


def split_path(path: str, delimiters: str = LOCAL_PATH_SEPARATORS) -> list[str]:
    """Split a path into its non-empty components.

    Any character in ``delimiters`` separates components; runs of delimiters
    and leading/trailing delimiters never produce empty components.

    Args:
        path: Path to split
        delimiters: Characters treated as separators

    Returns:
        List of path components

    Examples:
        >>> split_path("a\\\\b/c")
        ['a', 'b', 'c']
        >>> split_path("//a//b/")
        ['a', 'b']
        >>> split_path("")
        []
    """
    parts: list[str] = []
    current: list[str] = []

    for char in path:
        if char in delimiters:
            if current:
                parts.append("".join(current))
                current = []
        else:
            current.append(char)

    if current:
        parts.append("".join(current))

    return parts


def relative_path(
    parent: str, full_path: str, separators: str = LOCAL_PATH_SEPARATORS
) -> str:
    """Return ``full_path`` relative to ``parent``.

    This is a plain string-prefix operation: if ``full_path`` does not start
    with ``parent`` it is kept as is. A single leading separator is dropped
    from the result either way.

    Args:
        parent: Parent path
        full_path: Path below the parent
        separators: Characters treated as separators

    Returns:
        Relative path (empty string when both paths are equal)

    Examples:
        >>> relative_path("/data/A", "/data/A/sub/y.txt")
        'sub/y.txt'
        >>> relative_path("/data/A", "/data/A")
        ''
        >>> relative_path("/data/A", "/other/x")
        'other/x'
    """
    result = full_path

    if full_path.startswith(parent):
        result = full_path[len(parent) :]

    if result and result[0] in separators:
        result = result[1:]

    return result


def join_remote_path(parts: Iterable[str]) -> str:
    """Join remote path components, skipping empty ones.

    Examples:
        >>> join_remote_path(["a", "", "b"])
        'a/b'
    """
    return REMOTE_PATH_SEPARATOR.join(part for part in parts if part)


def combine_uri_paths(base: str, path: str) -> str:
    """Append ``path`` to ``base`` with exactly one slash between them.

    Examples:
        >>> combine_uri_paths("https://host/", "share/dir")
        'https://host/share/dir'
        >>> combine_uri_paths("https://host", "/share")
        'https://host/share'
    """
    if not path:
        return base
    return base.rstrip("/") + "/" + path.lstrip("/")


def strip_query(url: str) -> str:
    """Remove the query string and fragment from a URL.

    Used to keep SAS tokens out of anything that is displayed.

    Examples:
        >>> strip_query("https://acct.file.core.windows.net/?sv=2020&sig=x")
        'https://acct.file.core.windows.net/'
    """
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def quote_remote_path(path: str) -> str:
    """Percent-encode a remote path for use in a URI, keeping slashes."""
    return quote(path, safe="/")


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
