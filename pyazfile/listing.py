"""Paginated listing of shares and directory contents."""

import logging
from collections.abc import Generator
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .api import StorageClient
from .config import config
from .models import ChildEntry, DirectoryRef, ShareEntry

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[Optional[str]], tuple[list[T], Optional[str]]]


@dataclass
class PageCursor:
    """Position of a paginated listing."""

    token: Optional[str] = None
    """Continuation token for the next page (None before the first page)"""

    exhausted: bool = False
    """True once a page came back without a continuation token"""

    pages: int = 0
    """Number of pages fetched so far"""

    def advance(self, next_token: Optional[str]) -> None:
        self.pages += 1
        self.token = next_token or None
        self.exhausted = self.token is None


def iter_pages(
    fetch: PageFetcher, cursor: Optional[PageCursor] = None
) -> Generator[T, None, None]:
    """Drain a paginated listing into a single sequence.

    Pages are requested strictly in order: the token returned with page N
    is what requests page N+1. Items are yielded as each page arrives.

    Args:
        fetch: Callable taking a continuation token and returning
            ``(items, next_token)``
        cursor: Optional cursor to track progress (a fresh one by default)

    Yields:
        Items from every page, in page order
    """
    if cursor is None:
        cursor = PageCursor()

    while not cursor.exhausted:
        items, next_token = fetch(cursor.token)
        cursor.advance(next_token)
        logger.debug(
            "Fetched page %d with %d item(s), exhausted=%s",
            cursor.pages,
            len(items),
            cursor.exhausted,
        )
        yield from items


class PagedLister:
    """Lists shares and directory contents across all result pages."""

    def __init__(self, client: StorageClient, page_size: Optional[int] = None):
        """Initialize the lister.

        Args:
            client: Storage client used to fetch pages
            page_size: Entries per page (default: config.page_size)
        """
        self.client = client
        self.page_size = page_size or config.page_size

    def list_shares(self) -> Generator[ShareEntry, None, None]:
        """Iterate all shares of the account.

        Returns:
            A one-shot generator of share entries
        """
        return iter_pages(
            lambda token: self.client.list_shares(token, page_size=self.page_size)
        )

    def list_children(
        self, directory: DirectoryRef
    ) -> Generator[ChildEntry, None, None]:
        """Iterate all files and subdirectories directly inside a directory.

        Args:
            directory: Directory to list

        Returns:
            A one-shot generator of child entries
        """
        return iter_pages(
            lambda token: self.client.list_children(
                directory, token, page_size=self.page_size
            )
        )

    def get_all_children(self, directory: DirectoryRef) -> list[ChildEntry]:
        """Fetch every child of a directory into a list."""
        return list(self.list_children(directory))
