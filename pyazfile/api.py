"""Storage client for Azure file shares."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional, Protocol

from azure.core.exceptions import (
    AzureError,
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from azure.storage.fileshare import ShareDirectoryClient, ShareServiceClient

from .config import config
from .exceptions import LocalPathError, NotFoundError, RemoteOperationError
from .models import ChildEntry, DirectoryRef, EntryKind, ShareEntry
from .utils import combine_uri_paths, quote_remote_path, strip_query

logger = logging.getLogger(__name__)

# Error code returned for names the service refuses outright ("." or "A B")
INVALID_RESOURCE_NAME = "InvalidResourceName"


class StorageClient(Protocol):
    """Remote storage capability used by the shell.

    Listing calls return one page as ``(entries, next_token)``; an empty or
    ``None`` token means the listing is exhausted.
    """

    def base_uri(self) -> str: ...

    def directory_uri(self, directory: DirectoryRef) -> str: ...

    def list_shares(
        self, token: Optional[str], page_size: Optional[int] = None
    ) -> tuple[list[ShareEntry], Optional[str]]: ...

    def share_exists(self, name: str) -> bool: ...

    def get_share_root(self, share: str) -> DirectoryRef: ...

    def get_subdirectory(self, directory: DirectoryRef, name: str) -> DirectoryRef: ...

    def get_parent_directory(self, directory: DirectoryRef) -> DirectoryRef: ...

    def directory_exists(self, directory: DirectoryRef) -> bool: ...

    def create_directory_if_not_exists(self, directory: DirectoryRef) -> bool: ...

    def list_children(
        self,
        directory: DirectoryRef,
        token: Optional[str],
        page_size: Optional[int] = None,
    ) -> tuple[list[ChildEntry], Optional[str]]: ...

    def upload_file(
        self, directory: DirectoryRef, name: str, local_path: Path
    ) -> None: ...

    def delete_file_if_exists(self, directory: DirectoryRef, name: str) -> bool: ...

    def delete_directory(self, directory: DirectoryRef) -> None: ...


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    """Re-raise SDK errors as pyazfile errors.

    Args:
        action: Short description used in the error message
    """
    try:
        yield
    except ResourceNotFoundError as e:
        raise NotFoundError(f"{action}: not found") from e
    except AzureError as e:
        raise RemoteOperationError(f"{action}: {e}") from e


class AzureFileClient:
    """StorageClient backed by the Azure file share SDK.

    Authentication, request signing, retries and the wire protocol are all
    handled by ``azure-storage-file-share``; this class only maps its object
    model onto :class:`DirectoryRef` values and pyazfile errors.
    """

    def __init__(
        self,
        account_url: str,
        credential: Optional[Any] = None,
        service: Optional[ShareServiceClient] = None,
    ):
        """Initialize the client.

        Args:
            account_url: File service URL, optionally carrying a SAS token
            credential: Account key credential (None when the URL has a SAS)
            service: Pre-built service client (mainly for tests)
        """
        self._service = service or ShareServiceClient(
            account_url=account_url, credential=credential
        )
        self._base_uri = strip_query(self._service.url).rstrip("/")

    @classmethod
    def from_args(cls, args: tuple[str, ...]) -> AzureFileClient:
        """Create a client from the shell's command-line arguments."""
        account_url, credential = config.parse_credentials(args)
        return cls(account_url, credential)

    def close(self) -> None:
        """Close the underlying service client and release connections."""
        self._service.close()

    def base_uri(self) -> str:
        return self._base_uri

    def directory_uri(self, directory: DirectoryRef) -> str:
        return combine_uri_paths(self._base_uri, quote_remote_path(str(directory)))

    def _directory_client(self, directory: DirectoryRef) -> ShareDirectoryClient:
        share_client = self._service.get_share_client(directory.share)
        if directory.is_root:
            return share_client.get_root_directory_client()
        return share_client.get_directory_client(directory.path)

    def list_shares(
        self, token: Optional[str], page_size: Optional[int] = None
    ) -> tuple[list[ShareEntry], Optional[str]]:
        with _translate_errors("List shares"):
            pages = self._service.list_shares(
                results_per_page=page_size or config.page_size
            ).by_page(continuation_token=token)
            page = next(pages, [])
            entries = [ShareEntry(name=share.name) for share in page]
            return entries, pages.continuation_token or None

    def share_exists(self, name: str) -> bool:
        try:
            self._service.get_share_client(name).get_share_properties()
            return True
        except ResourceNotFoundError:
            return False
        except HttpResponseError as e:
            if getattr(e, "error_code", None) == INVALID_RESOURCE_NAME:
                logger.debug("Share name rejected by service: %s", name)
                return False
            raise RemoteOperationError(f"Check share '{name}': {e}") from e
        except AzureError as e:
            raise RemoteOperationError(f"Check share '{name}': {e}") from e

    def get_share_root(self, share: str) -> DirectoryRef:
        return DirectoryRef(share)

    def get_subdirectory(self, directory: DirectoryRef, name: str) -> DirectoryRef:
        return directory.child(name)

    def get_parent_directory(self, directory: DirectoryRef) -> DirectoryRef:
        return directory.parent()

    def directory_exists(self, directory: DirectoryRef) -> bool:
        if directory.is_root:
            return self.share_exists(directory.share)
        try:
            self._directory_client(directory).get_directory_properties()
            return True
        except ResourceNotFoundError:
            return False
        except HttpResponseError as e:
            if getattr(e, "error_code", None) == INVALID_RESOURCE_NAME:
                return False
            raise RemoteOperationError(f"Check directory '{directory}': {e}") from e
        except AzureError as e:
            raise RemoteOperationError(f"Check directory '{directory}': {e}") from e

    def create_directory_if_not_exists(self, directory: DirectoryRef) -> bool:
        """Create a directory, tolerating one that already exists.

        Returns:
            True if the directory was created, False if it already existed
        """
        try:
            self._directory_client(directory).create_directory()
        except ResourceExistsError:
            return False
        except AzureError as e:
            raise RemoteOperationError(f"Create directory '{directory}': {e}") from e
        return True

    def list_children(
        self,
        directory: DirectoryRef,
        token: Optional[str],
        page_size: Optional[int] = None,
    ) -> tuple[list[ChildEntry], Optional[str]]:
        with _translate_errors(f"List directory '{directory}'"):
            pages = (
                self._directory_client(directory)
                .list_directories_and_files(
                    results_per_page=page_size or config.page_size
                )
                .by_page(continuation_token=token)
            )
            page = next(pages, [])
            entries = [
                ChildEntry(
                    name=item["name"],
                    kind=(
                        EntryKind.DIRECTORY if item["is_directory"] else EntryKind.FILE
                    ),
                )
                for item in page
            ]
            return entries, pages.continuation_token or None

    def upload_file(self, directory: DirectoryRef, name: str, local_path: Path) -> None:
        """Upload a local file, replacing any remote file of the same name."""
        file_client = self._directory_client(directory).get_file_client(name)
        try:
            with open(local_path, "rb") as source:
                with _translate_errors(f"Upload '{directory.file_path(name)}'"):
                    file_client.upload_file(source)
        except OSError as e:
            raise LocalPathError(f"Cannot read {local_path}: {e}") from e

    def delete_file_if_exists(self, directory: DirectoryRef, name: str) -> bool:
        """Delete a file.

        Returns:
            True if a file was deleted, False if no such file exists
        """
        file_client = self._directory_client(directory).get_file_client(name)
        try:
            file_client.delete_file()
        except ResourceNotFoundError:
            return False
        except AzureError as e:
            raise RemoteOperationError(
                f"Delete file '{directory.file_path(name)}': {e}"
            ) from e
        return True

    def delete_directory(self, directory: DirectoryRef) -> None:
        with _translate_errors(f"Delete directory '{directory}'"):
            self._directory_client(directory).delete_directory()
