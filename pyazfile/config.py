"""Configuration defaults and credential parsing for pyazfile."""

from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlsplit

from .exceptions import InvalidArgumentError


@dataclass
class Config:
    """Runtime settings for the shell.

    Everything here is a code-level default: the shell takes no flags,
    configuration file or environment variables.
    """

    max_workers: int = 8
    """Worker threads per directory level for uploads and deletes"""

    page_size: int = 5000
    """Entries requested per listing page (service maximum)"""

    endpoint_suffix: str = "core.windows.net"
    """DNS suffix of the storage service"""

    protocol: str = "https"
    """Scheme used to build account URLs"""

    def build_account_url(self, account_name: str) -> str:
        """Build the file service URL for a storage account.

        Examples:
            >>> Config().build_account_url("myaccount")
            'https://myaccount.file.core.windows.net'
        """
        return f"{self.protocol}://{account_name}.file.{self.endpoint_suffix}"

    def parse_credentials(self, args: tuple[str, ...]) -> tuple[str, Optional[Any]]:
        """Turn command-line arguments into an account URL and SDK credential.

        Two arguments are an account name and account key. One argument is
        a service URL carrying a SAS token in its query string; the SDK
        reads the token from the URL, so no separate credential is returned.

        Args:
            args: Positional command-line arguments

        Returns:
            Tuple of (account_url, credential)

        Raises:
            InvalidArgumentError: If the arguments match neither form
        """
        if len(args) == 2:
            account_name, account_key = args
            if not account_name or not account_key:
                raise InvalidArgumentError("Account name and key must not be empty")
            credential = {"account_name": account_name, "account_key": account_key}
            return self.build_account_url(account_name), credential

        if len(args) == 1:
            sas_url = args[0]
            parts = urlsplit(sas_url)
            if not parts.scheme or not parts.netloc:
                raise InvalidArgumentError(
                    "SAS form expects a service URL, e.g. "
                    "https://<account>.file.core.windows.net/?sv=..."
                )
            if not parts.query:
                raise InvalidArgumentError("SAS URL has no token in its query string")
            return sas_url, None

        if not args:
            raise InvalidArgumentError("Not enough arguments")
        raise InvalidArgumentError("Too many arguments")


config = Config()
