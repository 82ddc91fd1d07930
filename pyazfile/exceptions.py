"""Exceptions raised by pyazfile."""


class PyAzFileError(Exception):
    """Base exception for all pyazfile errors."""


class InvalidArgumentError(PyAzFileError):
    """Missing or malformed command arguments, or an invalid navigation target."""


class NotInShareError(PyAzFileError):
    """A share-scoped command was issued while no share is selected."""


class NotFoundError(PyAzFileError):
    """A share, directory or file does not exist remotely."""


class LocalPathError(PyAzFileError):
    """A local path is missing or cannot be read."""


class RemoteOperationError(PyAzFileError):
    """Transport, authentication or quota failure reported by the storage service."""
