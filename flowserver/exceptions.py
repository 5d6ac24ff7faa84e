"""Custom exception classes for the Flow server."""


class FlowException(Exception):
    """
    Base exception class for all Flow domain errors.
    """
    pass


class NotFoundError(FlowException):
    """
    Raised when a record is absent or its stored value cannot be decoded.
    """
    pass


class ClientNotFoundError(NotFoundError):
    """
    Raised when a client record does not exist.
    """
    pass


class FileRecordNotFoundError(NotFoundError):
    """
    Raised when a file record does not exist.
    """
    pass


class UnauthorizedAccessError(FlowException):
    """
    Raised when a client attempts to modify a file it doesn't own.
    """
    pass


class AdminRequiredError(FlowException):
    """
    Raised when a non-admin client calls an admin-only operation.
    """
    pass


class InvalidAdminSecretError(FlowException):
    """
    Raised when admin activation is attempted with a wrong or unset secret.
    """
    pass


class MissingClientIdError(FlowException):
    """
    Raised when a request needs a caller identity but carries none.
    """
    pass


class SelfModificationError(FlowException):
    """
    Raised when an admin tries to delete itself or drop its own admin flag.
    """
    pass


class InvalidKeyError(FlowException):
    """
    Raised when a generic store key is empty or collides with record keys.
    """
    pass


class StorageError(FlowException):
    """
    Raised when the byte storage cannot store, open or delete a payload.
    """
    pass


class ConfigurationError(FlowException):
    """
    Raised when required configuration is missing or malformed.
    """
    pass
