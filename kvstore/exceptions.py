"""Exception classes raised by key-value engines."""


class KVStoreException(Exception):
    """
    Base exception class for all engine errors.
    """
    pass


class KeyNotFoundError(KVStoreException):
    """
    Raised when a key is absent from the requested persona (or from every
    persona, for global lookups).
    """
    pass


class EngineError(KVStoreException):
    """
    Raised when the engine cannot complete an operation (I/O failure,
    corrupt stored value, failed move).
    """
    pass


class UndecodableValueError(EngineError):
    """
    Raised by point lookups when the stored value cannot be decoded.
    """
    pass
