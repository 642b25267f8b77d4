class ValidationError(Exception):
    pass


class OrderClosedError(ValidationError):
    """Raised when cancelling an order that has already been delivered."""


class StorageError(Exception):
    pass
