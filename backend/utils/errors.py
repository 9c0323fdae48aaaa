# backend/utils/errors.py

class InventoryError(Exception):
    """Base class for errors raised by the inventory layer."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Malformed or out-of-range input, reported back to the caller as-is
class ValidationError(InventoryError):
    status_code = 400


class NotFoundError(InventoryError):
    status_code = 404


# Failure of the underlying store; callers only see a generic message
class StorageError(InventoryError):
    status_code = 500
