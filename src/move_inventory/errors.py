"""Application error types."""


class InventoryError(Exception):
    """Base class for errors surfaced to API callers."""


class SessionNotFoundError(InventoryError):
    """Raised when a session id does not exist."""


class ItemNotFoundError(InventoryError):
    """Raised when an item does not exist in the given session."""


class InvalidPhotoError(InventoryError):
    """Raised when an uploaded photo is rejected."""


class InvalidSafetyFactorError(InventoryError):
    """Raised when a safety factor is outside the allowed set."""


class InvalidItemError(InventoryError):
    """Raised when item fields fail validation."""


class InvalidShareTokenError(InventoryError):
    """Raised for malformed, unknown or revoked share tokens."""


class AccessDeniedError(InventoryError):
    """Raised when a share grant does not allow the requested action."""


class VisionParseError(InventoryError):
    """Raised when vision output cannot be interpreted."""


class InvalidAccessLevelError(InventoryError):
    """Raised when a share is requested with an unknown access level."""
