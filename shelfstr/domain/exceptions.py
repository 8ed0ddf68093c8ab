"""Domain errors.

Malformed tags are never raised; the decoder degrades them to absent fields.
"""

from typing import Optional


class ShelfstrError(Exception):
    pass


class ValidationError(ShelfstrError, ValueError):
    """An entity cannot be encoded: a required field is missing or malformed."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DecodeError(ShelfstrError):
    pass


class UnsupportedKind(DecodeError):
    """The event kind has no decoder. Recoverable per event."""

    def __init__(self, kind: int, event_id: Optional[str] = None):
        super().__init__(f"Unsupported event kind: {kind}")
        self.kind = kind
        self.event_id = event_id
