from __future__ import annotations


class BusinessValidationError(Exception):
    """Raised when caller input violates a domain rule. Mapped to HTTP 400.

    `field` names the offending input when there is a single one.
    """

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field
