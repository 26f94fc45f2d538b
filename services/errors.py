"""
services.errors - Exceptions the API layer maps to HTTP statuses.
"""


class NotFound(LookupError):
    """Requested record does not exist (or is not the caller's)."""
    pass


class InvalidInput(ValueError):
    """Submitted data failed validation."""
    pass
