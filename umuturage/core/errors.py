"""Error taxonomy shared by the workflow engine and the HTTP layer.

Each error carries the HTTP status it maps to and a short machine-readable
code. Messages are safe to show to clients; internal detail stays in the
server log.
"""


class UmuturageError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(UmuturageError):
    """Malformed input such as a negative member count or a blank field."""

    status_code = 400
    code = "validation_error"


class NotFoundOrUnauthorized(UmuturageError):
    """Record absent, already processed, or outside the caller's authority.

    The three causes are reported identically so callers cannot probe for
    records that belong to another leader.
    """

    status_code = 404
    code = "not_found"

    def __init__(self, message: str = "Household not found or already processed"):
        super().__init__(message)


class RoleDenied(UmuturageError):
    """Authenticated, but the caller's role may not use this endpoint."""

    status_code = 403
    code = "role_denied"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class StoreError(UmuturageError):
    """Persistence failure that cannot be handled locally."""

    status_code = 500
    code = "store_error"

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
