"""
Domain exceptions for the video library.

Services raise these; the handlers registered in ``bjjlib.main`` turn them
into HTTP responses (400, 404, 409, 401).
"""


class LibraryError(Exception):
    """Base exception for all library errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(LibraryError):
    """Malformed or empty required input (empty tag name, missing title/URL)."""

    status_code = 400


class NotFoundError(LibraryError):
    """A referenced video, tag, category or session does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found")


class ConflictError(LibraryError):
    """Uniqueness violation, e.g. a duplicate tag or category name."""

    status_code = 409


class AuthenticationError(LibraryError):
    """Missing, unknown or expired admin session on a gated call."""

    status_code = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)
