"""
Typed exceptions for Chessmate Central.

Every error carries the HTTP status code the web layer renders it with,
so services can raise without knowing about FastAPI:

- ValidationError (400): malformed input, never retried
- UnauthorizedError (401): organizer login missing or rejected
- NotFoundError (404): missing tournament, registration, post or player
- ConflictError (409): duplicate keys and stale document versions
- PersistenceError (503): database failure, the whole operation may be retried
"""


class ChessmateError(Exception):
    """Base exception for Chessmate Central."""
    status_code: int = 500

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ChessmateError):
    """
    Raised when a request is well-formed JSON but semantically invalid.

    Examples:
    - Round index outside the tournament's rounds
    - Score not one of 0, 0.5, 1 or null
    - Tournament id in the body differs from the path
    """
    status_code = 400

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, self.status_code)


class RoundsNotConfiguredError(ValidationError):
    """Raised when scores are entered for a tournament with zero rounds."""

    def __init__(self, tournament_id: str):
        self.tournament_id = tournament_id
        super().__init__(
            f"Tournament {tournament_id} has no rounds configured; "
            "set total rounds before entering scores"
        )


class UnauthorizedError(ChessmateError):
    """Raised when an organizer-only operation is attempted without login."""
    status_code = 401

    def __init__(self, message: str = "Organizer login required"):
        super().__init__(message, self.status_code)


class NotFoundError(ChessmateError):
    """Raised when a requested resource doesn't exist."""
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, self.status_code)


class ConflictError(ChessmateError):
    """Raised when a write collides with existing state."""
    status_code = 409

    def __init__(self, message: str = "Conflicting update"):
        super().__init__(message, self.status_code)


class ConcurrentUpdateError(ConflictError):
    """Raised when optimistic retries on a result document are exhausted."""

    def __init__(self, tournament_id: str, attempts: int):
        self.tournament_id = tournament_id
        self.attempts = attempts
        super().__init__(
            f"Results for tournament {tournament_id} kept changing; "
            f"gave up after {attempts} attempts"
        )


class PersistenceError(ChessmateError):
    """Raised when the database call fails or times out."""
    status_code = 503

    def __init__(self, message: str = "Storage temporarily unavailable"):
        super().__init__(message, self.status_code)


class DescriptionUnavailableError(ChessmateError):
    """Raised when AI description generation is not configured or fails."""
    status_code = 503

    def __init__(self, message: str = "Description generation is unavailable"):
        super().__init__(message, self.status_code)
