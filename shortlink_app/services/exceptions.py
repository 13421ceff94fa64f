"""
Error taxonomy for the shortlink core.

The core only raises these; mapping them to HTTP status codes is done at the
transport edge (shortlink_app/api/errors.py).
"""


class ShortlinkError(Exception):
    """Base class for every error the core raises."""

    default_message = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidInput(ShortlinkError):
    """Raised when the long URL is missing or not an absolute URL."""

    default_message = "Invalid or missing URL"


class UniqueViolation(ShortlinkError):
    """Raised by a repository when the short code is already taken.

    The allocator retries on this; it never reaches a caller of allocate().
    """

    default_message = "Short code already exists"

    def __init__(self, short_code: str, message: str = None):
        super().__init__(message or f"Short code '{short_code}' already exists")
        self.short_code = short_code


class AllocationExhausted(ShortlinkError):
    """Raised when no free short code was found within the attempt budget."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Could not allocate a unique short code after {attempts} attempts"
        )
        self.attempts = attempts


class StoreUnavailable(ShortlinkError):
    """Raised when the backing store cannot be reached."""

    default_message = "Mapping store unavailable"


class NotFound(ShortlinkError):
    """Raised when a lookup matches no mapping."""

    default_message = "Short URL not found"


class Unauthorized(ShortlinkError):
    """Raised when a session token is invalid or expired."""

    default_message = "Unauthorized"


class Cancelled(ShortlinkError):
    """Raised when an allocation is cancelled or runs past its deadline."""

    default_message = "Allocation cancelled"
