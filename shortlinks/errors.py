"""Exceptions raised by the short link core.

Each failure kind has its own class so callers (HTTP handlers, CLI) can map
them explicitly:

    NotFound            unknown code                     -> 404
    Expired             known code past its expiry       -> 410
    InvalidInput        malformed long URL or request    -> 400
    StorageUnavailable  datastore failure or timeout     -> 500
    CodeSpaceExhausted  retries and escalation collided  -> 500

DuplicateCodeError is raised by stores when an insert hits the unique
constraint on ``code``. The lifecycle manager absorbs it as a collision.
"""


class ShortLinkError(Exception):
    """Base class for all short link errors."""

    pass


class NotFound(ShortLinkError):
    """Raised when a code does not map to any stored URL."""

    def __init__(self, code: str):
        super().__init__(f"Short code '{code}' not found")
        self.code = code


class Expired(ShortLinkError):
    """Raised when a code exists but its mapping has expired."""

    def __init__(self, code: str):
        super().__init__(f"Short code '{code}' has expired")
        self.code = code


class InvalidInput(ShortLinkError):
    """Raised when a long URL or request payload is malformed."""

    pass


class StorageUnavailable(ShortLinkError):
    """Raised when the datastore cannot be reached or a call times out."""

    pass


class CodeSpaceExhausted(ShortLinkError):
    """Raised when every candidate code, including the escalated one, collided."""

    pass


class DuplicateCodeError(ShortLinkError):
    """Raised by a store when inserting a code that already exists."""

    def __init__(self, code: str):
        super().__init__(f"Short code '{code}' already exists")
        self.code = code
