"""Exception types for the Opal client.

Nothing in the client logs these; they propagate to whoever made the call.
"""


class OpalError(Exception):
    """Base exception for all Opal client errors."""


class TransportError(OpalError):
    """The HTTP request could not be completed."""


class StatusError(OpalError):
    """The site answered a content request with a non-OK status."""

    def __init__(self, status_code: int, reason: str) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP response {status_code} {reason}")


class ProtocolError(OpalError):
    """The site redirected somewhere other than the login pages."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"unexpected redirect to {location}")


class SessionExpiredError(OpalError):
    """The session was still expired after logging in again."""


class LoginError(OpalError):
    """A step of the login exchange failed.

    Attributes:
        step: Which part of the exchange failed (see ``opal.session.login.LoginStep``).
    """

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"{step}: {message}")


class ParseError(OpalError):
    """A page did not have the structure the parser expects."""


class StoreError(OpalError):
    """The auth store could not be read or written."""


class InsecureStoreError(StoreError):
    """The auth file is readable or writable by group or other."""


class CorruptStoreError(StoreError):
    """The auth file does not contain a valid auth record."""
