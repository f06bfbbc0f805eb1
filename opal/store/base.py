"""The persistence boundary for auth records."""

from typing import Protocol

from opal.errors import StoreError
from opal.models import AuthRecord


class AuthStore(Protocol):
    """Loads and saves the credentials and cookies of a session.

    Implementations do no locking. Callers sharing one store between
    sessions must serialize their ``save`` calls.
    """

    def load(self) -> AuthRecord:
        """Return the stored record.

        Raises:
            StoreError: If the record cannot be read.
        """
        ...

    def save(self, record: AuthRecord) -> None:
        """Replace the stored record.

        Raises:
            StoreError: If the record cannot be written.
        """
        ...


class MemoryAuthStore:
    """Keeps the record in process memory."""

    def __init__(self, record: AuthRecord | None = None) -> None:
        self._record = record
        self.save_count = 0

    def load(self) -> AuthRecord:
        if self._record is None:
            raise StoreError("no auth record has been saved")
        return self._record

    def save(self, record: AuthRecord) -> None:
        self._record = record
        self.save_count += 1
