"""File-based auth store.

The auth file holds the username, password and session cookies as JSON.
Because it contains a password, it must only be accessible by its owner:
``load`` refuses any file with group or other permission bits set, and
``save`` always leaves the file at mode 0600.
"""

import os
import stat
from pathlib import Path

import structlog
from pydantic import ValidationError

from opal.errors import CorruptStoreError, InsecureStoreError, StoreError
from opal.models import AuthRecord

logger = structlog.get_logger(__name__)

FILE_MODE = 0o600
GROUP_OTHER_BITS = 0o077


class FileAuthStore:
    """Stores the auth record in a single owner-only JSON file.

    Attributes:
        path: Location of the auth file.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def load(self) -> AuthRecord:
        """Read the auth record after checking the file permissions.

        Returns:
            The stored AuthRecord.

        Raises:
            InsecureStoreError: If group or other have any access to the file.
            CorruptStoreError: If the content is not a valid auth record.
            StoreError: If the file cannot be read.
        """
        try:
            mode = stat.S_IMODE(self.path.stat().st_mode)
        except OSError as e:
            raise StoreError(f"cannot stat auth file {self.path}: {e}") from e

        if mode & GROUP_OTHER_BITS:
            raise InsecureStoreError(
                f"security check failed on {self.path}: mode is {mode:04o}; "
                "it should not be accessible by group/other"
            )

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StoreError(f"cannot read auth file {self.path}: {e}") from e

        try:
            record = AuthRecord.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptStoreError(f"bad auth file {self.path}: {e}") from e

        logger.debug("auth_record_loaded", path=str(self.path), cookies=len(record.cookies))
        return record

    def save(self, record: AuthRecord) -> None:
        """Write the auth record, replacing any previous content.

        Args:
            record: The record to persist.

        Raises:
            StoreError: If the file cannot be written.
        """
        # Serialize before opening so a failure never leaves a truncated file.
        raw = record.model_dump_json(indent=2).encode("utf-8")

        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
            with os.fdopen(fd, "wb") as f:
                # O_CREAT's mode does not apply to a file that already exists.
                os.fchmod(f.fileno(), FILE_MODE)
                f.write(raw)
        except OSError as e:
            raise StoreError(f"cannot write auth file {self.path}: {e}") from e

        logger.debug("auth_record_saved", path=str(self.path), cookies=len(record.cookies))
