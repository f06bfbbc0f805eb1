"""Opal card client with transparent session management.

Typical use::

    from opal import FileAuthStore, OpalClient, Session

    with Session(FileAuthStore("/home/me/.opal")) as session:
        client = OpalClient(session)
        overview = client.overview()
        client.save()
"""

from opal.client import OpalClient, activity_url
from opal.errors import (
    CorruptStoreError,
    InsecureStoreError,
    LoginError,
    OpalError,
    ParseError,
    ProtocolError,
    SessionExpiredError,
    StatusError,
    StoreError,
    TransportError,
)
from opal.models import (
    Activity,
    ActivityRequest,
    AuthRecord,
    Card,
    CookieRecord,
    Overview,
    Transaction,
)
from opal.session import Session
from opal.store import AuthStore, FileAuthStore, MemoryAuthStore

__version__ = "0.1.0"

__all__ = [
    # Client
    "OpalClient",
    "Session",
    "activity_url",
    # Stores
    "AuthStore",
    "FileAuthStore",
    "MemoryAuthStore",
    # Models
    "Activity",
    "ActivityRequest",
    "AuthRecord",
    "Card",
    "CookieRecord",
    "Overview",
    "Transaction",
    # Errors
    "OpalError",
    "TransportError",
    "StatusError",
    "ProtocolError",
    "SessionExpiredError",
    "LoginError",
    "ParseError",
    "StoreError",
    "InsecureStoreError",
    "CorruptStoreError",
]
