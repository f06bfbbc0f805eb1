"""Session management for the Opal website.

This module provides the authenticated Session and the login flow it uses
to recover from an expired session.
"""

from opal.session.client import (
    DEFAULT_BASE_URL,
    ExpiredSession,
    Failure,
    FetchOutcome,
    ProtocolFault,
    Session,
    Success,
)
from opal.session.login import LoginResult, LoginStep, login

__all__ = [
    "DEFAULT_BASE_URL",
    "ExpiredSession",
    "Failure",
    "FetchOutcome",
    "LoginResult",
    "LoginStep",
    "ProtocolFault",
    "Session",
    "Success",
    "login",
]
