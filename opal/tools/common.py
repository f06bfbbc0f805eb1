"""Common utilities for MCP tools.

This module provides shared functionality for all MCP tools including:
- Unified response formatting
- Error classification
- Serialized execution of blocking client calls
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone, timedelta
from typing import Any, TypeVar

import structlog

from opal.errors import (
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

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Sydney local time; daylight saving is not tracked for response metadata.
AEST = timezone(timedelta(hours=10))

# Most specific first
ERROR_TYPES: list[tuple[type[Exception], str]] = [
    (InsecureStoreError, "INSECURE_STORE"),
    (StoreError, "STORE_ERROR"),
    (LoginError, "LOGIN_ERROR"),
    (SessionExpiredError, "SESSION_EXPIRED"),
    (ProtocolError, "PROTOCOL_ERROR"),
    (StatusError, "HTTP_STATUS_ERROR"),
    (TransportError, "NETWORK_ERROR"),
    (ParseError, "PARSE_ERROR"),
    (OpalError, "OPAL_ERROR"),
]


def build_success_response(
    data: dict[str, Any],
    source: str = "opal",
    extra_metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a standardized success response.

    Args:
        data: The response data.
        source: Where the data came from.
        extra_metadata: Additional keys merged into the metadata.

    Returns:
        Standardized response dictionary.
    """
    return {
        "status": "success",
        "data": data,
        "metadata": {
            "fetched_at": datetime.now(AEST).isoformat(),
            "source": source,
            **(extra_metadata or {}),
        },
    }


def build_error_response(
    message: str,
    error_type: str = "UNKNOWN_ERROR",
) -> dict[str, Any]:
    """Build a standardized error response.

    Args:
        message: Error message.
        error_type: Error type identifier.

    Returns:
        Standardized error response dictionary.
    """
    return {
        "status": "error",
        "error": {
            "message": message,
            "type": error_type,
        },
        "metadata": {
            "fetched_at": datetime.now(AEST).isoformat(),
        },
    }


def error_type_for(exc: Exception) -> str:
    """Map an exception to the error type identifier used in responses."""
    for cls, name in ERROR_TYPES:
        if isinstance(exc, cls):
            return name
    return "UNKNOWN_ERROR"


async def serialized_call(
    lock: asyncio.Lock,
    fn: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Run a blocking client call in a worker thread while holding ``lock``.

    The Session behind the client is not safe for concurrent use, so every
    tool call that touches it goes through the same lock.

    Args:
        lock: The lock guarding the Session.
        fn: Blocking function to call.
        *args: Positional arguments for fn.
        **kwargs: Keyword arguments for fn.

    Returns:
        Whatever fn returns.
    """
    async with lock:
        return await asyncio.to_thread(fn, *args, **kwargs)


async def fetch_and_save(
    client: Any,
    lock: asyncio.Lock,
    fetch_fn: Callable[..., T],
    *args: Any,
    save_after_login: bool = False,
) -> tuple[T, dict[str, Any]]:
    """Run a fetch and, if it had to log in again, optionally save the session.

    The fetch and the save run under one acquisition of ``lock``. A failed
    save does not discard the fetched data; it is reported in the returned
    metadata instead.

    Args:
        client: OpalClient instance.
        lock: The lock guarding the client's session.
        fetch_fn: Blocking fetch to run.
        *args: Positional arguments for fetch_fn.
        save_after_login: Save the session when the fetch logged in again.

    Returns:
        The fetch result and metadata with ``logged_in`` and ``session_saved``
        (plus ``save_error`` when the save failed).

    Raises:
        Whatever fetch_fn raises.
    """
    async with lock:
        logins_before = client.session.login_count
        result = await asyncio.to_thread(fetch_fn, *args)
        logged_in = client.session.login_count != logins_before

        metadata: dict[str, Any] = {"logged_in": logged_in, "session_saved": False}
        if not (logged_in and save_after_login):
            return result, metadata

        try:
            await asyncio.to_thread(client.save)
        except OpalError as e:
            logger.warning("session_save_failed", error=str(e))
            metadata["save_error"] = {"message": str(e), "type": error_type_for(e)}
        else:
            metadata["session_saved"] = True
        return result, metadata
