"""MCP tools for the persisted session.

This module provides save_session, which writes the current credentials and
cookies to the auth store, and health_check, which reports the session state
without touching the network. Both read the session under the same lock
the data tools use.
"""

import asyncio
from typing import Any

import structlog

from opal.tools.common import (
    build_error_response,
    build_success_response,
    error_type_for,
    serialized_call,
)

logger = structlog.get_logger(__name__)


async def save_session(client: Any, lock: asyncio.Lock) -> dict[str, Any]:
    """Write the session's credentials and cookies to its store.

    Returns:
        Standardized response containing:
            - cookies_saved: Number of cookies written
    """
    logger.info("save_session_called")

    try:
        await serialized_call(lock, client.save)
        return build_success_response(
            {"cookies_saved": len(client.session.record.cookies)},
            source="store",
        )
    except Exception as e:
        logger.error("save_session_failed", error=str(e), exc_info=True)
        return build_error_response(
            message=f"Failed to save session: {e}",
            error_type=error_type_for(e),
        )


async def health_check(client: Any, lock: asyncio.Lock) -> dict[str, Any]:
    """Report the state of the session.

    Returns:
        Standardized response containing:
            - username: Account the session logs in as
            - base_url: Site the session talks to
            - session_cookies: Number of site cookies in the jar
            - busy: Whether a call was using the session when the check began
    """
    logger.info("health_check_called")

    busy = lock.locked()

    def snapshot() -> dict[str, Any]:
        session = client.session
        return {
            "username": session.record.username,
            "base_url": str(session.base_url),
            "session_cookies": len(session.site_cookies()),
        }

    try:
        result = {**await serialized_call(lock, snapshot), "busy": busy}
        return build_success_response(result, source="health_check")
    except Exception as e:
        logger.error("health_check_failed", error=str(e), exc_info=True)
        return build_error_response(
            message=f"Health check failed: {e}",
            error_type="HEALTH_CHECK_ERROR",
        )
