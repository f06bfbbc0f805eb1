"""MCP tool for retrieving the account overview.

This module provides the get_overview tool which returns the cards
registered to the Opal account and their balances.
"""

import asyncio
from typing import Any

import structlog

from opal.tools.common import (
    build_error_response,
    build_success_response,
    error_type_for,
    fetch_and_save,
)

logger = structlog.get_logger(__name__)


async def get_overview(
    client: Any,
    lock: asyncio.Lock,
    save_after_login: bool = False,
) -> dict[str, Any]:
    """Get the account overview.

    Args:
        client: OpalClient instance.
        lock: Lock serializing access to the client's session.
        save_after_login: Write the session back to its store if the fetch
            had to log in again. A failed save is reported in the metadata
            and does not discard the fetched data.

    Returns:
        Standardized response containing:
            - cards: List of cards with name, number and balance_cents

    Examples:
        >>> response = await get_overview(client, lock)
        >>> print(response["data"]["cards"][0]["balance_cents"])
        1250
    """
    logger.info("get_overview_called")

    try:
        overview, save_metadata = await fetch_and_save(
            client, lock, client.overview, save_after_login=save_after_login
        )
    except Exception as e:
        logger.error("get_overview_failed", error=str(e), exc_info=True)
        return build_error_response(
            message=f"Failed to get overview: {e}",
            error_type=error_type_for(e),
        )

    return build_success_response(overview.model_dump(), extra_metadata=save_metadata)
