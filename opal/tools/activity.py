"""MCP tool for retrieving card activity.

This module provides the get_activity tool which returns one page of
transactions for a card.
"""

import asyncio
from typing import Any

import structlog
from pydantic import ValidationError

from opal.models import ActivityRequest
from opal.tools.common import (
    build_error_response,
    build_success_response,
    error_type_for,
    fetch_and_save,
)

logger = structlog.get_logger(__name__)


async def get_activity(
    client: Any,
    lock: asyncio.Lock,
    card_index: int = 0,
    offset: int = 0,
    save_after_login: bool = False,
) -> dict[str, Any]:
    """Get one page of card activity.

    Args:
        client: OpalClient instance.
        lock: Lock serializing access to the client's session.
        card_index: Zero-based index of the card on the account.
        offset: Pages into the past (0 is the most recent page).
        save_after_login: Write the session back to its store if the fetch
            had to log in again. A failed save is reported in the metadata
            and does not discard the fetched data.

    Returns:
        Standardized response containing:
            - transactions: List of transactions, newest first
            - has_older: Whether an older page exists
            - card_index, offset: The request that was made
    """
    logger.info("get_activity_called", card_index=card_index, offset=offset)

    try:
        request = ActivityRequest(card_index=card_index, offset=offset)
    except ValidationError as e:
        return build_error_response(
            message=f"Invalid activity request: {e}",
            error_type="INVALID_ARGUMENT",
        )

    try:
        activity, save_metadata = await fetch_and_save(
            client,
            lock,
            client.activity,
            request,
            save_after_login=save_after_login,
        )
    except Exception as e:
        logger.error(
            "get_activity_failed",
            card_index=card_index,
            offset=offset,
            error=str(e),
            exc_info=True,
        )
        return build_error_response(
            message=f"Failed to get activity: {e}",
            error_type=error_type_for(e),
        )

    return build_success_response(
        {
            **activity.model_dump(),
            "card_index": card_index,
            "offset": offset,
        },
        extra_metadata=save_metadata,
    )
