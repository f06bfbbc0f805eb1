"""Data fetching operations for Opal accounts.

This module provides the OpalClient class, which builds page URLs, fetches
them through an authenticated Session and hands the bodies to the parsers.
"""

import httpx
import structlog

from opal.models import Activity, ActivityRequest, Overview
from opal.parsers import parse_activity, parse_overview
from opal.session import Session

logger = structlog.get_logger(__name__)

OVERVIEW_PATH = "/registered/index"
ACTIVITY_PATH = "/registered/opal-card-transactions/"


def activity_url(base_url: str | httpx.URL, request: ActivityRequest) -> str:
    """Build the activity page URL for a card and page offset.

    The ``pageIndex`` parameter is only added for offsets past the first page.
    """
    url = f"{str(base_url).rstrip('/')}{ACTIVITY_PATH}?cardIndex={request.card_index}"
    if request.offset > 0:
        url += f"&pageIndex={request.offset}"
    return url


class OpalClient:
    """Fetches account data for the account a Session is logged in to.

    Attributes:
        session: The authenticated Session used for every request.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def overview(self) -> Overview:
        """Fetch the account overview.

        Raises:
            OpalError: If fetching or parsing the page fails.
        """
        body = self.session.get(self.session.url_for(OVERVIEW_PATH))
        overview = parse_overview(body)
        logger.debug("overview_fetched", cards=len(overview.cards))
        return overview

    def activity(self, request: ActivityRequest) -> Activity:
        """Fetch one page of activity for a card.

        Args:
            request: Card index and page offset (0 is the most recent page).

        Raises:
            OpalError: If fetching or parsing the page fails.
        """
        body = self.session.get(activity_url(self.session.base_url, request))
        activity = parse_activity(body)
        logger.debug(
            "activity_fetched",
            card_index=request.card_index,
            offset=request.offset,
            transactions=len(activity.transactions),
        )
        return activity

    def save(self) -> None:
        """Persist the session's credentials and cookies."""
        self.session.save()
