"""FastMCP server entry point for the Opal MCP Server.

This module provides the MCP server that exposes Opal account data through
FastMCP tools. It is the only place that reads settings: it resolves the
auth file path, creates the file from bootstrap credentials when needed, and
owns the single Session for the process.
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager

import structlog
from fastmcp import FastMCP

from opal.client import OpalClient
from opal.config import settings
from opal.errors import StoreError
from opal.models import AuthRecord
from opal.session import Session
from opal.store import FileAuthStore
from opal.tools.common import build_error_response


# Configure structlog
def configure_logging() -> None:
    """Configure structlog for JSON or console output."""
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        # stdout carries the MCP stdio transport
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        cache_logger_on_first_use=True,
    )


# Initialize logging
configure_logging()
logger = structlog.get_logger(__name__)

# Global instances (initialized in lifespan)
session: Session | None = None
client: OpalClient | None = None
session_lock = asyncio.Lock()


def bootstrap_store(store: FileAuthStore) -> None:
    """Create the auth file from settings credentials if it does not exist.

    Raises:
        StoreError: If the file is missing and no credentials are configured.
    """
    if store.path.exists():
        return

    if not settings.opal_username or settings.opal_password is None:
        raise StoreError(
            f"auth file {store.path} does not exist; set OPAL_USERNAME and "
            "OPAL_PASSWORD to create it"
        )

    store.save(
        AuthRecord(username=settings.opal_username, password=settings.opal_password)
    )
    logger.info("auth_file_created", path=str(store.path))


@asynccontextmanager
async def lifespan(server):
    """Manage server startup and shutdown."""
    global session, client

    logger.info(
        "mcp_server_starting",
        log_level=settings.log_level,
        log_format=settings.log_format,
    )

    try:
        store = FileAuthStore(settings.resolved_auth_file())
        bootstrap_store(store)
        session = Session(
            store,
            base_url=settings.opal_base_url,
            timeout=settings.http_timeout_seconds,
        )
        client = OpalClient(session)
        logger.info("session_initialized", auth_file=str(store.path))
    except Exception as e:
        logger.error("session_initialization_failed", error=str(e), exc_info=True)
        sys.exit(1)

    logger.info("mcp_server_startup_complete")

    try:
        yield
    finally:
        logger.info("mcp_server_shutting_down")

        if session:
            try:
                session.close()
                logger.info("session_closed")
            except Exception as e:
                logger.warning("session_close_error", error=str(e))

        logger.info("mcp_server_shutdown_complete")


def not_initialized() -> dict:
    logger.error("server_not_initialized")
    return build_error_response("Server not initialized", "INITIALIZATION_ERROR")


# Create FastMCP instance
mcp = FastMCP("Opal MCP Server", lifespan=lifespan)


# Tool: Get Overview
@mcp.tool()
async def get_overview() -> dict:
    """Get the Opal account overview.

    Logs in again automatically if the saved session has expired.

    Returns:
        Dictionary containing:
            - status: "success" or "error"
            - data: Overview (if success)
                - cards: List of cards
                    - name: Card nickname (str)
                    - number: Card number (str)
                    - balance_cents: Balance in cents (int)
            - metadata: Response metadata
    """
    from opal.tools.overview import get_overview as get_overview_impl

    if not client:
        return not_initialized()

    return await get_overview_impl(
        client, session_lock, save_after_login=settings.save_after_login
    )


# Tool: Get Activity
@mcp.tool()
async def get_activity(card_index: int = 0, offset: int = 0) -> dict:
    """Get one page of transactions for an Opal card.

    Args:
        card_index: Zero-based index of the card on the account (default: 0)
        offset: How many pages into the past to fetch; 0 is the most recent (default: 0)

    Returns:
        Dictionary containing:
            - status: "success" or "error"
            - data: Activity (if success)
                - transactions: List of transactions, newest first
                    - number: Transaction number (int)
                    - time: Date and time as shown by Opal (str)
                    - mode: Transport mode (str)
                    - details: Journey details (str)
                    - journey_number: Journey number (int or null)
                    - fare_applied: Fare type applied (str)
                    - fare_cents, discount_cents, amount_cents: Amounts in cents
                - has_older: Whether an older page exists (bool)
            - metadata: Response metadata
    """
    from opal.tools.activity import get_activity as get_activity_impl

    if not client:
        return not_initialized()

    return await get_activity_impl(
        client,
        session_lock,
        card_index=card_index,
        offset=offset,
        save_after_login=settings.save_after_login,
    )


# Tool: Save Session
@mcp.tool()
async def save_session() -> dict:
    """Write the current session cookies to the auth file.

    Returns:
        Dictionary containing:
            - status: "success" or "error"
            - data: Save result (if success)
                - cookies_saved: Number of cookies written (int)
            - metadata: Response metadata
    """
    from opal.tools.session import save_session as save_session_impl

    if not client:
        return not_initialized()

    return await save_session_impl(client, session_lock)


# Tool: Health Check
@mcp.tool()
async def health_check() -> dict:
    """Check the state of the Opal session.

    Returns:
        Dictionary containing:
            - status: "success" or "error"
            - data: Health status (if success)
                - username: Account username (str)
                - base_url: Opal site URL (str)
                - session_cookies: Cookies held for the site (int)
                - busy: Whether a request is in progress (bool)
            - metadata: Response metadata
    """
    from opal.tools.session import health_check as health_check_impl

    if not client:
        return not_initialized()

    return await health_check_impl(client, session_lock)


def main() -> None:
    logger.info("starting_mcp_server_directly", transport=settings.mcp_transport)
    if settings.mcp_transport == "stdio":
        mcp.run()
    else:
        mcp.run(
            transport=settings.mcp_transport,
            host=settings.mcp_host,
            port=settings.mcp_port,
        )


if __name__ == "__main__":
    # This allows running the server directly with `python -m opal.server`
    # but the recommended way is: fastmcp run opal/server.py
    main()
