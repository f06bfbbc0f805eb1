"""MCP tools module for Opal data access.

This module provides FastMCP tool implementations for:
- Account overview
- Card activity
- Saving the session
- Health check
"""

from opal.tools.activity import get_activity
from opal.tools.overview import get_overview
from opal.tools.session import health_check, save_session

__all__ = [
    "get_activity",
    "get_overview",
    "health_check",
    "save_session",
]
