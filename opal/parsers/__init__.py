"""Parsers for Opal website pages.

Each parser is a pure function from a page body to a record, raising
ParseError when the markup is not what it expects.
"""

from opal.parsers.activity import parse_activity
from opal.parsers.login import parse_login
from opal.parsers.overview import parse_overview

__all__ = [
    "parse_activity",
    "parse_login",
    "parse_overview",
]
