"""Shared helpers for the page parsers."""

import re

from bs4 import BeautifulSoup, Tag

from opal.errors import ParseError


def make_soup(body: bytes) -> BeautifulSoup:
    return BeautifulSoup(body, "html.parser")


def text_of(node: Tag | None) -> str:
    """Return the stripped text of a node, or an empty string when missing."""
    if node is None:
        return ""
    return node.get_text(" ", strip=True)


def parse_cents(text: str) -> int | None:
    """Parse a dollar amount to cents.

    Converts strings like "$12.34", "-$1.50" or "$1,234.00" to integers.
    Returns None for blank cells.
    """
    cleaned = re.sub(r"[$,\s]", "", text)
    if not cleaned or cleaned == "-":
        return None

    match = re.fullmatch(r"(-)?(\d+)(?:\.(\d{1,2}))?", cleaned)
    if not match:
        raise ParseError(f"bad money value {text!r}")

    sign, dollars, cents = match.groups()
    value = int(dollars) * 100 + int((cents or "0").ljust(2, "0"))
    return -value if sign else value


def parse_int(text: str) -> int | None:
    cleaned = text.strip()
    if not cleaned:
        return None
    try:
        return int(cleaned)
    except ValueError as e:
        raise ParseError(f"bad integer value {text!r}") from e
