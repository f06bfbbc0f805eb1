"""Login page parser."""

from opal.config import load_selectors
from opal.errors import ParseError
from opal.parsers.common import make_soup


def parse_login(body: bytes) -> str:
    """Extract the anti-forgery token from the login page.

    Raises:
        ParseError: If the page has no token input.
    """
    selector = load_selectors()["login"]["token_input"]
    node = make_soup(body).select_one(selector)
    if node is None:
        raise ParseError("login page has no CSRF token")

    token = node.get("value")
    if not token:
        raise ParseError("login page CSRF token is empty")
    return str(token)
