"""Account overview page parser."""

from opal.config import load_selectors
from opal.errors import ParseError
from opal.models import Card, Overview
from opal.parsers.common import make_soup, parse_cents, text_of


def parse_overview(body: bytes) -> Overview:
    """Extract the registered cards from the account overview page.

    Args:
        body: Raw HTML of ``/registered/index``.

    Returns:
        Overview with one Card per card panel, in page order.

    Raises:
        ParseError: If a card panel is missing its number or balance.
    """
    selectors = load_selectors()["overview"]
    soup = make_soup(body)

    cards = []
    for i, item in enumerate(soup.select(selectors["card"])):
        number = text_of(item.select_one(selectors["number"]))
        if not number:
            raise ParseError(f"card {i} has no card number")

        balance = parse_cents(text_of(item.select_one(selectors["balance"])))
        if balance is None:
            raise ParseError(f"card {i} has no balance")

        cards.append(
            Card(
                name=text_of(item.select_one(selectors["name"])),
                number=number,
                balance_cents=balance,
            )
        )

    return Overview(cards=cards)
