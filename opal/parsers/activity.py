"""Card activity page parser."""

from opal.config import load_selectors
from opal.errors import ParseError
from opal.models import Activity, Transaction
from opal.parsers.common import make_soup, parse_cents, parse_int, text_of


def parse_activity(body: bytes) -> Activity:
    """Extract one page of transactions from the card activity page.

    A page showing the "no activity" notice yields an empty Activity.

    Raises:
        ParseError: If the transaction table is missing or a row is malformed.
    """
    selectors = load_selectors()["activity"]
    columns = selectors["columns"]
    soup = make_soup(body)

    table = soup.select_one(selectors["table"])
    if table is None:
        if soup.select_one(selectors["no_activity"]) is not None:
            return Activity()
        raise ParseError("activity page has no transaction table")

    width = max(columns.values()) + 1
    transactions = []
    for i, row in enumerate(table.select(selectors["rows"])):
        cells = [text_of(td) for td in row.find_all("td")]
        if len(cells) < width:
            raise ParseError(f"transaction row {i} has {len(cells)} cells, want {width}")

        number = parse_int(cells[columns["number"]])
        if number is None:
            raise ParseError(f"transaction row {i} has no transaction number")

        transactions.append(
            Transaction(
                number=number,
                time=cells[columns["time"]],
                mode=cells[columns["mode"]],
                details=cells[columns["details"]],
                journey_number=parse_int(cells[columns["journey_number"]]),
                fare_applied=cells[columns["fare_applied"]],
                fare_cents=parse_cents(cells[columns["fare"]]),
                discount_cents=parse_cents(cells[columns["discount"]]),
                amount_cents=parse_cents(cells[columns["amount"]]),
            )
        )

    has_older = soup.select_one(selectors["next_page"]) is not None
    return Activity(transactions=transactions, has_older=has_older)
