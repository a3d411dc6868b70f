import logging
import re
from dataclasses import dataclass
from typing import Iterable

from ..errors import ParseError
from ..models import FareQuote, ResultRow
from ..scraping.session import AutomationSession, open_dialog

_NON_PRICE_CHARS = re.compile(r'[^\d.]')


@dataclass(frozen=True, slots=True)
class RawFareOption:
    family: str | None
    cabin: str | None
    price_text: str


def parse_price(text: str) -> float:
    cleaned = _NON_PRICE_CHARS.sub('', text)
    try:
        return float(cleaned)
    except ValueError as e:
        raise ParseError(f"Price text {text!r} is not a number") from e


def fare_key(family: str, cabin: str) -> str:
    return f"{family} ({cabin})"


def _optional_text(session: AutomationSession, description: str, scope) -> str | None:
    if session.count(description, scope) == 0:
        return None
    return session.text(session.locate(description, scope)) or None


def read_fare_options(session: AutomationSession, row: ResultRow) -> list[RawFareOption]:
    trigger = session.locate('row.fares_button', row.handle)
    with open_dialog(session, trigger, 'fares.panel', 'fares.close'):
        options = []
        for handle in session.locate_all('fares.option'):
            price = session.text(session.locate('fare.price', handle)) if session.count('fare.price', handle) else ''
            options.append(RawFareOption(
                family=_optional_text(session, 'fare.family', handle),
                cabin=_optional_text(session, 'fare.cabin', handle),
                price_text=price,
            ))
    logging.info(f"Row {row.index} lists {len(options)} fare options")
    return options


def build_fare_quote(options: Iterable[RawFareOption]) -> FareQuote:
    """Map "<family> (<cabin>)" to price in page order; a later duplicate key overwrites the earlier one."""
    fares: FareQuote = {}
    for option in options:
        if not option.family or not option.cabin:
            logging.debug(f"Skipping fare option without family/cabin: {option}")
            continue
        try:
            price = parse_price(option.price_text)
        except ParseError as e:
            logging.warning(f"Dropping fare {fare_key(option.family, option.cabin)}: {e}")
            continue
        fares[fare_key(option.family, option.cabin)] = price
    return fares
