import logging
from typing import Sequence

from ..errors import RowNotFoundError
from ..models import Direction, MatchCriteria, ResultRow
from ..scraping.session import AutomationSession


def collect_rows(session: AutomationSession) -> list[ResultRow]:
    session.wait_for('results.row')
    handles = session.locate_all('results.row')
    logging.info(f"Number of flight rows found: {len(handles)}")
    return [ResultRow(handle=h, index=i, text=session.text(h)) for i, h in enumerate(handles)]


def row_matches(text: str, hints: Sequence[str | None]) -> bool:
    lowered = text.lower()
    return all(hint.lower() in lowered for hint in hints if hint)


def match_row(rows: Sequence[ResultRow], criteria: MatchCriteria | None, direction: Direction) -> ResultRow:
    """First row (document order) whose itinerary text contains every provided hint of `direction`.

    A run without criteria is rejected rather than resolved to the first row.
    """
    if criteria is None or criteria.is_empty():
        raise RowNotFoundError("No match criteria given; refusing to pick an arbitrary row")
    hints = criteria.hints_for(direction)
    for row in rows:
        if row_matches(row.text, hints):
            logging.info(f"Matched {direction} row {row.index} with hints {hints}")
            return row
    raise RowNotFoundError(f"None of {len(rows)} {direction} rows matches hints {hints}")
