"""Itinerary segment extraction and pairing.

The details dialog of a result row lists entries in document order: a departure entry (it has an
origin marker), an arrival entry, optionally a layover entry, the next departure, and so on.
Layovers are dropped, the rest become `LegStart` / `LegEnd` segments, and consecutive
(start, end) pairs become legs.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from ..errors import PairingError, ParseError
from ..models import LegEnd, LegStart, ResultRow, Segment
from ..scraping.session import AutomationSession, open_dialog
from .timeparse import parse_segment_time


@dataclass(frozen=True, slots=True)
class RawSegment:
    """Text read from one details entry, before any interpretation."""
    is_layover: bool = False
    has_origin: bool = False
    time_text: str = ''
    airport_code: str = ''
    flight_number: str = ''
    day_changes: tuple[str, ...] = field(default_factory=tuple)


def _read_entry(session: AutomationSession, entry) -> RawSegment:
    if session.count('segment.layover', entry) > 0:
        return RawSegment(is_layover=True)
    has_origin = session.count('segment.origin', entry) > 0
    time_key = 'segment.start_time' if has_origin else 'segment.end_time'
    flight_number = ''
    if has_origin:
        # first span of the airline name holds the flight number
        flight_number = session.text(session.locate('segment.flight_number', entry))
    return RawSegment(
        has_origin=has_origin,
        time_text=session.text(session.locate(time_key, entry)),
        airport_code=session.text(session.locate('segment.airport_code', entry)),
        flight_number=flight_number,
        day_changes=tuple(session.text(h) for h in session.locate_all('segment.day_change', entry)),
    )


def read_raw_segments(session: AutomationSession, row: ResultRow) -> list[RawSegment]:
    trigger = session.locate('row.details_button', row.handle)
    with open_dialog(session, trigger, 'details.dialog', 'details.close'):
        entries = session.locate_all('details.segment')
        logging.info(f"Row {row.index} has {len(entries)} detail entries")
        return [_read_entry(session, entry) for entry in entries]


def extract_segments(raw_segments: Iterable[RawSegment], reference: date) -> list[Segment]:
    """Filter layovers and classify each remaining entry; all times use the direction's reference date."""
    segments: list[Segment] = []
    for raw in raw_segments:
        if raw.is_layover:
            logging.debug('Skipping layover segment.')
            continue
        moment = parse_segment_time(raw.time_text, reference, raw.day_changes)
        if raw.has_origin:
            segments.append(LegStart(start_time=moment, airport_code=raw.airport_code,
                                     flight_number=raw.flight_number))
        else:
            segments.append(LegEnd(end_time=moment, airport_code=raw.airport_code))
    return segments


def pair_segments(segments: Sequence[Segment]) -> list[tuple[LegStart, LegEnd]]:
    """Pair consecutive (LegStart, LegEnd) segments in document order.

    Raises PairingError on an odd count or when a pair is not start-then-end. An arrival earlier
    than its departure is not rejected: both are displayed in the local time of their own airport,
    so eastbound legs can show one (e.g. NRT 17:00 -> DCA 16:20). Such a leg is logged and kept.
    """
    if len(segments) % 2:
        raise PairingError(f"Odd number of segments after filtering layovers: {len(segments)}")
    pairs: list[tuple[LegStart, LegEnd]] = []
    for i in range(0, len(segments), 2):
        start, end = segments[i], segments[i + 1]
        if not isinstance(start, LegStart):
            raise PairingError(f"Segment {i} should start a leg, got {type(start).__name__}")
        if not isinstance(end, LegEnd):
            raise PairingError(f"Segment {i + 1} should end a leg, got {type(end).__name__}")
        if end.end_time < start.start_time:
            # local wall-clock times, so an eastbound arrival can precede its departure
            logging.warning(f"Flight {start.flight_number} arrives before it departs in displayed local time")
        pairs.append((start, end))
    return pairs


def extract_leg_pairs(raw_segments: Iterable[RawSegment], reference: date) -> list[tuple[LegStart, LegEnd]]:
    try:
        segments = extract_segments(raw_segments, reference)
    except ParseError as e:
        raise PairingError(f"Could not build segments: {e}") from e
    return pair_segments(segments)
