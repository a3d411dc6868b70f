"""Pure assembly of extracted pieces into direction records and snapshots."""
from datetime import datetime, timezone
from typing import Sequence

from ..models import DirectionRecord, FareQuote, Leg, LegEnd, LegStart, SeatInventory, Snapshot
from .seats import align_inventories


def build_leg(start: LegStart, end: LegEnd, seats: SeatInventory) -> Leg:
    return Leg(
        flight_number=start.flight_number,
        departure_time=start.start_time,
        arrival_time=end.end_time,
        departure_airport=start.airport_code,
        arrival_airport=end.airport_code,
        seats=seats,
    )


def build_direction_record(
        pairs: Sequence[tuple[LegStart, LegEnd]],
        inventories: Sequence[SeatInventory],
        fares: FareQuote,
) -> DirectionRecord:
    aligned = align_inventories(len(pairs), inventories)
    flights = [build_leg(start, end, seats) for (start, end), seats in zip(pairs, aligned)]
    return DirectionRecord(flights=flights, fares=dict(fares))


def build_snapshot(departure: DirectionRecord, return_: DirectionRecord,
                   captured_at: datetime | None = None) -> Snapshot:
    return Snapshot(departure=departure, return_=return_, captured_at=captured_at or datetime.now(timezone.utc))
