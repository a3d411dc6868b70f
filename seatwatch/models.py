from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Literal, TypeAlias

import dacite

from .errors import ParseError

Direction = Literal["departure", "return"]
DIRECTIONS: tuple[Direction, Direction] = ("departure", "return")

FareQuote: TypeAlias = dict[str, float]


@dataclass(frozen=True, slots=True)
class MatchCriteria:
    """Partial time hints used to pick one result row per direction.

    Hints are matched as case-insensitive substrings of a row's displayed itinerary text.
    """
    outbound_start: str | None = None
    outbound_end: str | None = None
    inbound_start: str | None = None
    inbound_end: str | None = None

    def hints_for(self, direction: Direction) -> tuple[str | None, str | None]:
        if direction == "departure":
            return self.outbound_start, self.outbound_end
        return self.inbound_start, self.inbound_end

    def is_empty(self) -> bool:
        return not any([self.outbound_start, self.outbound_end, self.inbound_start, self.inbound_end])


@dataclass(frozen=True, slots=True)
class SearchRequest:
    origin: str
    destination: str
    departure_date: date
    return_date: date
    adults: int = 1
    criteria: MatchCriteria | None = None

    def reference_date(self, direction: Direction) -> date:
        return self.departure_date if direction == "departure" else self.return_date


@dataclass(frozen=True, slots=True)
class ResultRow:
    """One search result as listed on the page; `handle` belongs to the automation session."""
    handle: Any
    index: int
    text: str


@dataclass(frozen=True, slots=True)
class LegStart:
    start_time: datetime
    airport_code: str
    flight_number: str


@dataclass(frozen=True, slots=True)
class LegEnd:
    end_time: datetime
    airport_code: str


Segment: TypeAlias = LegStart | LegEnd


@dataclass(frozen=True, slots=True)
class SeatInventory:
    standard_available: int = 0
    standard_occupied: int = 0
    preferred_available: int = 0
    preferred_occupied: int = 0


@dataclass(frozen=True, slots=True)
class Leg:
    flight_number: str
    departure_time: datetime
    arrival_time: datetime
    departure_airport: str
    arrival_airport: str
    seats: SeatInventory = field(default_factory=SeatInventory)

    @property
    def duration(self) -> timedelta:
        return self.arrival_time - self.departure_time

    @property
    def duration_text(self) -> str:
        minutes = int(self.duration.total_seconds() / 60)
        hours, rest = divmod(abs(minutes), 60)
        return f"{'-' if minutes < 0 else ''}{hours}h {rest}m"

    @property
    def route(self) -> str:
        return f"{self.departure_airport} → {self.arrival_airport}"


@dataclass(frozen=True, slots=True)
class DirectionRecord:
    flights: list[Leg]
    fares: FareQuote

    @property
    def lowest_fare(self) -> float | None:
        return min(self.fares.values()) if self.fares else None


@dataclass(frozen=True, slots=True)
class Snapshot:
    departure: DirectionRecord
    return_: DirectionRecord
    captured_at: datetime | None = None


# ---------------- derived (aggregation) -----------------
@dataclass(frozen=True, slots=True)
class FlightPoint:
    flight_number: str
    standard_seats_available: int
    preferred_seats_available: int
    route: str


@dataclass(frozen=True, slots=True)
class AggregatedPoint:
    timestamp: datetime
    date: date
    lowest_departure_fare: float | None
    lowest_return_fare: float | None
    departure_fares: FareQuote
    return_fares: FareQuote
    departure_flights: list[FlightPoint]
    return_flights: list[FlightPoint]


@dataclass(slots=True)
class FlightSeries:
    """Seat availability of one flight number, index-aligned with the aggregated points.

    None marks a snapshot in which the flight was not listed.
    """
    flight_number: str
    route: str
    standard_seats: list[int | None]
    preferred_seats: list[int | None]


@dataclass(frozen=True, slots=True)
class HeadlineStat:
    label: str
    value: float | int | None
    change: float | int


# ---------------- persisted format -----------------
_LEG_KEYS = {
    'flightNumber': 'flight_number',
    'departureTime': 'departure_time',
    'arrivalTime': 'arrival_time',
    'departureAirport': 'departure_airport',
    'arrivalAirport': 'arrival_airport',
    'seatDetails': 'seats',
}
_SEAT_KEYS = {
    'standardSeatsAvailable': 'standard_available',
    'standardSeatsOccupied': 'standard_occupied',
    'preferedSeatsAvailable': 'preferred_available',
    'preferedSeatsOccupied': 'preferred_occupied',
}


def parse_instant(value: str | datetime) -> datetime:
    """Parse an ISO-8601 instant; naive values and a trailing Z are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except (AttributeError, ValueError) as e:
            raise ParseError(f"Invalid ISO-8601 instant: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


_DACITE_CONFIG = dacite.Config(type_hooks={datetime: parse_instant, float: float}, strict=False)


def _expect(value: Any, kind: type, what: str) -> Any:
    if not isinstance(value, kind):
        raise ParseError(f"{what} should be a {kind.__name__}, got {type(value).__name__}")
    return value


def _rename(data: dict, mapping: dict[str, str]) -> dict:
    return {mapping.get(key, key): value for key, value in data.items()}


def leg_to_dict(leg: Leg) -> dict:
    return {
        'flightNumber': leg.flight_number,
        'departureTime': leg.departure_time.isoformat(),
        'arrivalTime': leg.arrival_time.isoformat(),
        'departureAirport': leg.departure_airport,
        'arrivalAirport': leg.arrival_airport,
        'duration': leg.duration_text,
        'seatDetails': {
            'standardSeatsAvailable': leg.seats.standard_available,
            'standardSeatsOccupied': leg.seats.standard_occupied,
            'preferedSeatsAvailable': leg.seats.preferred_available,
            'preferedSeatsOccupied': leg.seats.preferred_occupied,
        },
    }


def direction_to_dict(record: DirectionRecord) -> dict:
    return {'flights': [leg_to_dict(leg) for leg in record.flights], 'fares': dict(record.fares)}


def snapshot_to_dict(snapshot: Snapshot) -> dict:
    return {'departure': direction_to_dict(snapshot.departure), 'return': direction_to_dict(snapshot.return_)}


def direction_from_dict(data: dict) -> DirectionRecord:
    """Raises ParseError (or a dacite error) when the record does not have the persisted shape."""
    _expect(data, dict, 'direction')
    flights = []
    for raw_leg in _expect(data['flights'], list, 'flights'):
        leg_data = _rename(_expect(raw_leg, dict, 'flight'), _LEG_KEYS)
        leg_data['seats'] = _rename(_expect(leg_data.get('seats') or {}, dict, 'seatDetails'), _SEAT_KEYS)
        flights.append(dacite.from_dict(data_class=Leg, data=leg_data, config=_DACITE_CONFIG))
    fares = dacite.from_dict(data_class=_Fares, data={'fares': data.get('fares') or {}}, config=_DACITE_CONFIG)
    return DirectionRecord(flights=flights, fares=fares.fares)


def snapshot_from_dict(data: dict, captured_at: datetime | None = None) -> Snapshot:
    _expect(data, dict, 'snapshot')
    return Snapshot(
        departure=direction_from_dict(data['departure']),
        return_=direction_from_dict(data['return']),
        captured_at=captured_at,
    )


@dataclass(slots=True)
class _Fares:
    fares: dict[str, float]
