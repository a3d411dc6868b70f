"""Time series over all stored snapshots.

Each pass is a fresh, pure computation over the records it is given: keys are normalized to
instants, records sorted chronologically, and fare / seat series derived index-aligned with
the sorted points.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Sequence

from ..errors import DataUnavailableError, StoreReadError
from ..models import AggregatedPoint, Direction, DirectionRecord, FlightPoint, FlightSeries, HeadlineStat, Snapshot


@dataclass(frozen=True, slots=True)
class AggregatedSeries:
    points: list[AggregatedPoint]
    fare_classes: list[str]
    selected_fare_class: str
    departure_fares: list[tuple[datetime, float | None]]
    return_fares: list[tuple[datetime, float | None]]
    flights: list[FlightSeries]
    stats: list[HeadlineStat]

    @property
    def latest(self) -> AggregatedPoint:
        return self.points[-1]

    @property
    def previous(self) -> AggregatedPoint | None:
        return self.points[-2] if len(self.points) > 1 else None


def normalize_key(key: str) -> datetime:
    """`2026-01-27` -> midnight that day, `2026-01-28T14-30-45` -> 14:30:45 (UTC)."""
    try:
        if 'T' in key:
            date_part, time_part = key.split('T', 1)
            moment = datetime.fromisoformat(f"{date_part}T{time_part.replace('-', ':')}")
        else:
            moment = datetime.fromisoformat(f"{key}T00:00:00")
    except ValueError as e:
        raise StoreReadError(f"Snapshot key {key!r} is not a timestamp") from e
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def _flight_points(record: DirectionRecord) -> list[FlightPoint]:
    return [
        FlightPoint(
            flight_number=leg.flight_number,
            standard_seats_available=leg.seats.standard_available,
            preferred_seats_available=leg.seats.preferred_available,
            route=leg.route,
        )
        for leg in record.flights
    ]


def to_point(timestamp: datetime, snapshot: Snapshot) -> AggregatedPoint:
    return AggregatedPoint(
        timestamp=timestamp,
        date=timestamp.date(),
        lowest_departure_fare=snapshot.departure.lowest_fare,
        lowest_return_fare=snapshot.return_.lowest_fare,
        departure_fares=dict(snapshot.departure.fares),
        return_fares=dict(snapshot.return_.fares),
        departure_flights=_flight_points(snapshot.departure),
        return_flights=_flight_points(snapshot.return_),
    )


def build_points(records: Iterable[tuple[str, Snapshot]]) -> list[AggregatedPoint]:
    keyed = []
    for key, snapshot in records:
        try:
            timestamp = normalize_key(key)
        except StoreReadError as e:
            logging.warning(f"Skipping snapshot {key}: {e}")
            continue
        keyed.append((timestamp, key, snapshot))
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [to_point(timestamp, snapshot) for timestamp, _, snapshot in keyed]


def fare_for(point: AggregatedPoint, direction: Direction, fare_class: str) -> float | None:
    """Price of `fare_class`, or the lowest fare of that direction when the class is not listed."""
    if direction == "departure":
        fares, lowest = point.departure_fares, point.lowest_departure_fare
    else:
        fares, lowest = point.return_fares, point.lowest_return_fare
    price = fares.get(fare_class)
    return lowest if price is None else price


def fare_classes(points: Sequence[AggregatedPoint]) -> list[str]:
    return list(points[0].departure_fares) if points else []


def fare_series(points: Sequence[AggregatedPoint], direction: Direction,
                fare_class: str) -> list[tuple[datetime, float | None]]:
    return [(p.timestamp, fare_for(p, direction, fare_class)) for p in points]


def flight_series(points: Sequence[AggregatedPoint]) -> list[FlightSeries]:
    series: dict[str, FlightSeries] = {}
    for point in points:
        for flight in point.departure_flights + point.return_flights:
            if flight.flight_number not in series:
                series[flight.flight_number] = FlightSeries(
                    flight_number=flight.flight_number,
                    route=flight.route,
                    standard_seats=[None] * len(points),
                    preferred_seats=[None] * len(points),
                )
    for index, point in enumerate(points):
        for flight in point.departure_flights + point.return_flights:
            entry = series[flight.flight_number]
            # a flight number listed twice in one snapshot keeps its first entry
            if entry.standard_seats[index] is None:
                entry.standard_seats[index] = flight.standard_seats_available
                entry.preferred_seats[index] = flight.preferred_seats_available
    return list(series.values())


def total_standard_seats(flights: Iterable[FlightPoint]) -> int:
    return sum(f.standard_seats_available for f in flights)


def _change(current, previous) -> float | int:
    if previous is None or current is None:
        return 0
    return current - previous


def headline_stats(points: Sequence[AggregatedPoint], fare_class: str) -> list[HeadlineStat]:
    latest = points[-1]
    previous = points[-2] if len(points) > 1 else None

    current_departure = fare_for(latest, "departure", fare_class)
    current_return = fare_for(latest, "return", fare_class)
    departure_seats = total_standard_seats(latest.departure_flights)
    return_seats = total_standard_seats(latest.return_flights)
    if previous is None:
        changes = [0, 0, 0, 0]
    else:
        changes = [
            _change(current_departure, fare_for(previous, "departure", fare_class)),
            _change(current_return, fare_for(previous, "return", fare_class)),
            departure_seats - total_standard_seats(previous.departure_flights),
            return_seats - total_standard_seats(previous.return_flights),
        ]
    return [
        HeadlineStat(f"Departure {fare_class}", current_departure, changes[0]),
        HeadlineStat(f"Return {fare_class}", current_return, changes[1]),
        HeadlineStat("Total Departure Seats", departure_seats, changes[2]),
        HeadlineStat("Total Return Seats", return_seats, changes[3]),
    ]


def aggregate(records: Iterable[tuple[str, Snapshot]], fare_class: str | None = None,
              default_fare_class: str = 'ECONOMY (Basic)') -> AggregatedSeries:
    points = build_points(records)
    if not points:
        raise DataUnavailableError("No data available. Generate flight data files first.")
    classes = fare_classes(points)
    selected = fare_class or (classes[0] if classes else default_fare_class)
    logging.info(f"Aggregated {len(points)} snapshots, fare class {selected!r}")
    return AggregatedSeries(
        points=points,
        fare_classes=classes,
        selected_fare_class=selected,
        departure_fares=fare_series(points, "departure", selected),
        return_fares=fare_series(points, "return", selected),
        flights=flight_series(points),
        stats=headline_stats(points, selected),
    )
