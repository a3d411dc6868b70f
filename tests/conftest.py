"""
Test fixtures for seatwatch tests.

FakeSession implements the automation capability surface over an in-memory element tree, so
the extraction steps run without a browser.
"""
from datetime import datetime, timezone

import pytest

from seatwatch.models import DirectionRecord, Leg, SeatInventory, Snapshot


class FakeElement:
    def __init__(self, text: str = '', children: dict | None = None, on_click=None, name: str = ''):
        self.text = text
        self.children: dict[str, list["FakeElement"]] = children or {}
        self.on_click = on_click
        self.name = name
        self.clicks = 0

    def __repr__(self):
        return f"FakeElement({self.name or self.text!r})"


class FakeSession:
    def __init__(self, page: dict | None = None):
        self.root = FakeElement(children=page or {}, name='page')
        self.clicked: list[FakeElement] = []
        self.waited: list[str] = []

    def _scope(self, scope):
        return scope if scope is not None else self.root

    def locate_all(self, description, scope=None):
        return list(self._scope(scope).children.get(description, []))

    def locate(self, description, scope=None):
        found = self.locate_all(description, scope)
        if not found:
            raise LookupError(f"{description} not found in {self._scope(scope)}")
        return found[0]

    def wait_for(self, description, scope=None):
        self.waited.append(description)
        return self.locate(description, scope)

    def count(self, description, scope=None):
        return len(self.locate_all(description, scope))

    def text(self, handle):
        return handle.text

    def click(self, handle):
        self.clicked.append(handle)
        handle.clicks += 1
        if handle.on_click is not None:
            handle.on_click(self)

    def fill(self, handle, value):
        handle.text = value

    def set_page(self, description, elements):
        self.root.children[description] = list(elements)


def departure_entry(clock: str, airport: str, flight: str, day_change: str | None = None) -> FakeElement:
    children = {
        'segment.origin': [FakeElement()],
        'segment.start_time': [FakeElement(clock)],
        'segment.airport_code': [FakeElement(airport)],
        'segment.flight_number': [FakeElement(flight), FakeElement('Operated by Air Canada')],
    }
    if day_change:
        children['segment.day_change'] = [FakeElement(day_change)]
    return FakeElement(children=children, name=f'dep {airport}')


def arrival_entry(clock: str, airport: str, day_change: str | None = None) -> FakeElement:
    children = {
        'segment.end_time': [FakeElement(clock)],
        'segment.airport_code': [FakeElement(airport)],
    }
    if day_change:
        children['segment.day_change'] = [FakeElement(day_change)]
    return FakeElement(children=children, name=f'arr {airport}')


def layover_entry() -> FakeElement:
    return FakeElement('Connection 1h 20m', children={'segment.layover': [FakeElement()]}, name='layover')


def seat_tab(inventory: SeatInventory) -> FakeElement:
    def _show(session: FakeSession) -> None:
        session.set_page('seatmap.container', [FakeElement()])
        session.set_page('seat.standard_available', [FakeElement()] * inventory.standard_available)
        session.set_page('seat.standard_occupied', [FakeElement()] * inventory.standard_occupied)
        session.set_page('seat.preferred_available', [FakeElement()] * inventory.preferred_available)
        session.set_page('seat.preferred_occupied', [FakeElement()] * inventory.preferred_occupied)
    return FakeElement(on_click=_show, name='seat tab')


def fare_option(family: str | None, cabin: str | None, price: str) -> FakeElement:
    children = {'fare.price': [FakeElement(price)]}
    if family is not None:
        children['fare.family'] = [FakeElement(family)]
    if cabin is not None:
        children['fare.cabin'] = [FakeElement(cabin)]
    return FakeElement(children=children, name=f'fare {family}')


def result_row(text: str, entries=(), tabs=(), fares=(), on_select=None) -> FakeElement:
    """A result row whose buttons open the details dialog, the seat map and the fare panel."""
    def _open_details(session: FakeSession) -> None:
        session.set_page('details.dialog', [FakeElement()])
        session.set_page('details.close', [FakeElement(name='details close')])
        session.set_page('details.segment', entries)

    def _open_seats(session: FakeSession) -> None:
        session.set_page('seatmap.layout', [FakeElement()])
        session.set_page('seatmap.close', [FakeElement(name='seatmap close')])
        session.set_page('seatmap.tab', tabs)

    def _open_fares(session: FakeSession) -> None:
        session.set_page('fares.panel', [FakeElement()])
        session.set_page('fares.close', [FakeElement(name='fares close')])
        session.set_page('fares.option', fares)
        session.set_page('row.select_button', [FakeElement(name='select', on_click=on_select)])

    return FakeElement(text, children={
        'row.details_button': [FakeElement(on_click=_open_details, name='details')],
        'row.seats_button': [FakeElement(on_click=_open_seats, name='seats')],
        'row.fares_button': [FakeElement(on_click=_open_fares, name='fares')],
    }, name=text)


@pytest.fixture
def fake_session():
    return FakeSession()


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_snapshot(departure_fares: dict, return_fares: dict | None = None,
                  departure_seats: int = 40, return_seats: int = 30,
                  departure_flight: str = 'AC1', return_flight: str = 'AC2') -> Snapshot:
    departure = DirectionRecord(
        flights=[Leg(departure_flight, utc(2026, 5, 24, 10, 30), utc(2026, 5, 25, 14, 55), 'DCA', 'NRT',
                     SeatInventory(standard_available=departure_seats, preferred_available=4))],
        fares=dict(departure_fares),
    )
    return_ = DirectionRecord(
        flights=[Leg(return_flight, utc(2026, 6, 6, 17, 0), utc(2026, 6, 6, 20, 5), 'NRT', 'DCA',
                     SeatInventory(standard_available=return_seats, preferred_available=2))],
        fares=dict(return_fares if return_fares is not None else departure_fares),
    )
    return Snapshot(departure=departure, return_=return_)
