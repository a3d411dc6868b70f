"""Tests for the persisted snapshot format."""
import json

import dacite
import pytest

from conftest import make_snapshot, utc
from seatwatch.errors import ParseError
from seatwatch.models import (
    DirectionRecord,
    Leg,
    MatchCriteria,
    SeatInventory,
    direction_from_dict,
    direction_to_dict,
    parse_instant,
    snapshot_from_dict,
    snapshot_to_dict,
)

RECORD = DirectionRecord(
    flights=[
        Leg('AC 8709', utc(2026, 5, 24, 10, 30), utc(2026, 5, 24, 11, 58), 'DCA', 'YYZ',
            SeatInventory(40, 100, 6, 12)),
        Leg('AC 1', utc(2026, 5, 24, 13, 10), utc(2026, 5, 25, 14, 55), 'YYZ', 'NRT',
            SeatInventory(12, 250, 1, 20)),
    ],
    fares={'ECONOMY (Basic)': 210.0, 'ECONOMY (Standard)': 265.5},
)


class TestPersistedFormat:
    def test_leg_keys(self):
        leg = direction_to_dict(RECORD)['flights'][1]
        assert leg == {
            'flightNumber': 'AC 1',
            'departureTime': '2026-05-24T13:10:00+00:00',
            'arrivalTime': '2026-05-25T14:55:00+00:00',
            'departureAirport': 'YYZ',
            'arrivalAirport': 'NRT',
            'duration': '25h 45m',
            'seatDetails': {
                'standardSeatsAvailable': 12,
                'standardSeatsOccupied': 250,
                'preferedSeatsAvailable': 1,
                'preferedSeatsOccupied': 20,
            },
        }

    def test_direction_survives_json(self):
        reloaded = direction_from_dict(json.loads(json.dumps(direction_to_dict(RECORD))))
        assert reloaded == RECORD
        assert list(reloaded.fares) == list(RECORD.fares)

    def test_snapshot_uses_return_key(self):
        data = snapshot_to_dict(make_snapshot({'ECONOMY (Basic)': 210}))
        assert set(data) == {'departure', 'return'}
        assert snapshot_from_dict(data).return_.flights[0].flight_number == 'AC2'

    def test_integer_prices_and_z_suffix_are_accepted(self):
        data = {
            'flights': [{
                'flightNumber': 'AC 1',
                'departureTime': '2026-05-24T13:10:00.000Z',
                'arrivalTime': '2026-05-25T14:55:00.000Z',
                'departureAirport': 'YYZ',
                'arrivalAirport': 'NRT',
                'duration': '25h 45m',
                'seatDetails': {'standardSeatsAvailable': 12, 'standardSeatsOccupied': 250,
                                'preferedSeatsAvailable': 1, 'preferedSeatsOccupied': 20},
            }],
            'fares': {'ECONOMY (Basic)': 210},
        }
        record = direction_from_dict(data)
        assert record.flights[0].departure_time == utc(2026, 5, 24, 13, 10)
        assert record.fares == {'ECONOMY (Basic)': 210.0}

    def test_missing_field_raises(self):
        data = direction_to_dict(RECORD)
        del data['flights'][0]['arrivalAirport']
        with pytest.raises(dacite.DaciteError):
            direction_from_dict(data)

    @pytest.mark.parametrize('mutate', [
        lambda d: d.update(flights=[1]),
        lambda d: d.update(flights={'a': 1}),
        lambda d: d['flights'][0].update(seatDetails=[1]),
    ], ids=['leg-not-object', 'flights-not-list', 'seats-not-object'])
    def test_wrong_container_raises_parse_error(self, mutate):
        data = direction_to_dict(RECORD)
        mutate(data)
        with pytest.raises(ParseError):
            direction_from_dict(data)


class TestParseInstant:
    def test_naive_is_utc(self):
        assert parse_instant('2026-01-27T00:00:00') == utc(2026, 1, 27)

    def test_garbage_raises(self):
        with pytest.raises(ParseError):
            parse_instant('yesterday')


class TestDerivedValues:
    def test_lowest_fare(self):
        assert RECORD.lowest_fare == 210.0
        assert DirectionRecord(flights=[], fares={}).lowest_fare is None

    def test_route(self):
        assert RECORD.flights[0].route == 'DCA → YYZ'

    def test_match_criteria_hints(self):
        criteria = MatchCriteria(outbound_start='10:30', inbound_end='20:05')
        assert criteria.hints_for('departure') == ('10:30', None)
        assert criteria.hints_for('return') == (None, '20:05')
        assert not criteria.is_empty()
