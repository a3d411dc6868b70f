"""Tests for displayed clock time parsing."""
from datetime import date

import pytest

from conftest import utc
from seatwatch.errors import ParseError
from seatwatch.extraction.timeparse import parse_clock, parse_day_offset, parse_segment_time


class TestParseSegmentTime:
    def test_same_day(self):
        assert parse_segment_time('10:30', date(2026, 5, 24)) == utc(2026, 5, 24, 10, 30)

    def test_day_change_marker_advances_date(self):
        result = parse_segment_time('14:55', date(2026, 5, 24), ['+1 day'])
        assert result == utc(2026, 5, 25, 14, 55)

    def test_multi_day_marker(self):
        result = parse_segment_time('06:05', date(2026, 12, 31), [' +2 days '])
        assert result == utc(2027, 1, 2, 6, 5)

    def test_marker_without_number_is_ignored(self):
        assert parse_segment_time('23:59', date(2026, 5, 24), ['Next day']) == utc(2026, 5, 24, 23, 59)

    def test_result_is_utc(self):
        assert parse_segment_time('00:00', date(2026, 1, 1)).utcoffset().total_seconds() == 0


class TestParseClock:
    @pytest.mark.parametrize('clock', ['', '1030', '10:30:00', 'ab:cd', '24:00', '10:60', '-1:10',
                                       '-0:30', '+10:30', ' 10 : 30', '１０:30', '100:30'])
    def test_invalid_clock_raises(self, clock):
        with pytest.raises(ParseError):
            parse_clock(clock)

    def test_surrounding_whitespace_is_tolerated(self):
        assert parse_clock(' 7:05 \n').hour == 7


class TestParseDayOffset:
    def test_no_annotations(self):
        assert parse_day_offset([]) == 0

    def test_first_matching_annotation_wins(self):
        assert parse_day_offset(['', '+1 day', '+2 days']) == 1
