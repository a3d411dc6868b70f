"""Tests for seat map reading and leg alignment."""
import pytest

from conftest import FakeSession, result_row, seat_tab
from seatwatch.extraction.seats import align_inventories, read_seat_inventories
from seatwatch.models import ResultRow, SeatInventory

TAB_A = SeatInventory(standard_available=40, standard_occupied=100, preferred_available=6, preferred_occupied=12)
TAB_B = SeatInventory(standard_available=12, standard_occupied=60, preferred_available=1, preferred_occupied=5)


class TestAlignInventories:
    def test_three_legs_two_tabs_reuses_last_tab(self):
        assert align_inventories(3, [TAB_A, TAB_B]) == [TAB_A, TAB_B, TAB_B]

    def test_one_to_one(self):
        assert align_inventories(2, [TAB_A, TAB_B]) == [TAB_A, TAB_B]

    def test_extra_tabs_are_ignored(self):
        assert align_inventories(1, [TAB_A, TAB_B]) == [TAB_A]

    def test_no_tabs_gives_empty_inventories(self):
        assert align_inventories(2, []) == [SeatInventory(), SeatInventory()]

    def test_no_legs(self):
        assert align_inventories(0, [TAB_A]) == []


class TestReadSeatInventories:
    def test_each_tab_is_activated_and_counted(self):
        row_element = result_row('AC 1', tabs=[seat_tab(TAB_A), seat_tab(TAB_B)])
        session = FakeSession()
        inventories = read_seat_inventories(session, ResultRow(row_element, 0, row_element.text))

        assert inventories == [TAB_A, TAB_B]
        assert session.waited.count('seatmap.container') == 2
        assert session.clicked[-1].name == 'seatmap close'

    def test_dialog_is_closed_when_reading_fails(self):
        broken_tab = seat_tab(TAB_A)
        broken_tab.on_click = None  # seat map never appears
        row_element = result_row('AC 1', tabs=[broken_tab])
        session = FakeSession()

        with pytest.raises(LookupError):
            read_seat_inventories(session, ResultRow(row_element, 0, row_element.text))
        assert session.clicked[-1].name == 'seatmap close'
