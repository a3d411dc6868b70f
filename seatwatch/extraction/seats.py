import logging
from typing import Sequence

from ..models import ResultRow, SeatInventory
from ..scraping.session import AutomationSession, open_dialog


def read_tab_inventory(session: AutomationSession) -> SeatInventory:
    return SeatInventory(
        standard_available=session.count('seat.standard_available'),
        standard_occupied=session.count('seat.standard_occupied'),
        preferred_available=session.count('seat.preferred_available'),
        preferred_occupied=session.count('seat.preferred_occupied'),
    )


def read_seat_inventories(session: AutomationSession, row: ResultRow) -> list[SeatInventory]:
    """One inventory per visible seat-map tab, in tab order."""
    trigger = session.locate('row.seats_button', row.handle)
    inventories: list[SeatInventory] = []
    with open_dialog(session, trigger, 'seatmap.layout', 'seatmap.close'):
        tabs = session.locate_all('seatmap.tab')
        logging.info(f"Number of seat tabs found: {len(tabs)}")
        for tab_index, tab in enumerate(tabs):
            session.click(tab)
            session.wait_for('seatmap.container')
            inventory = read_tab_inventory(session)
            logging.info(f"Seat tab {tab_index + 1}: {inventory}")
            inventories.append(inventory)
    return inventories


def align_inventories(leg_count: int, inventories: Sequence[SeatInventory]) -> list[SeatInventory]:
    """Inventory for each leg: tab i for leg i, the last tab for legs beyond the tab count."""
    if not inventories:
        if leg_count:
            logging.warning(f"No seat tabs for {leg_count} legs; recording empty inventories")
        return [SeatInventory() for _ in range(leg_count)]
    if len(inventories) < leg_count:
        logging.info(f"{leg_count} legs but {len(inventories)} seat tabs; reusing the last tab")
    return [inventories[min(i, len(inventories) - 1)] for i in range(leg_count)]
