"""Round-trip capture on aircanada.com.

Fills the search form, then for each direction matches one result row and reads its segments,
seat maps and fares through the automation session. After the outbound row is read its fare is
selected, which brings up the return-flight listing.
"""
import logging
from datetime import date

from playwright.sync_api import Browser, Page

from ..extraction.builder import build_direction_record, build_snapshot
from ..extraction.fares import build_fare_quote, read_fare_options
from ..extraction.matcher import collect_rows, match_row
from ..extraction.seats import read_seat_inventories
from ..extraction.segments import extract_leg_pairs, read_raw_segments
from ..models import DIRECTIONS, Direction, DirectionRecord, SearchRequest, Snapshot
from .base_driver import BasePlaywrightDriver
from .session import AutomationSession, PlaywrightSession


def format_form_date(d: date) -> str:
    return d.strftime('%d/%m/%Y')


def capture_direction(session: AutomationSession, request: SearchRequest, direction: Direction,
                      select: bool = False) -> DirectionRecord:
    """Read one direction's matched row into a record. Raises RowNotFoundError / PairingError.

    With `select` the row's first fare is chosen afterwards, moving the page on to the next direction.
    """
    rows = collect_rows(session)
    row = match_row(rows, request.criteria, direction)
    raw_segments = read_raw_segments(session, row)
    pairs = extract_leg_pairs(raw_segments, request.reference_date(direction))
    inventories = read_seat_inventories(session, row)
    fares = build_fare_quote(read_fare_options(session, row))
    record = build_direction_record(pairs, inventories, fares)
    logging.info(f"{direction}: {len(record.flights)} legs, {len(record.fares)} fares")
    if select:
        session.click(session.locate('row.fares_button', row.handle))
        session.click(session.wait_for('row.select_button'))
    return record


def capture_round_trip(session: AutomationSession, request: SearchRequest) -> Snapshot:
    records: dict[Direction, DirectionRecord] = {}
    for direction in DIRECTIONS:
        records[direction] = capture_direction(session, request, direction, select=direction == "departure")
    return build_snapshot(records["departure"], records["return"])


class AirCanadaScraper(BasePlaywrightDriver):
    url = 'https://www.aircanada.com/home/us/en/aco/flights'

    def __init__(self, request: SearchRequest, headless: bool = False, timeout: int = 30 * 1000):
        super().__init__(headless=headless, timeout=timeout)
        self.request = request

    def fill_search_form(self, page: Page) -> None:
        request = self.request
        logging.info(f"Filling search form: {request.origin} -> {request.destination}, "
                     f"{request.departure_date} / {request.return_date}")
        page.get_by_text("Departing from").click()
        page.get_by_label("From").fill(request.origin)
        page.get_by_text("Arriving in").click()
        page.locator("input#flightsOriginDestination").fill(request.destination)
        page.get_by_label("Departure date").click()
        page.get_by_label("Departure date").fill(format_form_date(request.departure_date))
        page.get_by_label("Return date").click()
        page.get_by_label("Return date").fill(format_form_date(request.return_date))
        page.locator("button#bkmg-desktop_travelDates_1_confirmDates").click()
        page.locator("button#bkmg-desktop_findButton").click()
        logging.info('Search form submitted.')

    def run(self, browser: Browser, page: Page) -> Snapshot:
        logging.info(f'Navigating to: {self.url}')
        page.goto(self.url, wait_until='domcontentloaded')
        self.fill_search_form(page)
        session = PlaywrightSession(page, timeout=self.timeout)
        return capture_round_trip(session, self.request)
