"""Automation capability consumed by the extraction steps.

Extraction code talks to the page only through `AutomationSession`: elements are looked up by a
logical description (e.g. ``"segment.airport_code"``), never by selector. `PlaywrightSession`
maps those descriptions onto CSS selectors of the booking site.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Protocol

from playwright.sync_api import Locator, Page

Handle = Any


class AutomationSession(Protocol):
    def wait_for(self, description: str, scope: Handle | None = None) -> Handle: ...

    def locate(self, description: str, scope: Handle | None = None) -> Handle: ...

    def locate_all(self, description: str, scope: Handle | None = None) -> list[Handle]: ...

    def text(self, handle: Handle) -> str: ...

    def count(self, description: str, scope: Handle | None = None) -> int: ...

    def click(self, handle: Handle) -> None: ...

    def fill(self, handle: Handle, value: str) -> None: ...


@contextmanager
def open_dialog(session: AutomationSession, trigger: Handle, ready: str, close: str | None) -> Iterator[Handle]:
    """Click `trigger`, wait until `ready` is shown and always run the close path afterwards.

    Dialogs on the results page are mutually exclusive, so a failure while one is open must not
    leave it covering the next interaction.
    """
    session.click(trigger)
    dialog = session.wait_for(ready)
    try:
        yield dialog
    except BaseException:
        if close is not None:
            try:
                session.click(session.locate(close))
            except Exception:  # noqa: BLE001
                logging.warning("Could not close dialog %r after a failure", ready, exc_info=True)
        raise
    else:
        if close is not None:
            session.click(session.locate(close))


# Logical descriptions -> selectors for aircanada.com
AIRCANADA_LOCATORS: dict[str, str] = {
    'results.row': 'li.flight-block-list-item',
    'row.details_button': "button:has-text('Details')",
    'row.seats_button': ".links-container button:has-text('Seats')",
    'row.fares_button': '.cabin-fare-container button',
    'row.select_button': '.fare-family-container button.select-button',
    'details.dialog': '#flightDetailsDialogHeader',
    'details.close': 'button#flightDetailsDialogCloseButton',
    'details.segment': 'ol.segments-info > li',
    'segment.layover': '.layover',
    'segment.origin': '.origin',
    'segment.start_time': '.segment-time .start-time',
    'segment.end_time': '.segment-time .end-time',
    'segment.day_change': '.day-change',
    'segment.airport_code': '.airport-code',
    'segment.flight_number': '.airline-name > span',
    'seatmap.layout': '#flights-layout',
    'seatmap.close': '#seatPreviewDialogCloseButton',
    'seatmap.tab': "#flight-segment-tabs button:not([aria-hidden='true'])",
    'seatmap.container': '.preview-seatmap-container',
    'seat.standard_occupied': 'td.occupied',
    'seat.standard_available': 'td.cabinYSeat:not(.occupied)',
    'seat.preferred_occupied': 'td.occupiedPref',
    'seat.preferred_available': 'td.cabinYPref:not(.occupied)',
    'fares.panel': '.fare-family-container',
    'fares.close': '.fare-family-container button.close-button',
    'fares.option': '.fare-family-container .fare-family',
    'fare.family': '.fare-family-name',
    'fare.cabin': '.fare-cabin-name',
    'fare.price': '.fare-price',
}


class PlaywrightSession:
    """`AutomationSession` over a Playwright page."""

    def __init__(self, page: Page, locators: dict[str, str] | None = None, timeout: int = 30 * 1000):
        self.page = page
        self.locators = locators if locators is not None else AIRCANADA_LOCATORS
        self.timeout = timeout

    def _locator(self, description: str, scope: Locator | None) -> Locator:
        try:
            selector = self.locators[description]
        except KeyError:
            raise KeyError(f"No selector registered for {description!r}") from None
        return (scope or self.page).locator(selector)

    def wait_for(self, description: str, scope: Locator | None = None) -> Locator:
        locator = self._locator(description, scope).first
        locator.wait_for(state="visible", timeout=self.timeout)
        return locator

    def locate(self, description: str, scope: Locator | None = None) -> Locator:
        return self._locator(description, scope).first

    def locate_all(self, description: str, scope: Locator | None = None) -> list[Locator]:
        return self._locator(description, scope).all()

    def text(self, handle: Locator) -> str:
        return handle.inner_text().strip()

    def count(self, description: str, scope: Locator | None = None) -> int:
        return self._locator(description, scope).count()

    def click(self, handle: Locator) -> None:
        logging.debug(f'Clicking: {handle}')
        handle.click()

    def fill(self, handle: Locator, value: str) -> None:
        handle.fill(value)
