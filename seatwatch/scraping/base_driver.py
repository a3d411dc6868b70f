import logging

from playwright.sync_api import Browser, Page, Playwright, sync_playwright


class BasePlaywrightDriver:
    """Chromium driver; subclasses implement `run` against an opened page."""

    url: str = "about:blank"

    def __init__(self, headless: bool = False, timeout: int = 30 * 1000):
        self.headless = headless
        self.timeout = timeout

    def _get_browser_args(self) -> list[str]:
        return [
            "--no-sandbox",
            "--window-size=1280,900",
            "--disable-dev-shm-usage",
        ]

    def get_page(self, playwright: Playwright) -> tuple[Browser, Page]:
        """Create and return a (browser, page) tuple."""
        browser = playwright.chromium.launch(headless=self.headless, args=self._get_browser_args())
        context = browser.new_context(
            locale="en-US",
            timezone_id="UTC",
            viewport={"width": 1280, "height": 900},
        )
        # Skip loading images to speed up scraping
        context.route("**/*.{png,jpg,jpeg,webp,gif}", lambda route: route.abort())
        page = context.new_page()
        page.set_default_timeout(self.timeout)
        logging.debug("Browser page created.")
        return browser, page

    def run(self, browser: Browser, page: Page):
        """Override in subclasses. Called inside a sync_playwright context."""
        raise NotImplementedError

    def execute(self):
        """Entry point: opens playwright, calls run(), closes browser."""
        with sync_playwright() as p:
            browser, page = self.get_page(p)
            try:
                return self.run(browser, page)
            finally:
                browser.close()
