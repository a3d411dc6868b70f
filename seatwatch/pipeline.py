"""High-level orchestration: capture a snapshot, persist it, aggregate all snapshots, report.

Usage patterns:

1. Capture today's snapshot then refresh the report:
   run_pipeline(request, scrape=True)

2. Only rebuild the report from stored snapshots (default):
   run_pipeline(request)
"""
import argparse
import logging
import threading
from datetime import date
from pathlib import Path
from typing import Callable, Sequence

import schedule

from seatwatch.config import settings
from seatwatch.emailer import send_report
from seatwatch.logging_config import setup_logging
from seatwatch.models import MatchCriteria, SearchRequest, Snapshot
from seatwatch.processing.aggregator import aggregate
from seatwatch.processing.report import render_dashboard
from seatwatch.scraping.aircanada import AirCanadaScraper
from seatwatch.storage import SnapshotStore


def capture_snapshot(request: SearchRequest) -> Snapshot:
    logging.info(f"Capturing {request.origin} <-> {request.destination} via Playwright")
    scraper = AirCanadaScraper(request, headless=settings.headless, timeout=settings.browser_timeout_ms)
    return scraper.execute()


def build_report(store: SnapshotStore, fare_class: str | None = None) -> str:
    series = aggregate(store.list_all(), fare_class=fare_class, default_fare_class=settings.default_fare_class)
    return render_dashboard(series)


def run_pipeline(
        request: SearchRequest,
        scrape: bool = False,
        intraday: bool = False,
        fare_class: str | None = None,
        email: bool = False,
        store: SnapshotStore | None = None,
        output_html: Path | None = None,
        capture: Callable[[SearchRequest], Snapshot] = capture_snapshot,
) -> Path:
    """Optionally capture and persist a snapshot, then write the dashboard over every stored snapshot.

    Any failure during capture aborts the run before anything is written.
    """
    store = store or SnapshotStore(settings.snapshot_dir)
    if scrape:
        snapshot = capture(request)
        store.put(snapshot, snapshot.captured_at, intraday=intraday)

    output_html = output_html or settings.output_html
    html = build_report(store, fare_class)
    output_html.write_text(html, encoding="utf-8")
    logging.info(f"Output written to {output_html}")

    if email:
        send_report(request, html, output_html)
    return output_html


def run_scheduled(scheduler: schedule.Scheduler, stop: threading.Event, poll_seconds: float = 1.0) -> None:
    """Run every job once, then keep running pending jobs until `stop` is set.

    `stop` is the cancellation token; it is checked between polls, never in the middle of a job.
    """
    def _tick(run: Callable[[], None]) -> None:
        try:
            run()
        except Exception:  # noqa: BLE001
            logging.exception("Scheduler error:")

    _tick(scheduler.run_all)
    while not stop.is_set():
        _tick(scheduler.run_pending)
        stop.wait(poll_seconds)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Seat Watch: flight fare and seat tracker")
    p.add_argument("--origin", default=settings.origin)
    p.add_argument("--destination", default=settings.destination)
    p.add_argument("--departure-date", type=date.fromisoformat, default=settings.departure_date,
                   help="YYYY-MM-DD")
    p.add_argument("--return-date", type=date.fromisoformat, default=settings.return_date, help="YYYY-MM-DD")
    p.add_argument("--adults", type=int, default=settings.adults)
    # Row matching hints
    p.add_argument("--outbound-start", default=settings.outbound_start, help="e.g. 10:30")
    p.add_argument("--outbound-end", default=settings.outbound_end)
    p.add_argument("--inbound-start", default=settings.inbound_start)
    p.add_argument("--inbound-end", default=settings.inbound_end)
    # Run
    p.add_argument("--scrape", action="store_true", help="Capture a fresh snapshot before reporting")
    p.add_argument("--intraday", action="store_true", help="Key the snapshot by date and time instead of date")
    p.add_argument("--fare-class", default=None, help="Fare class to chart, e.g. 'ECONOMY (Basic)'")
    # Misc
    p.add_argument("--email", action="store_true", help="Send email if credentials configured")
    p.add_argument("--log-level", default="INFO")
    p.add_argument(
        "--schedule-at",
        metavar="HH:MM",
        default=None,
        help="Run the pipeline every day at the given time (e.g. 15:30). "
             "Without this flag the pipeline runs once and exits.",
    )
    p.add_argument("--every-seconds", type=int, default=None,
                   help="Rebuild the report every N seconds (combine with --schedule-at for daily captures)")
    return p


def request_from_args(args: argparse.Namespace) -> SearchRequest:
    criteria = MatchCriteria(args.outbound_start, args.outbound_end, args.inbound_start, args.inbound_end)
    return SearchRequest(
        origin=args.origin,
        destination=args.destination,
        departure_date=args.departure_date,
        return_date=args.return_date,
        adults=args.adults,
        criteria=None if criteria.is_empty() else criteria,
    )


def main_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    request = request_from_args(args)
    store = SnapshotStore(settings.snapshot_dir)

    def _run(scrape: bool) -> None:
        try:
            run_pipeline(request, scrape=scrape, intraday=args.intraday, fare_class=args.fare_class,
                         email=args.email, store=store)
        except Exception:  # noqa: BLE001
            logging.exception("Pipeline failed")

    if args.schedule_at or args.every_seconds:
        stop = threading.Event()
        scheduler = schedule.Scheduler()
        if args.schedule_at:
            logging.info(f"Scheduler started – pipeline will run every day at {args.schedule_at}")
            scheduler.every().day.at(args.schedule_at).do(_run, args.scrape)
        if args.every_seconds:
            logging.info(f"Report refresh every {args.every_seconds}s")
            scheduler.every(args.every_seconds).seconds.do(_run, False)
        try:
            run_scheduled(scheduler, stop)
        except KeyboardInterrupt:
            stop.set()
        return 0

    try:
        run_pipeline(request, scrape=args.scrape, intraday=args.intraday, fare_class=args.fare_class,
                     email=args.email, store=store)
    except Exception:  # noqa: BLE001
        logging.exception("Pipeline failed")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main_cli())
