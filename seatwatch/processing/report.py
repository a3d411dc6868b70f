from datetime import datetime
from pathlib import Path

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .aggregator import AggregatedSeries

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / 'templates'


def _format_price(value: float | None) -> str:
    if value is None:
        return '–'
    return f"${value:,.0f}" if float(value).is_integer() else f"${value:,.2f}"


def _format_change(change: float | int) -> str:
    if not change:
        return ''
    symbol = '↑' if change > 0 else '↓'
    amount = abs(change)
    return f"{symbol} {amount:g} from previous"


def _stat_value(label: str, value) -> str:
    return str(value) if 'Seats' in label else _format_price(value)


def render_dashboard(series: AggregatedSeries) -> str:
    """HTML page with the fare table, per-flight seat tables and headline stats."""
    fare_rows = [
        {
            'timestamp': point.timestamp.strftime('%Y-%m-%d %H:%M'),
            'departure': _format_price(dep),
            'return': _format_price(ret),
        }
        for point, (_, dep), (_, ret) in zip(series.points, series.departure_fares, series.return_fares)
    ]
    flights = []
    for flight in series.flights:
        flights.append({
            'flight_number': flight.flight_number,
            'route': flight.route,
            'rows': [
                {
                    'timestamp': point.timestamp.strftime('%Y-%m-%d %H:%M'),
                    'standard': '–' if standard is None else standard,
                    'preferred': '–' if preferred is None else preferred,
                }
                for point, standard, preferred in zip(series.points, flight.standard_seats, flight.preferred_seats)
            ],
        })
    stats = [
        {'label': s.label, 'value': _stat_value(s.label, s.value), 'change': _format_change(s.change)}
        for s in series.stats
    ]
    env = Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)), autoescape=select_autoescape(['html', 'xml']))
    tpl = env.get_template('dashboard.html.j2')
    rendered = tpl.render(
        fare_classes=series.fare_classes,
        selected_fare_class=series.selected_fare_class,
        fare_rows=fare_rows,
        flights=flights,
        stats=stats,
        last_updated=series.latest.date.isoformat(),
        generated_at=datetime.now().strftime("%d.%m.%Y %H:%M"),
    )
    soup = BeautifulSoup(rendered, 'lxml')
    return soup.prettify()
