"""Configuration utilities.

Central place to load environment driven settings (search defaults, match hints, storage paths,
browser and email options). Avoids scattering os.getenv calls around the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env once on module import
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class Settings:
    snapshot_dir: Path = Path(os.getenv("SNAPSHOT_DIR", "output"))
    output_html: Path = Path(os.getenv("OUTPUT_HTML", "seatwatch.html"))
    origin: str = os.getenv("SEARCH_ORIGIN", "DCA")
    destination: str = os.getenv("SEARCH_DESTINATION", "NRT")
    departure_date: str = os.getenv("SEARCH_DEPARTURE_DATE", "2026-05-24")
    return_date: str = os.getenv("SEARCH_RETURN_DATE", "2026-06-06")
    adults: int = int(os.getenv("SEARCH_ADULTS", "1"))
    outbound_start: str | None = os.getenv("OUTBOUND_START")
    outbound_end: str | None = os.getenv("OUTBOUND_END")
    inbound_start: str | None = os.getenv("INBOUND_START")
    inbound_end: str | None = os.getenv("INBOUND_END")
    default_fare_class: str = os.getenv("DEFAULT_FARE_CLASS", "ECONOMY (Basic)")
    headless: bool = _env_flag("HEADLESS")
    browser_timeout_ms: int = int(os.getenv("BROWSER_TIMEOUT_MS", "30000"))
    src_mail: str | None = os.getenv("SRC_MAIL")
    src_pwd: str | None = os.getenv("SRC_PWD")
    dst_mail: str | None = os.getenv("DST_MAIL")

    def email_configured(self) -> bool:
        return all([self.src_mail, self.src_pwd, self.dst_mail])


settings = Settings()
