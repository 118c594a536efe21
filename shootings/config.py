from __future__ import annotations

from os import getenv
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = REPO_ROOT / "data"

DATA_URL = getenv(
    "SHOOTINGS_DATA_URL",
    "https://data.cityofnewyork.us/api/views/833y-fsy8/rows.csv?accessType=DOWNLOAD",
)
DATA_FILE = Path(getenv("SHOOTINGS_DATA_FILE", str(DATA_DIR / "nypd_shooting_incidents.csv")))

REQUEST_TIMEOUT = float(getenv("SHOOTINGS_REQUEST_TIMEOUT", "60"))
REQUEST_HEADERS = {
    "User-Agent": "nypd-shooting-report/0.1",
}
SOC_APP_TOKEN = getenv("NYC_OPEN_DATA_APP_TOKEN") or getenv("SOCRATA_APP_TOKEN")
if SOC_APP_TOKEN:
    REQUEST_HEADERS["X-App-Token"] = SOC_APP_TOKEN

# Share of rows allowed to carry both a missing and an unknown field before
# the overlap check warns. The reference extract sits near 1%.
OVERLAP_WARN_RATE = float(getenv("SHOOTINGS_OVERLAP_WARN_RATE", "0.05"))

LOG_LEVEL = getenv("SHOOTINGS_LOG_LEVEL", "INFO")
LOG_FILE = getenv("SHOOTINGS_LOG_FILE")

MIN_TREND_YEARS = 3
