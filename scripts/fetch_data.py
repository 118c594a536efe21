import sys
from io import StringIO

from shootings.config import DATA_FILE, DATA_URL
from shootings.data_loader import fetch_incident_text, parse_incident_csv
from shootings.exceptions import ShootingReportError


def main() -> int:
    print(f"Fetching NYPD shooting incidents from {DATA_URL}...")
    try:
        text = fetch_incident_text(DATA_URL)
        rows = len(parse_incident_csv(StringIO(text), DATA_URL))
    except ShootingReportError as exc:
        print(f"Fetch failed: {exc}")
        return 1

    DATA_FILE.parent.mkdir(parents=True, exist_ok=True)
    DATA_FILE.write_text(text, encoding="utf-8")
    print(f"Wrote {rows} incidents to {DATA_FILE}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
