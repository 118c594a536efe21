from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd
import requests

from .config import DATA_FILE, REQUEST_HEADERS, REQUEST_TIMEOUT
from .exceptions import DatasetFetchError, DatasetFormatError


logger = logging.getLogger(__name__)

# Source column -> short label used through the rest of the pipeline.
RENAME_COLUMNS: Dict[str, str] = {
    "OCCUR_DATE": "date",
    "BORO": "borough",
    "STATISTICAL_MURDER_FLAG": "is_murder",
    "PERP_AGE_GROUP": "perp_age",
    "PERP_SEX": "perp_sex",
    "VIC_AGE_GROUP": "victim_age",
    "VIC_SEX": "victim_sex",
}

DROP_COLUMNS = (
    "INCIDENT_KEY",
    "OCCUR_TIME",
    "LOC_OF_OCCUR_DESC",
    "LOC_CLASSFCTN_DESC",
    "LOCATION_DESC",
    "JURISDICTION_CODE",
    "PRECINCT",
    "PERP_RACE",
    "VIC_RACE",
    "X_COORD_CD",
    "Y_COORD_CD",
    "Latitude",
    "Longitude",
    "Lon_Lat",
)

Source = Union[str, Path]


def _is_url(source: Source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def parse_incident_csv(buffer, origin: str) -> pd.DataFrame:
    try:
        df = pd.read_csv(buffer, dtype=str, keep_default_na=False, na_filter=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise DatasetFormatError(f"Could not parse incident CSV from {origin}: {exc}") from exc
    if df.empty:
        raise DatasetFormatError(f"Incident CSV from {origin} has no rows.")
    return df


def fetch_incident_text(url: str, timeout: float = REQUEST_TIMEOUT) -> str:
    """Download the raw CSV body. A single attempt; failures are fatal."""
    logger.info("Fetching incident data from %s", url)
    try:
        response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise DatasetFetchError(f"Failed to fetch {url}: {exc}") from exc
    return response.text


def read_incident_csv(source: Source, timeout: float = REQUEST_TIMEOUT) -> pd.DataFrame:
    """Read a local path or http(s) URL into a frame of text columns.

    Blank cells are kept as empty strings so the normalizer can tell them
    apart from explicit unknown codes.
    """
    if _is_url(source):
        text = fetch_incident_text(str(source), timeout=timeout)
        df = parse_incident_csv(StringIO(text), str(source))
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Incident data not found at {path}.")
        df = parse_incident_csv(path, str(path))

    logger.info("Loaded %d raw incident rows", len(df))
    return df


def load_incident_data(path: Optional[Path] = None) -> pd.DataFrame:
    """Load the cached incident extract written by scripts/fetch_data.py."""
    data_path = Path(path) if path is not None else DATA_FILE
    if not data_path.exists():
        raise FileNotFoundError(
            f"Incident data not found at {data_path}. Run scripts/fetch_data.py first."
        )
    return read_incident_csv(data_path)


def project_columns(raw: pd.DataFrame) -> pd.DataFrame:
    """Drop identifier, location, coordinate and race columns and shorten the rest."""
    missing_cols = set(RENAME_COLUMNS) - set(raw.columns)
    if missing_cols:
        raise DatasetFormatError(
            f"Incident data is missing expected columns: {sorted(missing_cols)}"
        )

    dropped = [col for col in DROP_COLUMNS if col in raw.columns]
    extra = set(raw.columns) - set(RENAME_COLUMNS) - set(DROP_COLUMNS)
    if extra:
        logger.debug("Ignoring unexpected columns: %s", sorted(extra))
    logger.debug("Dropping %d source columns", len(dropped))

    return raw[list(RENAME_COLUMNS)].rename(columns=RENAME_COLUMNS)
