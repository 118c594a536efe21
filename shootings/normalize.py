from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Tuple

import pandas as pd

from .exceptions import DataProcessingError


logger = logging.getLogger(__name__)

DATE_FORMAT = "%m/%d/%Y"

CATEGORICAL_FIELDS: Tuple[str, ...] = (
    "borough",
    "perp_age",
    "perp_sex",
    "victim_age",
    "victim_sex",
)
DEMOGRAPHIC_FIELDS: Tuple[str, ...] = ("perp_age", "perp_sex", "victim_age", "victim_sex")

UNKNOWN_TOKENS = frozenset({"U", "UNKNOWN"})

# Meteorological seasons. The label table keeps the legacy "autumm" spelling
# of older season-labelled outputs; SEASON_LABEL_FIXES corrects it after labeling.
MONTH_SEASON_LABELS: Dict[int, str] = {
    12: "winter", 1: "winter", 2: "winter",
    3: "spring", 4: "spring", 5: "spring",
    6: "summer", 7: "summer", 8: "summer",
    9: "autumm", 10: "autumm", 11: "autumm",
}
SEASON_LABEL_FIXES: Dict[str, str] = {"autumm": "fall"}
SEASONS: Tuple[str, ...] = ("winter", "spring", "summer", "fall")

MURDER_FLAG_VALUES: Dict[str, bool] = {
    "true": True,
    "false": False,
    "y": True,
    "n": False,
    "1": True,
    "0": False,
}


class FieldStatus(enum.Enum):
    PRESENT = "present"
    MISSING = "missing"
    UNKNOWN = "unknown"


def classify_value(value: object) -> FieldStatus:
    """Tag a single categorical value as present, missing (blank) or unknown (U/UNKNOWN)."""
    if value is None or value is pd.NA:
        return FieldStatus.MISSING
    if isinstance(value, float) and pd.isna(value):
        return FieldStatus.MISSING
    text = str(value).strip()
    if not text:
        return FieldStatus.MISSING
    if text.upper() in UNKNOWN_TOKENS:
        return FieldStatus.UNKNOWN
    return FieldStatus.PRESENT


def fix_season_labels(labels: pd.Series) -> pd.Series:
    return labels.replace(SEASON_LABEL_FIXES)


def month_to_season(month: int) -> str:
    if month not in MONTH_SEASON_LABELS:
        raise ValueError(f"Month must be in 1..12, got {month!r}")
    label = MONTH_SEASON_LABELS[month]
    return SEASON_LABEL_FIXES.get(label, label)


def seasons_for_dates(dates: pd.Series) -> pd.Series:
    raw_labels = dates.dt.month.map(MONTH_SEASON_LABELS)
    return fix_season_labels(raw_labels)


def parse_murder_flag(values: pd.Series) -> pd.Series:
    """Parse the murder flag into a nullable boolean; blank cells become missing."""
    stripped = values.astype(str).str.strip()
    blank = stripped == ""
    parsed = stripped.str.lower().map(MURDER_FLAG_VALUES)
    bad = parsed.isna() & ~blank
    if bad.any():
        samples = sorted(set(values[bad].astype(str)))[:5]
        raise DataProcessingError(
            f"Unrecognized murder flag values in {int(bad.sum())} rows: {samples}"
        )
    if blank.any():
        logger.info("%d rows have a blank murder flag", int(blank.sum()))
    return parsed.astype("boolean")


def blank_to_missing(values: pd.Series) -> pd.Series:
    """Replace blank strings with pd.NA; U/UNKNOWN codes pass through untouched."""
    stripped = values.astype(str).str.strip()
    return stripped.mask(stripped == "", pd.NA).astype(object)


@dataclass(frozen=True)
class NormalizationResult:
    incidents: pd.DataFrame
    rejected: pd.DataFrame

    @property
    def skipped_count(self) -> int:
        return len(self.rejected)


def normalize_incidents(projected: pd.DataFrame) -> NormalizationResult:
    """
    Type the projected incident rows.

    Rows whose date does not parse as M/D/Y are moved to ``rejected`` and
    counted in the log; they never reach the aggregations.
    """
    if "date" not in projected.columns:
        raise ValueError("Projected frame must include a 'date' column.")

    parsed_dates = pd.to_datetime(
        projected["date"].astype(str).str.strip(), format=DATE_FORMAT, errors="coerce"
    )
    valid = parsed_dates.notna()

    rejected = projected.loc[~valid].copy()
    if not rejected.empty:
        logger.warning(
            "Skipped %d of %d rows with unparseable occurrence dates",
            len(rejected),
            len(projected),
        )

    df = projected.loc[valid].copy()
    df["date"] = parsed_dates[valid]
    df["year"] = df["date"].dt.year.astype(int)
    df["month"] = df["date"].dt.month.astype(int)
    df["season"] = seasons_for_dates(df["date"])

    if "is_murder" in df.columns:
        df["is_murder"] = parse_murder_flag(df["is_murder"])

    for field in CATEGORICAL_FIELDS:
        if field in df.columns:
            df[field] = blank_to_missing(df[field])

    df = df.reset_index(drop=True)
    logger.info("Normalized %d incident rows", len(df))
    return NormalizationResult(incidents=df, rejected=rejected)


def field_status_frame(incidents: pd.DataFrame) -> pd.DataFrame:
    fields = [field for field in CATEGORICAL_FIELDS if field in incidents.columns]
    return incidents[fields].apply(lambda col: col.map(classify_value))
