from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Sequence, Union

import numpy as np
import pandas as pd

from .config import OVERLAP_WARN_RATE
from .normalize import CATEGORICAL_FIELDS, DEMOGRAPHIC_FIELDS, FieldStatus, field_status_frame


logger = logging.getLogger(__name__)

Keys = Union[str, Sequence[str]]


def _as_list(keys: Keys) -> list[str]:
    if isinstance(keys, str):
        return [keys]
    return list(keys)


def count_by(incidents: pd.DataFrame, keys: Keys) -> pd.DataFrame:
    """Count incidents per distinct key combination.

    Missing key values form their own group so counts always sum to the
    number of input rows. Rows come back ordered by the keys, missing last.
    """
    key_list = _as_list(keys)
    if not key_list:
        raise ValueError("At least one grouping key is required.")
    absent = [key for key in key_list if key not in incidents.columns]
    if absent:
        raise ValueError(f"Unknown grouping keys: {absent}")

    counts = (
        incidents.groupby(key_list, dropna=False, sort=False)
        .size()
        .rename("count")
        .reset_index()
    )
    return counts.sort_values(key_list, na_position="last", kind="mergesort").reset_index(
        drop=True
    )


def add_ratio(counts: pd.DataFrame, within: Keys) -> pd.DataFrame:
    """
    Attach each row's share of its outer group.

    First pass totals ``count`` per ``within`` group, second pass divides each
    row by that total. Ratios are whole percentages, so a group can add up to
    99 or 101.
    """
    outer = _as_list(within)
    totals = (
        counts.groupby(outer, dropna=False, sort=False)["count"]
        .sum()
        .rename("group_total")
        .reset_index()
    )
    merged = counts.merge(totals, on=outer, how="left", sort=False)
    merged["ratio"] = np.rint(100 * merged["count"] / merged["group_total"]).astype(int)
    merged["ratio_label"] = merged["ratio"].map("{}%".format)
    return merged


def count_with_ratio(incidents: pd.DataFrame, within: Keys, by: Keys) -> pd.DataFrame:
    keys = _as_list(within) + [key for key in _as_list(by) if key not in _as_list(within)]
    return add_ratio(count_by(incidents, keys), within)


def build_report_views(incidents: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """Return the tables the report charts are drawn from."""
    if incidents.empty:
        raise ValueError("Incident dataframe is empty.")

    return {
        "by_year": count_by(incidents, "year"),
        "by_year_murder": count_with_ratio(incidents, "year", "is_murder"),
        "by_month_murder": count_with_ratio(incidents, "month", "is_murder"),
        "by_year_perp_sex": count_with_ratio(incidents, "year", "perp_sex"),
        "by_year_victim_sex": count_with_ratio(incidents, "year", "victim_sex"),
        "by_year_borough": count_with_ratio(incidents, "year", "borough"),
        "by_season": count_by(incidents, "season"),
        "by_borough": count_by(incidents, "borough"),
    }


def presence_flags(incidents: pd.DataFrame) -> pd.DataFrame:
    """Per-row ``na_present`` (a demographic field is blank) and ``unknown_present`` flags."""
    statuses = field_status_frame(incidents)
    demographic = [field for field in DEMOGRAPHIC_FIELDS if field in statuses.columns]
    categorical = [field for field in CATEGORICAL_FIELDS if field in statuses.columns]
    return pd.DataFrame(
        {
            "na_present": statuses[demographic].eq(FieldStatus.MISSING).any(axis=1),
            "unknown_present": statuses[categorical].eq(FieldStatus.UNKNOWN).any(axis=1),
        },
        index=incidents.index,
    )


def missing_unknown_crosstab(incidents: pd.DataFrame) -> pd.DataFrame:
    flags = presence_flags(incidents)
    table = pd.crosstab(flags["na_present"], flags["unknown_present"])
    return table.reindex(index=[False, True], columns=[False, True], fill_value=0)


@dataclass(frozen=True)
class OverlapReport:
    crosstab: pd.DataFrame
    rate: float
    threshold: float

    @property
    def flagged(self) -> bool:
        return self.rate > self.threshold


def check_missing_unknown_overlap(
    incidents: pd.DataFrame, threshold: float = OVERLAP_WARN_RATE
) -> OverlapReport:
    """Share of rows that have both a blank demographic field and an unknown code.

    A high share hints that blanks and unknown codes were entered
    interchangeably. The result is only logged, never raised.
    """
    table = missing_unknown_crosstab(incidents)
    total = int(table.to_numpy().sum())
    both = int(table.loc[True, True])
    rate = both / total if total else 0.0

    report = OverlapReport(crosstab=table, rate=rate, threshold=threshold)
    if report.flagged:
        logger.warning(
            "Missing and unknown codes co-occur in %.1f%% of rows (threshold %.1f%%)",
            rate * 100,
            threshold * 100,
        )
    else:
        logger.info("Missing/unknown co-occurrence rate: %.2f%%", rate * 100)
    return report
