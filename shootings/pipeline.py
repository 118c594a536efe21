from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from .aggregate import OverlapReport, build_report_views, check_missing_unknown_overlap
from .config import DATA_FILE, DATA_URL
from .data_loader import project_columns, read_incident_csv
from .exceptions import InsufficientDataError
from .normalize import normalize_incidents
from .regression import TrendModel, actual_vs_predicted, fit_yearly_trend


logger = logging.getLogger(__name__)


@dataclass
class ReportArtifacts:
    """Everything the presenter is allowed to read."""

    views: Dict[str, pd.DataFrame]
    overlap: OverlapReport
    total_rows: int
    skipped_rows: int
    trend: Optional[TrendModel] = None
    predictions: Optional[pd.DataFrame] = None
    errors: List[str] = field(default_factory=list)


def _default_source() -> Union[str, Path]:
    if DATA_FILE.exists():
        return DATA_FILE
    logger.info("No cached extract at %s; reading from %s", DATA_FILE, DATA_URL)
    return DATA_URL


def build_artifacts(raw: pd.DataFrame) -> ReportArtifacts:
    """Project, normalize, aggregate and fit an already loaded raw frame."""
    projected = project_columns(raw)
    normalized = normalize_incidents(projected)
    incidents = normalized.incidents

    views = build_report_views(incidents)
    overlap = check_missing_unknown_overlap(incidents)

    artifacts = ReportArtifacts(
        views=views,
        overlap=overlap,
        total_rows=len(raw),
        skipped_rows=normalized.skipped_count,
    )

    try:
        trend = fit_yearly_trend(views["by_year"])
    except InsufficientDataError as exc:
        logger.error("Skipping yearly trend: %s", exc)
        artifacts.errors.append(str(exc))
    else:
        artifacts.trend = trend
        artifacts.predictions = actual_vs_predicted(trend)

    return artifacts


def run_pipeline(source: Optional[Union[str, Path]] = None) -> ReportArtifacts:
    """Run the whole report once. Fetch and format failures propagate."""
    raw = read_incident_csv(source if source is not None else _default_source())
    return build_artifacts(raw)
