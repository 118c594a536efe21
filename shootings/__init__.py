"""NYPD shooting incident report: loading, cleaning, aggregation and trend fitting."""

from .aggregate import build_report_views, count_by, count_with_ratio  # noqa: F401
from .data_loader import load_incident_data, project_columns, read_incident_csv  # noqa: F401
from .normalize import FieldStatus, normalize_incidents  # noqa: F401
from .pipeline import ReportArtifacts, run_pipeline  # noqa: F401
from .regression import fit_yearly_trend, predict  # noqa: F401
