from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from .config import MIN_TREND_YEARS
from .exceptions import InsufficientDataError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendModel:
    """Ordinary least squares fit of yearly incident count on year."""

    slope: float
    intercept: float
    r_squared: float
    p_value: float
    stderr: float
    years: Tuple[int, ...]
    counts: Tuple[int, ...]

    @property
    def n_years(self) -> int:
        return len(self.years)

    def summary(self) -> Dict[str, float]:
        return {
            "slope": self.slope,
            "intercept": self.intercept,
            "r_squared": self.r_squared,
            "p_value": self.p_value,
            "stderr": self.stderr,
            "n_years": self.n_years,
        }


def fit_yearly_trend(yearly: pd.DataFrame) -> TrendModel:
    """
    Fit ``count ~ year`` on per-year incident counts.

    The slope p-value is the two-sided t-test against the residual standard
    error with n - 2 degrees of freedom.

    Raises:
        InsufficientDataError: fewer than three distinct years.
        ValueError: a year appears more than once, or a count is not a whole number.
    """
    if not {"year", "count"}.issubset(yearly.columns):
        raise ValueError("Yearly counts must include 'year' and 'count' columns.")

    data = yearly[["year", "count"]].dropna().sort_values("year")
    if data["year"].duplicated().any():
        raise ValueError("Yearly counts must have one row per year.")
    if data["year"].nunique() < MIN_TREND_YEARS:
        raise InsufficientDataError(
            f"Need at least {MIN_TREND_YEARS} distinct years to fit a trend, "
            f"got {data['year'].nunique()}."
        )

    x = data["year"].to_numpy(dtype=float)
    y = data["count"].to_numpy(dtype=float)
    if not np.array_equal(y, np.round(y)):
        raise ValueError("Yearly counts must be whole numbers.")
    result = stats.linregress(x, y)

    model = TrendModel(
        slope=float(result.slope),
        intercept=float(result.intercept),
        r_squared=float(result.rvalue ** 2),
        p_value=float(result.pvalue),
        stderr=float(result.stderr),
        years=tuple(int(year) for year in data["year"]),
        counts=tuple(int(count) for count in data["count"]),
    )
    logger.info(
        "Fitted yearly trend over %d years: slope=%.2f, R^2=%.3f, p=%.4f",
        model.n_years,
        model.slope,
        model.r_squared,
        model.p_value,
    )
    return model


def predict(model: TrendModel, years: Optional[Iterable[int]] = None) -> np.ndarray:
    """Predicted counts at ``years`` (the fitted years when omitted)."""
    target = np.asarray(list(model.years if years is None else years), dtype=float)
    return model.intercept + model.slope * target


def actual_vs_predicted(model: TrendModel) -> pd.DataFrame:
    frame = pd.DataFrame({"year": list(model.years), "actual": list(model.counts)})
    frame["predicted"] = predict(model)
    frame["residual"] = frame["actual"] - frame["predicted"]
    return frame
