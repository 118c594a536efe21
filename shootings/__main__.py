import sys

from .exceptions import ShootingReportError
from .logger_config import setup_logger
from .pipeline import run_pipeline


def main() -> int:
    logger = setup_logger()
    try:
        artifacts = run_pipeline()
    except (ShootingReportError, FileNotFoundError) as exc:
        logger.error("Report run failed: %s", exc)
        return 1

    logger.info(
        "Processed %d rows (%d skipped for bad dates)",
        artifacts.total_rows,
        artifacts.skipped_rows,
    )
    by_year = artifacts.views["by_year"]
    for year, count in zip(by_year["year"], by_year["count"]):
        logger.info("  %s: %d incidents", year, count)
    if artifacts.trend is not None:
        summary = artifacts.trend.summary()
        logger.info(
            "Trend: %+.1f incidents/year, R^2=%.3f, p=%.4f",
            summary["slope"],
            summary["r_squared"],
            summary["p_value"],
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
