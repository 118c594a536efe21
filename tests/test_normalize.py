import logging
from datetime import datetime

import pandas as pd
import pytest

from shootings.data_loader import project_columns
from shootings.exceptions import DataProcessingError
from shootings.normalize import (
    SEASONS,
    FieldStatus,
    classify_value,
    field_status_frame,
    month_to_season,
    normalize_incidents,
    parse_murder_flag,
    seasons_for_dates,
)


def test_year_matches_reference_parser(raw_incidents, incidents):
    valid_raw = raw_incidents["OCCUR_DATE"].iloc[:100]
    for text, parsed_date, year, month in zip(
        valid_raw, incidents["date"], incidents["year"], incidents["month"]
    ):
        reference = datetime.strptime(text, "%m/%d/%Y")
        assert year == reference.year
        assert month == reference.month
        month_part, day_part, year_part = text.split("/")
        assert parsed_date.strftime("%Y-%m-%d") == f"{year_part}-{month_part}-{day_part}"


def test_unparseable_dates_are_reported_and_skipped(raw_incidents, caplog):
    with caplog.at_level(logging.WARNING, logger="shootings.normalize"):
        result = normalize_incidents(project_columns(raw_incidents))

    assert result.skipped_count == 2
    assert len(result.incidents) == 100
    assert set(result.rejected["date"]) == {"", "13/45/2020"}
    assert result.incidents["date"].notna().all()
    assert "Skipped 2 of 102 rows" in caplog.text


def test_seasons_are_total_and_never_legacy_label(incidents):
    assert set(incidents["season"]) <= set(SEASONS)
    assert incidents["season"].notna().all()
    assert "autumm" not in set(incidents["season"])


@pytest.mark.parametrize(
    "text, expected",
    [
        ("02/29/2020", "winter"),
        ("03/01/2020", "spring"),
        ("05/31/2019", "spring"),
        ("06/01/2019", "summer"),
        ("08/31/2019", "summer"),
        ("09/01/2019", "fall"),
        ("11/30/2019", "fall"),
        ("12/01/2019", "winter"),
        ("01/01/2020", "winter"),
    ],
)
def test_season_boundaries(text, expected):
    dates = pd.to_datetime(pd.Series([text]), format="%m/%d/%Y")
    assert seasons_for_dates(dates).iloc[0] == expected


def test_month_to_season_rejects_bad_month():
    assert month_to_season(10) == "fall"
    with pytest.raises(ValueError):
        month_to_season(13)


def test_blank_becomes_missing_and_codes_are_kept(incidents):
    assert pd.isna(incidents.loc[0, "perp_sex"])
    assert pd.isna(incidents.loc[0, "perp_age"])
    assert incidents.loc[10, "perp_sex"] == "U"
    assert incidents.loc[10, "perp_age"] == "UNKNOWN"
    assert incidents.loc[20, "victim_sex"] == "U"


def test_field_status_frame(incidents):
    statuses = field_status_frame(incidents)
    assert statuses.loc[0, "perp_sex"] is FieldStatus.MISSING
    assert statuses.loc[10, "perp_sex"] is FieldStatus.UNKNOWN
    assert statuses.loc[30, "perp_sex"] is FieldStatus.PRESENT
    assert list(statuses.columns) == ["borough", "perp_age", "perp_sex", "victim_age", "victim_sex"]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", FieldStatus.MISSING),
        ("   ", FieldStatus.MISSING),
        (None, FieldStatus.MISSING),
        (pd.NA, FieldStatus.MISSING),
        (float("nan"), FieldStatus.MISSING),
        ("U", FieldStatus.UNKNOWN),
        ("unknown", FieldStatus.UNKNOWN),
        ("M", FieldStatus.PRESENT),
        ("25-44", FieldStatus.PRESENT),
    ],
)
def test_classify_value(value, expected):
    assert classify_value(value) is expected


def test_parse_murder_flag():
    parsed = parse_murder_flag(pd.Series(["true", "FALSE", " Y ", "n"]))
    assert parsed.tolist() == [True, False, True, False]
    assert parsed.dtype == "boolean"


def test_blank_murder_flag_becomes_missing():
    parsed = parse_murder_flag(pd.Series(["true", "", "  ", "false"]))
    assert parsed.dtype == "boolean"
    assert parsed.isna().tolist() == [False, True, True, False]
    assert parsed.iloc[0] and not parsed.iloc[3]


def test_parse_murder_flag_rejects_garbage():
    with pytest.raises(DataProcessingError, match="maybe"):
        parse_murder_flag(pd.Series(["true", "maybe"]))


def test_normalize_does_not_mutate_input(raw_incidents):
    projected = project_columns(raw_incidents)
    before = projected.copy()
    normalize_incidents(projected)
    pd.testing.assert_frame_equal(projected, before)


def test_blank_murder_flag_keeps_row(raw_incidents):
    raw = raw_incidents.copy()
    raw.loc[5, "STATISTICAL_MURDER_FLAG"] = ""

    incidents = normalize_incidents(project_columns(raw)).incidents

    assert len(incidents) == 100
    assert pd.isna(incidents.loc[5, "is_murder"])
    assert incidents["is_murder"].isna().sum() == 1
