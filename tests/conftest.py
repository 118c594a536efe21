from typing import Dict, List

import pandas as pd
import pytest

from shootings.data_loader import project_columns
from shootings.normalize import normalize_incidents


BOROUGHS = ["BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN ISLAND"]


def _raw_row(index: int, occur_date: str) -> Dict[str, str]:
    return {
        "INCIDENT_KEY": str(200000 + index),
        "OCCUR_DATE": occur_date,
        "OCCUR_TIME": "21:30:00",
        "BORO": BOROUGHS[index % len(BOROUGHS)],
        "LOC_OF_OCCUR_DESC": "",
        "PRECINCT": str(40 + index % 30),
        "JURISDICTION_CODE": "0",
        "LOC_CLASSFCTN_DESC": "",
        "LOCATION_DESC": "",
        "STATISTICAL_MURDER_FLAG": "true" if index % 5 == 0 else "false",
        "PERP_AGE_GROUP": "25-44",
        "PERP_SEX": "M" if index % 2 == 0 else "F",
        "PERP_RACE": "BLACK",
        "VIC_AGE_GROUP": "18-24",
        "VIC_SEX": "M",
        "VIC_RACE": "BLACK",
        "X_COORD_CD": "1006343",
        "Y_COORD_CD": "234270",
        "Latitude": "40.8",
        "Longitude": "-73.9",
        "Lon_Lat": "POINT (-73.9 40.8)",
    }


def build_raw_incidents() -> pd.DataFrame:
    """100 parseable rows over 2018-2020 plus two rows with broken dates.

    Rows 0-9 have a blank perpetrator, rows 10-19 an explicit unknown
    perpetrator, and row 20 mixes a blank perpetrator age with an unknown
    victim sex, so exactly 1% of valid rows carry both.
    """
    rows: List[Dict[str, str]] = []
    for index in range(100):
        year = 2018 + index % 3
        month = index % 12 + 1
        day = index % 28 + 1
        row = _raw_row(index, f"{month:02d}/{day:02d}/{year}")
        if index < 10:
            row["PERP_AGE_GROUP"] = ""
            row["PERP_SEX"] = ""
        elif index < 20:
            row["PERP_AGE_GROUP"] = "UNKNOWN"
            row["PERP_SEX"] = "U"
        elif index == 20:
            row["PERP_AGE_GROUP"] = ""
            row["VIC_SEX"] = "U"
        rows.append(row)

    rows.append(_raw_row(100, ""))
    rows.append(_raw_row(101, "13/45/2020"))
    return pd.DataFrame(rows)


@pytest.fixture
def raw_incidents() -> pd.DataFrame:
    return build_raw_incidents()


@pytest.fixture
def incidents(raw_incidents) -> pd.DataFrame:
    return normalize_incidents(project_columns(raw_incidents)).incidents
