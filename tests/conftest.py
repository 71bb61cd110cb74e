# shared fixtures: a tiny csv that covers a partial first year, bad rows and empty months

from pathlib import Path
import pandas as pd
import pytest
from tempheatmap.service import parse_daily_frame

DATA = Path(__file__).parent / "data" / "temperature_daily.csv"


@pytest.fixture
def csv_path() -> Path:
    return DATA


@pytest.fixture
def raw_frame() -> pd.DataFrame:
    return pd.read_csv(DATA, dtype=str)


@pytest.fixture
def daily_frame(raw_frame) -> pd.DataFrame:
    return parse_daily_frame(raw_frame)


def _make_frame(rows) -> pd.DataFrame:
    raw = pd.DataFrame(rows, columns=["date", "max_temperature", "min_temperature"]).astype(str)
    return parse_daily_frame(raw)


@pytest.fixture
def make_frame():
    # builds a parsed frame from (date, max, min) rows as the csv would deliver them
    return _make_frame
