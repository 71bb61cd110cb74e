# orchestration and aggregation rules.
# pure functions over a pandas frame (parse, select, aggregate, grid) and a load_heatmap
# coordinator that ties them to the csv client

from __future__ import annotations
import logging
from typing import List, Optional, Tuple
import pandas as pd
from .client import REQUIRED_COLUMNS, TemperatureCSVClient, TemperatureDataError
from .models import (
    AggregationIndex,
    DailyGroups,
    DailyRecord,
    GridCell,
    Heatmap,
    Mode,
    MonthAggregate,
)
from .variants import Variant

logger = logging.getLogger(__name__)

MONTHS: List[int] = list(range(1, 13))


# coerce the raw csv columns and derive year/month/day; bad values become NaT/NaN, never raise
def parse_daily_frame(df: pd.DataFrame) -> pd.DataFrame:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise TemperatureDataError(f"Unexpected CSV shape: missing columns {missing}")

    out = pd.DataFrame({
        "date": pd.to_datetime(df["date"], format="%Y-%m-%d", errors="coerce"),
        "max_temperature": pd.to_numeric(df["max_temperature"], errors="coerce").astype(float),
        "min_temperature": pd.to_numeric(df["min_temperature"], errors="coerce").astype(float),
    })

    # a row without a date belongs to no (year, month), so it cannot reach any cell
    bad_dates = out["date"].isna()
    if bad_dates.any():
        logger.warning("Dropping %d rows with unparseable dates", int(bad_dates.sum()))
        out = out[~bad_dates]

    bad_temps = out[["max_temperature", "min_temperature"]].isna().any(axis=1)
    if bad_temps.any():
        logger.warning("%d rows have non-numeric temperatures", int(bad_temps.sum()))

    out = out.assign(
        year=out["date"].dt.year.astype(int),
        month=out["date"].dt.month.astype(int),
        day=out["date"].dt.day.astype(int),
    )
    return out.reset_index(drop=True)


def to_daily_records(frame: pd.DataFrame) -> List[DailyRecord]:
    return [
        DailyRecord(
            date=r.date.date(),
            year=int(r.year),
            month=int(r.month),
            day=int(r.day),
            max_temperature=float(r.max_temperature),
            min_temperature=float(r.min_temperature),
        )
        for r in frame.itertuples(index=False)
    ]


def available_years(frame: pd.DataFrame) -> List[int]:
    return sorted(int(y) for y in frame["year"].unique())


def select_years(
    frame: pd.DataFrame,
    drop_first_year: bool = False,
    recent_years: Optional[int] = None,
) -> Tuple[pd.DataFrame, List[int]]:
    if frame.empty:
        return frame, []

    if recent_years is not None:
        if recent_years < 1:
            raise ValueError(f"'recent_years' must be positive (got {recent_years})")
        last_year = int(frame["year"].max())
        frame = frame[frame["year"] >= last_year - (recent_years - 1)]

    years = available_years(frame)
    if drop_first_year:
        # the source starts with a partial year; the matrix view begins one year later.
        # only the column goes, its rows still count towards the color domain
        years = years[1:]

    return frame.reset_index(drop=True), years


def aggregate_by_month(frame: pd.DataFrame) -> AggregationIndex:
    # pandas max/min skip NaN, so a malformed row only matters when a month has nothing else
    grouped = frame.groupby(["year", "month"]).agg(
        max_temperature=("max_temperature", "max"),
        min_temperature=("min_temperature", "min"),
    )
    index: AggregationIndex = {}
    for (year, month), row in grouped.iterrows():
        if pd.isna(row["max_temperature"]) and pd.isna(row["min_temperature"]):
            continue
        index.setdefault(int(year), {})[int(month)] = MonthAggregate(
            max_temperature=float(row["max_temperature"]),
            min_temperature=float(row["min_temperature"]),
        )
    return index


def group_daily(frame: pd.DataFrame) -> DailyGroups:
    groups: DailyGroups = {}
    ordered = frame.sort_values(["year", "month", "day"])
    for (year, month), g in ordered.groupby(["year", "month"]):
        groups.setdefault(int(year), {})[int(month)] = tuple(to_daily_records(g))
    return groups


def lookup(index: AggregationIndex, year: int, month: int) -> Optional[MonthAggregate]:
    return index.get(year, {}).get(month)


# full years x months cross product; cells without data are kept so the grid stays rectangular
def build_grid(
    index: AggregationIndex,
    years: List[int],
    mode: Mode,
    daily: Optional[DailyGroups] = None,
) -> List[GridCell]:
    cells: List[GridCell] = []
    for year in years:
        for month in MONTHS:
            agg = lookup(index, year, month)
            days = daily.get(year, {}).get(month, ()) if daily else ()
            if agg is None:
                cells.append(GridCell(year, month, None, None, None, days))
                continue
            cells.append(GridCell(
                year=year,
                month=month,
                display_value=agg.value(mode),
                max_temperature=agg.value(Mode.MAX),
                min_temperature=agg.value(Mode.MIN),
                daily=days,
            ))
    return cells


def temperature_domain(frame: pd.DataFrame, mode: Optional[Mode] = None) -> Tuple[float, float]:
    if mode is None:
        return (float(frame["min_temperature"].min()), float(frame["max_temperature"].max()))
    values = frame[mode.field]
    return (float(values.min()), float(values.max()))


def build_heatmap(frame: pd.DataFrame, variant: Variant) -> Heatmap:
    filtered, years = select_years(
        frame,
        drop_first_year=variant.drop_first_year,
        recent_years=variant.recent_years,
    )
    if years:
        logger.info("Displaying %d years (%d-%d)", len(years), years[0], years[-1])
    else:
        logger.warning("No years to display")

    return Heatmap(
        years=years,
        index=aggregate_by_month(filtered),
        daily=group_daily(filtered) if variant.sparklines else None,
        shared_domain=temperature_domain(filtered),
        mode_domains={m: temperature_domain(filtered, m) for m in Mode},
    )


# single load path: fetch -> parse -> aggregate
def load_heatmap(client: TemperatureCSVClient, variant: Variant) -> Heatmap:
    raw = client.get_daily_frame()
    return build_heatmap(parse_daily_frame(raw), variant)


def domain_for(heatmap: Heatmap, variant: Variant, mode: Mode) -> Tuple[float, float]:
    return heatmap.shared_domain if variant.shared_domain else heatmap.mode_domains[mode]

