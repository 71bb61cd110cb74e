# models and tiny stats helpers to keep data shapes explicit and reusable across the app

from __future__ import annotations
import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class Mode(Enum):
    # the displayed temperature field; the only piece of view state
    MAX = "max"
    MIN = "min"

    @property
    def field(self) -> str:
        return "max_temperature" if self is Mode.MAX else "min_temperature"

    @property
    def label(self) -> str:
        return "Max Temperatures" if self is Mode.MAX else "Min Temperatures"

    def toggle(self) -> "Mode":
        return Mode.MIN if self is Mode.MAX else Mode.MAX


@dataclass(frozen=True)
class DailyRecord:
    # immutable value object for one parsed csv row; temperatures may be NaN
    date: date
    year: int
    month: int
    day: int
    max_temperature: float
    min_temperature: float


@dataclass(frozen=True)
class MonthAggregate:
    # max of daily maxima and min of daily minima for one (year, month)
    max_temperature: float
    min_temperature: float

    def value(self, mode: Mode) -> Optional[float]:
        v = getattr(self, mode.field)
        return None if is_missing(v) else v


# year -> month -> aggregate; absent keys mean "no data"
AggregationIndex = Dict[int, Dict[int, MonthAggregate]]
DailyGroups = Dict[int, Dict[int, Tuple[DailyRecord, ...]]]


@dataclass(frozen=True)
class GridCell:
    # one (year, month) slot of the cross product grid, present even without data
    year: int
    month: int
    display_value: Optional[float]
    max_temperature: Optional[float]
    min_temperature: Optional[float]
    daily: Tuple[DailyRecord, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.display_value is None


@dataclass(frozen=True)
class CellBox:
    # a rendered rectangle in figure pixel coordinates
    cell: GridCell
    x: float
    y: float
    width: float
    height: float
    fill: str

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class Sparkline:
    cell: GridCell
    kind: str  # "min" or "max"
    points: Tuple[Tuple[float, float], ...]
    color: str


@dataclass(frozen=True)
class Margin:
    top: int = 50
    right: int = 50
    bottom: int = 50
    left: int = 100


@dataclass(frozen=True)
class Heatmap:
    # everything the renderer needs, computed once from the loaded frame
    years: List[int]
    index: AggregationIndex
    daily: Optional[DailyGroups]
    shared_domain: Tuple[float, float]
    mode_domains: Dict[Mode, Tuple[float, float]] = field(default_factory=dict)


def is_missing(value) -> bool:
    # None and NaN are both "no data"
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


def nan_max(values: Iterable[float]) -> float:
    # max that skips NaN and returns NaN on empty input instead of raising
    clean = [v for v in values if not is_missing(v)]
    return max(clean) if clean else float("nan")


def nan_min(values: Iterable[float]) -> float:
    clean = [v for v in values if not is_missing(v)]
    return min(clean) if clean else float("nan")
