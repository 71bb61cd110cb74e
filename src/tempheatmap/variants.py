# named presets, one per heatmap view: plain matrix, spectral matrix with legend, ten-year sparklines

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from .models import Margin, Mode

EMPTY_COLOR = "white"


@dataclass(frozen=True)
class Variant:
    name: str
    colorscale: str
    # spectral runs hot -> cold, so hotter cells need the low end of the scale
    reverse: bool = False
    # True: one [min, max] domain for both modes; False: domain of the selected field
    shared_domain: bool = True
    drop_first_year: bool = False
    recent_years: Optional[int] = None
    sparklines: bool = False
    legend: bool = False
    width: int = 800
    height: int = 500
    margin: Margin = Margin()
    empty_color: str = EMPTY_COLOR
    # mode -> (min line color, max line color)
    line_colors: Dict[Mode, Tuple[str, str]] = field(default_factory=dict)


VARIANTS: Dict[str, Variant] = {
    v.name: v
    for v in (
        Variant(
            name="matrix",
            colorscale="Oranges",
            drop_first_year=True,
        ),
        Variant(
            name="matrix-spectral",
            colorscale="Spectral",
            reverse=True,
            drop_first_year=True,
            legend=True,
        ),
        Variant(
            name="decade",
            colorscale="Spectral",
            reverse=True,
            shared_domain=False,
            recent_years=10,
            sparklines=True,
            legend=True,
            width=900,
            height=600,
            line_colors={
                Mode.MAX: ("skyblue", "green"),
                Mode.MIN: ("cyan", "crimson"),
            },
        ),
    )
}

DEFAULT_VARIANT = "matrix-spectral"


def get_variant(name: str) -> Variant:
    try:
        return VARIANTS[name]
    except KeyError:
        raise KeyError(f"Unknown variant {name!r}; expected one of {sorted(VARIANTS)}") from None
