# grid renderer: lays out the year x month cells in pixel space and turns them into a plotly
# figure. each mode is rendered up front; the toggle buttons swap one pre-rendered state for
# the other, so flipping twice gives back exactly the same drawing

from __future__ import annotations
import calendar
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple
import plotly.graph_objects as go
from .models import CellBox, GridCell, Heatmap, Mode, Sparkline, is_missing, nan_max, nan_min
from .scales import BandScale, ColorScale, LinearScale
from .service import MONTHS, build_grid, domain_for
from .variants import Variant

logger = logging.getLogger(__name__)

DEFAULT_LINE_COLORS = ("skyblue", "darkgreen")
SPARK_INSET = 3
SPARK_WIDTH = 2
LEGEND_TITLE = "Legend: Unit - Temperature"
LEGEND_LABELS = ("Coolest Recorded", "Hottest Recorded")
LEGEND_SPACE = 70


class GridLayout:
    # years along x, months along y, both as padded bands over the plot area
    def __init__(self, years: List[int], variant: Variant):
        m = variant.margin
        self.width = variant.width
        self.height = variant.height
        self.margin = m
        self.x = BandScale(years, (m.left, variant.width - m.right), padding=0.2)
        self.y = BandScale(MONTHS, (m.top, variant.height - m.bottom), padding=0.2)

    def box(self, cell: GridCell, fill: str) -> CellBox:
        return CellBox(
            cell=cell,
            x=self.x(cell.year),
            y=self.y(cell.month),
            width=self.x.bandwidth,
            height=self.y.bandwidth,
            fill=fill,
        )


@dataclass(frozen=True)
class RenderState:
    mode: Mode
    boxes: Tuple[CellBox, ...]
    lines: Tuple[Sparkline, ...]
    title: str
    domain: Tuple[float, float]


def cell_boxes(cells: List[GridCell], layout: GridLayout, color_scale: ColorScale, empty_color: str) -> List[CellBox]:
    boxes = []
    for cell in cells:
        fill = None if cell.is_empty else color_scale(cell.display_value)
        boxes.append(layout.box(cell, fill or empty_color))
    return boxes


def sparklines(cells: List[GridCell], layout: GridLayout, colors: Tuple[str, str]) -> Iterator[Sparkline]:
    bw, bh = layout.x.bandwidth, layout.y.bandwidth
    for cell in cells:
        if not cell.daily:
            continue
        # both fields feed the range so a month with only one valid field still gets its line
        temps = [t for d in cell.daily for t in (d.min_temperature, d.max_temperature)]
        lo, hi = nan_min(temps), nan_max(temps)
        if is_missing(lo) or is_missing(hi):
            continue

        x0, y0 = layout.x(cell.year), layout.y(cell.month)
        # every cell gets its own temperature axis, independent of the color scale
        xs = LinearScale((1, 31), (x0 + SPARK_INSET, x0 + bw - SPARK_INSET))
        ys = LinearScale((lo, hi), (y0 + bh - SPARK_INSET, y0 + SPARK_INSET))

        for kind, color in (("min", colors[0]), ("max", colors[1])):
            points = tuple(
                (xs(d.day), ys(getattr(d, f"{kind}_temperature")))
                for d in cell.daily
                if not is_missing(getattr(d, f"{kind}_temperature"))
            )
            if points:
                yield Sparkline(cell=cell, kind=kind, points=points, color=color)


def _fmt(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:g}"


def tooltip_text(cell: GridCell) -> str:
    date = f"{cell.year}-{cell.month:02d}"
    if cell.max_temperature is None and cell.min_temperature is None:
        return f"Date: {date}; no data"
    return f"Date: {date}; Max: {_fmt(cell.max_temperature)}; Min: {_fmt(cell.min_temperature)}"


def render_state(heatmap: Heatmap, variant: Variant, mode: Mode, layout: Optional[GridLayout] = None) -> RenderState:
    layout = layout or GridLayout(heatmap.years, variant)
    cells = build_grid(heatmap.index, heatmap.years, mode, heatmap.daily)
    domain = domain_for(heatmap, variant, mode)
    color_scale = ColorScale(variant.colorscale, domain, reverse=variant.reverse)

    lines: Tuple[Sparkline, ...] = ()
    if variant.sparklines:
        colors = variant.line_colors.get(mode, DEFAULT_LINE_COLORS)
        lines = tuple(sparklines(cells, layout, colors))

    return RenderState(
        mode=mode,
        boxes=tuple(cell_boxes(cells, layout, color_scale, variant.empty_color)),
        lines=lines,
        title=f"Current Mode: {mode.label}",
        domain=domain,
    )


def _shapes(state: RenderState) -> List[dict]:
    shapes = [
        dict(
            type="rect",
            xref="x",
            yref="y",
            x0=b.x,
            x1=b.x + b.width,
            y0=b.y,
            y1=b.y + b.height,
            fillcolor=b.fill,
            line=dict(width=0),
            layer="below",
        )
        for b in state.boxes
    ]
    for line in state.lines:
        path = "M " + " L ".join(f"{x:.2f},{y:.2f}" for x, y in line.points)
        shapes.append(dict(
            type="path",
            xref="x",
            yref="y",
            path=path,
            line=dict(color=line.color, width=SPARK_WIDTH),
        ))
    return shapes


def _legend_trace(variant: Variant, domain: Tuple[float, float]) -> go.Scatter:
    # a data-less trace whose only job is to draw the colorbar
    lo, hi = domain
    return go.Scatter(
        x=[None],
        y=[None],
        mode="markers",
        showlegend=False,
        hoverinfo="skip",
        marker=dict(
            colorscale=variant.colorscale,
            reversescale=variant.reverse,
            cmin=lo,
            cmax=hi,
            color=[lo],
            showscale=True,
            colorbar=dict(
                title=dict(text=LEGEND_TITLE, side="top"),
                orientation="h",
                x=0.5,
                y=-0.02,
                yanchor="top",
                len=0.6,
                thickness=12,
                tickvals=[lo, hi],
                ticktext=list(LEGEND_LABELS),
            ),
        ),
    )


def build_figure(heatmap: Heatmap, variant: Variant, mode: Mode = Mode.MAX) -> go.Figure:
    layout = GridLayout(heatmap.years, variant)
    states: Dict[Mode, RenderState] = {m: render_state(heatmap, variant, m, layout) for m in Mode}
    current = states[mode]

    # tooltip text shows both extremes, so the hover trace is the same in either mode
    boxes = current.boxes
    hover = go.Scatter(
        x=[b.center[0] for b in boxes],
        y=[b.center[1] for b in boxes],
        mode="markers",
        marker=dict(
            symbol="square",
            size=max(1.0, min(layout.x.bandwidth, layout.y.bandwidth)),
            opacity=0,
        ),
        text=[tooltip_text(b.cell) for b in boxes],
        hovertemplate="%{text}<extra></extra>",
        showlegend=False,
    )
    fig = go.Figure(data=[hover])
    if variant.legend:
        fig.add_trace(_legend_trace(variant, current.domain))

    m = variant.margin
    extra = LEGEND_SPACE if variant.legend else 0
    fig.update_layout(
        title=dict(text=current.title, x=0.5),
        width=variant.width,
        height=variant.height + extra,
        margin=dict(l=m.left, r=m.right, t=m.top, b=m.bottom + extra),
        plot_bgcolor="white",
        hovermode="closest",
        shapes=_shapes(current),
        updatemenus=[_toggle_menu(states, variant, mode)],
    )
    fig.update_xaxes(
        range=[m.left, variant.width - m.right],
        side="top",
        tickvals=[layout.x.center(y) for y in heatmap.years],
        ticktext=[str(y) for y in heatmap.years],
        showgrid=False,
        zeroline=False,
        fixedrange=True,
    )
    # pixel rows grow downwards, so the y range runs bottom -> top
    fig.update_yaxes(
        range=[variant.height - m.bottom, m.top],
        tickvals=[layout.y.center(mo) for mo in MONTHS],
        ticktext=[calendar.month_name[mo] for mo in MONTHS],
        showgrid=False,
        zeroline=False,
        fixedrange=True,
    )
    return fig


def _toggle_menu(states: Dict[Mode, RenderState], variant: Variant, active: Mode) -> dict:
    buttons = []
    for m in Mode:
        state = states[m]
        args: list = [{}, {"shapes": _shapes(state), "title.text": state.title}]
        if variant.legend:
            lo, hi = state.domain
            args[0] = {"marker.cmin": [lo], "marker.cmax": [hi], "marker.colorbar.tickvals": [[lo, hi]]}
            args.append([1])
        buttons.append(dict(label=m.label, method="update", args=args))
    return dict(
        type="buttons",
        direction="right",
        active=list(Mode).index(active),
        showactive=True,
        x=0.0,
        xanchor="left",
        y=1.0,
        yanchor="bottom",
        pad=dict(b=30),
        buttons=buttons,
    )


def write_html(fig: go.Figure, path) -> Path:
    out = Path(path)
    fig.write_html(str(out), include_plotlyjs="cdn", full_html=True)
    logger.info("Wrote %s", out)
    return out
