# connects input (csv source + view options) to the service and renderer and writes the page.

from __future__ import annotations
import argparse
import logging
from .client import TemperatureCSVClient, TemperatureDataError
from .models import Mode
from .render import build_figure, write_html
from .service import load_heatmap
from .variants import DEFAULT_VARIANT, VARIANTS, get_variant

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "temperature_heatmap.html"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="tempheatmap",
        description="Render a year x month heatmap of daily max/min temperatures as an HTML page.",
    )
    ap.add_argument("--source", default=None,
                    help="CSV url or local path (default: $TEMPHEATMAP_CSV_URL or the course dataset)")
    ap.add_argument("--variant", choices=sorted(VARIANTS), default=DEFAULT_VARIANT,
                    help=f"Which view to render (default: {DEFAULT_VARIANT})")
    ap.add_argument("--mode", choices=[m.value for m in Mode], default=Mode.MAX.value,
                    help="Temperature shown when the page opens (default: max)")
    ap.add_argument("--output", default=DEFAULT_OUTPUT, help=f"HTML file to write (default: {DEFAULT_OUTPUT})")
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    variant = get_variant(args.variant)
    try:
        heatmap = load_heatmap(TemperatureCSVClient(source=args.source), variant)
    except TemperatureDataError as exc:
        # nothing is rendered when the dataset cannot be loaded
        logger.error("%s", exc)
        return 1

    fig = build_figure(heatmap, variant, Mode(args.mode))
    write_html(fig, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
