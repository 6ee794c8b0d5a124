from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .codec import load, save
from .errors import BmpProcError, ParameterError
from .helpers import PipelineConfig
from .pipeline import FilterPipeline, FilterSpec
from .viz import Visualizer

logger = logging.getLogger(__name__)

FILTER_PREFIX = "-"


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bmpproc",
        description="Apply a chain of filters to a 24-bit BMP image",
        epilog="filters: -crop W H | -gs | -neg | -sharp | -edge THRESHOLD | "
               "-blur SIGMA | -shuffle PIECES",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--seed", type=int, default=None, help="Seed for -shuffle")
    p.add_argument("--show", action="store_true", help="Display input and result")

    g_io = p.add_argument_group("I/O")
    g_io.add_argument("input", help="Path to the source .bmp")
    g_io.add_argument("output", help="Path to write the result")
    g_io.add_argument("filters", nargs=argparse.REMAINDER,
                      help="Filter chain, e.g. -crop 800 600 -gs")
    return p


def parse_filter_tokens(tokens: Sequence[str]) -> List[FilterSpec]:
    """
    Split `-name p1 p2 -other ...` into FilterSpecs. Every token that starts
    with '-' opens a new filter; the rest are parameters of the open one.
    """
    specs: List[FilterSpec] = []
    name: Optional[str] = None
    params: List[str] = []
    for token in tokens:
        if token.startswith(FILTER_PREFIX):
            if name is not None:
                specs.append(FilterSpec(name, tuple(params)))
            name, params = token[len(FILTER_PREFIX):], []
        elif name is None:
            raise ParameterError("wrong filters input (missing -)")
        else:
            params.append(token)
    if name is not None:
        specs.append(FilterSpec(name, tuple(params)))
    return specs


def _run(cfg: PipelineConfig, viz: Optional[Visualizer]) -> None:
    # validate the whole chain before touching the input file
    pipeline = FilterPipeline.build(cfg.filters, rng=cfg.seed)

    image = load(cfg.input_path)
    source = image.raster.copy() if viz is not None else None

    raster = pipeline.run(image.raster)
    save(cfg.output_path, raster, image.info)
    logger.info("Wrote %s (%d filters applied)", cfg.output_path, len(pipeline))

    if viz is None:
        return
    if pipeline.is_empty():
        viz.show_raster(raster, title="Input")
    else:
        viz.show_side_by_side([source, raster], ["Input", "Result"])


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        cfg = PipelineConfig(
            input_path=args.input,
            output_path=args.output,
            filters=parse_filter_tokens(args.filters),
            seed=args.seed,
            show=args.show,
            verbose=args.verbose,
        )
        _run(cfg, Visualizer() if cfg.show else None)
    except BmpProcError as e:
        print(e.render(), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
