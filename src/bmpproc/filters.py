"""
Filter definitions for the processing pipeline.

Each filter is built from its command-line parameter strings via
`from_params` and mutates a Raster in place through `apply`.
"""
from __future__ import annotations
import logging
import math
from typing import ClassVar, Dict, List, Optional, Sequence, Tuple, Type, Union

import numpy as np

from .errors import FilterError
from .raster import Raster
from .sampler import (
    EDGE_KERNEL,
    MAX_RGB,
    SHARPEN_KERNEL,
    convolve,
    gaussian_kernel,
    round_channel,
)

logger = logging.getLogger(__name__)

RED_TO_GRAY = 0.299
GREEN_TO_GRAY = 0.587
BLUE_TO_GRAY = 0.114

SWAP_GROUP = 2

RandomSource = Union[None, int, np.random.Generator]


class Filter:
    """Base class for all filters."""

    name: ClassVar[str] = ""
    param_count: ClassVar[int] = 0
    needs_rng: ClassVar[bool] = False   # from_params takes an rng keyword

    @classmethod
    def check_params_count(cls, params: Sequence[str]) -> None:
        if len(params) != cls.param_count:
            raise FilterError(f"wrong amount of params for filter {cls.name}")

    @classmethod
    def invalid_arguments(cls) -> FilterError:
        return FilterError(f"wrong arguments for filter {cls.name}")

    @classmethod
    def from_params(cls, params: Sequence[str]) -> "Filter":
        cls.check_params_count(params)
        return cls()

    def apply(self, raster: Raster) -> Raster:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _parse_int(text: str) -> Optional[int]:
    """Plain ASCII base-10 integer with an optional leading minus, else None."""
    digits = text[1:] if text.startswith("-") else text
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(text)


def _parse_positive_int(text: str) -> Optional[int]:
    value = _parse_int(text)
    return value if value is not None and value > 0 else None


# ============================================================================
# FILTER IMPLEMENTATIONS
# ============================================================================

class Crop(Filter):
    """Shrink to at most `width` x `height`, keeping the top-left corner."""

    name = "crop"
    param_count = 2

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise self.invalid_arguments()
        self.width = width
        self.height = height

    @classmethod
    def from_params(cls, params: Sequence[str]) -> "Crop":
        cls.check_params_count(params)
        width = _parse_positive_int(params[0])
        height = _parse_positive_int(params[1])
        if width is None or height is None:
            raise cls.invalid_arguments()
        return cls(width, height)

    def apply(self, raster: Raster) -> Raster:
        if self.height < raster.height:
            raster.resize_height(self.height)
        if self.width < raster.width:
            raster.resize_width(self.width)
        return raster

    def __repr__(self) -> str:
        return f"Crop(width={self.width}, height={self.height})"


class Grayscale(Filter):
    name = "gs"

    def apply(self, raster: Raster) -> Raster:
        px = raster.pixels.astype(np.float64) / MAX_RGB
        lum = (px[..., 0] * RED_TO_GRAY + px[..., 1] * GREEN_TO_GRAY + px[..., 2] * BLUE_TO_GRAY) * MAX_RGB
        raster.pixels[...] = round_channel(lum).astype(np.uint8)[..., None]
        return raster


class Negative(Filter):
    name = "neg"

    def apply(self, raster: Raster) -> Raster:
        np.subtract(MAX_RGB, raster.pixels, out=raster.pixels)
        return raster


class Sharpening(Filter):
    name = "sharp"

    def apply(self, raster: Raster) -> Raster:
        raster.pixels[...] = convolve(raster, SHARPEN_KERNEL)
        return raster


class EdgeDetection(Filter):
    """Grayscale, Laplacian-style kernel, then binarize on the red channel."""

    name = "edge"
    param_count = 1

    def __init__(self, threshold: int) -> None:
        if not 0 <= threshold <= MAX_RGB:
            raise self.invalid_arguments()
        self.threshold = threshold

    @classmethod
    def from_params(cls, params: Sequence[str]) -> "EdgeDetection":
        cls.check_params_count(params)
        threshold = _parse_int(params[0])
        if threshold is None:
            raise cls.invalid_arguments()
        return cls(threshold)

    def apply(self, raster: Raster) -> Raster:
        Grayscale().apply(raster)
        edges = convolve(raster, EDGE_KERNEL)[..., 0] > self.threshold
        raster.pixels[...] = np.where(edges, MAX_RGB, 0).astype(np.uint8)[..., None]
        return raster

    def __repr__(self) -> str:
        return f"EdgeDetection(threshold={self.threshold})"


class GaussianBlur(Filter):
    name = "blur"
    param_count = 1

    def __init__(self, sigma: float) -> None:
        if not math.isfinite(sigma) or sigma <= 0:
            raise self.invalid_arguments()
        self.sigma = sigma
        self.kernel = gaussian_kernel(sigma)

    @classmethod
    def from_params(cls, params: Sequence[str]) -> "GaussianBlur":
        cls.check_params_count(params)
        try:
            sigma = float(params[0])
        except ValueError:
            raise cls.invalid_arguments() from None
        return cls(sigma)

    def apply(self, raster: Raster) -> Raster:
        raster.pixels[...] = convolve(raster, self.kernel)
        return raster

    def __repr__(self) -> str:
        return f"GaussianBlur(sigma={self.sigma})"


class Shuffle(Filter):
    """
    Cut the raster into side x side equal tiles and swap them pairwise in a
    random order. Rows/columns that do not divide evenly are cropped first.
    """

    name = "shuffle"
    param_count = 1
    needs_rng = True

    def __init__(self, pieces: int, rng: RandomSource = None) -> None:
        side = math.isqrt(pieces) if pieces > 0 else 0
        if pieces <= 0 or side * side != pieces:
            raise self.invalid_arguments()
        self.pieces = pieces
        self.side = side
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    @classmethod
    def from_params(cls, params: Sequence[str], rng: RandomSource = None) -> "Shuffle":
        cls.check_params_count(params)
        pieces = _parse_positive_int(params[0])
        if pieces is None:
            raise cls.invalid_arguments()
        return cls(pieces, rng=rng)

    def tile_origins(self, raster: Raster) -> List[Tuple[int, int]]:
        tile_h = raster.height // self.side
        tile_w = raster.width // self.side
        return [(y * tile_h, x * tile_w) for y in range(self.side) for x in range(self.side)]

    def apply(self, raster: Raster) -> Raster:
        if self.side >= min(raster.height, raster.width):
            logger.debug("shuffle: %d pieces do not fit %dx%d, skipped",
                         self.pieces, raster.width, raster.height)
            return raster

        Crop(width=raster.width - raster.width % self.side,
             height=raster.height - raster.height % self.side).apply(raster)

        tile_h = raster.height // self.side
        tile_w = raster.width // self.side
        origins = self.tile_origins(raster)
        order = self.rng.permutation(len(origins))

        px = raster.pixels
        for i in range(0, len(order) - SWAP_GROUP + 1, SWAP_GROUP):
            y1, x1 = origins[order[i]]
            y2, x2 = origins[order[i + 1]]
            first = px[y1:y1 + tile_h, x1:x1 + tile_w].copy()
            px[y1:y1 + tile_h, x1:x1 + tile_w] = px[y2:y2 + tile_h, x2:x2 + tile_w]
            px[y2:y2 + tile_h, x2:x2 + tile_w] = first
        return raster

    def __repr__(self) -> str:
        return f"Shuffle(pieces={self.pieces})"


# Registry of all available filters, keyed by command-line name
FILTER_REGISTRY: Dict[str, Type[Filter]] = {
    cls.name: cls
    for cls in (Crop, Grayscale, Negative, Sharpening, EdgeDetection, GaussianBlur, Shuffle)
}


def resolve(name: str) -> Optional[Type[Filter]]:
    """Exact, case-sensitive lookup. Returns None for unknown names."""
    return FILTER_REGISTRY.get(name)
