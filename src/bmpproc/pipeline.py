"""
Processing pipeline management.

Resolves filter names, builds and validates every filter up front, then
applies them sequentially to a raster.
"""
from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from .errors import FilterError
from .filters import Filter, RandomSource, resolve
from .raster import Raster

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterSpec:
    """A filter name and its raw parameter strings, as given on the command line."""
    name: str
    params: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))


def build(specs: Sequence[FilterSpec], rng: RandomSource = None) -> List[Filter]:
    """
    Construct every filter before any is applied. The first bad spec raises
    FilterError and nothing is returned.
    """
    generator = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
    filters: List[Filter] = []
    for spec in specs:
        filter_cls = resolve(spec.name)
        if filter_cls is None:
            raise FilterError(f"{spec.name} is not valid filter name")
        if filter_cls.needs_rng:
            filters.append(filter_cls.from_params(spec.params, rng=generator))
        else:
            filters.append(filter_cls.from_params(spec.params))
    return filters


def run(filters: Sequence[Filter], raster: Raster) -> Raster:
    """Apply `filters` in order; each output feeds the next."""
    for i, f in enumerate(filters):
        logger.debug("Applying filter %d/%d: %r", i + 1, len(filters), f)
        raster = f.apply(raster)
    return raster


@dataclass
class FilterPipeline:
    """Container for a validated sequence of filters."""

    filters: List[Filter] = field(default_factory=list)

    @classmethod
    def build(cls, specs: Sequence[FilterSpec], rng: RandomSource = None) -> "FilterPipeline":
        return cls(filters=build(specs, rng=rng))

    def run(self, raster: Raster) -> Raster:
        return run(self.filters, raster)

    def names(self) -> List[str]:
        return [f.name for f in self.filters]

    def is_empty(self) -> bool:
        return not self.filters

    def __len__(self) -> int:
        return len(self.filters)

    def __iter__(self) -> Iterator[Filter]:
        return iter(self.filters)
