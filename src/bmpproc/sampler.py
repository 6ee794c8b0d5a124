from __future__ import annotations
import math

import numpy as np

from .raster import Pixel, Raster

MAX_RGB = 255

SHARPEN_KERNEL = np.array([[0, -1, 0], [-1, 5, -1], [0, -1, 0]], dtype=np.float64)
EDGE_KERNEL = np.array([[0, -1, 0], [-1, 4, -1], [0, -1, 0]], dtype=np.float64)

GAUSS_SIZE_PER_SIGMA = 3.0
GAUSS_MIN_SIZE = 5


def _check_kernel(kernel: np.ndarray) -> np.ndarray:
    k = np.asarray(kernel, dtype=np.float64)
    if k.ndim != 2 or k.shape[0] != k.shape[1] or k.shape[0] % 2 == 0:
        raise ValueError(f"kernel must be square with odd side, got shape {k.shape}")
    return k


def gaussian_kernel(sigma: float) -> np.ndarray:
    """
    Normalized 2D Gaussian weights. Side = max(5, round(3*sigma)), made odd by
    stepping down. Distances are measured from size/2, so for odd sizes the
    peak sits half a cell towards the bottom-right of the centre cell.
    """
    size = max(GAUSS_MIN_SIZE, int(math.floor(GAUSS_SIZE_PER_SIGMA * sigma + 0.5)))
    if size % 2 == 0:
        size -= 1
    center = size / 2
    coeff = 2.0 * sigma * sigma
    d = center - np.arange(size, dtype=np.float64)
    dist2 = d[:, None] ** 2 + d[None, :] ** 2
    # shift by the smallest distance so tiny sigmas cannot underflow to an all-zero kernel
    weights = np.exp(-(dist2 - dist2.min()) / coeff) / (math.pi * coeff)
    return weights / weights.sum()


def round_channel(values: np.ndarray) -> np.ndarray:
    """Round half away from zero, then clamp into [0, 255]."""
    return np.clip(np.floor(np.asarray(values) + 0.5), 0, MAX_RGB)


def _source_index(pos: np.ndarray, offset: int, size: int) -> np.ndarray:
    # out-of-range samples fall back to the centre coordinate on that axis
    idx = pos + offset
    return np.where((idx < 0) | (idx >= size), pos, idx)


def calculate_pixel(raster: Raster, row: int, col: int, kernel: np.ndarray) -> Pixel:
    """Weighted sum of the neighborhood around (row, col) under `kernel`."""
    k = _check_kernel(kernel)
    radius = (k.shape[0] - 1) // 2
    src = raster.pixels
    acc = np.zeros(3, dtype=np.float64)
    for dy in range(-radius, radius + 1):
        y = int(_source_index(np.array(row), dy, raster.height))
        for dx in range(-radius, radius + 1):
            x = int(_source_index(np.array(col), dx, raster.width))
            acc += (src[y, x].astype(np.float64) / MAX_RGB) * k[dy + radius, dx + radius]
    r, g, b = round_channel(acc * MAX_RGB).astype(int)
    return Pixel(int(r), int(g), int(b))


def convolve(raster: Raster, kernel: np.ndarray) -> np.ndarray:
    """
    Apply `calculate_pixel` to every position at once.

    Returns a new (height, width, 3) uint8 array; `raster` is only read.
    """
    k = _check_kernel(kernel)
    radius = (k.shape[0] - 1) // 2
    h, w = raster.height, raster.width
    src = raster.pixels.astype(np.float64) / MAX_RGB
    acc = np.zeros((h, w, 3), dtype=np.float64)
    rows = np.arange(h)
    cols = np.arange(w)
    for dy in range(-radius, radius + 1):
        ys = _source_index(rows, dy, h)
        shifted_rows = src[ys]
        for dx in range(-radius, radius + 1):
            weight = k[dy + radius, dx + radius]
            if weight == 0:
                continue
            xs = _source_index(cols, dx, w)
            acc += weight * shifted_rows[:, xs]
    return round_channel(acc * MAX_RGB).astype(np.uint8)
