import struct

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from bmpproc import Raster


def make_bmp(pixels_rgb: np.ndarray, top_down: bool = False, bpp: int = 24,
             compression: int = 0, offset: int = 54, pad_last_row: bool = True) -> bytes:
    """Hand-assemble a bitmap file without going through the codec."""
    h, w, _ = pixels_rgb.shape
    pad = w % 4
    rows = pixels_rgb if top_down else pixels_rgb[::-1]
    body = bytearray()
    for i, row in enumerate(rows):
        body += row[:, ::-1].astype(np.uint8).tobytes()
        if pad_last_row or i < h - 1:
            body += bytes(pad)
    height = -h if top_down else h
    header = b"BM" + struct.pack("<IHHI", offset + len(body), 0, 0, offset)
    info = struct.pack("<IiiHHIIiiII", 40, w, height, 1, bpp, compression, len(body), 2835, 2835, 0, 0)
    gap = bytes(offset - 54)
    return header + info + gap + bytes(body)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_pixels(rng):
    def _make(height: int, width: int) -> np.ndarray:
        return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    return _make


@pytest.fixture
def uniform_raster():
    def _make(height: int, width: int, value) -> Raster:
        return Raster.blank(height, width, value)
    return _make


@pytest.fixture
def sharpen_fixture() -> Raster:
    raster = Raster.blank(3, 3, (5, 5, 5))
    raster[1, 1] = (255, 255, 255)
    raster[0, 1] = (8, 8, 8)
    return raster


@pytest.fixture
def blur_fixture() -> Raster:
    raster = Raster.blank(3, 3, (100, 100, 100))
    raster[0, 0] = (200, 100, 100)
    raster[0, 1] = (150, 100, 100)
    return raster
