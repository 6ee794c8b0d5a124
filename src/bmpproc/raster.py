from __future__ import annotations
from typing import Iterable, List, NamedTuple, Sequence, Tuple

import numpy as np


class Pixel(NamedTuple):
    r: int
    g: int
    b: int


BLACK = Pixel(0, 0, 0)
WHITE = Pixel(255, 255, 255)


class Raster:
    """
    Top-down grid of RGB pixels backed by a (height, width, 3) uint8 array.
    Row 0 is the visually topmost row regardless of how the file stored it.
    """

    def __init__(self, pixels: np.ndarray) -> None:
        arr = np.asarray(pixels)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"pixels must have shape (height, width, 3), got {arr.shape}")
        if arr.dtype != np.uint8 and arr.size:
            if not np.issubdtype(arr.dtype, np.number) or np.iscomplexobj(arr):
                raise ValueError(f"pixels must be numeric, got {arr.dtype}")
            if arr.min() < 0 or arr.max() > 255 or not np.all(np.mod(arr, 1) == 0):
                raise ValueError("channel values must be integers in [0, 255]")
        self.pixels = np.ascontiguousarray(arr, dtype=np.uint8)

    @classmethod
    def blank(cls, height: int, width: int, fill: Sequence[int] = BLACK) -> "Raster":
        arr = np.empty((height, width, 3), dtype=np.uint8)
        arr[...] = tuple(fill)
        return cls(arr)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Sequence[int]]]) -> "Raster":
        data = [[tuple(p) for p in row] for row in rows]
        if not data:
            return cls(np.zeros((0, 0, 3), dtype=np.uint8))
        widths = {len(row) for row in data}
        if len(widths) != 1:
            raise ValueError("all rows must have the same width")
        return cls(np.array(data, dtype=np.uint8).reshape(len(data), widths.pop(), 3))

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def __getitem__(self, pos: Tuple[int, int]) -> Pixel:
        row, col = pos
        r, g, b = self.pixels[row, col]
        return Pixel(int(r), int(g), int(b))

    def __setitem__(self, pos: Tuple[int, int], pixel: Sequence[int]) -> None:
        row, col = pos
        self.pixels[row, col] = tuple(pixel)

    def row(self, index: int) -> List[Pixel]:
        return [Pixel(int(r), int(g), int(b)) for r, g, b in self.pixels[index]]

    def rows(self) -> List[List[Pixel]]:
        return [self.row(i) for i in range(self.height)]

    def resize_height(self, height: int) -> None:
        """Keep the first `height` rows; new rows (if any) are black."""
        if height <= self.height:
            self.pixels = self.pixels[:height].copy()
            return
        extra = np.zeros((height - self.height, self.width, 3), dtype=np.uint8)
        self.pixels = np.concatenate([self.pixels, extra], axis=0)

    def resize_width(self, width: int) -> None:
        """Truncate or extend every row to `width` columns; new columns are black."""
        if width <= self.width:
            self.pixels = self.pixels[:, :width].copy()
            return
        extra = np.zeros((self.height, width - self.width, 3), dtype=np.uint8)
        self.pixels = np.concatenate([self.pixels, extra], axis=1)

    def copy(self) -> "Raster":
        return Raster(self.pixels.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Raster(height={self.height}, width={self.width})"
