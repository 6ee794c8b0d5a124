"""
Reader/writer for uncompressed 24-bit bitmaps.

Wire layout (little-endian):
  [0:2)    magic "BM"
  [2:14)   file header  (file_size u32, reserved1 u16, reserved2 u16, offset u32)
  [14:54)  info header  (see BitmapInfo)
  offset.. rows of `width` BGR triples, each followed by `width % 4` zero bytes,
           bottom-up unless the stored height is negative.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
import logging
import os
import struct
from typing import Optional

import numpy as np

from .errors import FormatError
from .helpers import read_bytes, write_bytes
from .raster import Raster

logger = logging.getLogger(__name__)

MAGIC = b"BM"
MAGIC_SIZE = 2
FILE_HEADER = struct.Struct("<IHHI")
INFO_HEADER = struct.Struct("<IiiHHIIiiII")
PIXEL_DATA_OFFSET = MAGIC_SIZE + FILE_HEADER.size + INFO_HEADER.size  # 54

REQUIRED_BITS_PER_PIXEL = 24
REQUIRED_COMPRESSION = 0
BYTES_PER_PIXEL = 3
ROW_ALIGN = 4


@dataclass
class BitmapFileHeader:
    file_size: int = 0
    reserved1: int = 0
    reserved2: int = 0
    offset: int = PIXEL_DATA_OFFSET


@dataclass
class BitmapInfo:
    header_size: int = INFO_HEADER.size
    width: int = 0
    height: int = 0
    planes: int = 1
    bits_per_pixel: int = REQUIRED_BITS_PER_PIXEL
    compression: int = REQUIRED_COMPRESSION
    size_image: int = 0
    h_res: int = 0
    v_res: int = 0
    num_colors: int = 0
    num_important_colors: int = 0


@dataclass
class BitmapImage:
    raster: Raster
    info: BitmapInfo = field(default_factory=BitmapInfo)
    file_header: BitmapFileHeader = field(default_factory=BitmapFileHeader)


def row_padding(width: int) -> int:
    # 3*width + width % 4 is always a multiple of 4
    return width % ROW_ALIGN


def row_stride(width: int) -> int:
    return width * BYTES_PER_PIXEL + row_padding(width)


def _read_headers(data: bytes, source: str) -> tuple[BitmapFileHeader, BitmapInfo]:
    if len(data) < MAGIC_SIZE:
        raise FormatError(f"invalid input file {source}")
    if data[:MAGIC_SIZE] != MAGIC:
        raise FormatError(f"{source} is not right BMP format")

    pos = MAGIC_SIZE
    if len(data) < pos + FILE_HEADER.size:
        raise FormatError(f"can not read Bitmap file header from {source}")
    file_header = BitmapFileHeader(*FILE_HEADER.unpack_from(data, pos))

    pos += FILE_HEADER.size
    if len(data) < pos + INFO_HEADER.size:
        raise FormatError(f"can not read Bitmap info from {source}")
    info = BitmapInfo(*INFO_HEADER.unpack_from(data, pos))

    if info.bits_per_pixel != REQUIRED_BITS_PER_PIXEL:
        raise FormatError(f"{source} is not {REQUIRED_BITS_PER_PIXEL} bits per pixel")
    if info.compression != REQUIRED_COMPRESSION:
        raise FormatError(f"{source} is compressed")
    if info.height == 0 or info.width <= 0:
        raise FormatError(f"{source} has invalid height or width")
    return file_header, info


def _read_pixels(data: bytes, offset: int, width: int, height: int, source: str) -> np.ndarray:
    """Rows in wire order, as a (height, width, 3) RGB array."""
    stride = row_stride(width)
    needed = offset + (height - 1) * stride + width * BYTES_PER_PIXEL
    if len(data) < needed:
        raise FormatError(f"{source} has truncated pixel data")

    block = data[offset:offset + height * stride]
    if len(block) < height * stride:
        # the last row's padding may be missing
        block = block + bytes(height * stride - len(block))
    rows = np.frombuffer(block, dtype=np.uint8).reshape(height, stride)
    bgr = rows[:, :width * BYTES_PER_PIXEL].reshape(height, width, BYTES_PER_PIXEL)
    return bgr[..., ::-1]


def decode_image(data: bytes, source: str = "<bytes>") -> BitmapImage:
    """Parse a bitmap; the returned raster is always top-down."""
    file_header, info = _read_headers(data, source)

    top_down = info.height < 0
    height = abs(info.height)
    pixels = _read_pixels(data, file_header.offset, info.width, height, source)
    if not top_down:
        pixels = pixels[::-1]

    info = replace(info, height=height)
    logger.info("Decoded %s: %dx%d (%s)", source, info.width, height,
                "top-down" if top_down else "bottom-up")
    return BitmapImage(raster=Raster(pixels.copy()), info=info, file_header=file_header)


def decode(data: bytes, source: str = "<bytes>") -> Raster:
    return decode_image(data, source).raster


def encode(raster: Raster, info: Optional[BitmapInfo] = None,
           file_header: Optional[BitmapFileHeader] = None) -> bytes:
    """
    Serialize `raster` bottom-up. The info block is taken from `info` (or
    defaults) with width/height replaced by the raster's own dimensions.
    """
    width, height = raster.width, raster.height
    header = replace(file_header) if file_header is not None else BitmapFileHeader()
    header.offset = PIXEL_DATA_OFFSET
    header.file_size = PIXEL_DATA_OFFSET + row_stride(width) * height
    info = replace(info or BitmapInfo(), width=width, height=height)

    rows = np.zeros((height, row_stride(width)), dtype=np.uint8)
    if width and height:
        bgr = raster.pixels[::-1, :, ::-1]
        rows[:, :width * BYTES_PER_PIXEL] = bgr.reshape(height, width * BYTES_PER_PIXEL)

    logger.info("Encoded %dx%d bitmap (%d bytes)", width, height, header.file_size)
    return b"".join([
        MAGIC,
        FILE_HEADER.pack(header.file_size, header.reserved1, header.reserved2, header.offset),
        INFO_HEADER.pack(
            info.header_size, info.width, info.height, info.planes, info.bits_per_pixel,
            info.compression, info.size_image, info.h_res, info.v_res,
            info.num_colors, info.num_important_colors,
        ),
        rows.tobytes(),
    ])


def load(path: str | os.PathLike) -> BitmapImage:
    return decode_image(read_bytes(path), source=str(path))


def save(path: str | os.PathLike, raster: Raster, info: Optional[BitmapInfo] = None) -> None:
    write_bytes(path, encode(raster, info))
