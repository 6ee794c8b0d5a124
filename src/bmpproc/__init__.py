from .errors import BmpProcError, ParameterError, FilterError, FormatError, ImageIOError
from .raster import Pixel, Raster
from .codec import BitmapFileHeader, BitmapInfo, BitmapImage, decode, decode_image, encode, load, save
from .sampler import calculate_pixel, convolve, gaussian_kernel
from .filters import (
    Filter, Crop, Grayscale, Negative, Sharpening, EdgeDetection, GaussianBlur, Shuffle,
    FILTER_REGISTRY, resolve,
)
from .pipeline import FilterSpec, FilterPipeline, build, run
from .helpers import PipelineConfig, read_bytes, write_bytes
from .viz import Visualizer

__all__ = [
    "BmpProcError", "ParameterError", "FilterError", "FormatError", "ImageIOError",
    "Pixel", "Raster",
    "BitmapFileHeader", "BitmapInfo", "BitmapImage", "decode", "decode_image", "encode", "load", "save",
    "calculate_pixel", "convolve", "gaussian_kernel",
    "Filter", "Crop", "Grayscale", "Negative", "Sharpening", "EdgeDetection", "GaussianBlur", "Shuffle",
    "FILTER_REGISTRY", "resolve",
    "FilterSpec", "FilterPipeline", "build", "run",
    "PipelineConfig", "read_bytes", "write_bytes",
    "Visualizer",
]
