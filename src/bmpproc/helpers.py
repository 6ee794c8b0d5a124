from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional
import os

from .errors import ImageIOError

if TYPE_CHECKING:
    from .pipeline import FilterSpec


# Config dataclasses

@dataclass
class PipelineConfig:
    input_path: str
    output_path: str
    filters: List[FilterSpec] = field(default_factory=list)
    seed: Optional[int] = None   # None -> fresh entropy for shuffle
    show: bool = False
    verbose: bool = False


# I/O & filesystem helpers

def read_bytes(path: str | os.PathLike) -> bytes:
    """Read a whole file. Raises ImageIOError if it cannot be opened."""
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError as e:
        raise ImageIOError(f"can not open for reading {path}") from e


def write_bytes(path: str | os.PathLike, data: bytes) -> None:
    """Write `data` to `path`, replacing any existing file."""
    try:
        with open(path, "wb") as fh:
            fh.write(data)
    except OSError as e:
        raise ImageIOError(f"can not open for writing {path}") from e
