"""Hash files and streams with BLAKE3."""

from __future__ import annotations

import mmap
import os
import stat
from pathlib import Path
from typing import BinaryIO

from blakediff.blake3 import Blake3

# Reads of 64 KiB keep per-call overhead low.
_READ_SIZE = 64 * 1024
# Below this size mapping a file is not worth it.
_MMAP_THRESHOLD = 16 * 1024


def hash_stream(stream: BinaryIO) -> str:
    """Read ``stream`` to its end and return the hexadecimal BLAKE3 hash."""
    hasher = Blake3()
    while chunk := stream.read(_READ_SIZE):
        hasher.update(chunk)
    return hasher.hexdigest()


def _should_mmap(info: os.stat_result) -> bool:
    return stat.S_ISREG(info.st_mode) and info.st_size >= _MMAP_THRESHOLD


def hash_file(path: str | os.PathLike[str]) -> str:
    """Return the hexadecimal BLAKE3 hash of the file at ``path``.

    Regular files of 16 KiB or more are memory-mapped; others are read
    in 64 KiB pieces.
    """
    with open(Path(path), "rb") as handle:
        info = os.fstat(handle.fileno())
        if not _should_mmap(info):
            return hash_stream(handle)
        size = info.st_size
        hasher = Blake3()
        with mmap.mmap(handle.fileno(), size, access=mmap.ACCESS_READ) as mapped:
            for offset in range(0, size, _READ_SIZE):
                hasher.update(mapped[offset:offset + _READ_SIZE])
        return hasher.hexdigest()