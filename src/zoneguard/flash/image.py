#!/usr/bin/env python3
"""
ZONEGUARD FLASH IMAGE - Build & Extract
---------------------------------------
Assembles a flat flash image from per-partition files, or splits an image
back into one file per partition.

Author: ZoneGuard Team
Date: 2026-10-19
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from zoneguard.flash.layout import Partition

logger = logging.getLogger("zoneguard.flash")

IMAGE_SUFFIXES = ("", ".bin", ".img")
CHUNK_SIZE = 1024 * 1024


def find_partition_file(name: str, search_dir: Path) -> Optional[Path]:
    """First existing file among <name>, <name>.bin and <name>.img."""
    for suffix in IMAGE_SUFFIXES:
        candidate = search_dir / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def _write_zeros(out, count: int):
    while count > 0:
        chunk = min(count, CHUNK_SIZE)
        out.write(bytes(chunk))
        count -= chunk


def _copy_partition(out, source: Path, size: int) -> int:
    """Copies at most `size` bytes of `source` into `out`; returns bytes copied."""
    copied = 0
    with open(source, "rb") as src:
        while copied < size:
            data = src.read(min(CHUNK_SIZE, size - copied))
            if not data:
                break
            out.write(data)
            copied += len(data)
    return copied


def build_image(partitions: Iterable[Partition], image_path: str,
                search_dir: str = ".") -> List[str]:
    """
    Writes each partition's file into `image_path` at its offset. Bytes
    outside the partitions are left untouched; the image is created if
    needed. Returns the list of partitions that were zero-filled.
    """
    image = Path(image_path)
    directory = Path(search_dir)
    zero_filled = []

    mode = "r+b" if image.exists() else "w+b"
    with open(image, mode) as out:
        for part in partitions:
            out.seek(part.offset)
            source = find_partition_file(part.name, directory)

            if source is None:
                logger.warning("File for partition '%s' not found, filling with nullbytes", part.name)
                _write_zeros(out, part.size)
                zero_filled.append(part.name)
                continue

            logger.info("Adding '%s' at offset %d", source, part.offset)
            copied = _copy_partition(out, source, part.size)
            if copied < part.size:
                logger.warning("Input file '%s' smaller than partition, padding with nullbytes", source)
                _write_zeros(out, part.size - copied)
            elif source.stat().st_size > part.size:
                logger.warning("Input file '%s' larger than partition '%s', truncated to %d bytes",
                               source, part.name, part.size)

    return zero_filled


def extract_image(partitions: Iterable[Partition], image_path: str,
                  out_dir: str = ".") -> List[Path]:
    """Copies each partition's byte range of `image_path` into a file named after it."""
    directory = Path(out_dir)
    written = []

    with open(image_path, "rb") as src:
        for part in partitions:
            logger.info("Extracting partition '%s'", part.name)
            target = directory / part.name
            src.seek(part.offset)
            remaining = part.size
            with open(target, "wb") as out:
                while remaining > 0:
                    data = src.read(min(CHUNK_SIZE, remaining))
                    if not data:
                        break
                    out.write(data)
                    remaining -= len(data)
            if remaining:
                logger.warning("Image ends inside partition '%s', %d bytes missing", part.name, remaining)
            written.append(target)

    return written
