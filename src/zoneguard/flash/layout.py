#!/usr/bin/env python3
"""
ZONEGUARD FLASH LAYOUT
----------------------
Turns the three supported partition layout notations into an ordered list
of Partition(name, offset, size):

  * Linux mtdparts command line:  mtdparts=spi0.0:896K(u-boot),128K@1M(env)
  * flashrom layout file:          00000000:000dffff u-boot
  * /proc/mtd dump:                mtd0: 000e0000 00010000 "u-boot"

Offsets not given explicitly continue where the previous partition ended.
Overlapping partitions are accepted as-is.

Author: ZoneGuard Team
Date: 2026-10-19
"""

import re
from dataclasses import dataclass
from typing import List

from zoneguard.core.errors import LayoutError

SIZE_SUFFIXES = {"k": 1024, "m": 1024 ** 2, "g": 1024 ** 3}

# <size>[@<offset>](<name>)[flags]
_CMDLINE_PART = re.compile(r"^\s*([^@(]+?)\s*(?:@\s*([^(]+?)\s*)?\((.*)\)(.*)$")


@dataclass(frozen=True)
class Partition:
    name: str
    offset: int
    size: int

    @property
    def end(self) -> int:
        return self.offset + self.size


def _parse_int(text: str) -> int:
    """Integer with C-style base prefix: 0x hex, leading 0 octal, else decimal."""
    lowered = text.lower()
    if lowered.startswith("0x"):
        return int(lowered[2:], 16)
    if len(lowered) > 1 and lowered.startswith("0"):
        return int(lowered[1:], 8)
    return int(lowered, 10)


def memparse(text: str) -> int:
    """
    Emulates the kernel's memparse(): a number with an optional K, M or G
    suffix scaling it by powers of 1024.
    """
    value = text.strip()
    multiplier = 1
    if value and value[-1].lower() in SIZE_SUFFIXES:
        multiplier = SIZE_SUFFIXES[value[-1].lower()]
        value = value[:-1]
    try:
        return _parse_int(value) * multiplier
    except ValueError:
        raise LayoutError(f"Invalid size or offset '{text}'")


def _parse_hex(text: str) -> int:
    value = text.strip()
    if value.lower().startswith("0x"):
        value = value[2:]
    try:
        return int(value, 16)
    except ValueError:
        raise LayoutError(f"Invalid hexadecimal number '{text}'")


def parse_cmdline(spec: str) -> List[Partition]:
    """
    Parses an mtdparts specification. The `mtdparts=` prefix and the
    `<mtd-id>:` device part are optional.
    """
    parts = spec.strip()
    if "=" in parts:
        parts = parts.split("=", 1)[1]
    if ":" in parts:
        parts = parts.split(":", 1)[1]
    if not parts:
        raise LayoutError("Empty partition specification")

    partitions = []
    offset = 0
    for part in parts.split(","):
        match = _CMDLINE_PART.match(part)
        if not match:
            raise LayoutError(f"Invalid partition definition '{part}'")
        size_spec, offset_spec, label, _flags = match.groups()

        # Anything after '@' inside the label is not part of the file name
        name = label.split("@", 1)[0]
        if not name:
            raise LayoutError(f"Partition definition '{part}' has no name")

        size = memparse(size_spec)
        if offset_spec is not None:
            offset = memparse(offset_spec)

        partitions.append(Partition(name=name, offset=offset, size=size))
        offset += size

    return partitions


def parse_flashrom_layout(text: str) -> List[Partition]:
    """Parses `start:end name` rows; a blank line ends the table."""
    partitions = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            break
        fields = line.split()
        if len(fields) < 2 or ":" not in fields[0]:
            raise LayoutError(f"Invalid layout entry '{line}'")

        start_text, end_text = fields[0].split(":", 1)
        start, end = _parse_hex(start_text), _parse_hex(end_text)
        if start > end:
            raise LayoutError(f"Invalid layout entry '{line}', start address > end address")

        partitions.append(Partition(name=fields[1], offset=start, size=end - start + 1))

    return partitions


def parse_proc_mtd(text: str) -> List[Partition]:
    """
    Parses a /proc/mtd dump: one header line, then `dev: size erasesize "name"`.
    """
    partitions = []
    offset = 0
    for line in text.splitlines()[1:]:
        line = line.strip()
        if not line:
            break
        fields = line.split(None, 3)
        if len(fields) < 2:
            raise LayoutError(f"Invalid mtd entry '{line}'")

        if len(fields) == 4:
            name = fields[3].strip().strip('"')
        else:
            name = fields[0].strip('"').rstrip(":")
        size = _parse_hex(fields[1])

        partitions.append(Partition(name=name, offset=offset, size=size))
        offset += size

    return partitions
