#!/usr/bin/env python3
"""
MKFLASHIMAGE CLI
----------------
Creates flash images from multiple files based on a partition layout, or
performs the reverse operation, dissecting an image into its partitions.

Author: ZoneGuard Team
Date: 2026-10-19
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.logging import RichHandler
from rich.table import Table

from zoneguard.core.errors import LayoutError
from zoneguard.flash.image import build_image, extract_image
from zoneguard.flash.layout import Partition, parse_cmdline, parse_flashrom_layout, parse_proc_mtd

console = Console(stderr=True)

EXAMPLES = """\
Examples:
  mkflashimage mtdparts=spi1.0:896K(u-boot),128K(u-boot-env),6144K(kernel) flash32m.bin
  mkflashimage nand0:1M(u-boot),128K(u-boot-env),8M(kernel),54M(rootfs),896k(cal) flash.img
  mkflashimage 16k(FlashReader)ro,512k(U-Boot),4080k@0x3c00000(WinCE)ro pnx8950.img
  mkflashimage -r -l layout.txt flash.bin
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mkflashimage",
        description="Build a flash image from partition files, or split one with -r.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-l", "--layout", metavar="FILE", help="flashrom-style layout file")
    source.add_argument("-m", "--mtd", metavar="FILE", help="/proc/mtd style layout file")
    parser.add_argument("-r", "--reverse", action="store_true",
                        help="Deconstruct IMAGE into its partitions")
    parser.add_argument("-C", "--directory", default=".",
                        help="Directory holding (or receiving) the partition files")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("spec", nargs="+", metavar="[SPEC] IMAGE",
                        help="mtdparts specification (omit with -l/-m) and image file")
    return parser


def load_partitions(args: argparse.Namespace, parser: argparse.ArgumentParser) -> List[Partition]:
    file_layout = args.layout or args.mtd
    expected = 1 if file_layout else 2
    if len(args.spec) != expected:
        parser.error("expected an mtdparts specification and an image file"
                     if expected == 2 else "expected only an image file with -l/-m")

    if not file_layout:
        return parse_cmdline(args.spec[0])

    try:
        text = Path(file_layout).read_text(encoding="utf-8")
    except OSError as e:
        raise LayoutError(f"Cannot read layout file {file_layout}: {e.strerror}")
    return parse_flashrom_layout(text) if args.layout else parse_proc_mtd(text)


def print_layout(partitions: List[Partition]):
    table = Table(title="Partition Layout", header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Offset", justify="right")
    table.add_column("Size", justify="right")
    for part in partitions:
        table.add_row(part.name, f"0x{part.offset:08x}", f"0x{part.size:08x}")
    console.print(table)


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True
    )

    partitions = load_partitions(args, parser)
    image = args.spec[-1]
    if args.verbose:
        print_layout(partitions)

    if args.reverse:
        extract_image(partitions, image, args.directory)
    else:
        build_image(partitions, image, args.directory)
    return 0


def main(argv: Optional[List[str]] = None):
    try:
        sys.exit(run(argv))
    except (LayoutError, OSError) as e:
        console.print(f"[bold red]FATAL:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
