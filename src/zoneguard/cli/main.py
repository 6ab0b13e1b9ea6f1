#!/usr/bin/env python3
"""
ZONEGUARD CLI
-------------
Command-line front end of the serial checker:

  zoneguard check   verify serial increments of zonefiles changed in git
  zoneguard serial  print the SOA serial of local zonefiles

Author: ZoneGuard Team
Date: 2026-10-19
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from zoneguard.cli.formatter import ZoneFormatter, console
from zoneguard.config.settings import load_settings
from zoneguard.core.engine import SerialAuditEngine
from zoneguard.core.errors import ZoneGuardError
from zoneguard.parsing.scanner import ZoneScanner
from zoneguard.reporting.exporter import ReportExporter
from zoneguard.vcs.git import GitBackend

logger = logging.getLogger("zoneguard.cli")

# Diagnostics share stderr so stdout carries only results
err_console = Console(stderr=True)


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True
    )


class ZoneGuardCLI:
    """
    CLI wrapper that translates user commands into engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="zoneguard",
            description="ZoneGuard - SOA serial increment checker for DNS zonefiles in git",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = ZoneFormatter()
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--version", action="version", version="zoneguard v1.0.0")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        check_parser = subparsers.add_parser("check", help="Verify serials of changed zonefiles")
        check_parser.add_argument("-f", "--filter", dest="filters", action="append", metavar="REGEX",
                                  help="Only check files whose name matches REGEX (repeatable)")
        check_parser.add_argument("--base", help="Baseline revision (default: <target>~)")
        check_parser.add_argument("--target", help="Revision under check (default: HEAD)")
        check_parser.add_argument("--max-rounds", type=int, help="History walk limit (default: 10)")
        check_parser.add_argument("--repo", default=".", help="Path of the git repository")
        check_parser.add_argument("--config", help="YAML config file (default: <repo>/.zoneguard.yaml)")
        check_parser.add_argument("--report", help="Write the run report as YAML to this path")
        check_parser.add_argument("-v", "--verbose", action="store_true", default=None,
                                  help="Trace tokenizer and git activity")

        serial_parser = subparsers.add_parser("serial", help="Print the SOA serial of zonefiles")
        serial_parser.add_argument("files", nargs="+", help="Zonefile paths")
        serial_parser.add_argument("-v", "--verbose", action="store_true", help="Trace tokenizer activity")

    def _run_check(self, args: argparse.Namespace) -> int:
        settings = load_settings(
            repo_path=args.repo,
            config_path=args.config,
            overrides={
                "filters": args.filters,
                "base": args.base,
                "target": args.target,
                "max_rounds": args.max_rounds,
                "verbose": args.verbose,
            }
        )
        setup_logging(settings.verbose)

        engine = SerialAuditEngine(GitBackend(args.repo), max_rounds=settings.max_rounds)
        base, target = settings.baseline, settings.target

        self.formatter.print_header("Zonefile Serial Check")
        console.print(f"Detecting changed files... ({escape(base)}...{escape(target)})")
        paths = engine.changed_files(base, target, settings.filters)
        self.formatter.print_changed(paths)

        if not paths:
            console.print("No zonefiles changed. Exiting")
            return 0

        report = engine.run(paths, target=target, base=base)
        self.formatter.print_final_table(report)
        self.formatter.print_summary(report)

        if args.report:
            ReportExporter().write(report, args.report)
            logger.info("Report written to %s", args.report)

        return report.exit_code

    def _run_serial(self, args: argparse.Namespace) -> int:
        setup_logging(args.verbose)
        scanner = ZoneScanner()
        status = 0

        for name in args.files:
            path = Path(name)
            try:
                text = path.read_text(encoding='utf-8-sig', errors='replace')
            except OSError as e:
                err_console.print(f"[bold red]Error:[/bold red] {escape(name)}: {escape(e.strerror or str(e))}")
                status = 1
                continue

            result = scanner.extract_serial(text)
            if result.ok:
                console.print(f"{escape(name)}: {escape(result.value)}")
            else:
                err_console.print(f"[bold red]{escape(name)}:[/bold red] {result.failure.value}")
                status = 1

        return status

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point; returns the process exit status."""
        args = self.parser.parse_args(argv)
        if args.command == "check":
            return self._run_check(args)
        if args.command == "serial":
            return self._run_serial(args)
        self.parser.print_help()
        return 2


def main(argv: Optional[List[str]] = None):
    """Application entry point with interrupt handling."""
    try:
        sys.exit(ZoneGuardCLI().run(argv))
    except ZoneGuardError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(2)
    except KeyboardInterrupt:
        err_console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
