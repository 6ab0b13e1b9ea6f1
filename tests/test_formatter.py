#!/usr/bin/env python3
"""
ZONEGUARD FORMATTER SUITE
-------------------------
Console rendering of changed files, the verdict table and the summary.

Author: ZoneGuard Team
Date: 2026-10-19
"""

import io

import pytest
from rich.console import Console

from zoneguard.cli.formatter import ZoneFormatter
from zoneguard.core.models import FileCheck, RunReport, Verdict


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def formatter(output):
    return ZoneFormatter(Console(file=output, width=200, color_system=None))


def bracketed_report():
    check = FileCheck(path="zones/a[/b]", pre_serial="[1]", post_serial="[/2]",
                      verdict=Verdict.FAIL)
    check.note("serial [/red] did not increase")
    report = RunReport(target="feature[/x]", base="main[/y]", files=[check])
    report.finished = True
    return report


def test_changed_paths_are_printed_verbatim(formatter, output):
    formatter.print_changed(["zones/a[/b]", "zones/[bold]c"])
    text = output.getvalue()
    assert 'File "zones/a[/b]" changed' in text
    assert 'File "zones/[bold]c" changed' in text


def test_final_table_keeps_brackets(formatter, output):
    formatter.print_final_table(bracketed_report())
    text = output.getvalue()
    assert "zones/a[/b]" in text
    assert "[1]" in text
    assert "[/2]" in text
    assert "serial [/red] did not increase" in text


def test_summary_keeps_brackets(formatter, output):
    formatter.print_summary(bracketed_report())
    text = output.getvalue()
    assert "feature[/x]" in text
    assert "main[/y]" in text
    assert "FAILED" in text
