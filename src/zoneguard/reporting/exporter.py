#!/usr/bin/env python3
"""
ZONEGUARD EXPORTER - Run Report as YAML
---------------------------------------
Author: ZoneGuard Team
Date: 2026-10-19
"""

import io
from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from zoneguard.core.models import FileCheck, RunReport


class ReportExporter:
    """
    Converts a RunReport into a YAML document for CI artifacts.
    Diagnostic text is advisory; only `success` and per-file `verdict` are
    meant to be read by machines.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096
        self.preferred_order = ["success", "target", "base", "rounds", "finished",
                                "failure_reason", "files"]

    def _ordered(self, data: Dict[str, Any]) -> CommentedMap:
        ordered = CommentedMap()
        keys = list(data.keys())

        def sort_logic(key):
            if key in self.preferred_order:
                return self.preferred_order.index(key)
            return len(self.preferred_order) + keys.index(key)

        for key in sorted(keys, key=sort_logic):
            ordered[key] = data[key]
        return ordered

    def _file_entry(self, check: FileCheck) -> CommentedMap:
        entry = CommentedMap()
        entry["path"] = check.path
        entry["verdict"] = check.verdict.value
        entry["post_serial"] = check.post_serial
        entry["pre_serial"] = check.pre_serial
        entry["generation"] = check.generation
        entry["messages"] = list(check.messages)
        return entry

    def to_data(self, report: RunReport) -> CommentedMap:
        return self._ordered({
            "files": [self._file_entry(c) for c in report.files],
            "target": report.target,
            "base": report.base,
            "rounds": report.rounds,
            "finished": report.finished,
            "failure_reason": report.failure_reason,
            "success": report.success,
        })

    def export(self, report: RunReport) -> str:
        stream = io.StringIO()
        self.yaml.dump(self.to_data(report), stream)
        return stream.getvalue()

    def write(self, report: RunReport, path: str):
        Path(path).write_text(self.export(report), encoding='utf-8')
