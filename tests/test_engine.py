#!/usr/bin/env python3
"""
ZONEGUARD ENGINE SUITE
----------------------
History-walking validation against an in-memory revision history.
History is linear: c0 (root) ... cN, the target is the newest revision and
the baseline its parent.

Author: ZoneGuard Team
Date: 2026-10-19
"""

from zoneguard.core.engine import SerialAuditEngine
from zoneguard.core.models import Verdict
from vcs_fixtures import FakeBackend, zone


def build(snapshots):
    """snapshots: list of {path: serial-or-text} mappings, oldest first."""
    history = [f"c{i}" for i in range(len(snapshots))]
    files = {}
    for rev, snapshot in zip(history, snapshots):
        files[rev] = {path: (zone(v) if v is not None and not v.startswith("raw:") else v[4:])
                      for path, v in snapshot.items()}
    return FakeBackend(history, files), history[-1], history[-2]


def test_incremented_serial_passes():
    backend, target, base = build([{"db.example": "2024010100"}, {"db.example": "2024010101"}])
    report = SerialAuditEngine(backend).run(["db.example"], target, base)

    assert report.success
    assert report.exit_code == 0
    assert report.rounds == 1
    assert report.files[0].verdict is Verdict.PASS


def test_decremented_serial_fails():
    backend, target, base = build([{"db.example": "2024010101"}, {"db.example": "2024010100"}])
    report = SerialAuditEngine(backend).run(["db.example"], target, base)

    assert not report.success
    assert report.exit_code == 1
    assert report.finished
    assert report.files[0].verdict is Verdict.FAIL
    assert "not incremented" in report.files[0].messages[-1]


def test_equal_serial_fails():
    backend, target, base = build([{"db.example": "7"}, {"db.example": "7"}])
    report = SerialAuditEngine(backend).run(["db.example"], target, base)
    assert report.files[0].verdict is Verdict.FAIL


def test_serials_compare_numerically():
    backend, target, base = build([{"db.example": "9"}, {"db.example": "10"}])
    assert SerialAuditEngine(backend).run(["db.example"], target, base).success


def test_non_numeric_target_serial_fails():
    backend, target, base = build([{"db.example": "1"}, {"db.example": "2024-01-02"}])
    report = SerialAuditEngine(backend).run(["db.example"], target, base)

    assert not report.success
    assert report.files[0].verdict is Verdict.FAIL
    assert report.rounds == 1


def test_broken_baseline_walks_further_back():
    backend, target, base = build([
        {"db.example": "5"},
        {"db.example": "oops"},
        {"db.example": "6"},
    ])
    report = SerialAuditEngine(backend).run(["db.example"], target, base)

    assert report.success
    assert report.rounds == 2
    check = report.files[0]
    assert check.verdict is Verdict.PASS
    assert check.pre_serial == "5"
    assert check.generation == 1


def test_broken_baseline_does_not_fail_immediately():
    backend, target, base = build([{"db.example": "5"}, {"db.example": "x"}, {"db.example": "6"}])
    engine = SerialAuditEngine(backend, max_rounds=1)
    report = engine.run(["db.example"], target, base)

    assert report.files[0].verdict is Verdict.PENDING
    assert report.failure_reason == "exhausted"
    assert not report.success


def test_exhausting_rounds_fails_run():
    snapshots = [{"db.example": "broken"} for _ in range(15)] + [{"db.example": "1"}]
    backend, target, base = build(snapshots)
    report = SerialAuditEngine(backend).run(["db.example"], target, base)

    assert report.rounds == 10
    assert not report.finished
    assert report.failure_reason == "exhausted"
    assert report.files[0].verdict is Verdict.PENDING
    assert report.exit_code == 1


def test_running_out_of_history_fails_run():
    backend, target, base = build([{"db.example": "broken"}, {"db.example": "broken"}, {"db.example": "3"}])
    report = SerialAuditEngine(backend).run(["db.example"], target, base)

    assert report.rounds == 2
    assert report.failure_reason == "history"
    assert not report.success


def test_files_without_serial_are_skipped():
    backend, target, base = build([
        {"README": "raw:hello", "db.example": "1"},
        {"README": "raw:hello world", "db.example": "2"},
    ])
    report = SerialAuditEngine(backend).run(["README", "db.example"], target, base)

    assert report.success
    assert [c.verdict for c in report.files] == [Verdict.SKIPPED, Verdict.PASS]


def test_new_zonefile_passes_with_warning():
    backend, target, base = build([{}, {"db.new": "1"}])
    report = SerialAuditEngine(backend).run(["db.new"], target, base)

    check = report.files[0]
    assert report.success
    assert check.verdict is Verdict.PASS
    assert check.pre_serial is None
    assert any("no serial at the baseline" in m for m in check.messages)


def test_deleted_zonefile_passes():
    backend, target, base = build([{"db.old": "4"}, {}])
    report = SerialAuditEngine(backend).run(["db.old"], target, base)

    assert report.success
    assert report.files[0].verdict is Verdict.PASS
    assert report.files[0].exists_at_target is False


def test_failures_stay_sticky_across_rounds():
    """
    A file failed in round 1 is not re-examined, and its failure still
    decides the run after other files needed more rounds.
    """
    backend, target, base = build([
        {"db.a": "9", "db.b": "1"},
        {"db.a": "9", "db.b": "junk"},
        {"db.a": "8", "db.b": "2"},
    ])
    report = SerialAuditEngine(backend).run(["db.a", "db.b"], target, base)

    a, b = report.files
    assert report.rounds == 2
    assert report.finished
    assert a.verdict is Verdict.FAIL
    assert a.generation == 0
    assert b.verdict is Verdict.PASS
    assert not report.success
    # Round 2 only reads the file that needed another baseline
    assert ("db.a", "c0") not in backend.reads
    assert ("db.b", "c0") in backend.reads


def test_all_files_share_baseline_depth():
    backend, target, base = build([
        {"db.a": "1", "db.b": "1"},
        {"db.a": "bad", "db.b": "bad"},
        {"db.a": "2", "db.b": "2"},
    ])
    report = SerialAuditEngine(backend).run(["db.a", "db.b"], target, base)
    assert report.success
    assert {c.generation for c in report.files} == {1}


def test_empty_file_set_finishes():
    backend, target, base = build([{}, {}])
    report = SerialAuditEngine(backend).run([], target, base)
    assert report.success
    assert report.rounds == 1


def test_changed_files_applies_filters():
    backend, target, base = build([
        {"zones/db.a": "1", "README": "raw:a"},
        {"zones/db.a": "2", "README": "raw:b"},
    ])
    engine = SerialAuditEngine(backend)
    assert engine.changed_files(base, target) == ["README", "zones/db.a"]
    assert engine.changed_files(base, target, [r"^zones/"]) == ["zones/db.a"]
    assert engine.changed_files(base, target, [r"nomatch", r"db\."]) == ["zones/db.a"]
