#!/usr/bin/env python3
"""
ZONEGUARD GIT INTEGRATION SUITE
-------------------------------
Runs the git collaborator and the full engine against throwaway
repositories. Skipped when git is not installed.

Author: ZoneGuard Team
Date: 2026-10-19
"""

import shutil

import pytest

from zoneguard.core.engine import SerialAuditEngine
from zoneguard.core.errors import ConfigError, RevisionError
from zoneguard.core.models import Verdict
from zoneguard.vcs.git import GitBackend, filter_paths
from vcs_fixtures import git, make_repo, zone

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


@pytest.fixture
def repo(tmp_path):
    return make_repo(tmp_path / "repo", [
        {"zones/db.example": zone("2024010100"), "README": "zones\n"},
        {"zones/db.example": zone("broken")},
        {"zones/db.example": zone("2024010102"), "zones/db.other": zone("1"), "README": "more\n"},
    ])


def test_changed_paths(repo):
    backend = GitBackend(str(repo))
    assert backend.changed_paths("HEAD~", "HEAD") == ["README", "zones/db.example", "zones/db.other"]


def test_read_file_at_and_exists(repo):
    backend = GitBackend(str(repo))
    assert backend.revision_exists("zones/db.example", "HEAD~2")
    assert not backend.revision_exists("zones/db.other", "HEAD~")
    assert "2024010100" in backend.read_file_at("zones/db.example", "HEAD~2")
    with pytest.raises(RevisionError):
        backend.read_file_at("zones/db.other", "HEAD~")


def test_resolve_ancestor(repo):
    backend = GitBackend(str(repo))
    root = git(repo, "rev-list", "--max-parents=0", "HEAD")
    assert backend.resolve_ancestor("HEAD", 2) == root
    assert backend.resolve_ancestor("HEAD~", 1) == root
    with pytest.raises(RevisionError):
        backend.resolve_ancestor("HEAD", 3)


def test_engine_walks_past_broken_commit(repo):
    engine = SerialAuditEngine(GitBackend(str(repo)))
    paths = engine.changed_files("HEAD~", "HEAD", [r"^zones/"])
    report = engine.run(paths, target="HEAD", base="HEAD~")

    assert report.success
    assert report.rounds == 2
    example, other = report.files
    assert example.verdict is Verdict.PASS
    assert example.pre_serial == "2024010100"
    assert other.verdict is Verdict.PASS   # new file, first round


def test_missing_git_executable(tmp_path):
    backend = GitBackend(str(tmp_path), git="definitely-not-git")
    with pytest.raises(RevisionError):
        backend.changed_paths("a", "b")


def test_filter_paths():
    paths = ["zones/db.a", "README", "zones/db.b"]
    assert filter_paths(paths, None) == paths
    assert filter_paths(paths, [r"db\.b", "READ"]) == ["README", "zones/db.b"]
    with pytest.raises(ConfigError):
        filter_paths(paths, ["("])
