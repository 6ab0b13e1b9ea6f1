#!/usr/bin/env python3
"""
ZONEGUARD GIT BACKEND
---------------------
Supplies file contents and history to the audit engine by shelling out to
the `git` executable of the repository under check.

Author: ZoneGuard Team
Date: 2026-10-19
"""

import re
import logging
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from zoneguard.core.errors import ConfigError, RevisionError

logger = logging.getLogger("zoneguard.git")


class GitBackend:
    """
    Revision collaborator backed by a git work tree.

    Every query is a separate `git` invocation; nothing is cached, so the
    backend always reflects the repository as it is on disk.
    """

    def __init__(self, repo_path: str = ".", git: str = "git"):
        self.repo = Path(repo_path).resolve()
        self.git = git

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        cmd = [self.git, "-C", str(self.repo), *args]
        logger.debug("running %s", " ".join(cmd))
        try:
            return subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=check)
        except FileNotFoundError as e:
            raise RevisionError(f"git executable not found: {self.git}") from e
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode("utf-8", errors="replace").strip()
            raise RevisionError(f"git {' '.join(args)} failed: {stderr}") from e

    def revision_exists(self, path: str, revision: str) -> bool:
        result = self._run("cat-file", "-e", f"{revision}:{path}", check=False)
        return result.returncode == 0

    def read_file_at(self, path: str, revision: str) -> str:
        """Content of `path` at `revision`; raises RevisionError when absent."""
        result = self._run("show", f"{revision}:{path}")
        return result.stdout.decode("utf-8", errors="replace")

    def changed_paths(self, revision_a: str, revision_b: str) -> List[str]:
        result = self._run("diff", "--name-only", revision_a, revision_b)
        paths = []
        for line in result.stdout.decode("utf-8", errors="replace").splitlines():
            if line and line not in paths:
                paths.append(line)
        return paths

    def resolve_ancestor(self, revision: str, generations_back: int) -> str:
        """
        Commit id `generations_back` first-parent steps behind `revision`.
        Raises RevisionError when history does not reach that far.
        """
        spec = f"{revision}~{generations_back}" if generations_back else revision
        result = self._run("rev-parse", "--verify", "--quiet", f"{spec}^{{commit}}", check=False)
        if result.returncode != 0:
            raise RevisionError(f"cannot resolve revision {spec}")
        return result.stdout.decode("ascii").strip()


def compile_filters(patterns: Optional[Sequence[str]]) -> List["re.Pattern"]:
    compiled = []
    for pattern in patterns or []:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError(f"invalid file filter {pattern!r}: {e}") from e
    return compiled


def filter_paths(paths: Iterable[str], patterns: Optional[Sequence[str]]) -> List[str]:
    """
    Keeps paths matched anywhere by at least one pattern. Without patterns
    every path is kept. Order is preserved.
    """
    compiled = compile_filters(patterns)
    if not compiled:
        return list(paths)
    return [p for p in paths if any(rx.search(p) for rx in compiled)]
