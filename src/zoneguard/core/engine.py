#!/usr/bin/env python3
"""
ZONEGUARD ENGINE - History-Walking Serial Auditor
-------------------------------------------------
Checks that every changed zonefile carries an SOA serial greater than the
one it had at the baseline revision.

A baseline whose serial is unusable (for instance a broken intermediate
commit) does not fail the run: the engine walks one generation further
back for the affected files and tries again, up to `max_rounds` times.
All files share the same baseline depth within a round.

Author: ZoneGuard Team
Date: 2026-10-19
"""

import logging
from typing import List, Optional, Sequence

from zoneguard.core.errors import RevisionError
from zoneguard.core.models import FileCheck, RunReport, Verdict
from zoneguard.parsing.scanner import ZoneScanner, is_numeric_serial
from zoneguard.vcs.git import filter_paths

logger = logging.getLogger("zoneguard.engine")

DEFAULT_MAX_ROUNDS = 10


class SerialAuditEngine:
    """
    Principal orchestrator of a serial check.

    `backend` is any object offering revision_exists, read_file_at,
    changed_paths and resolve_ancestor (see zoneguard.vcs.git.GitBackend).
    """

    def __init__(self, backend, max_rounds: int = DEFAULT_MAX_ROUNDS,
                 scanner: Optional[ZoneScanner] = None):
        self.backend = backend
        self.max_rounds = max_rounds
        self.scanner = scanner or ZoneScanner()

    def changed_files(self, base: str, target: str,
                      filters: Optional[Sequence[str]] = None) -> List[str]:
        """Paths changed between base and target that pass the name filters."""
        return filter_paths(self.backend.changed_paths(base, target), filters)

    def _serial_at(self, check: FileCheck, revision: str) -> Optional[str]:
        """Serial of the file at `revision`, or None when there is none."""
        if self.backend.revision_exists(check.path, revision):
            text = self.backend.read_file_at(check.path, revision)
            result = self.scanner.extract_serial(text)
            if result.ok:
                logger.debug("%s@%s: serial %s", check.path, revision, result.value)
                return result.value
            logger.debug("%s@%s: %s", check.path, revision, result.failure.value)

        logger.warning('"%s" does not have a serial at %s', check.path, revision)
        return None

    def _evaluate(self, check: FileCheck):
        """Applies the validation rules to one file for the current baseline."""
        check.needs_retry = False
        pre, post = check.pre_serial, check.post_serial

        if pre is None and post is None:
            check.verdict = Verdict.SKIPPED
            check.note("does not seem to be a valid zonefile, skipping")
            logger.info('File "%s" does not seem to be a valid zonefile, skipping', check.path)
            return

        if check.exists_at_target and pre is None:
            check.note("exists at target but has no serial at the baseline")
            logger.warning('File "%s" exists at target but has no serial at the baseline', check.path)

        if pre is not None and not is_numeric_serial(pre):
            # The baseline itself is broken; try an older one next round
            check.needs_retry = True
            check.verdict = Verdict.PENDING
            check.note(f"baseline serial {pre!r} is invalid, walking further back")
            logger.error('Baseline serial of "%s" is invalid (%r), adding it to the next round',
                         check.path, pre)
            return

        if post is None:
            check.verdict = Verdict.PASS
            check.note("no serial at target")
            logger.warning('File "%s" has no serial at target', check.path)
            return

        if not is_numeric_serial(post):
            check.verdict = Verdict.FAIL
            check.note(f"invalid, non-numeric serial {post!r}")
            logger.error('File "%s" has invalid, non-numeric serial "%s"', check.path, post)
            return

        if pre is not None and int(post) <= int(pre):
            check.verdict = Verdict.FAIL
            check.note(f"serial not incremented: {post} (new) <= {pre} (old)")
            logger.error('File "%s" has invalid serial: %s (new) <= %s (old)', check.path, post, pre)
            return

        check.verdict = Verdict.PASS
        if pre is None:
            check.note(f"new serial {post}")
        else:
            check.note(f"{post} (new) > {pre} (old)")
        logger.info('File "%s" is OK (%s)', check.path, check.messages[-1])

    def run(self, paths: Sequence[str], target: str, base: str) -> RunReport:
        """
        Validates `paths` at `target` against `base` and its ancestors.

        Round 0 uses `base` itself, round N its Nth ancestor. After the first
        round only files still waiting for a usable baseline are revisited.
        """
        report = RunReport(target=target, base=base,
                           files=[FileCheck(path=p) for p in paths])

        for check in report.files:
            check.exists_at_target = self.backend.revision_exists(check.path, target)
            check.post_serial = self._serial_at(check, target)

        pending = list(report.files)
        for generation in range(self.max_rounds):
            try:
                baseline = self.backend.resolve_ancestor(base, generation)
            except RevisionError as e:
                logger.error("Can't roll history back any further: %s", e)
                report.failure_reason = "history"
                break

            report.rounds = generation + 1
            logger.info("Round %d: checking %d file(s) against %s",
                        report.rounds, len(pending), baseline)

            for check in pending:
                check.generation = generation
                check.pre_serial = self._serial_at(check, baseline)
                self._evaluate(check)

            pending = [c for c in pending if c.needs_retry]
            if not pending:
                report.finished = True
                break

        if not report.finished:
            if report.failure_reason is None:
                report.failure_reason = "exhausted"
            logger.error("Failed to find a previous revision with a valid serial. Giving up")

        return report
