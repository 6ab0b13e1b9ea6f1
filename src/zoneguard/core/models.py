#!/usr/bin/env python3
"""
ZONEGUARD CORE MODELS
---------------------
Defines the fundamental data structures used across the ZoneGuard engine.
Content problems never raise: every extraction returns one of the result
types below and the caller checks it immediately.

Author: ZoneGuard Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class BoundaryState(Enum):
    """Outcome of a record-boundary check on an accumulated token sequence."""
    CLOSED = "closed"
    OPEN = "open"
    MALFORMED = "malformed"  # more ')' than '(' seen so far


class SerialFailure(Enum):
    """Why a zonefile snapshot did not yield a serial."""
    NOT_FOUND = "no SOA record"
    MALFORMED = "unbalanced parentheses in SOA record"
    OUT_OF_RANGE = "SOA record ends before the serial field"
    UNTERMINATED = "SOA record is never closed"


@dataclass(frozen=True)
class SerialResult:
    """
    Either a serial value or a typed failure reason, never both.
    """
    value: Optional[str] = None
    failure: Optional[SerialFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.value is not None

    @classmethod
    def found(cls, value: str) -> "SerialResult":
        return cls(value=value)

    @classmethod
    def failed(cls, reason: SerialFailure) -> "SerialResult":
        return cls(failure=reason)


class Verdict(Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    SKIPPED = "SKIPPED"
    PENDING = "PENDING"    # no valid baseline found before the walk ended


@dataclass
class FileCheck:
    """
    The validation record of one changed file.

    Created once per run and updated in place every round the file is
    re-examined against an older baseline revision.
    """
    path: str
    post_serial: Optional[str] = None   # serial at the target revision
    pre_serial: Optional[str] = None    # serial at the current baseline
    exists_at_target: bool = False
    needs_retry: bool = False
    verdict: Verdict = Verdict.PENDING
    generation: int = 0                 # baseline depth of the last evaluation
    messages: List[str] = field(default_factory=list)

    def note(self, message: str):
        self.messages.append(message)


@dataclass
class RunReport:
    """Aggregate outcome of one validation run over a fixed file set."""
    target: str
    base: str
    files: List[FileCheck] = field(default_factory=list)
    rounds: int = 0
    finished: bool = False
    failure_reason: Optional[str] = None   # "exhausted" or "history"

    @property
    def success(self) -> bool:
        if not self.finished or self.failure_reason:
            return False
        return not any(f.verdict == Verdict.FAIL for f in self.files)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def count(self, verdict: Verdict) -> int:
        return sum(1 for f in self.files if f.verdict == verdict)
