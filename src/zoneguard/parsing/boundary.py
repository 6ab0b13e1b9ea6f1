#!/usr/bin/env python3
"""
ZONEGUARD RECORD BOUNDARY DETECTOR
----------------------------------
Decides whether an accumulated token sequence forms a complete resource
record: no quoted section left open and parentheses balanced.

Author: ZoneGuard Team
Date: 2026-10-19
"""

from typing import Sequence

from zoneguard.core.models import BoundaryState
from zoneguard.parsing.context import TokenizerState


def record_state(tokens: Sequence[str], quoted: bool = False) -> BoundaryState:
    """
    Classifies a candidate record.

    Excess closing parentheses are reported as MALFORMED as soon as they
    are seen; a record cannot recover from them by reading more lines.
    """
    if quoted:
        return BoundaryState.OPEN

    nesting = 0
    for token in tokens:
        if token == "(":
            nesting += 1
        elif token == ")":
            nesting -= 1
        if nesting < 0:
            return BoundaryState.MALFORMED

    return BoundaryState.CLOSED if nesting == 0 else BoundaryState.OPEN


def is_record_closed(state: TokenizerState) -> bool:
    return record_state(state.tokens, state.quoted) is BoundaryState.CLOSED
