#!/usr/bin/env python3
"""
ZONEGUARD SCANNER - SOA Serial Extractor
----------------------------------------
Finds the first SOA record of a zonefile snapshot and reads its serial.

The serial sits at a fixed offset behind the SOA type token
(RFC 1035: <owner> [<ttl>] [<class>] SOA <mname> <rname> ( <serial> ...),
so once the record is closed the serial is simply tokens[soa + 4]; the
parenthesis opening the multi-line form occupies one of those slots.

Only the first SOA record is considered. A candidate that does not yield a
serial does not stop the scan: later lines containing an SOA token are
tried in turn.

Author: ZoneGuard Team
Date: 2026-10-19
"""

import re
import logging
from typing import List, Optional

from zoneguard.core.models import BoundaryState, SerialFailure, SerialResult
from zoneguard.parsing.boundary import record_state
from zoneguard.parsing.context import TokenizerState
from zoneguard.parsing.lexer import ZoneLexer

logger = logging.getLogger("zoneguard.scanner")

SOA_KEYWORD = "soa"
SERIAL_OFFSET = 4

_NUMERIC = re.compile(r"[0-9]+")


def is_numeric_serial(value: Optional[str]) -> bool:
    """True for one or more ASCII decimal digits, nothing else."""
    return value is not None and _NUMERIC.fullmatch(value) is not None


def find_soa_index(tokens: List[str]) -> Optional[int]:
    for i, token in enumerate(tokens):
        if token.lower() == SOA_KEYWORD:
            return i
    return None


class ZoneScanner:
    """
    Pure function of the snapshot text: scanning the same text twice
    always gives the same result.
    """

    def __init__(self, lexer: Optional[ZoneLexer] = None):
        self.lexer = lexer or ZoneLexer()

    def _clean_artifacts(self, text: str) -> str:
        """Removes a UTF-8 BOM and normalizes line endings."""
        return text.lstrip('\ufeff').replace('\r\n', '\n')

    def _read_record(self, lines: List[str], start: int, state: TokenizerState,
                     soa_index: int) -> SerialResult:
        """
        Continues the record whose SOA line is lines[start] (already in
        `state`) until the boundary detector closes it.
        """
        serial_index = soa_index + SERIAL_OFFSET
        boundary = record_state(state.tokens, state.quoted)
        next_line = start + 1

        while boundary is BoundaryState.OPEN:
            if next_line >= len(lines):
                return SerialResult.failed(SerialFailure.UNTERMINATED)
            self.lexer.tokenize(lines[next_line], state)
            boundary = record_state(state.tokens, state.quoted)
            next_line += 1

        if boundary is BoundaryState.MALFORMED:
            return SerialResult.failed(SerialFailure.MALFORMED)

        if len(state.tokens) <= serial_index:
            return SerialResult.failed(SerialFailure.OUT_OF_RANGE)

        return SerialResult.found(state.tokens[serial_index])

    def extract_serial(self, text: str) -> SerialResult:
        """
        Returns the serial of the first SOA record that yields one.
        """
        lines = self._clean_artifacts(text).split('\n')
        last_failure = SerialFailure.NOT_FOUND

        for i, line in enumerate(lines):
            # Fresh state for every candidate line
            state = self.lexer.tokenize(line, TokenizerState())
            soa_index = find_soa_index(state.tokens)
            if soa_index is None:
                continue

            result = self._read_record(lines, i, state, soa_index)
            if result.ok:
                logger.debug("serial %s found in SOA record at line %d", result.value, i + 1)
                return result

            logger.debug("SOA candidate at line %d rejected: %s", i + 1, result.failure.value)
            last_failure = result.failure

        return SerialResult.failed(last_failure)
