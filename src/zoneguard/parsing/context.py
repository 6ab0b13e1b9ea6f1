#!/usr/bin/env python3
"""
ZONEGUARD TOKENIZER CONTEXT
---------------------------
Caller-owned state for the zonefile tokenizer. One instance lives for one
SOA record search attempt and carries quoting state across lines.

Author: ZoneGuard Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class TokenizerState:
    """
    Maintains the lexical state of a single multi-line scan.

    The lexer appends to `tokens` and mutates `quoted` and `buffer`; nothing
    is shared between independent scans.
    """
    tokens: List[str] = field(default_factory=list)  # every token emitted so far
    quoted: bool = False                             # inside "..." at end of last line
    buffer: str = ""                                 # partially accumulated token

    def reset(self):
        self.tokens = []
        self.quoted = False
        self.buffer = ""

    @property
    def drained(self) -> bool:
        """True when no quote is open and no partial token is pending."""
        return not self.quoted and not self.buffer
