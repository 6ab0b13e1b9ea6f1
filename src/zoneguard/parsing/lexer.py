#!/usr/bin/env python3
"""
ZONEGUARD LEXER - Zonefile Tokenizer
------------------------------------
Breaks zonefile lines into tokens following master file syntax:

  * whitespace separates tokens
  * "quoted sections" form one token and may span lines
  * unquoted, unescaped '(' and ')' are always tokens of their own
  * an unquoted, unescaped ';' starts a comment running to end of line
  * a backslash makes the next character literal; outside quotes the
    backslash itself is dropped, inside quotes it is kept unless it
    escapes a '"'

State that must survive a line break lives in a caller-owned
TokenizerState; the lexer itself holds nothing between calls.

Author: ZoneGuard Team
Date: 2026-10-19
"""

import logging
from typing import List

from zoneguard.parsing.context import TokenizerState

logger = logging.getLogger("zoneguard.lexer")

ESCAPE = "\\"
QUOTE = '"'
COMMENT = ";"
BRACES = ("(", ")")


class ZoneLexer:
    """
    Character-level tokenizer for one line at a time.
    """

    def _flush(self, state: TokenizerState):
        if state.buffer:
            state.tokens.append(state.buffer)
            state.buffer = ""

    def tokenize(self, line: str, state: TokenizerState) -> TokenizerState:
        """
        Appends the tokens of `line` to `state.tokens` and returns the state.

        A quoted section still open at end of line keeps its buffer and gets
        a newline appended, so the token continues on the next line.
        """
        escaped = False   # previous character was a backslash
        held = False      # that backslash was consumed as an escape marker

        for char in line:
            if escaped:
                if state.quoted and char == QUOTE:
                    # Inside quotes only an escaped quote drops its backslash
                    state.buffer = state.buffer[:-1] + char
                else:
                    state.buffer += char
                # A literal backslash still escapes whatever follows it
                escaped, held = char == ESCAPE, False
                continue

            if char == ESCAPE:
                escaped = True
                if state.quoted:
                    state.buffer += char
                else:
                    held = True
                continue

            if state.quoted:
                if char == QUOTE:
                    state.quoted = False
                else:
                    state.buffer += char
                continue

            if char == QUOTE:
                state.quoted = True
            elif char == COMMENT:
                break
            elif char in BRACES:
                self._flush(state)
                state.tokens.append(char)
            elif char.isspace():
                self._flush(state)
            else:
                state.buffer += char

        if held:
            # Dangling escape marker at end of line stays literal
            state.buffer += ESCAPE

        if state.quoted:
            state.buffer += "\n"
        else:
            self._flush(state)

        logger.debug("tokenized %r -> %r (quoted=%s)", line, state.tokens, state.quoted)
        return state

    def tokenize_line(self, line: str) -> List[str]:
        """Tokenizes a single independent line with fresh state."""
        return self.tokenize(line, TokenizerState()).tokens
