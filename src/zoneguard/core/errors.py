#!/usr/bin/env python3
"""
ZONEGUARD ERRORS
----------------
Exceptions for collaborator and setup failures. Zonefile content problems
are reported through result types in core.models instead.

Author: ZoneGuard Team
Date: 2026-10-19
"""


class ZoneGuardError(Exception):
    """Base class for every error the command line turns into an exit code."""


class RevisionError(ZoneGuardError):
    """A revision or a file at a revision could not be resolved."""


class ConfigError(ZoneGuardError):
    """Invalid configuration file, environment or command-line option."""


class LayoutError(ZoneGuardError):
    """Unparseable or inconsistent flash partition layout."""
