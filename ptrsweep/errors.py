#!/usr/bin/env python3
"""
PTR-Sweep - Error Types
"""


class PtrSweepError(Exception):
    """Base class for all PTR-Sweep errors."""


class ConfigurationError(PtrSweepError):
    """Raised when startup options are malformed. Always fatal."""


class CIDRParseError(PtrSweepError, ValueError):
    """Raised when an input line is not valid CIDR notation."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Error parsing CIDR {text}: {reason}")


class OutputError(PtrSweepError):
    """Raised when result lines can no longer be written, e.g. a closed pipe."""
