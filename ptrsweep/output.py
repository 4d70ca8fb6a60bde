#!/usr/bin/env python3
"""
PTR-Sweep - Output Module
Renders lookup results as plain text lines.
"""
import sys
from typing import Optional, TextIO


def strip_root_dot(hostname: str) -> str:
    """Remove a single trailing root-label dot, if present."""
    if hostname.endswith("."):
        return hostname[:-1]
    return hostname


def format_result(address: str, hostname: str, domain_only: bool = False) -> str:
    """Format one resolved name as '<address>\\t<hostname>' or just '<hostname>'."""
    hostname = strip_root_dot(hostname)
    if domain_only:
        return hostname
    return f"{address}\t{hostname}"


def write_line(line: str, stream: Optional[TextIO] = None):
    """
    Write a whole line with a single call so lines from workers do not split,
    then flush so results show up as they are found, even through a pipe.
    """
    stream = stream or sys.stdout
    stream.write(line + "\n")
    stream.flush()
