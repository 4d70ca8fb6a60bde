"""
PTR-Sweep Package
Bulk reverse DNS (PTR) lookups over CIDR blocks.
"""

__version__ = "1.0.0"
