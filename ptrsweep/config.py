#!/usr/bin/env python3
from rich.console import Console

# Diagnostics and logs go to stderr; stdout carries only result lines
err_console = Console(stderr=True)

DEFAULT_WORKERS = 8
DEFAULT_PORT = 53

# Transport names accepted for a custom resolver
TRANSPORT_UDP = "udp"
TRANSPORT_TCP = "tcp"
TRANSPORTS = (TRANSPORT_UDP, TRANSPORT_TCP)
