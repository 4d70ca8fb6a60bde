#!/usr/bin/env python3
"""
PTR-Sweep - Resolver Configuration
Builds the reverse lookup callable shared by every worker.

The configuration is a frozen value created once at startup. Workers never see
a resolver object directly; they receive the `lookup` coroutine function built
here, so pointing queries at a custom server never mutates global state.
"""
import ipaddress
import logging
import socket
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from .config import DEFAULT_PORT, TRANSPORT_TCP, TRANSPORT_UDP, TRANSPORTS
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Awaitable[List[str]]]

# Errors treated as "no PTR record" by the workers
LOOKUP_ERRORS = (dns.exception.DNSException, OSError, ValueError)


@dataclass(frozen=True)
class ResolverConfig:
    """Which DNS server to query and how to reach it."""

    host: Optional[str] = None
    port: int = DEFAULT_PORT
    transport: str = TRANSPORT_UDP

    @property
    def use_system_default(self) -> bool:
        return self.host is None

    @property
    def use_tcp(self) -> bool:
        return not self.use_system_default and self.transport == TRANSPORT_TCP

    def describe(self) -> str:
        if self.use_system_default:
            return "system default resolver"
        return f"{self.host} port {self.port}/{self.transport}"


def resolve_nameserver(host: str) -> str:
    """
    Return the IP address for a resolver given as an IP literal or a hostname.

    Raises:
        ConfigurationError: If the hostname cannot be resolved.
    """
    host = host.strip().strip("[]")
    try:
        return str(ipaddress.ip_address(host))
    except ValueError:
        pass
    try:
        infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_UDP)
    except (socket.gaierror, UnicodeError) as e:
        raise ConfigurationError(f"Could not resolve DNS resolver '{host}': {e}") from e
    if not infos:
        raise ConfigurationError(f"Could not resolve DNS resolver '{host}'.")
    address = infos[0][4][0]
    logger.debug(f"Resolver '{host}' resolved to {address}")
    return address


def build_resolver_config(
    host: Optional[str], port: int = DEFAULT_PORT, transport: str = TRANSPORT_UDP
) -> ResolverConfig:
    """Validate raw option values and produce an immutable ResolverConfig."""
    transport = (transport or TRANSPORT_UDP).lower()
    if transport not in TRANSPORTS:
        raise ConfigurationError(
            f"Invalid protocol '{transport}'. Choose one of: {', '.join(TRANSPORTS)}."
        )
    try:
        port = int(port)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid resolver port '{port}'.") from e
    if not 0 < port <= 65535:
        raise ConfigurationError(f"Invalid resolver port '{port}'. Must be 1-65535.")

    if not host:
        return ResolverConfig(host=None, port=port, transport=transport)
    return ResolverConfig(host=resolve_nameserver(host), port=port, transport=transport)


def create_resolver(config: ResolverConfig) -> dns.asyncresolver.Resolver:
    """
    Create the dnspython resolver described by the config.

    With no custom host the resolver reads the system configuration unchanged.
    Otherwise it ignores the system servers and sends every query to the
    configured host and port.
    """
    if config.use_system_default:
        try:
            return dns.asyncresolver.Resolver()
        except dns.resolver.NoResolverConfiguration as e:
            raise ConfigurationError(f"No system DNS resolver configuration found: {e}") from e

    resolver = dns.asyncresolver.Resolver(configure=False)
    # Port first: newer dnspython binds it to each nameserver when they are set
    resolver.port = config.port
    resolver.nameservers = [config.host]
    return resolver


def build_lookup(
    config: ResolverConfig, resolver: Optional[dns.asyncresolver.Resolver] = None
) -> Lookup:
    """
    Return a coroutine function mapping an address to its PTR hostnames.

    Hostnames are returned as dnspython renders them, with the trailing root
    dot. Resolution errors propagate to the caller.
    """
    if resolver is None:
        resolver = create_resolver(config)
    tcp = config.use_tcp

    async def lookup(address: str) -> List[str]:
        answer = await resolver.resolve_address(address, tcp=tcp)
        return [rdata.target.to_text() for rdata in answer]

    return lookup
