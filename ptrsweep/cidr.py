#!/usr/bin/env python3
"""
PTR-Sweep - CIDR Expander
Turns one line of CIDR notation into the host addresses of that block.
"""
import ipaddress
from typing import Iterator, Optional, Union

from .errors import CIDRParseError

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

# Blocks smaller than this have no usable hosts once the network and
# broadcast addresses are dropped.
MIN_BLOCK_SIZE = 3


def parse_cidr(text: str) -> IPNetwork:
    """
    Parse a CIDR string such as '192.168.1.0/24' or '2001:db8::/126'.

    Host bits may be set in the input; the network base address is computed
    by masking them off.

    Raises:
        CIDRParseError: If the text is not an address followed by a prefix length.
    """
    candidate = text.strip()
    if "/" not in candidate:
        raise CIDRParseError(text, "missing prefix length")
    try:
        return ipaddress.ip_network(candidate, strict=False)
    except ValueError as e:
        raise CIDRParseError(text, str(e)) from e


def increment_address(packed: bytes) -> Optional[bytes]:
    """
    Add one to a big-endian address, carrying from the last byte towards the first.

    Returns None when the address was all ones and the increment overflowed.
    """
    octets = bytearray(packed)
    for i in range(len(octets) - 1, -1, -1):
        octets[i] = (octets[i] + 1) & 0xFF
        if octets[i]:
            return bytes(octets)
    return None


def iter_block(network: IPNetwork) -> Iterator[str]:
    """Yield every address in the block, base address first, in ascending order."""
    packed: Optional[bytes] = network.network_address.packed
    while packed is not None:
        address = ipaddress.ip_address(packed)
        if address not in network:
            break
        yield str(address)
        packed = increment_address(packed)


def _host_addresses(network: IPNetwork) -> Iterator[str]:
    if network.num_addresses < MIN_BLOCK_SIZE:
        return
    addresses = iter_block(network)
    next(addresses)  # network address
    previous = next(addresses)
    for current in addresses:
        yield previous
        previous = current
    # 'previous' now holds the broadcast address and is dropped


def expand_cidr(text: str) -> Iterator[str]:
    """
    Expand a CIDR block into its host addresses, excluding the network and
    broadcast addresses.

    The text is parsed before anything is yielded, so a malformed block raises
    CIDRParseError immediately and never produces partial results. Blocks with
    fewer than three addresses (IPv4 /31 and /32, IPv6 /127 and /128) yield
    nothing.
    """
    network = parse_cidr(text)
    return _host_addresses(network)
