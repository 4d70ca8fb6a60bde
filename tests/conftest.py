"""
Pytest shared fixtures for PTR-Sweep.
"""
import dns.resolver
import pytest

# Sample PTR data served by the fake resolver. Addresses not listed here
# behave like NXDOMAIN.
SAMPLE_PTR_RECORDS = {
    "192.0.2.1": ["gw.example.com."],
    "192.0.2.2": ["web.example.com.", "www.example.com."],
    "2001:db8::1": ["v6.example.com."],
}


def make_fake_lookup(records, calls=None, error=dns.resolver.NXDOMAIN):
    """Builds an async lookup that answers from `records` and records each call."""

    async def lookup(address):
        if calls is not None:
            calls.append(address)
        if address in records:
            return list(records[address])
        raise error()

    return lookup


@pytest.fixture
def lookup_calls():
    """A list the fake lookup appends every queried address to."""
    return []


@pytest.fixture
def fake_lookup(lookup_calls):
    """A lookup backed by SAMPLE_PTR_RECORDS."""
    return make_fake_lookup(SAMPLE_PTR_RECORDS, lookup_calls)
