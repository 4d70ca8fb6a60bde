import argparse

from . import __version__
from .config import DEFAULT_PORT, DEFAULT_WORKERS, TRANSPORT_UDP, TRANSPORTS


def setup_parser() -> argparse.ArgumentParser:
    """Creates and configures the argument parser."""
    parser = argparse.ArgumentParser(
        description=(
            "PTR-Sweep - Expand CIDR blocks read from standard input and print "
            "the reverse DNS (PTR) names of every host address."
        ),
        epilog="""
Examples:
  echo 192.168.1.0/24 | ptr-sweep
  ptr-sweep -r 1.1.1.1 -P tcp -t 32 < subnets.txt
  ptr-sweep -d -i subnets.txt > hostnames.txt
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # --- Input Configuration ---
    input_group = parser.add_argument_group('Input Configuration')
    input_group.add_argument(
        "-i", "--input",
        help="Read CIDR blocks from this file instead of standard input.")
    input_group.add_argument(
        "-c", "--config",
        help="Path to a JSON or YAML config file with sweep options.")

    # --- Resolver Control ---
    resolver_group = parser.add_argument_group('Resolver Control')
    resolver_group.add_argument(
        "-t", "--threads",
        type=int,
        default=DEFAULT_WORKERS,
        help=f"How many lookups to run concurrently (default: {DEFAULT_WORKERS}).")
    resolver_group.add_argument(
        "-r", "--resolver",
        help="IP or hostname of the DNS resolver to use instead of the system default.")
    resolver_group.add_argument(
        "-P", "--protocol",
        choices=list(TRANSPORTS),
        default=TRANSPORT_UDP,
        help=f"Protocol used to reach --resolver (default: {TRANSPORT_UDP}).")
    resolver_group.add_argument(
        "-p", "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port of the --resolver to query (default: {DEFAULT_PORT}).")

    # --- Output Control ---
    output_group = parser.add_argument_group('Output Control')
    output_group.add_argument(
        "-d", "--domain", action="store_true",
        help="Output only the resolved domain names.")
    output_group.add_argument(
        "--log-file", help="Path to a file to save detailed, verbose logs.")
    output_group.add_argument(
        "-v", "--verbose", action="store_true",
        help="Show debug logs on standard error."
    )
    output_group.add_argument(
        "-q", "--quiet", action="store_true",
        help="Only log warnings and errors on standard error."
    )

    return parser
