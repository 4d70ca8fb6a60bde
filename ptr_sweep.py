#!/usr/bin/env python3
"""
PTR-Sweep
Bulk reverse DNS reconnaissance: expand CIDR blocks read from standard input
and print the PTR names of every host address.
"""

import asyncio
import logging
import os
import sys
from typing import List, Optional

from rich.markup import escape

from ptrsweep.config import err_console
from ptrsweep.config_manager import setup_configuration
from ptrsweep.errors import ConfigurationError, OutputError
from ptrsweep.logger_config import setup_logging
from ptrsweep.orchestrator import open_input, prepare_stdin, run_sweep
from ptrsweep.parser_setup import setup_parser
from ptrsweep.resolver import build_lookup

logger = logging.getLogger(__name__)


def _fail(message: str) -> int:
    err_console.print(f"[bold red]Error: {escape(message)}[/bold red]")
    return 1


def _silence_stdout():
    """Point stdout at devnull so the interpreter's final flush cannot fail again."""
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError):
        # stdout has no file descriptor (e.g. replaced in tests); nothing to redirect
        pass


async def main(argv: Optional[List[str]] = None) -> int:
    parser = setup_parser()

    # Get the final configuration and the resolver to use.
    args, resolver_config = setup_configuration(parser, argv)

    if args is None:  # An error occurred during config loading
        return 1

    try:
        setup_logging(args)
    except OSError as e:
        return _fail(f"Could not open log file '{args.log_file}'. {e}")

    try:
        lookup = build_lookup(resolver_config)
    except ConfigurationError as e:
        return _fail(str(e))

    logger.debug(f"Using {resolver_config.describe()} with {args.threads} workers")

    if args.input:
        try:
            stream = open_input(args.input)
        except OSError as e:
            return _fail(f"Could not open input file '{args.input}'. {e}")
    else:
        stream = prepare_stdin(sys.stdin)

    try:
        await run_sweep(stream, lookup, workers=args.threads, domain_only=args.domain)
    except OutputError as e:
        if isinstance(e.__cause__, BrokenPipeError):
            # The reader went away, as with `| head`: stop without a traceback
            _silence_stdout()
            return 1
        return _fail(str(e))
    finally:
        if args.input:
            stream.close()

    return 0


def main_wrapper():
    """Synchronous wrapper to run the async main function."""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        err_console.print("\n[bold yellow]Sweep aborted by user.[/bold yellow]")
        exit_code = 130
    except BrokenPipeError:
        _silence_stdout()
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main_wrapper()
