#!/usr/bin/env python3
"""
PTR-Sweep - Logger Configuration
Sets up the application-wide logger.
"""
import argparse
import logging

from rich.logging import RichHandler

from .config import err_console


def setup_logging(args: argparse.Namespace):
    """
    Configures the root logger from the final, merged configuration.

    - Console logging goes to standard error, so result lines on standard
      output are never mixed with log records.
    - File logging is enabled if a log_file path is provided.

    Args:
        args: The final, merged argparse.Namespace object containing all configuration.
    """
    verbose = getattr(args, "verbose", False)
    quiet = getattr(args, "quiet", False)
    log_file = getattr(args, "log_file", None)

    if quiet:
        console_level = logging.WARNING
    elif verbose:
        console_level = logging.DEBUG
    else:
        console_level = logging.INFO

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = RichHandler(
        console=err_console,
        level=console_level,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        show_level=verbose,
    )
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        # Always log DEBUG level to file
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # asyncio logs selector details at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)
