#!/usr/bin/env python3
"""
PTR-Sweep - Configuration Manager Module
Handles loading and merging of settings from command-line arguments and config files.
"""
import argparse
import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import yaml
from rich.markup import escape

from .config import err_console
from .errors import ConfigurationError
from .resolver import ResolverConfig, build_resolver_config

logger = logging.getLogger(__name__)

# Options that must be real booleans, also when they come from a config file
BOOLEAN_OPTIONS = ("domain", "verbose", "quiet")


def deep_merge_dicts(base: Dict[str, Any], new: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges two dictionaries. 'new' values overwrite 'base' values.
    If both values for a key are dictionaries, it merges them recursively.
    """
    merged = base.copy()
    for key, value in new.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config_file(file_path: str) -> Dict[str, Any]:
    """Loads a configuration file, supporting JSON and YAML."""
    _, ext = os.path.splitext(file_path)
    ext = ext.lower()

    with open(file_path, "r") as f:
        if ext == ".json":
            data = json.load(f)
        elif ext in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            raise ValueError(
                f"Unsupported config file extension: {ext}. Please use .json, .yaml, or .yml."
            )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("The config file must contain a mapping of option names to values.")
    # Accept both 'log-file' and 'log_file' style keys
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def explicit_cli_args(
    parser: argparse.ArgumentParser, argv: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Returns only the options actually given on the command line, including ones
    whose value happens to equal the parser default.
    """
    saved = [(action, action.default) for action in parser._actions]
    for action, _ in saved:
        action.default = argparse.SUPPRESS
    try:
        return vars(parser.parse_args(argv))
    finally:
        for action, default in saved:
            action.default = default


def validate_settings(args: argparse.Namespace) -> ResolverConfig:
    """
    Checks the merged settings and builds the resolver configuration.

    Raises:
        ConfigurationError: If any option has an invalid value.
    """
    try:
        threads = int(args.threads)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid thread count '{args.threads}'.") from e
    if threads < 1:
        raise ConfigurationError(f"Invalid thread count '{threads}'. Must be at least 1.")
    args.threads = threads

    for flag in BOOLEAN_OPTIONS:
        value = getattr(args, flag, False)
        if not isinstance(value, bool):
            raise ConfigurationError(f"Invalid value '{value}' for '{flag}'. Use true or false.")

    resolver_config = build_resolver_config(args.resolver, args.port, args.protocol)
    args.port = resolver_config.port
    args.protocol = resolver_config.transport
    return resolver_config


def setup_configuration(
    parser: argparse.ArgumentParser, argv: Optional[List[str]] = None
) -> Tuple[Optional[argparse.Namespace], Optional[ResolverConfig]]:
    """
    Parses CLI args, loads the config file, merges and validates settings.
    This is the single source of truth for all configuration.

    The priority is:
    1. Parser defaults
    2. Values from the JSON/YAML config file (if provided, overrides defaults)
    3. Values explicitly set via command-line arguments (highest priority, overrides all)

    Args:
        parser: The ArgumentParser object.
        argv: Arguments to parse instead of sys.argv.

    Returns:
        A tuple of the final, merged configuration as a namespace and the
        resolver configuration, or (None, None) on error.
    """
    cli_args = parser.parse_args(argv)

    # 1. Establish base configuration: Start with parser defaults
    defaults = vars(parser.parse_args([]))

    # 2. Layer config file settings over defaults
    config_data: Dict[str, Any] = {}
    config_file_path = cli_args.config
    if config_file_path:
        try:
            config_data = load_config_file(config_file_path)
        except FileNotFoundError:
            err_console.print(
                f"[bold red]Error: Config file '{config_file_path}' not found.[/bold red]"
            )
            return None, None
        except (json.JSONDecodeError, yaml.YAMLError, ValueError) as e:
            err_console.print(
                f"[bold red]Error: Could not decode config file '{config_file_path}'. {escape(str(e))}[/bold red]"
            )
            return None, None
        except OSError as e:
            err_console.print(
                f"[bold red]Error: Could not read config file '{config_file_path}'. {escape(str(e))}[/bold red]"
            )
            return None, None

    # 3. Layer explicit CLI arguments over the top (highest priority)
    cli_overrides = explicit_cli_args(parser, argv)

    final_config = deep_merge_dicts(deep_merge_dicts(defaults, config_data), cli_overrides)
    final_args = argparse.Namespace(**final_config)

    try:
        resolver_config = validate_settings(final_args)
    except ConfigurationError as e:
        err_console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        return None, None

    return final_args, resolver_config
