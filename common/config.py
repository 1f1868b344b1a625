"""
Configuration handling for Pickpocket.

This module loads configuration settings from a YAML file and from environment
variables (optionally read from a .env file) and applies them to parsed
command-line arguments.

Configuration is loaded from the following sources, in order of precedence:
1. Command-line arguments
2. Configuration file (YAML)
3. Environment variables (.env file)

The YAML file has a ``global`` section and one section per destination, e.g.::

    global:
      include-read: true
      mode: stepwise
    raindrop-api:
      api-token: abcdef0123456789
      collection-id: 0
"""

import argparse
import logging
import os
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from common.logging import get_or_setup_logger

ENV_PREFIX = "PICKPOCKET_"
CONFIG_FILE_NAME = "pickpocket.yaml"
SINK_SECTIONS = ("raindrop-api", "csv")
# Key under which load_config returns the environment variable sections
ENV_LAYER = "environment"


def get_config_file_path() -> str:
    """
    Get the path to the configuration file.

    The configuration file is searched for in the following locations:
    1. The current directory (./pickpocket.yaml)
    2. The user's home directory (~/.pickpocket.yaml)

    Returns
    -------
    str
        The path to the configuration file, or an empty string if not found.
    """
    if os.path.exists(CONFIG_FILE_NAME):
        return CONFIG_FILE_NAME

    home_config = os.path.expanduser(f"~/.{CONFIG_FILE_NAME}")
    if os.path.exists(home_config):
        return home_config

    return ""


def get_env_file_path() -> str:
    """
    Get the path to the .env file.

    The .env file is searched for in the following locations:
    1. The current directory (./.env)
    2. The user's home directory (~/.pickpocket.env)

    Returns
    -------
    str
        The path to the .env file, or an empty string if not found.
    """
    if os.path.exists(".env"):
        return ".env"

    home_env = os.path.expanduser("~/.pickpocket.env")
    if os.path.exists(home_env):
        return home_env

    return ""


def convert_env_value(value: str) -> Any:
    """Convert an environment variable string to bool, int or float where it looks like one."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    if value.isdigit():
        return int(value)
    if value.replace(".", "", 1).isdigit() and value.count(".") == 1:
        return float(value)
    return value


def load_env_vars() -> Dict[str, Any]:
    """
    Load ``PICKPOCKET_*`` environment variables, reading a .env file first if one exists.

    Returns
    -------
    Dict[str, Any]
        Variables keyed by their dashed lowercase name, e.g.
        ``PICKPOCKET_STEP_DELAY`` becomes ``step-delay``.
    """
    logger = get_or_setup_logger()

    env_file = get_env_file_path()
    if env_file:
        try:
            load_dotenv(env_file)
            logger.info(f"Loaded environment variables from {env_file}")
        except OSError as e:
            logger.warning(f"Failed to load environment variables from {env_file}: {e}")
    else:
        logger.debug("No .env file found")

    env_vars = {}
    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX):
            config_key = key[len(ENV_PREFIX):].lower().replace("_", "-")
            env_vars[config_key] = convert_env_value(value)

    return env_vars


def _section_for_key(key: str):
    for section in sorted(SINK_SECTIONS, key=len, reverse=True):
        if key.startswith(section + "-"):
            return section, key[len(section) + 1:]
    return "global", key


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file and environment variables.

    Parameters
    ----------
    config_file : str, optional
        Path to the configuration file. If not provided, the default locations
        will be searched.

    Returns
    -------
    Dict[str, Any]
        The YAML sections, with the environment variable sections under the
        ``ENV_LAYER`` key, or an empty dictionary if no configuration sources
        are available or can't be parsed.
    """
    logger = get_or_setup_logger()
    config: Dict[str, Dict[str, Any]] = {}

    # Environment variables are kept in their own layer (lowest precedence)
    env_vars = load_env_vars()
    if env_vars:
        env_config: Dict[str, Dict[str, Any]] = {}
        for key, value in env_vars.items():
            section, option = _section_for_key(key)
            env_config.setdefault(section, {})[option] = value
        config[ENV_LAYER] = env_config
        logger.debug(f"Loaded {len(env_vars)} environment variables")

    if not config_file:
        config_file = get_config_file_path()

    if config_file:
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                file_config = yaml.safe_load(f)

            if not isinstance(file_config, dict):
                logger.warning(f"Invalid configuration format in {config_file}")
            else:
                for section, values in file_config.items():
                    if section == ENV_LAYER:
                        logger.warning(f"Ignoring reserved configuration section {section!r}")
                        continue
                    if not isinstance(values, dict):
                        logger.warning(f"Ignoring configuration section {section!r}: expected a mapping")
                        continue
                    config.setdefault(section, {}).update(values)
                logger.info(f"Loaded configuration from {config_file}")
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load configuration from {config_file}: {e}")

    return config


def apply_config_to_args(args: argparse.Namespace, config: Dict[str, Any]) -> argparse.Namespace:
    """
    Apply configuration settings to command-line arguments.

    Only arguments that were not given on the command line (still ``None``) are
    filled in, in this order: the YAML section of the selected destination
    (``args.sink``), the YAML ``global`` section, then the same two sections
    of the environment layer. Any YAML setting therefore wins over any
    environment variable.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command-line arguments.
    config : Dict[str, Any]
        Configuration settings.

    Returns
    -------
    argparse.Namespace
        Updated arguments with configuration settings applied.
    """
    logger = get_or_setup_logger()

    sink = getattr(args, "sink", None)
    env_config = config.get(ENV_LAYER, {})

    layers = []
    for source_name, source in (("file", config), (ENV_LAYER, env_config)):
        if sink:
            layers.append((f"{source_name} {sink}", source.get(sink, {})))
        layers.append((f"{source_name} global", source.get("global", {})))

    for section_name, section in layers:
        for key, value in section.items():
            arg_key = key.replace("-", "_")
            if getattr(args, arg_key, None) is None:
                setattr(args, arg_key, value)
                logger.debug(f"Applied {section_name} configuration: {key}={value}")

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Final configuration:")
        for key, value in sorted(vars(args).items()):
            if key in ("api_token",):
                value = "***"
            logger.debug(f"  {key}={value}")

    return args
