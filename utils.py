# utils.py
"""
Utility functions for the simulation framework.

This module provides logging setup and configuration loading, which are
used across the application but do not belong to the physics, camera or
rendering code.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" key holding
#       "level", "format" and "log_file". A log_file of null disables
#       the file handler.
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and, unless disabled, a rotating file handler.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Raises: FileNotFoundError, json.JSONDecodeError, or ValueError if
#     the top-level JSON value is not an object.
#
# config_section(config, name) -> Dict[str, Any]:
#   - Outputs: The named section, or {} when absent.
#   - Raises: ValueError when the section is present but not an object.

KNOWN_SECTIONS = (
    'simulation_parameters', 'camera', 'picking', 'visualization', 'run_control', 'logging'
)


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Logs go to the console and, unless log_file is null, to a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/bouncing_odyssey.log')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates at 1MB, keeps 5 backups.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path or 'disabled'}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)

    unknown = sorted(set(config) - set(KNOWN_SECTIONS))
    if unknown:
        logging.warning(f"Ignoring unknown configuration sections: {', '.join(unknown)}.")
    logging.info("Configuration loaded successfully.")
    return config


def config_section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name, {})
    if not isinstance(section, dict):
        msg = f"Configuration section '{name}' must be an object, got {type(section).__name__}."
        logging.error(msg)
        raise ValueError(msg)
    return section
