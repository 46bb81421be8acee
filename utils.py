# utils.py
"""
Host-side helpers: logging setup and JSON config loading.

The kernel modules only ever call the root logging functions; a host wires
up handlers once, before building a Simulation, by calling setup_logging()
with the "logging" section of its config file.
"""
import json
import logging
import logging.handlers
import os
from typing import Any, Dict

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> logging.Logger:
#   - Inputs:
#     - config: A dictionary with an optional "logging" key holding "level",
#       "format" and "log_file" sub-keys. A "log_file" of None disables the
#       file handler.
#   - Outputs: the configured root logger.
#   - Side Effects: Detaches and closes the root logger's existing handlers,
#     then installs a console handler and, unless disabled, a rotating file
#     handler. Creates the log directory if it doesn't exist.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Raises FileNotFoundError / json.JSONDecodeError after logging them.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/kinetics.log'
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 5


def _reset_handlers(logger: logging.Logger) -> None:
    """Detaches and closes every handler, so an old log file is released."""
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()


def setup_logging(config: Dict[str, Any]) -> logging.Logger:
    """
    Configures the root logger from a configuration dictionary.

    Logs go to the console and, unless "log_file" is None, to a file that
    rotates at 1MB with 5 backups.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    _reset_handlers(logger)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")
    return logger


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
    logging.info("Configuration loaded successfully.")
    return config
