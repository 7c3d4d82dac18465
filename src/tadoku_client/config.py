from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
API_BASE_URL = "http://localhost:8080"
API_PREFIX = "/api/v1"
HTTP_TIMEOUT = 15
DEFAULT_PAGE_SIZE = 10

CONFIG_DIR = os.path.expanduser("~/.config/tadoku")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.json")
STORAGE_DIR = os.path.join(CONFIG_DIR, "storage")

# Key under which the session token is persisted.
TOKEN_KEY = "token"

REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "User-Agent": "tadoku-client/0.1",
}

DEFAULTS: Dict[str, Any] = {
    "api_base_url": API_BASE_URL,
    "timeout": HTTP_TIMEOUT,
    "page_size": DEFAULT_PAGE_SIZE,
    "refresh_after_delete": True,
}

# --- Logging ---
logger = logging.getLogger("tadoku")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/tadoku_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Load the configuration file merged over the defaults.

    ``TADOKU_API_BASE_URL`` in the environment wins over the file.
    """
    config = dict(DEFAULTS)
    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                config.update(json.load(f))
            logger.info("Loaded config from %s", path)
        except (IOError, json.JSONDecodeError) as e:
            logger.error("Failed to load config from %s: %s", path, e)

    env_url = os.environ.get("TADOKU_API_BASE_URL")
    if env_url:
        config["api_base_url"] = env_url
    return config


def save_config(config: Dict[str, Any], path: str = CONFIG_PATH) -> None:
    """Save the main configuration file."""
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            json.dump(config, f, indent=2)
        logger.info("Saved config to %s", path)
    except IOError as e:
        logger.error("Failed to save config to %s: %s", path, e)
