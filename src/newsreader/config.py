from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
CONFIG_DIR = os.path.expanduser("~/.config/newsreader")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.json")
DATA_DIR = CONFIG_DIR

ARTICLES_KEY = "newsreader-articles"
BACKEND_SETTINGS_KEY = "newsreader-backend-settings"

FETCH_PATH = "/fetch-source"
HTTP_TIMEOUT = 30
MIN_ARTICLE_WORDS = 15

SUMMARY_MODEL = "gpt-4o-mini"
SETTINGS_PROMPT_DELAY = 0.5

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:115.0) "
        "Gecko/20100101 Firefox/115.0"
    )
}
PLACEHOLDER_PATTERN = re.compile(r"\b(loading|unable to load|enable javascript)\b", re.I)

# --- Logging ---
logger = logging.getLogger("newsreader")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/newsreader_debug_{ts}_{pid}.log"

    # The TUI owns the terminal, so debug output goes to a file
    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def load_config() -> Dict[str, Any]:
    """Load the main configuration file."""
    if not os.path.exists(CONFIG_PATH):
        logger.info("No config file at %s, using defaults.", CONFIG_PATH)
        return {}
    try:
        with open(CONFIG_PATH, "r") as f:
            config = json.load(f)
            logger.info("Loaded config from %s", CONFIG_PATH)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", CONFIG_PATH, e)
        return {}
    if not isinstance(config, dict):
        logger.error("Ignoring config at %s: expected a JSON object", CONFIG_PATH)
        return {}
    return config


def save_config(config: Dict[str, Any]) -> None:
    """Save the main configuration file."""
    try:
        os.makedirs(os.path.dirname(CONFIG_PATH), exist_ok=True)
        with open(CONFIG_PATH, "w") as f:
            json.dump(config, f, indent=2)
        logger.info("Saved config to %s", CONFIG_PATH)
    except IOError as e:
        logger.error("Failed to save config to %s: %s", CONFIG_PATH, e)


def data_dir(config: Dict[str, Any]) -> str:
    return os.path.expanduser(config.get("data_dir") or DATA_DIR)


def summary_model(config: Dict[str, Any]) -> str:
    return config.get("summary_model") or SUMMARY_MODEL


def http_timeout(config: Dict[str, Any]) -> float:
    try:
        return float(config.get("http_timeout", HTTP_TIMEOUT))
    except (TypeError, ValueError):
        logger.warning("Invalid http_timeout in config, using %s", HTTP_TIMEOUT)
        return HTTP_TIMEOUT
