#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys

from .app import NewsReaderApp
from .config import data_dir, http_timeout, load_config, setup_logging, summary_model
from .fetch_client import FetchClient
from .storage import JsonFileStore
from .summarizer import Summarizer

logger = logging.getLogger("newsreader")


# --- Entrypoint ---
def main() -> None:
    parser = argparse.ArgumentParser(description="News Reader TUI")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--data-dir",
        type=str,
        help="Directory holding saved articles and backend settings",
    )
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    store = JsonFileStore(args.data_dir or data_dir(config))
    logger.info("Storing data in %s", store.directory)

    try:
        app = NewsReaderApp(
            store,
            fetch_client=FetchClient(timeout=http_timeout(config)),
            summarizer=Summarizer(model=summary_model(config)),
        )
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)


if __name__ == "__main__":
    main()
