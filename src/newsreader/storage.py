from __future__ import annotations

import json
import logging
import os
from typing import Dict, List, Optional, Protocol

from .config import ARTICLES_KEY, BACKEND_SETTINGS_KEY
from .datamodels import Article, BackendSettings
from .errors import StorageError

logger = logging.getLogger("newsreader")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class JsonFileStore:
    """Keeps each key in its own ``<key>.json`` file under ``directory``."""

    def __init__(self, directory: str):
        self.directory = directory

    def _get_path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        path = self._get_path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except IOError as e:
            logger.warning("Failed to read %s: %s", path, e)
            return None

    def set(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        path = self._get_path(key)
        with open(path, "w", encoding="utf-8") as f:
            f.write(value)
        logger.debug("Wrote %d bytes to %s", len(value), path)


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class ArticleRepository:
    """Loads and saves the whole article list as one JSON snapshot."""

    def __init__(self, store: KeyValueStore, key: str = ARTICLES_KEY):
        self.store = store
        self.key = key

    def load(self) -> List[Article]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring malformed article snapshot: %s", e)
            return []
        if not isinstance(data, list):
            logger.warning("Ignoring article snapshot: expected a list")
            return []
        return [Article.from_dict(item) for item in data if isinstance(item, dict)]

    def save(self, articles: List[Article]) -> None:
        _write(self.store, self.key, json.dumps([a.to_dict() for a in articles]))


class SettingsRepository:
    def __init__(self, store: KeyValueStore, key: str = BACKEND_SETTINGS_KEY):
        self.store = store
        self.key = key

    def load(self) -> Optional[BackendSettings]:
        raw = self.store.get(self.key)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring malformed backend settings: %s", e)
            return None
        if not isinstance(data, dict):
            return None
        return BackendSettings.from_dict(data)

    def save(self, settings: BackendSettings) -> None:
        _write(self.store, self.key, json.dumps(settings.to_dict()))


def _write(store: KeyValueStore, key: str, value: str) -> None:
    try:
        store.set(key, value)
    except (IOError, OSError) as e:
        logger.error("Failed to save %s: %s", key, e)
        raise StorageError(f"Could not save {key}: {e}") from e
