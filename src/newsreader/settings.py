from __future__ import annotations

import logging
from typing import Optional

from .datamodels import BackendSettings
from .storage import SettingsRepository

logger = logging.getLogger("newsreader")


class SettingsManager:
    """Holds the fetch service endpoint and its access token."""

    def __init__(self, repository: SettingsRepository):
        self.repository = repository
        self.settings: Optional[BackendSettings] = None

    def load(self) -> Optional[BackendSettings]:
        self.settings = self.repository.load()
        if self.settings is None:
            logger.info("No backend settings stored")
        return self.settings

    def save(self, url: str, key: str) -> BackendSettings:
        settings = BackendSettings(url=url.strip(), key=key.strip())
        self.repository.save(settings)
        self.settings = settings
        logger.info("Saved backend settings for %s", settings.url)
        return settings

    @property
    def is_configured(self) -> bool:
        return self.settings is not None and self.settings.is_configured
