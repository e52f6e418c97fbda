from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol
from urllib.parse import urlsplit

from .datamodels import PASTED_TEXT_SOURCE, Article
from .errors import FetchError, StorageError, SummarizeError
from .fetch_client import FetchClient, new_article_id
from .settings import SettingsManager
from .storage import ArticleRepository, KeyValueStore, SettingsRepository
from .store import ArticleStore
from .summarizer import Summarizer

logger = logging.getLogger("newsreader")


class ReaderView(Protocol):
    """What the state needs from whatever is displaying it."""

    def refresh_articles(self) -> None: ...

    def notify_user(self, message: str, severity: str = "information") -> None: ...

    def open_settings(self) -> None: ...

    def open_article(self, article: Article) -> None: ...

    async def confirm(self, message: str) -> bool: ...


def is_valid_url(value: str) -> bool:
    parts = urlsplit(value)
    return bool(parts.scheme and parts.netloc)


class ReaderState:
    def __init__(
        self,
        store: KeyValueStore,
        view: ReaderView,
        fetch_client: Optional[FetchClient] = None,
        summarizer: Optional[Summarizer] = None,
    ):
        self.view = view
        self.fetch_client = fetch_client or FetchClient()
        self.summarizer = summarizer or Summarizer()
        self.settings = SettingsManager(SettingsRepository(store))
        self.settings.load()
        self.articles = ArticleStore(ArticleRepository(store), on_change=view.refresh_articles)
        self.commands: Dict[str, Callable[[str], Awaitable[Any]]] = {
            "summarize": self.summarize,
            "remove": self.remove,
            "open": self.open,
        }

    async def dispatch(self, action: str, article_id: str) -> Any:
        """Route a per-article action to its command."""
        command = self.commands[action]
        logger.debug("Dispatching %s for %s", action, article_id)
        return await command(article_id)

    def add_text(self, title: str, content: str) -> Optional[Article]:
        title, content = title.strip(), content.strip()
        if not title or not content:
            self.view.notify_user(
                "Please provide both a title and content for the article.",
                severity="error",
            )
            return None
        article = Article(
            id=new_article_id("text"),
            title=title,
            content=content,
            source=PASTED_TEXT_SOURCE,
        )
        try:
            self.articles.add(article)
        except StorageError as e:
            self._report_storage_error(e)
            return None
        return article

    async def add_url(self, url: str) -> List[Article]:
        url = url.strip()
        if not url:
            return []
        if not is_valid_url(url):
            self.view.notify_user("Please enter a valid URL.", severity="error")
            return []
        if not self.settings.is_configured:
            self.view.notify_user(
                "Backend settings are not configured. Please configure them first.",
                severity="warning",
            )
            self.view.open_settings()
            return []

        try:
            fetched = await asyncio.to_thread(
                self.fetch_client.fetch, self.settings.settings, url
            )
        except FetchError as e:
            logger.error("Error fetching article from backend: %s", e)
            self.view.notify_user(f"Could not fetch the article: {e}", severity="error")
            return []

        try:
            added = self.articles.add_many(fetched)
        except StorageError as e:
            self._report_storage_error(e)
            return []
        if not added:
            self.view.notify_user("No new articles found.")
        return added

    async def summarize(self, article_id: str) -> bool:
        try:
            return await self.articles.summarize(article_id, self.summarizer)
        except SummarizeError:
            self.view.notify_user(
                "Could not summarize the article. See the debug log for details.",
                severity="error",
            )
            return False
        except StorageError as e:
            self._report_storage_error(e)
            return False

    async def remove(self, article_id: str, confirm: bool = True) -> bool:
        if confirm and not await self.view.confirm(
            "Are you sure you want to remove this article?"
        ):
            return False
        try:
            self.articles.remove(article_id)
        except StorageError as e:
            self._report_storage_error(e)
            return False
        return True

    async def open(self, article_id: str) -> None:
        article = self.articles.get(article_id)
        if article is not None:
            self.view.open_article(article)

    def save_settings(self, url: str, key: str) -> None:
        try:
            self.settings.save(url, key)
        except StorageError as e:
            self._report_storage_error(e)
            return
        self.view.notify_user("Settings saved successfully.")

    def _report_storage_error(self, error: StorageError) -> None:
        self.view.notify_user(f"Could not save your changes: {error}", severity="error")
