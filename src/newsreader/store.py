from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, Iterator, List, Optional

from .datamodels import Article
from .errors import SummarizeError
from .storage import ArticleRepository
from .summarizer import Summarizer

logger = logging.getLogger("newsreader")


class ArticleStore:
    """The article list for one client run.

    Every mutation rewrites the full snapshot through the repository and then
    calls ``on_change`` so the UI can re-render. Newest articles come first.
    """

    def __init__(
        self,
        repository: ArticleRepository,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.repository = repository
        self.on_change = on_change
        self._articles: List[Article] = repository.load()
        logger.info("Loaded %d stored article(s)", len(self._articles))

    @property
    def articles(self) -> List[Article]:
        return list(self._articles)

    def __len__(self) -> int:
        return len(self._articles)

    def __iter__(self) -> Iterator[Article]:
        return iter(list(self._articles))

    def get(self, article_id: str) -> Optional[Article]:
        for article in self._articles:
            if article.id == article_id:
                return article
        return None

    def _render(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _commit(self, articles: List[Article]) -> None:
        # Nothing changes in memory unless the snapshot was written
        self.repository.save(articles)
        self._articles = articles
        self._render()

    def add(self, article: Article) -> None:
        self._commit([article] + self._articles)
        logger.debug("Added article %s from %s", article.id, article.source)

    def add_many(self, articles: Iterable[Article]) -> List[Article]:
        """Add articles whose source is not already stored.

        Returns the articles actually added; an empty result means nothing
        was new and the list was left untouched.
        """
        seen = {a.source for a in self._articles}
        fresh: List[Article] = []
        for article in articles:
            if article.source in seen:
                logger.debug("Skipping duplicate source %s", article.source)
                continue
            seen.add(article.source)
            fresh.append(article)
        if not fresh:
            return []
        self._commit(fresh + self._articles)
        return fresh

    def remove(self, article_id: str) -> None:
        self._commit([a for a in self._articles if a.id != article_id])

    async def summarize(self, article_id: str, summarizer: Summarizer) -> bool:
        """Summarize one article. Returns False if it is unknown or already in flight."""
        article = self.get(article_id)
        if article is None or article.is_summarizing:
            return False

        article.is_summarizing = True
        self._render()
        try:
            article.summary = await asyncio.to_thread(
                summarizer.summarize, article.title, article.content
            )
        except Exception as e:
            logger.error("Error summarizing article %s: %s", article_id, e)
            if isinstance(e, SummarizeError):
                raise
            raise SummarizeError(str(e)) from e
        finally:
            article.is_summarizing = False
            self._commit(self._articles)
        return True
