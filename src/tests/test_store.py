from __future__ import annotations

import asyncio
import json
from unittest.mock import MagicMock

import pytest

from newsreader.config import ARTICLES_KEY
from newsreader.datamodels import Article
from newsreader.errors import StorageError, SummarizeError
from newsreader.storage import ArticleRepository, MemoryStore
from newsreader.store import ArticleStore


def make_article(n: int, source: str | None = None) -> Article:
    return Article(
        id=f"url-{n}",
        title=f"Title {n}",
        content=f"Content {n}",
        source=source or f"https://news.test/{n}",
    )


def persisted(store: MemoryStore) -> list:
    return json.loads(store.get(ARTICLES_KEY))


@pytest.fixture
def article_store(memory_store):
    return ArticleStore(ArticleRepository(memory_store), on_change=MagicMock())


def test_snapshot_matches_memory_after_every_mutation(memory_store, article_store):
    for op in (
        lambda: article_store.add(make_article(1)),
        lambda: article_store.add(make_article(2)),
        lambda: article_store.add_many([make_article(3), make_article(4)]),
        lambda: article_store.remove("url-2"),
        lambda: article_store.remove("url-1"),
        lambda: article_store.add(make_article(5)),
    ):
        op()
        assert persisted(memory_store) == [a.to_dict() for a in article_store.articles]


def test_add_prepends_and_renders(article_store):
    article_store.add(make_article(1))
    article_store.add(make_article(2))

    assert [a.id for a in article_store] == ["url-2", "url-1"]
    assert article_store.on_change.call_count == 2


def test_add_has_no_duplicate_check(article_store):
    article_store.add(make_article(1))
    article_store.add(make_article(2, source="https://news.test/1"))
    assert len(article_store) == 2


def test_remove_missing_id_is_noop_but_still_persists(memory_store, article_store):
    article_store.add(make_article(1))
    before = memory_store.get(ARTICLES_KEY)
    article_store.repository.save = MagicMock(wraps=article_store.repository.save)

    article_store.remove("does-not-exist")

    assert len(article_store) == 1
    article_store.repository.save.assert_called_once()
    assert memory_store.get(ARTICLES_KEY) == before
    assert article_store.on_change.call_count == 2


def test_add_many_skips_sources_already_stored(article_store):
    article_store.add(make_article(1))
    article_store.on_change.reset_mock()

    added = article_store.add_many(
        [
            make_article(7, source="https://news.test/1"),
            make_article(8, source="https://news.test/1"),
        ]
    )

    assert added == []
    assert len(article_store) == 1
    article_store.on_change.assert_not_called()


def test_add_many_keeps_incoming_order_ahead_of_existing(article_store):
    article_store.add(make_article(1))
    added = article_store.add_many(
        [make_article(2), make_article(3), make_article(9, source="https://news.test/2")]
    )

    assert [a.id for a in added] == ["url-2", "url-3"]
    assert [a.id for a in article_store] == ["url-2", "url-3", "url-1"]


def test_summarize_stores_trimmed_summary(memory_store, article_store):
    article_store.add(make_article(1))
    summarizer = MagicMock()
    summarizer.summarize.return_value = "Short version."

    assert asyncio.run(article_store.summarize("url-1", summarizer)) is True

    article = article_store.get("url-1")
    assert article.summary == "Short version."
    assert article.is_summarizing is False
    assert persisted(memory_store)[0]["summary"] == "Short version."
    summarizer.summarize.assert_called_once_with("Title 1", "Content 1")


def test_summarize_twice_makes_one_call(article_store):
    article_store.add(make_article(1))
    summarizer = MagicMock()
    summarizer.summarize.return_value = "Once."

    async def run_both():
        return await asyncio.gather(
            article_store.summarize("url-1", summarizer),
            article_store.summarize("url-1", summarizer),
        )

    results = asyncio.run(run_both())

    assert sorted(results) == [False, True]
    assert summarizer.summarize.call_count == 1


def test_summarize_failure_leaves_no_summary(memory_store, article_store):
    article_store.add(make_article(1))
    summarizer = MagicMock()
    summarizer.summarize.side_effect = RuntimeError("quota exceeded")
    article_store.repository.save = MagicMock(wraps=article_store.repository.save)

    with pytest.raises(SummarizeError):
        asyncio.run(article_store.summarize("url-1", summarizer))

    article = article_store.get("url-1")
    assert article.summary is None
    assert article.is_summarizing is False
    article_store.repository.save.assert_called_once()
    assert "summary" not in persisted(memory_store)[0]


def test_summarize_unknown_article_does_nothing(article_store):
    summarizer = MagicMock()
    assert asyncio.run(article_store.summarize("nope", summarizer)) is False
    summarizer.summarize.assert_not_called()


def test_store_loads_existing_snapshot(memory_store):
    ArticleRepository(memory_store).save([make_article(1), make_article(2)])
    store = ArticleStore(ArticleRepository(memory_store))
    assert [a.id for a in store] == ["url-1", "url-2"]


def test_failed_write_leaves_the_list_untouched(failing_store):
    article_store = ArticleStore(ArticleRepository(failing_store), on_change=MagicMock())
    article_store.add(make_article(1))
    failing_store.failing = True

    with pytest.raises(StorageError, match="No space left on device"):
        article_store.add(make_article(2))
    with pytest.raises(StorageError):
        article_store.add_many([make_article(3)])
    with pytest.raises(StorageError):
        article_store.remove("url-1")

    assert [a.id for a in article_store] == ["url-1"]
    assert persisted(failing_store) == [make_article(1).to_dict()]
    assert article_store.on_change.call_count == 1
