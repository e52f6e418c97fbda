from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit, urlunsplit

import requests

from .config import FETCH_PATH, HTTP_TIMEOUT, REQUEST_HEADERS
from .datamodels import Article, BackendSettings, as_text
from .errors import FetchError

logger = logging.getLogger("newsreader")


def new_article_id(prefix: str, index: Optional[int] = None) -> str:
    stamp = int(time.time() * 1000)
    if index is None:
        return f"{prefix}-{stamp}"
    return f"{prefix}-{stamp}-{index}"


def build_fetch_url(base_url: str, path: str = FETCH_PATH) -> str:
    """Replace the path of the configured backend URL with ``path``."""
    parts = urlsplit(base_url)
    if not parts.scheme or not parts.netloc:
        raise FetchError(f"Invalid backend URL: {base_url!r}")
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


class FetchClient:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = HTTP_TIMEOUT,
    ):
        self.session = session or self._create_session()
        self.timeout = timeout

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        return s

    def fetch(self, settings: BackendSettings, url: str) -> List[Article]:
        """Ask the fetch service for the article(s) behind ``url``."""
        endpoint = build_fetch_url(settings.url)
        try:
            settings.key.encode("latin-1")
        except UnicodeEncodeError as e:
            raise FetchError("Access key contains unsupported characters") from e
        logger.debug("Fetching %s via %s", url, endpoint)
        try:
            resp = self.session.get(
                endpoint,
                params={"url": url},
                headers={"Authorization": f"Bearer {settings.key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Fetch service request failed for %s: %s", url, e)
            raise FetchError(str(e)) from e
        except UnicodeError as e:
            logger.warning("Could not encode request for %s: %s", url, e)
            raise FetchError(f"Could not build the request: {e}") from e

        if not resp.ok:
            raise FetchError(_error_message(resp))

        try:
            data = resp.json()
        except ValueError as e:
            raise FetchError("Fetch service returned invalid JSON") from e

        articles = _articles_from_payload(data, url)
        logger.info("Fetched %d article(s) for %s", len(articles), url)
        return articles


def _error_message(resp: requests.Response) -> str:
    fallback = f"Failed to fetch with status: {resp.status_code}"
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


def _articles_from_payload(data: Any, requested_url: str) -> List[Article]:
    items: List[Dict[str, Any]]
    if isinstance(data, dict):
        items = [data]
    elif isinstance(data, list):
        items = data
    else:
        raise FetchError("Fetch service returned an unexpected response")

    many = len(items) > 1
    articles: List[Article] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict) or "title" not in item or "content" not in item:
            raise FetchError("Fetch service returned an unexpected response")
        articles.append(
            Article(
                id=new_article_id("url", i if many else None),
                title=as_text(item["title"]),
                content=as_text(item["content"]),
                source=as_text(item.get("url") or requested_url),
            )
        )
    return articles
