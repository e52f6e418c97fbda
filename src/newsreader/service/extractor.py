from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import feedparser
import requests
import trafilatura
from bs4 import BeautifulSoup

from ..config import HTTP_TIMEOUT, MIN_ARTICLE_WORDS, PLACEHOLDER_PATTERN, REQUEST_HEADERS
from ..errors import DownloadError, ExtractionError

logger = logging.getLogger("newsreader")

FEED_CONTENT_TYPES = ("rss", "atom", "xml")
MIN_PARAGRAPH_CHARS = 40


class Extractor:
    """Downloads a page and pulls article text out of it.

    Feeds (RSS/Atom) yield one article per entry; any other page yields a
    single article. Every article is a ``{"title", "content", "url"}`` dict.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = HTTP_TIMEOUT):
        self.session = session or self._create_session()
        self.timeout = timeout

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        return s

    def download(self, url: str) -> requests.Response:
        try:
            logger.debug("Downloading %s", url)
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Download failed for %s: %s", url, e)
            raise DownloadError(str(e)) from e
        return resp

    def extract(self, url: str) -> List[Dict[str, str]]:
        resp = self.download(url)
        content_type = resp.headers.get("Content-Type", "").lower()
        if _looks_like_feed(content_type, resp.content):
            articles = self._from_feed(resp.content)
            if articles:
                logger.info("Extracted %d feed entries from %s", len(articles), url)
                return articles
        return [self._from_html(resp.text, url)]

    def _from_feed(self, content: bytes) -> List[Dict[str, str]]:
        feed = feedparser.parse(content)
        articles: List[Dict[str, str]] = []
        seen = set()
        for entry in feed.entries:
            link = entry.get("link")
            if not link or link in seen:
                continue
            text = _html_to_text(_entry_html(entry))
            if not text:
                continue
            seen.add(link)
            articles.append(
                {"title": entry.get("title") or "Untitled", "content": text, "url": link}
            )
        return articles

    def _from_html(self, html: str, url: str) -> Dict[str, str]:
        body = trafilatura.extract(
            html, include_comments=False, include_tables=False, favor_precision=True
        )
        meta = trafilatura.extract_metadata(html)
        title = _clean(meta.title if meta else None)

        if not body or _is_placeholder_text(body):
            logger.debug("trafilatura found nothing usable in %s; falling back to paragraphs", url)
            body = _paragraph_text(html)
        if not body or _is_placeholder_text(body):
            raise ExtractionError("No article text found on the page")

        return {"title": title or _html_title(html) or "Untitled", "content": body.strip(), "url": url}


def _looks_like_feed(content_type: str, content: bytes) -> bool:
    if "html" in content_type:
        return False
    if any(t in content_type for t in FEED_CONTENT_TYPES):
        return True
    return content.lstrip()[:5] == b"<?xml"


def _entry_html(entry: Any) -> str:
    if "content" in entry:
        return "\n".join(c.get("value", "") for c in entry.content)
    return entry.get("summary", "")


def _html_to_text(html: str) -> str:
    if not html:
        return ""
    return BeautifulSoup(html, "lxml").get_text(" ", strip=True)


def _paragraph_text(html: str) -> str:
    soup = BeautifulSoup(html, "lxml")
    main = soup.find("article") or soup.find("main") or soup
    paras = [p.get_text(" ", strip=True) for p in main.find_all("p")]
    return "\n\n".join(p for p in paras if len(p) >= MIN_PARAGRAPH_CHARS)


def _html_title(html: str) -> str:
    soup = BeautifulSoup(html, "lxml")
    og_title = soup.find("meta", property="og:title")
    if og_title and og_title.get("content"):
        return _clean(og_title["content"])
    if soup.title and soup.title.string:
        return _clean(soup.title.string)
    return ""


def _clean(s: Optional[str]) -> str:
    if not s:
        return ""
    return re.sub(r"\s+", " ", s).strip()


def _is_placeholder_text(text: str) -> bool:
    if not text:
        return True
    if len(text.split()) < MIN_ARTICLE_WORDS:
        return True
    if PLACEHOLDER_PATTERN.search(text) and len(text.split()) < MIN_ARTICLE_WORDS * 4:
        return True
    return False
