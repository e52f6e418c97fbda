from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from newsreader.errors import DownloadError, ExtractionError
from newsreader.service.extractor import Extractor

LONG_TEXT = (
    "The city council voted on Tuesday to expand the bike lane network across "
    "the downtown core, adding twelve kilometres of protected routes by next year."
)

RSS = f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <item>
      <title>Story 1</title>
      <link>https://news.test/1</link>
      <description><![CDATA[<p>{LONG_TEXT}</p>]]></description>
    </item>
    <item>
      <title>Story 2</title>
      <link>https://news.test/2</link>
      <description><![CDATA[<p>Second story body.</p>]]></description>
    </item>
    <item>
      <title>Story 1 again</title>
      <link>https://news.test/1</link>
      <description>Duplicate</description>
    </item>
  </channel>
</rss>
""".encode()

HTML = f"""
<html>
  <head><title>Council expands bike lanes</title></head>
  <body>
    <nav><p>Home</p></nav>
    <article>
      <p>{LONG_TEXT}</p>
      <p>Short.</p>
    </article>
  </body>
</html>
"""


def make_response(content_type: str, content: bytes) -> MagicMock:
    resp = MagicMock()
    resp.headers = {"Content-Type": content_type}
    resp.content = content
    resp.text = content.decode()
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def extractor(session):
    return Extractor(session=session, timeout=3)


def test_feed_yields_one_article_per_entry(extractor, session):
    session.get.return_value = make_response("application/rss+xml", RSS)

    articles = extractor.extract("https://news.test/feed.xml")

    session.get.assert_called_once_with("https://news.test/feed.xml", timeout=3)
    assert [a["url"] for a in articles] == ["https://news.test/1", "https://news.test/2"]
    assert articles[0]["title"] == "Story 1"
    assert articles[0]["content"] == LONG_TEXT
    assert articles[1]["content"] == "Second story body."


def test_html_page_uses_trafilatura(extractor, session):
    session.get.return_value = make_response("text/html; charset=utf-8", HTML.encode())
    with patch("newsreader.service.extractor.trafilatura") as mock_traf:
        mock_traf.extract.return_value = LONG_TEXT
        mock_traf.extract_metadata.return_value = MagicMock(title="  Bike   lanes ")

        articles = extractor.extract("https://news.test/story")

    assert articles == [
        {"title": "Bike lanes", "content": LONG_TEXT, "url": "https://news.test/story"}
    ]


def test_html_page_falls_back_to_paragraphs(extractor, session):
    session.get.return_value = make_response("text/html", HTML.encode())
    with patch("newsreader.service.extractor.trafilatura") as mock_traf:
        mock_traf.extract.return_value = None
        mock_traf.extract_metadata.return_value = None

        articles = extractor.extract("https://news.test/story")

    assert articles[0]["title"] == "Council expands bike lanes"
    assert articles[0]["content"] == LONG_TEXT


def test_page_without_text_raises(extractor, session):
    html = "<html><body><p>Loading...</p></body></html>"
    session.get.return_value = make_response("text/html", html.encode())
    with patch("newsreader.service.extractor.trafilatura") as mock_traf:
        mock_traf.extract.return_value = "Loading..."
        mock_traf.extract_metadata.return_value = None

        with pytest.raises(ExtractionError):
            extractor.extract("https://news.test/empty")


def test_download_failure(extractor, session):
    session.get.side_effect = requests.ConnectionError("Name or service not known")
    with pytest.raises(DownloadError):
        extractor.extract("https://nowhere.test/")
