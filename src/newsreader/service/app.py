from __future__ import annotations

import hmac
import logging
import os
from typing import Optional
from urllib.parse import urlsplit

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from ..errors import DownloadError, ExtractionError
from .extractor import Extractor

logger = logging.getLogger("newsreader")

API_KEY_ENV = "NEWSREADER_API_KEY"


class ApiError(Exception):
    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.message = message
        self.status = status


def create_app(api_key: Optional[str] = None, extractor: Optional[Extractor] = None) -> Flask:
    """Build the fetch service.

    ``api_key`` defaults to the ``NEWSREADER_API_KEY`` environment variable.
    Every fetch endpoint expects it as ``Authorization: Bearer <key>``.
    """
    app = Flask(__name__)
    app.config["API_KEY"] = api_key if api_key is not None else os.environ.get(API_KEY_ENV, "")
    app.extensions["newsreader.extractor"] = extractor or Extractor()

    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        return jsonify(error=e.message), e.status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify(error=e.description), e.code

    @app.get("/health")
    def health():
        return jsonify(status="ok")

    @app.get("/fetch-source")
    def fetch_source():
        _check_auth()
        return jsonify(_extract(_target_url()))

    @app.get("/fetch-url")
    def fetch_url():
        _check_auth()
        return jsonify(_extract(_target_url())[0])

    return app


def _check_auth() -> None:
    expected = current_app.config.get("API_KEY")
    if not expected:
        logger.error("Refusing request: %s is not set", API_KEY_ENV)
        raise ApiError("Server is not configured with an API key", 500)
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not hmac.compare_digest(
        token.strip().encode(), expected.encode()
    ):
        logger.warning("Unauthorized request from %s", request.remote_addr)
        raise ApiError("Unauthorized", 401)


def _target_url() -> str:
    url = (request.args.get("url") or "").strip()
    if not url:
        raise ApiError("Missing 'url' query parameter", 400)
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ApiError(f"Invalid URL: {url}", 400)
    return url


def _extract(url: str):
    extractor: Extractor = current_app.extensions["newsreader.extractor"]
    try:
        articles = extractor.extract(url)
    except DownloadError as e:
        raise ApiError(f"Could not fetch {url}: {e}", 502) from e
    except ExtractionError as e:
        raise ApiError(f"Could not extract an article from {url}: {e}", 422) from e
    logger.info("Served %d article(s) for %s", len(articles), url)
    return articles
