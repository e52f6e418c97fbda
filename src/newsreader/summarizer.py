from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from openai import OpenAI

from .config import SUMMARY_MODEL
from .errors import SummarizeError

logger = logging.getLogger("newsreader")

PROMPT_TEMPLATE = (
    "Summarize the following article in a concise paragraph:\n\n---\n\n"
    "Title: {title}\n\n{content}"
)


def build_prompt(title: str, content: str) -> str:
    return PROMPT_TEMPLATE.format(title=title, content=content)


class Summarizer:
    """Asks the LLM API for a one-paragraph summary of an article."""

    def __init__(self, client: Optional[Any] = None, model: str = SUMMARY_MODEL):
        self._client = client
        self.model = model
        self._lock = threading.Lock()

    @property
    def client(self) -> Any:
        # Created lazily so the app starts without OPENAI_API_KEY set
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = OpenAI()
        return self._client

    def summarize(self, title: str, content: str) -> str:
        prompt = build_prompt(title, content)
        logger.debug("Requesting summary for %r from %s", title, self.model)
        try:
            resp = self.client.responses.create(model=self.model, input=prompt)
        except Exception as e:
            raise SummarizeError(str(e)) from e
        text = (resp.output_text or "").strip()
        if not text:
            raise SummarizeError("The model returned an empty summary")
        return text
