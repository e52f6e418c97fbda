from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import Button, ListItem, LoadingIndicator, Static
from rich.text import Text

from .datamodels import Article

PREVIEW_CHARS = 400
EMPTY_LIST_MESSAGE = (
    "No articles to display. Add content using the forms above to get started."
)


def preview(content: str, limit: int = PREVIEW_CHARS) -> str:
    content = " ".join(content.split())
    if len(content) <= limit:
        return content
    return content[:limit].rstrip() + "…"


class ArticleButton(Button):
    """A per-article action button; the app routes presses by ``article_action``."""

    def __init__(self, label: str, action: str, article_id: str, **kwargs):
        super().__init__(label, classes=f"{action}-btn", **kwargs)
        self.article_action = action
        self.article_id = article_id


# --- UI Widgets ---
class ArticleItem(ListItem):
    def __init__(self, article: Article):
        super().__init__()
        self.article = article

    def compose(self) -> ComposeResult:
        article = self.article
        with Vertical(classes="article-card"):
            yield Static(Text(article.title, style="bold"), classes="article-title")
            yield Static(Text(preview(article.content)), classes="article-content")
            if article.summary:
                yield Static("AI Summary", classes="summary-heading")
                yield Static(Text(article.summary), classes="article-summary")
            with Horizontal(classes="article-actions"):
                if article.is_summarizing:
                    yield LoadingIndicator(classes="summary-loader")
                    yield Static("Summarizing...", classes="summary-status")
                elif not article.summary:
                    yield ArticleButton("Summarize", "summarize", article.id)
                yield ArticleButton("Open", "open", article.id)
            with Horizontal(classes="article-card-footer"):
                yield Static(Text(f"Source: {article.source}"), classes="article-source")
                yield ArticleButton("Remove", "remove", article.id, variant="error")


class EmptyMessage(ListItem):
    def compose(self) -> ComposeResult:
        yield Static(Text(EMPTY_LIST_MESSAGE, style="italic"))


class StatusBar(Static):
    activity = reactive("")
    article_count = reactive(-1)
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def update_display(self) -> None:
        items = []
        if self.activity:
            items.append(self.activity)
        elif self.article_count >= 0:
            noun = "article" if self.article_count == 1 else "articles"
            items.append(f"{self.article_count} {noun}")
        if self.keybinding_hint:
            items.append(self.keybinding_hint)
        self.update(" | ".join(items))

    def watch_activity(self, activity: str) -> None:
        self.update_display()

    def watch_article_count(self, article_count: int) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()
