from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    Button,
    Header,
    Input,
    ListView,
    Rule,
    Static,
    TabbedContent,
    TabPane,
    TextArea,
)

from .config import SETTINGS_PROMPT_DELAY
from .datamodels import Article
from .fetch_client import FetchClient
from .messages import StatusUpdate
from .screens import ArticleScreen, ConfirmScreen, HelpScreen, SettingsScreen
from .state import ReaderState
from .storage import KeyValueStore
from .summarizer import Summarizer
from .widgets import ArticleButton, ArticleItem, EmptyMessage, StatusBar

logger = logging.getLogger("newsreader")

FETCH_LABEL = "Fetch Article"


class NewsReaderApp(App):
    TITLE = "News Reader"
    SUB_TITLE = "Read it later, summarized"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+s", "show_settings", "Settings"),
        Binding("s", "summarize_highlighted", "Summarize"),
        Binding("d", "remove_highlighted", "Remove"),
        Binding("question_mark", "show_help", "Help"),
    ]

    def __init__(
        self,
        store: KeyValueStore,
        fetch_client: Optional[FetchClient] = None,
        summarizer: Optional[Summarizer] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self._mounted_ready = False
        self.state = ReaderState(
            store, self, fetch_client=fetch_client, summarizer=summarizer
        )

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main"):
            with TabbedContent(id="add-tabs"):
                with TabPane("From URL", id="tab-url"):
                    with Horizontal(classes="form-row"):
                        yield Input(placeholder="https://example.com/article", id="source-url")
                        yield Button(FETCH_LABEL, id="add-url-btn", variant="primary")
                with TabPane("Paste Text", id="tab-text"):
                    yield Input(placeholder="Article title", id="article-title")
                    yield TextArea(id="article-text")
                    yield Button("Add Article", id="add-text-btn", variant="primary")
            yield Rule()
            yield Static("Articles", classes="pane-title")
            yield ListView(id="articles-list")
        yield StatusBar()

    def on_mount(self) -> None:
        self._mounted_ready = True
        self._base_screen.query_one(StatusBar).keybinding_hint = (
            "[b]ctrl+s[/] settings, [b]s[/] summarize, [b]d[/] remove, [b]?[/] help"
        )
        self.refresh_articles()
        if not self.state.settings.is_configured:
            self.set_timer(SETTINGS_PROMPT_DELAY, self.open_settings)

    @property
    def _base_screen(self) -> Screen:
        """The screen holding the article list, even while a modal is on top."""
        return self.screen_stack[0]

    # --- ReaderView ---

    def refresh_articles(self) -> None:
        """Rebuild the article list from the current state."""
        if not self._mounted_ready:
            return
        articles = self.state.articles.articles
        view = self._base_screen.query_one("#articles-list", ListView)
        index = view.index
        view.clear()
        if not articles:
            view.append(EmptyMessage())
        else:
            view.extend(ArticleItem(a) for a in articles)
            if index is not None:
                view.index = min(index, len(articles) - 1)
        self._base_screen.query_one(StatusBar).article_count = len(articles)

    def notify_user(self, message: str, severity: str = "information") -> None:
        self.notify(message, severity=severity)

    def open_settings(self) -> None:
        if isinstance(self.screen, SettingsScreen):
            return
        self.push_screen(
            SettingsScreen(self.state.settings.settings), self.on_settings_closed
        )

    def open_article(self, article: Article) -> None:
        self.push_screen(ArticleScreen(article))

    async def confirm(self, message: str) -> bool:
        return bool(await self.push_screen_wait(ConfirmScreen(message)))

    # --- Events ---

    def on_settings_closed(self, result: Optional[Tuple[str, str]]) -> None:
        if result is None:
            return
        url, key = result
        self.state.save_settings(url, key)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button = event.button
        if isinstance(button, ArticleButton):
            self.run_worker(
                self.state.dispatch(button.article_action, button.article_id),
                group="article-actions",
            )
        elif button.id == "add-url-btn":
            self._submit_url()
        elif button.id == "add-text-btn":
            self._submit_text()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "source-url":
            self._submit_url()
        elif event.input.id == "article-title":
            self._base_screen.query_one("#article-text", TextArea).focus()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, ArticleItem):
            self.run_worker(self.state.dispatch("open", event.item.article.id))

    def on_status_update(self, message: StatusUpdate) -> None:
        self._base_screen.query_one(StatusBar).activity = message.text
        button = self._base_screen.query_one("#add-url-btn", Button)
        button.disabled = message.busy
        button.label = "Fetching..." if message.busy else FETCH_LABEL

    def _submit_text(self) -> None:
        title_input = self._base_screen.query_one("#article-title", Input)
        text_area = self._base_screen.query_one("#article-text", TextArea)
        if self.state.add_text(title_input.value, text_area.text) is not None:
            title_input.value = ""
            text_area.clear()

    def _submit_url(self) -> None:
        url = self._base_screen.query_one("#source-url", Input).value.strip()
        if url:
            self.run_worker(self._fetch_url(url), name="url_fetcher")

    async def _fetch_url(self, url: str) -> None:
        self.post_message(StatusUpdate(f"Fetching {url}...", busy=True))
        try:
            added = await self.state.add_url(url)
        finally:
            self.post_message(StatusUpdate(""))
        if added:
            self._base_screen.query_one("#source-url", Input).value = ""

    # --- Actions ---

    def _highlighted_article(self) -> Optional[Article]:
        view = self._base_screen.query_one("#articles-list", ListView)
        item = view.highlighted_child
        if isinstance(item, ArticleItem):
            return item.article
        return None

    def action_summarize_highlighted(self) -> None:
        article = self._highlighted_article()
        if article is not None:
            self.run_worker(self.state.dispatch("summarize", article.id))

    def action_remove_highlighted(self) -> None:
        article = self._highlighted_article()
        if article is not None:
            self.run_worker(self.state.dispatch("remove", article.id))

    def action_show_settings(self) -> None:
        self.open_settings()

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())
