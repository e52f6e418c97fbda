from __future__ import annotations

import webbrowser
from typing import Optional, Tuple

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Footer, Header, Input, Label, Markdown

from .datamodels import Article, BackendSettings
from .widgets import StatusBar


def article_markdown(article: Article) -> str:
    parts = [f"# {article.title}\n\n", f"{article.content}\n\n"]
    if article.summary:
        parts.append(f"---\n\n## AI Summary\n\n{article.summary}\n\n")
    parts.append(f"---\n\n*Source: {article.source}*\n")
    return "".join(parts)


# --- Article screen ---
class ArticleScreen(Screen):
    BINDINGS = [
        Binding("escape,q,b,left", "app.pop_screen", "Back"),
        Binding("o", "open_in_browser", "Open in browser"),
        Binding("down", "scroll_down", "Scroll Down"),
        Binding("up", "scroll_up", "Scroll Up"),
    ]

    def __init__(self, article: Article):
        super().__init__()
        self.article = article

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(
            Markdown(article_markdown(self.article), id="article-markdown"),
            id="article-scroll",
        )
        yield StatusBar()

    def on_mount(self) -> None:
        self.title = self.article.title
        word_count = len(self.article.content.split())
        self.sub_title = f"~{max(1, round(word_count / 200))} min read"
        self.query_one("#article-scroll").focus()
        hint = "[b]up/down[/] to scroll"
        if not self.article.is_pasted:
            hint += ", [b]o[/] to open"
        self.query_one(StatusBar).keybinding_hint = hint

    def action_open_in_browser(self) -> None:
        if self.article.is_pasted:
            self.app.notify("Pasted articles have no source page.", severity="warning")
            return
        webbrowser.open(self.article.source)

    def action_scroll_down(self) -> None:
        self.query_one("#article-scroll").scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#article-scroll").scroll_up()


class SettingsScreen(ModalScreen[Optional[Tuple[str, str]]]):
    """Modal for the fetch service URL and access key."""

    BINDINGS = [
        Binding("escape", "cancel", "Close"),
    ]

    def __init__(self, settings: Optional[BackendSettings] = None):
        super().__init__()
        self.settings = settings

    def compose(self) -> ComposeResult:
        with Vertical(id="settings-dialog", classes="dialog"):
            yield Label("Backend Settings", classes="dialog-title")
            yield Label("Fetch service URL", classes="settings-label")
            yield Input(placeholder="https://your-backend.example.com", id="backend-url")
            yield Label("Access key", classes="settings-label")
            yield Input(placeholder="Secret key", password=True, id="backend-key")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Save", id="save-settings", variant="primary")
                yield Button("Cancel", id="close-settings")

    def on_mount(self) -> None:
        if self.settings is not None:
            self.query_one("#backend-url", Input).value = self.settings.url
            self.query_one("#backend-key", Input).value = self.settings.key
        self.query_one("#backend-url", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "save-settings":
            self.save_settings()
        elif event.button.id == "close-settings":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.save_settings()

    def save_settings(self) -> None:
        url = self.query_one("#backend-url", Input).value.strip()
        key = self.query_one("#backend-key", Input).value.strip()
        if not url or not key:
            self.app.notify("Both the URL and the key are required.", severity="error")
            return
        self.dismiss((url, key))

    def action_cancel(self) -> None:
        self.dismiss(None)


class ConfirmScreen(ModalScreen[bool]):
    BINDINGS = [
        Binding("escape,n", "answer(False)", "No"),
        Binding("y", "answer(True)", "Yes"),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog", classes="dialog"):
            yield Label(self.message, classes="dialog-title")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Yes", id="confirm-yes", variant="error")
                yield Button("No", id="confirm-no")

    def on_mount(self) -> None:
        self.query_one("#confirm-no", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(event.button.id == "confirm-yes")

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)


class HelpScreen(Screen):
    BINDINGS = [
        Binding("escape,q", "app.pop_screen", "Back"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Markdown(HELP_TEXT)
        yield Footer()

    def on_mount(self) -> None:
        self.title = "Help"


HELP_TEXT = """\
# newsreader

Add articles from a URL (fetched through your fetch service) or by pasting text.

| Key | Action |
| --- | --- |
| `ctrl+s` | Backend settings |
| `enter` | Read the highlighted article |
| `s` | Summarize the highlighted article |
| `d` | Remove the highlighted article |
| `q` | Quit |
"""
