from __future__ import annotations

import pytest

from newsreader.storage import MemoryStore


class FailingStore(MemoryStore):
    """A MemoryStore whose writes fail once ``failing`` is set, like a full disk."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    def set(self, key: str, value: str) -> None:
        if self.failing:
            raise OSError(28, "No space left on device")
        super().set(key, value)


class FakeView:
    def __init__(self) -> None:
        self.renders = 0
        self.notifications: list[tuple[str, str]] = []
        self.settings_opened = 0
        self.opened = []
        self.confirm_answer = True

    def refresh_articles(self) -> None:
        self.renders += 1

    def notify_user(self, message: str, severity: str = "information") -> None:
        self.notifications.append((message, severity))

    def open_settings(self) -> None:
        self.settings_opened += 1

    def open_article(self, article) -> None:
        self.opened.append(article)

    async def confirm(self, message: str) -> bool:
        return self.confirm_answer


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def view():
    return FakeView()
