from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

PASTED_TEXT_SOURCE = "Pasted Text"


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# --- Data models ---
@dataclass
class Article:
    id: str
    title: str
    content: str
    source: str
    summary: Optional[str] = None
    is_summarizing: bool = False

    @property
    def is_pasted(self) -> bool:
        return self.source == PASTED_TEXT_SOURCE

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for storage. The summarizing flag is transient and never written."""
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "source": self.source,
        }
        if self.summary is not None:
            data["summary"] = self.summary
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Article":
        summary = data.get("summary")
        return cls(
            id=as_text(data.get("id")),
            title=as_text(data.get("title")),
            content=as_text(data.get("content")),
            source=as_text(data.get("source")),
            summary=as_text(summary) if summary is not None else None,
            is_summarizing=False,
        )


@dataclass
class BackendSettings:
    url: str
    key: str

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "key": self.key}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BackendSettings":
        return cls(url=as_text(data.get("url")), key=as_text(data.get("key")))
