from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class ChatMessage:
    date: datetime
    author: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "author": self.author,
            "text": self.text,
        }


@dataclass(frozen=True, slots=True)
class MessageStart:
    hour: int
    minute: int
    author: str
    text: str
