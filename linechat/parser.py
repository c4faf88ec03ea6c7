from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Callable, Iterable, Iterator, Sequence

from linechat.models import ChatMessage
from linechat.patterns import (
    at_time,
    match_date_header,
    parse_date_header,
    split_lines,
    strategy_for,
)

logger = logging.getLogger(__name__)

MessageHandler = Callable[[ChatMessage], None]


@dataclass(slots=True)
class _PendingMessage:
    date: datetime
    author: str
    lines: list[str]

    def snapshot(self) -> ChatMessage:
        return ChatMessage(date=self.date, author=self.author, text="\n".join(self.lines))


class LineChatParser:
    """Turns chat export lines into messages, one line at a time.

    A message is handed to subscribers only once it is closed by the next
    message start, a date header, or ``flush()``. Call ``flush()`` after the
    last line or the final message is never emitted.
    """

    def __init__(
        self,
        users: Sequence[str] | None = None,
        on_message: MessageHandler | None = None,
    ) -> None:
        self.users = list(users) if users is not None else None
        self.strategy = strategy_for(self.users)
        self.current_date = datetime.now().replace(second=0, microsecond=0)
        self._pending: _PendingMessage | None = None
        self._handlers: list[MessageHandler] = []
        if on_message is not None:
            self.subscribe(on_message)

    @property
    def current_message(self) -> ChatMessage | None:
        if self._pending is None:
            return None
        return self._pending.snapshot()

    def subscribe(self, handler: MessageHandler) -> None:
        self._handlers.append(handler)

    def process_line(self, line: str) -> None:
        header = match_date_header(line)
        if header is not None:
            self.flush()
            date = parse_date_header(header)
            if date is not None:
                self.current_date = date
                logger.debug("Date context set to %s", date.date().isoformat())
            return

        start = self.strategy.match(line)
        if start is not None:
            self.flush()
            self._pending = _PendingMessage(
                date=at_time(self.current_date, start.hour, start.minute),
                author=start.author,
                lines=[start.text],
            )
            return

        if self._pending is not None:
            self._pending.lines.append(line)

    def flush(self) -> None:
        if self._pending is None:
            return
        message = self._pending.snapshot()
        self._pending = None
        logger.debug("Emitting message from %r at %s", message.author, message.date.isoformat())
        for handler in self._handlers:
            handler(message)


def parse(source: str | Sequence[str], users: Sequence[str] | None = None) -> list[ChatMessage]:
    messages: list[ChatMessage] = []
    parser = LineChatParser(users, on_message=messages.append)

    lines = split_lines(source) if isinstance(source, str) else source
    for line in lines:
        parser.process_line(line)
    parser.flush()

    return messages


def iter_messages(lines: Iterable[str], users: Sequence[str] | None = None) -> Iterator[ChatMessage]:
    """Yield messages as they complete while consuming ``lines`` lazily.

    Works directly on an open text file: a trailing line break on each
    incoming line is dropped before classification.
    """
    ready: list[ChatMessage] = []
    parser = LineChatParser(users, on_message=ready.append)

    for raw_line in lines:
        parser.process_line(_strip_line_break(raw_line))
        if ready:
            yield from ready
            ready.clear()

    parser.flush()
    yield from ready


def _strip_line_break(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line
