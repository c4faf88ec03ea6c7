from __future__ import annotations

from collections import Counter
import json
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import get_settings
from linechat.models import ChatMessage
from linechat.parser import iter_messages

app = typer.Typer(help="Parse LINE chat export text into messages.")
console = Console()


def _configure_logging(log_level: str | None) -> None:
    level_name = (log_level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        force=True,
    )


def _read_messages(path: Path, users: list[str] | None) -> list[ChatMessage]:
    settings = get_settings()
    authors = users or settings.default_users
    with path.open("r", encoding=settings.input_encoding, errors="replace") as handle:
        return list(iter_messages(handle, authors))


def _render_messages(messages: list[ChatMessage]) -> None:
    table = Table(title="Messages")
    table.add_column("Date")
    table.add_column("Author")
    table.add_column("Text", overflow="fold")
    for message in messages:
        table.add_row(message.date.strftime("%Y-%m-%d %H:%M"), message.author, message.text)
    console.print(table)


def _render_stats(messages: list[ChatMessage]) -> None:
    table = Table(title="Author Summary")
    table.add_column("Author")
    table.add_column("Messages", justify="right")
    for author, count in Counter(m.author for m in messages).most_common():
        table.add_row(author or "(unknown)", str(count))
    console.print(table)
    if messages:
        console.print(f"Total: {len(messages)} messages")
        console.print(f"First: {messages[0].date.strftime('%Y-%m-%d %H:%M')}")
        console.print(f"Last: {messages[-1].date.strftime('%Y-%m-%d %H:%M')}")


@app.command("parse")
def parse_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Chat export text file."),
    user: list[str] = typer.Option(None, "--user", "-u", help="Known author name (repeatable)."),
    as_json: bool = typer.Option(False, "--json", help="Print messages as a JSON array."),
    log_level: str = typer.Option(None, help="Logging level (DEBUG, INFO, WARNING)."),
) -> None:
    _configure_logging(log_level)
    messages = _read_messages(path, user)
    if as_json:
        typer.echo(json.dumps([m.to_dict() for m in messages], ensure_ascii=False, indent=2))
        return
    _render_messages(messages)


@app.command("stats")
def stats_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Chat export text file."),
    user: list[str] = typer.Option(None, "--user", "-u", help="Known author name (repeatable)."),
    log_level: str = typer.Option(None, help="Logging level (DEBUG, INFO, WARNING)."),
) -> None:
    _configure_logging(log_level)
    _render_stats(_read_messages(path, user))


if __name__ == "__main__":
    app()
