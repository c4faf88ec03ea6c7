from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from config.settings import get_settings
from scripts.parse_export import app

runner = CliRunner()

EXPORT = (
    "2017.09.02 Saturday\n"
    "12:00 foo hello world\n"
    "second line\n"
    "12:30 foo bar hi\n"
)


@pytest.fixture(autouse=True)
def _no_default_users(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LINECHAT_USERS", "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _export(tmp_path: Path) -> Path:
    path = tmp_path / "chat.txt"
    path.write_text(EXPORT, encoding="utf-8")
    return path


def test_parse_json_output(tmp_path: Path) -> None:
    result = runner.invoke(app, ["parse", str(_export(tmp_path)), "-u", "foo", "-u", "foo bar", "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload == [
        {"date": "2017-09-02T12:00:00", "author": "foo", "text": "hello world\nsecond line"},
        {"date": "2017-09-02T12:30:00", "author": "foo bar", "text": "hi"},
    ]


def test_parse_uses_default_users_from_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINECHAT_USERS", "foo")
    get_settings.cache_clear()
    result = runner.invoke(app, ["parse", str(_export(tmp_path)), "--json"])
    assert result.exit_code == 0, result.output
    assert [m["author"] for m in json.loads(result.output)] == ["foo", "foo"]


def test_parse_table_output(tmp_path: Path) -> None:
    result = runner.invoke(app, ["parse", str(_export(tmp_path)), "-u", "foo"])
    assert result.exit_code == 0, result.output
    assert "Messages" in result.output
    assert "2017-09-02 12:00" in result.output


def test_stats_output(tmp_path: Path) -> None:
    result = runner.invoke(app, ["stats", str(_export(tmp_path)), "-u", "foo", "-u", "foo bar"])
    assert result.exit_code == 0, result.output
    assert "Author Summary" in result.output
    assert "Total: 2 messages" in result.output


def test_missing_file_is_rejected(tmp_path: Path) -> None:
    result = runner.invoke(app, ["parse", str(tmp_path / "missing.txt")])
    assert result.exit_code != 0
