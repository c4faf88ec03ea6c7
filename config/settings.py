from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    project_root: Path
    default_users: tuple[str, ...] | None
    input_encoding: str
    log_level: str


def _env_list(name: str) -> tuple[str, ...] | None:
    value = os.getenv(name, "")
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    project_root = Path(__file__).resolve().parents[1]
    load_dotenv(project_root / ".env")

    return Settings(
        project_root=project_root,
        default_users=_env_list("LINECHAT_USERS"),
        input_encoding=os.getenv("LINECHAT_ENCODING", "utf-8").strip() or "utf-8",
        log_level=os.getenv("LINECHAT_LOG_LEVEL", "WARNING").strip() or "WARNING",
    )
