from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    database_url: str
    storage_key: str = "taskmaster_pro_tasks"
    log_level: str = "INFO"
    log_dir: str = "logs"
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    ai_model: str = "gpt-4o-mini"
    ai_timeout_seconds: float = 30.0


load_env()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip() or f"sqlite:///{PROJECT_ROOT / 'taskmaster.db'}"

SETTINGS = Settings(
    database_url=DATABASE_URL,
    storage_key=os.getenv("STORAGE_KEY", "").strip() or "taskmaster_pro_tasks",
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
    openai_api_key=os.getenv("OPENAI_API_KEY", "").strip() or None,
    openai_base_url=os.getenv("OPENAI_BASE_URL", "").strip() or None,
    ai_model=os.getenv("AI_MODEL", "").strip() or "gpt-4o-mini",
    ai_timeout_seconds=float(os.getenv("AI_TIMEOUT_SECONDS", "30")),
)
