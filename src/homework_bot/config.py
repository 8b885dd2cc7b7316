from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

load_dotenv()

def _split_csv_ints(s: str) -> List[int]:
    out = []
    for part in (s or "").split(","):
        part = part.strip()
        if part:
            out.append(int(part))
    return out

@dataclass(frozen=True)
class Settings:
    bot_token: str
    gemini_api_key: str
    database_url: str | None
    llm_model: str = "gemini-2.5-flash-lite"
    llm_timeout_sec: float = 60.0
    admin_ids: List[int] = field(default_factory=list)
    ui_default_lang: str = "en"  # en/uk
    send_attempts: int = 3
    send_retry_base_sec: float = 0.5

def _database_url() -> str | None:
    raw = os.getenv("DATABASE_URL")
    if raw is None:
        return "sqlite+aiosqlite:///./data/app.db"
    raw = raw.strip()
    # empty or "none" runs without a store (degraded mode)
    if not raw or raw.lower() == "none":
        return None
    return raw

def load_settings() -> Settings:
    load_dotenv()
    bot_token = os.getenv("BOT_TOKEN")
    if not bot_token:
        raise RuntimeError("BOT_TOKEN is required")

    gemini_api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
    if not gemini_api_key:
        raise RuntimeError("GOOGLE_API_KEY (or GEMINI_API_KEY) is required")

    llm_model = os.getenv("LLM_MODEL", "gemini-2.5-flash-lite").strip()
    llm_timeout_sec = float(os.getenv("LLM_TIMEOUT_SEC", "60"))
    ui_default_lang = os.getenv("UI_LANG", "en").strip().lower()
    if ui_default_lang not in {"en", "uk"}:
        raise RuntimeError("UI_LANG must be en or uk")

    send_attempts = int(os.getenv("SEND_ATTEMPTS", "3"))
    if send_attempts < 1:
        raise RuntimeError("SEND_ATTEMPTS must be at least 1")

    return Settings(
        bot_token=bot_token,
        gemini_api_key=gemini_api_key,
        database_url=_database_url(),
        llm_model=llm_model,
        llm_timeout_sec=llm_timeout_sec,
        admin_ids=_split_csv_ints(os.getenv("ADMIN_IDS", "")),
        ui_default_lang=ui_default_lang,
        send_attempts=send_attempts,
        send_retry_base_sec=float(os.getenv("SEND_RETRY_BASE_SEC", "0.5")),
    )
