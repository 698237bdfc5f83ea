from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import streamlit as st

from core.logger import get_logger

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "BAKERY_DATA_DIR"
ENV_CURRENCY = "BAKERY_CURRENCY"
ENV_SHOP_NAME = "BAKERY_SHOP_NAME"
ENV_JSONBIN_BIN_ID = "BAKERY_JSONBIN_BIN_ID"
ENV_JSONBIN_API_KEY = "BAKERY_JSONBIN_API_KEY"
ENV_JSONBIN_BASE_URL = "BAKERY_JSONBIN_BASE_URL"
ENV_REQUEST_TIMEOUT = "BAKERY_REQUEST_TIMEOUT"

DEFAULT_JSONBIN_BASE_URL = "https://api.jsonbin.io/v3"

log = get_logger("config")


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    currency: str = "Toman"
    shop_name: str = "Nasim Bakery"
    jsonbin_bin_id: Optional[str] = None
    jsonbin_api_key: Optional[str] = None
    jsonbin_base_url: str = DEFAULT_JSONBIN_BASE_URL
    request_timeout: float = 15.0

    @property
    def remote_configured(self) -> bool:
        return bool(self.jsonbin_bin_id and self.jsonbin_api_key)


def _default_data_dir() -> Path:
    return Path.home() / ".bakery_costing"


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            return json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Ignoring unreadable %s: %s", cfg, e)
            return {}
    return {}


def persist_data_dir(data_dir_str: str) -> None:
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    # Persisted in the default folder so the next start finds it.
    default_dir = _default_data_dir()
    default_dir.mkdir(parents=True, exist_ok=True)
    cfg = default_dir / CONFIG_FILE_NAME
    payload = _load_persisted_settings(default_dir)
    payload["data_dir"] = str(data_dir)
    cfg.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # Update session for immediate effect
    st.session_state["bakery_data_dir"] = str(data_dir)


def _float_or(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value not in (None, "") else default
    except ValueError:
        return default


def load_settings(data_dir: Path, env: Mapping[str, str], persisted: Optional[dict] = None) -> Settings:
    """
    Build Settings for a resolved data directory.
    Environment variables win over values persisted in settings.json.
    """
    persisted = persisted or {}

    def pick(env_key: str, file_key: str) -> Optional[str]:
        v = env.get(env_key) or persisted.get(file_key)
        return str(v).strip() if v else None

    data_dir.mkdir(parents=True, exist_ok=True)
    return Settings(
        data_dir=data_dir,
        db_path=data_dir / "bakery.db",
        currency=pick(ENV_CURRENCY, "currency") or Settings.currency,
        shop_name=pick(ENV_SHOP_NAME, "shop_name") or Settings.shop_name,
        jsonbin_bin_id=pick(ENV_JSONBIN_BIN_ID, "jsonbin_bin_id"),
        jsonbin_api_key=pick(ENV_JSONBIN_API_KEY, "jsonbin_api_key"),
        jsonbin_base_url=(pick(ENV_JSONBIN_BASE_URL, "jsonbin_base_url") or DEFAULT_JSONBIN_BASE_URL).rstrip("/"),
        request_timeout=_float_or(pick(ENV_REQUEST_TIMEOUT, "request_timeout"), Settings.request_timeout),
    )


@st.cache_resource
def get_settings() -> Settings:
    # Priority order for the data directory:
    # 1) Session state (set via Data Management page)
    # 2) Environment variable
    # 3) Persisted settings in default folder
    # 4) Default folder
    default_dir = _default_data_dir()
    persisted = _load_persisted_settings(default_dir)

    if "bakery_data_dir" in st.session_state:
        data_dir = Path(st.session_state["bakery_data_dir"]).expanduser().resolve()
    elif os.getenv(ENV_DATA_DIR):
        data_dir = Path(os.getenv(ENV_DATA_DIR, "")).expanduser().resolve()
    else:
        data_dir = Path(persisted.get("data_dir", default_dir)).expanduser().resolve()

    settings = load_settings(data_dir, os.environ, persisted)
    log.info("Using data directory %s", settings.data_dir)
    return settings
