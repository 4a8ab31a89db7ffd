from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    max_selected_products: int = 3
    catalog_path: Optional[str] = None


def _deep_get(d: Dict[str, Any], path: str, default=None):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _split_origins(raw: Any) -> Tuple[str, ...]:
    if isinstance(raw, str):
        return tuple(origin.strip() for origin in raw.split(",") if origin.strip())
    return tuple(raw)


def load_settings(config_path: str = "config.yaml") -> Settings:
    """
    Loads config.yaml + overrides from .env/environment variables.
    """
    load_dotenv()  # loads .env into env vars

    cfg: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    # empty env vars count as "not set"
    def _env_or_cfg(key: str, cfg_path: str, default):
        v = os.getenv(key)
        if v is None or v.strip() == "":
            return _deep_get(cfg, cfg_path, default)
        return v.strip()

    env = _env_or_cfg("APP_ENV", "app.env", "dev")
    log_level = _env_or_cfg("LOG_LEVEL", "app.log_level", "INFO")
    cors_origins = _split_origins(_env_or_cfg("CORS_ORIGINS", "api.cors_origins", DEFAULT_CORS_ORIGINS))
    max_selected_products = int(_env_or_cfg("MAX_SELECTED_PRODUCTS", "simulation.max_selected_products", 3))
    catalog_path = _env_or_cfg("CATALOG_PATH", "simulation.catalog_path", None)

    if max_selected_products < 1:
        raise ValueError("MAX_SELECTED_PRODUCTS must be at least 1")

    return Settings(
        env=str(env),
        log_level=str(log_level),
        cors_origins=cors_origins,
        max_selected_products=max_selected_products,
        catalog_path=catalog_path,
    )
