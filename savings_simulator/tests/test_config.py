from __future__ import annotations

import pytest

from savings_simulator.config import DEFAULT_CORS_ORIGINS, Settings, load_settings

ENV_KEYS = ["APP_ENV", "LOG_LEVEL", "CORS_ORIGINS", "MAX_SELECTED_PRODUCTS", "CATALOG_PATH"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_config(tmp_path):
    settings = load_settings(str(tmp_path / "missing.yaml"))
    assert settings == Settings()
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS


def test_yaml_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "app:\n"
        "  env: prod\n"
        "  log_level: DEBUG\n"
        "api:\n"
        "  cors_origins:\n"
        "    - https://simulator.example\n"
        "simulation:\n"
        "  max_selected_products: 2\n",
        encoding="utf-8",
    )

    settings = load_settings(str(path))
    assert settings.env == "prod"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ("https://simulator.example",)
    assert settings.max_selected_products == 2


def test_environment_wins_over_yaml(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("simulation:\n  max_selected_products: 2\n", encoding="utf-8")
    monkeypatch.setenv("MAX_SELECTED_PRODUCTS", "4")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("LOG_LEVEL", "  ")

    settings = load_settings(str(path))
    assert settings.max_selected_products == 4
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.log_level == "INFO"


def test_invalid_product_limit(tmp_path, monkeypatch):
    monkeypatch.setenv("MAX_SELECTED_PRODUCTS", "0")
    with pytest.raises(ValueError):
        load_settings(str(tmp_path / "missing.yaml"))
