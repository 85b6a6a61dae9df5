"""
config.py — Konfiguracja aplikacji przez zmienne środowiskowe.
Wszystkie zmienne mają prefiks HORNLOG_.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Reasoner — domyślny budżet przeszukiwania
    max_depth: int = 256
    max_nodes: int = 200_000
    timeout_ms: int = 5000

    # Logging
    log_level: str = "INFO"

    # App
    app_title: str = "Hornlog"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="HORNLOG_", env_file=".env", extra="ignore")
