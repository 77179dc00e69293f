"""
Environment-based configuration management for ModSentinel.

Uses pydantic-settings to load configuration values from environment
variables and .env files. The auditor service imports its settings from
this module to ensure consistent configuration handling.

All environment variables are prefixed with ``MS_`` to avoid collisions.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from ``MS_``-prefixed environment variables.

    Attributes:
        dataset_url: URL of the remote mod definitions document.
        dataset_timeout_s: Total timeout for one dataset fetch.
        check_interval_s: Seconds between classification passes.
        tick_interval_s: Period of the host tick driving the classifier.
        auto_check_enabled: Whether periodic classification runs at all.
        webhook_url: Optional webhook receiving detection events.
        webhook_max_attempts: Delivery attempts per webhook event.
        webhook_timeout_s: Per-request webhook timeout.
        webhook_headers: Extra headers sent with every webhook request.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Render logs as JSON (``False`` for console output).
        api_host: Bind address for the auditor HTTP service.
        api_port: Bind port for the auditor HTTP service.
    """

    model_config = SettingsConfigDict(
        env_prefix="MS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Reference dataset ──
    dataset_url: str = Field(
        default="https://www.poopoovr.co.uk/data",
        description="Remote mod definitions document.",
    )
    dataset_timeout_s: float = Field(
        default=10.0,
        gt=0.0,
        description="Total timeout for one dataset fetch.",
    )

    # ── Classification ──
    check_interval_s: float = Field(
        default=5.0,
        gt=0.0,
        description="Seconds between classification passes.",
    )
    tick_interval_s: float = Field(
        default=0.5,
        gt=0.0,
        description="Host tick period.",
    )
    auto_check_enabled: bool = Field(default=True, description="Run periodic classification.")

    # ── Detection webhook ──
    webhook_url: str = Field(default="", description="Detection webhook URL (empty = disabled).")
    webhook_max_attempts: int = Field(default=3, ge=1, description="Webhook delivery attempts.")
    webhook_timeout_s: float = Field(default=10.0, gt=0.0, description="Webhook request timeout.")
    webhook_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers on every webhook request (JSON object in the env var).",
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Logging level.")
    log_json: bool = Field(default=True, description="Render logs as JSON.")

    # ── API ──
    api_host: str = Field(default="0.0.0.0", description="Auditor service bind address.")
    api_port: int = Field(default=8010, ge=1, le=65535, description="Auditor service bind port.")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Returns:
        The global ``Settings`` instance.
    """
    return Settings()
