from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_BIND_ADDR = ":8080"
DEFAULT_CONTENT_DIR = "content"


class NetworkConfig(BaseModel):
    bind_host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)


class SessionConfig(BaseModel):
    ttl_hours: float = Field(default=24, gt=0, description="Lifetime of a login session.")

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.ttl_hours)


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_file: str | None = Field(
        default=None, description="Optional path of a rotating log file."
    )
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")


class AppConfig(BaseModel):
    admin_password: str = Field(min_length=1)
    content_dir: Path = Field(default=Path(DEFAULT_CONTENT_DIR))
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def parse_bind_addr(raw: str) -> tuple[str, int]:
    """Split ``host:port`` / ``:port`` / ``host`` into host and port."""

    raw = raw.strip()
    defaults = NetworkConfig()
    if not raw:
        return defaults.bind_host, defaults.port

    host, sep, port = raw.rpartition(":")
    if not sep:
        return raw, defaults.port
    if not port.isdigit():
        raise ValueError(f"invalid bind address: {raw!r}")
    return (host.strip("[]") or defaults.bind_host), int(port)


def load_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Build config from environment variables.

    - ADMIN_PASSWORD is required; validation is performed by Pydantic.
    - BIND_ADDR defaults to ``:8080``, CONTENT_DIR to ``content``.
    """

    env = os.environ if environ is None else environ

    host, port = parse_bind_addr(env.get("BIND_ADDR") or DEFAULT_BIND_ADDR)

    raw: dict = {
        "admin_password": env.get("ADMIN_PASSWORD") or "",
        "content_dir": env.get("CONTENT_DIR") or DEFAULT_CONTENT_DIR,
        "network": {"bind_host": host, "port": port},
        "logging": {},
    }
    if env.get("SESSION_TTL_HOURS"):
        raw["session"] = {"ttl_hours": env["SESSION_TTL_HOURS"]}
    if env.get("LOG_LEVEL"):
        raw["logging"]["level"] = env["LOG_LEVEL"].upper()
    if env.get("LOG_FILE"):
        raw["logging"]["log_file"] = env["LOG_FILE"]

    return AppConfig.model_validate(raw)


def apply_overrides(
    environ: Mapping[str, str],
    *,
    bind: str | None = None,
    content_dir: str | None = None,
    admin_password: str | None = None,
) -> dict[str, str]:
    """Return a copy of ``environ`` with non-empty command-line values layered on top."""

    merged = dict(environ)
    if bind:
        merged["BIND_ADDR"] = bind
    if content_dir:
        merged["CONTENT_DIR"] = content_dir
    if admin_password:
        merged["ADMIN_PASSWORD"] = admin_password
    return merged
