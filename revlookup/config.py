# file: revlookup/config.py
"""
Configuration loader.

Design goals:
- Support `.env` for local development.
- Support YAML for provider selection and non-secret defaults.
- Validate configuration with pydantic.

Precedence (highest to lowest):
1. OS environment variables
2. `.env` values
3. YAML config file values
4. Code defaults
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, field_validator
from pydantic import ConfigDict as PydanticConfigDict

from revlookup.net.http import DEFAULT_USER_AGENT, HttpClientConfig


class ConfigurationError(RuntimeError):
    """Raised when a configuration file cannot be read or parsed."""


class RevLookupSettings(BaseModel):
    model_config = PydanticConfigDict(extra="ignore")

    # General
    default_region: str | None = None
    log_level: str = "INFO"
    json_logging: bool = False

    # HTTP
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    http_user_agent: str = DEFAULT_USER_AGENT

    # Providers, consulted in this order
    providers: list[str] = Field(default_factory=lambda: ["area_codes", "whitepages", "opencnam"])
    concurrent: bool = False
    area_code_db_path: Path | None = None
    whitepages_url_template: str = "https://www.whitepages.com/phone/{number}"
    opencnam_base_url: str = "https://api.opencnam.com/v2/phone/"

    @field_validator("providers", mode="before")
    @classmethod
    def _split_providers(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [p.strip().lower() for p in value.split(",") if p.strip()]
        return value

    def http_config(self) -> HttpClientConfig:
        return HttpClientConfig(
            timeout_seconds=self.http_timeout_seconds,
            user_agent=self.http_user_agent,
        )


_ENV_MAP: dict[str, str] = {
    "REVLOOKUP_DEFAULT_REGION": "default_region",
    "REVLOOKUP_LOG_LEVEL": "log_level",
    "REVLOOKUP_JSON_LOGGING": "json_logging",
    "REVLOOKUP_HTTP_TIMEOUT_SECONDS": "http_timeout_seconds",
    "REVLOOKUP_HTTP_USER_AGENT": "http_user_agent",
    # Comma-separated ("area_codes,opencnam") or a JSON array.
    "REVLOOKUP_PROVIDERS": "providers",
    "REVLOOKUP_CONCURRENT": "concurrent",
    "REVLOOKUP_AREA_CODE_DB_PATH": "area_code_db_path",
    "REVLOOKUP_WHITEPAGES_URL_TEMPLATE": "whitepages_url_template",
    "REVLOOKUP_OPENCNAM_BASE_URL": "opencnam_base_url",
}


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Unable to read config file {path}: {exc}") from exc
    return raw if isinstance(raw, dict) else {}


def _read_dotenv(path: Path) -> dict[str, str]:
    # dotenv_values does not mutate os.environ; it just parses the file.
    values = dotenv_values(path)
    out: dict[str, str] = {}
    for k, v in values.items():
        if isinstance(k, str) and isinstance(v, str):
            out[k] = v
    return out


def _overlay_env(target: dict[str, Any], env: dict[str, str]) -> None:
    for env_key, field_name in _ENV_MAP.items():
        if env_key not in env:
            continue
        raw = env[env_key]
        if field_name == "providers" and raw.lstrip().startswith("["):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if isinstance(parsed, list):
                target[field_name] = [str(p).strip().lower() for p in parsed]
        else:
            target[field_name] = raw


def load_settings(
    *, yaml_path: Path | None = None, env_path: Path | None = None
) -> RevLookupSettings:
    """
    Load settings from YAML and .env, with OS env overrides.

    Args:
        yaml_path: Optional YAML config path.
        env_path: Optional .env path (default: `.env` if present).
    """

    data: dict[str, Any] = {}

    if env_path is None:
        maybe = Path(".env")
        env_path = maybe if maybe.exists() else None

    dotenv = _read_dotenv(env_path) if env_path is not None and env_path.exists() else {}

    # YAML path resolution:
    # - explicit yaml_path wins
    # - else REVLOOKUP_CONFIG from OS env
    # - else REVLOOKUP_CONFIG from .env
    if yaml_path is None:
        cfg = os.environ.get("REVLOOKUP_CONFIG") or dotenv.get("REVLOOKUP_CONFIG")
        if cfg:
            yaml_path = Path(cfg)

    if yaml_path is not None and yaml_path.exists():
        data.update(_read_yaml(yaml_path))

    if dotenv:
        _overlay_env(data, dotenv)

    os_env: dict[str, str] = {k: v for k, v in os.environ.items() if k in _ENV_MAP}
    _overlay_env(data, os_env)

    return RevLookupSettings.model_validate(data)
