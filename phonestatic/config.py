"""
Configuration loader.

Precedence (highest to lowest):
1. OS environment variables
2. `.env` values
3. YAML config file values
4. Code defaults

Command-line flags override whatever this module returns.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field
from pydantic import ConfigDict as PydanticConfigDict


class PhonestaticSettings(BaseModel):
    model_config = PydanticConfigDict(extra="ignore")

    # Logging
    log_level: str = "INFO"
    json_logging: bool = False

    # Generation
    id_dispatch: Literal["trie", "linear"] = "trie"
    pformat_width: int = Field(default=100, ge=40)
    output_path: Path | None = None


_ENV_MAP: dict[str, str] = {
    "PHONESTATIC_LOG_LEVEL": "log_level",
    "PHONESTATIC_JSON_LOGGING": "json_logging",
    "PHONESTATIC_ID_DISPATCH": "id_dispatch",
    "PHONESTATIC_PFORMAT_WIDTH": "pformat_width",
    "PHONESTATIC_OUTPUT_PATH": "output_path",
}


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
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
        if env_key in env:
            target[field_name] = env[env_key]


def load_settings(
    *, yaml_path: Path | None = None, env_path: Path | None = None
) -> PhonestaticSettings:
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
    # - else PHONESTATIC_CONFIG from OS env wins
    # - else PHONESTATIC_CONFIG from .env
    if yaml_path is None:
        cfg = os.environ.get("PHONESTATIC_CONFIG") or dotenv.get("PHONESTATIC_CONFIG")
        if cfg:
            yaml_path = Path(cfg)

    if yaml_path is not None and yaml_path.exists():
        data.update(_read_yaml(yaml_path))

    if dotenv:
        _overlay_env(data, dotenv)

    os_env: dict[str, str] = {k: v for k, v in os.environ.items() if k in _ENV_MAP}
    _overlay_env(data, os_env)

    return PhonestaticSettings.model_validate(data)
