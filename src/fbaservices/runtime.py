"""Runtime context & bootstrap utilities (client config, deploy config)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from fbaservices.infrastructure.logging import setup_logging

DEFAULT_URL = "https://kbase.us/services/KBaseFBAModeling"
DEFAULT_SERVICE = "fbaModelServices"

DEPLOY_ENV = "KB_DEPLOYMENT_CONFIG"
SERVICE_ENV = "KB_SERVICE_NAME"


@dataclass(slots=True)
class RuntimeConfig:
    raw: dict[str, Any]
    path: Path

    @property
    def url(self) -> str:
        return os.getenv("FBA_URL") or self.raw.get("url") or DEFAULT_URL

    @property
    def workspace(self) -> str | None:
        return os.getenv("FBA_WORKSPACE") or self.raw.get("workspace")

    @property
    def token(self) -> str | None:
        return os.getenv("KB_AUTH_TOKEN") or self.raw.get("token")


class AppContext:
    _instance: AppContext | None = None

    def __init__(self, config: RuntimeConfig):
        self.config = config

    @classmethod
    def init(cls, config: RuntimeConfig) -> AppContext:
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def get(cls) -> AppContext:
        if cls._instance is None:
            raise RuntimeError("AppContext not initialized")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


def _read_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    return data


def load_config(path: Path) -> RuntimeConfig:
    if not path.exists():
        return RuntimeConfig(raw={}, path=path)
    return RuntimeConfig(raw=_read_yaml(path), path=path)


def default_config_path() -> Path:
    return Path(os.getenv("FBA_CONFIG", str(Path.home() / ".fbaservices.yaml")))


def bootstrap(force: bool = False) -> AppContext:
    if not force:
        try:
            return AppContext.get()
        except RuntimeError:
            pass
    load_dotenv(override=False)
    setup_logging()
    config = load_config(default_config_path())
    if force:
        AppContext.reset()
    return AppContext.init(config)


def current_workspace() -> str | None:
    """Workspace used when a script flag is omitted."""
    return bootstrap().config.workspace


# -------------------- Server deployment -------------------- #


def get_config_file() -> str | None:
    return os.environ.get(DEPLOY_ENV)


def get_service_name() -> str | None:
    return os.environ.get(SERVICE_ENV)


def load_deploy_config() -> dict[str, Any]:
    """Return the service section of the deploy config (empty when unset).

    The file is a YAML mapping keyed by service name; the section for
    `KB_SERVICE_NAME` (default `fbaModelServices`) is returned.
    """
    path = get_config_file()
    if not path:
        return {}
    data = _read_yaml(Path(path))
    section = data.get(get_service_name() or DEFAULT_SERVICE) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Deploy config section must be a mapping: {path}")
    return section


__all__ = [
    "AppContext",
    "RuntimeConfig",
    "bootstrap",
    "current_workspace",
    "get_config_file",
    "get_service_name",
    "load_config",
    "load_deploy_config",
]
