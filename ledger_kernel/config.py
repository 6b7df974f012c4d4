"""
Kernel configuration (``ledger_kernel.config``).

Responsibility
--------------
Loads the runtime settings of the ledger kernel from an optional YAML file
and the process environment, and returns them as a frozen ``KernelConfig``.

Resolution order (later wins)
-----------------------------
1. Dataclass defaults.
2. Keys from the YAML file passed to ``load_config`` (unknown keys rejected).
3. Environment: ``LEDGER_DATABASE_URL`` (or ``DATABASE_URL``) and
   ``LEDGER_LOG_LEVEL``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or no database URL after resolution  -> ``ValueError``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

ENV_DATABASE_URL = "LEDGER_DATABASE_URL"
ENV_DATABASE_URL_FALLBACK = "DATABASE_URL"
ENV_LOG_LEVEL = "LEDGER_LOG_LEVEL"


@dataclass(frozen=True)
class KernelConfig:
    """Settings consumed by ``db.engine`` and the services."""

    database_url: str = ""
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    # Seconds a writer waits for a row/database lock before the driver gives up.
    lock_timeout_seconds: float = 30.0
    log_level: str = "INFO"
    recent_transactions_limit: int = 10
    budget_warning_percent: int = 80
    budget_caution_percent: int = 60

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


DEFAULT_CONFIG = KernelConfig()


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _from_mapping(data: dict[str, Any]) -> KernelConfig:
    known = {f.name for f in fields(KernelConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
    return replace(DEFAULT_CONFIG, **data)


def _apply_env(config: KernelConfig) -> KernelConfig:
    overrides: dict[str, Any] = {}
    url = os.getenv(ENV_DATABASE_URL) or os.getenv(ENV_DATABASE_URL_FALLBACK)
    if url:
        overrides["database_url"] = url
    level = os.getenv(ENV_LOG_LEVEL)
    if level:
        overrides["log_level"] = level.strip().upper()
    return replace(config, **overrides) if overrides else config


def load_config(path: str | Path | None = None) -> KernelConfig:
    """
    Build the active configuration.

    Args:
        path: Optional YAML file with a flat mapping of ``KernelConfig`` keys.

    Returns:
        KernelConfig with file values and environment overrides applied.

    Raises:
        ValueError: unknown keys, or no database URL configured anywhere.
    """
    config = DEFAULT_CONFIG
    if path is not None:
        config = _from_mapping(load_yaml_file(Path(path)))
    config = _apply_env(config)

    if not config.database_url:
        raise ValueError(
            f"No database URL configured; set {ENV_DATABASE_URL} or "
            "database_url in the config file"
        )
    if config.budget_caution_percent > config.budget_warning_percent:
        raise ValueError("budget_caution_percent cannot exceed budget_warning_percent")
    return config
