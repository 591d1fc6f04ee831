"""Application configuration loaded from a JSON file."""

from __future__ import annotations

from dataclasses import dataclass
import json
import os
from pathlib import Path
from typing import Any

from pocketledger.models import AdapterConfig, BudgetMetadata

CONFIG_ENV_VAR = "POCKETLEDGER_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.pocketledger/config.json")
DEFAULT_LEDGER_NAME = "ledger.json"
DEFAULT_BUDGET = {
    "name": "My Budget",
    "currency": {"code": "USD", "precision": 2},
    "version": 1,
}


@dataclass(frozen=True)
class AppConfig:
    """Resolved configuration.

    Attributes:
        ledger_path: Default ledger snapshot used by the CLI
        budget: Budget name, currency and version
        storage: Optional adapter configuration handed to an import/export consumer
        source: Config file the values came from, or None for defaults
    """

    ledger_path: Path
    budget: BudgetMetadata
    storage: AdapterConfig | None = None
    source: Path | None = None


def resolve_config_path(config_path: str | Path | None = None) -> Path:
    """Resolve the config path from the argument, environment, or default."""
    if config_path is not None:
        return Path(config_path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def _read_payload(path: Path) -> dict[str, Any]:
    """Load config file if present, else return empty config."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        return {}
    return payload


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate the application configuration.

    Raises:
        ValidationError: If the ``budget`` or ``storage`` section is invalid
    """
    path = resolve_config_path(config_path)
    payload = _read_payload(path)
    ledger_path = payload.get("ledger_path")
    if ledger_path:
        resolved_ledger = Path(ledger_path).expanduser()
    else:
        resolved_ledger = path.parent / DEFAULT_LEDGER_NAME
    budget = BudgetMetadata.from_dict(payload.get("budget") or DEFAULT_BUDGET)
    storage_payload = payload.get("storage")
    storage = AdapterConfig.from_dict(storage_payload) if storage_payload is not None else None
    return AppConfig(
        ledger_path=resolved_ledger,
        budget=budget,
        storage=storage,
        source=path if payload else None,
    )
