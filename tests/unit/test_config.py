from __future__ import annotations

import json
from pathlib import Path

import pytest

from pocketledger.config import DEFAULT_LEDGER_NAME, load_config, resolve_config_path
from pocketledger.exceptions import ValidationError
from pocketledger.models import Currency


def _write_config(path: Path, payload: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_resolve_config_path_prefers_argument(isolated_config, tmp_path) -> None:
    explicit = tmp_path / "other.json"

    assert resolve_config_path(explicit) == explicit
    assert resolve_config_path() == isolated_config


def test_resolve_config_path_default(monkeypatch) -> None:
    monkeypatch.delenv("POCKETLEDGER_CONFIG")

    assert resolve_config_path() == Path.home() / ".pocketledger" / "config.json"


def test_load_config_defaults_when_missing(isolated_config) -> None:
    config = load_config()

    assert config.source is None
    assert config.ledger_path == isolated_config.parent / DEFAULT_LEDGER_NAME
    assert config.budget.currency == Currency("USD", 2)
    assert config.storage is None


def test_load_config_from_file(isolated_config, tmp_path) -> None:
    _write_config(
        isolated_config,
        {
            "ledger_path": str(tmp_path / "books" / "home.json"),
            "budget": {"name": "Household", "currency": {"code": "EUR", "precision": 2}},
            "storage": {"type": "csv", "directory": str(tmp_path / "export")},
        },
    )

    config = load_config()

    assert config.source == isolated_config
    assert config.ledger_path == tmp_path / "books" / "home.json"
    assert config.budget.name == "Household"
    assert config.budget.currency.code == "EUR"
    assert config.storage.type == "csv"
    assert config.storage.options == {"directory": str(tmp_path / "export")}


def test_load_config_rejects_invalid_budget(isolated_config) -> None:
    _write_config(
        isolated_config,
        {"budget": {"name": "", "currency": {"code": "", "precision": 2}}},
    )

    with pytest.raises(ValidationError) as excinfo:
        load_config()

    assert set(excinfo.value.paths()) == {("name",), ("currency", "code")}


def test_load_config_rejects_unknown_storage(isolated_config) -> None:
    _write_config(isolated_config, {"storage": {"type": "sqlite"}})

    with pytest.raises(ValidationError):
        load_config()
