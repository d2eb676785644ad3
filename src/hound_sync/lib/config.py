"""Config files — accounting settings, account list and record files from YAML.

Reads ``settings.yaml`` and ``accounts.yaml`` from the config directory:

    # accounts.yaml
    accounts:
      - accounting_id: "35"
        name: Checking

Record files (YAML or JSON) hold one receipt or bill:

    kind: receipt
    record: {id: r-1, amount: "42.50", description: Lumber, ...}
    line_items:
      - {amount: "42.50", description: Studs, work_item_id: framing}
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import ValidationError
from .models import AccountingSettings, LineItem, record_from_dict
from .sync_plan import SyncEntry


@dataclass
class Account:
    accounting_id: str
    name: str = ""


class HoundConfig:
    """Loads and saves accounting settings and the known account list."""

    def __init__(self, config_dir: Path) -> None:
        self.config_dir = config_dir
        self.settings = AccountingSettings()
        self.accounts: list[Account] = []
        self._load_settings()
        self._load_accounts()

    @property
    def settings_path(self) -> Path:
        return self.config_dir / "settings.yaml"

    @property
    def accounts_path(self) -> Path:
        return self.config_dir / "accounts.yaml"

    def _load_settings(self) -> None:
        if not self.settings_path.exists():
            return
        data = _read_mapping(self.settings_path)
        self.settings = AccountingSettings.from_dict(data)

    def _load_accounts(self) -> None:
        if not self.accounts_path.exists():
            return
        data = _read_mapping(self.accounts_path)
        accounts = data.get("accounts", []) or []
        if not isinstance(accounts, list):
            raise ValidationError(
                f"{self.accounts_path.name}: 'accounts' must be a list", field="accounts"
            )
        for i, acct in enumerate(accounts):
            if not isinstance(acct, dict) or acct.get("accounting_id") in (None, ""):
                raise ValidationError(
                    f"{self.accounts_path.name}: accounts[{i}] has no accounting_id",
                    field="accounting_id",
                )
            self.accounts.append(
                Account(accounting_id=str(acct["accounting_id"]), name=acct.get("name") or "")
            )

    def account_ids(self) -> set[str]:
        return {a.accounting_id for a in self.accounts}

    def save_settings(self) -> None:
        """Persist current settings back to settings.yaml."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.settings_path, "w") as f:
            yaml.dump(self.settings.to_dict(), f, default_flow_style=False, allow_unicode=True)

    def save_accounts(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        data = {
            "accounts": [{"accounting_id": a.accounting_id, "name": a.name} for a in self.accounts]
        }
        with open(self.accounts_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)


def _read_mapping(path: Path) -> dict:
    """Load a YAML/JSON file whose top level must be a mapping."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValidationError(f"{path.name}: invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"{path.name}: expected a mapping at top level")
    return data


def load_entry(path: Path) -> SyncEntry:
    """Load a receipt or bill with its line items from a YAML/JSON file."""
    data = _read_mapping(path)
    record = data.get("record")
    if not isinstance(record, dict):
        raise ValidationError(f"{path.name}: 'record' must be a mapping", field="record")
    kind = data.get("kind", "receipt")
    if not isinstance(kind, str):
        raise ValidationError(f"{path.name}: 'kind' must be text", field="kind")

    raw_items = data.get("line_items", []) or []
    if not isinstance(raw_items, list):
        raise ValidationError(f"{path.name}: 'line_items' must be a list", field="line_items")
    items = []
    for i, item in enumerate(raw_items):
        if not isinstance(item, dict):
            raise ValidationError(
                f"{path.name}: line_items[{i}] must be a mapping", field=f"line_items[{i}]"
            )
        items.append(LineItem.from_dict(item))
    return SyncEntry(record=record_from_dict(kind, record), line_items=items)
