from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY = "spendwise_transactions_backup"
BUDGETS_KEY = "spendwise_budgets"


class LocalCache:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Local cache at %s is unreadable, treating it as empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def get_json(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set_json(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    def get_records(self) -> list[dict[str, Any]]:
        records = self.get_json(TRANSACTIONS_KEY, [])
        return records if isinstance(records, list) else []

    def save_records(self, records: list[dict[str, Any]]) -> None:
        self.set_json(TRANSACTIONS_KEY, records)

    def get_budgets(self) -> list[dict[str, Any]]:
        budgets = self.get_json(BUDGETS_KEY, [])
        return budgets if isinstance(budgets, list) else []

    def save_budgets(self, budgets: list[dict[str, Any]]) -> None:
        self.set_json(BUDGETS_KEY, budgets)
