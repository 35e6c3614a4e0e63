from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..config import settings
from ..schemas import Budget, Transaction
from .cache import LocalCache

logger = logging.getLogger(__name__)

TRANSACTIONS_PATH = "/api/transactions"

REMOTE_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


@dataclass
class FetchResult:
    records: list[Transaction] = field(default_factory=list)
    remote_available: bool = False


@dataclass
class WriteResult:
    remote_available: bool = False


def _dump(record: Transaction) -> dict[str, Any]:
    return record.model_dump(mode="json")


class SyncFacade:
    def __init__(self, cache: LocalCache, client: httpx.AsyncClient | None = None) -> None:
        self.cache = cache
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=settings.api_url, timeout=settings.api_timeout)

    async def aclose(self) -> None:
        if self._owns_client and not self.client.is_closed:
            await self.client.aclose()

    async def __aenter__(self) -> "SyncFacade":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def cached_records(self) -> list[Transaction]:
        records: list[Transaction] = []
        for raw in self.cache.get_records():
            try:
                records.append(Transaction.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping malformed cached record: %r", raw)
        return records

    async def fetch_all(self) -> FetchResult:
        try:
            response = await self.client.get(TRANSACTIONS_PATH)
            response.raise_for_status()
            records = [Transaction.model_validate(item) for item in response.json()]
        except REMOTE_ERRORS + (ValueError, TypeError) as exc:
            logger.warning("Record server unreachable, falling back to local cache: %s", exc)
            return FetchResult(records=self.cached_records(), remote_available=False)
        self.cache.save_records([_dump(r) for r in records])
        return FetchResult(records=records, remote_available=True)

    async def save(self, record: Transaction) -> WriteResult:
        local = self.cache.get_records()
        payload = _dump(record)
        index = next((i for i, item in enumerate(local) if item.get("id") == record.id), None)
        if index is None:
            local.insert(0, payload)
        else:
            local[index] = payload
        self.cache.save_records(local)

        try:
            response = await self.client.post(TRANSACTIONS_PATH, json=payload)
            response.raise_for_status()
        except REMOTE_ERRORS as exc:
            logger.error("Remote save of %s failed, data saved locally only: %s", record.id, exc)
            return WriteResult(remote_available=False)
        return WriteResult(remote_available=True)

    async def delete(self, transaction_id: str) -> WriteResult:
        local = [item for item in self.cache.get_records() if item.get("id") != transaction_id]
        self.cache.save_records(local)

        try:
            response = await self.client.delete(f"{TRANSACTIONS_PATH}/{quote(transaction_id, safe='')}")
            response.raise_for_status()
        except REMOTE_ERRORS as exc:
            logger.error("Remote delete of %s failed, removed locally only: %s", transaction_id, exc)
            return WriteResult(remote_available=False)
        return WriteResult(remote_available=True)

    def get_budgets(self) -> list[Budget]:
        budgets: list[Budget] = []
        for raw in self.cache.get_budgets():
            try:
                budgets.append(Budget.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping malformed cached budget: %r", raw)
        return budgets

    def save_budget(self, budget: Budget) -> list[Budget]:
        budgets = self.cache.get_budgets()
        payload = budget.model_dump(mode="json")
        index = next((i for i, item in enumerate(budgets) if item.get("category") == payload["category"]), None)
        if index is None:
            budgets.append(payload)
        else:
            budgets[index] = payload
        self.cache.save_budgets(budgets)
        return self.get_budgets()
