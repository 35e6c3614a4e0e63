from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from fastapi import HTTPException
from sqlalchemy import Date, bindparam, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .migrations import apply_migrations
from .schemas import Transaction
from .store import store

logger = logging.getLogger(__name__)


def _to_float(value: Decimal | float | int | None) -> float | None:
    return float(value) if value is not None else None


def _row_from_payload(payload: Transaction) -> dict[str, Any]:
    return {
        "id": payload.id,
        "title": payload.title,
        "amount": payload.amount,
        "date": payload.date,
        "category": payload.category,
        "type": payload.type,
        "description": payload.description,
    }


class Persistence:
    def list_transactions(self) -> list[dict[str, Any]]:
        raise NotImplementedError

    def upsert_transaction(self, payload: Transaction) -> dict[str, Any]:
        raise NotImplementedError

    def delete_transaction(self, transaction_id: str) -> None:
        raise NotImplementedError


class InMemoryPersistence(Persistence):
    def list_transactions(self) -> list[dict[str, Any]]:
        rows = list(store.transactions.values())
        # Two stable passes give date desc, id desc.
        rows.sort(key=lambda r: r["id"], reverse=True)
        rows.sort(key=lambda r: r["date"], reverse=True)
        return rows

    def upsert_transaction(self, payload: Transaction) -> dict[str, Any]:
        row = _row_from_payload(payload)
        store.transactions[payload.id] = row
        return row

    def delete_transaction(self, transaction_id: str) -> None:
        store.transactions.pop(transaction_id, None)


class SqlPersistence(Persistence):
    def __init__(self, database_url: str) -> None:
        self.engine: Engine = create_engine(database_url, future=True, pool_pre_ping=True)
        self._ensure_transactions_table()

    def _run(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(sql), params or {})
                if result.returns_rows:
                    return [dict(row._mapping) for row in result.fetchall()]
                return []
        except SQLAlchemyError as exc:
            logger.error("Database error: %s", exc)
            raise HTTPException(status_code=500, detail=f"database error: {exc.__class__.__name__}") from exc

    def _ensure_transactions_table(self) -> None:
        try:
            apply_migrations(self.engine)
        except SQLAlchemyError:
            logger.exception("Database initialization failed")
            return
        logger.info("Database initialized successfully")

    @staticmethod
    def _normalize(row: dict[str, Any]) -> dict[str, Any]:
        value = row.get("date")
        return {
            **row,
            "amount": _to_float(row.get("amount")),
            "date": value if isinstance(value, date) else date.fromisoformat(str(value)[:10]),
        }

    def list_transactions(self) -> list[dict[str, Any]]:
        rows = self._run(
            """
            select id, title, amount, date, category, type, description
            from transactions
            order by date desc, id desc
            """
        )
        return [self._normalize(row) for row in rows]

    def upsert_transaction(self, payload: Transaction) -> dict[str, Any]:
        row = _row_from_payload(payload)
        try:
            with self.engine.begin() as conn:
                exists = conn.execute(
                    text("select 1 as ok from transactions where id = :id"),
                    {"id": payload.id},
                ).first()
                if exists:
                    conn.execute(
                        text(
                            """
                            update transactions
                            set title = :title, amount = :amount, date = :date,
                                category = :category, type = :type, description = :description
                            where id = :id
                            """
                        ).bindparams(bindparam("date", type_=Date)),
                        row,
                    )
                else:
                    conn.execute(
                        text(
                            """
                            insert into transactions (id, title, amount, date, category, type, description)
                            values (:id, :title, :amount, :date, :category, :type, :description)
                            """
                        ).bindparams(bindparam("date", type_=Date)),
                        row,
                    )
        except SQLAlchemyError as exc:
            logger.error("Database error on upsert of %s: %s", payload.id, exc)
            raise HTTPException(status_code=500, detail=f"database error: {exc.__class__.__name__}") from exc
        return row

    def delete_transaction(self, transaction_id: str) -> None:
        self._run("delete from transactions where id = :id", {"id": transaction_id})


def get_persistence() -> Persistence:
    if settings.storage_backend in {"sql", "postgres"}:
        return SqlPersistence(settings.database_url)
    return InMemoryPersistence()
