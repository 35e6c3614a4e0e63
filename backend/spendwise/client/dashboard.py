from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from ..schemas import Budget, Transaction, TransactionKind

ONLINE_BANNER = "Remote Sync Active"
OFFLINE_BANNER = "Offline / Local Mode"


@dataclass(frozen=True)
class Totals:
    income: float
    expense: float
    balance: float


@dataclass(frozen=True)
class BudgetStatus:
    category: str
    limit: float
    spent: float

    @property
    def remaining(self) -> float:
        return self.limit - self.spent

    @property
    def exceeded(self) -> bool:
        return self.spent > self.limit


def _expenses(records: Iterable[Transaction]) -> list[Transaction]:
    return [r for r in records if r.type == TransactionKind.expense]


def compute_totals(records: list[Transaction]) -> Totals:
    income = sum(r.amount for r in records if r.type == TransactionKind.income)
    expense = sum(r.amount for r in _expenses(records))
    return Totals(income=income, expense=expense, balance=income - expense)


def spending_by_category(records: list[Transaction]) -> dict[str, float]:
    grouped: dict[str, float] = {}
    for r in _expenses(records):
        grouped[r.category] = grouped.get(r.category, 0.0) + r.amount
    return grouped


def daily_spending(records: list[Transaction], days: int = 7, today: date | None = None) -> list[tuple[date, float]]:
    end = today or date.today()
    window = [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    totals = {day: 0.0 for day in window}
    for r in _expenses(records):
        if r.date in totals:
            totals[r.date] += r.amount
    return [(day, totals[day]) for day in window]


def budget_status(records: list[Transaction], budgets: list[Budget]) -> list[BudgetStatus]:
    spent = spending_by_category(records)
    return [
        BudgetStatus(category=b.category, limit=b.limit, spent=spent.get(b.category, 0.0))
        for b in budgets
    ]


def status_banner(remote_available: bool) -> str:
    return ONLINE_BANNER if remote_available else OFFLINE_BANNER
