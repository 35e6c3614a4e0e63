from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date

from pydantic import ValidationError

from ..config import settings
from ..schemas import Budget, Category, Transaction, TransactionKind, new_transaction_id
from .cache import LocalCache
from .dashboard import budget_status, compute_totals, daily_spending, spending_by_category, status_banner
from .insights import MIN_RECORDS, InsightRequester
from .sync import SyncFacade

CATEGORY_CHOICES = [c.value for c in Category]
KIND_CHOICES = [k.value for k in TransactionKind]


def _format_amount(record: Transaction) -> str:
    sign = "+" if record.type == TransactionKind.income else "-"
    return f"{sign}${record.amount:.2f}"


def _print_banner(remote_available: bool) -> None:
    print(f"[{status_banner(remote_available)}]")


def _print_records(records: list[Transaction], remote_available: bool) -> None:
    if not records:
        print("No data found on the server." if remote_available else "No local data found.")
        return
    for r in records:
        print(f"{r.id:<14} {r.date.isoformat()}  {r.title:<30} {r.category:<18} {_format_amount(r):>12}")


async def cmd_list(facade: SyncFacade, args: argparse.Namespace) -> int:
    result = await facade.fetch_all()
    _print_banner(result.remote_available)
    _print_records(result.records, result.remote_available)
    return 0


async def _resolve_category(args: argparse.Namespace) -> str:
    if args.category:
        return args.category
    requester = InsightRequester()
    suggestion = await requester.suggest_category(args.title)
    print(f"Suggested category: {suggestion.value}")
    return suggestion.value


async def cmd_add(facade: SyncFacade, args: argparse.Namespace) -> int:
    record = Transaction(
        id=new_transaction_id(),
        title=args.title,
        amount=args.amount,
        date=args.date,
        category=await _resolve_category(args),
        type=args.type,
        description=args.description,
    )
    result = await facade.save(record)
    _print_banner(result.remote_available)
    print(f"Saved {record.id}")
    return 0


async def cmd_edit(facade: SyncFacade, args: argparse.Namespace) -> int:
    current = next((r for r in (await facade.fetch_all()).records if r.id == args.id), None)
    if current is None:
        print(f"Transaction not found: {args.id}")
        return 1
    updates = {
        key: value
        for key, value in {
            "title": args.title,
            "amount": args.amount,
            "date": args.date,
            "category": args.category,
            "type": args.type,
            "description": args.description,
        }.items()
        if value is not None
    }
    record = Transaction.model_validate({**current.model_dump(), **updates})
    result = await facade.save(record)
    _print_banner(result.remote_available)
    print(f"Updated {record.id}")
    return 0


async def cmd_delete(facade: SyncFacade, args: argparse.Namespace) -> int:
    result = await facade.delete(args.id)
    _print_banner(result.remote_available)
    print(f"Deleted {args.id}")
    return 0


async def cmd_summary(facade: SyncFacade, args: argparse.Namespace) -> int:
    result = await facade.fetch_all()
    _print_banner(result.remote_available)
    totals = compute_totals(result.records)
    print(f"Total Balance: ${totals.balance:.2f}")
    print(f"Income:        ${totals.income:.2f}")
    print(f"Expenses:      ${totals.expense:.2f}")
    print("\nSpending by Category")
    for name, value in spending_by_category(result.records).items():
        print(f"  {name:<18} ${value:.2f}")
    print(f"\nDaily Spending (Last {args.days} Days)")
    for day, value in daily_spending(result.records, days=args.days):
        print(f"  {day.strftime('%m-%d')}  ${value:.2f}")
    statuses = budget_status(result.records, facade.get_budgets())
    if statuses:
        print("\nBudgets")
        for s in statuses:
            flag = "  OVER" if s.exceeded else ""
            print(f"  {s.category:<18} ${s.spent:.2f} / ${s.limit:.2f}{flag}")
    return 0


async def cmd_budget(facade: SyncFacade, args: argparse.Namespace) -> int:
    if args.budget_command == "set":
        facade.save_budget(Budget(category=args.category, limit=args.limit))
        print(f"Budget for {args.category} set to ${args.limit:.2f}")
        return 0
    budgets = facade.get_budgets()
    if not budgets:
        print("No budgets set.")
    for b in budgets:
        print(f"{b.category:<18} ${b.limit:.2f}")
    return 0


async def cmd_insights(facade: SyncFacade, args: argparse.Namespace) -> int:
    result = await facade.fetch_all()
    _print_banner(result.remote_available)
    if len(result.records) < MIN_RECORDS:
        print(f"Add at least {MIN_RECORDS} transactions to unlock AI insights.")
        return 0
    insight = await InsightRequester().get_insights(result.records)
    if insight is None:
        print("No insights available right now.")
        return 0
    print("Executive Summary")
    print(f"  {insight.summary}")
    print("\nSavings Potential")
    print(f"  {insight.savingsPotential}")
    print("\nActionable Recommendations")
    for idx, rec in enumerate(insight.recommendations, start=1):
        print(f"  #{idx} {rec}")
    return 0


async def cmd_suggest(facade: SyncFacade, args: argparse.Namespace) -> int:
    print((await InsightRequester().suggest_category(args.title)).value)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spendwise", description="Personal finance tracker")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List transactions").set_defaults(handler=cmd_list)

    add = sub.add_parser("add", help="Add a transaction")
    add.add_argument("title")
    add.add_argument("amount", type=float)
    add.add_argument("--date", type=date.fromisoformat, default=date.today())
    add.add_argument("--category", choices=CATEGORY_CHOICES)
    add.add_argument("--type", choices=KIND_CHOICES, default=TransactionKind.expense.value)
    add.add_argument("--description")
    add.set_defaults(handler=cmd_add)

    edit = sub.add_parser("edit", help="Replace fields of an existing transaction")
    edit.add_argument("id")
    edit.add_argument("--title")
    edit.add_argument("--amount", type=float)
    edit.add_argument("--date", type=date.fromisoformat)
    edit.add_argument("--category", choices=CATEGORY_CHOICES)
    edit.add_argument("--type", choices=KIND_CHOICES)
    edit.add_argument("--description")
    edit.set_defaults(handler=cmd_edit)

    delete = sub.add_parser("delete", help="Delete a transaction")
    delete.add_argument("id")
    delete.set_defaults(handler=cmd_delete)

    summary = sub.add_parser("summary", help="Show totals, category and daily spending")
    summary.add_argument("--days", type=int, default=7)
    summary.set_defaults(handler=cmd_summary)

    budget = sub.add_parser("budget", help="Manage per-category budgets")
    budget_sub = budget.add_subparsers(dest="budget_command", required=True)
    budget_set = budget_sub.add_parser("set")
    budget_set.add_argument("category", choices=CATEGORY_CHOICES)
    budget_set.add_argument("limit", type=float)
    budget_sub.add_parser("list")
    budget.set_defaults(handler=cmd_budget)

    sub.add_parser("insights", help="Request AI spending insights").set_defaults(handler=cmd_insights)

    suggest = sub.add_parser("suggest", help="Suggest a category for a title")
    suggest.add_argument("title")
    suggest.set_defaults(handler=cmd_suggest)
    return parser


async def run(args: argparse.Namespace, facade: SyncFacade | None = None) -> int:
    owned = facade is None
    facade = facade or SyncFacade(LocalCache(settings.cache_path))
    try:
        return await args.handler(facade, args)
    except ValidationError as exc:
        for err in exc.errors():
            field = ".".join(str(item) for item in err.get("loc", [])) or "input"
            print(f"Invalid {field}: {err.get('msg', 'validation error')}")
        return 2
    finally:
        if owned:
            await facade.aclose()


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
