import asyncio

import httpx

from spendwise.client.cache import LocalCache
from spendwise.client.cli import build_parser, run
from spendwise.client.dashboard import OFFLINE_BANNER, ONLINE_BANNER
from spendwise.client.sync import SyncFacade


def _facade(tmp_path, handler) -> SyncFacade:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://remote")
    return SyncFacade(LocalCache(tmp_path / "storage.json"), client=client)


def _offline(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("offline", request=request)


def _invoke(facade: SyncFacade, *argv: str) -> int:
    return asyncio.run(run(build_parser().parse_args(list(argv)), facade))


def test_add_offline_then_list(tmp_path, capsys) -> None:
    facade = _facade(tmp_path, _offline)
    assert _invoke(facade, "add", "Lunch", "50", "--date", "2024-01-01", "--category", "Food & Dining") == 0
    assert _invoke(facade, "list") == 0

    out = capsys.readouterr().out
    assert OFFLINE_BANNER in out
    assert "Lunch" in out
    assert "-$50.00" in out


def test_list_online_empty(tmp_path, capsys) -> None:
    facade = _facade(tmp_path, lambda request: httpx.Response(200, json=[]))
    assert _invoke(facade, "list") == 0
    out = capsys.readouterr().out
    assert ONLINE_BANNER in out
    assert "No data found on the server." in out


def test_edit_replaces_fields(tmp_path, capsys) -> None:
    facade = _facade(tmp_path, _offline)
    facade.cache.save_records(
        [{"id": "a1", "title": "Lunch", "amount": 50, "date": "2024-01-01", "category": "Food & Dining", "type": "expense"}]
    )
    assert _invoke(facade, "edit", "a1", "--amount", "65", "--title", "Brunch") == 0
    record = facade.cache.get_records()[0]
    assert record["title"] == "Brunch"
    assert record["amount"] == 65
    assert record["category"] == "Food & Dining"


def test_edit_unknown_id(tmp_path, capsys) -> None:
    facade = _facade(tmp_path, _offline)
    assert _invoke(facade, "edit", "nope", "--amount", "1") == 1
    assert "Transaction not found: nope" in capsys.readouterr().out


def test_delete_and_summary(tmp_path, capsys) -> None:
    facade = _facade(tmp_path, _offline)
    facade.cache.save_records(
        [
            {"id": "s", "title": "Salary", "amount": 1000, "date": "2024-01-01", "category": "Income", "type": "income"},
            {"id": "b", "title": "Bus", "amount": 20, "date": "2024-01-02", "category": "Transport", "type": "expense"},
            {"id": "x", "title": "Gone", "amount": 5, "date": "2024-01-02", "category": "Other", "type": "expense"},
        ]
    )
    assert _invoke(facade, "delete", "x") == 0
    assert _invoke(facade, "budget", "set", "Transport", "10") == 0
    assert _invoke(facade, "summary") == 0

    out = capsys.readouterr().out
    assert "Total Balance: $980.00" in out
    assert "Expenses:      $20.00" in out
    assert "Transport" in out
    assert "OVER" in out
    assert "Gone" not in out


def test_insights_below_threshold(tmp_path, capsys) -> None:
    facade = _facade(tmp_path, _offline)
    assert _invoke(facade, "insights") == 0
    assert "Add at least 3 transactions to unlock AI insights." in capsys.readouterr().out


def test_invalid_input_prints_field_errors(tmp_path, capsys) -> None:
    facade = _facade(tmp_path, _offline)
    assert _invoke(facade, "add", "Lunch", "-5", "--category", "Food & Dining") == 2
    assert _invoke(facade, "add", "   ", "5", "--category", "Other") == 2
    assert _invoke(facade, "budget", "set", "Transport", "-10") == 2

    out = capsys.readouterr().out
    assert "Invalid amount:" in out
    assert "Invalid title:" in out
    assert "Invalid limit:" in out
    assert facade.cache.get_records() == []
    assert facade.cache.get_budgets() == []
