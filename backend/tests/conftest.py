import pytest

from spendwise.store import store


@pytest.fixture(autouse=True)
def clean_store() -> None:
    store.reset()
