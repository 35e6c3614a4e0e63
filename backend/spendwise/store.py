from typing import Any


class InMemoryStore:
    def __init__(self) -> None:
        self.transactions: dict[str, dict[str, Any]] = {}

    def reset(self) -> None:
        self.transactions.clear()


store = InMemoryStore()
