from contextlib import asynccontextmanager
from typing import Dict, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

from stockops.core.exceptions import InvalidCredentialError, StoreOperationError
from stockops.services.identity import AuthenticatedUser


class MockStore:
    """
    In-memory stand-in for ElevatedStore.

    Writes are pending until commit(), and a failing mutation discards the
    pending ones, the same way the real store rolls back its session.
    """

    def __init__(
        self,
        stock: Optional[Dict[int, int]] = None,
        received: Optional[Dict[Tuple[int, int], int]] = None,
    ):
        self.stock_levels: Dict[int, int] = dict(stock or {})  # item_id -> committed stock
        self.received: Dict[Tuple[int, int], int] = dict(received or {})  # (po_id, item_id) -> qty
        self._pending_stock: Dict[int, int] = {}
        self._pending_received: Dict[Tuple[int, int], int] = {}
        self.calls: list = []  # Track calls for testing
        self.procedures: list = []
        self.fail_on_mutation: Optional[int] = None  # 1-based mutation number to fail
        self.failure_message = "update failed"
        self.failing_reads: set = set()
        self.procedure_error: Optional[str] = None
        self.ping_error: Optional[str] = None
        self.open_count = 0
        self.commits = 0
        self.rollbacks = 0
        self._mutations = 0

        self.session = MagicMock()
        self.session.commit = AsyncMock()
        self.session.rollback = AsyncMock()

    def _discard(self):
        self._pending_stock.clear()
        self._pending_received.clear()

    def _mutation(self):
        self._mutations += 1
        if self.fail_on_mutation == self._mutations:
            self._discard()
            raise StoreOperationError(self.failure_message)

    async def get_current_stock(self, item_id: int) -> Optional[int]:
        self.calls.append(("read", item_id))
        if item_id in self.failing_reads:
            raise StoreOperationError(f"read of {item_id} failed")
        if item_id in self._pending_stock:
            return self._pending_stock[item_id]
        return self.stock_levels.get(item_id)

    async def set_current_stock(self, item_id: int, value: int) -> int:
        self.calls.append(("write_stock", item_id, value))
        self._mutation()
        if item_id not in self.stock_levels and item_id not in self._pending_stock:
            return 0
        self._pending_stock[item_id] = value
        return 1

    async def set_received_quantity(self, purchase_order_id: int, stock_item_id: int, quantity: int) -> int:
        self.calls.append(("write_received", purchase_order_id, stock_item_id, quantity))
        self._mutation()
        key = (purchase_order_id, stock_item_id)
        if key not in self.received:
            return 0
        self._pending_received[key] = quantity
        return 1

    async def call_procedure(self, name: str) -> None:
        self.calls.append(("procedure", name))
        if self.procedure_error:
            raise StoreOperationError(self.procedure_error)
        self.procedures.append(name)

    async def ping(self) -> None:
        if self.ping_error:
            raise StoreOperationError(self.ping_error)

    async def commit(self) -> None:
        self.commits += 1
        self.stock_levels.update(self._pending_stock)
        self.received.update(self._pending_received)
        self._discard()

    async def rollback(self) -> None:
        self.rollbacks += 1
        self._discard()


def make_store_factory(store: MockStore):
    @asynccontextmanager
    async def factory():
        store.open_count += 1
        yield store
    return factory


class MockIdentityVerifier:
    """Accepts "Bearer <token>" for the tokens it was given."""

    def __init__(self, tokens: Optional[Dict[str, str]] = None):
        self.tokens = tokens or {}
        self.verified: list = []

    async def verify(self, authorization: str) -> AuthenticatedUser:
        self.verified.append(authorization)
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or token not in self.tokens:
            raise InvalidCredentialError()
        return AuthenticatedUser(id=self.tokens[token], email=f"{self.tokens[token]}@clinic.test")
