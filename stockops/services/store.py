# stockops/services/store.py
"""
Elevated store capability.

ElevatedStore wraps a session opened with the service-role database login.
It is only ever created after the caller has been authenticated (or for the
repair endpoints, which run no caller-specific logic) and is never handed a
user token. Every mutation is a single UPDATE statement; committing is left
to the caller so that the corrector can choose per-step or all-at-once.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import select, update, func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stockops.core.config import Settings
from stockops.core.exceptions import StoreOperationError
from stockops.database import get_session
from stockops.models.stock_item import StockItem
from stockops.models.purchase_order import PurchaseOrderItem

logger = logging.getLogger(__name__)


def _error_message(exc: SQLAlchemyError) -> str:
    # DBAPIError keeps the driver's error on .orig. The asyncpg adapter
    # re-raises it as "<class ...>: message" from the original, so prefer that.
    orig = getattr(exc, "orig", None)
    if orig is None:
        return str(exc)
    cause = orig.__cause__
    return str(cause) if cause is not None else str(orig)


class ElevatedStore:
    """Row-level reads, updates and procedure calls with elevated privilege."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fail(self, action: str, exc: SQLAlchemyError) -> StoreOperationError:
        message = _error_message(exc)
        logger.error(f"Store error during {action}: {message}")
        try:
            await self.session.rollback()
        except SQLAlchemyError as rollback_exc:
            logger.error(f"Rollback after failed {action} also failed: {rollback_exc}")
        return StoreOperationError(message)

    async def get_current_stock(self, item_id: int) -> Optional[int]:
        """Current stock for an item, or None when the row does not exist."""
        try:
            result = await self.session.execute(
                select(StockItem.current_stock).where(StockItem.item_id == item_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise await self._fail(f"read of stock item {item_id}", e)

    async def set_current_stock(self, item_id: int, value: int) -> int:
        """Overwrite current_stock; returns the number of rows updated."""
        try:
            result = await self.session.execute(
                update(StockItem)
                .where(StockItem.item_id == item_id)
                .values(current_stock=value, updated_at=func.now())
            )
            return result.rowcount
        except SQLAlchemyError as e:
            raise await self._fail(f"update of stock item {item_id}", e)

    async def set_received_quantity(self, purchase_order_id: int, stock_item_id: int, quantity: int) -> int:
        """Overwrite received_quantity on a purchase order line; returns rows updated."""
        try:
            result = await self.session.execute(
                update(PurchaseOrderItem)
                .where(
                    PurchaseOrderItem.purchase_order_id == purchase_order_id,
                    PurchaseOrderItem.stock_item_id == stock_item_id,
                )
                .values(received_quantity=quantity)
            )
            return result.rowcount
        except SQLAlchemyError as e:
            raise await self._fail(
                f"update of PO {purchase_order_id} item {stock_item_id}", e
            )

    async def call_procedure(self, name: str) -> None:
        """Run a parameterless stored procedure as one statement."""
        try:
            await self.session.execute(select(getattr(func, name)()))
        except SQLAlchemyError as e:
            raise await self._fail(f"call to {name}", e)

    async def ping(self) -> None:
        try:
            await self.session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise await self._fail("ping", e)

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._fail("commit", e)

    async def rollback(self) -> None:
        await self.session.rollback()


@asynccontextmanager
async def open_elevated_store(settings: Settings) -> AsyncIterator[ElevatedStore]:
    async with get_session(settings) as session:
        yield ElevatedStore(session)
