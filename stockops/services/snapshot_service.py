# stockops/services/snapshot_service.py
import logging
from typing import Optional

from stockops.core.exceptions import StoreOperationError
from stockops.services.activity_logger import ActivityLogger
from stockops.services.identity import AuthenticatedUser
from stockops.services.store import ElevatedStore

logger = logging.getLogger(__name__)


class OpeningStockSnapshotter:
    """
    Captures opening stock by running the snapshot procedure once.

    The procedure builds the whole snapshot in a single statement, so a
    failure leaves nothing behind. Repeated calls always run it again; whether
    a second run at the same boundary overwrites or duplicates is up to the
    procedure.
    """

    SUCCESS_MESSAGE = "Opening stock snapshot captured successfully"

    def __init__(
        self,
        store: ElevatedStore,
        procedure: str,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self.store = store
        self.procedure = procedure
        self.activity_logger = activity_logger

    async def capture(self, user: AuthenticatedUser) -> str:
        logger.info(f"Running {self.procedure} for user {user.id}")
        try:
            await self.store.call_procedure(self.procedure)
            await self.store.commit()
        except StoreOperationError as e:
            logger.error(f"Snapshot error: {e.message}")
            await self._audit(user, {"status": "failed", "error": e.message})
            raise

        logger.info("Snapshot completed successfully")
        await self._audit(user, {"status": "captured"})
        return self.SUCCESS_MESSAGE

    async def _audit(self, user: AuthenticatedUser, details: dict):
        if self.activity_logger:
            await self.activity_logger.log_activity(
                action="snapshot",
                entity_type="stock_snapshot",
                entity_id=self.procedure,
                details=details,
                user_id=user.id,
            )
