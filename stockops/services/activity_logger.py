# stockops/services/activity_logger.py
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stockops.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


class ActivityLogger:
    """
    Records stock repairs and snapshots in the activity_log table.

    Writes are committed on their own and never raise: an audit row that
    cannot be written is reported in the application log and the operation's
    own result stands.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log_activity(
        self,
        action: str,
        entity_type: str,
        entity_id: str,
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None
    ) -> Optional[ActivityLog]:
        """
        Log an activity and commit it.

        Args:
            action: The action performed (stock_correction, stock_count, snapshot)
            entity_type: The type of entity affected (correction_set, stock_snapshot)
            entity_id: Name of the correction set or procedure
            details: Optional additional details as a dictionary
            user_id: Optional identity service id of the caller

        Returns:
            The created ActivityLog instance, or None if it could not be written
        """
        try:
            log_entry = ActivityLog(
                action=action,
                entity_type=entity_type,
                entity_id=str(entity_id),
                details=details,
                user_id=user_id,
                created_at=datetime.now(timezone.utc)
            )

            self.db.add(log_entry)
            await self.db.commit()

            logger.debug(f"Activity logged: {action} {entity_type} {entity_id}")

            return log_entry

        except Exception as e:
            logger.error(f"Error logging activity {action} {entity_id}: {str(e)}")
            try:
                await self.db.rollback()
            except SQLAlchemyError as rollback_exc:
                logger.error(f"Rollback after failed activity log also failed: {rollback_exc}")
            return None
