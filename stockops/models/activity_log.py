# stockops/models/activity_log.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import JSONB
from stockops.database import Base


class ActivityLog(Base):
    """
    Records every stock repair and snapshot run for auditing.

    This includes:
    - Correction runs (which steps committed, final stock values)
    - Stock count resets
    - Opening stock snapshots and who triggered them
    """
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True)
    action = Column(String(50), nullable=False, index=True)  # 'stock_correction', 'stock_count', 'snapshot'
    entity_type = Column(String(50), nullable=False, index=True)  # 'correction_set', 'stock_snapshot'
    entity_id = Column(String(100), nullable=False, index=True)

    details = Column(JSONB, nullable=True)

    # Identity service user id (uuid string), no foreign key
    user_id = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<ActivityLog {self.action} {self.entity_type} {self.entity_id}>"
