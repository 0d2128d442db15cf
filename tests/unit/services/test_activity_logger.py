# tests/unit/services/test_activity_logger.py
import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import OperationalError

from stockops.models.activity_log import ActivityLog
from stockops.services.activity_logger import ActivityLogger


def make_session():
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.mark.asyncio
async def test_log_activity_adds_and_commits():
    session = make_session()

    entry = await ActivityLogger(session).log_activity(
        action="stock_correction",
        entity_type="correction_set",
        entity_id="po-0052",
        details={"status": "applied"},
    )

    assert isinstance(entry, ActivityLog)
    assert entry.entity_id == "po-0052"
    session.add.assert_called_once_with(entry)
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_log_activity_failure_does_not_raise():
    session = make_session()
    session.commit.side_effect = OperationalError("INSERT", {}, Exception('relation "activity_log" does not exist'))

    entry = await ActivityLogger(session).log_activity(
        action="snapshot", entity_type="stock_snapshot", entity_id="snapshot_opening_at_1am_ist"
    )

    assert entry is None
    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_log_activity_non_database_error_does_not_raise():
    session = make_session()
    session.commit.side_effect = TypeError("Object of type Decimal is not JSON serializable")

    entry = await ActivityLogger(session).log_activity(
        action="stock_correction",
        entity_type="correction_set",
        entity_id="po-0052",
        details={"status": "applied"},
    )

    assert entry is None
    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_log_activity_survives_failed_rollback():
    session = make_session()
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("connection reset"))
    session.rollback.side_effect = OperationalError("ROLLBACK", {}, Exception("connection reset"))

    entry = await ActivityLogger(session).log_activity(
        action="snapshot", entity_type="stock_snapshot", entity_id="snapshot_opening_at_1am_ist"
    )

    assert entry is None
