# stockops/routes/functions.py
"""
Request handlers for the stock repair, snapshot and salary gate functions.

Pre-flight requests never reach these handlers; the CORS middleware in
stockops.main answers them. Every handler converts its own failures into a
JSON body, and auth failures raised by require_user are converted by the
BaseServiceError handler.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from stockops.core.config import Settings
from stockops.core.exceptions import (
    ConfigurationError,
    CorrectionBatchError,
    SalaryAccessError,
    StoreOperationError,
)
from stockops.core.security import require_user
from stockops.correction_sets import CORRECTION_SETS, STOCK_COUNTS
from stockops.dependencies import StoreFactory, get_app_settings, get_salary_gate, get_store_factory
from stockops.services.activity_logger import ActivityLogger
from stockops.services.identity import AuthenticatedUser
from stockops.services.salary_access import SalaryAccessGate
from stockops.services.snapshot_service import OpeningStockSnapshotter
from stockops.services.stock_corrector import StockCorrector, StockCounter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["functions"])

ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE"]
UNEXPECTED_ERROR = "An unexpected error occurred"

PO_0052_SET = "po-0052"
STOCK_COUNT_SET = "stock-count-2026-03-01"


@router.api_route("/fix-stock-po-0052", methods=ANY_METHOD)
async def fix_stock_po_0052(store_factory: StoreFactory = Depends(get_store_factory)):
    """Apply the PO-0052 stock and received-quantity correction."""
    corrections = CORRECTION_SETS[PO_0052_SET]
    try:
        async with store_factory() as store:
            corrector = StockCorrector(store, ActivityLogger(store.session))
            report = await corrector.apply(PO_0052_SET, corrections)
    except CorrectionBatchError as e:
        return JSONResponse(status_code=500, content=e.to_payload())
    except Exception:
        logger.exception(f"Unexpected error applying {PO_0052_SET}")
        return JSONResponse(status_code=500, content={"error": UNEXPECTED_ERROR})

    return JSONResponse(content=report.to_payload(corrections))


@router.api_route("/apply-stock-count", methods=ANY_METHOD)
async def apply_stock_count(store_factory: StoreFactory = Depends(get_store_factory)):
    """Reset stock to the 1 March 2026 physical count."""
    entries = STOCK_COUNTS[STOCK_COUNT_SET]
    try:
        async with store_factory() as store:
            counter = StockCounter(store, ActivityLogger(store.session))
            report = await counter.apply(STOCK_COUNT_SET, entries)
    except Exception:
        logger.exception(f"Unexpected error applying {STOCK_COUNT_SET}")
        return JSONResponse(status_code=500, content={"error": UNEXPECTED_ERROR})

    return JSONResponse(content=report.to_payload())


@router.api_route("/run-snapshot", methods=ANY_METHOD)
async def run_snapshot(
    user: AuthenticatedUser = require_user(),
    settings: Settings = Depends(get_app_settings),
    store_factory: StoreFactory = Depends(get_store_factory),
):
    """Capture opening stock. Caller must present a valid bearer token."""
    try:
        # Elevated handle is opened only now, after the caller was verified
        async with store_factory() as store:
            snapshotter = OpeningStockSnapshotter(
                store,
                settings.SNAPSHOT_PROCEDURE,
                ActivityLogger(store.session),
            )
            message = await snapshotter.capture(user)
    except StoreOperationError as e:
        return JSONResponse(status_code=500, content={"success": False, "error": e.message})
    except Exception:
        logger.exception("Unexpected error running snapshot")
        return JSONResponse(status_code=500, content={"success": False, "error": UNEXPECTED_ERROR})

    return JSONResponse(content={"success": True, "message": message})


@router.post("/verify-salary-access")
async def verify_salary_access(
    request: Request,
    user: AuthenticatedUser = require_user("Unauthorized"),
    gate: SalaryAccessGate = Depends(get_salary_gate),
):
    """Check the salary page password for an authenticated caller."""
    try:
        payload = await request.json()
        password = payload.get("password") if isinstance(payload, dict) else None
        gate.verify(user, password)
    except (SalaryAccessError, ConfigurationError) as e:
        return JSONResponse(status_code=e.status_code, content=e.to_payload())
    except Exception:
        logger.exception("Error verifying salary access")
        return JSONResponse(status_code=500, content={"success": False, "error": "An error occurred"})

    return JSONResponse(content={"success": True, "message": "Access granted"})
