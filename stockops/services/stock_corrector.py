# stockops/services/stock_corrector.py
"""
Stock correction engines.

StockCorrector applies a list of StockCorrection records: every item's stock
is adjusted first (read, add delta, write back), then every purchase order
line gets its received quantity overwritten. By default each step is
committed as soon as it succeeds, so a failure part way leaves the earlier
steps applied; CorrectionBatchError reports exactly which ones. With
atomic=True the whole run is a single transaction.

Two runs against the same item at the same time race on the
read-modify-write and can lose an update. These are one-shot repair tools;
do not point them at rows that are being edited concurrently.

StockCounter overwrites stock with counted values, skipping and reporting
items that do not exist.
"""
import logging
from typing import List, Optional

from stockops.core.exceptions import CorrectionBatchError, StoreOperationError
from stockops.schemas.corrections import (
    StockCorrection,
    StockCountEntry,
    StepResult,
    CorrectionReport,
    StockCountResult,
    StockCountReport,
)
from stockops.services.activity_logger import ActivityLogger
from stockops.services.store import ElevatedStore

logger = logging.getLogger(__name__)


def _summarise(name: str, corrections: List[StockCorrection], new_stock: dict) -> str:
    adjustments = ", ".join(
        f"{c.display_name} {c.delta:+d} -> {new_stock[c.item_id]}" for c in corrections
    )
    purchase_orders = ", ".join(
        str(po_id) for po_id in sorted({c.purchase_order_id for c in corrections})
    )
    return f"Applied {name}: {adjustments}; received quantities updated on PO {purchase_orders}"


class StockCorrector:

    def __init__(self, store: ElevatedStore, activity_logger: Optional[ActivityLogger] = None):
        self.store = store
        self.activity_logger = activity_logger

    async def apply(
        self,
        name: str,
        corrections: List[StockCorrection],
        atomic: bool = False,
        dry_run: bool = False,
    ) -> CorrectionReport:
        """
        Run a correction set.

        Args:
            name: Correction set name, recorded in the activity log
            corrections: Records to apply, in order
            atomic: Commit once at the end instead of after every step
            dry_run: Run atomically and roll back instead of committing

        Returns:
            CorrectionReport with every step and the new stock per item

        Raises:
            CorrectionBatchError: a step failed; carries the committed steps
        """
        atomic = atomic or dry_run
        steps: List[StepResult] = []
        new_stock = {}

        async def _finish_step(step: StepResult):
            if not atomic:
                await self.store.commit()
            steps.append(step)

        logger.info(
            f"Applying correction set {name} ({len(corrections)} items, "
            f"atomic={atomic}, dry_run={dry_run})"
        )

        try:
            for correction in corrections:
                old_value = await self.store.get_current_stock(correction.item_id)
                if old_value is None:
                    logger.warning(
                        f"Stock item {correction.item_id} ({correction.display_name}) not found; "
                        f"treating current stock as 0"
                    )
                    old_value = 0

                new_value = old_value + correction.delta
                if new_value < 0:
                    # Discard uncommitted atomic work; per-step commits stand
                    await self.store.rollback()
                    raise StoreOperationError(
                        f"Stock for item {correction.item_id} ({correction.display_name}) "
                        f"would become negative: {old_value} {correction.delta:+d}"
                    )
                rows = await self.store.set_current_stock(correction.item_id, new_value)
                await _finish_step(StepResult(
                    step=len(steps) + 1,
                    kind="stock",
                    item_id=correction.item_id,
                    old_value=old_value,
                    new_value=new_value,
                    rows_affected=rows,
                ))
                new_stock[correction.item_id] = new_value

            for correction in corrections:
                rows = await self.store.set_received_quantity(
                    correction.purchase_order_id,
                    correction.item_id,
                    correction.target_received_quantity,
                )
                if rows == 0:
                    logger.warning(
                        f"No purchase order line for PO {correction.purchase_order_id} "
                        f"item {correction.item_id}"
                    )
                await _finish_step(StepResult(
                    step=len(steps) + 1,
                    kind="received_quantity",
                    item_id=correction.item_id,
                    purchase_order_id=correction.purchase_order_id,
                    new_value=correction.target_received_quantity,
                    rows_affected=rows,
                ))

            if dry_run:
                await self.store.rollback()
            elif atomic:
                await self.store.commit()

        except StoreOperationError as e:
            committed = [] if atomic else [step.model_dump(exclude_none=True) for step in steps]
            logger.error(
                f"Correction set {name} failed after {len(committed)} committed steps: {e.message}"
            )
            await self._audit(name, {"status": "failed", "error": e.message, "committed_steps": committed})
            raise CorrectionBatchError(e.message, committed)

        report = CorrectionReport(
            correction_set=name,
            steps=steps,
            new_stock=new_stock,
            atomic=atomic,
            dry_run=dry_run,
            message=_summarise(name, corrections, new_stock),
        )
        if not dry_run:
            await self._audit(name, {
                "status": "applied",
                "atomic": atomic,
                "steps": [step.model_dump(exclude_none=True) for step in steps],
            })
        logger.info(report.message)
        return report

    async def _audit(self, name: str, details: dict):
        if self.activity_logger:
            await self.activity_logger.log_activity(
                action="stock_correction",
                entity_type="correction_set",
                entity_id=name,
                details=details,
            )


class StockCounter:

    def __init__(self, store: ElevatedStore, activity_logger: Optional[ActivityLogger] = None):
        self.store = store
        self.activity_logger = activity_logger

    async def apply(self, name: str, entries: List[StockCountEntry]) -> StockCountReport:
        """Overwrite current stock with counted values, one commit per item."""
        report = StockCountReport(total=len(entries))

        for entry in entries:
            label = f"Item {entry.item_id} ({entry.name})"
            try:
                old_value = await self.store.get_current_stock(entry.item_id)
                if old_value is None:
                    report.errors.append(f"{label} not found - skipped")
                    continue

                await self.store.set_current_stock(entry.item_id, entry.counted_stock)
                await self.store.commit()
            except StoreOperationError as e:
                report.errors.append(f"{label}: {e.message}")
                continue

            report.updated.append(StockCountResult(
                item_id=entry.item_id,
                name=entry.name,
                old=old_value,
                new_stock=entry.counted_stock,
            ))

        logger.info(f"Stock count {name}: {report.message}, {len(report.errors)} errors")

        if self.activity_logger:
            await self.activity_logger.log_activity(
                action="stock_count",
                entity_type="correction_set",
                entity_id=name,
                details={"updated": len(report.updated), "total": report.total, "errors": report.errors},
            )
        return report
