"""
Schemas for stock correction runs and stock counts.
"""
from typing import List, Optional, Literal, Any, Dict
from pydantic import BaseModel, ConfigDict, Field


class StockCorrection(BaseModel):
    """
    One known discrepancy: add `delta` to the item's on-hand stock and set the
    matching purchase order line's received quantity to the true total.
    """
    model_config = ConfigDict(frozen=True)

    item_id: int
    name: str = ""
    label: Optional[str] = None  # response key prefix, e.g. "pregabalin" -> pregabalin_new_stock
    delta: int
    purchase_order_id: int
    target_received_quantity: int = Field(ge=0)

    @property
    def display_name(self) -> str:
        return self.name or f"Item {self.item_id}"


class StockCountEntry(BaseModel):
    """Physically counted stock for one item."""
    model_config = ConfigDict(frozen=True)

    item_id: int
    name: str = ""
    counted_stock: int = Field(ge=0)


class StepResult(BaseModel):
    step: int
    kind: Literal["stock", "received_quantity"]
    item_id: int
    purchase_order_id: Optional[int] = None
    old_value: Optional[int] = None
    new_value: int
    rows_affected: int


class CorrectionReport(BaseModel):
    correction_set: str
    steps: List[StepResult] = []
    new_stock: Dict[int, int] = {}
    atomic: bool = False
    dry_run: bool = False
    message: str = ""

    def to_payload(self, corrections: List[StockCorrection]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": True, "message": self.message}
        for correction in corrections:
            key = correction.label or f"item_{correction.item_id}"
            payload[f"{key}_new_stock"] = self.new_stock.get(correction.item_id)
        payload["steps"] = [step.model_dump(exclude_none=True) for step in self.steps]
        if self.dry_run:
            payload["dry_run"] = True
        return payload


class StockCountResult(BaseModel):
    item_id: int
    name: str
    old: int
    new_stock: int


class StockCountReport(BaseModel):
    total: int
    updated: List[StockCountResult] = []
    errors: List[str] = []

    @property
    def message(self) -> str:
        return f"Updated {len(self.updated)}/{self.total} items"

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": True,
            "message": self.message,
            "updated": [result.model_dump() for result in self.updated],
        }
        if self.errors:
            payload["errors"] = self.errors
        return payload
