# stockops/models/purchase_order.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Index
from sqlalchemy.sql import func
from stockops.database import Base


class PurchaseOrderItem(Base):
    """Purchase order line, looked up by (purchase_order_id, stock_item_id)."""
    __tablename__ = "purchase_order_items"

    id = Column(Integer, primary_key=True)
    purchase_order_id = Column(Integer, nullable=False)
    stock_item_id = Column(Integer, nullable=False)
    stock_item_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    received_quantity = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_purchase_order_items_po_item", "purchase_order_id", "stock_item_id"),
    )

    def __repr__(self):
        return f"<PurchaseOrderItem PO={self.purchase_order_id} item={self.stock_item_id}>"
