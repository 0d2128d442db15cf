# stockops/models/stock_item.py
"""
Inventory rows as this service sees them.

The table is owned by the hosted database; only the columns read or written
here are mapped.
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from stockops.database import Base


class StockItem(Base):
    __tablename__ = "stock_items"

    item_id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    batch_no = Column(String)
    current_stock = Column(Integer, nullable=False, default=0)
    minimum_stock = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<StockItem {self.item_id} {self.name} stock={self.current_stock}>"
