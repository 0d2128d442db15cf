from .activity_log import ActivityLog
from .stock_item import StockItem
from .purchase_order import PurchaseOrderItem

# This ensures all models are registered with SQLAlchemy
__all__ = [
    'ActivityLog',
    'StockItem',
    'PurchaseOrderItem',
]
