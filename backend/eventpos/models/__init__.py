from .catalog import Product, Promotion
from .inventory import InventoryRecord
from .sales import SaleRecord
from .expenses import ExpenseRecord

__all__ = [
    'Product', 'Promotion',
    'InventoryRecord',
    'SaleRecord',
    'ExpenseRecord',
]
