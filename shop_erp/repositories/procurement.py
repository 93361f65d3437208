from __future__ import annotations

from shop_erp.db.models.procurement import Expense, PurchaseOrder
from .base import CrudRepository


class PurchaseOrderRepository(CrudRepository[PurchaseOrder]):
    """Repository for purchase orders."""
    model = PurchaseOrder


class ExpenseRepository(CrudRepository[Expense]):
    """Repository for expense vouchers, newest voucher date first."""
    model = Expense
    default_order = ("-date", "-id")
