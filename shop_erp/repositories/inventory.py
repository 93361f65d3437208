from __future__ import annotations

from shop_erp.db.models.inventory import InventoryItem
from .base import CrudRepository


class InventoryRepository(CrudRepository[InventoryItem]):
    """Repository for stock items (inventory register)."""
    model = InventoryItem
    default_order = ("item_id",)
