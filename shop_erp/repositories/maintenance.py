from __future__ import annotations

from shop_erp.db.models.maintenance import MaintenanceRecord
from .base import CrudRepository


class MaintenanceRepository(CrudRepository[MaintenanceRecord]):
    """Repository for machine maintenance records."""
    model = MaintenanceRecord
    default_order = ("-scheduled_date", "-id")
