from __future__ import annotations

from shop_erp.db.models.quality import Inspection
from .base import CrudRepository


class InspectionRepository(CrudRepository[Inspection]):
    """Repository for inspection records."""
    model = Inspection
