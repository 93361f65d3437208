from __future__ import annotations

from typing import List, Optional

from shop_erp.db.models.production import Challan, Job, RoutingOperation, Tool
from .base import CrudRepository


class JobRepository(CrudRepository[Job]):
    """Repository for job orders, addressed by the job code."""
    model = Job
    key_field = "job_id"

    async def list_active(self) -> List[Job]:
        """Jobs on the shop floor (pending or in progress), earliest due first."""
        return await self.list(
            filters={"status": ["pending", "in-progress"]}, order_by=("due_date", "id")
        )

    async def set_status(self, job_id: str, status: str) -> Optional[Job]:
        return await self.update(job_id, {"status": status})


class ChallanRepository(CrudRepository[Challan]):
    """Repository for plating challans."""
    model = Challan


class RoutingOperationRepository(CrudRepository[RoutingOperation]):
    """Repository for the standard routing register."""
    model = RoutingOperation
    default_order = ("part_no", "op_seq")


class ToolRepository(CrudRepository[Tool]):
    """Repository for the tooling register."""
    model = Tool
