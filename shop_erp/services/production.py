from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.core.errors import NotFound
from shop_erp.db.models.production import Challan, Job
from shop_erp.repositories.production import ChallanRepository, JobRepository
from shop_erp.schemas.production import ChallanForm, JobForm, RouteOperation
from shop_erp.services.base import BaseService
from shop_erp.services.numbering import generate_challan_no, generate_job_id

logger = logging.getLogger(__name__)

JOB_STATUSES = ("pending", "in-progress", "pending-challan", "completed")
FIRST_OPERATION = "Operation 1"


# PUBLIC_INTERFACE
def next_op_seq(route: Sequence) -> int:
    """Sequence number for an operation appended to ``route``: 10, 20, 30..."""
    return (len(route) + 1) * 10


def append_operation(route: Iterable[RouteOperation]) -> List[RouteOperation]:
    ops = list(route)
    ops.append(RouteOperation(op_seq=next_op_seq(ops)))
    return ops


# PUBLIC_INTERFACE
def job_progress(qty_completed: Optional[int], qty_ordered: Optional[int]) -> float:
    """Completion percentage, capped at 100."""
    if not qty_ordered:
        return 0.0
    return min((qty_completed or 0) / qty_ordered * 100, 100.0)


class ProductionService(BaseService):
    """
    Job orders, shop-floor status updates and plating challans.

    Challan creation and receipt also move the linked job's status.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.jobs = JobRepository(session)
        self.challans = ChallanRepository(session)

    # Jobs
    async def list_jobs(self) -> List[Job]:
        return await self.jobs.list()

    async def get_job(self, job_id: str) -> Job:
        job = await self.jobs.get(job_id)
        if job is None:
            raise NotFound("jobs", job_id)
        return job

    # PUBLIC_INTERFACE
    async def create_job(self, form: JobForm, *, today: Optional[date] = None) -> Job:
        """Create a job in ``pending`` with nothing completed and a generated job code."""
        job = await self.jobs.insert(
            {
                "job_id": generate_job_id(form.job_type, today=today),
                "customer_id": form.customer_id,
                "part_no": form.part_no,
                "rev": form.rev,
                "qty_ordered": form.qty_ordered,
                "qty_completed": 0,
                "due_date": form.due_date,
                "job_type": form.job_type,
                "route": [op.model_dump() for op in form.route],
                "status": "pending",
                "current_operation": None,
            }
        )
        logger.info("Job %s created for part %s", job.job_id, job.part_no)
        return job

    async def update_job(self, job_id: str, form: JobForm) -> Job:
        await self.get_job(job_id)
        values = form.model_dump(exclude={"route"})
        values["route"] = [op.model_dump() for op in form.route]
        return await self.jobs.update(job_id, values)

    async def delete_job(self, job_id: str) -> None:
        await self.jobs.delete(job_id)
        logger.info("Job %s deleted", job_id)

    # Shop floor
    async def list_active_jobs(self) -> List[Job]:
        return await self.jobs.list_active()

    async def start_job(self, job_id: str) -> Job:
        await self.get_job(job_id)
        return await self.jobs.update(job_id, {"status": "in-progress", "current_operation": FIRST_OPERATION})

    async def pause_job(self, job_id: str) -> Job:
        await self.get_job(job_id)
        return await self.jobs.update(job_id, {"status": "pending", "current_operation": None})

    # PUBLIC_INTERFACE
    async def complete_quantity(self, job_id: str, qty_completed: int) -> Job:
        """
        Record the completed quantity.

        The job completes (and leaves the floor) once the ordered quantity is
        reached; otherwise it stays in progress.
        """
        job = await self.get_job(job_id)
        values = {"qty_completed": qty_completed}
        if qty_completed >= job.qty_ordered:
            values.update(status="completed", current_operation=None)
        else:
            values["status"] = "in-progress"
        updated = await self.jobs.update(job_id, values)
        logger.info("Job %s at %s/%s (%s)", job_id, qty_completed, job.qty_ordered, updated.status)
        return updated

    # Challans
    async def list_challans(self) -> List[Challan]:
        return await self.challans.list()

    async def pending_challan_count(self) -> int:
        return len(await self.challans.list(filters={"status": "sent"}))

    async def get_challan(self, challan_id: int) -> Challan:
        challan = await self.challans.get(challan_id)
        if challan is None:
            raise NotFound("challans", challan_id)
        return challan

    # PUBLIC_INTERFACE
    async def create_challan(self, form: ChallanForm, *, today: Optional[date] = None) -> Challan:
        """Send goods out for plating; the linked job moves to ``pending-challan``."""
        customer_id = form.customer_id
        if customer_id is None:
            job = await self.jobs.get(form.job_id)
            customer_id = job.customer_id if job is not None else None
        params = {"notes": form.params_note} if form.params_note else {}
        challan = await self.challans.insert(
            {
                "challan_no": generate_challan_no(today=today),
                "job_id": form.job_id,
                "customer_id": customer_id,
                "qty_sent": form.qty_sent,
                "process_type": form.process_type,
                "thickness": form.thickness,
                "params_json": params,
                "date_sent": form.date_sent or today or date.today(),
                "expected_return_date": form.expected_return_date,
                "status": "sent",
            }
        )
        await self.jobs.set_status(form.job_id, "pending-challan")
        logger.info("Challan %s sent for job %s", challan.challan_no, challan.job_id)
        return challan

    # PUBLIC_INTERFACE
    async def receive_challan(self, challan_id: int, *, today: Optional[date] = None) -> Challan:
        """
        Mark a sent challan received today and complete its job.

        A challan that is not ``sent`` is returned unchanged.
        """
        challan = await self.get_challan(challan_id)
        if challan.status != "sent":
            return challan
        received = await self.challans.update(
            challan_id, {"status": "received", "date_received": today or date.today()}
        )
        await self.jobs.set_status(challan.job_id, "completed")
        logger.info("Challan %s received; job %s completed", challan.challan_no, challan.job_id)
        return received
