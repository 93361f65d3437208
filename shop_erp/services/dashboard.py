from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.repositories.master_data import MachineRepository
from shop_erp.repositories.production import ChallanRepository, JobRepository
from shop_erp.repositories.sales import InvoiceRepository
from shop_erp.services.base import BaseService
from shop_erp.services.production import JOB_STATUSES

TREND_MONTHS = 6


@dataclass
class TurnoverBar:
    month: str
    amount: Decimal
    percent: float


@dataclass
class DashboardMetrics:
    open_jobs: int = 0
    completed_jobs: int = 0
    monthly_turnover: Decimal = Decimal("0")
    pending_challans: int = 0
    machine_utilization: int = 0
    receivables: Decimal = Decimal("0")
    turnover_trend: List[TurnoverBar] = field(default_factory=list)
    jobs_by_status: Dict[str, int] = field(default_factory=dict)


def trailing_months(today: date, count: int = TREND_MONTHS) -> List[str]:
    """``YYYY-MM`` labels for the ``count`` months ending with ``today``'s month."""
    year, month = today.year, today.month
    labels = []
    for _ in range(count):
        labels.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(labels))


class DashboardService(BaseService):
    """Headline figures for the dashboard."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.jobs = JobRepository(session)
        self.invoices = InvoiceRepository(session)
        self.challans = ChallanRepository(session)
        self.machines = MachineRepository(session)

    # PUBLIC_INTERFACE
    async def metrics(self, *, today: Optional[date] = None) -> DashboardMetrics:
        """
        Compute dashboard metrics.

        Machine utilization is the share of machines referenced by the routing
        of at least one in-progress job.
        """
        today = today or date.today()
        jobs = await self.jobs.list()
        invoices = await self.invoices.list()
        machines = await self.machines.list()

        by_status = {status: 0 for status in JOB_STATUSES}
        busy_machines = set()
        for job in jobs:
            by_status[job.status] = by_status.get(job.status, 0) + 1
            if job.status == "in-progress":
                busy_machines.update(op.get("machine_id") for op in job.route or [] if op.get("machine_id"))
        machine_ids = {m.id for m in machines}
        utilization = round(len(busy_machines & machine_ids) / len(machine_ids) * 100) if machine_ids else 0

        per_month: Dict[str, Decimal] = {}
        receivables = Decimal("0")
        for inv in invoices:
            key = inv.invoice_date.strftime("%Y-%m")
            per_month[key] = per_month.get(key, Decimal("0")) + Decimal(inv.total_amount)
            if inv.payment_status == "pending":
                receivables += Decimal(inv.total_amount)

        months = trailing_months(today)
        peak = max([per_month.get(m, Decimal("0")) for m in months] + [Decimal("1")])
        trend = [
            TurnoverBar(month=m, amount=per_month.get(m, Decimal("0")), percent=float(per_month.get(m, 0) / peak * 100))
            for m in months
        ]
        return DashboardMetrics(
            open_jobs=sum(1 for job in jobs if job.status != "completed"),
            completed_jobs=by_status.get("completed", 0),
            monthly_turnover=per_month.get(months[-1], Decimal("0")),
            pending_challans=len(await self.challans.list(filters={"status": "sent"})),
            machine_utilization=utilization,
            receivables=receivables,
            turnover_trend=trend,
            jobs_by_status=by_status,
        )
