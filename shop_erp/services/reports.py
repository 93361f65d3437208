from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.repositories.production import ChallanRepository, JobRepository
from shop_erp.repositories.sales import InvoiceRepository
from shop_erp.services.base import BaseService

logger = logging.getLogger(__name__)

TURNOVER_COLUMNS = ["month", "amount"]
JOBS_COLUMNS = ["job_id", "customer", "status", "total_cost"]
CHALLAN_COLUMNS = ["challan_no", "job_id", "customer", "status"]

# report key -> (download file name, page title)
REPORTS = {
    "monthly-turnover": ("monthly_turnover.csv", "Monthly Turnover"),
    "jobs": ("jobs_report.csv", "Jobs Report"),
    "pending-challans": ("pending_challans.csv", "Pending Challans"),
}


def _money(value) -> float:
    return float(Decimal(str(value or 0)).quantize(Decimal("0.01")))


class ReportService(BaseService):
    """Tabular reports built as pandas DataFrames, ready for display or CSV export."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.invoices = InvoiceRepository(session)
        self.jobs = JobRepository(session)
        self.challans = ChallanRepository(session)

    # PUBLIC_INTERFACE
    async def monthly_turnover(self) -> pd.DataFrame:
        """Invoice totals grouped by invoice month (``YYYY-MM``), oldest month first."""
        invoices = await self.invoices.list(order_by=("invoice_date", "id"))
        frame = pd.DataFrame(
            [
                {"month": inv.invoice_date.strftime("%Y-%m"), "amount": _money(inv.total_amount)}
                for inv in invoices
            ],
            columns=TURNOVER_COLUMNS,
        )
        if frame.empty:
            return frame
        frame = frame.groupby("month", as_index=False)["amount"].sum()
        frame["amount"] = frame["amount"].round(2)
        return frame.sort_values("month").reset_index(drop=True)

    # PUBLIC_INTERFACE
    async def jobs_report(self) -> pd.DataFrame:
        """Every job with its customer, status and invoiced total."""
        invoiced: Dict[str, float] = defaultdict(float)
        for inv in await self.invoices.list():
            invoiced[inv.job_id] += _money(inv.total_amount)
        jobs = await self.jobs.list()
        return pd.DataFrame(
            [
                {
                    "job_id": job.job_id,
                    "customer": job.customer.name if job.customer else "",
                    "status": job.status,
                    "total_cost": round(invoiced.get(job.job_id, 0.0), 2),
                }
                for job in jobs
            ],
            columns=JOBS_COLUMNS,
        )

    # PUBLIC_INTERFACE
    async def pending_challans(self) -> pd.DataFrame:
        """Challans still out for plating."""
        challans = await self.challans.list(filters={"status": "sent"})
        return pd.DataFrame(
            [
                {
                    "challan_no": ch.challan_no,
                    "job_id": ch.job_id,
                    "customer": ch.customer.name if ch.customer else "",
                    "status": ch.status,
                }
                for ch in challans
            ],
            columns=CHALLAN_COLUMNS,
        )

    async def build(self, key: str) -> pd.DataFrame:
        builders = {
            "monthly-turnover": self.monthly_turnover,
            "jobs": self.jobs_report,
            "pending-challans": self.pending_challans,
        }
        if key not in builders:
            raise KeyError(key)
        return await builders[key]()
