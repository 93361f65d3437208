from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.core.errors import NotFound
from shop_erp.db.models.sales import Invoice
from shop_erp.repositories.production import JobRepository
from shop_erp.repositories.sales import InvoiceRepository
from shop_erp.schemas.billing import InvoiceAmounts, InvoiceForm
from shop_erp.services.base import BaseService
from shop_erp.services.numbering import generate_invoice_no

logger = logging.getLogger(__name__)

GST_RATE = Decimal("0.18")
_CENT = Decimal("0.01")


# PUBLIC_INTERFACE
def compute_invoice_amounts(taxable_amount: Union[Decimal, int, float, str]) -> InvoiceAmounts:
    """
    Derive GST and total for a taxable amount.

    gst = round(taxable * 0.18, 2) (half-up), total = taxable + gst.
    """
    taxable = Decimal(str(taxable_amount)).quantize(_CENT, rounding=ROUND_HALF_UP)
    gst = (taxable * GST_RATE).quantize(_CENT, rounding=ROUND_HALF_UP)
    return InvoiceAmounts(taxable_amount=taxable, gst_amount=gst, total_amount=taxable + gst)


class BillingService(BaseService):
    """Invoice creation and payment tracking."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.invoices = InvoiceRepository(session)
        self.jobs = JobRepository(session)

    async def list_invoices(self) -> List[Invoice]:
        return await self.invoices.list()

    async def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = await self.invoices.get(invoice_id)
        if invoice is None:
            raise NotFound("invoices", invoice_id)
        return invoice

    # PUBLIC_INTERFACE
    async def create_invoice(self, form: InvoiceForm, *, today: Optional[date] = None) -> Invoice:
        """
        Raise an invoice against a job with GST at 18%; payment starts ``pending``.

        The customer defaults to the job's customer when not given.
        """
        customer_id = form.customer_id
        if customer_id is None:
            job = await self.jobs.get(form.job_id)
            customer_id = job.customer_id if job is not None else None
        amounts = compute_invoice_amounts(form.taxable_amount)
        invoice = await self.invoices.insert(
            {
                "invoice_no": generate_invoice_no(today=today),
                "job_id": form.job_id,
                "customer_id": customer_id,
                "invoice_date": form.invoice_date or today or date.today(),
                **amounts.model_dump(),
                "payment_status": "pending",
            }
        )
        logger.info("Invoice %s raised for job %s (total %s)", invoice.invoice_no, invoice.job_id, invoice.total_amount)
        return invoice

    async def mark_paid(self, invoice_id: int) -> Invoice:
        await self.get_invoice(invoice_id)
        invoice = await self.invoices.update(invoice_id, {"payment_status": "paid"})
        logger.info("Invoice %s marked paid", invoice.invoice_no)
        return invoice
