from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.api.pages import redirect, render_page
from shop_erp.core.deps import get_session, require_identity
from shop_erp.repositories.master_data import CustomerRepository
from shop_erp.repositories.production import JobRepository
from shop_erp.schemas.auth import Identity
from shop_erp.schemas.billing import InvoiceForm
from shop_erp.services.billing import BillingService
from shop_erp.ui.dialog import FormDialog
from shop_erp.ui.formatting import format_date, format_inr, status_badge
from shop_erp.ui.forms import FormField, option_list, parse_form, render_form
from shop_erp.ui.table import Column, DataTable
from shop_erp.ui.templating import render_fragment

router = APIRouter(prefix="/billing", tags=["Billing"])

INVOICE_COLUMNS = [
    Column("invoice_no", "Invoice No"),
    Column("job_id", "Job ID"),
    Column("customer.name", "Customer"),
    Column("invoice_date", "Date", lambda v, _: format_date(v)),
    Column("taxable_amount", "Taxable", lambda v, _: format_inr(v)),
    Column("gst_amount", "GST (18%)", lambda v, _: format_inr(v)),
    Column("total_amount", "Total", lambda v, _: format_inr(v)),
    Column("payment_status", "Status", lambda v, _: status_badge(v, str(v).upper())),
]


async def _invoice_dialog(session: AsyncSession, values, errors) -> Markup:
    jobs = await JobRepository(session).list()
    customers = await CustomerRepository(session).list(order_by=("name", "id"))
    fields = [
        FormField(
            "job_id",
            "Job",
            kind="select",
            required=True,
            options=[(job.job_id, f"{job.job_id} - {job.part_no or ''}") for job in jobs],
        ),
        FormField("customer_id", "Customer", kind="select", options=option_list(customers)),
        FormField("invoice_date", "Invoice Date", kind="date"),
        FormField("taxable_amount", "Taxable Amount", kind="number", required=True, step="0.01"),
    ]
    content = render_form(
        fields,
        action="/billing",
        values=values,
        errors=errors,
        submit_label="Create Invoice",
        cancel_url="/billing",
        extra=Markup('<p><small>GST is charged at 18% of the taxable amount.</small></p>'),
    )
    return FormDialog("Create Invoice", "/billing").render(True, content)


async def _render_billing(
    request: Request,
    identity: Identity,
    session: AsyncSession,
    *,
    dialog: Markup | str = "",
    status_code: int = 200,
) -> HTMLResponse:
    invoices = await BillingService(session).list_invoices()
    table = DataTable(
        INVOICE_COLUMNS,
        on_view=lambda inv: f"/billing/{inv.id}/print",
        on_edit=lambda inv: f"/billing/{inv.id}/pay",
        labels={"view": "Print", "edit": "Mark Paid"},
    )
    return render_page(
        request,
        "pages/list.html",
        identity=identity,
        heading="Billing",
        subtitle="Invoices with GST at 18%",
        actions=[{"label": "Create Invoice", "url": "/billing/new"}],
        table=table.render(invoices),
        dialog=dialog,
        status_code=status_code,
    )


# PUBLIC_INTERFACE
@router.get("", response_class=HTMLResponse, summary="List invoices")
async def billing_page(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    return await _render_billing(request, identity, session)


# PUBLIC_INTERFACE
@router.get("/new", response_class=HTMLResponse, summary="Create invoice dialog")
async def new_invoice_page(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    dialog = await _invoice_dialog(session, {}, {})
    return await _render_billing(request, identity, session, dialog=dialog)


# PUBLIC_INTERFACE
@router.post("", response_class=HTMLResponse, summary="Create invoice")
async def create_invoice(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """Raise an invoice: gst = 18% of taxable, total = taxable + gst, payment pending."""
    posted = await request.form()
    data, errors = parse_form(InvoiceForm, posted)
    if data is None:
        dialog = await _invoice_dialog(session, dict(posted), errors)
        return await _render_billing(request, identity, session, dialog=dialog, status_code=422)
    await BillingService(session).create_invoice(data)
    return redirect("/billing")


# PUBLIC_INTERFACE
@router.get("/{invoice_id}/print", response_class=HTMLResponse, summary="Printable invoice")
async def print_invoice(
    invoice_id: int,
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    invoice = await BillingService(session).get_invoice(invoice_id)
    return render_page(request, "pages/invoice_print.html", identity=identity, invoice=invoice)


# PUBLIC_INTERFACE
@router.get("/{invoice_id}/pay", response_class=HTMLResponse, summary="Confirm payment received")
async def confirm_payment_page(
    invoice_id: int,
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    invoice = await BillingService(session).get_invoice(invoice_id)
    if invoice.payment_status == "paid":
        content = Markup("<p>Invoice {} is already paid.</p>").format(invoice.invoice_no)
    else:
        content = render_fragment(
            "components/confirm.html",
            message=f"Mark invoice {invoice.invoice_no} ({format_inr(invoice.total_amount)}) as paid?",
            action=f"/billing/{invoice.id}/pay",
            cancel_url="/billing",
            confirm_label="Mark Paid",
            button_class="btn-success",
        )
    dialog = FormDialog(f"Invoice {invoice.invoice_no}", "/billing", "sm").render(True, content)
    return await _render_billing(request, identity, session, dialog=dialog)


# PUBLIC_INTERFACE
@router.post("/{invoice_id}/pay", summary="Mark invoice paid")
async def mark_invoice_paid(
    invoice_id: int,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    await BillingService(session).mark_paid(invoice_id)
    return redirect("/billing")
