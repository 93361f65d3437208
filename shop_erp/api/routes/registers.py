"""
Read-only register pages. Each lists one table with a fixed column set; the
records are maintained outside this console.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Type

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.api.pages import render_page
from shop_erp.core.deps import get_session, require_identity
from shop_erp.repositories.base import CrudRepository
from shop_erp.repositories.inventory import InventoryRepository
from shop_erp.repositories.maintenance import MaintenanceRepository
from shop_erp.repositories.procurement import ExpenseRepository, PurchaseOrderRepository
from shop_erp.repositories.production import RoutingOperationRepository, ToolRepository
from shop_erp.repositories.quality import InspectionRepository
from shop_erp.repositories.sales import DispatchRepository, EnquiryRepository
from shop_erp.schemas.auth import Identity
from shop_erp.ui.formatting import format_date, format_inr
from shop_erp.ui.table import Column, DataTable


@dataclass
class Register:
    path: str
    title: str
    repository: Type[CrudRepository]
    columns: Sequence[Column]


def _date(value, _record):
    return format_date(value)


def _inr(value, _record):
    return format_inr(value)


REGISTERS: List[Register] = [
    Register(
        "/enquiries",
        "Enquiries & Quotations",
        EnquiryRepository,
        [
            Column("enquiry_id", "Enquiry ID"),
            Column("customer.name", "Customer"),
            Column("part_no", "Part"),
            Column("qty", "Qty"),
            Column("estimated_cost", "Est. Cost", _inr),
            Column("status", "Status"),
        ],
    ),
    Register(
        "/routing",
        "Routing & Operations",
        RoutingOperationRepository,
        [
            Column("part_no", "Part No"),
            Column("op_seq", "Op Seq"),
            Column("op_name", "Operation"),
            Column("machine_type", "Machine Type"),
            Column("setup_time_min", "Setup Time"),
            Column("run_time_per_piece_min", "Run Time"),
        ],
    ),
    Register(
        "/inventory",
        "Inventory",
        InventoryRepository,
        [
            Column("item_id", "Item ID"),
            Column("name", "Name"),
            Column("batch_no", "Batch"),
            Column("qty_on_hand", "Qty on Hand"),
            Column("location", "Location"),
            Column("reorder_point", "Reorder Point"),
        ],
    ),
    Register(
        "/tooling",
        "Tooling",
        ToolRepository,
        [
            Column("tool_id", "Tool ID"),
            Column("name", "Name"),
            Column("last_purchase_cost", "Cost", _inr),
            Column("useful_life_hours", "Life (hrs)"),
            Column("current_usage_hours", "Usage (hrs)"),
        ],
    ),
    Register(
        "/quality",
        "Quality Management",
        InspectionRepository,
        [
            Column("insp_id", "Inspection ID"),
            Column("job_id", "Job ID"),
            Column("insp_type", "Type"),
            Column("result", "Result"),
            Column("remarks", "Remarks"),
        ],
    ),
    Register(
        "/maintenance",
        "Maintenance",
        MaintenanceRepository,
        [
            Column("maintenance_id", "Maintenance ID"),
            Column("machine.name", "Machine"),
            Column("type", "Type"),
            Column("scheduled_date", "Scheduled", _date),
            Column("completed_date", "Completed", _date),
            Column("downtime_hours", "Downtime"),
        ],
    ),
    Register(
        "/purchase",
        "Purchase Orders",
        PurchaseOrderRepository,
        [
            Column("po_no", "PO No"),
            Column("supplier_name", "Supplier"),
            Column("item_description", "Item"),
            Column("qty", "Qty"),
            Column("total_amount", "Amount", _inr),
            Column("status", "Status"),
        ],
    ),
    Register(
        "/dispatch",
        "Dispatch & Logistics",
        DispatchRepository,
        [
            Column("dispatch_id", "Dispatch ID"),
            Column("job_id", "Job ID"),
            Column("lr_no", "LR No"),
            Column("eway_bill_no", "E-Way Bill"),
            Column("dispatch_date", "Dispatch Date", _date),
            Column("transporter_name", "Transporter"),
        ],
    ),
    Register(
        "/expenses",
        "Expenses",
        ExpenseRepository,
        [
            Column("expense_id", "Expense ID"),
            Column("date", "Date", _date),
            Column("category", "Category"),
            Column("amount", "Amount", _inr),
            Column("vendor", "Vendor"),
            Column("description", "Description"),
        ],
    ),
]


# PUBLIC_INTERFACE
def build_register_router(register: Register) -> APIRouter:
    """Router serving the list page of one register."""
    router = APIRouter(tags=["Registers"])

    @router.get(register.path, response_class=HTMLResponse, summary=f"List {register.title.lower()}")
    async def register_page(
        request: Request,
        identity: Identity = Depends(require_identity),
        session: AsyncSession = Depends(get_session),
    ):
        records = await register.repository(session).list()
        table = DataTable(register.columns, actions=False)
        return render_page(
            request, "pages/list.html", identity=identity, heading=register.title, table=table.render(records)
        )

    return router


routers = [build_register_router(register) for register in REGISTERS]
