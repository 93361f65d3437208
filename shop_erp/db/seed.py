"""
Database seeding.

Seeds:
- The bootstrap console administrator (from AppSettings.ADMIN_*)
- Optional demonstration rows: customers, employees, parts, machines, jobs,
  challans, invoices, one day of attendance and a few register entries

Demonstration rows are only written into an empty store. They are seeded by
default when running on the local SQLite fallback.

Usage:
  python -m shop_erp.db.run_migrations upgrade head
  python -m shop_erp.db.seed            # admin + demo rows on SQLite fallback
  python -m shop_erp.db.seed --demo     # force demo rows
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.core.settings import AppSettings, get_app_settings
from shop_erp.db.config import get_settings
from shop_erp.db.session import create_tables, get_session_maker
from shop_erp.repositories.attendance import AttendanceRecordRepository
from shop_erp.repositories.inventory import InventoryRepository
from shop_erp.repositories.maintenance import MaintenanceRepository
from shop_erp.repositories.master_data import (
    CustomerRepository,
    EmployeeRepository,
    MachineRepository,
    PartRepository,
)
from shop_erp.repositories.procurement import ExpenseRepository, PurchaseOrderRepository
from shop_erp.repositories.production import (
    ChallanRepository,
    JobRepository,
    RoutingOperationRepository,
    ToolRepository,
)
from shop_erp.repositories.quality import InspectionRepository
from shop_erp.repositories.sales import DispatchRepository, EnquiryRepository, InvoiceRepository
from shop_erp.services.auth import AuthService

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def demo_data_enabled(app_settings: Optional[AppSettings] = None) -> bool:
    """SEED_DEMO_DATA when set, otherwise true only on the SQLite fallback store."""
    app_settings = app_settings or get_app_settings()
    if app_settings.SEED_DEMO_DATA is not None:
        return app_settings.SEED_DEMO_DATA
    return get_settings().uses_fallback


# PUBLIC_INTERFACE
async def seed_all(*, demo: Optional[bool] = None) -> None:
    """
    Ensure the administrator exists and, when enabled, seed demonstration rows.

    Parameters:
        demo: force demo rows on/off; None follows demo_data_enabled().
    """
    app_settings = get_app_settings()
    maker = get_session_maker()
    async with maker() as session:
        await _seed_admin(session, app_settings)
        if demo if demo is not None else demo_data_enabled(app_settings):
            await _seed_demo(session)


async def _seed_admin(session: AsyncSession, app_settings: AppSettings) -> None:
    await AuthService(session).ensure_user(
        username=app_settings.ADMIN_USERNAME,
        password=app_settings.ADMIN_PASSWORD,
        name=app_settings.ADMIN_NAME,
        role=app_settings.ADMIN_ROLE,
    )


async def _seed_demo(session: AsyncSession) -> bool:
    """Write the demonstration rows into an empty store; returns False when data already exists."""
    customer_repo = CustomerRepository(session)
    if await customer_repo.list(limit=1):
        logger.info("Store already holds data; skipping demo rows")
        return False

    abc, xyz = [
        await customer_repo.insert(values)
        for values in [
            {
                "name": "ABC Corp",
                "gstin": "22AAAAA0000A1Z5",
                "contact_person": "Ravi Kumar",
                "phone": "9876543210",
                "billing_address": "12 Industrial Estate, Pune",
                "shipping_address": "12 Industrial Estate, Pune",
                "credit_days": 30,
            },
            {
                "name": "XYZ Inc",
                "gstin": "29BBBBB0000B1Z5",
                "contact_person": "Anita Rao",
                "phone": "9123456780",
                "billing_address": "45 Peenya Phase 2, Bengaluru",
                "shipping_address": "45 Peenya Phase 2, Bengaluru",
                "credit_days": 45,
            },
        ]
    ]
    employee_repo = EmployeeRepository(session)
    john, jane, peter = [
        await employee_repo.insert(values)
        for values in [
            {"employee_code": "EMP001", "name": "John Doe", "role": "Operator",
             "department": "Machining", "shift": "A", "skill_level": "Advanced"},
            {"employee_code": "EMP002", "name": "Jane Smith", "role": "Supervisor",
             "department": "Production", "shift": "A", "skill_level": "Expert"},
            {"employee_code": "EMP003", "name": "Peter Jones", "role": "Operator",
             "department": "Plating", "shift": "B", "skill_level": "Intermediate"},
        ]
    ]
    await PartRepository(session).insert_many(
        [
            {"part_no": "P1001", "rev": "A", "description": "Main Gear", "material": "EN24"},
            {"part_no": "P1002", "rev": "B", "description": "Pinion Shaft", "material": "MS"},
            {"part_no": "P2001", "rev": "A", "description": "Flange", "material": "SS304"},
        ]
    )
    machine_repo = MachineRepository(session)
    cnc_mill, cnc_lathe, plating_line = [
        await machine_repo.insert(values)
        for values in [
            {"name": "CNC-01", "type": "CNC Mill", "model": "Haas VF-2",
             "location": "Shop Floor 1", "last_pm_date": date(2025, 9, 15)},
            {"name": "CNC-02", "type": "CNC Lathe", "model": "Mazak QT-250",
             "location": "Shop Floor 1", "last_pm_date": date(2025, 8, 20)},
            {"name": "PLT-01", "type": "Plating Line", "model": "Custom",
             "location": "Plating Section", "last_pm_date": date(2025, 10, 1)},
        ]
    ]
    await JobRepository(session).insert_many(
        [
            {
                "job_id": "CNC-2025-001", "customer_id": abc.id, "part_no": "P1001", "rev": "A",
                "qty_ordered": 100, "qty_completed": 50, "due_date": date(2025, 11, 15),
                "job_type": "CNC", "status": "in-progress", "current_operation": "OP10",
                "route": [
                    {"op_seq": 10, "op_name": "Turning", "machine_id": cnc_lathe.id, "operator_id": john.id},
                    {"op_seq": 20, "op_name": "Milling", "machine_id": cnc_mill.id, "operator_id": jane.id},
                ],
            },
            {
                "job_id": "CNC-2025-002", "customer_id": abc.id, "part_no": "P1002", "rev": "B",
                "qty_ordered": 150, "qty_completed": 150, "due_date": date(2025, 10, 30),
                "job_type": "CNC", "status": "completed", "route": [],
            },
            {
                "job_id": "PLT-2025-001", "customer_id": xyz.id, "part_no": "P2001", "rev": "A",
                "qty_ordered": 200, "qty_completed": 200, "due_date": date(2025, 11, 10),
                "job_type": "PLATING", "status": "completed",
                "route": [{"op_seq": 10, "op_name": "Zinc Plating", "machine_id": plating_line.id, "operator_id": peter.id}],
            },
        ]
    )
    await ChallanRepository(session).insert_many(
        [
            {
                "challan_no": "CH-2025-001", "job_id": "CNC-2025-001", "customer_id": abc.id, "qty_sent": 100,
                "process_type": "Zinc Plating", "thickness": "10-15 microns", "params_json": {},
                "date_sent": date(2025, 10, 20), "expected_return_date": date(2025, 10, 25), "status": "sent",
            },
            {
                "challan_no": "CH-2025-002", "job_id": "CNC-2025-002", "customer_id": abc.id, "qty_sent": 150,
                "process_type": "Nickel Plating", "thickness": "5-10 microns", "params_json": {},
                "date_sent": date(2025, 10, 18), "expected_return_date": date(2025, 10, 23),
                "date_received": date(2025, 10, 22), "status": "received",
            },
        ]
    )
    await InvoiceRepository(session).insert_many(
        [
            {
                "invoice_no": "INV-2025-001", "job_id": "CNC-2025-001", "customer_id": abc.id,
                "invoice_date": date(2025, 10, 26), "taxable_amount": Decimal("5000.00"),
                "gst_amount": Decimal("900.00"), "total_amount": Decimal("5900.00"), "payment_status": "pending",
            },
            {
                "invoice_no": "INV-2025-002", "job_id": "PLT-2025-001", "customer_id": xyz.id,
                "invoice_date": date(2025, 10, 25), "taxable_amount": Decimal("7500.00"),
                "gst_amount": Decimal("1350.00"), "total_amount": Decimal("8850.00"), "payment_status": "paid",
            },
        ]
    )
    day = date(2025, 10, 26)
    await AttendanceRecordRepository(session).insert_many(
        [
            {"employee_id": john.id, "date": day, "status": "present", "in_time": "08:00", "out_time": "17:00",
             "worked_hours": Decimal("8.00")},
            {"employee_id": jane.id, "date": day, "status": "present", "in_time": "08:05", "out_time": "17:02",
             "worked_hours": Decimal("7.95")},
            {"employee_id": peter.id, "date": day, "status": "present", "in_time": "07:55", "out_time": "17:10",
             "worked_hours": Decimal("8.25"), "ot_hours": Decimal("0.25")},
        ]
    )
    await _seed_registers(session, abc=abc, xyz=xyz, cnc_mill=cnc_mill, cnc_lathe=cnc_lathe)
    logger.info("Seeded demonstration rows")
    return True


async def _seed_registers(session: AsyncSession, *, abc, xyz, cnc_mill, cnc_lathe) -> None:
    await EnquiryRepository(session).insert_many(
        [
            {"enquiry_id": "ENQ-2025-001", "customer_id": abc.id, "part_no": "P1001", "qty": 500,
             "estimated_cost": Decimal("42000.00"), "status": "quoted"},
            {"enquiry_id": "ENQ-2025-002", "customer_id": xyz.id, "part_no": "P2001", "qty": 300,
             "estimated_cost": Decimal("18500.00"), "status": "open"},
        ]
    )
    await RoutingOperationRepository(session).insert_many(
        [
            {"part_no": "P1001", "op_seq": 10, "op_name": "Turning", "machine_type": "CNC Lathe",
             "setup_time_min": 30, "run_time_per_piece_min": 4.5},
            {"part_no": "P1001", "op_seq": 20, "op_name": "Milling", "machine_type": "CNC Mill",
             "setup_time_min": 45, "run_time_per_piece_min": 6},
        ]
    )
    await InventoryRepository(session).insert_many(
        [
            {"item_id": "RM-EN24-40", "name": "EN24 Round Bar 40mm", "batch_no": "B-2310",
             "qty_on_hand": Decimal("250"), "location": "Store A", "reorder_point": Decimal("100")},
            {"item_id": "CH-ZN-01", "name": "Zinc Plating Brightener", "batch_no": "Z-0925",
             "qty_on_hand": Decimal("40"), "location": "Plating Store", "reorder_point": Decimal("20")},
        ]
    )
    await ToolRepository(session).insert_many(
        [
            {"tool_id": "T-001", "name": "Carbide Insert CNMG", "last_purchase_cost": 450,
             "useful_life_hours": 40, "current_usage_hours": 12},
            {"tool_id": "T-002", "name": "End Mill 10mm", "last_purchase_cost": 1200,
             "useful_life_hours": 60, "current_usage_hours": 55},
        ]
    )
    await InspectionRepository(session).insert_many(
        [
            {"insp_id": "QC-2025-001", "job_id": "CNC-2025-001", "insp_type": "First Article",
             "result": "pass", "remarks": "Dimensions within tolerance"},
        ]
    )
    await MaintenanceRepository(session).insert_many(
        [
            {"maintenance_id": "MNT-2025-001", "machine_id": cnc_mill.id, "type": "preventive",
             "scheduled_date": date(2025, 11, 15), "downtime_hours": Decimal("0")},
            {"maintenance_id": "MNT-2025-002", "machine_id": cnc_lathe.id, "type": "breakdown",
             "scheduled_date": date(2025, 10, 12), "completed_date": date(2025, 10, 13),
             "downtime_hours": Decimal("6.5")},
        ]
    )
    await PurchaseOrderRepository(session).insert_many(
        [
            {"po_no": "PO-2025-001", "supplier_name": "Steel Traders", "item_description": "EN24 Round Bar 40mm",
             "qty": 500, "total_amount": Decimal("65000.00"), "status": "ordered"},
        ]
    )
    await DispatchRepository(session).insert_many(
        [
            {"dispatch_id": "DSP-2025-001", "job_id": "PLT-2025-001", "lr_no": "LR-88213",
             "eway_bill_no": "EWB-3312009", "dispatch_date": date(2025, 10, 25),
             "transporter_name": "Speedway Logistics"},
        ]
    )
    await ExpenseRepository(session).insert_many(
        [
            {"expense_id": "EXP-2025-001", "date": date(2025, 10, 5), "category": "Utilities",
             "amount": Decimal("18250.00"), "vendor": "State Electricity Board", "description": "Power bill"},
            {"expense_id": "EXP-2025-002", "date": date(2025, 10, 11), "category": "Consumables",
             "amount": Decimal("3400.00"), "vendor": "Coolant Supplies", "description": "Cutting oil"},
        ]
    )


async def _run(demo: Optional[bool]) -> None:
    await create_tables()
    await seed_all(demo=demo)


# PUBLIC_INTERFACE
def main(argv: Optional[list] = None) -> None:
    """Entrypoint to run the asynchronous seeding."""
    args = list(sys.argv[1:] if argv is None else argv)
    demo = True if "--demo" in args else None
    asyncio.run(_run(demo))


if __name__ == "__main__":
    main()
