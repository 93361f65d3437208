"""Shop schema.

- customers, employees, parts, machines
- jobs, challans, invoices
- attendance_records, attendance_summary
- enquiries, operations, inventory, tooling, inspections, maintenance,
  purchase_orders, dispatch, expenses
- app_users
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "c1a7e2d9f310"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)


def _customer_fk() -> sa.Column:
    return sa.Column(
        "customer_id",
        sa.Integer(),
        sa.ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
    )


def upgrade() -> None:
    # Masters
    op.create_table(
        "customers",
        _id(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("gstin", sa.Text(), nullable=True),
        sa.Column("contact_person", sa.Text(), nullable=True),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("billing_address", sa.Text(), nullable=True),
        sa.Column("shipping_address", sa.Text(), nullable=True),
        sa.Column("credit_days", sa.Integer(), nullable=False, server_default="30"),
        _created_at(),
    )
    op.create_table(
        "employees",
        _id(),
        sa.Column("employee_code", sa.Text(), nullable=True, unique=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("role", sa.Text(), nullable=True),
        sa.Column("department", sa.Text(), nullable=True),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("shift", sa.Text(), nullable=False, server_default="A"),
        sa.Column("skill_level", sa.Text(), nullable=False, server_default="Intermediate"),
        sa.Column("status", sa.Text(), nullable=False, server_default="active"),
        _created_at(),
    )
    op.create_table(
        "parts",
        _id(),
        sa.Column("part_no", sa.Text(), nullable=False, unique=True),
        sa.Column("rev", sa.Text(), nullable=False, server_default="A"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("material", sa.Text(), nullable=True),
        sa.Column("client_part_no", sa.Text(), nullable=True),
        sa.Column("drawing_url", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        "machines",
        _id(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("model", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("last_pm_date", sa.Date(), nullable=True),
        _created_at(),
    )

    # Production and billing
    op.create_table(
        "jobs",
        _id(),
        sa.Column("job_id", sa.Text(), nullable=False, unique=True),
        _customer_fk(),
        sa.Column("part_no", sa.Text(), nullable=True),
        sa.Column("rev", sa.Text(), nullable=True),
        sa.Column("qty_ordered", sa.Integer(), nullable=False),
        sa.Column("qty_completed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("route", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("job_type", sa.Text(), nullable=False, server_default="CNC"),
        sa.Column("status", sa.Text(), nullable=False, server_default="pending"),
        sa.Column("current_operation", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_jobs_status_due_date", "jobs", ["status", "due_date"])
    op.create_table(
        "challans",
        _id(),
        sa.Column("challan_no", sa.Text(), nullable=False, unique=True),
        sa.Column("job_id", sa.Text(), sa.ForeignKey("jobs.job_id", ondelete="CASCADE"), nullable=False),
        _customer_fk(),
        sa.Column("qty_sent", sa.Integer(), nullable=False),
        sa.Column("process_type", sa.Text(), nullable=False, server_default="Zinc Plating"),
        sa.Column("thickness", sa.Text(), nullable=True),
        sa.Column("params_json", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("date_sent", sa.Date(), nullable=True),
        sa.Column("expected_return_date", sa.Date(), nullable=True),
        sa.Column("date_received", sa.Date(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="sent"),
        _created_at(),
    )
    op.create_table(
        "invoices",
        _id(),
        sa.Column("invoice_no", sa.Text(), nullable=False, unique=True),
        sa.Column("job_id", sa.Text(), sa.ForeignKey("jobs.job_id", ondelete="CASCADE"), nullable=False),
        _customer_fk(),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("taxable_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("gst_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("payment_status", sa.Text(), nullable=False, server_default="pending"),
        _created_at(),
    )

    # Attendance
    op.create_table(
        "attendance_records",
        _id(),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="present"),
        sa.Column("ot_hours", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("in_time", sa.Text(), nullable=True),
        sa.Column("out_time", sa.Text(), nullable=True),
        sa.Column("worked_hours", sa.Numeric(6, 2), nullable=True),
        _created_at(),
        sa.UniqueConstraint("employee_id", "date", name="uq_attendance_records_employee_date"),
    )
    op.create_table(
        "attendance_summary",
        _id(),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_working_days", sa.Numeric(6, 1), nullable=False, server_default="0"),
        sa.Column("total_present_days", sa.Numeric(6, 1), nullable=False, server_default="0"),
        sa.Column("total_absent_days", sa.Numeric(6, 1), nullable=False, server_default="0"),
        sa.Column("total_leaves", sa.Numeric(6, 1), nullable=False, server_default="0"),
        sa.Column("total_ot_hours", sa.Numeric(8, 2), nullable=False, server_default="0"),
        _created_at(),
        sa.UniqueConstraint("employee_id", "month", "year", name="uq_attendance_summary_employee_period"),
    )

    # Registers
    op.create_table(
        "enquiries",
        _id(),
        sa.Column("enquiry_id", sa.Text(), nullable=False, unique=True),
        _customer_fk(),
        sa.Column("part_no", sa.Text(), nullable=True),
        sa.Column("qty", sa.Integer(), nullable=True),
        sa.Column("estimated_cost", sa.Numeric(14, 2), nullable=True),
        sa.Column("status", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        "operations",
        _id(),
        sa.Column("part_no", sa.Text(), nullable=False),
        sa.Column("op_seq", sa.Integer(), nullable=False),
        sa.Column("op_name", sa.Text(), nullable=True),
        sa.Column("machine_type", sa.Text(), nullable=True),
        sa.Column("setup_time_min", sa.Numeric(10, 2), nullable=True),
        sa.Column("run_time_per_piece_min", sa.Numeric(10, 2), nullable=True),
        _created_at(),
    )
    op.create_table(
        "inventory",
        _id(),
        sa.Column("item_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("batch_no", sa.Text(), nullable=True),
        sa.Column("qty_on_hand", sa.Numeric(14, 3), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("reorder_point", sa.Numeric(14, 3), nullable=True),
        _created_at(),
    )
    op.create_table(
        "tooling",
        _id(),
        sa.Column("tool_id", sa.Text(), nullable=False, unique=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("last_purchase_cost", sa.Numeric(14, 2), nullable=True),
        sa.Column("useful_life_hours", sa.Numeric(10, 2), nullable=True),
        sa.Column("current_usage_hours", sa.Numeric(10, 2), nullable=True),
        _created_at(),
    )
    op.create_table(
        "inspections",
        _id(),
        sa.Column("insp_id", sa.Text(), nullable=False, unique=True),
        sa.Column("job_id", sa.Text(), nullable=True),
        sa.Column("insp_type", sa.Text(), nullable=True),
        sa.Column("result", sa.Text(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        "maintenance",
        _id(),
        sa.Column("maintenance_id", sa.Text(), nullable=False, unique=True),
        sa.Column("machine_id", sa.Integer(), sa.ForeignKey("machines.id", ondelete="SET NULL"), nullable=True),
        sa.Column("type", sa.Text(), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=True),
        sa.Column("completed_date", sa.Date(), nullable=True),
        sa.Column("downtime_hours", sa.Numeric(10, 2), nullable=True),
        _created_at(),
    )
    op.create_table(
        "purchase_orders",
        _id(),
        sa.Column("po_no", sa.Text(), nullable=False, unique=True),
        sa.Column("supplier_name", sa.Text(), nullable=True),
        sa.Column("item_description", sa.Text(), nullable=True),
        sa.Column("qty", sa.Integer(), nullable=True),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("status", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        "dispatch",
        _id(),
        sa.Column("dispatch_id", sa.Text(), nullable=False, unique=True),
        sa.Column("job_id", sa.Text(), nullable=True),
        sa.Column("lr_no", sa.Text(), nullable=True),
        sa.Column("eway_bill_no", sa.Text(), nullable=True),
        sa.Column("dispatch_date", sa.Date(), nullable=True),
        sa.Column("transporter_name", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        "expenses",
        _id(),
        sa.Column("expense_id", sa.Text(), nullable=False, unique=True),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("vendor", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at(),
    )

    # Console users
    op.create_table(
        "app_users",
        _id(),
        sa.Column("username", sa.Text(), nullable=False, unique=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("role", sa.Text(), nullable=False, server_default="Operator"),
        sa.Column("hashed_password", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _created_at(),
    )


def downgrade() -> None:
    for tbl in [
        "app_users",
        "expenses",
        "dispatch",
        "purchase_orders",
        "maintenance",
        "inspections",
        "tooling",
        "inventory",
        "operations",
        "enquiries",
        "attendance_summary",
        "attendance_records",
        "invoices",
        "challans",
        "jobs",
        "machines",
        "parts",
        "employees",
        "customers",
    ]:
        op.drop_table(tbl)
