from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shop_erp.db.base import Base, IntPkMixin, JSONType, TimestampMixin
from shop_erp.db.models.master_data import Customer


class Job(IntPkMixin, TimestampMixin, Base):
    """Job order header with its routing embedded as an ordered list of operations."""
    __tablename__ = "jobs"

    job_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True
    )
    part_no: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rev: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    qty_ordered: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    qty_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    # [{op_seq, op_name, machine_id, operator_id}, ...]
    route: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    job_type: Mapped[str] = mapped_column(Text, nullable=False, default="CNC", server_default="CNC")
    status: Mapped[str] = mapped_column(Text, nullable=False, default="pending", server_default="pending")
    current_operation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    customer: Mapped[Optional[Customer]] = relationship(Customer, lazy="selectin")


class RoutingOperation(IntPkMixin, TimestampMixin, Base):
    """Standard routing step for a part (routing register)."""
    __tablename__ = "operations"

    part_no: Mapped[str] = mapped_column(Text, nullable=False)
    op_seq: Mapped[int] = mapped_column(Integer, nullable=False)
    op_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    machine_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    setup_time_min: Mapped[Optional[float]] = mapped_column(Numeric(10, 2), nullable=True)
    run_time_per_piece_min: Mapped[Optional[float]] = mapped_column(Numeric(10, 2), nullable=True)


class Challan(IntPkMixin, TimestampMixin, Base):
    """Delivery challan for goods sent out for plating."""
    __tablename__ = "challans"

    challan_no: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    job_id: Mapped[str] = mapped_column(Text, ForeignKey("jobs.job_id", ondelete="CASCADE"), nullable=False)
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True
    )
    qty_sent: Mapped[int] = mapped_column(Integer, nullable=False)
    process_type: Mapped[str] = mapped_column(Text, nullable=False, default="Zinc Plating")
    thickness: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    params_json: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    date_sent: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    expected_return_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    date_received: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="sent", server_default="sent")

    customer: Mapped[Optional[Customer]] = relationship(Customer, lazy="selectin")


class Tool(IntPkMixin, TimestampMixin, Base):
    """Cutting tool register."""
    __tablename__ = "tooling"

    tool_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    last_purchase_cost: Mapped[Optional[float]] = mapped_column(Numeric(14, 2), nullable=True)
    useful_life_hours: Mapped[Optional[float]] = mapped_column(Numeric(10, 2), nullable=True)
    current_usage_hours: Mapped[Optional[float]] = mapped_column(Numeric(10, 2), nullable=True)
