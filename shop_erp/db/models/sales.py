from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shop_erp.db.base import Base, IntPkMixin, TimestampMixin
from shop_erp.db.models.master_data import Customer


class Invoice(IntPkMixin, TimestampMixin, Base):
    """Tax invoice raised against a job."""
    __tablename__ = "invoices"

    invoice_no: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    job_id: Mapped[str] = mapped_column(Text, ForeignKey("jobs.job_id", ondelete="CASCADE"), nullable=False)
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True
    )
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    taxable_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    gst_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    payment_status: Mapped[str] = mapped_column(
        Text, nullable=False, default="pending", server_default="pending"
    )

    customer: Mapped[Optional[Customer]] = relationship(Customer, lazy="selectin")


class Enquiry(IntPkMixin, TimestampMixin, Base):
    """Customer enquiry awaiting a quote."""
    __tablename__ = "enquiries"

    enquiry_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True
    )
    part_no: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    qty: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    estimated_cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    customer: Mapped[Optional[Customer]] = relationship(Customer, lazy="selectin")


class DispatchRecord(IntPkMixin, TimestampMixin, Base):
    """Outbound dispatch of finished goods."""
    __tablename__ = "dispatch"

    dispatch_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    job_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lr_no: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    eway_bill_no: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    dispatch_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    transporter_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
