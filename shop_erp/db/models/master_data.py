from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import Date, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from shop_erp.db.base import Base, IntPkMixin, TimestampMixin


class Customer(IntPkMixin, TimestampMixin, Base):
    """Customer master."""
    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    gstin: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    contact_person: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    billing_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shipping_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    credit_days: Mapped[int] = mapped_column(Integer, nullable=False, default=30, server_default="30")


class Employee(IntPkMixin, TimestampMixin, Base):
    """Employee master; shop-floor operators and staff."""
    __tablename__ = "employees"

    employee_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    department: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shift: Mapped[str] = mapped_column(Text, nullable=False, default="A", server_default="A")
    skill_level: Mapped[str] = mapped_column(
        Text, nullable=False, default="Intermediate", server_default="Intermediate"
    )
    status: Mapped[str] = mapped_column(Text, nullable=False, default="active", server_default="active")


class Part(IntPkMixin, TimestampMixin, Base):
    """Part master, addressed by its part number."""
    __tablename__ = "parts"

    part_no: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    rev: Mapped[str] = mapped_column(Text, nullable=False, default="A", server_default="A")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    material: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_part_no: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    drawing_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Machine(IntPkMixin, TimestampMixin, Base):
    """Machine or plating line on the shop floor."""
    __tablename__ = "machines"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    model: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_pm_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
