from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from shop_erp.db.base import Base, IntPkMixin, TimestampMixin


class PurchaseOrder(IntPkMixin, TimestampMixin, Base):
    """Purchase order raised on a supplier (single item per order)."""
    __tablename__ = "purchase_orders"

    po_no: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    supplier_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    item_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    qty: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    total_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Expense(IntPkMixin, TimestampMixin, Base):
    """Shop expense voucher."""
    __tablename__ = "expenses"

    expense_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    vendor: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
