from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from shop_erp.db.base import Base, IntPkMixin, TimestampMixin


class InventoryItem(IntPkMixin, TimestampMixin, Base):
    """Stock of a raw material or consumable batch at a location."""
    __tablename__ = "inventory"

    item_id: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    batch_no: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    qty_on_hand: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 3), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reorder_point: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 3), nullable=True)
