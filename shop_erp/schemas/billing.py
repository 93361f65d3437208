from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class InvoiceForm(BaseModel):
    """Invoice create payload; tax and total are derived."""
    job_id: str = Field(..., min_length=1)
    customer_id: Optional[int] = Field(None)
    invoice_date: Optional[date] = Field(None, description="Defaults to today")
    taxable_amount: Decimal = Field(..., ge=0)


class InvoiceAmounts(BaseModel):
    """Derived invoice amounts."""
    taxable_amount: Decimal
    gst_amount: Decimal
    total_amount: Decimal
