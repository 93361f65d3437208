from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class RouteOperation(BaseModel):
    """One step of a job's routing."""
    op_seq: int = Field(..., ge=0, description="Sequence number (10, 20, ...)")
    op_name: Optional[str] = Field(None)
    machine_id: Optional[int] = Field(None)
    operator_id: Optional[int] = Field(None)


class JobForm(BaseModel):
    """Job order create/edit payload."""
    job_type: Literal["CNC", "PLATING"] = Field("CNC")
    customer_id: int = Field(..., description="Customer id")
    part_no: str = Field(..., min_length=1)
    rev: Optional[str] = Field(None)
    qty_ordered: int = Field(..., gt=0)
    due_date: Optional[date] = Field(None)
    route: List[RouteOperation] = Field(default_factory=list)


class ChallanForm(BaseModel):
    """Plating challan create payload."""
    job_id: str = Field(..., min_length=1)
    customer_id: Optional[int] = Field(None)
    qty_sent: int = Field(..., gt=0)
    process_type: str = Field("Zinc Plating")
    thickness: str = Field("10-15 microns")
    date_sent: Optional[date] = Field(None)
    expected_return_date: Optional[date] = Field(None)
    params_note: Optional[str] = Field(None, description="Free-text process parameters")
