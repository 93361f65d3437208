from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class CustomerForm(BaseModel):
    """Customer create/edit payload."""
    name: str = Field(..., min_length=1, description="Customer name")
    gstin: Optional[str] = Field(None, description="GST identification number")
    contact_person: Optional[str] = Field(None)
    phone: Optional[str] = Field(None)
    billing_address: Optional[str] = Field(None)
    shipping_address: Optional[str] = Field(None)
    credit_days: int = Field(30, ge=0, description="Payment terms in days")


class EmployeeForm(BaseModel):
    """Employee create/edit payload."""
    employee_code: Optional[str] = Field(None)
    name: str = Field(..., min_length=1)
    role: Optional[str] = Field(None)
    department: Optional[str] = Field(None)
    phone: Optional[str] = Field(None)
    shift: str = Field("A")
    skill_level: str = Field("Intermediate")
    status: str = Field("active")


class PartForm(BaseModel):
    """Part create/edit payload; part_no is the business key."""
    part_no: str = Field(..., min_length=1)
    rev: str = Field("A")
    description: Optional[str] = Field(None)
    material: Optional[str] = Field(None)
    client_part_no: Optional[str] = Field(None)
    drawing_url: Optional[str] = Field(None)


class MachineForm(BaseModel):
    """Machine create/edit payload."""
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    model: Optional[str] = Field(None)
    location: Optional[str] = Field(None)
    last_pm_date: Optional[date] = Field(None, description="Last preventive maintenance")
