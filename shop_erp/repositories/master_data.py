from __future__ import annotations

from typing import List

from shop_erp.db.models.master_data import Customer, Employee, Machine, Part
from .base import CrudRepository


class CustomerRepository(CrudRepository[Customer]):
    """Repository for customers."""
    model = Customer


class EmployeeRepository(CrudRepository[Employee]):
    """Repository for employees."""
    model = Employee

    async def list_active(self) -> List[Employee]:
        return await self.list(filters={"status": "active"}, order_by=("name", "id"))


class PartRepository(CrudRepository[Part]):
    """Repository for parts, addressed by part number."""
    model = Part
    key_field = "part_no"


class MachineRepository(CrudRepository[Machine]):
    """Repository for machines."""
    model = Machine
