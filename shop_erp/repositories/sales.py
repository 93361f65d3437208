from __future__ import annotations

from shop_erp.db.models.sales import DispatchRecord, Enquiry, Invoice
from .base import CrudRepository


class InvoiceRepository(CrudRepository[Invoice]):
    """Repository for invoices."""
    model = Invoice


class EnquiryRepository(CrudRepository[Enquiry]):
    model = Enquiry


class DispatchRepository(CrudRepository[DispatchRecord]):
    model = DispatchRecord
