from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Sequence, Type

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.api.pages import redirect, render_page
from shop_erp.core.deps import get_session, require_identity
from shop_erp.core.errors import NotFound
from shop_erp.repositories.base import CrudRepository
from shop_erp.repositories.master_data import (
    CustomerRepository,
    EmployeeRepository,
    MachineRepository,
    PartRepository,
)
from shop_erp.schemas.auth import Identity
from shop_erp.schemas.master_data import CustomerForm, EmployeeForm, MachineForm, PartForm
from shop_erp.ui.dialog import FormDialog
from shop_erp.ui.formatting import badge, format_date
from shop_erp.ui.forms import FormField, form_values, parse_form, render_form
from shop_erp.ui.table import Column, DataTable, filter_records
from shop_erp.ui.templating import render_fragment

logger = logging.getLogger(__name__)


@dataclass
class MasterPage:
    """Wiring of one master-data table to the list view and the form dialog."""
    path: str
    title: str
    singular: str
    subtitle: str
    repository: Type[CrudRepository]
    schema: Type[BaseModel]
    columns: Sequence[Column]
    fields: Sequence[FormField]
    label_key: str = "name"
    key_type: Callable[[str], Any] = int
    immutable: Sequence[str] = ()
    search_key: Optional[str] = None
    dialog_size: str = "md"
    tags: List[str] = field(default_factory=list)

    def key_of(self, record: Any) -> Any:
        return getattr(record, self.repository.key_field)

    def parse_key(self, raw: str) -> Any:
        try:
            return self.key_type(raw)
        except ValueError:
            raise HTTPException(status_code=404, detail=f"{self.singular} not found")

    def form_fields(self, editing: bool) -> List[FormField]:
        if not editing:
            return list(self.fields)
        return [
            FormField(**{**f.__dict__, "readonly": True}) if f.name in self.immutable else f
            for f in self.fields
        ]


# PUBLIC_INTERFACE
def build_master_router(page: MasterPage) -> APIRouter:
    """
    Page router for a master-data table: list, create/edit dialog and delete
    with confirmation. Writes redirect back to the list so it reloads.
    """
    router = APIRouter(prefix=page.path, tags=page.tags or [page.title])

    async def render_list(
        request: Request,
        identity: Identity,
        session: AsyncSession,
        *,
        q: Optional[str] = None,
        dialog: Markup | str = "",
        status_code: int = 200,
    ) -> HTMLResponse:
        records = await page.repository(session).list()
        if page.search_key:
            records = filter_records(records, q, page.search_key)
        table = DataTable(
            page.columns,
            on_edit=lambda r: f"{page.path}/{page.key_of(r)}/edit",
            on_delete=lambda r: f"{page.path}/{page.key_of(r)}/delete",
        )
        return render_page(
            request,
            "pages/list.html",
            identity=identity,
            heading=page.title,
            subtitle=page.subtitle,
            actions=[{"label": f"Add {page.singular}", "url": f"{page.path}/new"}],
            search={"term": q, "placeholder": f"Search {page.title.lower()}..."} if page.search_key else None,
            table=table.render(records),
            dialog=dialog,
            status_code=status_code,
        )

    def form_dialog(
        title: str, action: str, values: Mapping[str, Any], errors: Mapping[str, str], *, editing: bool
    ) -> Markup:
        content = render_form(
            page.form_fields(editing),
            action=action,
            values=values,
            errors=errors,
            submit_label="Update" if editing else "Create",
            cancel_url=page.path,
        )
        return FormDialog(title, page.path, page.dialog_size).render(True, content)

    async def load(session: AsyncSession, raw_key: str):
        key = page.parse_key(raw_key)
        record = await page.repository(session).get(key)
        if record is None:
            raise NotFound(page.repository.model.__tablename__, key)
        return key, record

    # PUBLIC_INTERFACE
    @router.get("", response_class=HTMLResponse, summary=f"List {page.title.lower()}")
    async def list_page(
        request: Request,
        q: Optional[str] = Query(None, description="Case-insensitive search"),
        identity: Identity = Depends(require_identity),
        session: AsyncSession = Depends(get_session),
    ):
        return await render_list(request, identity, session, q=q)

    # PUBLIC_INTERFACE
    @router.get("/new", response_class=HTMLResponse, summary=f"Add {page.singular.lower()} dialog")
    async def new_page(
        request: Request,
        identity: Identity = Depends(require_identity),
        session: AsyncSession = Depends(get_session),
    ):
        defaults = form_values(page.schema.model_construct(), page.fields)
        dialog = form_dialog(f"Add {page.singular}", page.path, defaults, {}, editing=False)
        return await render_list(request, identity, session, dialog=dialog)

    # PUBLIC_INTERFACE
    @router.post("", response_class=HTMLResponse, summary=f"Create {page.singular.lower()}")
    async def create(
        request: Request,
        identity: Identity = Depends(require_identity),
        session: AsyncSession = Depends(get_session),
    ):
        posted = await request.form()
        data, errors = parse_form(page.schema, posted)
        if data is None:
            dialog = form_dialog(f"Add {page.singular}", page.path, dict(posted), errors, editing=False)
            return await render_list(request, identity, session, dialog=dialog, status_code=422)
        created = await page.repository(session).insert(data.model_dump())
        logger.info("%s %s created", page.singular, page.key_of(created))
        return redirect(page.path)

    # PUBLIC_INTERFACE
    @router.get("/{key}/edit", response_class=HTMLResponse, summary=f"Edit {page.singular.lower()} dialog")
    async def edit_page(
        key: str,
        request: Request,
        identity: Identity = Depends(require_identity),
        session: AsyncSession = Depends(get_session),
    ):
        _, record = await load(session, key)
        dialog = form_dialog(
            f"Edit {page.singular}", f"{page.path}/{key}", form_values(record, page.fields), {}, editing=True
        )
        return await render_list(request, identity, session, dialog=dialog)

    # PUBLIC_INTERFACE
    @router.post("/{key}", response_class=HTMLResponse, summary=f"Update {page.singular.lower()}")
    async def update(
        key: str,
        request: Request,
        identity: Identity = Depends(require_identity),
        session: AsyncSession = Depends(get_session),
    ):
        parsed_key, record = await load(session, key)
        posted = dict(await request.form())
        # business keys stay as stored
        for name in page.immutable:
            posted[name] = getattr(record, name)
        data, errors = parse_form(page.schema, posted)
        if data is None:
            dialog = form_dialog(f"Edit {page.singular}", f"{page.path}/{key}", posted, errors, editing=True)
            return await render_list(request, identity, session, dialog=dialog, status_code=422)
        await page.repository(session).update(parsed_key, data.model_dump(exclude=set(page.immutable)))
        logger.info("%s %s updated", page.singular, parsed_key)
        return redirect(page.path)

    # PUBLIC_INTERFACE
    @router.get("/{key}/delete", response_class=HTMLResponse, summary=f"Confirm {page.singular.lower()} deletion")
    async def confirm_delete(
        key: str,
        request: Request,
        identity: Identity = Depends(require_identity),
        session: AsyncSession = Depends(get_session),
    ):
        _, record = await load(session, key)
        content = render_fragment(
            "components/confirm.html",
            message=f"Are you sure you want to delete {getattr(record, page.label_key)}?",
            action=f"{page.path}/{key}/delete",
            cancel_url=page.path,
        )
        dialog = FormDialog(f"Delete {page.singular}", page.path, "sm").render(True, content)
        return await render_list(request, identity, session, dialog=dialog)

    # PUBLIC_INTERFACE
    @router.post("/{key}/delete", summary=f"Delete {page.singular.lower()}")
    async def delete(
        key: str,
        identity: Identity = Depends(require_identity),
        session: AsyncSession = Depends(get_session),
    ):
        parsed_key, _ = await load(session, key)
        await page.repository(session).delete(parsed_key)
        logger.info("%s %s deleted", page.singular, parsed_key)
        return redirect(page.path)

    return router


EMPLOYEE_ROLES = (
    "CNC Operator",
    "Plating Operator",
    "Quality Inspector",
    "Maintenance Tech",
    "Plating Supervisor",
    "Admin",
)
SKILL_LEVELS = ("Beginner", "Intermediate", "Advanced", "Expert")
SKILL_TONES = {"Beginner": "neutral", "Intermediate": "info", "Advanced": "accent", "Expert": "success"}
MACHINE_TYPES = ("CNC Mill", "CNC Lathe", "VMC", "Plating Line")

CUSTOMERS = MasterPage(
    path="/customers",
    title="Customers",
    singular="Customer",
    subtitle="Manage customer master data",
    repository=CustomerRepository,
    schema=CustomerForm,
    columns=[
        Column("name", "Name"),
        Column("gstin", "GSTIN"),
        Column("contact_person", "Contact Person"),
        Column("phone", "Phone"),
        Column("credit_days", "Credit Days"),
    ],
    fields=[
        FormField("name", "Customer Name", required=True),
        FormField("gstin", "GSTIN"),
        FormField("contact_person", "Contact Person"),
        FormField("phone", "Phone"),
        FormField("billing_address", "Billing Address", kind="textarea"),
        FormField("shipping_address", "Shipping Address", kind="textarea"),
        FormField("credit_days", "Credit Days", kind="number"),
    ],
    search_key="name",
    dialog_size="lg",
)

EMPLOYEES = MasterPage(
    path="/employees",
    title="Employees",
    singular="Employee",
    subtitle="Manage employee records",
    repository=EmployeeRepository,
    schema=EmployeeForm,
    columns=[
        Column("employee_code", "Code"),
        Column("name", "Name"),
        Column("role", "Role"),
        Column("department", "Department"),
        Column("phone", "Phone"),
        Column("shift", "Shift"),
        Column("skill_level", "Skill Level", lambda v, _: badge(v, SKILL_TONES.get(v, "neutral"))),
        Column("status", "Status", lambda v, _: badge(v, "success" if v == "active" else "neutral")),
    ],
    fields=[
        FormField("employee_code", "Employee Code"),
        FormField("name", "Name", required=True),
        FormField("role", "Role", kind="select", options=[(r, r) for r in EMPLOYEE_ROLES]),
        FormField("department", "Department"),
        FormField("phone", "Phone"),
        FormField("shift", "Shift", kind="select", options=[("A", "A"), ("B", "B"), ("C", "C")]),
        FormField(
            "skill_level",
            "Skill Level",
            kind="select",
            options=[(s, s) for s in SKILL_LEVELS],
        ),
        FormField("status", "Status", kind="select", options=[("active", "Active"), ("inactive", "Inactive")]),
    ],
    search_key="name",
)

PARTS = MasterPage(
    path="/parts",
    title="Parts",
    singular="Part",
    subtitle="Manage part master and revisions",
    repository=PartRepository,
    schema=PartForm,
    columns=[
        Column("part_no", "Part No"),
        Column("rev", "Rev"),
        Column("description", "Description"),
        Column("material", "Material"),
        Column("client_part_no", "Client Part No"),
    ],
    fields=[
        FormField("part_no", "Part No", required=True),
        FormField("rev", "Revision"),
        FormField("description", "Description", wide=True),
        FormField("material", "Material"),
        FormField("client_part_no", "Client Part No"),
        FormField("drawing_url", "Drawing URL", wide=True),
    ],
    label_key="part_no",
    key_type=str,
    immutable=("part_no",),
)

MACHINES = MasterPage(
    path="/machines",
    title="Machines",
    singular="Machine",
    subtitle="Manage machines and plating lines",
    repository=MachineRepository,
    schema=MachineForm,
    columns=[
        Column("name", "Name"),
        Column("type", "Type"),
        Column("model", "Model"),
        Column("location", "Location"),
        Column("last_pm_date", "Last PM", lambda v, _: format_date(v)),
    ],
    fields=[
        FormField("name", "Machine Name", required=True),
        FormField(
            "type",
            "Type",
            kind="select",
            required=True,
            options=[(t, t) for t in MACHINE_TYPES],
        ),
        FormField("model", "Model"),
        FormField("location", "Location"),
        FormField("last_pm_date", "Last PM Date", kind="date"),
    ],
)

MASTER_PAGES = (CUSTOMERS, EMPLOYEES, PARTS, MACHINES)

# PUBLIC_INTERFACE
routers = [build_master_router(page) for page in MASTER_PAGES]
