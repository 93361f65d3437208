from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.api.pages import render_page
from shop_erp.core.deps import get_session, require_identity
from shop_erp.schemas.auth import Identity
from shop_erp.services.dashboard import DashboardService

router = APIRouter(tags=["Dashboard"])


# PUBLIC_INTERFACE
@router.get("/dashboard", response_class=HTMLResponse, summary="Dashboard")
async def dashboard(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """Headline metrics, six-month turnover and jobs by status."""
    metrics = await DashboardService(session).metrics()
    return render_page(request, "pages/dashboard.html", identity=identity, metrics=metrics)
