from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.api.pages import redirect, render_page
from shop_erp.core.deps import get_session, get_session_guard
from shop_erp.core.security import SessionGuard
from shop_erp.core.settings import get_app_settings
from shop_erp.services.auth import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

INVALID_CREDENTIALS = "Invalid credentials"


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_class=HTMLResponse,
    summary="Login page",
    description="Shows the sign-in form, or sends an already signed-in user to the dashboard.",
)
async def login_page(request: Request, guard: SessionGuard = Depends(get_session_guard)):
    if guard.is_authenticated:
        return redirect("/dashboard")
    return render_page(request, "login.html")


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_class=HTMLResponse,
    summary="Sign in",
    description="Checks credentials and persists the identity cookie on success.",
)
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    session: AsyncSession = Depends(get_session),
):
    """Sign in; a failure re-renders the login page with a generic message."""
    identity = None
    if username and password:
        identity = await AuthService(session).authenticate(username, password)
    if identity is None:
        return render_page(request, "login.html", error=INVALID_CREDENTIALS, username=username, status_code=401)

    settings = get_app_settings()
    token = SessionGuard().login(identity)
    response = redirect("/dashboard")
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.SESSION_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    return response


# PUBLIC_INTERFACE
@router.post("/logout", summary="Sign out", description="Clears the identity cookie and returns to the login page.")
async def logout(guard: SessionGuard = Depends(get_session_guard)) -> RedirectResponse:
    settings = get_app_settings()
    if guard.identity is not None:
        logger.info("User %s signed out", guard.identity.username)
    guard.logout()
    response = redirect("/")
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
