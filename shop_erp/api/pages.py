"""
Helpers shared by the page routers: full-page rendering inside the shell,
redirect-after-post and query string building.
"""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse

from shop_erp.core.settings import get_app_settings
from shop_erp.schemas.auth import Identity
from shop_erp.ui.navigation import build_navigation, page_title
from shop_erp.ui.templating import templates


# PUBLIC_INTERFACE
def render_page(
    request: Request,
    template: str,
    *,
    identity: Optional[Identity] = None,
    status_code: int = 200,
    **context: Any,
) -> HTMLResponse:
    """Render ``template`` with the shell context (app name, navigation, signed-in identity)."""
    path = request.url.path
    base = {
        "app_name": get_app_settings().APP_NAME,
        "identity": identity,
        "nav": build_navigation(path),
        "page_title": page_title(path),
    }
    base.update(context)
    return templates.TemplateResponse(request, template, base, status_code=status_code)


def redirect(url: str) -> RedirectResponse:
    """303 redirect so the browser reloads the target with GET."""
    return RedirectResponse(url, status_code=303)


def with_query(path: str, **params: Any) -> str:
    query = {key: value for key, value in params.items() if value not in (None, "")}
    return f"{path}?{urlencode(query)}" if query else path
