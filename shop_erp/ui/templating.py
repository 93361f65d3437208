from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from .formatting import badge, format_date, format_inr, status_badge

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

# PUBLIC_INTERFACE
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["inr"] = format_inr
templates.env.filters["isodate"] = format_date
templates.env.globals["badge"] = badge
templates.env.globals["status_badge"] = status_badge


def render_fragment(name: str, **context: Any) -> Markup:
    """Render a component template outside a request into safe markup."""
    return Markup(templates.env.get_template(name).render(**context))
