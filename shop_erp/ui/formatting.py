from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from markupsafe import Markup, escape

STATUS_TONES = {
    "pending": "warning",
    "in-progress": "info",
    "pending-challan": "accent",
    "completed": "success",
    "sent": "warning",
    "received": "success",
    "paid": "success",
    "active": "success",
    "inactive": "neutral",
    "present": "success",
    "absent": "danger",
    "leave": "warning",
    "sick_leave": "warning",
    "paid_leave": "info",
    "holiday": "accent",
    "sunday": "neutral",
    "half_day": "info",
}


def _group_indian(whole: str) -> str:
    # 12,34,56,789: last three digits, then pairs
    if len(whole) <= 3:
        return whole
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


# PUBLIC_INTERFACE
def format_inr(amount: Any, decimals: int = 2) -> str:
    """Format an amount as Indian rupees with lakh/crore digit grouping, e.g. ``₹4,50,000.00``."""
    if amount is None or amount == "":
        return ""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        return str(amount)
    value = value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, frac = f"{abs(value):.{decimals}f}".partition(".")
    return f"{sign}₹{_group_indian(whole)}" + (f".{frac}" if frac else "")


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


# PUBLIC_INTERFACE
def badge(text: Any, tone: str = "neutral") -> Markup:
    """Status pill markup; ``text`` is escaped."""
    if text is None or text == "":
        return Markup("")
    return Markup('<span class="badge badge-{}">{}</span>').format(tone, escape(str(text)))


def status_badge(status: Any, label: Optional[str] = None) -> Markup:
    return badge(label or status, STATUS_TONES.get(str(status), "neutral"))
