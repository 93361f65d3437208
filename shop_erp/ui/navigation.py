from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class NavItem:
    label: str
    path: Optional[str] = None
    icon: str = ""
    children: Tuple["NavItem", ...] = ()


@dataclass
class NavEntry:
    label: str
    path: Optional[str]
    icon: str
    active: bool = False
    expanded: bool = False
    children: List["NavEntry"] = field(default_factory=list)


# PUBLIC_INTERFACE
NAVIGATION: Tuple[NavItem, ...] = (
    NavItem("Dashboard", "/dashboard", "dashboard"),
    NavItem(
        "Masters",
        icon="database",
        children=(
            NavItem("Customers", "/customers", "users"),
            NavItem("Employees", "/employees", "user"),
            NavItem("Parts", "/parts", "package"),
            NavItem("Machines", "/machines", "factory"),
        ),
    ),
    NavItem("Enquiries", "/enquiries", "file"),
    NavItem("Jobs", "/jobs", "briefcase"),
    NavItem("Routing", "/routing", "branch"),
    NavItem("Shop Floor", "/shop-floor", "factory"),
    NavItem("Inventory", "/inventory", "box"),
    NavItem("Tooling", "/tooling", "wrench"),
    NavItem("Challans", "/challans", "droplet"),
    NavItem("Quality", "/quality", "shield"),
    NavItem("Maintenance", "/maintenance", "wrench"),
    NavItem("Purchase", "/purchase", "cart"),
    NavItem("Billing", "/billing", "receipt"),
    NavItem("Dispatch", "/dispatch", "truck"),
    NavItem("Attendance", "/attendance", "clock"),
    NavItem("Expenses", "/expenses", "wallet"),
    NavItem("Reports", "/reports", "chart"),
)


def _matches(item_path: Optional[str], path: str) -> bool:
    if not item_path:
        return False
    return path == item_path or path.startswith(item_path + "/")


# PUBLIC_INTERFACE
def build_navigation(path: str) -> List[NavEntry]:
    """
    Sidebar entries for the current request path.

    The entry owning ``path`` (or a sub-path of it) is active and its group,
    if any, is expanded.
    """
    entries = []
    for item in NAVIGATION:
        children = [
            NavEntry(child.label, child.path, child.icon, active=_matches(child.path, path))
            for child in item.children
        ]
        active = _matches(item.path, path)
        expanded = any(child.active for child in children)
        entries.append(NavEntry(item.label, item.path, item.icon, active=active, expanded=expanded, children=children))
    return entries


def page_title(path: str) -> str:
    for entry in build_navigation(path):
        if entry.active:
            return entry.label
        for child in entry.children:
            if child.active:
                return child.label
    return ""
