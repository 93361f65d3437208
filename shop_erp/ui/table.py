from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from markupsafe import Markup

from .templating import render_fragment

PLACEHOLDER_TEXT = "No data available"

# handler: record -> target URL of the row action
ActionHandler = Callable[[Any], str]


def field_value(record: Any, key: str) -> Any:
    """
    Look up ``key`` on a mapping or an attribute object.

    Dotted keys walk nested records (``customer.name``). Missing values are None.
    """
    value = record
    for part in key.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


@dataclass
class Column:
    """A table column: field key, header label and optional ``render(value, record)`` formatter."""
    key: str
    label: str
    render: Optional[Callable[[Any, Any], Any]] = None

    def display(self, record: Any) -> Any:
        value = field_value(record, self.key)
        if self.render is not None:
            value = self.render(value, record)
        return "" if value is None else value


@dataclass
class RowAction:
    kind: str
    label: str
    url: str


@dataclass
class TableRow:
    cells: List[Any]
    actions: List[RowAction] = field(default_factory=list)


@dataclass
class TableView:
    headers: List[str]
    rows: List[TableRow]
    show_actions: bool
    placeholder: Optional[str] = None
    colspan: int = 0

    @property
    def is_empty(self) -> bool:
        return self.placeholder is not None


class DataTable:
    """
    Generic list view over records of any shape.

    Each supplied handler (view, edit, delete) adds one action to every row;
    the action column exists only when ``actions`` is enabled and at least one
    handler is given. ``labels`` renames actions, e.g. ``{"edit": "Mark Paid"}``.
    The table owns no sorting, filtering or paging state and performs no I/O.
    """

    ACTIONS = (("view", "View"), ("edit", "Edit"), ("delete", "Delete"))

    def __init__(
        self,
        columns: Sequence[Column],
        *,
        on_view: Optional[ActionHandler] = None,
        on_edit: Optional[ActionHandler] = None,
        on_delete: Optional[ActionHandler] = None,
        actions: bool = True,
        labels: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.columns = list(columns)
        self.handlers = {"view": on_view, "edit": on_edit, "delete": on_delete}
        self.actions = actions
        self.labels = dict(self.ACTIONS)
        self.labels.update(labels or {})

    @property
    def show_actions(self) -> bool:
        return self.actions and any(self.handlers.values())

    def _row_actions(self, record: Any) -> List[RowAction]:
        if not self.show_actions:
            return []
        return [
            RowAction(kind=kind, label=self.labels[kind], url=self.handlers[kind](record))
            for kind, _label in self.ACTIONS
            if self.handlers[kind] is not None
        ]

    # PUBLIC_INTERFACE
    def build(self, records: Iterable[Any]) -> TableView:
        """Lay out header labels and one row per record, in input order."""
        show_actions = self.show_actions
        headers = [column.label for column in self.columns]
        rows = [
            TableRow(cells=[column.display(record) for column in self.columns], actions=self._row_actions(record))
            for record in records
        ]
        colspan = len(self.columns) + (1 if show_actions else 0)
        if not rows:
            return TableView(headers=headers, rows=[], show_actions=show_actions, placeholder=PLACEHOLDER_TEXT, colspan=colspan)
        return TableView(headers=headers, rows=rows, show_actions=show_actions, colspan=colspan)

    # PUBLIC_INTERFACE
    def render(self, records: Iterable[Any]) -> Markup:
        """Render the records as an HTML table."""
        return render_fragment("components/data_table.html", table=self.build(records))


# PUBLIC_INTERFACE
def filter_records(records: Iterable[Any], term: Optional[str], key: str) -> List[Any]:
    """Keep records whose ``key`` field contains ``term`` (case-insensitive); a blank term keeps all."""
    records = list(records)
    needle = (term or "").strip().lower()
    if not needle:
        return records
    return [record for record in records if needle in str(field_value(record, key) or "").lower()]
