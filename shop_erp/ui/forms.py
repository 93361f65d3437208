from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from markupsafe import Markup
from pydantic import BaseModel, ValidationError

from .templating import render_fragment

ModelT = TypeVar("ModelT", bound=BaseModel)

FIELD_KINDS = ("text", "number", "date", "textarea", "select", "hidden")


@dataclass
class FormField:
    """Describes one input of a create/edit form."""
    name: str
    label: str
    kind: str = "text"
    required: bool = False
    readonly: bool = False
    options: Sequence[Tuple[Any, str]] = field(default_factory=tuple)
    placeholder: str = ""
    step: Optional[str] = None
    rows: int = 3
    wide: bool = False

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind: {self.kind}")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


# PUBLIC_INTERFACE
def form_values(source: Any, fields: Iterable[FormField]) -> Dict[str, str]:
    """Current values of ``fields`` taken from a record, mapping or pydantic model, as input text."""
    values = {}
    for f in fields:
        if isinstance(source, Mapping):
            raw = source.get(f.name)
        else:
            raw = getattr(source, f.name, None)
        values[f.name] = _as_text(raw)
    return values


# PUBLIC_INTERFACE
def render_form(
    fields: Sequence[FormField],
    *,
    action: str,
    values: Optional[Mapping[str, Any]] = None,
    errors: Optional[Mapping[str, str]] = None,
    submit_label: str = "Save",
    cancel_url: Optional[str] = None,
    extra: Markup | str = "",
    multipart: bool = False,
) -> Markup:
    """
    Render a form body for a dialog.

    ``errors`` maps field names to messages shown under the inputs; a
    ``__all__`` entry is shown above the fields.
    """
    values = {key: _as_text(value) for key, value in (values or {}).items()}
    return render_fragment(
        "components/form.html",
        fields=fields,
        action=action,
        values=values,
        errors=dict(errors or {}),
        submit_label=submit_label,
        cancel_url=cancel_url,
        extra=extra,
        multipart=multipart,
    )


def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip()
            if value == "":
                continue
        cleaned[key] = value
    return cleaned


def validation_messages(exc: ValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = ".".join(str(part) for part in loc) if loc else "__all__"
        errors.setdefault(name, err.get("msg", "Invalid value"))
    return errors


# PUBLIC_INTERFACE
def parse_form(schema: Type[ModelT], data: Mapping[str, Any]) -> Tuple[Optional[ModelT], Dict[str, str]]:
    """
    Validate posted form data against ``schema``.

    Blank strings count as missing, so optional fields fall back to their
    defaults. Returns the model and no errors, or None and field -> message.
    """
    try:
        return schema.model_validate(_clean(data)), {}
    except ValidationError as exc:
        return None, validation_messages(exc)


def option_list(records: Iterable[Any], label_key: str = "name", value_key: str = "id") -> List[Tuple[Any, str]]:
    """Select options built from records."""
    options = []
    for record in records:
        if isinstance(record, Mapping):
            options.append((record.get(value_key), str(record.get(label_key) or "")))
        else:
            options.append((getattr(record, value_key), str(getattr(record, label_key, "") or "")))
    return options
