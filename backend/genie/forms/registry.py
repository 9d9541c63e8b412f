from __future__ import annotations

from genie.config import settings
from genie.forms.catalog import BUILTIN_FORMS
from genie.forms.models import FormDefinition, FormNotFoundError

_FORMS_BY_ID: dict[str, FormDefinition] = {form.id: form for form in BUILTIN_FORMS}


def _is_enabled(form_id: str) -> bool:
    enabled = settings.enabled_forms_list
    return "*" in enabled or form_id in enabled


def list_forms() -> list[FormDefinition]:
    return [form for form in BUILTIN_FORMS if _is_enabled(form.id)]


def get_form(form_id: str) -> FormDefinition:
    form = _FORMS_BY_ID.get(form_id)
    if form is None or not _is_enabled(form_id):
        raise FormNotFoundError(f"Form '{form_id}' not found")
    return form


def serialize_form(form: FormDefinition, *, include_fields: bool = True) -> dict[str, object]:
    """Render descriptor consumed by form clients."""
    payload: dict[str, object] = {
        "id": form.id,
        "title": form.title,
        "description": form.description,
    }
    if not include_fields:
        payload["field_count"] = len(form.value_fields())
        return payload

    fields: list[dict[str, object]] = []
    for field in form.fields:
        item = field.model_dump(exclude_none=True, exclude={"options", "min_length", "min_items", "message"})
        if field.type in {"select", "multiselect"}:
            item["options"] = field.choice_options()
        for key in ("help", "examples", "content"):
            if not item.get(key):
                item.pop(key, None)
        fields.append(item)
    payload["fields"] = fields
    payload["notify_email"] = form.notify_email
    return payload
