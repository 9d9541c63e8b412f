from __future__ import annotations

import math
import re
from typing import Any
from urllib.parse import urlparse

from genie.forms.models import NOT_SURE_OPTION, FormDefinition, FormField

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class FormValidationError(ValueError):
    """Raised when a submission does not satisfy its form definition."""

    def __init__(self, form_id: str, errors: list[dict[str, str]]) -> None:
        self.form_id = form_id
        self.errors = errors
        summary = "; ".join(f"{item['field']}: {item['message']}" for item in errors)
        super().__init__(f"Submission for form '{form_id}' is invalid: {summary}")


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value.strip()) is not None


def is_valid_url(value: str) -> bool:
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def normalize_string_list(value: object) -> list[str]:
    """Trim items, drop empties and duplicates while keeping first occurrences."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    seen: set[str] = set()
    result: list[str] = []
    for item in value:
        if item is None:
            continue
        text = str(item).strip()
        if not text or text in seen:
            continue
        seen.add(text)
        result.append(text)
    return result


def _message(field: FormField, fallback: str) -> str:
    return field.message or fallback


def _validate_text(field: FormField, raw: object) -> tuple[str | None, str | None]:
    if raw is None:
        text = ""
    elif isinstance(raw, (str, int, float)) and not isinstance(raw, bool):
        text = str(raw).strip()
    else:
        return None, _message(field, f"{field.label} must be text")

    if not text:
        if field.required:
            return None, _message(field, f"{field.label} is required")
        return None, None

    if field.min_length is not None and len(text) < field.min_length:
        return None, _message(field, f"{field.label} must be at least {field.min_length} characters")

    if field.type == "email" and not is_valid_email(text):
        return None, _message(field, "Invalid email address")

    if field.type == "select" and field.options and text not in field.options and not field.allow_custom:
        return None, _message(field, f"{field.label} must be one of: {', '.join(field.options)}")

    return text, None


def _validate_number(field: FormField, raw: object) -> tuple[int | float | None, str | None]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if field.required:
            return None, _message(field, f"{field.label} is required")
        return None, None
    invalid = _message(field, f"{field.label} must be a number")
    if isinstance(raw, bool):
        return None, invalid
    if isinstance(raw, int):
        return raw, None
    if isinstance(raw, float):
        return (raw, None) if math.isfinite(raw) else (None, invalid)
    text = str(raw).strip()
    try:
        return int(text), None
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None, invalid
    if not math.isfinite(number):
        return None, invalid
    return number, None


def _validate_checkbox(field: FormField, raw: object) -> tuple[bool, str | None]:
    if isinstance(raw, bool):
        checked = raw
    elif isinstance(raw, (int, float)):
        checked = raw != 0
    elif isinstance(raw, str):
        checked = raw.strip().lower() in {"1", "true", "yes", "on"}
    else:
        checked = False
    if field.required and not checked:
        return checked, _message(field, f"{field.label} must be checked")
    return checked, None


def _validate_multiselect(field: FormField, raw: object) -> tuple[list[str] | None, str | None]:
    values = normalize_string_list(raw)
    minimum = field.min_items or (1 if field.required else 0)
    if len(values) < minimum:
        return None, _message(field, f"Please select at least {minimum} option(s) for {field.label}")

    allowed = set(field.choice_options())
    if not field.allow_custom:
        unknown = [value for value in values if value not in allowed]
        if unknown:
            return None, _message(field, f"Unsupported option(s) for {field.label}: {', '.join(unknown)}")
    elif NOT_SURE_OPTION in values and not field.include_not_sure:
        return None, _message(field, f"'{NOT_SURE_OPTION}' is not allowed for {field.label}")

    if not values:
        return None, None
    return values, None


def _validate_address_list(field: FormField, raw: object) -> tuple[list[str] | None, str | None]:
    values = normalize_string_list(raw)
    if field.required and not values:
        return None, _message(field, f"{field.label} is required")
    if field.min_items is not None and len(values) < field.min_items:
        return None, _message(field, f"{field.label} needs at least {field.min_items} item(s)")

    checker = is_valid_email if field.type == "emails" else is_valid_url
    if any(not checker(value) for value in values):
        fallback = "Please enter valid email addresses" if field.type == "emails" else "Please enter valid URLs"
        return None, _message(field, fallback)

    if not values:
        return None, None
    return values, None


def _apply_defaults(form: FormDefinition, data: dict[str, Any]) -> dict[str, Any]:
    merged = dict(data)
    for field in form.value_fields():
        if field.default is not None and merged.get(field.name) in (None, ""):
            merged[field.name] = field.default
    return merged


def _validate_field(field: FormField, raw: object) -> tuple[Any, str | None]:
    if field.type in {"text", "email", "textarea", "select"}:
        return _validate_text(field, raw)
    if field.type == "number":
        return _validate_number(field, raw)
    if field.type == "checkbox":
        return _validate_checkbox(field, raw)
    if field.type == "multiselect":
        return _validate_multiselect(field, raw)
    return _validate_address_list(field, raw)


def validate_submission(form: FormDefinition, data: dict[str, Any]) -> dict[str, Any]:
    """Return the cleaned responses for ``form`` or raise ``FormValidationError``.

    Every failing field is reported, in form order. Hidden and disclosure
    fields never reach the cleaned payload, and optional fields left empty
    are omitted rather than stored as blanks.
    """
    if not isinstance(data, dict):
        raise FormValidationError(form.id, [{"field": "__root__", "message": "Form data must be an object"}])

    source = _apply_defaults(form, data)
    results: dict[str, tuple[Any, str | None]] = {}
    for field in form.value_fields():
        results[field.name] = _validate_field(field, source.get(field.name))

    # Visibility follows the cleaned value of the controlling field.
    visible_source = {name: value for name, (value, _) in results.items()}
    cleaned: dict[str, Any] = {}
    errors: list[dict[str, str]] = []
    for field in form.value_fields():
        if field.visible_when is not None and not field.visible_when.matches(visible_source):
            continue
        value, error = results[field.name]
        if error is not None:
            errors.append({"field": field.name, "message": error})
            continue
        if value is not None:
            cleaned[field.name] = value

    if errors:
        raise FormValidationError(form.id, errors)
    return cleaned
