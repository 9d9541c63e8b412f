from genie.forms.models import NOT_SURE_OPTION, FormDefinition, FormField, FormNotFoundError
from genie.forms.registry import get_form, list_forms, serialize_form

__all__ = [
    "NOT_SURE_OPTION",
    "FormDefinition",
    "FormField",
    "FormNotFoundError",
    "get_form",
    "list_forms",
    "serialize_form",
]
