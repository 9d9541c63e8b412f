import pytest
from pydantic import ValidationError

from genie.config import settings
from genie.forms import NOT_SURE_OPTION, FormDefinition, FormField, FormNotFoundError, get_form, list_forms, serialize_form


def test_all_builtin_forms_listed_when_wildcard_enabled() -> None:
    ids = [form.id for form in list_forms()]
    assert ids == ["contact", "feedback", "survey", "newsletter", "marketing-request"]


def test_enabled_forms_setting_limits_registry() -> None:
    settings.enabled_forms = "marketing-request"
    assert [form.id for form in list_forms()] == ["marketing-request"]
    with pytest.raises(FormNotFoundError, match="Form 'contact' not found"):
        get_form("contact")


def test_unknown_form_is_not_found() -> None:
    with pytest.raises(FormNotFoundError):
        get_form("does-not-exist")


def test_serialize_marketing_form_appends_not_sure_option() -> None:
    descriptor = serialize_form(get_form("marketing-request"))
    assert descriptor["notify_email"] is True
    fields = {field["name"]: field for field in descriptor["fields"]}

    measurement = fields["measurement"]
    assert measurement["options"][-1] == NOT_SURE_OPTION
    assert measurement["ai_assistance"] is True
    assert measurement["allow_custom"] is True

    assert fields["activityType"]["default"] == "once-off"
    assert fields["budget"]["visible_when"] == {"field": "activityType", "equals": "broader-campaign"}
    assert fields["submission-info"]["variant"] == "info"
    assert fields["submission-info"]["required"] is False
    assert "help" not in fields["timeline"]


def test_serialize_without_fields_reports_count() -> None:
    descriptor = serialize_form(get_form("contact"), include_fields=False)
    assert descriptor == {
        "id": "contact",
        "title": "Contact Form",
        "description": "Get in touch with us",
        "field_count": 3,
    }


def test_select_field_without_options_is_rejected() -> None:
    with pytest.raises(ValidationError):
        FormField(name="rating", label="Rating", type="select")


def test_duplicate_field_names_are_rejected() -> None:
    with pytest.raises(ValidationError):
        FormDefinition(
            id="dupes",
            title="Dupes",
            fields=[
                FormField(name="a", label="A", type="text"),
                FormField(name="a", label="A again", type="text"),
            ],
        )


def test_visibility_on_unknown_field_is_rejected() -> None:
    with pytest.raises(ValidationError):
        FormDefinition(
            id="broken",
            title="Broken",
            fields=[
                FormField(
                    name="budget",
                    label="Budget",
                    type="text",
                    visible_when={"field": "missing", "equals": "x"},
                )
            ],
        )
