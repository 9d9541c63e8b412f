import pytest

from genie.forms import get_form
from genie.validation import (
    FormValidationError,
    is_valid_email,
    is_valid_url,
    normalize_string_list,
    validate_submission,
)


def _errors(form_id: str, data: object) -> dict[str, str]:
    with pytest.raises(FormValidationError) as exc_info:
        validate_submission(get_form(form_id), data)
    return {item["field"]: item["message"] for item in exc_info.value.errors}


def test_contact_form_reports_every_failing_field() -> None:
    errors = _errors("contact", {"name": "A", "email": "not-an-email", "message": "short"})
    assert errors == {
        "name": "Name must be at least 2 characters",
        "email": "Invalid email address",
        "message": "Message must be at least 10 characters",
    }


def test_contact_form_trims_and_accepts_valid_data() -> None:
    cleaned = validate_submission(
        get_form("contact"),
        {"name": "  Ada Lovelace ", "email": "ada@example.com", "message": "Hello there, team!"},
    )
    assert cleaned == {"name": "Ada Lovelace", "email": "ada@example.com", "message": "Hello there, team!"}


def test_select_rejects_value_outside_options() -> None:
    errors = _errors("feedback", {"rating": "11 - Amazing", "category": "Product", "feedback": "Great work"})
    assert errors == {"rating": "Please select a rating"}


def test_survey_number_is_coerced_and_optional_text_omitted() -> None:
    cleaned = validate_submission(
        get_form("survey"),
        {"age": "42", "occupation": "Engineer", "experience": "Expert", "suggestions": "   "},
    )
    assert cleaned == {"age": 42, "occupation": "Engineer", "experience": "Expert"}


def test_survey_number_rejects_text() -> None:
    errors = _errors("survey", {"age": "forty", "occupation": "Engineer", "experience": "Expert"})
    assert list(errors) == ["age"]


def test_marketing_request_applies_activity_default_and_hides_campaign_fields(
    marketing_form_data: dict[str, object],
) -> None:
    data = dict(marketing_form_data)
    data.pop("activityType")
    data["budget"] = "$10,000"
    data["measurement"] = ["Lead Generation", "Lead Generation", " Website Traffic "]

    cleaned = validate_submission(get_form("marketing-request"), data)
    assert cleaned["activityType"] == "once-off"
    assert "budget" not in cleaned
    assert cleaned["measurement"] == ["Lead Generation", "Website Traffic"]
    assert "submission-info" not in cleaned


def test_marketing_request_keeps_campaign_fields_for_broader_campaign(
    marketing_form_data: dict[str, object],
) -> None:
    data = dict(marketing_form_data)
    data.update(
        {
            "activityType": "broader-campaign",
            "preferredChannels": ["LinkedIn Sponsored Posts", "SEO"],
            "timeline": "Q3",
            "budget": "$10,000",
        }
    )
    cleaned = validate_submission(get_form("marketing-request"), data)
    assert cleaned["preferredChannels"] == ["LinkedIn Sponsored Posts", "SEO"]
    assert cleaned["timeline"] == "Q3"
    assert cleaned["budget"] == "$10,000"


def test_marketing_request_accepts_custom_and_not_sure_measurements(
    marketing_form_data: dict[str, object],
) -> None:
    data = dict(marketing_form_data)
    data["measurement"] = ["Cost Per Lead", "I'm not sure"]
    cleaned = validate_submission(get_form("marketing-request"), data)
    assert cleaned["measurement"] == ["Cost Per Lead", "I'm not sure"]


def test_marketing_request_validates_address_lists(marketing_form_data: dict[str, object]) -> None:
    data = dict(marketing_form_data)
    data["ccEmails"] = ["manager@example.com", "nope"]
    data["exampleLinks"] = ["https://example.com/campaign", "example.com"]
    data["measurement"] = []
    errors = _errors("marketing-request", data)
    assert errors == {
        "measurement": "Please select at least one measurement method",
        "ccEmails": "Please enter valid email addresses",
        "exampleLinks": "Please enter valid URLs",
    }


def test_non_object_payload_is_rejected() -> None:
    errors = _errors("contact", ["not", "a", "dict"])
    assert errors == {"__root__": "Form data must be an object"}


def test_helpers() -> None:
    assert is_valid_email("a@b.co")
    assert not is_valid_email("a@b")
    assert is_valid_url("https://example.com/x")
    assert not is_valid_url("example.com")
    assert normalize_string_list([" a ", "", None, "a", "b"]) == ["a", "b"]
    assert normalize_string_list("single") == ["single"]
    assert normalize_string_list(42) == []


@pytest.mark.parametrize("age", ["NaN", "inf", "-Infinity", float("nan"), float("inf")])
def test_survey_number_rejects_non_finite_values(age: object) -> None:
    errors = _errors("survey", {"age": age, "occupation": "Engineer", "experience": "Expert"})
    assert errors == {"age": "Please enter your age"}


def test_campaign_visibility_uses_cleaned_activity_type(marketing_form_data: dict[str, object]) -> None:
    data = dict(marketing_form_data)
    data.update({"activityType": " broader-campaign ", "timeline": "Q3 launch", "budget": "$10k"})
    cleaned = validate_submission(get_form("marketing-request"), data)
    assert cleaned["activityType"] == "broader-campaign"
    assert cleaned["timeline"] == "Q3 launch"
    assert cleaned["budget"] == "$10k"


def test_hidden_fields_do_not_report_errors(marketing_form_data: dict[str, object]) -> None:
    data = dict(marketing_form_data)
    data["preferredChannels"] = "not-a-list-but-hidden"
    data["timeline"] = {"nested": "object"}
    cleaned = validate_submission(get_form("marketing-request"), data)
    assert "timeline" not in cleaned
    assert "preferredChannels" not in cleaned
