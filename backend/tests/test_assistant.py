from __future__ import annotations

import json

import pytest

from genie.assistant import (
    FALLBACK_ACTION_PLAN,
    NO_RESPONSE_TEXT,
    AssistantEmptyResponseError,
    AssistantNotConfiguredError,
    AssistantRuntimeError,
    BedrockFormAssistant,
)
from genie.config import Settings


class FakeBedrockClient:
    def __init__(self, *texts: str, error: Exception | None = None) -> None:
        self._texts = list(texts)
        self._error = error
        self.calls: list[dict[str, object]] = []

    def converse(self, **kwargs):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        text = self._texts.pop(0) if self._texts else ""
        content = [{"text": text}] if text else []
        return {"output": {"message": {"content": content}}}


def _assistant(*texts: str, error: Exception | None = None, model_id: str = "test-model") -> tuple[BedrockFormAssistant, FakeBedrockClient]:
    client = FakeBedrockClient(*texts, error=error)
    settings = Settings(bedrock_model_id=model_id, agent_temperature=0.1)
    return BedrockFormAssistant(settings=settings, client=client), client


def test_objective_measurements_parses_json_response() -> None:
    assistant, client = _assistant(
        json.dumps(
            {
                "suggestedOptions": ["Lead Generation", "Conversion Rate"],
                "customSuggestions": ["Cost Per Lead"],
                "reasoning": "Leads matter most.",
            }
        )
    )
    result = assistant.suggest_objective_measurements("B2B launch", "More leads", ["Brand Awareness"])
    assert result == {
        "type": "objective-measurements-suggestion",
        "suggestedOptions": ["Lead Generation", "Conversion Rate"],
        "customSuggestions": ["Cost Per Lead"],
        "reasoning": "Leads matter most.",
    }

    call = client.calls[0]
    assert call["modelId"] == "test-model"
    assert call["inferenceConfig"] == {"temperature": 0.1, "maxTokens": 400}
    assert "Brand Awareness" in call["messages"][0]["content"][0]["text"]


def test_objective_measurements_falls_back_when_response_is_not_json() -> None:
    text = "Track conversions. " * 20
    assistant, _ = _assistant(text)
    result = assistant.suggest_objective_measurements("ctx", "obj", [])
    assert result["suggestedOptions"] == ["Conversion Rate", "Click-Through Rate", "Cost Per Acquisition"]
    assert result["customSuggestions"] == ["Return on Investment", "Customer Lifetime Value"]
    assert result["reasoning"] == text.strip()[:200] + "..."


def test_action_plan_accepts_fenced_json_and_normalizes_priority() -> None:
    body = {
        "actionPlan": ["Audit channels", "Build landing page"],
        "timeline": "8 weeks",
        "recommendations": ["Use LinkedIn"],
        "priority": "URGENT",
        "budget_considerations": ["Reserve testing budget"],
    }
    assistant, _ = _assistant(f"Here is the plan:\n```json\n{json.dumps(body)}\n```")
    result = assistant.marketing_action_plan({"background": "B2B launch"})
    assert result["type"] == "marketing-action-plan"
    assert result["actionPlan"] == ["Audit channels", "Build landing page"]
    assert result["timeline"] == "8 weeks"
    assert result["priority"] == "medium"


def test_action_plan_falls_back_on_unparseable_output() -> None:
    assistant, _ = _assistant("no plan today")
    result = assistant.marketing_action_plan({"background": "B2B launch"})
    assert result == {"type": "marketing-action-plan", **FALLBACK_ACTION_PLAN}


def test_summary_clamps_confidence() -> None:
    assistant, _ = _assistant('{"summary": "Lead gen push for SaaS launch.", "confidence": 140}')
    summary = assistant.summarize_form({"background": "SaaS"})
    assert summary == {
        "type": "form-summarisation",
        "summary": "Lead gen push for SaaS launch.",
        "confidence": 100,
    }


def test_summary_defaults_when_fields_missing() -> None:
    assistant, _ = _assistant('prefix {"confidence": "not-a-number"} suffix')
    summary = assistant.summarize_form({"background": "SaaS"})
    assert summary == {"type": "form-summarisation", "summary": "Marketing request analyzed.", "confidence": 75}


def test_summary_returns_none_when_model_fails() -> None:
    assistant, _ = _assistant(error=RuntimeError("throttled"))
    assert assistant.summarize_form({"background": "SaaS"}) is None


def test_summary_returns_none_without_model() -> None:
    settings = Settings(bedrock_model_id="")
    assistant = BedrockFormAssistant(settings=settings)
    assert assistant.is_configured() is False
    assert assistant.summarize_form({"background": "SaaS"}) is None


def test_generic_assistance_includes_form_context() -> None:
    assistant, client = _assistant("Try a SMART objective.")
    reply = assistant.generic_assistance(
        "How do I write objectives?",
        {"formId": "marketing-request", "currentFields": {"background": "SaaS"}},
    )
    assert reply == "Try a SMART objective."
    system_text = client.calls[0]["system"][0]["text"]
    assert 'form "marketing-request"' in system_text
    assert client.calls[0]["inferenceConfig"]["maxTokens"] == 200


def test_generic_assistance_without_text_returns_apology() -> None:
    assistant, _ = _assistant("")
    assert assistant.generic_assistance("hello") == NO_RESPONSE_TEXT


def test_invocation_errors_are_wrapped() -> None:
    assistant, _ = _assistant(error=RuntimeError("boom"))
    with pytest.raises(AssistantRuntimeError, match="Bedrock invocation failed"):
        assistant.generic_assistance("hello")


def test_missing_model_id_is_not_configured_error() -> None:
    assistant, _ = _assistant("unused", model_id="  ")
    with pytest.raises(AssistantNotConfiguredError):
        assistant.marketing_action_plan({})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ('{"a": 1}', {"a": 1}),
        ('```json\n{"a": 2}\n```', {"a": 2}),
        ('Sure! {"a": 3} Hope this helps.', {"a": 3}),
    ],
)
def test_parse_json_object_variants(raw: str, expected: dict[str, int]) -> None:
    assert BedrockFormAssistant._parse_json_object(raw) == expected


def test_parse_json_object_rejects_arrays() -> None:
    with pytest.raises(AssistantRuntimeError):
        BedrockFormAssistant._parse_json_object("[1, 2, 3]")


def test_empty_reply_raises_dedicated_error_for_structured_calls() -> None:
    assistant, _ = _assistant("")
    with pytest.raises(AssistantEmptyResponseError, match="did not include textual output"):
        assistant.marketing_action_plan({"background": "B2B launch"})


def test_extract_text_joins_text_blocks_only() -> None:
    response = {"output": {"message": {"content": [{"text": "Hello "}, {"image": {}}, {"text": "there"}]}}}
    assert BedrockFormAssistant._extract_text(response) == "Hello \nthere"
    with pytest.raises(AssistantEmptyResponseError):
        BedrockFormAssistant._extract_text({"output": {"message": {"content": []}}})
