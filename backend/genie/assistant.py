from __future__ import annotations

import json
import logging
import re
import time
from typing import Any

from genie.config import Settings

logger = logging.getLogger("genie.assistant")

NO_RESPONSE_TEXT = "I apologize, but I could not generate a response."

FALLBACK_MEASUREMENT_OPTIONS = ["Conversion Rate", "Click-Through Rate", "Cost Per Acquisition"]
FALLBACK_MEASUREMENT_CUSTOM = ["Return on Investment", "Customer Lifetime Value"]
DEFAULT_MEASUREMENT_REASONING = "AI-generated measurement suggestions based on context analysis."

DEFAULT_PLAN_TIMELINE = "3-6 months"
DEFAULT_PLAN_PRIORITY = "medium"
FALLBACK_ACTION_PLAN: dict[str, object] = {
    "actionPlan": [
        "Analyze current marketing position",
        "Develop target audience strategy",
        "Create content calendar",
    ],
    "timeline": DEFAULT_PLAN_TIMELINE,
    "recommendations": ["Focus on digital channels", "Track key metrics"],
    "priority": DEFAULT_PLAN_PRIORITY,
    "budget_considerations": ["Consider cost per acquisition", "Allocate budget for testing"],
}

DEFAULT_SUMMARY_TEXT = "Marketing request analyzed."
DEFAULT_SUMMARY_CONFIDENCE = 75


class AssistantRuntimeError(RuntimeError):
    """Raised when the model invocation fails or returns unusable output."""


class AssistantNotConfiguredError(AssistantRuntimeError):
    """Raised when no model is configured for AI assistance."""


class AssistantEmptyResponseError(AssistantRuntimeError):
    """Raised when the model reply carries no text."""


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if isinstance(item, (str, int, float)) and str(item).strip()]


class BedrockFormAssistant:
    """Form-filling assistance backed by a Bedrock Converse model."""

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        self._settings = settings
        self._client = client

    def suggest_objective_measurements(
        self,
        context: str,
        objectives: str,
        measurements: list[str],
    ) -> dict[str, object]:
        system_prompt = (
            "You are a marketing analytics expert helping to identify relevant KPIs and measurements "
            "for marketing campaigns.\n\n"
            "Based on the provided context, objectives, and existing measurements, suggest appropriate "
            "metrics that would help track campaign success.\n\n"
            "Respond with a JSON object containing:\n"
            "- suggestedOptions: array of 3-5 relevant KPI names\n"
            "- customSuggestions: array of 2-3 specialized metrics for this specific context\n"
            "- reasoning: brief explanation of why these metrics are recommended\n\n"
            "Focus on actionable, measurable metrics that align with the stated objectives."
        )
        user_prompt = (
            f"Context: {context}\n"
            f"Objectives: {objectives}\n"
            f"Current measurements being considered: {', '.join(measurements)}\n\n"
            "Please suggest relevant KPIs and measurements."
        )
        text = self._invoke_text(system_prompt, user_prompt, self._settings.ai_max_tokens_measurements)
        try:
            parsed = self._parse_json_object(text)
        except AssistantRuntimeError:
            logger.warning(
                "assistant_measurements_unparsed",
                extra={"event": "assistant_measurements_unparsed", "response_chars": len(text)},
            )
            return {
                "type": "objective-measurements-suggestion",
                "suggestedOptions": list(FALLBACK_MEASUREMENT_OPTIONS),
                "customSuggestions": list(FALLBACK_MEASUREMENT_CUSTOM),
                "reasoning": text[:200] + "...",
            }
        return {
            "type": "objective-measurements-suggestion",
            "suggestedOptions": _string_list(parsed.get("suggestedOptions")),
            "customSuggestions": _string_list(parsed.get("customSuggestions")),
            "reasoning": str(parsed.get("reasoning") or DEFAULT_MEASUREMENT_REASONING),
        }

    def marketing_action_plan(self, form_content: dict[str, object]) -> dict[str, object]:
        system_prompt = (
            "You are a marketing strategist creating actionable marketing plans.\n\n"
            "Based on the form content provided, create a comprehensive marketing action plan.\n\n"
            "Respond with a JSON object containing:\n"
            "- actionPlan: array of 4-6 specific actionable steps\n"
            '- timeline: suggested timeline for implementation (e.g., "3-6 months")\n'
            "- recommendations: array of 3-4 strategic recommendations\n"
            '- priority: "high", "medium", or "low" based on urgency\n'
            "- budget_considerations: array of 2-3 budget-related considerations\n\n"
            "Make recommendations specific and actionable based on the provided information."
        )
        user_prompt = (
            "Create a marketing action plan based on this form submission: "
            f"{json.dumps(form_content, indent=2, ensure_ascii=False)}"
        )
        text = self._invoke_text(system_prompt, user_prompt, self._settings.ai_max_tokens_action_plan)
        try:
            parsed = self._parse_json_object(text)
        except AssistantRuntimeError:
            logger.warning(
                "assistant_action_plan_unparsed",
                extra={"event": "assistant_action_plan_unparsed", "response_chars": len(text)},
            )
            return {"type": "marketing-action-plan", **FALLBACK_ACTION_PLAN}

        priority = str(parsed.get("priority") or DEFAULT_PLAN_PRIORITY).strip().lower()
        if priority not in {"high", "medium", "low"}:
            priority = DEFAULT_PLAN_PRIORITY
        return {
            "type": "marketing-action-plan",
            "actionPlan": _string_list(parsed.get("actionPlan")),
            "timeline": str(parsed.get("timeline") or DEFAULT_PLAN_TIMELINE),
            "recommendations": _string_list(parsed.get("recommendations")),
            "priority": priority,
            "budget_considerations": _string_list(parsed.get("budget_considerations")),
        }

    def summarize_form(self, form_content: dict[str, object]) -> dict[str, object] | None:
        """Summarise a submission for the notification email.

        Returns ``None`` on any failure: the email goes out without the
        analysis block rather than failing.
        """
        if not self.is_configured():
            logger.warning("assistant_summary_skipped", extra={"event": "assistant_summary_skipped"})
            return None

        system_prompt = (
            "You are an expert at analyzing marketing request forms and extracting key insights.\n\n"
            "Analyze the provided form content and create a comprehensive summary.\n\n"
            "Respond with a JSON object containing:\n"
            "- summary: concise overview of the marketing request (2-3 sentences)\n"
            "- confidence: number between 0-100 indicating confidence in the analysis\n\n"
            "Focus on extracting meaningful information that would be useful for decision-making."
        )
        user_prompt = (
            "Marketing request form to analyze: "
            f"{json.dumps(form_content, indent=2, ensure_ascii=False)}"
        )
        try:
            text = self._invoke_text(system_prompt, user_prompt, self._settings.ai_max_tokens_summary)
            parsed = self._parse_json_object(text)
        except AssistantRuntimeError as exc:
            logger.warning(
                "assistant_summary_failed",
                extra={"event": "assistant_summary_failed", "error": str(exc)},
            )
            return None

        try:
            confidence = int(round(float(parsed.get("confidence") or DEFAULT_SUMMARY_CONFIDENCE)))
        except (TypeError, ValueError):
            confidence = DEFAULT_SUMMARY_CONFIDENCE
        return {
            "type": "form-summarisation",
            "summary": str(parsed.get("summary") or DEFAULT_SUMMARY_TEXT),
            "confidence": max(0, min(100, confidence)),
        }

    def generic_assistance(self, message: str, form_context: dict[str, object] | None = None) -> str:
        context_line = ""
        if form_context:
            context_line = (
                f"The user is working on form \"{form_context.get('formId')}\" and currently has these "
                f"fields filled: {json.dumps(form_context.get('currentFields') or {}, indent=2, ensure_ascii=False)}\n\n"
            )
        system_prompt = (
            "You are an AI assistant helping users fill out forms.\n"
            f"{context_line}"
            "Provide helpful, concise assistance. If the user asks about a specific field, provide relevant "
            "examples or guidance.\nKeep responses brief and actionable."
        )
        try:
            return self._invoke_text(system_prompt, message, self._settings.ai_max_tokens_generic)
        except AssistantEmptyResponseError:
            return NO_RESPONSE_TEXT

    def is_configured(self) -> bool:
        return bool(self._client is not None or str(self._settings.bedrock_model_id or "").strip())

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = self._create_bedrock_client()
        return self._client

    def _create_bedrock_client(self) -> Any:
        try:
            import boto3  # type: ignore
        except ImportError as exc:
            raise AssistantRuntimeError("boto3 is required for the Bedrock assistant runtime.") from exc

        return boto3.client("bedrock-runtime", region_name=self._settings.aws_region)

    def _invoke_text(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        model_id = str(self._settings.bedrock_model_id or "").strip()
        if not model_id:
            raise AssistantNotConfiguredError("Bedrock model ID is not configured.")

        client = self._get_client()
        started = time.perf_counter()
        try:
            response = client.converse(
                modelId=model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig={
                    "temperature": self._settings.agent_temperature,
                    "maxTokens": max_tokens,
                },
            )
        except Exception as exc:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.warning(
                "assistant_invoke_failed",
                extra={
                    "event": "assistant_invoke_failed",
                    "model_id": model_id,
                    "duration_ms": duration_ms,
                    "error": str(exc),
                },
            )
            raise AssistantRuntimeError(f"Bedrock invocation failed for model '{model_id}': {exc}") from exc

        text = self._extract_text(response)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "assistant_invoke_completed",
            extra={
                "event": "assistant_invoke_completed",
                "model_id": model_id,
                "duration_ms": duration_ms,
                "system_prompt_chars": len(system_prompt),
                "user_prompt_chars": len(user_prompt),
                "response_chars": len(text),
            },
        )
        return text

    @staticmethod
    def _extract_text(response: Any) -> str:
        outputs = response.get("output", {}).get("message", {}).get("content", [])
        parts: list[str] = []
        for item in outputs:
            text = item.get("text")
            if isinstance(text, str) and text.strip():
                parts.append(text)
        if not parts:
            raise AssistantEmptyResponseError("Model response did not include textual output.")
        return "\n".join(parts).strip()

    @staticmethod
    def _parse_json_object(raw: str) -> dict[str, Any]:
        candidate = raw.strip()
        parsed: Any = None
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            fenced = re.search(r"```(?:json)?\s*(.*?)\s*```", candidate, flags=re.IGNORECASE | re.DOTALL)
            if fenced:
                try:
                    parsed = json.loads(fenced.group(1))
                except json.JSONDecodeError:
                    parsed = None
            if parsed is None:
                start = candidate.find("{")
                end = candidate.rfind("}")
                if start == -1 or end <= start:
                    raise AssistantRuntimeError("Model response was not valid JSON.")
                try:
                    parsed = json.loads(candidate[start : end + 1])
                except json.JSONDecodeError as exc:
                    raise AssistantRuntimeError("Model response contained malformed JSON content.") from exc

        if not isinstance(parsed, dict):
            raise AssistantRuntimeError("Model response must be a JSON object.")
        return parsed
