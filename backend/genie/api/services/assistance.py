from __future__ import annotations

import logging
import random
from typing import Callable

from fastapi import HTTPException

from genie.api.contracts import (
    FormSummarisationRequest,
    GenericRequest,
    MarketingActionPlanRequest,
    ObjectiveMeasurementsRequest,
)
from genie.assistant import AssistantNotConfiguredError, AssistantRuntimeError, BedrockFormAssistant
from genie.suggestions import analyze_measurement_context, describe_keyword_reasoning

logger = logging.getLogger("genie.api")

AssistantGetter = Callable[[], BedrockFormAssistant]

SUGGESTION_MODES = {"keyword", "llm"}


def normalize_suggestion_mode(value: str) -> str:
    normalized = (value or "").strip().lower()
    if normalized not in SUGGESTION_MODES:
        raise HTTPException(
            status_code=503,
            detail=f"Unsupported MEASUREMENT_SUGGESTION_MODE '{value}'. Use 'keyword' or 'llm'.",
        )
    return normalized


def assistant_http_error(exc: AssistantRuntimeError) -> HTTPException:
    if isinstance(exc, AssistantNotConfiguredError):
        return HTTPException(status_code=503, detail=str(exc))
    return HTTPException(status_code=502, detail={"message": "AI assistance failed.", "error": str(exc)})


def keyword_measurement_response(
    context: str,
    objectives: str,
    *,
    rng: random.Random | None = None,
) -> dict[str, object]:
    suggestions = analyze_measurement_context(context, objectives, rng=rng)
    return {
        "type": "objective-measurements-suggestion",
        "suggestedOptions": suggestions.suggested_options,
        "customSuggestions": suggestions.custom_suggestions,
        "reasoning": describe_keyword_reasoning(suggestions),
    }


def dispatch_assistance(
    request: ObjectiveMeasurementsRequest | FormSummarisationRequest | MarketingActionPlanRequest | GenericRequest,
    *,
    get_assistant: AssistantGetter,
    suggestion_mode: str,
) -> dict[str, object]:
    """Route an assistance request to the keyword scorer or the model."""
    logger.info(
        "assistance_requested",
        extra={"event": "assistance_requested", "assistance_type": request.type},
    )

    if isinstance(request, ObjectiveMeasurementsRequest):
        if normalize_suggestion_mode(suggestion_mode) == "keyword":
            return keyword_measurement_response(request.context, request.objectives)
        try:
            return get_assistant().suggest_objective_measurements(
                request.context,
                request.objectives,
                request.measurements,
            )
        except AssistantRuntimeError as exc:
            raise assistant_http_error(exc) from exc

    try:
        if isinstance(request, MarketingActionPlanRequest):
            return get_assistant().marketing_action_plan(request.formContent)

        if isinstance(request, FormSummarisationRequest):
            summary = get_assistant().summarize_form(request.formContent)
            if summary is None:
                raise AssistantRuntimeError("AI summary could not be generated.")
            return summary

        form_context = request.formContext.model_dump() if request.formContext is not None else None
        message = get_assistant().generic_assistance(request.message, form_context)
        return {"type": "generic", "message": message}
    except AssistantRuntimeError as exc:
        raise assistant_http_error(exc) from exc
