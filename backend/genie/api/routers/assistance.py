from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from genie.api.contracts import (
    AIAssistanceRequest,
    MarketingActionPlanRequest,
    MeasurementSuggestionRequest,
    ObjectiveMeasurementsRequest,
)
from genie.api.services.assistance import AssistantGetter, dispatch_assistance
from genie.config import settings
from genie.suggestions import analyze_measurement_context, describe_keyword_reasoning, merge_selection


def _parse_request(payload: dict[str, Any], model: type[BaseModel]) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


def _require_type(payload: dict[str, Any], expected: str, handler_name: str) -> None:
    if payload.get("type") != expected:
        raise HTTPException(status_code=400, detail=f"Invalid request type for {handler_name}")


def build_assistance_router(*, get_assistant: AssistantGetter) -> APIRouter:
    router = APIRouter()

    @router.post("/ai/assistance")
    def assistance_endpoint(payload: AIAssistanceRequest) -> dict[str, object]:
        return dispatch_assistance(
            payload,
            get_assistant=get_assistant,
            suggestion_mode=settings.measurement_suggestion_mode,
        )

    @router.post("/ai/objective-measurements")
    def objective_measurements_endpoint(payload: dict[str, Any] = Body(...)) -> dict[str, object]:
        _require_type(payload, "objective-measurements-suggestion", "objective-measurements function")
        request = _parse_request(payload, ObjectiveMeasurementsRequest)
        return dispatch_assistance(
            request,
            get_assistant=get_assistant,
            suggestion_mode=settings.measurement_suggestion_mode,
        )

    @router.post("/ai/marketing-action-plan")
    def marketing_action_plan_endpoint(payload: dict[str, Any] = Body(...)) -> dict[str, object]:
        _require_type(payload, "marketing-action-plan", "marketing action plan function")
        request = _parse_request(payload, MarketingActionPlanRequest)
        return dispatch_assistance(
            request,
            get_assistant=get_assistant,
            suggestion_mode=settings.measurement_suggestion_mode,
        )

    @router.post("/ai/measurement-suggestions")
    def measurement_suggestions_endpoint(payload: MeasurementSuggestionRequest) -> dict[str, object]:
        suggestions = analyze_measurement_context(payload.background, payload.objectives)
        return {
            "suggestedOptions": suggestions.suggested_options,
            "customSuggestions": suggestions.custom_suggestions,
            "reasoning": describe_keyword_reasoning(suggestions),
            "selection": merge_selection(payload.current, suggestions.suggested_options),
        }

    return router
