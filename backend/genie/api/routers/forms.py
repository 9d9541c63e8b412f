from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from genie.api.contracts import FormSubmissionRequest
from genie.api.services.submissions import (
    AssistantGetter,
    EmailClientGetter,
    SubmissionDeliveryError,
    WebhookClientGetter,
    process_submission,
)
from genie.auth import AuthenticatedUser, require_authenticated_user
from genie.db import SubmissionStoreError, get_submission, list_notifications, list_submissions
from genie.forms import FormDefinition, FormNotFoundError, get_form, list_forms, serialize_form
from genie.validation import FormValidationError, validate_submission


def require_form(form_id: str) -> FormDefinition:
    try:
        return get_form(form_id)
    except FormNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def validation_http_error(exc: FormValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": "Form data is invalid.", "form_id": exc.form_id, "errors": exc.errors},
    )


def build_forms_router(
    *,
    get_assistant: AssistantGetter,
    get_email_client: EmailClientGetter,
    get_webhook_client: WebhookClientGetter,
) -> APIRouter:
    router = APIRouter()

    @router.get("/forms")
    def list_forms_endpoint() -> dict[str, object]:
        return {"forms": [serialize_form(form, include_fields=False) for form in list_forms()]}

    @router.get("/forms/{form_id}")
    def get_form_endpoint(form_id: str) -> dict[str, object]:
        return serialize_form(require_form(form_id))

    @router.post("/forms/{form_id}/validate")
    def validate_form_endpoint(form_id: str, payload: FormSubmissionRequest) -> dict[str, object]:
        form = require_form(form_id)
        try:
            cleaned = validate_submission(form, payload.form_data)
        except FormValidationError as exc:
            return {"form_id": form.id, "valid": False, "errors": exc.errors}
        return {"form_id": form.id, "valid": True, "responses": cleaned, "errors": []}

    @router.post("/forms/{form_id}/submissions")
    def submit_form_endpoint(
        form_id: str,
        payload: FormSubmissionRequest,
        user: AuthenticatedUser | None = Depends(require_authenticated_user),
    ) -> dict[str, object]:
        form = require_form(form_id)
        try:
            return process_submission(
                form,
                payload.form_data,
                user,
                get_assistant=get_assistant,
                get_email_client=get_email_client,
                get_webhook_client=get_webhook_client,
            )
        except FormValidationError as exc:
            raise validation_http_error(exc) from exc
        except SubmissionStoreError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except SubmissionDeliveryError as exc:
            raise HTTPException(
                status_code=503 if exc.not_configured else 502,
                detail={"message": str(exc), "submission_id": exc.submission_id},
            ) from exc

    @router.get("/forms/{form_id}/submissions")
    def list_form_submissions(
        form_id: str,
        limit: int = Query(default=50, ge=1, le=200),
        user: AuthenticatedUser | None = Depends(require_authenticated_user),
    ) -> dict[str, object]:
        form = require_form(form_id)
        submissions = list_submissions(form_id=form.id, user_id=user.id if user else None, limit=limit)
        return {"form_id": form.id, "submissions": submissions}

    @router.get("/submissions/{submission_id}")
    def get_submission_endpoint(
        submission_id: str,
        user: AuthenticatedUser | None = Depends(require_authenticated_user),
    ) -> dict[str, object]:
        submission = get_submission(submission_id)
        if submission is None or (user is not None and submission["user_id"] != user.id):
            raise HTTPException(status_code=404, detail="Submission not found")
        return {"submission": submission, "notifications": list_notifications(submission_id)}

    return router
