from __future__ import annotations

import logging
from typing import Any, Callable

from genie.assistant import BedrockFormAssistant
from genie.auth import AuthenticatedUser
from genie.config import settings
from genie.db import create_submission, record_notification, utc_now_iso
from genie.forms.models import FormDefinition
from genie.notifications import NotificationError, NotificationNotConfiguredError
from genie.notifications.email import (
    MarketingRequestEmailData,
    ResendEmailClient,
    build_marketing_email_payload,
)
from genie.notifications.teams import TeamsWebhookClient, build_submission_card
from genie.observability import sanitize_for_logging
from genie.validation import validate_submission

logger = logging.getLogger("genie.submissions")

AssistantGetter = Callable[[], BedrockFormAssistant]
EmailClientGetter = Callable[[], ResendEmailClient]
WebhookClientGetter = Callable[[], TeamsWebhookClient]

UNKNOWN_SUBMITTER = "Unknown user"


class SubmissionDeliveryError(NotificationError):
    """Raised when a critical notification fails after the submission was stored."""

    def __init__(self, submission_id: str, message: str, *, not_configured: bool = False) -> None:
        self.submission_id = submission_id
        self.not_configured = not_configured
        super().__init__(message)


def _send_marketing_email(
    *,
    submission_id: str,
    responses: dict[str, Any],
    submitted_by: str,
    submitted_at: str,
    get_assistant: AssistantGetter,
    get_email_client: EmailClientGetter,
) -> dict[str, object]:
    email_data = MarketingRequestEmailData(
        **responses,
        submittedBy=submitted_by,
        submittedAt=submitted_at,
    )
    ai_summary = get_assistant().summarize_form(email_data.model_dump())
    payload = build_marketing_email_payload(email_data, settings=settings, ai_summary=ai_summary)
    result = get_email_client().send(payload)
    record_notification(
        submission_id=submission_id,
        channel="email",
        status="sent",
        detail={"subject": payload["subject"], "ai_summary": ai_summary is not None, "provider_id": result.get("id")},
    )
    return {"channel": "email", "status": "sent", "ai_summary": ai_summary is not None}


def _post_submission_card(
    *,
    submission_id: str,
    form: FormDefinition,
    responses: dict[str, Any],
    get_webhook_client: WebhookClientGetter,
) -> dict[str, object]:
    client = get_webhook_client()
    if not client.is_configured():
        return {"channel": "teams", "status": "skipped"}

    try:
        client.post(build_submission_card(form.id, responses, form_title=form.title))
    except NotificationError as exc:
        logger.warning(
            "teams_webhook_failed",
            extra={"event": "teams_webhook_failed", "submission_id": submission_id, "error": str(exc)},
        )
        record_notification(submission_id=submission_id, channel="teams", status="failed", detail={"error": str(exc)})
        return {"channel": "teams", "status": "failed"}

    record_notification(submission_id=submission_id, channel="teams", status="sent")
    return {"channel": "teams", "status": "sent"}


def process_submission(
    form: FormDefinition,
    form_data: dict[str, Any],
    user: AuthenticatedUser | None,
    *,
    get_assistant: AssistantGetter,
    get_email_client: EmailClientGetter,
    get_webhook_client: WebhookClientGetter,
) -> dict[str, object]:
    """Validate, store and announce one form submission.

    The email is the critical notification: when it fails the stored
    submission is kept, the channel card is still attempted, and a
    ``SubmissionDeliveryError`` carrying the submission id is raised.
    """
    responses = validate_submission(form, form_data)
    submitted_at = utc_now_iso()
    submission = create_submission(
        form_id=form.id,
        form_title=form.title,
        responses=responses,
        user_id=user.id if user else None,
        user_email=user.email if user else None,
        submitted_at=submitted_at,
    )
    submission_id = str(submission["id"])
    logger.info(
        "submission_stored",
        extra={
            "event": "submission_stored",
            "submission_id": submission_id,
            "form_id": form.id,
            "responses": sanitize_for_logging(responses, max_string_length=80),
        },
    )

    notifications: list[dict[str, object]] = []
    email_failure: NotificationError | None = None
    if form.notify_email:
        try:
            notifications.append(
                _send_marketing_email(
                    submission_id=submission_id,
                    responses=responses,
                    submitted_by=(user.email if user and user.email else UNKNOWN_SUBMITTER),
                    submitted_at=submitted_at,
                    get_assistant=get_assistant,
                    get_email_client=get_email_client,
                )
            )
        except NotificationError as exc:
            email_failure = exc
            logger.error(
                "submission_email_failed",
                extra={"event": "submission_email_failed", "submission_id": submission_id, "error": str(exc)},
            )
            record_notification(submission_id=submission_id, channel="email", status="failed", detail={"error": str(exc)})
            notifications.append({"channel": "email", "status": "failed"})

    notifications.append(
        _post_submission_card(
            submission_id=submission_id,
            form=form,
            responses=responses,
            get_webhook_client=get_webhook_client,
        )
    )

    if email_failure is not None:
        raise SubmissionDeliveryError(
            submission_id,
            "Failed to send email notification. Please try again or contact admin.",
            not_configured=isinstance(email_failure, NotificationNotConfiguredError),
        ) from email_failure

    return {
        "success": True,
        "submission_id": submission_id,
        "submitted_at": submitted_at,
        "message": "Form submitted successfully",
        "responses": responses,
        "notifications": notifications,
    }
