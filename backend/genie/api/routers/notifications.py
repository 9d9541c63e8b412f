from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from genie.api.contracts import TeamsNotificationRequest
from genie.api.services.submissions import AssistantGetter, EmailClientGetter, WebhookClientGetter
from genie.config import settings
from genie.notifications import NotificationError, NotificationNotConfiguredError
from genie.notifications.email import MarketingRequestEmailData, build_marketing_email_payload
from genie.notifications.teams import build_message_card

logger = logging.getLogger("genie.api")


def notification_http_error(exc: NotificationError) -> HTTPException:
    if isinstance(exc, NotificationNotConfiguredError):
        return HTTPException(status_code=503, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))


def build_notifications_router(
    *,
    get_assistant: AssistantGetter,
    get_email_client: EmailClientGetter,
    get_webhook_client: WebhookClientGetter,
) -> APIRouter:
    router = APIRouter()

    @router.post("/notifications/teams")
    def teams_notification_endpoint(payload: TeamsNotificationRequest) -> dict[str, object]:
        card = build_message_card(payload.title, payload.message, payload.data, payload.color)
        try:
            get_webhook_client().post(card)
        except NotificationError as exc:
            raise notification_http_error(exc) from exc
        return {"success": True, "message": "Teams notification sent successfully"}

    @router.post("/notifications/marketing-email")
    def marketing_email_endpoint(payload: MarketingRequestEmailData) -> dict[str, object]:
        ai_summary = get_assistant().summarize_form(payload.model_dump())
        if ai_summary is None:
            logger.info("marketing_email_without_summary", extra={"event": "marketing_email_without_summary"})
        email = build_marketing_email_payload(payload, settings=settings, ai_summary=ai_summary)
        try:
            result = get_email_client().send(email)
        except NotificationError as exc:
            raise notification_http_error(exc) from exc
        return {"success": True, "data": result}

    return router
