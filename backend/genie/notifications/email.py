from __future__ import annotations

from datetime import datetime, timezone
import html
import logging
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field

from genie.config import Settings
from genie.forms.options import ACTIVITY_TYPE_CAMPAIGN, ACTIVITY_TYPE_ONCE_OFF
from genie.notifications import NotificationError, NotificationNotConfiguredError

logger = logging.getLogger("genie.notifications.email")

AI_SUBJECT_PREFIX = "🤖 "
DEMO_SUBJECT_PREFIX = "[DEMO] "


class MarketingRequestEmailData(BaseModel):
    background: str = Field(..., min_length=1)
    objectives: str = Field(..., min_length=1)
    measurement: list[str] = Field(default_factory=list)
    ccEmails: list[str] = Field(default_factory=list)
    contactEmail: str = Field(..., min_length=3)
    targeting: str = Field(..., min_length=1)
    examples: str | None = None
    exampleLinks: list[str] = Field(default_factory=list)
    actionSteps: str = Field(..., min_length=1)
    activityType: Literal["once-off", "broader-campaign"] = ACTIVITY_TYPE_ONCE_OFF
    preferredChannels: list[str] = Field(default_factory=list)
    timeline: str | None = None
    budget: str | None = None
    submittedBy: str = "Unknown user"
    submittedAt: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class EmailRecipients(BaseModel):
    to: list[str]
    bcc: list[str]
    subject_prefix: str = ""


def resolve_recipients(settings: Settings) -> EmailRecipients:
    if settings.demo_mode:
        return EmailRecipients(
            to=settings.demo_to_recipients_list,
            bcc=settings.demo_bcc_recipients_list,
            subject_prefix=DEMO_SUBJECT_PREFIX,
        )
    return EmailRecipients(
        to=settings.marketing_to_recipients_list,
        bcc=settings.marketing_bcc_recipients_list,
    )


def _text_block(value: str) -> str:
    return html.escape(value).replace("\n", "<br>")


def _list_items(values: list[str]) -> str:
    return "".join(f'<div class="list-item">{html.escape(value)}</div>' for value in values)


def _format_submitted_at(value: str) -> str:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    suffix = f" {parsed.tzname()}" if parsed.tzinfo is not None else ""
    return parsed.strftime("%d %b %Y, %H:%M") + suffix


_EMAIL_STYLES = """
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 800px; margin: 0 auto; padding: 20px; }
        .header { background: #f8f9fa; padding: 20px; border-radius: 8px; margin-bottom: 30px; }
        .section { margin-bottom: 25px; }
        .section-title { color: #2563eb; font-size: 18px; font-weight: bold; margin-bottom: 10px; border-bottom: 2px solid #e5e7eb; padding-bottom: 5px; }
        .field-label { font-weight: bold; color: #374151; margin-bottom: 5px; }
        .field-value { background: #f9fafb; padding: 10px; border-radius: 4px; margin-bottom: 15px; }
        .list-item { background: #f3f4f6; padding: 8px; margin: 5px 0; border-radius: 4px; }
        .activity-type { background: #dbeafe; color: #1e40af; padding: 10px; border-radius: 6px; font-weight: bold; text-align: center; }
        .campaign-details { background: #fef3c7; border-left: 4px solid #f59e0b; padding: 15px; margin: 15px 0; }
        .ai-summary { background: #f0f9ff; border-left: 4px solid #0ea5e9; padding: 20px; margin: 20px 0; border-radius: 8px; }
        .ai-summary h3 { margin-top: 0; color: #0c4a6e; }
        .ai-summary .confidence { background: #e0f2fe; color: #0c4a6e; padding: 4px 8px; border-radius: 12px; font-size: 12px; margin-left: 10px; }
        .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; font-size: 12px; color: #6b7280; }
        a { color: #2563eb; text-decoration: none; }
"""


def _section(title: str, body: str) -> str:
    return f'<div class="section"><div class="section-title">{title}</div>{body}</div>'


def build_marketing_email_html(
    data: MarketingRequestEmailData,
    ai_summary: dict[str, object] | None = None,
) -> str:
    is_campaign = data.activityType == ACTIVITY_TYPE_CAMPAIGN
    parts: list[str] = [
        '<div class="header">',
        '<h1 style="margin: 0; color: #1f2937;">🧞‍♂️ New Marketing Request</h1>',
        '<p style="margin: 10px 0 0 0; color: #6b7280;">'
        f"Submitted by: {html.escape(data.submittedBy)} • {html.escape(_format_submitted_at(data.submittedAt))}</p>",
        "</div>",
        '<div class="activity-type">'
        f"{'📊 Broader Targeted Campaign' if is_campaign else '⚡ Once Off Activity'}</div>",
    ]

    if ai_summary:
        parts.append(
            '<div class="ai-summary">'
            f'<h3>🤖 AI Analysis <span class="confidence">{html.escape(str(ai_summary.get("confidence")))}% confidence</span></h3>'
            f'<div class="field-value"><strong>Summary:</strong> {_text_block(str(ai_summary.get("summary") or ""))}</div>'
            "</div>"
        )

    parts.append(_section("Background &amp; Context", f'<div class="field-value">{_text_block(data.background)}</div>'))
    parts.append(_section("Objectives", f'<div class="field-value">{_text_block(data.objectives)}</div>'))
    parts.append(_section("Measurement Methods", _list_items(data.measurement)))
    parts.append(_section("Target Audience", f'<div class="field-value">{_text_block(data.targeting)}</div>'))
    parts.append(_section("Expected Action Steps", f'<div class="field-value">{_text_block(data.actionSteps)}</div>'))

    if data.examples:
        parts.append(
            _section("Examples &amp; Inspiration", f'<div class="field-value">{_text_block(data.examples)}</div>')
        )

    if data.exampleLinks:
        links = "".join(
            f'<div class="list-item"><a href="{html.escape(link, quote=True)}" target="_blank">{html.escape(link)}</a></div>'
            for link in data.exampleLinks
        )
        parts.append(_section("Reference Links", links))

    if is_campaign:
        details = ['<div class="campaign-details">', '<h3 style="margin-top: 0; color: #92400e;">📈 Campaign Details</h3>']
        if data.preferredChannels:
            details.append('<div class="field-label">Preferred Channels:</div>')
            details.append(_list_items(data.preferredChannels))
        if data.timeline:
            details.append('<div class="field-label">Timeline:</div>')
            details.append(f'<div class="field-value">{_text_block(data.timeline)}</div>')
        if data.budget:
            details.append('<div class="field-label">Budget:</div>')
            details.append(f'<div class="field-value">{_text_block(data.budget)}</div>')
        details.append("</div>")
        parts.append("".join(details))

    parts.append(
        '<div class="footer">'
        "<p>This request was submitted through the Genie marketing request form.</p>"
        "<p>Reply to this email or contact the submitter directly for any questions.</p>"
        "</div>"
    )

    body = "\n".join(parts)
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '<meta charset="utf-8">\n<title>Marketing Request</title>\n'
        f"<style>{_EMAIL_STYLES}</style>\n</head>\n<body>\n{body}\n</body>\n</html>\n"
    )


def build_marketing_email_payload(
    data: MarketingRequestEmailData,
    *,
    settings: Settings,
    ai_summary: dict[str, object] | None = None,
) -> dict[str, object]:
    recipients = resolve_recipients(settings)
    cc = list(dict.fromkeys([*data.ccEmails, data.contactEmail]))
    activity_text = "Campaign" if data.activityType == ACTIVITY_TYPE_CAMPAIGN else "Activity"
    ai_prefix = AI_SUBJECT_PREFIX if ai_summary else ""

    payload: dict[str, object] = {
        "from": settings.email_from_address,
        "to": recipients.to,
        "cc": cc,
        "subject": f"{recipients.subject_prefix}{ai_prefix}New Marketing Request: {activity_text}",
        "html": build_marketing_email_html(data, ai_summary),
    }
    if recipients.bcc:
        payload["bcc"] = recipients.bcc
    return payload


class ResendEmailClient:
    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport

    def send(self, payload: dict[str, object]) -> dict[str, Any]:
        api_key = str(self._settings.resend_api_key or "").strip()
        if not api_key:
            raise NotificationNotConfiguredError("RESEND_API_KEY not found")

        try:
            with httpx.Client(transport=self._transport, timeout=self._settings.webhook_timeout_seconds) as client:
                response = client.post(
                    self._settings.resend_api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {api_key}"},
                )
        except httpx.HTTPError as exc:
            raise NotificationError(f"Resend API request failed: {exc}") from exc

        if not response.is_success:
            raise NotificationError(f"Resend API error: {response.status_code} - {response.text}")

        logger.info(
            "email_sent",
            extra={
                "event": "email_sent",
                "status_code": response.status_code,
                "to_count": len(payload.get("to") or []),
                "cc_count": len(payload.get("cc") or []),
            },
        )
        try:
            result = response.json()
        except ValueError:
            return {}
        return result if isinstance(result, dict) else {"result": result}
