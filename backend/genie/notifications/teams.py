from __future__ import annotations

import logging

import httpx

from genie.config import Settings
from genie.notifications import NotificationError, NotificationNotConfiguredError

logger = logging.getLogger("genie.notifications.teams")

DEFAULT_THEME_COLOR = "0078d4"


def _display_value(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if value is None:
        return ""
    return str(value)


def build_submission_card(form_id: str, form_data: dict[str, object], *, form_title: str | None = None) -> dict[str, object]:
    """Adaptive Card posted to the channel for each stored submission."""
    heading = f"New Form Submission: {form_title or form_id}"
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": "application/vnd.microsoft.card.adaptive",
                "content": {
                    "type": "AdaptiveCard",
                    "body": [
                        {"type": "TextBlock", "text": heading},
                        {
                            "type": "ColumnSet",
                            "columns": [
                                {
                                    "type": "Column",
                                    "width": "auto",
                                    "items": [
                                        {
                                            "type": "TextBlock",
                                            "text": f"**{key}:** {_display_value(value)}",
                                        }
                                    ],
                                }
                                for key, value in form_data.items()
                            ],
                        },
                    ],
                },
            }
        ],
    }


def build_message_card(
    title: str,
    message: str,
    data: dict[str, object] | None = None,
    color: str = DEFAULT_THEME_COLOR,
) -> dict[str, object]:
    return {
        "@type": "MessageCard",
        "@context": "http://schema.org/extensions",
        "themeColor": color,
        "summary": title,
        "sections": [
            {
                "activityTitle": title,
                "activitySubtitle": message,
                "facts": [{"name": key, "value": _display_value(value)} for key, value in (data or {}).items()],
                "markdown": True,
            }
        ],
    }


class TeamsWebhookClient:
    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(str(self._settings.teams_webhook_url or "").strip())

    def post(self, payload: dict[str, object]) -> None:
        url = str(self._settings.teams_webhook_url or "").strip()
        if not url:
            raise NotificationNotConfiguredError("Teams webhook URL not configured")

        try:
            with httpx.Client(transport=self._transport, timeout=self._settings.webhook_timeout_seconds) as client:
                response = client.post(url, json=payload)
        except httpx.HTTPError as exc:
            raise NotificationError(f"Teams webhook request failed: {exc}") from exc

        if not response.is_success:
            raise NotificationError(f"Teams webhook failed: {response.status_code} {response.text}")

        logger.info(
            "teams_webhook_posted",
            extra={"event": "teams_webhook_posted", "status_code": response.status_code},
        )
