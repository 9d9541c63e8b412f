from __future__ import annotations

from pathlib import Path

import pytest

from genie.config import settings
from genie.db import init_db


_RESTORED_SETTINGS = (
    "auth_enabled",
    "jwt_secret",
    "jwt_audience",
    "jwt_issuer",
    "database_url",
    "enabled_forms",
    "measurement_suggestion_mode",
    "bedrock_model_id",
    "resend_api_key",
    "teams_webhook_url",
    "demo_mode",
    "marketing_to_recipients",
    "marketing_bcc_recipients",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path):
    original = {name: getattr(settings, name) for name in _RESTORED_SETTINGS}
    settings.database_url = f"sqlite:///{tmp_path}/genie-test.db"
    settings.enabled_forms = "*"
    settings.auth_enabled = False
    settings.resend_api_key = ""
    settings.teams_webhook_url = ""
    settings.demo_mode = False
    init_db()
    yield
    for name, value in original.items():
        setattr(settings, name, value)


@pytest.fixture()
def marketing_form_data() -> dict[str, object]:
    return {
        "background": "We are launching a new SaaS product for small business owners.",
        "objectives": "Generate 100 qualified leads per month and grow website traffic.",
        "measurement": ["Lead Generation", "Website Traffic"],
        "ccEmails": ["manager@example.com"],
        "targeting": "Small business owners in tech, 25-45 years old.",
        "actionSteps": "See ad, visit landing page, book a demo.",
        "activityType": "once-off",
        "contactEmail": "requester@example.com",
    }
