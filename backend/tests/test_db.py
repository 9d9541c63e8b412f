from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from genie.config import settings
from genie.db import (
    SubmissionStoreError,
    create_submission,
    get_conn,
    get_submission,
    init_db,
    list_notifications,
    list_submissions,
    record_notification,
)


def test_create_and_get_submission_round_trip() -> None:
    created = create_submission(
        form_id="contact",
        form_title="Contact Form",
        responses={"name": "Ada", "email": "ada@example.com"},
        user_id="user-1",
        user_email="ada@example.com",
    )
    loaded = get_submission(str(created["id"]))
    assert loaded == created


def test_get_unknown_submission_returns_none() -> None:
    assert get_submission("missing") is None


def test_list_submissions_filters_and_orders_newest_first() -> None:
    first = create_submission(form_id="contact", form_title="Contact Form", responses={}, user_id="a",
                              submitted_at="2026-01-01T00:00:00+00:00")
    second = create_submission(form_id="contact", form_title="Contact Form", responses={}, user_id="b",
                               submitted_at="2026-01-02T00:00:00+00:00")
    create_submission(form_id="survey", form_title="Customer Survey", responses={}, user_id="a")

    assert [item["id"] for item in list_submissions(form_id="contact")] == [second["id"], first["id"]]
    assert [item["id"] for item in list_submissions(form_id="contact", user_id="a")] == [first["id"]]
    assert len(list_submissions(limit=1)) == 1


def test_notifications_are_recorded_per_submission() -> None:
    submission = create_submission(form_id="contact", form_title="Contact Form", responses={})
    submission_id = str(submission["id"])
    record_notification(submission_id=submission_id, channel="email", status="sent", detail={"subject": "Hi"})
    record_notification(submission_id=submission_id, channel="teams", status="failed")

    deliveries = list_notifications(submission_id)
    assert [(item["channel"], item["status"]) for item in deliveries] == [("email", "sent"), ("teams", "failed")]
    assert deliveries[0]["detail"] == {"subject": "Hi"}
    assert deliveries[1]["detail"] == {}


def test_init_db_adds_missing_user_email_column(tmp_path: Path) -> None:
    db_path = tmp_path / "legacy.db"
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE form_submissions (
                id TEXT PRIMARY KEY,
                form_id TEXT NOT NULL,
                form_title TEXT NOT NULL,
                user_id TEXT,
                responses_json TEXT NOT NULL,
                submitted_at TEXT NOT NULL
            )
            """
        )
    settings.database_url = f"sqlite:///{db_path}"
    init_db()

    with get_conn() as conn:
        columns = {row[1] for row in conn.execute("PRAGMA table_info(form_submissions)").fetchall()}
    assert "user_email" in columns


def test_non_sqlite_database_url_is_rejected() -> None:
    settings.database_url = "postgresql://db.example.com/genie"
    with pytest.raises(SubmissionStoreError, match="Only sqlite"):
        init_db()


def test_store_errors_are_wrapped() -> None:
    with get_conn() as conn:
        conn.execute("DROP TABLE notification_deliveries")
        conn.execute("DROP TABLE form_submissions")
    with pytest.raises(SubmissionStoreError, match="Database error"):
        create_submission(form_id="contact", form_title="Contact Form", responses={})
