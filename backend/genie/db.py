from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Iterator
from uuid import uuid4

from genie.config import settings


class SubmissionStoreError(RuntimeError):
    """Raised when a submission cannot be written to or read from the database."""


def _database_path() -> Path:
    prefix = "sqlite:///"
    if not settings.database_url.startswith(prefix):
        raise SubmissionStoreError("Only sqlite:/// DATABASE_URL is supported.")
    return Path(settings.database_url[len(prefix) :])


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def init_db() -> None:
    db_path = _database_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with sqlite3.connect(db_path) as conn:
        conn.execute("PRAGMA foreign_keys = ON")
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS form_submissions (
                id TEXT PRIMARY KEY,
                form_id TEXT NOT NULL,
                form_title TEXT NOT NULL,
                user_id TEXT,
                user_email TEXT,
                responses_json TEXT NOT NULL,
                submitted_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_form_submissions_form
                ON form_submissions(form_id, submitted_at DESC);
            CREATE INDEX IF NOT EXISTS idx_form_submissions_user
                ON form_submissions(user_id, submitted_at DESC);

            CREATE TABLE IF NOT EXISTS notification_deliveries (
                id TEXT PRIMARY KEY,
                submission_id TEXT NOT NULL,
                channel TEXT NOT NULL,
                status TEXT NOT NULL,
                detail_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                FOREIGN KEY(submission_id) REFERENCES form_submissions(id)
            );

            CREATE INDEX IF NOT EXISTS idx_notification_deliveries_submission
                ON notification_deliveries(submission_id, created_at ASC);
            """
        )
        _ensure_column(conn, "form_submissions", "user_email", "TEXT")


def _ensure_column(conn: sqlite3.Connection, table_name: str, column_name: str, column_def: str) -> None:
    rows = conn.execute(f"PRAGMA table_info({table_name})").fetchall()
    existing_columns = {str(row[1]) for row in rows}
    if column_name in existing_columns:
        return
    conn.execute(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_def}")


@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(_database_path())
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        yield conn
        conn.commit()
    finally:
        conn.close()


def _submission_from_row(row: sqlite3.Row) -> dict[str, object]:
    return {
        "id": row["id"],
        "form_id": row["form_id"],
        "form_title": row["form_title"],
        "user_id": row["user_id"],
        "user_email": row["user_email"],
        "responses": json.loads(row["responses_json"]),
        "submitted_at": row["submitted_at"],
    }


def create_submission(
    *,
    form_id: str,
    form_title: str,
    responses: dict[str, object],
    user_id: str | None = None,
    user_email: str | None = None,
    submitted_at: str | None = None,
) -> dict[str, object]:
    submission = {
        "id": str(uuid4()),
        "form_id": form_id,
        "form_title": form_title,
        "user_id": user_id,
        "user_email": user_email,
        "responses": responses,
        "submitted_at": submitted_at or utc_now_iso(),
    }
    try:
        with get_conn() as conn:
            conn.execute(
                """
                INSERT INTO form_submissions
                    (id, form_id, form_title, user_id, user_email, responses_json, submitted_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    submission["id"],
                    form_id,
                    form_title,
                    user_id,
                    user_email,
                    json.dumps(responses, ensure_ascii=True),
                    submission["submitted_at"],
                ),
            )
    except sqlite3.Error as exc:
        raise SubmissionStoreError(f"Database error: {exc}") from exc
    return submission


def get_submission(submission_id: str) -> dict[str, object] | None:
    with get_conn() as conn:
        row = conn.execute(
            """
            SELECT id, form_id, form_title, user_id, user_email, responses_json, submitted_at
            FROM form_submissions
            WHERE id = ?
            """,
            (submission_id,),
        ).fetchone()
    if row is None:
        return None
    return _submission_from_row(row)


def list_submissions(
    *,
    form_id: str | None = None,
    user_id: str | None = None,
    limit: int = 50,
) -> list[dict[str, object]]:
    clauses: list[str] = []
    params: list[object] = []
    if form_id is not None:
        clauses.append("form_id = ?")
        params.append(form_id)
    if user_id is not None:
        clauses.append("user_id = ?")
        params.append(user_id)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    params.append(max(1, limit))

    with get_conn() as conn:
        rows = conn.execute(
            f"""
            SELECT id, form_id, form_title, user_id, user_email, responses_json, submitted_at
            FROM form_submissions
            {where}
            ORDER BY submitted_at DESC, rowid DESC
            LIMIT ?
            """,
            params,
        ).fetchall()
    return [_submission_from_row(row) for row in rows]


def record_notification(
    *,
    submission_id: str,
    channel: str,
    status: str,
    detail: dict[str, object] | None = None,
) -> dict[str, object]:
    delivery = {
        "id": str(uuid4()),
        "submission_id": submission_id,
        "channel": channel,
        "status": status,
        "detail": detail or {},
        "created_at": utc_now_iso(),
    }
    with get_conn() as conn:
        conn.execute(
            """
            INSERT INTO notification_deliveries
                (id, submission_id, channel, status, detail_json, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                delivery["id"],
                submission_id,
                channel,
                status,
                json.dumps(delivery["detail"], ensure_ascii=True, default=str),
                delivery["created_at"],
            ),
        )
    return delivery


def list_notifications(submission_id: str) -> list[dict[str, object]]:
    with get_conn() as conn:
        rows = conn.execute(
            """
            SELECT id, submission_id, channel, status, detail_json, created_at
            FROM notification_deliveries
            WHERE submission_id = ?
            ORDER BY created_at ASC, rowid ASC
            """,
            (submission_id,),
        ).fetchall()
    return [
        {
            "id": row["id"],
            "submission_id": row["submission_id"],
            "channel": row["channel"],
            "status": row["status"],
            "detail": json.loads(row["detail_json"]),
            "created_at": row["created_at"],
        }
        for row in rows
    ]
