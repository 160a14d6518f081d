from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from app.schemas.onboarding import OnboardingSubmission, UserProfile


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserStore:
    """Onboarding records keyed by the auth provider's user id."""

    def __init__(self, db_path: str | Path):
        self._db_path = Path(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path, timeout=5)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def init_db(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    clerk_id TEXT PRIMARY KEY,
                    onboarded INTEGER NOT NULL DEFAULT 0,
                    industry TEXT,
                    sub_industry TEXT,
                    years_experience REAL,
                    skills_json TEXT,
                    bio TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def get_onboarded(self, user_id: str) -> bool | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT onboarded FROM users WHERE clerk_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return bool(row["onboarded"])

    def get_profile(self, user_id: str) -> UserProfile | None:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT clerk_id, onboarded, industry, sub_industry, years_experience,
                       skills_json, bio, updated_at
                FROM users WHERE clerk_id = ?
                """,
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return UserProfile(
            user_id=row["clerk_id"],
            onboarded=bool(row["onboarded"]),
            industry=row["industry"],
            sub_industry=row["sub_industry"],
            years_experience=row["years_experience"],
            skills=json.loads(row["skills_json"] or "[]"),
            bio=row["bio"],
            updated_at=row["updated_at"],
        )

    def complete_onboarding(self, user_id: str, submission: OnboardingSubmission) -> UserProfile:
        now = _utc_now()
        skills = submission.skills_list
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO users (
                    clerk_id, onboarded, industry, sub_industry, years_experience,
                    skills_json, bio, created_at, updated_at
                ) VALUES (?, 1, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(clerk_id) DO UPDATE SET
                    onboarded = 1,
                    industry = excluded.industry,
                    sub_industry = excluded.sub_industry,
                    years_experience = excluded.years_experience,
                    skills_json = excluded.skills_json,
                    bio = excluded.bio,
                    updated_at = excluded.updated_at
                """,
                (
                    user_id,
                    submission.industry,
                    submission.sub_industry,
                    submission.years_experience,
                    json.dumps(skills, ensure_ascii=False),
                    submission.bio,
                    now,
                    now,
                ),
            )
            conn.commit()
        return UserProfile(
            user_id=user_id,
            onboarded=True,
            industry=submission.industry,
            sub_industry=submission.sub_industry,
            years_experience=submission.years_experience,
            skills=skills,
            bio=submission.bio,
            updated_at=now,
        )
