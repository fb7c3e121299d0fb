"""SQLite store for resume documents keyed by integer id."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from resume_builder.errors import ResumeNotFound
from resume_builder.models.resume import ResumeDocument

DEFAULT_DB_PATH = Path.home() / ".resume-builder" / "resumes.db"


class ResumeStore:
    """Keyed create/read/update/delete store; each resume is one JSON row."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS resumes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    document_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def create(self, resume: ResumeDocument) -> ResumeDocument:
        """Insert a new resume and return it with id and timestamps set."""
        now = datetime.now()
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO resumes (document_json, updated_at) VALUES (?, ?)",
                ("{}", now.isoformat()),
            )
            stored = resume.model_copy(
                update={"id": cursor.lastrowid, "created_at": now, "updated_at": now}
            )
            conn.execute(
                "UPDATE resumes SET document_json = ? WHERE id = ?",
                (stored.model_dump_json(), stored.id),
            )
        return stored

    def get(self, resume_id: int) -> ResumeDocument:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT document_json FROM resumes WHERE id = ?", (resume_id,)
            ).fetchone()
        if row is None:
            raise ResumeNotFound(resume_id)
        return ResumeDocument.model_validate_json(row[0])

    def save(self, resume: ResumeDocument) -> ResumeDocument:
        """Replace an existing resume; ``updated_at`` is refreshed."""
        if resume.id is None:
            raise ValueError("Cannot save a resume without an id; use create()")
        now = datetime.now()
        stored = resume.model_copy(update={"updated_at": now})
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE resumes SET document_json = ?, updated_at = ? WHERE id = ?",
                (stored.model_dump_json(), now.isoformat(), resume.id),
            )
            if cursor.rowcount == 0:
                raise ResumeNotFound(resume.id)
        return stored

    def delete(self, resume_id: int) -> None:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM resumes WHERE id = ?", (resume_id,))
            if cursor.rowcount == 0:
                raise ResumeNotFound(resume_id)

    def list_ids(self) -> list[int]:
        with self._connect() as conn:
            rows = conn.execute("SELECT id FROM resumes ORDER BY id").fetchall()
        return [r[0] for r in rows]
