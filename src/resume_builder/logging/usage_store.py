"""SQLite-backed log of AI gateway calls."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from resume_builder.logging.models import AiCallLog

DEFAULT_DB_PATH = Path.home() / ".resume-builder" / "usage.db"


class UsageStore:
    """SQLite-backed store for AI call logs with WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS ai_calls (
                    id TEXT PRIMARY KEY,
                    timestamp TEXT NOT NULL,
                    operation TEXT NOT NULL,
                    resume_id INTEGER,
                    prompt_chars INTEGER NOT NULL DEFAULT 0,
                    attempts INTEGER NOT NULL DEFAULT 0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    result_kind TEXT,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_type TEXT,
                    error_message TEXT
                )
            """)

    def save_log(self, log: AiCallLog) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO ai_calls
                   (id, timestamp, operation, resume_id, prompt_chars, attempts,
                    elapsed_seconds, result_kind, success, error_type, error_message)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    log.id,
                    log.timestamp.isoformat(),
                    log.operation,
                    log.resume_id,
                    log.prompt_chars,
                    log.attempts,
                    log.elapsed_seconds,
                    log.result_kind,
                    1 if log.success else 0,
                    log.error_type,
                    log.error_message,
                ),
            )

    def get_logs(self, operation: str | None = None, limit: int = 50) -> list[AiCallLog]:
        """Most recent logs first, optionally filtered by operation."""
        with self._connect() as conn:
            if operation is not None:
                rows = conn.execute(
                    "SELECT * FROM ai_calls WHERE operation = ? ORDER BY timestamp DESC LIMIT ?",
                    (operation, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM ai_calls ORDER BY timestamp DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_stats(self) -> dict:
        """Aggregate counts over all logged calls."""
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*),
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END),
                       SUM(CASE WHEN result_kind = 'raw' THEN 1 ELSE 0 END),
                       SUM(CASE WHEN error_type = 'RateLimitExceeded' THEN 1 ELSE 0 END),
                       AVG(attempts),
                       AVG(elapsed_seconds)
                   FROM ai_calls"""
            ).fetchone()
        total = row[0] or 0
        return {
            "total_calls": total,
            "success_count": row[1] or 0,
            "raw_fallback_count": row[2] or 0,
            "rate_limited_count": row[3] or 0,
            "avg_attempts": round(row[4], 2) if row[4] is not None else None,
            "avg_elapsed_seconds": round(row[5], 3) if row[5] is not None else None,
            "success_rate": (row[1] / total * 100) if total else 0.0,
        }

    @staticmethod
    def _row_to_log(row: tuple) -> AiCallLog:
        return AiCallLog(
            id=row[0],
            timestamp=datetime.fromisoformat(row[1]),
            operation=row[2],
            resume_id=row[3],
            prompt_chars=row[4],
            attempts=row[5],
            elapsed_seconds=row[6],
            result_kind=row[7],
            success=bool(row[8]),
            error_type=row[9],
            error_message=row[10],
        )
