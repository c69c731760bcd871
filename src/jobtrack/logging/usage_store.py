"""SQLite-backed usage log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from jobtrack.logging.models import UsageLog

DEFAULT_DB_PATH = Path.home() / ".jobtrack" / "usage.db"

_COLUMNS = (
    "id, user_id, timestamp, application_id, company_name, job_title, attempts, "
    "elapsed_seconds, total_input_tokens, total_output_tokens, estimated_cost_usd, "
    "model, success, error_message"
)


class UsageStore:
    """SQLite-backed store for tailoring usage logs with WAL mode."""

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
                CREATE TABLE IF NOT EXISTS usage_logs (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    application_id TEXT,
                    company_name TEXT,
                    job_title TEXT,
                    attempts INTEGER NOT NULL DEFAULT 0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    total_input_tokens INTEGER NOT NULL DEFAULT 0,
                    total_output_tokens INTEGER NOT NULL DEFAULT 0,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    model TEXT,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_message TEXT
                )
            """)

    def save_log(self, log: UsageLog) -> None:
        """Persist a usage log entry."""
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO usage_logs ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    log.id,
                    log.user_id,
                    log.timestamp.isoformat(),
                    log.application_id,
                    log.company_name,
                    log.job_title,
                    log.attempts,
                    log.elapsed_seconds,
                    log.total_input_tokens,
                    log.total_output_tokens,
                    log.estimated_cost_usd,
                    log.model,
                    1 if log.success else 0,
                    log.error_message,
                ),
            )

    def get_logs(self, user_id: str | None = None, limit: int = 50) -> list[UsageLog]:
        """Retrieve usage logs, newest first, optionally filtered by user."""
        with self._connect() as conn:
            if user_id is not None:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM usage_logs WHERE user_id = ? "
                    "ORDER BY timestamp DESC LIMIT ?",
                    (user_id, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM usage_logs ORDER BY timestamp DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_monthly_stats(self, user_id: str | None = None) -> dict:
        """Get aggregated stats for the current month."""
        now = datetime.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        query = """SELECT
                       COUNT(*),
                       SUM(total_input_tokens),
                       SUM(total_output_tokens),
                       SUM(estimated_cost_usd),
                       AVG(attempts),
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END)
                   FROM usage_logs
                   WHERE timestamp >= ?"""
        params: list = [month_start.isoformat()]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        with self._connect() as conn:
            row = conn.execute(query, params).fetchone()
        return {
            "total_runs": row[0] or 0,
            "total_input_tokens": row[1] or 0,
            "total_output_tokens": row[2] or 0,
            "total_cost_usd": row[3] or 0.0,
            "avg_attempts": round(row[4], 2) if row[4] is not None else None,
            "success_rate": (row[5] / row[0] * 100) if row[0] else 0.0,
            "month": now.strftime("%Y-%m"),
        }

    def get_total_cost(self, user_id: str | None = None) -> float:
        """Get total estimated cost across all logs, optionally for one user."""
        query = "SELECT SUM(estimated_cost_usd) FROM usage_logs"
        params: list = []
        if user_id is not None:
            query += " WHERE user_id = ?"
            params.append(user_id)
        with self._connect() as conn:
            row = conn.execute(query, params).fetchone()
        return row[0] or 0.0

    @staticmethod
    def _row_to_log(row: tuple) -> UsageLog:
        return UsageLog(
            id=row[0],
            user_id=row[1],
            timestamp=datetime.fromisoformat(row[2]),
            application_id=row[3],
            company_name=row[4],
            job_title=row[5],
            attempts=row[6],
            elapsed_seconds=row[7],
            total_input_tokens=row[8],
            total_output_tokens=row[9],
            estimated_cost_usd=row[10],
            model=row[11],
            success=bool(row[12]),
            error_message=row[13],
        )
