"""SQLite-backed storage for base resumes, applications and resume versions."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from jobtrack.errors import (
    ApplicationNotFoundError,
    BaseResumeNotFoundError,
    DuplicateApplicationError,
)
from jobtrack.models.application import (
    Application,
    ApplicationPage,
    ApplicationStatus,
    BaseResume,
    JobPosting,
    ResumeVersion,
    description_hash,
)
from jobtrack.models.resume import ResumeData

DEFAULT_DB_PATH = Path.home() / ".jobtrack" / "jobtrack.db"

_APPLICATION_COLUMNS = (
    "id, user_id, company_name, title, location, url, description, description_hash, "
    "salary, source, status, notes, applied_at, created_at, updated_at, applied_with_resume_id"
)

_BASE_RESUME_COLUMNS = "id, user_id, name, content_json, is_default, created_at, updated_at"


class ApplicationStore:
    """Per-user application tracker with WAL mode.

    Every read and write is scoped by ``user_id``; an application owned by
    another user behaves exactly like a missing one.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS base_resumes (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    content_json TEXT NOT NULL,
                    is_default INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS applications (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    company_name TEXT NOT NULL,
                    title TEXT NOT NULL,
                    location TEXT,
                    url TEXT,
                    description TEXT NOT NULL,
                    description_hash TEXT NOT NULL,
                    salary TEXT,
                    source TEXT,
                    status TEXT NOT NULL DEFAULT 'saved',
                    notes TEXT,
                    applied_at TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    applied_with_resume_id TEXT
                        REFERENCES base_resumes(id) ON DELETE SET NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS resume_versions (
                    id TEXT PRIMARY KEY,
                    application_id TEXT NOT NULL
                        REFERENCES applications(id) ON DELETE CASCADE,
                    content_json TEXT NOT NULL,
                    keywords_json TEXT NOT NULL,
                    prompt_config_json TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

    # --- base resumes ---

    def add_base_resume(
        self,
        user_id: str,
        name: str,
        resume: ResumeData,
        *,
        make_default: bool = False,
    ) -> BaseResume:
        """Add a named resume to the user's library.

        The first resume a user adds becomes the default. Adding one with
        ``make_default`` clears the flag on every other resume.
        """
        with self._connect() as conn:
            if make_default:
                conn.execute(
                    "UPDATE base_resumes SET is_default = 0 WHERE user_id = ?", (user_id,)
                )
            existing = conn.execute(
                "SELECT COUNT(*) FROM base_resumes WHERE user_id = ?", (user_id,)
            ).fetchone()[0]
            entry = BaseResume(
                user_id=user_id,
                name=name,
                content=resume,
                is_default=make_default or existing == 0,
            )
            conn.execute(
                f"INSERT INTO base_resumes ({_BASE_RESUME_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    entry.id,
                    entry.user_id,
                    entry.name,
                    entry.content.model_dump_json(by_alias=True),
                    1 if entry.is_default else 0,
                    entry.created_at.isoformat(),
                    entry.updated_at.isoformat(),
                ),
            )
        return entry

    def list_base_resumes(self, user_id: str) -> list[BaseResume]:
        """The user's resumes, default first, then newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_BASE_RESUME_COLUMNS} FROM base_resumes WHERE user_id = ? "
                "ORDER BY is_default DESC, created_at DESC, rowid DESC",
                (user_id,),
            ).fetchall()
        return [self._row_to_base_resume(row) for row in rows]

    def get_base_resume(self, user_id: str, resume_id: str) -> BaseResume:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_BASE_RESUME_COLUMNS} FROM base_resumes WHERE id = ? AND user_id = ?",
                (resume_id, user_id),
            ).fetchone()
        if row is None:
            raise BaseResumeNotFoundError(resume_id)
        return self._row_to_base_resume(row)

    def get_default_base_resume(self, user_id: str) -> BaseResume | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_BASE_RESUME_COLUMNS} FROM base_resumes "
                "WHERE user_id = ? AND is_default = 1",
                (user_id,),
            ).fetchone()
        return self._row_to_base_resume(row) if row else None

    def set_default_base_resume(self, user_id: str, resume_id: str) -> BaseResume:
        """Make one resume the default and clear the flag on the others."""
        entry = self.get_base_resume(user_id, resume_id)
        now = datetime.now()
        with self._connect() as conn:
            conn.execute(
                "UPDATE base_resumes SET is_default = 0 WHERE user_id = ? AND is_default = 1",
                (user_id,),
            )
            conn.execute(
                "UPDATE base_resumes SET is_default = 1, updated_at = ? WHERE id = ?",
                (now.isoformat(), resume_id),
            )
        return entry.model_copy(update={"is_default": True, "updated_at": now})

    def delete_base_resume(self, user_id: str, resume_id: str) -> None:
        """Delete a resume. Deleting the default promotes the newest remaining one."""
        entry = self.get_base_resume(user_id, resume_id)
        with self._connect() as conn:
            conn.execute("DELETE FROM base_resumes WHERE id = ?", (resume_id,))
            if entry.is_default:
                conn.execute(
                    """UPDATE base_resumes SET is_default = 1 WHERE id = (
                           SELECT id FROM base_resumes WHERE user_id = ?
                           ORDER BY created_at DESC, rowid DESC LIMIT 1
                       )""",
                    (user_id,),
                )

    # --- applications ---

    def create_application(self, user_id: str, posting: JobPosting) -> Application:
        """Track a new job posting. The same URL may only be tracked once per user."""
        with self._connect() as conn:
            if posting.url:
                existing = conn.execute(
                    "SELECT 1 FROM applications WHERE user_id = ? AND url = ?",
                    (user_id, posting.url),
                ).fetchone()
                if existing:
                    raise DuplicateApplicationError(posting.url)

            application = Application(
                user_id=user_id,
                description_hash=description_hash(posting.description),
                **posting.model_dump(),
            )
            conn.execute(
                f"INSERT INTO applications ({_APPLICATION_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                self._application_row(application),
            )
        return application

    def get_application(self, user_id: str, application_id: str) -> Application:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_APPLICATION_COLUMNS} FROM applications WHERE id = ? AND user_id = ?",
                (application_id, user_id),
            ).fetchone()
        if row is None:
            raise ApplicationNotFoundError(application_id)
        return self._row_to_application(row)

    def list_applications(
        self,
        user_id: str,
        status: ApplicationStatus | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> ApplicationPage:
        """List a user's applications, newest first, optionally filtered by status."""
        where = "WHERE user_id = ?"
        params: list = [user_id]
        if status is not None:
            where += " AND status = ?"
            params.append(ApplicationStatus(status).value)

        with self._connect() as conn:
            total = conn.execute(
                f"SELECT COUNT(*) FROM applications {where}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"SELECT {_APPLICATION_COLUMNS} FROM applications {where} "
                "ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?",
                [*params, page_size, (page - 1) * page_size],
            ).fetchall()

        return ApplicationPage(
            items=[self._row_to_application(row) for row in rows],
            total=total,
            page=page,
            page_size=page_size,
            has_more=total > page * page_size,
        )

    def update_application(
        self,
        user_id: str,
        application_id: str,
        *,
        status: ApplicationStatus | None = None,
        notes: str | None = None,
        applied_at: datetime | None = None,
        applied_with_resume_id: str | None = None,
    ) -> Application:
        """Update only the supplied fields of an application.

        ``applied_with_resume_id`` must name one of the user's base resumes.
        """
        application = self.get_application(user_id, application_id)
        if applied_with_resume_id is not None:
            self.get_base_resume(user_id, applied_with_resume_id)
        changes: dict = {"updated_at": datetime.now()}
        if status is not None:
            changes["status"] = ApplicationStatus(status)
            if (
                changes["status"] == ApplicationStatus.APPLIED
                and applied_at is None
                and application.applied_at is None
            ):
                changes["applied_at"] = changes["updated_at"]
        if notes is not None:
            changes["notes"] = notes
        if applied_at is not None:
            changes["applied_at"] = applied_at
        if applied_with_resume_id is not None:
            changes["applied_with_resume_id"] = applied_with_resume_id

        updated = application.model_copy(update=changes)
        with self._connect() as conn:
            conn.execute(
                """UPDATE applications
                   SET status = ?, notes = ?, applied_at = ?, applied_with_resume_id = ?,
                       updated_at = ?
                   WHERE id = ? AND user_id = ?""",
                (
                    updated.status.value,
                    updated.notes,
                    updated.applied_at.isoformat() if updated.applied_at else None,
                    updated.applied_with_resume_id,
                    updated.updated_at.isoformat(),
                    application_id,
                    user_id,
                ),
            )
        return updated

    def delete_application(self, user_id: str, application_id: str) -> None:
        """Delete an application together with its resume versions."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM applications WHERE id = ? AND user_id = ?",
                (application_id, user_id),
            )
            if cursor.rowcount == 0:
                raise ApplicationNotFoundError(application_id)

    # --- resume versions ---

    def add_resume_version(self, version: ResumeVersion) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO resume_versions
                   (id, application_id, content_json, keywords_json, prompt_config_json, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    version.id,
                    version.application_id,
                    version.content.model_dump_json(by_alias=True),
                    json.dumps(version.keywords, ensure_ascii=False),
                    json.dumps(version.prompt_config, ensure_ascii=False),
                    version.created_at.isoformat(),
                ),
            )

    def list_resume_versions(self, user_id: str, application_id: str) -> list[ResumeVersion]:
        """Resume versions for one of the user's applications, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT v.id, v.application_id, v.content_json, v.keywords_json,
                          v.prompt_config_json, v.created_at
                   FROM resume_versions v JOIN applications a ON a.id = v.application_id
                   WHERE v.application_id = ? AND a.user_id = ?
                   ORDER BY v.created_at DESC, v.rowid DESC""",
                (application_id, user_id),
            ).fetchall()
        return [
            ResumeVersion(
                id=row[0],
                application_id=row[1],
                content=ResumeData.model_validate_json(row[2]),
                keywords=json.loads(row[3]),
                prompt_config=json.loads(row[4]),
                created_at=datetime.fromisoformat(row[5]),
            )
            for row in rows
        ]

    def count_resume_versions(self, user_id: str) -> int:
        """Count every resume version ever generated for the user."""
        with self._connect() as conn:
            row = conn.execute(
                """SELECT COUNT(*) FROM resume_versions v
                   JOIN applications a ON a.id = v.application_id
                   WHERE a.user_id = ?""",
                (user_id,),
            ).fetchone()
        return row[0]

    @staticmethod
    def _application_row(app: Application) -> tuple:
        return (
            app.id,
            app.user_id,
            app.company_name,
            app.title,
            app.location,
            app.url,
            app.description,
            app.description_hash,
            app.salary,
            app.source,
            app.status.value,
            app.notes,
            app.applied_at.isoformat() if app.applied_at else None,
            app.created_at.isoformat(),
            app.updated_at.isoformat(),
            app.applied_with_resume_id,
        )

    @staticmethod
    def _row_to_application(row: tuple) -> Application:
        return Application(
            id=row[0],
            user_id=row[1],
            company_name=row[2],
            title=row[3],
            location=row[4],
            url=row[5],
            description=row[6],
            description_hash=row[7],
            salary=row[8],
            source=row[9],
            status=ApplicationStatus(row[10]),
            notes=row[11],
            applied_at=datetime.fromisoformat(row[12]) if row[12] else None,
            created_at=datetime.fromisoformat(row[13]),
            updated_at=datetime.fromisoformat(row[14]),
            applied_with_resume_id=row[15],
        )

    @staticmethod
    def _row_to_base_resume(row: tuple) -> BaseResume:
        return BaseResume(
            id=row[0],
            user_id=row[1],
            name=row[2],
            content=ResumeData.model_validate_json(row[3]),
            is_default=bool(row[4]),
            created_at=datetime.fromisoformat(row[5]),
            updated_at=datetime.fromisoformat(row[6]),
        )
