import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple

from ...core.security import SecretHasher
from ...domain.errors import DuplicateEmail, DuplicateHandle, StorageUnavailable, UserNotFound
from ...domain.models import AuditEntry, User
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway.

    Every statement that writes ``secret_hash`` lives in this class and takes
    its value from ``SecretHasher.hash``.
    """

    def __init__(self, path: Path, hasher: SecretHasher) -> None:
        self._hasher = hasher
        try:
            if str(path) != ":memory:":
                path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(path, check_same_thread=False)
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailable(f"Unable to open database at {path}.") from exc
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._last_event_time: Optional[datetime] = None
        self._initialize()

    def _initialize(self) -> None:
        with self._guard(), self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    user_id TEXT NOT NULL UNIQUE,
                    email TEXT NOT NULL UNIQUE CHECK (email LIKE '%_@_%._%'),
                    secret_hash TEXT NOT NULL,
                    handle TEXT NOT NULL UNIQUE CHECK (length(handle) BETWEEN 1 AND 32),
                    first_name TEXT,
                    last_name TEXT,
                    language TEXT NOT NULL DEFAULT 'en' CHECK (length(language) = 2),
                    active INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, handle)
                );

                CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);

                CREATE TABLE IF NOT EXISTS user_log (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    event_time TEXT NOT NULL,
                    event TEXT NOT NULL CHECK (length(event) BETWEEN 1 AND 1024)
                );

                CREATE INDEX IF NOT EXISTS idx_user_log_user_time
                    ON user_log(user_id, event_time, id);
                """
            )
            cur = self._conn.execute("SELECT MAX(event_time) AS latest FROM user_log")
            row = cur.fetchone()
        if row and row["latest"]:
            self._last_event_time = self._parse_datetime(row["latest"])

    def close(self) -> None:
        self._conn.close()

    # UserRepository API ----------------------------------------------------
    def create_user(
        self,
        email: str,
        secret: str,
        handle: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        language: str = "en",
        audit_event: Optional[str] = None,
    ) -> User:
        secret_hash = self._hasher.hash(secret)
        user_id = str(uuid.uuid4())
        now = self._format_datetime(self._utcnow())
        with self._guard(), self._lock, self._conn:
            try:
                self._conn.execute(
                    """
                    INSERT INTO users (
                        user_id, email, secret_hash, handle, first_name, last_name,
                        language, active, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, 1, ?, ?)
                    """,
                    (user_id, email, secret_hash, handle, first_name, last_name, language, now, now),
                )
            except sqlite3.IntegrityError as exc:
                raise self._translate_integrity_error(exc) from exc
            if audit_event:
                self._insert_event(user_id, audit_event)
            row = self._select_user("user_id", user_id)
        if not row:
            raise StorageUnavailable("Failed to persist user.")
        return self._row_to_user(row)

    def update_user(
        self,
        user_id: str,
        *,
        email: Optional[str] = None,
        secret: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        language: Optional[str] = None,
        active: Optional[bool] = None,
        audit_event: Optional[str] = None,
    ) -> User:
        updates = []
        params: List[Any] = []
        if email is not None:
            updates.append("email = ?")
            params.append(email)
        if secret is not None:
            # Only a freshly supplied secret is hashed; an update without one
            # leaves the stored hash untouched.
            updates.append("secret_hash = ?")
            params.append(self._hasher.hash(secret))
        # An empty string clears an optional name.
        if first_name is not None:
            updates.append("first_name = ?")
            params.append(first_name or None)
        if last_name is not None:
            updates.append("last_name = ?")
            params.append(last_name or None)
        if language is not None:
            updates.append("language = ?")
            params.append(language)

        with self._guard(), self._lock, self._conn:
            now = self._format_datetime(self._utcnow())
            if updates:
                statement = f"UPDATE users SET {', '.join(updates)}, updated_at = ? WHERE user_id = ?"
                try:
                    cur = self._conn.execute(statement, [*params, now, user_id])
                except sqlite3.IntegrityError as exc:
                    raise self._translate_integrity_error(exc) from exc
                if cur.rowcount == 0:
                    raise UserNotFound(f"User {user_id} not found.")
                if audit_event:
                    self._insert_event(user_id, audit_event)
            if active is not None:
                # Check and write in one statement so that only a real
                # transition is recorded, however many callers race.
                cur = self._conn.execute(
                    "UPDATE users SET active = ?, updated_at = ? WHERE user_id = ? AND active = ?",
                    (int(active), now, user_id, int(not active)),
                )
                if cur.rowcount == 1:
                    self._insert_event(
                        user_id, "account reactivated" if active else "account deactivated"
                    )
            row = self._select_user("user_id", user_id)
        if not row:
            raise UserNotFound(f"User {user_id} not found.")
        return self._row_to_user(row)

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with self._guard(), self._lock:
            row = self._select_user("user_id", user_id)
        return self._row_to_user(row) if row else None

    def get_user_by_handle(self, handle: str) -> Optional[User]:
        with self._guard(), self._lock:
            row = self._select_user("handle", handle)
        return self._row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._guard(), self._lock:
            row = self._select_user("email", email.strip().lower())
        return self._row_to_user(row) if row else None

    def get_credentials(self, handle: str) -> Optional[Tuple[User, str]]:
        with self._guard(), self._lock:
            row = self._select_user("handle", handle)
        if not row:
            return None
        return self._row_to_user(row), row["secret_hash"]

    # AuditLogRepository API -------------------------------------------------
    def append_event(self, user_id: str, event: str) -> AuditEntry:
        with self._guard(), self._lock, self._conn:
            entry_id = self._insert_event(user_id, event)
            cur = self._conn.execute("SELECT * FROM user_log WHERE id = ?", (entry_id,))
            row = cur.fetchone()
        if not row:
            raise StorageUnavailable("Failed to record audit event.")
        return self._row_to_entry(row)

    def get_events(self, user_id: str, limit: Optional[int] = None, offset: int = 0) -> List[AuditEntry]:
        query = "SELECT * FROM user_log WHERE user_id = ? ORDER BY event_time ASC, id ASC"
        params: List[Any] = [user_id]
        if limit is not None or offset:
            query += " LIMIT ? OFFSET ?"
            params.extend([-1 if limit is None else limit, offset])
        with self._guard(), self._lock:
            cur = self._conn.execute(query, params)
            rows = cur.fetchall()
        return [self._row_to_entry(row) for row in rows]

    # Helpers ----------------------------------------------------------------
    def _select_user(self, column: str, value: str) -> Optional[sqlite3.Row]:
        # Callers hold the lock; column names come from this class only.
        cur = self._conn.execute(f"SELECT * FROM users WHERE {column} = ?", (value,))
        return cur.fetchone()

    def _insert_event(self, user_id: str, event: str) -> int:
        event_time = self._utcnow()
        if self._last_event_time and event_time < self._last_event_time:
            event_time = self._last_event_time
        cur = self._conn.execute(
            "INSERT INTO user_log (user_id, event_time, event) VALUES (?, ?, ?)",
            (user_id, self._format_datetime(event_time), event),
        )
        self._last_event_time = event_time
        return cur.lastrowid

    @contextmanager
    def _guard(self) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as exc:
            logger.error("SQLite operation failed: %s", exc)
            raise StorageUnavailable("Credential storage is unavailable.") from exc

    @staticmethod
    def _translate_integrity_error(exc: sqlite3.IntegrityError) -> Exception:
        message = str(exc)
        if "users.email" in message:
            return DuplicateEmail("A user with this email already exists.")
        if "users.handle" in message:
            return DuplicateHandle("A user with this handle already exists.")
        logger.error("Unexpected constraint violation: %s", message)
        return StorageUnavailable("Credential storage rejected the write.")

    @staticmethod
    def _utcnow() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _format_datetime(value: datetime) -> str:
        return value.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            user_id=row["user_id"],
            email=row["email"],
            handle=row["handle"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            language=row["language"],
            active=bool(row["active"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_entry(self, row: sqlite3.Row) -> AuditEntry:
        return AuditEntry(
            id=row["id"],
            user_id=row["user_id"],
            event_time=self._parse_datetime(row["event_time"]),
            event=row["event"],
        )
