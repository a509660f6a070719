"""SQLite-backed feedback record store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing IFeedbackStore).
#
# Database: ``data/feedback.db`` with two tables:
#   - feedback_records     append-only, one row per submission.  Readings
#                          are stored as a JSON array, feedback as a JSON
#                          scalar so text answers keep their type.
#   - correlation_results  one row per owner, upserted on every analysis.
#
# Uses ``aiosqlite`` for async I/O and ``PRAGMA journal_mode=WAL`` for
# concurrent read safety.  Every single write is one statement, so the
# database's own atomicity is the only coordination needed.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite
import structlog
from pydantic import ValidationError

from src.interfaces.feedback_store import IFeedbackStore
from src.models.analysis import CorrelationResult
from src.models.feedback import ExposureReading, FeedbackRecord, Location
from src.utils.errors import PersistenceError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/feedback.db")

# ── Schema DDL ────────────────────────────────────────────────────────

_CREATE_RECORDS_TABLE = """\
CREATE TABLE IF NOT EXISTS feedback_records (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    record_id   TEXT    NOT NULL UNIQUE,
    owner_id    TEXT    NOT NULL,
    feedback    TEXT    NOT NULL,
    lat         REAL    NOT NULL,
    lng         REAL    NOT NULL,
    readings    TEXT    NOT NULL DEFAULT '[]',
    created_at  TEXT    NOT NULL
);
"""

_CREATE_RESULTS_TABLE = """\
CREATE TABLE IF NOT EXISTS correlation_results (
    owner_id     TEXT PRIMARY KEY,
    result       TEXT NOT NULL,
    analyzed_at  TEXT NOT NULL
);
"""

_CREATE_INDICES = [
    "CREATE INDEX IF NOT EXISTS idx_records_owner ON feedback_records(owner_id);",
]

# ── DML ───────────────────────────────────────────────────────────────

_INSERT_RECORD = """\
INSERT INTO feedback_records (record_id, owner_id, feedback, lat, lng, readings, created_at)
VALUES (?, ?, ?, ?, ?, ?, ?);
"""

_SELECT_RECORDS = """\
SELECT record_id, owner_id, feedback, lat, lng, readings, created_at
FROM feedback_records
WHERE owner_id = ?
ORDER BY id ASC;
"""

_UPSERT_RESULT = """\
INSERT INTO correlation_results (owner_id, result, analyzed_at)
VALUES (?, ?, ?)
ON CONFLICT(owner_id)
DO UPDATE SET result      = excluded.result,
              analyzed_at = excluded.analyzed_at;
"""

_SELECT_RESULT = "SELECT result FROM correlation_results WHERE owner_id = ?;"


class SQLiteFeedbackStore(IFeedbackStore):
    """SQLite-backed feedback record and analysis result persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)
        self._initialized = False

    async def initialize(self) -> None:
        """Create tables and indices if they don't exist."""
        if self._initialized:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute("PRAGMA journal_mode=WAL;")
                await db.execute(_CREATE_RECORDS_TABLE)
                await db.execute(_CREATE_RESULTS_TABLE)
                for idx_sql in _CREATE_INDICES:
                    await db.execute(idx_sql)
                await db.commit()
        except aiosqlite.Error as exc:
            raise PersistenceError(
                message=f"Error initializing feedback database: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        self._initialized = True
        logger.info("feedback_db_initialized", path=str(self._db_path))

    def get_provider_name(self) -> str:
        return "sqlite_feedback"

    # ── Records ────────────────────────────────────────────────────────

    async def append_record(self, record: FeedbackRecord) -> str:
        """Insert one feedback record."""
        readings = json.dumps([r.model_dump() for r in record.readings])
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_INSERT_RECORD, (
                    record.record_id,
                    record.owner_id,
                    json.dumps(record.feedback),
                    record.location.lat,
                    record.location.lng,
                    readings,
                    record.created_at.isoformat(),
                ))
                await db.commit()
        except aiosqlite.Error as exc:
            raise PersistenceError(
                message=f"Error writing feedback record: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug("feedback_record_inserted", record_id=record.record_id)
        return record.record_id

    async def list_records(self, owner_id: str) -> list[FeedbackRecord]:
        """Return every record for *owner_id* in insertion order."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_RECORDS, (owner_id,))
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise PersistenceError(
                message=f"Error reading feedback records: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        return [self._row_to_record(dict(row)) for row in rows]

    # ── Results ────────────────────────────────────────────────────────

    async def save_result(self, result: CorrelationResult) -> None:
        """Upsert the owner's single analysis result."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_UPSERT_RESULT, (
                    result.owner_id,
                    result.model_dump_json(),
                    result.analyzed_at.isoformat(),
                ))
                await db.commit()
        except aiosqlite.Error as exc:
            raise PersistenceError(
                message=f"Error writing analysis result: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug("correlation_result_saved", owner_id=result.owner_id)

    async def get_result(self, owner_id: str) -> CorrelationResult | None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_RESULT, (owner_id,))
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise PersistenceError(
                message=f"Error reading analysis result: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if row is None:
            return None
        try:
            return CorrelationResult.model_validate_json(row[0])
        except ValidationError as exc:
            raise PersistenceError(
                message=f"Stored analysis result for {owner_id!r} is unreadable: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    # ── Helpers ────────────────────────────────────────────────────────

    @staticmethod
    def _row_to_record(row: dict[str, Any]) -> FeedbackRecord:
        readings = [ExposureReading(**r) for r in json.loads(row["readings"] or "[]")]
        return FeedbackRecord(
            record_id=row["record_id"],
            owner_id=row["owner_id"],
            feedback=json.loads(row["feedback"]),
            location=Location(lat=row["lat"], lng=row["lng"]),
            readings=readings,
            created_at=datetime.fromisoformat(row["created_at"]),
        )
