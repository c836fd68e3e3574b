"""
SQLite storage backend for Idea Swipe.

Implements both store interfaces on a relational schema:

    ideas(id PK, title, description, tags JSON, author_id, image_ref, created_at)
    interactions(id PK, user_id, idea_id FK -> ideas.id, swipe, rating,
                 created_at, UNIQUE(user_id, idea_id))

The UNIQUE constraint is the upsert key. Interactions are written with a
single ``INSERT ... ON CONFLICT(user_id, idea_id) DO UPDATE`` statement, so
two concurrent judgments for the same pair can neither duplicate the row nor
lose an update, even across processes sharing the database file.

Timestamps are stored as fixed-width ISO-8601 UTC strings, which sort
lexicographically in time order.
"""

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Callable, Iterable, Iterator, List, Optional, Set

from ideaswipe.config import SQLITE_PATH, SQLITE_TIMEOUT
from ideaswipe.errors import ConflictError, NotFoundError, StoreUnavailableError
from ideaswipe.models import Idea, IdeaDraft, Interaction, validate_judgment
from ideaswipe.models.timestamps import parse_iso, to_iso, utc_now
from ideaswipe.storage.base import Storage

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS ideas (
    id          TEXT PRIMARY KEY,
    title       TEXT NOT NULL,
    description TEXT NOT NULL,
    tags        TEXT NOT NULL,
    author_id   TEXT NOT NULL,
    image_ref   TEXT,
    created_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_ideas_created ON ideas (created_at DESC, id ASC);
CREATE INDEX IF NOT EXISTS idx_ideas_author ON ideas (author_id);

CREATE TABLE IF NOT EXISTS interactions (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL,
    idea_id     TEXT NOT NULL REFERENCES ideas (id),
    swipe       INTEGER NOT NULL CHECK (swipe IN (0, 1)),
    rating      INTEGER CHECK (rating IS NULL OR rating BETWEEN 1 AND 10),
    created_at  TEXT NOT NULL,
    UNIQUE (user_id, idea_id)
);

CREATE INDEX IF NOT EXISTS idx_interactions_idea ON interactions (idea_id);
"""

IDEA_COLUMNS = "id, title, description, tags, author_id, image_ref, created_at"
INTERACTION_COLUMNS = "id, user_id, idea_id, swipe, rating, created_at"

# A rating omitted from the judgment keeps the stored one.
UPSERT_INTERACTION_SQL = f"""
INSERT INTO interactions ({INTERACTION_COLUMNS})
VALUES (?, ?, ?, ?, ?, ?)
ON CONFLICT (user_id, idea_id) DO UPDATE SET
    swipe = excluded.swipe,
    rating = COALESCE(excluded.rating, interactions.rating)
RETURNING {INTERACTION_COLUMNS}
"""

ORDER_NEWEST_FIRST = "ORDER BY created_at DESC, id ASC"

# UPSERT ... RETURNING
MIN_SQLITE_VERSION = (3, 35, 0)


class SQLiteStorage(Storage):
    """
    SQLite-backed storage implementation.

    One connection is shared by all threads and guarded by a lock; the
    database itself enforces the one-row-per-pair invariant.

    Args:
        db_path: Database file path, or ":memory:". Defaults to config.SQLITE_PATH.
        timeout: Seconds to wait on a locked database. Defaults to config.SQLITE_TIMEOUT.
        clock: Callable returning the current time. Defaults to UTC now.
    """

    def __init__(
        self,
        db_path: str = None,
        timeout: float = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db_path = str(db_path if db_path is not None else SQLITE_PATH)
        self.timeout = timeout if timeout is not None else SQLITE_TIMEOUT
        self._clock = clock or utc_now
        self._lock = Lock()
        self._conn = self._connect()
        self._init_schema()
        logger.info("SQLiteStorage initialized with db: %s", self.db_path)

    @property
    def name(self) -> str:
        return "sqlite"

    # =========================================================================
    # Connection handling
    # =========================================================================

    def _connect(self) -> sqlite3.Connection:
        """Open the database connection with the pragmas this schema relies on."""
        if sqlite3.sqlite_version_info < MIN_SQLITE_VERSION:
            required = ".".join(str(part) for part in MIN_SQLITE_VERSION)
            raise StoreUnavailableError(
                f"SQLite {sqlite3.sqlite_version} is too old for the sqlite backend; "
                f"{required} or newer is required"
            )

        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            conn = sqlite3.connect(
                self.db_path,
                timeout=self.timeout,
                check_same_thread=False,
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys=ON")
            if self.db_path != ":memory:":
                conn.execute("PRAGMA journal_mode=WAL")
            return conn
        except (sqlite3.Error, OSError) as e:
            raise StoreUnavailableError(f"Cannot open SQLite database {self.db_path}: {e}") from e

    def _init_schema(self) -> None:
        with self._transaction() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block in one transaction, translating driver errors.

        Commits on success and rolls back on any error, so a write either
        fully applies or leaves no trace.
        """
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except sqlite3.IntegrityError as e:
                self._conn.rollback()
                raise ConflictError(f"Constraint violation: {e}") from e
            except sqlite3.Error as e:
                self._conn.rollback()
                raise StoreUnavailableError(f"SQLite error: {e}") from e
            except Exception:
                self._conn.rollback()
                raise

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()
        logger.info("SQLiteStorage closed")

    # =========================================================================
    # Row conversion
    # =========================================================================

    @staticmethod
    def _row_to_idea(row: sqlite3.Row) -> Idea:
        return Idea(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            tags=json.loads(row["tags"]),
            author_id=row["author_id"],
            image_ref=row["image_ref"],
            created_at=parse_iso(row["created_at"]),
        )

    @staticmethod
    def _row_to_interaction(row: sqlite3.Row) -> Interaction:
        return Interaction(
            id=row["id"],
            user_id=row["user_id"],
            idea_id=row["idea_id"],
            swipe=bool(row["swipe"]),
            rating=row["rating"],
            created_at=parse_iso(row["created_at"]),
        )

    # =========================================================================
    # IdeaStore
    # =========================================================================

    def create_idea(self, draft: IdeaDraft) -> Idea:
        idea = Idea.from_draft(draft, created_at=self._clock())

        with self._transaction() as conn:
            conn.execute(
                f"INSERT INTO ideas ({IDEA_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    idea.id,
                    idea.title,
                    idea.description,
                    json.dumps(idea.tags),
                    idea.author_id,
                    idea.image_ref,
                    to_iso(idea.created_at),
                ),
            )

        logger.debug("Stored idea %s (sqlite)", idea.id)
        return idea

    def list_excluding(self, excluded_ids: Iterable[str]) -> List[Idea]:
        # json_each keeps the exclusion set to a single bound parameter
        excluded = json.dumps(sorted(set(excluded_ids)))
        with self._transaction() as conn:
            rows = conn.execute(
                f"SELECT {IDEA_COLUMNS} FROM ideas "
                f"WHERE id NOT IN (SELECT value FROM json_each(?)) "
                f"{ORDER_NEWEST_FIRST}",
                (excluded,),
            ).fetchall()
        return [self._row_to_idea(row) for row in rows]

    def list_by_author(self, author_id: str) -> List[Idea]:
        with self._transaction() as conn:
            rows = conn.execute(
                f"SELECT {IDEA_COLUMNS} FROM ideas WHERE author_id = ? {ORDER_NEWEST_FIRST}",
                (author_id,),
            ).fetchall()
        return [self._row_to_idea(row) for row in rows]

    def get_idea(self, idea_id: str) -> Optional[Idea]:
        with self._transaction() as conn:
            row = conn.execute(
                f"SELECT {IDEA_COLUMNS} FROM ideas WHERE id = ?",
                (idea_id,),
            ).fetchone()
        return self._row_to_idea(row) if row else None

    # =========================================================================
    # InteractionStore
    # =========================================================================

    def upsert_interaction(
        self,
        user_id: str,
        idea_id: str,
        swipe: bool,
        rating: Optional[int] = None,
    ) -> Interaction:
        validate_judgment(user_id, idea_id, swipe, rating)

        params = (
            str(uuid.uuid4()),
            user_id,
            idea_id,
            int(swipe),
            rating,
            to_iso(self._clock()),
        )

        try:
            with self._transaction() as conn:
                # Exhaust the cursor so the statement is finished before commit
                row = conn.execute(UPSERT_INTERACTION_SQL, params).fetchall()[0]
        except ConflictError as e:
            # The only foreign key on interactions points at ideas.id
            if "FOREIGN KEY" in str(e):
                raise NotFoundError(f"Idea not found: {idea_id}") from e
            raise

        interaction = self._row_to_interaction(row)
        logger.debug("Upserted interaction %s for idea %s (sqlite)", interaction.id, idea_id)
        return interaction

    def get_for_user(self, idea_id: str, user_id: str) -> Optional[Interaction]:
        with self._transaction() as conn:
            row = conn.execute(
                f"SELECT {INTERACTION_COLUMNS} FROM interactions WHERE idea_id = ? AND user_id = ?",
                (idea_id, user_id),
            ).fetchone()
        return self._row_to_interaction(row) if row else None

    def get_all_for_idea(self, idea_id: str) -> List[Interaction]:
        with self._transaction() as conn:
            rows = conn.execute(
                f"SELECT {INTERACTION_COLUMNS} FROM interactions WHERE idea_id = ? ORDER BY rowid",
                (idea_id,),
            ).fetchall()
        return [self._row_to_interaction(row) for row in rows]

    def get_idea_ids_for_user(self, user_id: str) -> Set[str]:
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT idea_id FROM interactions WHERE user_id = ?",
                (user_id,),
            ).fetchall()
        return {row["idea_id"] for row in rows}

    # =========================================================================
    # Maintenance
    # =========================================================================

    def count_interactions(self, user_id: str = None, idea_id: str = None) -> int:
        """Count interaction rows, optionally filtered by user and/or idea."""
        clauses, params = [], []
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if idea_id is not None:
            clauses.append("idea_id = ?")
            params.append(idea_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with self._transaction() as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM interactions {where}", tuple(params)).fetchone()
        return row[0]
