"""
tutorial_hub/db.py
───────────────────────────────────────────────────────────────────────────────
sqlite3 storage for tutorials.

Schema
──────
tutorials   one row per tutorial; `kind` says whether the body lives in
            `content` (flat) or in the chapters table (chaptered).
            github_url is UNIQUE – the last line of defence against two
            imports of the same URL racing each other.
chapters    (tutorial_id, position) PRIMARY KEY, deleted with the parent.

A connection is opened per call; sqlite's busy timeout surfaces as
sqlite3.OperationalError("database is locked").
"""

from __future__ import annotations

import re
import secrets
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from pydantic import TypeAdapter

from .errors import DuplicateUrl, InvalidId, NotFound
from .models import Chapter, ChapteredTutorial, FlatTutorial, Tutorial, TutorialSummary

ID_RE = re.compile(r"^[0-9a-f]{24}$")

SCHEMA = """
CREATE TABLE IF NOT EXISTS tutorials (
    id              TEXT PRIMARY KEY,
    kind            TEXT NOT NULL CHECK (kind IN ('flat', 'chaptered')),
    title           TEXT NOT NULL,
    description     TEXT,
    content         TEXT,
    github_url      TEXT NOT NULL UNIQUE,
    author          TEXT,
    category        TEXT,
    difficulty      TEXT NOT NULL DEFAULT 'Beginner'
                    CHECK (difficulty IN ('Beginner', 'Intermediate', 'Advanced')),
    read_time       INTEGER CHECK (read_time >= 1),
    total_chapters  INTEGER NOT NULL DEFAULT 0 CHECK (total_chapters >= 0),
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS tutorials_created_at ON tutorials (created_at);
CREATE INDEX IF NOT EXISTS tutorials_title_author ON tutorials (title, author);

CREATE TABLE IF NOT EXISTS chapters (
    tutorial_id  TEXT NOT NULL REFERENCES tutorials (id) ON DELETE CASCADE,
    position     INTEGER NOT NULL CHECK (position >= 1),
    title        TEXT NOT NULL,
    content      TEXT NOT NULL,
    read_time    INTEGER CHECK (read_time >= 1),
    PRIMARY KEY (tutorial_id, position)
);
"""

SUMMARY_COLUMNS = (
    "id, title, description, author, category, difficulty, "
    "read_time, total_chapters, created_at"
)
FILTER_COLUMNS = {"title", "author", "github_url", "category", "difficulty", "kind"}

TUTORIAL = TypeAdapter(Tutorial)


def new_id() -> str:
    return secrets.token_hex(12)


def check_id(tutorial_id: str) -> str:
    if not ID_RE.match(tutorial_id or ""):
        raise InvalidId("Invalid tutorial ID")
    return tutorial_id


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class TutorialStore:
    def __init__(self, path: str | Path, timeout: float = 5.0):
        self.path = Path(path)
        self.timeout = timeout

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.path.as_posix(), timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def init_schema(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            conn.executescript(SCHEMA)

    # ── writes ───────────────────────────────────────────────────────────
    def insert(self, tutorial: FlatTutorial | ChapteredTutorial) -> str:
        """Store a new tutorial and return its id."""
        tutorial_id = new_id()
        stamp = _now()
        chapters = tutorial.chapters if isinstance(tutorial, ChapteredTutorial) else []
        content = tutorial.content if isinstance(tutorial, FlatTutorial) else None

        try:
            with self.connect() as conn:
                conn.execute(
                    """INSERT INTO tutorials
                         (id, kind, title, description, content, github_url, author,
                          category, difficulty, read_time, total_chapters,
                          created_at, updated_at)
                       VALUES (?,?,?,?,?,?,?,?,?,?,?,?,?)""",
                    (
                        tutorial_id,
                        tutorial.kind,
                        tutorial.title,
                        tutorial.description,
                        content,
                        tutorial.github_url,
                        tutorial.author,
                        tutorial.category,
                        tutorial.difficulty.value,
                        tutorial.read_time,
                        tutorial.total_chapters,
                        stamp,
                        stamp,
                    ),
                )
                conn.executemany(
                    "INSERT INTO chapters VALUES (?,?,?,?,?)",
                    [(tutorial_id, ch.order, ch.title, ch.content, ch.read_time) for ch in chapters],
                )
        except sqlite3.IntegrityError as e:
            if "github_url" in str(e):
                raise DuplicateUrl("Tutorial with this GitHub URL already exists") from e
            raise
        return tutorial_id

    def delete(self, tutorial_id: str) -> dict:
        """Remove a tutorial (and its chapters); return its id and title."""
        check_id(tutorial_id)
        with self.connect() as conn:
            row = conn.execute(
                "SELECT id, title FROM tutorials WHERE id = ?", (tutorial_id,)
            ).fetchone()
            if row is None:
                raise NotFound("Tutorial not found")
            conn.execute("DELETE FROM tutorials WHERE id = ?", (tutorial_id,))
        return {"id": row["id"], "title": row["title"]}

    # ── reads ────────────────────────────────────────────────────────────
    def get(self, tutorial_id: str) -> FlatTutorial | ChapteredTutorial:
        check_id(tutorial_id)
        with self.connect() as conn:
            row = conn.execute(
                "SELECT * FROM tutorials WHERE id = ?", (tutorial_id,)
            ).fetchone()
            if row is None:
                raise NotFound("Tutorial not found")
            fields = dict(row)
            if fields["kind"] == "chaptered":
                fields["chapters"] = [
                    Chapter(title=c["title"], content=c["content"],
                            order=c["position"], read_time=c["read_time"])
                    for c in conn.execute(
                        "SELECT title, content, position, read_time FROM chapters "
                        "WHERE tutorial_id = ? ORDER BY position",
                        (tutorial_id,),
                    )
                ]
        return TUTORIAL.validate_python(fields)

    def list_summaries(self) -> list[TutorialSummary]:
        with self.connect() as conn:
            rows = conn.execute(
                f"SELECT {SUMMARY_COLUMNS} FROM tutorials ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return [TutorialSummary(**dict(r)) for r in rows]

    def find_one(self, **filters: str | None) -> TutorialSummary | None:
        """First tutorial whose columns equal every keyword given.

        A None value matches SQL NULL.
        """
        unknown = set(filters) - FILTER_COLUMNS
        if unknown:
            raise ValueError(f"Cannot filter on {sorted(unknown)}")

        clauses, params = [], []
        for col, value in sorted(filters.items()):
            if value is None:
                clauses.append(f"{col} IS NULL")
            else:
                clauses.append(f"{col} = ?")
                params.append(value)
        where = " AND ".join(clauses) or "1"

        with self.connect() as conn:
            row = conn.execute(
                f"SELECT {SUMMARY_COLUMNS} FROM tutorials WHERE {where} LIMIT 1", params
            ).fetchone()
        return TutorialSummary(**dict(row)) if row else None

    def exists_url(self, github_url: str) -> bool:
        return self.find_one(github_url=github_url) is not None

    def counts(self) -> dict[str, int]:
        with self.connect() as conn:
            kinds = {
                kind: n for kind, n in conn.execute(
                    "SELECT kind, COUNT(*) FROM tutorials GROUP BY kind"
                )
            }
            chapters = conn.execute("SELECT COUNT(*) FROM chapters").fetchone()[0]
        return {
            "flat": kinds.get("flat", 0),
            "chaptered": kinds.get("chaptered", 0),
            "chapters": chapters,
        }
