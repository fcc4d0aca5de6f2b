"""SQLite storage for the member collection."""

from collections.abc import Iterable, Mapping
from pathlib import Path
import sqlite3

from log_config import get_logger
from models import Member
from relations import RelationKind
from tree import FamilyTree

log = get_logger(__name__)

MEMBER_COLUMNS = (
    "id",
    "first_name",
    "last_name",
    "gender",
    "member_type",
    "machzor",
    "is_rabbi",
    "is_yeshiva_rabbi",
    "is_admin",
    "birth_date",
    "death_date",
)


def create_database(db_path: Path | str) -> sqlite3.Connection:
    """Create SQLite database with member and relation tables."""
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA foreign_keys = ON")
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS member (
            id TEXT PRIMARY KEY,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            gender TEXT NOT NULL CHECK (gender IN ('M', 'F')),
            member_type TEXT NOT NULL,
            machzor INTEGER,
            is_rabbi INTEGER NOT NULL DEFAULT 0,
            is_yeshiva_rabbi INTEGER NOT NULL DEFAULT 0,
            is_admin INTEGER NOT NULL DEFAULT 0,
            birth_date TEXT,
            death_date TEXT
        )
    """)

    # One row per adjacency entry: other_id is the relation_type of member_id
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS relation (
            member_id TEXT NOT NULL,
            other_id TEXT NOT NULL,
            relation_type TEXT NOT NULL,
            PRIMARY KEY (member_id, other_id, relation_type),
            FOREIGN KEY (member_id) REFERENCES member(id) ON DELETE CASCADE
        )
    """)

    conn.commit()
    return conn


def _member_row(member: Member) -> tuple:
    return (
        member.id,
        member.first_name,
        member.last_name,
        member.gender.value,
        member.member_type.value,
        member.machzor,
        int(member.is_rabbi),
        int(member.is_yeshiva_rabbi),
        int(member.is_admin),
        member.birth_date,
        member.death_date,
    )


def _write_members(cursor: sqlite3.Cursor, members: Iterable[Member]) -> None:
    members = list(members)
    placeholders = ", ".join("?" for _ in MEMBER_COLUMNS)
    cursor.executemany(
        f"INSERT OR REPLACE INTO member ({', '.join(MEMBER_COLUMNS)}) VALUES ({placeholders})",
        [_member_row(m) for m in members],
    )

    # Adjacency is rewritten wholesale for every member touched
    cursor.executemany("DELETE FROM relation WHERE member_id = ?", [(m.id,) for m in members])
    cursor.executemany(
        "INSERT INTO relation (member_id, other_id, relation_type) VALUES (?, ?, ?)",
        [(m.id, other_id, kind.value) for m in members for kind, other_id in m.neighbors()],
    )


def store_members(conn: sqlite3.Connection, members: Mapping[str, Member]) -> None:
    """Insert or replace every member and their relations."""
    with conn:
        _write_members(conn.cursor(), members.values())
    log.info("members_stored", count=len(members))


def load_members(conn: sqlite3.Connection) -> dict[str, Member]:
    """Read the whole collection back as `{id: Member}`."""
    cursor = conn.cursor()
    members: dict[str, Member] = {}

    cursor.execute(f"SELECT {', '.join(MEMBER_COLUMNS)} FROM member")
    for row in cursor.fetchall():
        member = Member.from_dict(dict(zip(MEMBER_COLUMNS, row)))
        members[member.id] = member

    cursor.execute("SELECT member_id, other_id, relation_type FROM relation")
    for member_id, other_id, relation_type in cursor.fetchall():
        try:
            kind = RelationKind(relation_type)
        except ValueError:
            log.warning("unknown_relation_skipped", member_id=member_id, relation_type=relation_type)
            continue
        members[member_id].add_relation(kind, other_id)

    log.info("members_loaded", count=len(members))
    return members


def save_changes(conn: sqlite3.Connection, tree: FamilyTree) -> None:
    """
    Write the tree's pending changes in one transaction, then clear its tracking.

    Modified and new members are upserted with their relations; deleted
    members are removed together with their relation rows.
    """
    modified = [tree.members[mid] for mid in sorted(tree.modified_ids) if mid in tree.members]
    deleted = sorted(tree.deleted_ids)

    with conn:
        cursor = conn.cursor()
        _write_members(cursor, modified)
        cursor.executemany("DELETE FROM relation WHERE member_id = ?", [(mid,) for mid in deleted])
        cursor.executemany("DELETE FROM member WHERE id = ?", [(mid,) for mid in deleted])

    tree.clear_tracked_changes()
    log.info("changes_saved", modified=len(modified), deleted=len(deleted))
