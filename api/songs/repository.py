"""
Songs persistence.
This module is where songs-related SQL lives.

Every statement runs through `db.run_in_transaction`, so a failure part-way
through a unit of work never leaves partial writes behind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import asyncpg

from core import db

SONG_COLUMNS = "id, group_name, song_name, release_date, lyrics, link"

# ids are SERIAL (int4); anything outside that range cannot name a row.
MIN_SONG_ID = -(2**31)
MAX_SONG_ID = 2**31 - 1


class SongNotFoundError(LookupError):
    def __init__(self, song_id: int) -> None:
        super().__init__(f"Song {song_id} not found.")
        self.song_id = song_id


def _is_song_id(song_id: int) -> bool:
    return MIN_SONG_ID <= song_id <= MAX_SONG_ID


@dataclass(frozen=True)
class SongFilters:
    group: str = ""
    song: str = ""
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _like_escape(value: str) -> str:
    """
    Escape LIKE wildcards so user input is matched as a literal substring.
    Postgres uses backslash as the default LIKE escape character.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_list_query(filters: SongFilters) -> tuple[str, list[Any]]:
    """
    Build the filtered, paginated SELECT for the list endpoint.

    Returns (sql, args) with asyncpg positional placeholders numbered in the
    order the arguments appear.
    """
    conditions: list[str] = []
    args: list[Any] = []

    if filters.group:
        args.append(f"%{_like_escape(filters.group)}%")
        conditions.append(f"group_name ILIKE ${len(args)}")
    if filters.song:
        args.append(f"%{_like_escape(filters.song)}%")
        conditions.append(f"song_name ILIKE ${len(args)}")

    sql = f"SELECT {SONG_COLUMNS} FROM songs"
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)

    args.extend([filters.limit, filters.offset])
    sql += f" ORDER BY id LIMIT ${len(args) - 1} OFFSET ${len(args)}"
    return sql, args


def row_to_song(row: dict[str, Any]) -> dict[str, Any]:
    """
    Map a `songs` row onto the API field names. NULL text reads back as "".
    """
    return {
        "id": int(row["id"]),
        "group": str(row["group_name"] or ""),
        "song": str(row["song_name"] or ""),
        "releaseDate": str(row["release_date"] or ""),
        "text": str(row["lyrics"] or ""),
        "link": str(row["link"] or ""),
    }


async def create_table(pool: asyncpg.Pool) -> None:
    """
    Create the songs table if it does not exist yet. Safe to run on every start.
    """
    await pool.execute(
        """
        CREATE TABLE IF NOT EXISTS songs (
            id SERIAL PRIMARY KEY,
            group_name VARCHAR(255) NOT NULL,
            song_name VARCHAR(255) NOT NULL,
            release_date VARCHAR(50),
            lyrics TEXT,
            link TEXT
        )
        """
    )


async def list_songs(pool: asyncpg.Pool, filters: SongFilters) -> list[dict[str, Any]]:
    sql, args = build_list_query(filters)

    async def _work(conn: asyncpg.Connection) -> list[dict[str, Any]]:
        rows = await conn.fetch(sql, *args)
        return [db.record_to_dict(r) for r in rows]

    return await db.run_in_transaction(pool, _work)


async def get_lyrics(pool: asyncpg.Pool, song_id: int) -> str:
    if not _is_song_id(song_id):
        raise SongNotFoundError(song_id)

    async def _work(conn: asyncpg.Connection) -> str:
        row = await conn.fetchrow("SELECT lyrics FROM songs WHERE id = $1", song_id)
        if row is None:
            raise SongNotFoundError(song_id)
        return str(row["lyrics"] or "")

    return await db.run_in_transaction(pool, _work)


async def insert_song(
    pool: asyncpg.Pool,
    *,
    group: str,
    song: str,
    release_date: str,
    lyrics: str,
    link: str,
) -> int:
    async def _work(conn: asyncpg.Connection) -> int:
        row = await conn.fetchrow(
            """
            INSERT INTO songs (group_name, song_name, release_date, lyrics, link)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING id
            """,
            group,
            song,
            release_date,
            lyrics,
            link,
        )
        if row is None or "id" not in row:
            raise RuntimeError("Failed to insert song.")
        return int(row["id"])

    return await db.run_in_transaction(pool, _work)


async def update_song(
    pool: asyncpg.Pool,
    song_id: int,
    *,
    group: str,
    song: str,
    release_date: str,
    lyrics: str,
    link: str,
) -> int:
    """
    Overwrite all mutable columns of one song. Returns the number of rows matched.
    """
    if not _is_song_id(song_id):
        return 0

    async def _work(conn: asyncpg.Connection) -> int:
        status = await conn.execute(
            """
            UPDATE songs
            SET group_name = $1,
                song_name = $2,
                release_date = $3,
                lyrics = $4,
                link = $5
            WHERE id = $6
            """,
            group,
            song,
            release_date,
            lyrics,
            link,
            song_id,
        )
        return db.rows_affected(status)

    return await db.run_in_transaction(pool, _work)


async def delete_song(pool: asyncpg.Pool, song_id: int) -> None:
    if not _is_song_id(song_id):
        raise SongNotFoundError(song_id)

    async def _work(conn: asyncpg.Connection) -> None:
        status = await conn.execute("DELETE FROM songs WHERE id = $1", song_id)
        if db.rows_affected(status) == 0:
            raise SongNotFoundError(song_id)

    await db.run_in_transaction(pool, _work)
