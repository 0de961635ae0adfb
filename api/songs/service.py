"""
Songs business logic.

Scope:
- normalize list/lyrics pagination input
- enrich new songs through the external song-info API
- map data-layer failures onto HTTP errors with short, non-sensitive messages
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg
from fastapi import HTTPException, status

from core import settings, song_info

from . import lyrics, repository, schemas

DEFAULT_LIST_LIMIT = 10
DEFAULT_VERSES_PER_PAGE = 1

# LIMIT/OFFSET are bigint in Postgres.
MAX_BIGINT = 2**63 - 1

# Driver-side failures that mean "the database did not do the work".
DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

logger = logging.getLogger(__name__)


def normalize_page(raw: Any, default: int) -> int:
    """
    Parse a raw query-string value into a positive int.

    Missing, unparsable, < 1 or beyond bigint values become `default`;
    pagination input never fails a request.
    """
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if 1 <= value <= MAX_BIGINT else default


def _db_failure(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Song not found.")


async def list_songs(
    pool: asyncpg.Pool,
    *,
    group: str | None = None,
    song: str | None = None,
    page: Any = None,
    limit: Any = None,
) -> list[dict[str, Any]]:
    page_number = normalize_page(page, 1)
    page_size = normalize_page(limit, DEFAULT_LIST_LIMIT)
    if (page_number - 1) * page_size > MAX_BIGINT:
        page_number = 1

    filters = repository.SongFilters(
        group=group or "",
        song=song or "",
        page=page_number,
        limit=page_size,
    )
    try:
        rows = await repository.list_songs(pool, filters)
    except DB_ERRORS as exc:
        logger.exception(
            "song_list_failed group=%r song=%r page=%s limit=%s",
            filters.group,
            filters.song,
            filters.page,
            filters.limit,
        )
        raise _db_failure("Database error.") from exc

    return [repository.row_to_song(row) for row in rows]


async def song_lyrics(
    pool: asyncpg.Pool,
    song_id: int,
    *,
    page: Any = None,
    limit: Any = None,
) -> lyrics.LyricsPage:
    try:
        text = await repository.get_lyrics(pool, song_id)
    except repository.SongNotFoundError as exc:
        raise _not_found() from exc
    except DB_ERRORS as exc:
        logger.exception("song_lyrics_failed song_id=%s", song_id)
        raise _db_failure("Database error.") from exc

    return lyrics.paginate_verses(
        text,
        page=normalize_page(page, 1),
        limit=normalize_page(limit, DEFAULT_VERSES_PER_PAGE),
    )


async def add_song(
    pool: asyncpg.Pool,
    payload: schemas.SongCreateRequest,
    *,
    base_url: str | None = None,
    timeout_s: float | None = None,
) -> int:
    """
    Enrich and store a new song. Nothing is written unless enrichment succeeds.
    """
    logger.info("song_create_requested group=%r song=%r", payload.group, payload.song)

    try:
        detail = await song_info.fetch_song_detail(
            base_url=settings.external_api_url() if base_url is None else base_url,
            group=payload.group,
            song=payload.song,
            timeout_s=settings.external_api_timeout_s() if timeout_s is None else timeout_s,
        )
    except song_info.SongInfoError as exc:
        logger.error("song_info_failed group=%r song=%r error=%s", payload.group, payload.song, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch song info.",
        ) from exc

    try:
        song_id = await repository.insert_song(
            pool,
            group=payload.group,
            song=payload.song,
            release_date=detail.release_date,
            lyrics=detail.text,
            link=detail.link,
        )
    except DB_ERRORS as exc:
        logger.exception("song_insert_failed group=%r song=%r", payload.group, payload.song)
        raise _db_failure("Failed to add song.") from exc

    logger.info("song_created song_id=%s", song_id)
    return song_id


async def update_song(pool: asyncpg.Pool, song_id: int, payload: schemas.SongUpdateRequest) -> None:
    try:
        matched = await repository.update_song(
            pool,
            song_id,
            group=payload.group,
            song=payload.song,
            release_date=payload.release_date,
            lyrics=payload.text,
            link=payload.link,
        )
    except DB_ERRORS as exc:
        logger.exception("song_update_failed song_id=%s", song_id)
        raise _db_failure("Failed to update song.") from exc

    # Success is reported even when no row matched; see DESIGN.md.
    if matched == 0:
        logger.warning("song_update_no_match song_id=%s", song_id)
    else:
        logger.info("song_updated song_id=%s", song_id)


async def delete_song(pool: asyncpg.Pool, song_id: int) -> None:
    try:
        await repository.delete_song(pool, song_id)
    except repository.SongNotFoundError as exc:
        raise _not_found() from exc
    except DB_ERRORS as exc:
        logger.exception("song_delete_failed song_id=%s", song_id)
        raise _db_failure("Failed to delete song.") from exc

    logger.info("song_deleted song_id=%s", song_id)
