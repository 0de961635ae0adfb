"""
FastAPI router for the songs endpoints.
"""

from __future__ import annotations

from typing import Annotated

import asyncpg
from fastapi import APIRouter, Depends, Path, Query, status

from core import db

from . import schemas, service

router = APIRouter()

SongId = Annotated[int, Path(description="Song id.")]


@router.get(
    "/songs",
    response_model=list[schemas.SongResponse],
    summary="List songs",
)
async def list_songs(
    group: str | None = Query(default=None, description="Case-insensitive substring of the group name."),
    song: str | None = Query(default=None, description="Case-insensitive substring of the song title."),
    page: str | None = Query(default=None, description="1-based page number (default 1)."),
    limit: str | None = Query(default=None, description="Songs per page (default 10)."),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[dict]:
    """
    List songs filtered by group and title, ordered by id.

    Invalid `page`/`limit` values fall back to their defaults.
    """
    return await service.list_songs(pool, group=group, song=song, page=page, limit=limit)


@router.get(
    "/songs/{song_id}/lyrics",
    response_model=schemas.LyricsPageResponse,
    summary="Get song lyrics by verse",
)
async def get_song_lyrics(
    song_id: SongId,
    page: str | None = Query(default=None, description="1-based page number (default 1)."),
    limit: str | None = Query(default=None, description="Verses per page (default 1)."),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    result = await service.song_lyrics(pool, song_id, page=page, limit=limit)
    return {"verses": result.verses, "total": result.total}


@router.post(
    "/songs",
    response_model=schemas.SongCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a song",
)
async def add_song(
    request: schemas.SongCreateRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    """
    Add a song; release date, lyrics and link come from the song-info API.
    """
    song_id = await service.add_song(pool, request)
    return {"id": song_id}


@router.put(
    "/songs/{song_id}",
    response_model=schemas.MessageResponse,
    summary="Replace a song",
)
async def update_song(
    request: schemas.SongUpdateRequest,
    song_id: SongId,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    await service.update_song(pool, song_id, request)
    return {"message": "Song updated."}


@router.delete(
    "/songs/{song_id}",
    response_model=schemas.MessageResponse,
    summary="Delete a song",
)
async def delete_song(
    song_id: SongId,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    await service.delete_song(pool, song_id)
    return {"message": "Song deleted."}
