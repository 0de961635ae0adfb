"""
Song-info (enrichment) HTTP client.

Used endpoint:
- GET /info?group=...&song=...  -> {"releaseDate": "...", "text": "...", "link": "..."}
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


# Enrichment failures are explicit and separable from database errors.
class SongInfoError(RuntimeError):
    pass


class SongDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    release_date: str = Field(default="", alias="releaseDate")
    text: str = ""
    link: str = ""

    @field_validator("release_date", "text", "link", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        # Missing or null fields are stored as empty strings.
        return "" if value is None else value


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise SongInfoError("EXTERNAL_API_URL is empty.")
    return base_url.rstrip("/")


async def fetch_song_detail(
    *,
    base_url: str,
    group: str,
    song: str,
    timeout_s: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SongDetail:
    """
    Look up release date, lyrics and link for `group` / `song`.

    Query parameters are encoded by httpx, so names containing `&`, `#` or
    spaces reach the upstream intact.
    """
    base_url = _normalize_base_url(base_url)

    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout_s, transport=transport) as client:
            resp = await client.get("/info", params={"group": group, "song": song})
    except httpx.HTTPError as exc:
        raise SongInfoError(f"Song info request failed: {exc.__class__.__name__}") from exc

    if resp.status_code != 200:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:200]
        raise SongInfoError(f"Song info request failed: {resp.status_code} {body}")

    try:
        data: Any = resp.json()
    except ValueError as exc:
        raise SongInfoError("Song info response is not valid JSON.") from exc

    if not isinstance(data, dict):
        raise SongInfoError("Song info response is not a JSON object.")

    try:
        return SongDetail.model_validate(data)
    except ValidationError as exc:
        raise SongInfoError("Song info response has an unexpected shape.") from exc
