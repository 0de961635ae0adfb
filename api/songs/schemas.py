"""
Pydantic schemas for the songs endpoints.

JSON field names follow the public API (`song`, `releaseDate`, `text`);
Python attributes use snake_case through aliases.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SongCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    group: str = Field(..., min_length=1, max_length=255)
    song: str = Field(..., min_length=1, max_length=255)


class SongUpdateRequest(BaseModel):
    """
    Full replacement of the mutable fields; anything omitted is stored as "".
    """

    model_config = ConfigDict(populate_by_name=True)

    group: str = Field(default="", max_length=255)
    song: str = Field(default="", max_length=255)
    release_date: str = Field(default="", alias="releaseDate", max_length=50)
    text: str = ""
    link: str = ""


class SongResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    group: str
    song: str
    release_date: str = Field(..., alias="releaseDate")
    text: str
    link: str


class LyricsPageResponse(BaseModel):
    verses: list[str]
    total: int


class SongCreatedResponse(BaseModel):
    id: int


class MessageResponse(BaseModel):
    message: str
