from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from core import db, song_info
from songs import repository
from tests.support.fakes import FakeSongStore


@pytest.fixture
def fake_store(monkeypatch) -> FakeSongStore:
    store = FakeSongStore()
    for name in ("list_songs", "get_lyrics", "insert_song", "update_song", "delete_song"):
        monkeypatch.setattr(repository, name, getattr(store, name))
    return store


@pytest.fixture
def song_info_stub(monkeypatch):
    """
    Replace the enrichment call. Tests set `.detail` or `.error` and inspect `.calls`.
    """

    class _Stub:
        def __init__(self) -> None:
            self.detail = song_info.SongDetail(releaseDate="16.07.2006", text="Verse", link="http://x")
            self.error: Exception | None = None
            self.calls: list[dict[str, Any]] = []

        async def __call__(self, **kwargs: Any) -> song_info.SongDetail:
            self.calls.append(kwargs)
            if self.error is not None:
                raise self.error
            return self.detail

    stub = _Stub()
    monkeypatch.setattr(song_info, "fetch_song_detail", stub)
    return stub


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("EXTERNAL_API_URL", "http://song-info.test")
    import main

    main.app.dependency_overrides[db.get_pool] = lambda: object()
    try:
        yield main.app
    finally:
        main.app.dependency_overrides.clear()


@pytest.fixture
def client(app, fake_store, song_info_stub) -> TestClient:
    # No `with` block: the lifespan (real pool) is not started.
    return TestClient(app)
