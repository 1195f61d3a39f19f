"""Pytest configuration and test helpers."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable
from urllib.parse import quote

import pytest


# Ensure the top-level modules are importable when running tests without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from session import session_state  # noqa: E402


BASE_URL = "https://www.animeunity.so"


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture(autouse=True)
def reset_session_state():
    """The session state is process-wide; start every test from scratch."""

    session_state.cookie_header = ""
    session_state.csrf_token = ""
    yield


def _related_item(href: str, title: str, info: str) -> str:
    return f"""
      <div class="related-item">
        <a class="unstile-a" href="{href}">
          <img src="/storage/covers/{href.rsplit('/', 1)[-1]}.jpg">
          <strong class="related-anime-title">{title}</strong>
          <div class="related-info">{info}</div>
        </a>
      </div>"""


@pytest.fixture
def detail_page() -> Callable[..., str]:
    """Build a detail page with a configurable player element."""

    def build(
        *,
        episodes_count: int | None = 12,
        episodes: list[dict[str, Any]] | None = None,
        embed_url: str = "https://vixcloud.co/embed/1000",
        with_player: bool = True,
    ) -> str:
        player = ""
        if with_player:
            attrs = [f'embed_url="{embed_url}"']
            if episodes_count is not None:
                attrs.append(f'episodes_count="{episodes_count}"')
            if episodes is not None:
                attrs.append(f'episodes="{quote(json.dumps(episodes))}"')
            player = f"<video-player {' '.join(attrs)}></video-player>"

        related = "".join(
            [
                _related_item("https://www.animeunity.so/anime/10-show-a", "Show A", "TV - 2019"),
                _related_item("https://www.animeunity.so/anime/11-movie-b", "Movie B", "Movie - 2020"),
                _related_item("https://www.animeunity.so/anime/12-untitled", "", "TV"),
                _related_item("https://www.animeunity.so/anime/13-show-c", "Show C", "ONA"),
                _related_item("https://www.animeunity.so/anime/14-movie-d", "Movie D", "movie"),
            ]
        )
        return f"""
        <html><body>
          <h1 class="title"> One Piece </h1>
          <img class="cover" src="https://www.animeunity.so/storage/covers/onepiece.jpg">
          <div class="description">Pirates looking for a treasure.</div>
          <div class="info-item"><strong>Valutazione</strong><small>8.62</small></div>
          <div class="info-item"><strong>Anno</strong><small>1999</small></div>
          <div class="info-item"><strong>Durata</strong><small>24 min</small></div>
          <div class="info-wrapper">
            <strong>Generi</strong>
            <a class="genre-link">Avventura,</a>
            <a class="genre-link">Commedia Romantica,</a>
            <a class="genre-link">Azione</a>
          </div>
          <div class="related-wrapper">{related}</div>
          {player}
        </body></html>
        """

    return build


@pytest.fixture
def archive_page() -> str:
    genres = json.dumps([{"id": 4, "name": "Azione"}, {"id": 7, "name": "Commedia"}, {"name": "broken"}])
    escaped = genres.replace('"', "&quot;")
    return f"""
    <html><head><meta name="csrf-token" content="token-123"></head>
    <body><archivio all_genres="{escaped}"></archivio></body></html>
    """
