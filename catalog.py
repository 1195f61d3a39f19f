# catalog.py
"""
Extraction of catalog items from the payloads AnimeUnity embeds in its pages.

The site ships the same kind of data in four different shapes:

- the home feed: a ``layout-items`` element whose ``items-json`` attribute
  holds the latest episodes as JSON
- the home sidebar: plain markup under ``div.home-sidebar``
- the home carousel: a ``the-carousel`` element whose ``animes`` attribute
  holds an entity-encoded JSON array
- archive/search API records: a JSON array returned by ``/archivio/get-animes``

Every parser fails closed: a missing anchor gives an empty list and a broken
record is skipped without affecting the rest of the batch.
"""
import html
import json
import logging
import re
from typing import Any, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from config import settings
from models import CatalogItem, Genre, Movie, TvShow

logger = logging.getLogger(__name__)

PATH_SEPARATOR = re.compile(r'[\\/]')


def get_image_url(raw_path: str, base_url: Optional[str] = None) -> str:
    """
    Map an upstream image path onto the site's image host.
    Example with base https://www.example.so:
        /path/to/img.jpg -> https://img.example.so/anime/img.jpg
    """
    if not raw_path:
        return ""
    file_name = PATH_SEPARATOR.split(raw_path)[-1]
    domain = urlparse(base_url or settings.base_url).netloc.removeprefix("www.")
    return f"https://img.{domain}/anime/{file_name}"


def decode_entities(raw: str) -> str:
    # The parser already unescapes attributes once; only decode what is still encoded
    if "&quot;" in raw:
        return html.unescape(raw)
    return raw


def positive_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return number if number > 0 else 0


def resolve_title(record: dict) -> str:
    return str(record.get("title_eng") or record.get("title") or "").strip()


def last_path_segment(url: str) -> str:
    return url.rstrip('/').rsplit('/', 1)[-1]


def is_movie_label(text: str) -> bool:
    return "movie" in text.lower()


def build_item(is_movie: bool, **fields) -> CatalogItem:
    model_class = Movie if is_movie else TvShow
    return model_class(**fields)


# Home feed: latest episodes, every entry is a show
def parse_latest_episodes(soup: BeautifulSoup) -> List[TvShow]:
    layout_items = soup.select_one('layout-items[items-json]')
    if not layout_items:
        logger.debug("Home feed element not found")
        return []

    raw = layout_items.get('items-json', '')
    if not raw:
        return []
    try:
        payload = json.loads(decode_entities(raw))
    except json.JSONDecodeError as e:
        logger.warning(f"Home feed JSON is malformed: {e}")
        return []

    entries = payload.get('data') if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        logger.warning("Home feed JSON has no items array")
        return []

    shows = []
    seen_ids = set()
    for entry in entries:
        try:
            anime = entry['anime']
            anime_id = str(anime['id'])
            slug = anime['slug']
            if anime_id in seen_ids:
                continue
            seen_ids.add(anime_id)

            title = resolve_title(anime)
            if not title:
                continue
            shows.append(TvShow(
                id=f"{anime_id}-{slug}",
                title=title,
                poster=get_image_url(anime.get('imageurl') or ""),
            ))
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Skipping malformed home feed entry: {e}")
    return shows


# Sidebar: latest additions rendered as markup
def parse_latest_additions(soup: BeautifulSoup) -> List[CatalogItem]:
    sidebar = soup.select_one('div.home-sidebar')
    if not sidebar:
        logger.debug("Home sidebar not found")
        return []

    items = []
    for container in sidebar.select('div.latest-anime-container'):
        link = container.select_one('a.unstile-a')
        href = link.get('href', '') if link else ''
        if not href:
            continue

        title_tag = container.select_one('strong.latest-anime-title')
        title = title_tag.get_text(strip=True) if title_tag else ''
        if not title:
            continue

        img = container.select_one('img')
        type_info = container.select_one('div.latest-anime-info.mt-2.mb-2')
        items.append(build_item(
            is_movie_label(type_info.get_text() if type_info else ''),
            id=last_path_segment(href),
            title=title,
            poster=get_image_url(img.get('src', '') if img else ''),
        ))
    return items


# Carousel: featured titles, "type" is a clean enum here
def parse_featured_anime(soup: BeautifulSoup) -> List[CatalogItem]:
    carousel = soup.select_one('the-carousel[animes]')
    if not carousel:
        logger.debug("Carousel element not found")
        return []

    raw = carousel.get('animes', '')
    if not raw:
        return []
    try:
        records = json.loads(decode_entities(raw))
    except json.JSONDecodeError as e:
        logger.warning(f"Carousel JSON is malformed: {e}")
        return []
    if not isinstance(records, list):
        return []

    items = []
    for record in records:
        if not isinstance(record, dict):
            continue
        anime_id = positive_int(record.get('id'))
        slug = str(record.get('slug') or '')
        title = resolve_title(record)
        if not (anime_id and slug and title):
            logger.debug(f"Skipping incomplete carousel record: {record.get('id')}")
            continue

        try:
            rating = float(record['score']) if record.get('score') not in (None, '') else None
        except (TypeError, ValueError):
            rating = None

        items.append(build_item(
            record.get('type') == "Movie",
            id=f"{anime_id}-{slug}",
            title=title,
            banner=get_image_url(str(record.get('imageurl') or '')),
            overview=str(record.get('plot') or ''),
            rating=rating,
            released=str(record.get('date') or ''),
        ))
    return items


def parse_anime_records(records: list, force_type: Optional[type] = None) -> List[CatalogItem]:
    """
    Map archive/search API records to catalog items.

    ``force_type`` pins every record to Movie or TvShow, used by the movie and
    show listings where the query already filtered on type. Otherwise the
    record's free-text ``type`` decides.
    """
    results = []
    for record in records:
        if not isinstance(record, dict):
            continue
        anime_id = positive_int(record.get('id'))
        slug = str(record.get('slug') or '')
        title = resolve_title(record)
        if not (anime_id and slug and title):
            continue

        if force_type is not None:
            is_movie = force_type is Movie
        else:
            is_movie = is_movie_label(str(record.get('type') or ''))
        results.append(build_item(
            is_movie,
            id=f"{anime_id}-{slug}",
            title=title,
            poster=get_image_url(str(record.get('imageurl') or '')),
        ))
    return results


def parse_genres_json(raw: str) -> List[Genre]:
    if not raw:
        return []
    try:
        entries = json.loads(decode_entities(raw))
    except json.JSONDecodeError as e:
        logger.warning(f"Genre list JSON is malformed: {e}")
        return []
    if not isinstance(entries, list):
        return []

    genres = []
    for entry in entries:
        try:
            genres.append(Genre(id=str(int(entry['id'])), name=str(entry['name'])))
        except (KeyError, TypeError, ValueError):
            continue
    return genres


def parse_archive_genres(soup: BeautifulSoup) -> List[Genre]:
    archive = soup.select_one('archivio')
    return parse_genres_json(archive.get('all_genres', '') if archive else '')
