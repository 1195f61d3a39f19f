# detail.py
"""Parsing of a single ``/anime/{id}`` detail page."""
import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from catalog import build_item, get_image_url, is_movie_label, last_path_segment
from episodes import EPISODES_PER_RANGE, calculate_episode_ranges
from models import CatalogItem, Genre, Movie, Season, TvShow

logger = logging.getLogger(__name__)

DECIMAL_PATTERN = re.compile(r'\d+(?:[.,]\d+)?')
INTEGER_PATTERN = re.compile(r'\d+')


def find_info_value(soup: BeautifulSoup, label: str) -> str:
    """Text of the ``small`` value in the info item whose ``strong`` label contains ``label``."""
    for item in soup.select('div.info-item'):
        strong = item.find('strong')
        if strong and label in strong.get_text():
            value = item.find('small')
            return value.get_text(strip=True) if value else ""
    return ""


def parse_rating(text: str) -> Optional[float]:
    match = DECIMAL_PATTERN.search(text)
    if not match:
        return None
    return float(match.group(0).replace(',', '.'))


def parse_runtime(text: str) -> Optional[int]:
    # "24 min" -> 24
    tokens = text.split()
    if not tokens:
        return None
    match = INTEGER_PATTERN.match(tokens[0])
    return int(match.group(0)) if match else None


def slugify_genre(name: str) -> str:
    return name.lower().replace(' ', '-')


def parse_genres(soup: BeautifulSoup) -> List[Genre]:
    genres = []
    seen = set()
    for wrapper in soup.select('div.info-wrapper'):
        strong = wrapper.find('strong')
        if not strong or 'Generi' not in strong.get_text():
            continue
        for link in wrapper.select('a.genre-link'):
            name = link.get_text().strip().rstrip(',').strip()
            genre_id = slugify_genre(name)
            if not name or genre_id in seen:
                continue
            seen.add(genre_id)
            genres.append(Genre(id=genre_id, name=name))
        break
    return genres


def parse_related(soup: BeautifulSoup) -> List[CatalogItem]:
    """Related titles, all movies first and then all shows."""
    wrapper = soup.select_one('div.related-wrapper')
    if not wrapper:
        return []

    movies, shows = [], []
    for entry in wrapper.select('div.related-item'):
        link = entry.select_one('a.unstile-a')
        href = link.get('href', '') if link else ''
        if not href:
            continue
        title_tag = entry.select_one('strong.related-anime-title')
        title = title_tag.get_text(strip=True) if title_tag else ''
        if not title:
            continue

        img = entry.select_one('img')
        info = entry.select_one('div.related-info')
        item = build_item(
            is_movie_label(info.get_text() if info else ''),
            id=last_path_segment(href),
            title=title,
            poster=get_image_url(img.get('src', '') if img else ''),
        )
        (movies if isinstance(item, Movie) else shows).append(item)
    return movies + shows


def find_video_player(soup: BeautifulSoup) -> Optional[Tag]:
    return soup.find('video-player')


def read_episodes_count(video_player: Optional[Tag]) -> int:
    if video_player is None:
        return 0
    try:
        return int(video_player.get('episodes_count', '0'))
    except (TypeError, ValueError):
        return 0


def build_seasons(show_id: str, episodes_count: int) -> List[Season]:
    if episodes_count <= EPISODES_PER_RANGE:
        return [Season(id=show_id, number=0, title="Episodi")]
    return [
        Season(id=f"{show_id}-{start}-{end}", number=0, title=f"{start}-{end}")
        for start, end in calculate_episode_ranges(episodes_count)
    ]


def _parse_common(soup: BeautifulSoup) -> dict:
    title_tag = soup.select_one('h1.title')
    description = soup.select_one('div.description')
    cover = soup.select_one('img.cover')
    return {
        'title': title_tag.get_text().strip() if title_tag else "",
        'overview': description.get_text().strip() if description else "",
        'poster': get_image_url(cover.get('src', '') if cover else ''),
        'rating': parse_rating(find_info_value(soup, 'Valutazione')),
        'released': find_info_value(soup, 'Anno'),
        'runtime': parse_runtime(find_info_value(soup, 'Durata')),
        'genres': parse_genres(soup),
        'recommendations': parse_related(soup),
    }


def parse_movie_detail(soup: BeautifulSoup, movie_id: str) -> Movie:
    return Movie(id=movie_id, **_parse_common(soup))


def parse_tv_show_detail(soup: BeautifulSoup, show_id: str) -> Tuple[TvShow, int]:
    """Returns the show together with the episode count read from the player."""
    episodes_count = read_episodes_count(find_video_player(soup))
    show = TvShow(
        id=show_id,
        seasons=build_seasons(show_id, episodes_count),
        **_parse_common(soup),
    )
    logger.debug(f"Parsed show {show_id}: {episodes_count} episodes in {len(show.seasons)} seasons")
    return show, episodes_count
