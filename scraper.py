# scraper.py
"""
AnimeUnity catalog adapter (animeunity.so, Italian anime streaming).

This module is the surface the host application talks to. It provides async
functions to:
- List the home page categories (latest episodes, latest additions, featured)
- Search the archive, or list genres when the query is empty
- Page through movies, shows and genres (30 items per page)
- Read a movie or show detail page, including the season/range list
- List the episodes of a season or of one 120-episode range
- Resolve the player embed URL of a movie or an episode

None of these functions raise: a transport error, a page that no longer
matches the expected markup or a missing entity all end up as an empty list
or a placeholder entity with an empty title. Failures are logged.
"""
from httpx import AsyncClient
import logging
from typing import List, Optional, Union

from catalog import (
    parse_anime_records,
    parse_archive_genres,
    parse_featured_anime,
    parse_latest_additions,
    parse_latest_episodes,
)
from client import ScraperError, bootstrap_session, fetch_document, query_archive
from config import settings
from detail import find_video_player, parse_movie_detail, parse_tv_show_detail, read_episodes_count
from episodes import (
    EPISODES_PER_RANGE,
    build_episodes,
    build_range_episodes,
    decode_player_episodes,
    fetch_episode_range,
    numeric_anime_id,
    parse_season_id,
)
from models import CatalogItem, Category, Episode, Genre, Movie, Server, TvShow
from servers import resolve_servers

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

PROVIDER_NAME = "AnimeUnity"
PROVIDER_LANGUAGE = "it"
PROVIDER_LOGO = f"{settings.base_url}/images/scritta2.png"
PAGE_SIZE = 30


def page_offset(page: int) -> int:
    return (max(page, 1) - 1) * PAGE_SIZE


# Function to build the home page categories
async def get_home(client: AsyncClient) -> List[Category]:
    try:
        soup = await fetch_document(client, "/")
    except ScraperError as e:
        logger.warning(f"Home page unavailable: {e}")
        return []
    except Exception as e:
        logger.exception(f"Unexpected error while loading the home page: {e}")
        return []

    sections = [
        ("Ultimi Episodi", parse_latest_episodes),
        ("Ultime Aggiunte", parse_latest_additions),
        ("Featured", parse_featured_anime),
    ]
    categories = []
    for name, parser in sections:
        try:
            items = parser(soup)
        except Exception as e:
            logger.exception(f"Failed to parse home section '{name}': {e}")
            continue
        if items:
            categories.append(Category(name=name, items=items))

    logger.info(f"Home page: {', '.join(f'{c.name} ({len(c.items)})' for c in categories) or 'no sections'}")
    return categories


# Function to search the archive. An empty query lists the genres instead.
async def search(query: str, page: int, client: AsyncClient) -> Union[List[CatalogItem], List[Genre]]:
    try:
        if not query.strip():
            if page > 1:
                return []
            soup = await bootstrap_session(client)
            genres = parse_archive_genres(soup)
            logger.info(f"Listed {len(genres)} genres")
            return genres

        await bootstrap_session(client)
        records = await query_archive(client, title=query, offset=page_offset(page))
        items = parse_anime_records(records)
        logger.info(f"Search '{query}' page {page}: {len(items)} results")
        return items
    except ScraperError as e:
        logger.warning(f"Search '{query}' page {page} failed: {e}")
        return []
    except Exception as e:
        logger.exception(f"Unexpected error while searching '{query}': {e}")
        return []


async def _list_by_type(archive_type: str, model_class: type, page: int, client: AsyncClient) -> list:
    try:
        await bootstrap_session(client)
        records = await query_archive(client, type=archive_type, offset=page_offset(page))
    except ScraperError as e:
        logger.warning(f"Listing {archive_type} page {page} failed: {e}")
        return []
    except Exception as e:
        logger.exception(f"Unexpected error while listing {archive_type} page {page}: {e}")
        return []

    items = parse_anime_records(records, force_type=model_class)
    logger.info(f"Listed {len(items)} {archive_type} items for page {page}")
    return items


# Function to page through movies
async def get_movies(page: int, client: AsyncClient) -> List[Movie]:
    return await _list_by_type("Movie", Movie, page, client)


# Function to page through shows
async def get_tv_shows(page: int, client: AsyncClient) -> List[TvShow]:
    return await _list_by_type("TV", TvShow, page, client)


# Function to read a movie detail page
async def get_movie(movie_id: str, client: AsyncClient) -> Movie:
    try:
        soup = await fetch_document(client, f"/anime/{movie_id}")
        return parse_movie_detail(soup, movie_id)
    except ScraperError as e:
        logger.warning(f"Movie {movie_id} unavailable: {e}")
    except Exception as e:
        logger.exception(f"Unexpected error while reading movie {movie_id}: {e}")
    return Movie(id=movie_id, title="", poster="")


# Function to read a show detail page, seasons included
async def get_tv_show(show_id: str, client: AsyncClient) -> TvShow:
    try:
        soup = await fetch_document(client, f"/anime/{show_id}")
        show, episodes_count = parse_tv_show_detail(soup, show_id)
        logger.info(f"Show {show_id}: {episodes_count} episodes, {len(show.seasons)} seasons")
        return show
    except ScraperError as e:
        logger.warning(f"Show {show_id} unavailable: {e}")
    except Exception as e:
        logger.exception(f"Unexpected error while reading show {show_id}: {e}")
    return TvShow(id=show_id, title="", poster="")


async def get_episodes_by_season(season_id: str, client: AsyncClient) -> List[Episode]:
    """
    List the episodes behind a season id.

    A ranged id ("{showId}-{start}-{end}") fetches exactly that chunk from the
    range API. A plain show id reads the episode list embedded in the player
    of the detail page, which only exists for shows of up to 120 episodes.
    """
    show_id, start, end = parse_season_id(season_id)
    try:
        if start is not None and end is not None:
            records = await fetch_episode_range(client, numeric_anime_id(show_id), start, end)
            episodes = build_range_episodes(records, show_id)
        else:
            soup = await fetch_document(client, f"/anime/{show_id}")
            video_player = find_video_player(soup)
            if video_player is None:
                logger.warning(f"No video player on the page of {show_id}")
                return []
            episodes_count = read_episodes_count(video_player)
            if episodes_count > EPISODES_PER_RANGE:
                logger.warning(f"{show_id} has {episodes_count} episodes, a ranged season id is required")
                return []
            episodes = build_episodes(decode_player_episodes(video_player), show_id)
    except ScraperError as e:
        logger.warning(f"Episodes of {season_id} unavailable: {e}")
        return []
    except Exception as e:
        logger.exception(f"Unexpected error while listing episodes of {season_id}: {e}")
        return []

    logger.info(f"Listed {len(episodes)} episodes for {season_id}")
    return episodes


# Function to page through one genre
async def get_genre(genre_id: str, page: int, client: AsyncClient) -> Genre:
    try:
        soup = await bootstrap_session(client)
        genre_name = next(
            (genre.name for genre in parse_archive_genres(soup) if genre.id == genre_id),
            f"Genre {genre_id}",
        )
        try:
            numeric_id = int(genre_id)
        except ValueError:
            numeric_id = 0
        records = await query_archive(
            client,
            genres=[{"id": numeric_id, "name": genre_name}],
            offset=page_offset(page),
        )
        shows = parse_anime_records(records)
    except ScraperError as e:
        logger.warning(f"Genre {genre_id} page {page} unavailable: {e}")
        return Genre(id=genre_id, name="", shows=[])
    except Exception as e:
        logger.exception(f"Unexpected error while reading genre {genre_id}: {e}")
        return Genre(id=genre_id, name="", shows=[])

    logger.info(f"Genre {genre_name} page {page}: {len(shows)} titles")
    return Genre(id=genre_id, name=genre_name, shows=shows)


# Function to resolve the playable server of a movie or an episode
async def get_servers(item_id: str, client: AsyncClient, episode: Optional[int] = None) -> List[Server]:
    try:
        servers = await resolve_servers(client, item_id, episode)
    except ScraperError as e:
        logger.warning(f"No server for {item_id} (episode {episode}): {e}")
        return []
    except Exception as e:
        logger.exception(f"Unexpected error while resolving servers of {item_id}: {e}")
        return []

    logger.info(f"Resolved {len(servers)} server(s) for {item_id} (episode {episode})")
    return servers
