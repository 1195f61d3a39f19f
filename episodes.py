# episodes.py
"""
Episode ranges and episode lists.

The player embedded in a detail page only carries the first 120 episodes.
Longer shows are served in fixed chunks of 120 from
``/info_api/{id}/1?start_range=S&end_range=E``, with no cursor, so the chunk
boundaries have to be recomputed from the total episode count.
"""
import json
import logging
from typing import List, Optional, Tuple
from urllib.parse import unquote_plus

from bs4 import Tag
from httpx import AsyncClient

from client import ParseFailure, TransportFailure, fetch_json
from filenames import extract_episode_name_from_file_name
from models import Episode

logger = logging.getLogger(__name__)

EPISODES_PER_RANGE = 120


def calculate_episode_ranges(episodes_count: int) -> List[Tuple[int, int]]:
    """
    Inclusive (start, end) chunks covering 1..episodes_count.
        250 -> [(1, 120), (121, 240), (241, 250)]
    """
    if episodes_count <= EPISODES_PER_RANGE:
        return [(1, episodes_count)]

    ranges = [(1, EPISODES_PER_RANGE)]
    remaining = episodes_count - EPISODES_PER_RANGE
    chunk_count = remaining // EPISODES_PER_RANGE + (1 if remaining % EPISODES_PER_RANGE else 0)
    for index in range(chunk_count):
        start = EPISODES_PER_RANGE + 1 + index * EPISODES_PER_RANGE
        ranges.append((start, min(start + EPISODES_PER_RANGE - 1, episodes_count)))
    return ranges


def parse_season_id(season_id: str) -> Tuple[str, Optional[int], Optional[int]]:
    """
    Split a season id into (show id, start, end).
        "123-one-piece-121-240" -> ("123-one-piece", 121, 240)
        "123-one-piece"         -> ("123-one-piece", None, None)
    """
    parts = season_id.split('-')
    if len(parts) >= 4 and parts[-2].isdigit() and parts[-1].isdigit():
        return '-'.join(parts[:-2]), int(parts[-2]), int(parts[-1])
    return season_id, None, None


def numeric_anime_id(show_id: str) -> str:
    return show_id.split('-')[0]


def parse_episode_number(value) -> Optional[int]:
    """
    Episode numbers come as ints, numeric strings, or merged ranges like
    "235-236". A merged range yields its first number.
    """
    text = str(value if value is not None else '').strip()
    if '-' in text:
        text = text.split('-')[0]
    try:
        return int(text)
    except ValueError:
        return None


def is_merged_number(value) -> bool:
    return '-' in str(value if value is not None else '')


def decode_player_episodes(video_player: Tag) -> list:
    raw = video_player.get('episodes', '')
    if not raw:
        return []
    try:
        records = json.loads(unquote_plus(raw))
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Player episodes attribute is not JSON: {e}") from e
    if not isinstance(records, list):
        raise ParseFailure("Player episodes attribute is not a JSON array")
    return records


def build_episodes(records: list, show_id: str) -> List[Episode]:
    """Episodes from the player attribute of a detail page."""
    episodes = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            continue
        try:
            number = int(str(record.get('number', '')).strip())
        except ValueError:
            number = index + 1
        name = extract_episode_name_from_file_name(str(record.get('file_name') or ''))
        episodes.append(Episode(
            id=f"{show_id}/{record.get('id', '')}",
            number=number,
            title=name or f"Episodio {number}",
        ))
    return episodes


def build_range_episodes(records: list, show_id: str) -> List[Episode]:
    """Episodes from one range chunk, where numbers may be merged ("235-236")."""
    episodes = []
    for record in records:
        if not isinstance(record, dict):
            continue
        raw_number = str(record.get('number', '0'))
        number = parse_episode_number(raw_number) or 0
        merged = is_merged_number(raw_number)
        name = extract_episode_name_from_file_name(str(record.get('file_name') or ''))

        if name:
            title = f"{name} ({raw_number})" if merged else name
        else:
            title = f"Episodio {raw_number}" if merged else f"Episodio {number}"
        episodes.append(Episode(
            id=f"{show_id}/{record.get('id', '')}",
            number=number,
            title=title,
        ))
    return episodes


async def fetch_episode_range(client: AsyncClient, anime_id: str, start: int, end: int) -> list:
    data = await fetch_json(
        client,
        f"/info_api/{anime_id}/1",
        params={"start_range": start, "end_range": end},
    )
    records = data.get('episodes') if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise ParseFailure(f"Range {start}-{end} of {anime_id} has no 'episodes' array")
    return records


def find_episode_record(records: list, episode_number: int) -> Optional[dict]:
    for record in records:
        if isinstance(record, dict) and parse_episode_number(record.get('number')) == episode_number:
            return record
    return None


async def find_episode_in_ranges(
    client: AsyncClient, anime_id: str, episode_number: int, episodes_count: int
) -> Optional[dict]:
    """
    Locate one episode record of a chunked show. Only chunks whose range
    contains ``episode_number`` are fetched, and the scan stops at the first
    match. A failed fetch ends the lookup.
    """
    for start, end in calculate_episode_ranges(episodes_count):
        if not start <= episode_number <= end:
            continue
        try:
            records = await fetch_episode_range(client, anime_id, start, end)
        except ParseFailure as e:
            logger.debug(f"Skipping range {start}-{end}: {e}")
            continue
        except TransportFailure as e:
            logger.warning(f"Range {start}-{end} of {anime_id} could not be fetched: {e}")
            return None
        record = find_episode_record(records, episode_number)
        if record is not None:
            return record
    logger.info(f"Episode {episode_number} of {anime_id} not found in {episodes_count} episodes")
    return None
