# servers.py
"""Resolution of a movie or an episode to its embeddable player URL."""
import logging
from typing import List, Optional

from httpx import AsyncClient

from client import NotFound, ParseFailure, fetch_document, fetch_text
from detail import find_video_player, read_episodes_count
from episodes import (
    EPISODES_PER_RANGE,
    decode_player_episodes,
    find_episode_in_ranges,
    find_episode_record,
    numeric_anime_id,
)
from models import Server

logger = logging.getLogger(__name__)

SERVER_NAME = "Vixcloud"


def show_id_from_reference(item_id: str) -> str:
    # Episode ids look like "{showId}/{episodeId}"
    return item_id.split('/')[0]


async def resolve_embed_url(client: AsyncClient, item_id: str, episode_number: Optional[int] = None) -> str:
    """
    Embed URL for a movie (``episode_number`` is None) or one episode of a show.
    Raises NotFound when the player or the episode cannot be located.
    """
    show_id = show_id_from_reference(item_id)
    soup = await fetch_document(client, f"/anime/{show_id}")
    video_player = find_video_player(soup)
    if video_player is None:
        raise NotFound(f"No video player on the page of {show_id}")

    # The player itself is already pointing at the movie or at episode 1
    if episode_number is None or episode_number == 1:
        return (video_player.get('embed_url') or '').strip()

    episodes_count = read_episodes_count(video_player)
    if episodes_count <= EPISODES_PER_RANGE:
        records = decode_player_episodes(video_player)
        if not records:
            raise ParseFailure(f"Player of {show_id} carries no episode list")
        record = find_episode_record(records, episode_number)
    else:
        record = await find_episode_in_ranges(client, numeric_anime_id(show_id), episode_number, episodes_count)

    if record is None:
        raise NotFound(f"Episode {episode_number} of {show_id} not found")
    episode_id = str(record.get('id') or '')
    if not episode_id:
        raise NotFound(f"Episode {episode_number} of {show_id} has no id")

    return await fetch_text(client, f"/embed-url/{episode_id}")


async def resolve_servers(client: AsyncClient, item_id: str, episode_number: Optional[int] = None) -> List[Server]:
    embed_url = await resolve_embed_url(client, item_id, episode_number)
    if not embed_url:
        logger.info(f"Empty embed URL for {item_id} (episode {episode_number})")
        return []
    return [Server(id=item_id, name=SERVER_NAME, src=embed_url)]
