#  app.py
import logging
from fastapi import FastAPI, HTTPException, Depends, Path, Query
from typing import List, Optional, Union
import uvicorn
from models import Category, Episode, ErrorResponse, Genre, Movie, Server, TvShow
from config import settings
from client import get_http_client
from scraper import (
    PROVIDER_LANGUAGE,
    PROVIDER_LOGO,
    PROVIDER_NAME,
    get_episodes_by_season,
    get_genre,
    get_home,
    get_movie,
    get_movies,
    get_servers,
    get_tv_show,
    get_tv_shows,
    search,
)
from httpx import AsyncClient

# Configure logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="AnimeUnity Catalog API",
    description="Normalized catalog of animeunity.so: home sections, archive search, detail pages, episode ranges and player servers.",
    version="1.0.0"
)

# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "AnimeUnity Catalog API",
        "version": "1.0.0",
        "provider": {
            "name": PROVIDER_NAME,
            "language": PROVIDER_LANGUAGE,
            "logo": PROVIDER_LOGO,
            "base_url": settings.base_url,
        },
        "endpoints": {
            "home": "/home",
            "search": "/search?query={query}&page={page}",
            "movies": "/movies/{page}",
            "tv_shows": "/tv-shows/{page}",
            "movie": "/movie/{movie_id}",
            "tv_show": "/tv-show/{show_id}",
            "episodes": "/episodes/{season_id}",
            "genre": "/genre/{genre_id}/{page}",
            "servers": "/servers/{item_id}?episode={number}"
        },
        "documentation": "/docs"
    }

@app.get(
    "/home",
    response_model=List[Category],
    summary="Get home page categories",
    description="Latest episodes, latest additions and featured titles, each only when the site lists something."
)
async def home(client: AsyncClient = Depends(get_http_client)):
    return await get_home(client)

@app.get(
    "/search",
    response_model=Union[List[Union[Movie, TvShow]], List[Genre]],
    summary="Search the archive",
    description="Search titles by name, 30 per page. An empty query returns the genre list instead. Example: `?query=naruto&page=1`"
)
async def search_catalog(
    query: str = Query("", description="Search term, leave empty to list genres"),
    page: int = Query(1, ge=1, description="Page number to fetch"),
    client: AsyncClient = Depends(get_http_client)
):
    return await search(query.strip(), page, client)

@app.get(
    "/movies/{page}",
    response_model=List[Movie],
    summary="Get movies by page",
    description="Fetch movies from the archive, 30 per page."
)
async def movies_page(
    page: int = Path(..., ge=1, description="Page number to fetch"),
    client: AsyncClient = Depends(get_http_client)
):
    return await get_movies(page, client)

@app.get(
    "/tv-shows/{page}",
    response_model=List[TvShow],
    summary="Get shows by page",
    description="Fetch TV shows from the archive, 30 per page."
)
async def tv_shows_page(
    page: int = Path(..., ge=1, description="Page number to fetch"),
    client: AsyncClient = Depends(get_http_client)
):
    return await get_tv_shows(page, client)

@app.get(
    "/movie/{movie_id}",
    response_model=Movie,
    responses={
        404: {"model": ErrorResponse, "description": "Movie not available"},
    },
    summary="Get movie detail",
    description="Fetch a movie detail page. Example: `/movie/1234-your-name`"
)
async def movie_detail(
    movie_id: str = Path(..., min_length=1, description="Movie id as returned by the listings"),
    client: AsyncClient = Depends(get_http_client)
):
    movie = await get_movie(movie_id, client)
    if not movie.title:
        raise HTTPException(status_code=404, detail=f"Movie {movie_id} not available")
    return movie

@app.get(
    "/tv-show/{show_id}",
    response_model=TvShow,
    responses={
        404: {"model": ErrorResponse, "description": "Show not available"},
    },
    summary="Get show detail",
    description="Fetch a show detail page including its seasons (episode ranges). Example: `/tv-show/12-one-piece`"
)
async def tv_show_detail(
    show_id: str = Path(..., min_length=1, description="Show id as returned by the listings"),
    client: AsyncClient = Depends(get_http_client)
):
    show = await get_tv_show(show_id, client)
    if not show.title:
        raise HTTPException(status_code=404, detail=f"Show {show_id} not available")
    return show

@app.get(
    "/episodes/{season_id}",
    response_model=List[Episode],
    summary="Get episodes of a season",
    description="List episodes for a season id from a show detail. Example: `/episodes/12-one-piece-121-240`"
)
async def season_episodes(
    season_id: str = Path(..., min_length=1, description="Season id"),
    client: AsyncClient = Depends(get_http_client)
):
    return await get_episodes_by_season(season_id, client)

@app.get(
    "/genre/{genre_id}/{page}",
    response_model=Genre,
    summary="Get titles of a genre",
    description="Fetch one page of titles for a genre id returned by an empty search. Example: `/genre/4/1`"
)
async def genre_page(
    genre_id: str = Path(..., min_length=1, description="Numeric genre id"),
    page: int = Path(..., ge=1, description="Page number to fetch"),
    client: AsyncClient = Depends(get_http_client)
):
    return await get_genre(genre_id, page, client)

@app.get(
    "/servers/{item_id:path}",
    response_model=List[Server],
    summary="Get playable servers",
    description="Resolve the player embed URL of a movie, or of an episode when `episode` is given. Example: `/servers/12-one-piece?episode=150`"
)
async def servers(
    item_id: str = Path(..., min_length=1, description="Movie, show or episode id"),
    episode: Optional[int] = Query(None, ge=1, description="Episode number, omit for movies"),
    client: AsyncClient = Depends(get_http_client)
):
    logger.info(f"Processing server request for {item_id}, episode: {episode}")
    return await get_servers(item_id, client, episode=episode)


if __name__ == "__main__":
    uvicorn.run("app:app", host=settings.server_host, port=settings.server_port)
