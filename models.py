# models.py
from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union

class Genre(BaseModel):
    id: str = Field(..., description="Upstream numeric genre id, or a slug of the name when read from a detail page")
    name: str = Field(..., description="Genre display name")
    shows: List[Union["Movie", "TvShow"]] = Field(default_factory=list, description="Titles in this genre for the requested page")

    class Config:
        from_attributes = True

class Season(BaseModel):
    id: str = Field(..., description="Show id, or '{showId}-{start}-{end}' for a chunked episode range")
    number: int = Field(default=0, description="Always 0, the site has no season concept")
    title: str = Field(..., description="'Episodi' or the literal '{start}-{end}' range label")

    class Config:
        from_attributes = True

class Episode(BaseModel):
    id: str = Field(..., description="'{showId}/{upstreamEpisodeId}'")
    number: int = Field(..., description="Episode number (first number of a merged range)")
    title: str = Field(..., description="Episode title, extracted from the file name or synthesized")

    class Config:
        from_attributes = True

class Movie(BaseModel):
    type: Literal["movie"] = "movie"
    id: str = Field(..., description="'{numericId}-{slug}' or the last path segment of a detail link")
    title: str = Field(..., description="Movie title")
    poster: str = Field(default="", description="Poster URL")
    banner: str = Field(default="", description="Banner URL")
    overview: str = Field(default="", description="Plot summary")
    rating: Optional[float] = Field(default=None, description="Site rating")
    released: str = Field(default="", description="Release year or date as shown by the site")
    runtime: Optional[int] = Field(default=None, description="Runtime in minutes")
    genres: List[Genre] = Field(default_factory=list, description="Ordered list of genres")
    recommendations: List[Union["Movie", "TvShow"]] = Field(default_factory=list, description="Related titles, movies first")

    class Config:
        from_attributes = True

class TvShow(BaseModel):
    type: Literal["tvshow"] = "tvshow"
    id: str = Field(..., description="'{numericId}-{slug}' or the last path segment of a detail link")
    title: str = Field(..., description="Show title")
    poster: str = Field(default="", description="Poster URL")
    banner: str = Field(default="", description="Banner URL")
    overview: str = Field(default="", description="Plot summary")
    rating: Optional[float] = Field(default=None, description="Site rating")
    released: str = Field(default="", description="Release year or date as shown by the site")
    runtime: Optional[int] = Field(default=None, description="Episode runtime in minutes")
    genres: List[Genre] = Field(default_factory=list, description="Ordered list of genres")
    recommendations: List[Union["Movie", "TvShow"]] = Field(default_factory=list, description="Related titles, movies first")
    seasons: List[Season] = Field(default_factory=list, description="Fetchable episode ranges")

    class Config:
        from_attributes = True

class Category(BaseModel):
    name: str = Field(..., description="Home section label")
    items: List[Union[Movie, TvShow]] = Field(default_factory=list, description="Items in this section")

    class Config:
        from_attributes = True

class Server(BaseModel):
    id: str = Field(..., description="Caller-supplied item or episode reference")
    name: str = Field(..., description="Provider label")
    src: str = Field(..., description="Embed URL handed to the video extractor")

    class Config:
        from_attributes = True

class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error message")
    code: Optional[int] = Field(None, description="HTTP status code")
    details: Optional[str] = Field(None, description="Additional error details")

    class Config:
        from_attributes = True

CatalogItem = Union[Movie, TvShow]

Genre.model_rebuild()
Movie.model_rebuild()
TvShow.model_rebuild()
