"""
Pydantic models for playlist track requests and responses.
"""

from datetime import datetime
from typing import List

from pydantic import Field

from app.core.config import MAX_TRACKS_PER_PLAYLIST
from app.schemas.base import CamelModel


class TrackIn(CamelModel):
    """A track to be added to a playlist."""

    track_uri: str = Field(min_length=1, max_length=255)
    artist: str = Field(min_length=1, max_length=255)
    title: str = Field(min_length=1, max_length=255)
    album: str = Field(min_length=1, max_length=255)


class AddTracksRequest(CamelModel):
    tracks: List[TrackIn] = Field(min_length=1)
    insert_after_position: int = Field(default=0, ge=0, le=MAX_TRACKS_PER_PLAYLIST)


class AddTracksResponse(CamelModel):
    added: int
    positions: List[int]


class PlaylistTrackItem(CamelModel):
    position: int
    track_uri: str
    artist: str
    title: str
    album: str
    added_at: datetime


class PlaylistTrackList(CamelModel):
    items: List[PlaylistTrackItem]
    page: int
    page_size: int
    total: int


class OrderedTrack(CamelModel):
    """One entry of a client-submitted full ordering."""

    position: int = Field(ge=1, le=MAX_TRACKS_PER_PLAYLIST)
    track_uri: str = Field(min_length=1, max_length=255)


class ReorderTracksRequest(CamelModel):
    ordered: List[OrderedTrack] = Field(min_length=1)


class TrackPosition(CamelModel):
    track_uri: str
    position: int


class ReorderTracksResponse(CamelModel):
    positions: List[TrackPosition]
