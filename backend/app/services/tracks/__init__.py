"""
Track position engine: allocation, admission guards, reorder validation and
the service functions that apply them to a playlist.
"""

from app.services.tracks.service import (
    list_tracks,
    add_tracks,
    reorder_tracks,
    remove_track,
)

__all__ = [
    "list_tracks",
    "add_tracks",
    "reorder_tracks",
    "remove_track",
]
