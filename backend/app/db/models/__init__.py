from app.db.models.user import User
from app.db.models.playlist import Playlist
from app.db.models.playlist_track import PlaylistTrack

__all__ = [
    "User",
    "Playlist",
    "PlaylistTrack",
]
