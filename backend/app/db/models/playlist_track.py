from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UUID,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.datetime_helper import utc_now


class PlaylistTrack(Base):
    """Individual track within a playlist, identified by its position.

    A soft-deleted track keeps its position forever. Negative positions only
    exist inside a reorder transaction while moving tracks are parked.
    """

    playlist_id = Column(UUID(as_uuid=True), ForeignKey("playlist.id"), nullable=False)
    position = Column(Integer, nullable=False)

    # Track details
    track_uri = Column(String(255), nullable=False)
    artist = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    album = Column(String(255), nullable=False)

    is_deleted = Column(Boolean, default=False, nullable=False)
    added_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    # Relationships
    playlist = relationship("Playlist", back_populates="tracks")

    __table_args__ = (
        UniqueConstraint("playlist_id", "position", name="playlisttrack_position_uq"),
        CheckConstraint(
            "position <> 0 AND position BETWEEN -100 AND 100",
            name="playlisttrack_position_range",
        ),
        Index(
            "playlisttrack_live_uri_idx",
            "playlist_id",
            "track_uri",
            unique=True,
            postgresql_where=(is_deleted.is_(False)),
            sqlite_where=(is_deleted.is_(False)),
        ),
        Index("playlisttrack_playlist_deleted_idx", "playlist_id", "is_deleted"),
    )
