from sqlalchemy import Boolean, Column, ForeignKey, Index, String, UUID, func
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Playlist(Base, TimestampMixin):
    """Ordered collection of tracks owned by a single user."""

    owner_id = Column(
        UUID(as_uuid=True), ForeignKey("user.id"), nullable=False, index=True
    )

    # Playlist details
    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=True)

    # Never physically deleted
    is_deleted = Column(Boolean, default=False, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="playlists")
    tracks = relationship(
        "PlaylistTrack",
        back_populates="playlist",
        order_by="PlaylistTrack.position",
    )

    __table_args__ = (
        # One live playlist per name and owner, case-insensitive
        Index(
            "playlist_owner_name_idx",
            "owner_id",
            func.lower(name),
            unique=True,
            postgresql_where=(is_deleted.is_(False)),
            sqlite_where=(is_deleted.is_(False)),
        ),
    )
