from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Playlist owner as known to this service.

    Credentials live with the external identity provider; only the identity
    and its status are stored here.
    """

    email = Column(String(100), unique=True, index=True, nullable=False)
    display_name = Column(String(100), nullable=True)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    playlists = relationship("Playlist", back_populates="owner")
