"""Create user, playlist and playlisttrack tables

Revision ID: 4c1e8a2f9b7d
Revises:
Create Date: 2025-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4c1e8a2f9b7d"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the playlist schema."""
    op.create_table(
        "user",
        sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "playlist",
        sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "owner_id", sa.UUID(as_uuid=True), sa.ForeignKey("user.id"), nullable=False
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column(
            "is_deleted", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_playlist_owner_id", "playlist", ["owner_id"])
    op.create_index(
        "playlist_owner_name_idx",
        "playlist",
        ["owner_id", sa.text("lower(name)")],
        unique=True,
        postgresql_where=sa.text("is_deleted = false"),
    )

    op.create_table(
        "playlisttrack",
        sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "playlist_id",
            sa.UUID(as_uuid=True),
            sa.ForeignKey("playlist.id"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("track_uri", sa.String(255), nullable=False),
        sa.Column("artist", sa.String(255), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("album", sa.String(255), nullable=False),
        sa.Column(
            "is_deleted", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        sa.Column(
            "added_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "playlist_id", "position", name="playlisttrack_position_uq"
        ),
        sa.CheckConstraint(
            "position <> 0 AND position BETWEEN -100 AND 100",
            name="playlisttrack_position_range",
        ),
    )
    op.create_index(
        "playlisttrack_live_uri_idx",
        "playlisttrack",
        ["playlist_id", "track_uri"],
        unique=True,
        postgresql_where=sa.text("is_deleted = false"),
    )
    op.create_index(
        "playlisttrack_playlist_deleted_idx",
        "playlisttrack",
        ["playlist_id", "is_deleted"],
    )


def downgrade() -> None:
    """Drop the playlist schema."""
    op.drop_table("playlisttrack")
    op.drop_table("playlist")
    op.drop_table("user")
