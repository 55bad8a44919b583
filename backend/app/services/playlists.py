"""
Service for managing playlists.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import MAX_PAGINATION_WINDOW, MAX_PLAYLISTS_PER_USER
from app.core.errors import Conflict, LimitExceeded, NotFound, ValidationFailed
from app.db.models import Playlist, PlaylistTrack, User
from app.db.session import transaction
from app.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetail,
    PlaylistList,
    PlaylistResponse,
    PlaylistSummary,
    PlaylistUpdate,
)
from app.utils.datetime_helper import utc_now

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "created_at": Playlist.created_at,
    "updated_at": Playlist.updated_at,
    "name": Playlist.name,
}


def _parse_id(playlist_id) -> Optional[uuid.UUID]:
    if isinstance(playlist_id, uuid.UUID):
        return playlist_id
    try:
        return uuid.UUID(str(playlist_id))
    except ValueError:
        return None


def get_owned_playlist(
    db: Session, user_id, playlist_id, lock: bool = False
) -> Playlist:
    """
    Fetch a live playlist that belongs to the caller.

    A malformed id, a missing playlist, a soft-deleted one and one owned by
    somebody else all produce the same NotFound.

    Args:
        db: Database session
        user_id: Caller's user id
        playlist_id: Playlist id as received from the client
        lock: Take a row lock on the playlist for the current transaction

    Returns:
        The playlist row
    """
    parsed = _parse_id(playlist_id)
    if parsed is None:
        raise NotFound("Playlist not found")

    query = db.query(Playlist).filter(
        Playlist.id == parsed,
        Playlist.owner_id == user_id,
        Playlist.is_deleted.is_(False),
    )
    if lock:
        query = query.with_for_update()

    playlist = query.first()
    if not playlist:
        raise NotFound("Playlist not found")
    return playlist


def live_track_count(db: Session, playlist_id) -> int:
    return (
        db.query(func.count(PlaylistTrack.id))
        .filter(
            PlaylistTrack.playlist_id == playlist_id,
            PlaylistTrack.is_deleted.is_(False),
        )
        .scalar()
    )


def _name_taken(db: Session, user_id, name: str, exclude_id=None) -> bool:
    query = db.query(Playlist.id).filter(
        Playlist.owner_id == user_id,
        Playlist.is_deleted.is_(False),
        func.lower(Playlist.name) == name.lower(),
    )
    if exclude_id is not None:
        query = query.filter(Playlist.id != exclude_id)
    return query.first() is not None


def _to_response(playlist: Playlist) -> PlaylistResponse:
    return PlaylistResponse(
        id=str(playlist.id),
        name=playlist.name,
        description=playlist.description,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


async def list_playlists(
    db: Session,
    user_id,
    page: int = 1,
    page_size: int = 20,
    search: Optional[str] = None,
    sort: str = "updated_at.desc",
    include_deleted: bool = False,
) -> PlaylistList:
    """
    List the caller's playlists, one page at a time.

    Args:
        db: Database session
        user_id: Caller's user id
        page: 1-based page number
        page_size: Items per page
        search: Case-insensitive substring filter on the name
        sort: "<column>.<asc|desc>" for created_at, updated_at or name
        include_deleted: Also list soft-deleted playlists

    Returns:
        Page of playlists with live track counts
    """
    if page * page_size > MAX_PAGINATION_WINDOW:
        raise ValidationFailed(
            "Pagination limit exceeded", {"page": page, "pageSize": page_size}
        )

    column_name, direction = sort.split(".")
    column = SORT_COLUMNS[column_name]
    ordering = column.asc() if direction == "asc" else column.desc()

    track_count = (
        select(func.count(PlaylistTrack.id))
        .where(
            PlaylistTrack.playlist_id == Playlist.id,
            PlaylistTrack.is_deleted.is_(False),
        )
        .correlate(Playlist)
        .scalar_subquery()
    )

    query = db.query(Playlist).filter(Playlist.owner_id == user_id)
    if not include_deleted:
        query = query.filter(Playlist.is_deleted.is_(False))
    if search:
        query = query.filter(Playlist.name.ilike(f"%{search}%"))

    total = query.count()

    rows = (
        query.add_columns(track_count.label("track_count"))
        .order_by(ordering, Playlist.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return PlaylistList(
        items=[
            PlaylistSummary(
                id=str(playlist.id),
                name=playlist.name,
                is_deleted=playlist.is_deleted,
                created_at=playlist.created_at,
                updated_at=playlist.updated_at,
                track_count=count,
            )
            for playlist, count in rows
        ],
        page=page,
        page_size=page_size,
        total=total,
    )


async def create_playlist(
    db: Session, user_id, command: PlaylistCreate
) -> PlaylistResponse:
    """
    Create a playlist for the caller.

    Raises:
        LimitExceeded: If the caller already has the maximum number of playlists
        Conflict: If a live playlist with the same name exists
    """
    with transaction(db):
        # Serialize playlist creation per owner
        db.query(User).filter(User.id == user_id).with_for_update().first()

        live_count = (
            db.query(func.count(Playlist.id))
            .filter(Playlist.owner_id == user_id, Playlist.is_deleted.is_(False))
            .scalar()
        )
        if live_count >= MAX_PLAYLISTS_PER_USER:
            raise LimitExceeded(
                "Playlists limit exceeded",
                {"currentCount": live_count, "maxCount": MAX_PLAYLISTS_PER_USER},
            )

        if _name_taken(db, user_id, command.name):
            raise Conflict("Playlist name already exists")

        playlist = Playlist(
            owner_id=user_id,
            name=command.name,
            description=command.description,
        )
        db.add(playlist)
        try:
            db.flush()
        except IntegrityError:
            raise Conflict("Playlist name already exists")

    db.refresh(playlist)
    logger.info(f"Created playlist {playlist.id} for user {user_id}")
    return _to_response(playlist)


async def get_playlist(db: Session, user_id, playlist_id) -> PlaylistDetail:
    """Get a single playlist with its live track count."""
    playlist = get_owned_playlist(db, user_id, playlist_id)
    response = _to_response(playlist)
    return PlaylistDetail(
        **response.model_dump(), track_count=live_track_count(db, playlist.id)
    )


async def update_playlist(
    db: Session, user_id, playlist_id, command: PlaylistUpdate
) -> PlaylistResponse:
    """
    Rename a playlist and/or change its description.

    Only fields present in the request are touched.
    """
    changes = command.model_dump(exclude_unset=True)

    with transaction(db):
        playlist = get_owned_playlist(db, user_id, playlist_id, lock=True)

        if "name" in changes and _name_taken(
            db, user_id, changes["name"], exclude_id=playlist.id
        ):
            raise Conflict("Playlist name already exists")

        for field, value in changes.items():
            setattr(playlist, field, value)
        playlist.updated_at = utc_now()

    db.refresh(playlist)
    logger.info(f"Updated playlist {playlist.id}: {sorted(changes)}")
    return _to_response(playlist)


async def delete_playlist(db: Session, user_id, playlist_id) -> None:
    """
    Soft-delete a playlist together with all of its live tracks.
    """
    with transaction(db):
        playlist = get_owned_playlist(db, user_id, playlist_id, lock=True)

        removed = (
            db.query(PlaylistTrack)
            .filter(
                PlaylistTrack.playlist_id == playlist.id,
                PlaylistTrack.is_deleted.is_(False),
            )
            .update({PlaylistTrack.is_deleted: True}, synchronize_session=False)
        )
        playlist.is_deleted = True
        playlist.updated_at = utc_now()

    logger.info(f"Deleted playlist {playlist.id} and {removed} tracks")
