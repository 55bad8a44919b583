"""
REST API endpoints for the tracks of a playlist.

Positions are 1-based and stable: removing a track leaves a permanent gap.
"""

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from app.core.config import (
    DEFAULT_TRACK_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MAX_TRACKS_PER_PLAYLIST,
)
from app.db.models import User
from app.dependencies import db_dependency, get_current_user
from app.schemas.track import (
    AddTracksRequest,
    AddTracksResponse,
    PlaylistTrackList,
    ReorderTracksRequest,
    ReorderTracksResponse,
)
from app.services import tracks as track_service

router = APIRouter(prefix="/api/playlists/{playlist_id}/tracks", tags=["tracks"])


@router.get("", response_model=PlaylistTrackList)
async def list_tracks(
    playlist_id: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(
        DEFAULT_TRACK_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"
    ),
    user: User = Depends(get_current_user),
    db: Session = Depends(db_dependency),
):
    """Get live tracks ordered by position, one page at a time."""
    return await track_service.list_tracks(db, user.id, playlist_id, page, page_size)


@router.post(
    "", response_model=AddTracksResponse, status_code=status.HTTP_201_CREATED
)
async def add_tracks(
    playlist_id: str,
    body: AddTracksRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_dependency),
):
    """
    Add tracks after ``insertAfterPosition``.

    Returns the positions assigned, in the order the tracks were submitted.
    """
    return await track_service.add_tracks(
        db, user.id, playlist_id, body.tracks, body.insert_after_position
    )


@router.put("", response_model=ReorderTracksResponse)
async def reorder_tracks(
    playlist_id: str,
    body: ReorderTracksRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_dependency),
):
    """Replace the order of the playlist with a full client-side ordering."""
    return await track_service.reorder_tracks(db, user.id, playlist_id, body.ordered)


@router.delete("/{position}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_track(
    playlist_id: str,
    position: int = Path(gt=0, le=MAX_TRACKS_PER_PLAYLIST),
    user: User = Depends(get_current_user),
    db: Session = Depends(db_dependency),
):
    """Soft-delete the track at a position."""
    await track_service.remove_track(db, user.id, playlist_id, position)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
