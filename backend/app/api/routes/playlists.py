"""
REST API endpoints for playlists.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.config import DEFAULT_PLAYLIST_PAGE_SIZE, MAX_PAGE_SIZE
from app.db.models import User
from app.dependencies import db_dependency, get_current_user
from app.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetail,
    PlaylistList,
    PlaylistResponse,
    PlaylistSort,
    PlaylistUpdate,
)
from app.services import playlists as playlist_service

router = APIRouter(prefix="/api/playlists", tags=["playlists"])


@router.get("", response_model=PlaylistList)
async def list_playlists(
    page: int = Query(1, ge=1),
    page_size: int = Query(
        DEFAULT_PLAYLIST_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"
    ),
    search: Optional[str] = None,
    sort: PlaylistSort = "updated_at.desc",
    include_deleted: bool = Query(False, alias="includeDeleted"),
    user: User = Depends(get_current_user),
    db: Session = Depends(db_dependency),
):
    """List the caller's playlists."""
    return await playlist_service.list_playlists(
        db, user.id, page, page_size, search, sort, include_deleted
    )


@router.post("", response_model=PlaylistResponse, status_code=status.HTTP_201_CREATED)
async def create_playlist(
    body: PlaylistCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_dependency),
):
    """Create a new playlist."""
    return await playlist_service.create_playlist(db, user.id, body)


@router.get("/{playlist_id}", response_model=PlaylistDetail)
async def get_playlist(
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_dependency),
):
    """Get a playlist with its live track count."""
    return await playlist_service.get_playlist(db, user.id, playlist_id)


@router.patch("/{playlist_id}", response_model=PlaylistResponse)
async def update_playlist(
    playlist_id: str,
    body: PlaylistUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_dependency),
):
    """Update the name and/or description of a playlist."""
    return await playlist_service.update_playlist(db, user.id, playlist_id, body)


@router.delete("/{playlist_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_playlist(
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_dependency),
):
    """Soft-delete a playlist and its tracks."""
    await playlist_service.delete_playlist(db, user.id, playlist_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
