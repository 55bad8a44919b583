"""
Request glue for the track position engine.

Every write runs in a single transaction that starts by locking the playlist
row, so the read-compute-write sequence of one request never interleaves with
another write to the same playlist.
"""

import logging
from typing import List, Sequence

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.db.models import PlaylistTrack
from app.db.session import transaction
from app.schemas.track import (
    AddTracksResponse,
    OrderedTrack,
    PlaylistTrackItem,
    PlaylistTrackList,
    ReorderTracksResponse,
    TrackIn,
    TrackPosition,
)
from app.services.playlists import get_owned_playlist, live_track_count
from app.services.tracks.positions import (
    allocate_positions,
    check_capacity,
    check_duplicates,
)
from app.services.tracks.reorder import validate_reorder
from app.utils.datetime_helper import utc_now

logger = logging.getLogger(__name__)


def _all_tracks(db: Session, playlist_id) -> List[PlaylistTrack]:
    return (
        db.query(PlaylistTrack)
        .filter(PlaylistTrack.playlist_id == playlist_id)
        .order_by(PlaylistTrack.position)
        .all()
    )


async def list_tracks(
    db: Session, user_id, playlist_id, page: int = 1, page_size: int = 50
) -> PlaylistTrackList:
    """
    Get one page of live tracks ordered by position.

    Args:
        db: Database session
        user_id: Caller's user id
        playlist_id: Playlist id
        page: 1-based page number
        page_size: Tracks per page

    Returns:
        The page of tracks and the total live track count
    """
    playlist = get_owned_playlist(db, user_id, playlist_id)

    total = live_track_count(db, playlist.id)
    tracks = (
        db.query(PlaylistTrack)
        .filter(
            PlaylistTrack.playlist_id == playlist.id,
            PlaylistTrack.is_deleted.is_(False),
        )
        .order_by(PlaylistTrack.position)
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return PlaylistTrackList(
        items=[
            PlaylistTrackItem(
                position=track.position,
                track_uri=track.track_uri,
                artist=track.artist,
                title=track.title,
                album=track.album,
                added_at=track.added_at,
            )
            for track in tracks
        ],
        page=page,
        page_size=page_size,
        total=total,
    )


async def add_tracks(
    db: Session,
    user_id,
    playlist_id,
    tracks: Sequence[TrackIn],
    insert_after_position: int = 0,
) -> AddTracksResponse:
    """
    Add a batch of tracks after the given position.

    The batch is accepted or rejected as a whole. Positions are handed out in
    submission order, so the first track gets the lowest position.

    Raises:
        NotFound: If the playlist is not the caller's live playlist
        PlaylistCapacityExceeded: If the batch does not fit
        DuplicateTrack: If a URI is already live or repeated in the batch
    """
    with transaction(db):
        playlist = get_owned_playlist(db, user_id, playlist_id, lock=True)
        existing = _all_tracks(db, playlist.id)

        live_uris = {track.track_uri for track in existing if not track.is_deleted}
        occupied = {track.position for track in existing}

        check_capacity(len(live_uris), len(tracks))
        check_duplicates(live_uris, tracks)
        positions = allocate_positions(
            occupied, insert_after_position, len(tracks), live_count=len(live_uris)
        )

        now = utc_now()
        db.add_all(
            [
                PlaylistTrack(
                    playlist_id=playlist.id,
                    position=position,
                    track_uri=track.track_uri,
                    artist=track.artist,
                    title=track.title,
                    album=track.album,
                    is_deleted=False,
                    added_at=now,
                )
                for track, position in zip(tracks, positions)
            ]
        )
        playlist.updated_at = now

    logger.info(f"Added {len(positions)} tracks to playlist {playlist_id} at {positions}")
    return AddTracksResponse(added=len(positions), positions=positions)


async def reorder_tracks(
    db: Session, user_id, playlist_id, ordered: Sequence[OrderedTrack]
) -> ReorderTracksResponse:
    """
    Replace the positions of all live tracks with a client-submitted ordering.

    Tracks are matched by URI. Moving tracks are first parked at the negated
    target position and flushed, then written to their final position, so the
    position uniqueness constraint holds after every statement.

    Raises:
        NotFound: If the playlist is not the caller's live playlist
        ReorderMismatch: If the ordering is not a permutation of the live tracks
        ValidationFailed: On repeated positions or positions held by removed tracks
    """
    with transaction(db):
        playlist = get_owned_playlist(db, user_id, playlist_id, lock=True)
        existing = _all_tracks(db, playlist.id)

        live = [track for track in existing if not track.is_deleted]
        reserved = {track.position for track in existing if track.is_deleted}

        new_positions = validate_reorder(
            [(track.track_uri, track.position) for track in live], ordered, reserved
        )

        moving = [
            track for track in live if track.position != new_positions[track.track_uri]
        ]
        if moving:
            for track in moving:
                track.position = -new_positions[track.track_uri]
            db.flush()

            for track in moving:
                track.position = new_positions[track.track_uri]
            db.flush()

            playlist.updated_at = utc_now()

    logger.info(f"Reordered playlist {playlist_id}: {len(moving)} tracks moved")
    return ReorderTracksResponse(
        positions=[
            TrackPosition(track_uri=item.track_uri, position=item.position)
            for item in ordered
        ]
    )


async def remove_track(db: Session, user_id, playlist_id, position: int) -> None:
    """
    Soft-delete the live track at a position.

    The position stays occupied, so later inserts never reuse it.

    Raises:
        NotFound: If the playlist, or a live track at that position, is missing
    """
    with transaction(db):
        playlist = get_owned_playlist(db, user_id, playlist_id, lock=True)

        track = (
            db.query(PlaylistTrack)
            .filter(
                PlaylistTrack.playlist_id == playlist.id,
                PlaylistTrack.position == position,
            )
            .first()
        )
        if not track:
            raise NotFound("Track not found at this position", {"position": position})
        if track.is_deleted:
            raise NotFound("Track already deleted", {"position": position})

        track.is_deleted = True
        playlist.updated_at = utc_now()

    logger.info(f"Removed track at position {position} from playlist {playlist_id}")
