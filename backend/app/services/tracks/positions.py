"""
Position allocation and the admission guards for adding tracks.

These functions are pure: they look only at the values passed in and either
return a result or raise an ApiError. The caller owns reading the current
playlist state and writing the outcome back inside one transaction.
"""

from typing import Iterable, List, Sequence, Set

from app.core.config import MAX_TRACKS_PER_PLAYLIST
from app.core.errors import DuplicateTrack, PlaylistCapacityExceeded
from app.schemas.track import TrackIn


def _capacity_error(live_count: int, batch_size: int, limit: int):
    return PlaylistCapacityExceeded(
        f"Playlist cannot exceed {limit} tracks",
        {
            "currentCount": live_count,
            "maxCount": limit,
            "requestedToAdd": batch_size,
        },
    )


def check_capacity(
    live_count: int, batch_size: int, limit: int = MAX_TRACKS_PER_PLAYLIST
) -> None:
    """
    Reject a batch that would push the live track count over the limit.

    Args:
        live_count: Number of non-deleted tracks currently in the playlist
        batch_size: Number of tracks in the incoming batch
        limit: Maximum number of live tracks

    Raises:
        PlaylistCapacityExceeded: If live_count + batch_size > limit
    """
    if live_count + batch_size > limit:
        raise _capacity_error(live_count, batch_size, limit)


def check_duplicates(live_uris: Iterable[str], tracks: Sequence[TrackIn]) -> None:
    """
    Reject the whole batch if any track is already live or repeated in the batch.

    The first offending URI, in submission order, is reported.

    Raises:
        DuplicateTrack: On the first URI seen twice
    """
    seen: Set[str] = set(live_uris)
    existing = frozenset(seen)

    for track in tracks:
        if track.track_uri in seen:
            if track.track_uri in existing:
                message = f"Track already in playlist: {track.artist} - {track.title}"
            else:
                message = f"Track repeated in request: {track.artist} - {track.title}"
            raise DuplicateTrack(message, {"trackUri": track.track_uri})
        seen.add(track.track_uri)


def allocate_positions(
    occupied: Iterable[int],
    insert_after_position: int,
    batch_size: int,
    limit: int = MAX_TRACKS_PER_PLAYLIST,
    live_count: int = 0,
) -> List[int]:
    """
    Assign positions to a batch of new tracks by first-fit scan.

    Scanning starts right after ``insert_after_position`` and skips every
    occupied position, live or dead. Positions come back ascending, one per
    track in submission order. Either every track gets a slot or none does.

    Args:
        occupied: Every position ever used in the playlist, deleted tracks included
        insert_after_position: 0-based anchor; 0 means scan from position 1
        batch_size: Number of tracks to place
        limit: Highest assignable position
        live_count: Only used to describe a capacity failure

    Returns:
        List of allocated positions, same length as the batch

    Raises:
        PlaylistCapacityExceeded: If the scan runs past ``limit``
    """
    taken = set(occupied)
    positions = []
    cursor = insert_after_position + 1

    for _ in range(batch_size):
        while cursor in taken and cursor <= limit:
            cursor += 1

        if cursor > limit:
            raise _capacity_error(live_count, batch_size, limit)

        positions.append(cursor)
        taken.add(cursor)
        cursor += 1

    return positions
