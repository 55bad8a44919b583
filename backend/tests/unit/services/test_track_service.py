"""
Tests for the track service functions against a real session.
"""

import uuid

import pytest

from app.core.errors import (
    DuplicateTrack,
    NotFound,
    PlaylistCapacityExceeded,
    ReorderMismatch,
    ValidationFailed,
)
from app.db.models import PlaylistTrack
from app.schemas.track import OrderedTrack, TrackIn
from app.services.tracks import (
    add_tracks,
    list_tracks,
    remove_track,
    reorder_tracks,
)


def tracks(*uris):
    return [
        TrackIn(track_uri=uri, artist="Artist", title=f"Title {uri}", album="Album")
        for uri in uris
    ]


def ordering(*pairs):
    return [OrderedTrack(position=position, track_uri=uri) for position, uri in pairs]


def positions_by_uri(db_session, playlist, include_deleted=False):
    query = db_session.query(PlaylistTrack).filter(
        PlaylistTrack.playlist_id == playlist.id
    )
    if not include_deleted:
        query = query.filter(PlaylistTrack.is_deleted.is_(False))
    return {track.track_uri: track.position for track in query.all()}


class TestAddTracks:
    """Tests for add_tracks."""

    @pytest.mark.asyncio
    async def test_add_to_empty_playlist(self, db_session, test_user, playlist):
        result = await add_tracks(db_session, test_user.id, playlist.id, tracks("a", "b"))

        assert result.added == 2
        assert result.positions == [1, 2]
        assert positions_by_uri(db_session, playlist) == {"a": 1, "b": 2}

    @pytest.mark.asyncio
    async def test_dead_position_is_skipped(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(1, "a"), (2, "b")], deleted={2})

        result = await add_tracks(db_session, test_user.id, playlist.id, tracks("c"))

        assert result.positions == [3]

    @pytest.mark.asyncio
    async def test_removed_uri_can_be_added_again(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(1, "a")], deleted={1})

        result = await add_tracks(db_session, test_user.id, playlist.id, tracks("a"))

        assert result.positions == [2]
        rows = db_session.query(PlaylistTrack).filter_by(track_uri="a").all()
        assert sorted((row.position, row.is_deleted) for row in rows) == [
            (1, True),
            (2, False),
        ]

    @pytest.mark.asyncio
    async def test_insert_after_position(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(1, "a"), (2, "b"), (5, "e")])

        result = await add_tracks(
            db_session, test_user.id, playlist.id, tracks("x", "y", "z"), 1
        )

        assert result.positions == [3, 4, 6]

    @pytest.mark.asyncio
    async def test_duplicate_rejects_whole_batch(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(1, "a")])

        with pytest.raises(DuplicateTrack):
            await add_tracks(db_session, test_user.id, playlist.id, tracks("b", "a"))

        assert positions_by_uri(db_session, playlist) == {"a": 1}

    @pytest.mark.asyncio
    async def test_capacity_counts_live_tracks(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(i, f"t{i}") for i in range(1, 101)])

        with pytest.raises(PlaylistCapacityExceeded):
            await add_tracks(db_session, test_user.id, playlist.id, tracks("new"))

    @pytest.mark.asyncio
    async def test_allocator_fails_when_dead_tracks_fill_the_range(
        self, db_session, test_user, playlist, seed_tracks
    ):
        """Only 10 live tracks, but every position has been used."""
        seed_tracks(
            playlist,
            [(i, f"t{i}") for i in range(1, 101)],
            deleted=set(range(11, 101)),
        )

        with pytest.raises(PlaylistCapacityExceeded):
            await add_tracks(db_session, test_user.id, playlist.id, tracks("new"))

        assert len(positions_by_uri(db_session, playlist)) == 10

    @pytest.mark.asyncio
    async def test_other_users_playlist_not_found(
        self, db_session, other_user, playlist
    ):
        with pytest.raises(NotFound):
            await add_tracks(db_session, other_user.id, playlist.id, tracks("a"))

    @pytest.mark.asyncio
    async def test_deleted_playlist_not_found(self, db_session, test_user, playlist):
        playlist.is_deleted = True
        db_session.commit()

        with pytest.raises(NotFound):
            await add_tracks(db_session, test_user.id, playlist.id, tracks("a"))

    @pytest.mark.asyncio
    async def test_malformed_playlist_id_not_found(self, db_session, test_user):
        with pytest.raises(NotFound):
            await add_tracks(db_session, test_user.id, "not-a-uuid", tracks("a"))

    @pytest.mark.asyncio
    async def test_unknown_playlist_not_found(self, db_session, test_user):
        with pytest.raises(NotFound):
            await add_tracks(db_session, test_user.id, uuid.uuid4(), tracks("a"))


class TestReorderTracks:
    """Tests for reorder_tracks."""

    @pytest.fixture
    def abc(self, playlist, seed_tracks):
        seed_tracks(playlist, [(1, "a"), (2, "b"), (3, "c")])
        return playlist

    @pytest.mark.asyncio
    async def test_rotation(self, db_session, test_user, abc):
        result = await reorder_tracks(
            db_session, test_user.id, abc.id, ordering((3, "a"), (1, "b"), (2, "c"))
        )

        assert [(p.track_uri, p.position) for p in result.positions] == [
            ("a", 3),
            ("b", 1),
            ("c", 2),
        ]
        assert positions_by_uri(db_session, abc) == {"a": 3, "b": 1, "c": 2}

    @pytest.mark.asyncio
    async def test_swap_over_full_playlist(
        self, db_session, test_user, playlist, seed_tracks
    ):
        """A cycle over all 100 positions has no free slot to move through."""
        seed_tracks(playlist, [(i, f"t{i}") for i in range(1, 101)])
        shifted = ordering(*[(i % 100 + 1, f"t{i}") for i in range(1, 101)])

        await reorder_tracks(db_session, test_user.id, playlist.id, shifted)

        current = positions_by_uri(db_session, playlist)
        assert current["t1"] == 2
        assert current["t100"] == 1
        assert sorted(current.values()) == list(range(1, 101))

    @pytest.mark.asyncio
    async def test_missing_item_changes_nothing(self, db_session, test_user, abc):
        with pytest.raises(ReorderMismatch):
            await reorder_tracks(
                db_session, test_user.id, abc.id, ordering((1, "a"), (2, "b"))
            )

        assert positions_by_uri(db_session, abc) == {"a": 1, "b": 2, "c": 3}

    @pytest.mark.asyncio
    async def test_duplicate_positions_change_nothing(self, db_session, test_user, abc):
        with pytest.raises(ValidationFailed):
            await reorder_tracks(
                db_session,
                test_user.id,
                abc.id,
                ordering((2, "a"), (2, "b"), (1, "c")),
            )

        assert positions_by_uri(db_session, abc) == {"a": 1, "b": 2, "c": 3}

    @pytest.mark.asyncio
    async def test_dead_position_is_reserved(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(1, "a"), (2, "dead"), (3, "c")], deleted={2})

        with pytest.raises(ValidationFailed) as exc_info:
            await reorder_tracks(
                db_session, test_user.id, playlist.id, ordering((2, "a"), (1, "c"))
            )

        assert exc_info.value.details["reason"] == "POSITION_RESERVED"
        assert positions_by_uri(db_session, playlist) == {"a": 1, "c": 3}

    @pytest.mark.asyncio
    async def test_deleted_tracks_are_not_part_of_the_ordering(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(1, "a"), (2, "dead"), (3, "c")], deleted={2})

        await reorder_tracks(
            db_session, test_user.id, playlist.id, ordering((3, "a"), (1, "c"))
        )

        assert positions_by_uri(db_session, playlist, include_deleted=True) == {
            "a": 3,
            "dead": 2,
            "c": 1,
        }


class TestRemoveTrack:
    """Tests for remove_track."""

    @pytest.mark.asyncio
    async def test_remove_then_remove_again(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(1, "a"), (2, "b")])

        await remove_track(db_session, test_user.id, playlist.id, 2)
        assert positions_by_uri(db_session, playlist) == {"a": 1}

        with pytest.raises(NotFound) as exc_info:
            await remove_track(db_session, test_user.id, playlist.id, 2)
        assert exc_info.value.message == "Track already deleted"

    @pytest.mark.asyncio
    async def test_empty_position(self, db_session, test_user, playlist):
        with pytest.raises(NotFound) as exc_info:
            await remove_track(db_session, test_user.id, playlist.id, 7)

        assert exc_info.value.message == "Track not found at this position"

    @pytest.mark.asyncio
    async def test_removed_position_never_reallocated(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(i, f"t{i}") for i in range(1, 6)])

        await remove_track(db_session, test_user.id, playlist.id, 5)
        result = await add_tracks(db_session, test_user.id, playlist.id, tracks("new"))

        assert result.positions == [6]


class TestListTracks:
    """Tests for list_tracks."""

    @pytest.mark.asyncio
    async def test_pagination_and_order(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(
            playlist, [(5, "e"), (1, "a"), (3, "c"), (2, "b"), (4, "d")], deleted={3}
        )

        first = await list_tracks(db_session, test_user.id, playlist.id, 1, 2)
        second = await list_tracks(db_session, test_user.id, playlist.id, 2, 2)
        third = await list_tracks(db_session, test_user.id, playlist.id, 3, 2)

        assert [t.track_uri for t in first.items] == ["a", "b"]
        assert [t.track_uri for t in second.items] == ["d", "e"]
        assert third.items == []
        assert first.total == second.total == third.total == 4

    @pytest.mark.asyncio
    async def test_repeated_reads_are_identical(
        self, db_session, test_user, playlist, seed_tracks
    ):
        seed_tracks(playlist, [(1, "a"), (2, "b")])

        first = await list_tracks(db_session, test_user.id, playlist.id)
        second = await list_tracks(db_session, test_user.id, playlist.id)

        assert first == second
        assert first.page_size == 50
