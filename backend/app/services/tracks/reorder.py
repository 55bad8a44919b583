"""
Validation of client-submitted full orderings.
"""

from typing import Dict, Iterable, Sequence, Tuple

from app.core.errors import ReorderMismatch, ValidationFailed
from app.schemas.track import OrderedTrack

COUNT_MISMATCH = "COUNT_MISMATCH"
MISSING_OR_EXTRA_ITEMS = "MISSING_OR_EXTRA_ITEMS"
DUPLICATE_POSITION = "DUPLICATE_POSITION"
POSITION_RESERVED = "POSITION_RESERVED"


def validate_reorder(
    current: Sequence[Tuple[str, int]],
    ordered: Sequence[OrderedTrack],
    reserved_positions: Iterable[int] = (),
) -> Dict[str, int]:
    """
    Check that ``ordered`` is an exact permutation of the live tracks.

    Checks run in a fixed order and the first failure wins:

    1. item count equals the live track count
    2. submitted URIs equal the live URIs, nothing missing or extra
    3. submitted positions are pairwise distinct
    4. no submitted position belongs to a soft-deleted track

    Args:
        current: (track_uri, position) of every live track
        ordered: The submitted ordering
        reserved_positions: Positions held by soft-deleted tracks

    Returns:
        Mapping of track URI to its new position

    Raises:
        ReorderMismatch: For checks 1 and 2
        ValidationFailed: For checks 3 and 4
    """
    if len(ordered) != len(current):
        raise ReorderMismatch(
            "Ordered tracks must match current playlist tracks exactly",
            {
                "reason": COUNT_MISMATCH,
                "currentCount": len(current),
                "orderedCount": len(ordered),
            },
        )

    current_uris = [uri for uri, _ in current]
    current_set = set(current_uris)
    ordered_set = {item.track_uri for item in ordered}

    missing = [uri for uri in current_uris if uri not in ordered_set]
    extra = []
    for item in ordered:
        if item.track_uri not in current_set and item.track_uri not in extra:
            extra.append(item.track_uri)

    # Equal counts with a repeated URI always leave something missing
    if missing or extra:
        raise ReorderMismatch(
            "Ordered tracks must match current playlist tracks exactly",
            {"reason": MISSING_OR_EXTRA_ITEMS, "missing": missing, "extra": extra},
        )

    seen_positions = set()
    duplicates = []
    for item in ordered:
        if item.position in seen_positions and item.position not in duplicates:
            duplicates.append(item.position)
        seen_positions.add(item.position)

    if duplicates:
        raise ValidationFailed(
            "Duplicate positions found in ordered list",
            {"reason": DUPLICATE_POSITION, "positions": duplicates},
        )

    reserved = set(reserved_positions)
    clashes = sorted(seen_positions & reserved)
    if clashes:
        raise ValidationFailed(
            "Positions are held by removed tracks",
            {"reason": POSITION_RESERVED, "positions": clashes},
        )

    return {item.track_uri: item.position for item in ordered}
