# room_directory/services/directory/feature_match.py

"""
Storage-agnostic helpers for the all-of-features match and for attaching
feature lists to rooms.

These functions only see rows that were already fetched, so they can be
tested without a database.
"""

from collections import defaultdict
from typing import (
    Any,
    Collection,
    Dict,
    Hashable,
    Iterable,
    List,
    Mapping,
    Set,
    Tuple,
    TypeVar,
)

K = TypeVar("K", bound=Hashable)

FeatureLink = Tuple[Any, Any]


def group_feature_ids(links: Iterable[FeatureLink]) -> Dict[Any, Set[Any]]:
    """Group ``(room_id, feature_id)`` rows into ``{room_id: {feature_id, ...}}``."""
    grouped: Dict[Any, Set[Any]] = defaultdict(set)
    for room_id, feature_id in links:
        grouped[room_id].add(feature_id)
    return dict(grouped)


def rooms_with_all_features(
    candidate_ids: Iterable[K],
    links: Iterable[FeatureLink],
    required_feature_ids: Collection[Any],
) -> List[K]:
    """Return the candidates whose feature set is a superset of the required set.

    Candidate order is preserved. Quantity plays no part: a room either has a
    feature or it does not. An empty requirement keeps every candidate.
    """
    required = set(required_feature_ids)
    candidates = list(candidate_ids)
    if not required:
        return candidates

    by_room = group_feature_ids(links)
    return [
        room_id for room_id in candidates if required <= by_room.get(room_id, set())
    ]


def group_by_room(
    rows: Iterable[Mapping[str, Any]], key: str = "room_id"
) -> Dict[Any, List[Dict[str, Any]]]:
    """Bucket enrichment rows by room, keeping the incoming row order."""
    grouped: Dict[Any, List[Dict[str, Any]]] = defaultdict(list)
    for row in rows:
        item = dict(row)
        grouped[item.pop(key)].append(item)
    return dict(grouped)


__all__ = [
    "group_feature_ids",
    "rooms_with_all_features",
    "group_by_room",
]
