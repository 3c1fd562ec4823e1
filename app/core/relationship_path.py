"""Shortest relationship path between two people.

The persons table only stores foreign keys, so every query first turns the
snapshot into an explicit undirected graph (id -> tagged neighbours) and then
runs a plain breadth-first search over it. All edges weigh 1.
"""
from __future__ import annotations

from collections import defaultdict, deque
from typing import Any, Iterable, Optional

from app.core.tree_builder import hierarchical_parent_id

START = "start"
PARENT = "parent"
CHILD = "child"
SPOUSE = "spouse"

Adjacency = dict[str, list[tuple[str, str]]]


def build_adjacency(records: Iterable[Any]) -> Adjacency:
    """
    Map every person id to ``[(neighbour_id, kind), ...]``.

    ``kind`` is what the neighbour is to the key person: parent, child or
    spouse. Descent edges are added from the child side only and each spouse
    pair once, so a symmetric pair never shows up twice.
    """
    records = list(records)
    known = {r.id for r in records}
    adj: Adjacency = defaultdict(list)
    paired: set[frozenset] = set()

    for r in records:
        adj[r.id]  # every person gets an entry, even when isolated

        parent_id = hierarchical_parent_id(r)
        if parent_id and parent_id in known and parent_id != r.id:
            adj[r.id].append((parent_id, PARENT))
            adj[parent_id].append((r.id, CHILD))

        spouse_id = getattr(r, "spouse_id", None)
        if spouse_id and spouse_id in known and spouse_id != r.id:
            pair = frozenset((r.id, spouse_id))
            if pair not in paired:
                paired.add(pair)
                adj[r.id].append((spouse_id, SPOUSE))
                adj[spouse_id].append((r.id, SPOUSE))

    return dict(adj)


def shortest_path_ids(adj: Adjacency, start_id: str, end_id: str) -> Optional[list[str]]:
    """BFS carrying the whole path per queue entry. None when unreachable."""
    if start_id not in adj or end_id not in adj:
        return None

    queue = deque([[start_id]])
    visited = {start_id}

    while queue:
        path = queue.popleft()
        current = path[-1]

        if current == end_id:
            return path

        for neighbour, _kind in adj.get(current, []):
            if neighbour not in visited:
                visited.add(neighbour)
                queue.append(path + [neighbour])

    return None


def classify_hop(prev: Any, curr: Any) -> str:
    if hierarchical_parent_id(prev) == curr.id:
        return PARENT
    if getattr(prev, "spouse_id", None) == curr.id or getattr(curr, "spouse_id", None) == prev.id:
        return SPOUSE
    # curr names prev as its parent
    return CHILD


def find_relationship_path(
    records: Iterable[Any],
    start_id: str,
    end_id: str,
) -> Optional[list[dict]]:
    """
    Ordered hop list from ``start_id`` to ``end_id``.

    Each segment is ``{"person_id", "person_name", "relationship"}``; the
    first one is always ``start``. Returns None when the two people are not
    connected or either id is unknown. Asking for a person's path to
    themselves yields the single ``start`` segment.
    """
    records = list(records)
    by_id = {r.id: r for r in records}

    path = shortest_path_ids(build_adjacency(records), start_id, end_id)
    if path is None:
        return None

    segments = []
    for i, person_id in enumerate(path):
        person = by_id[person_id]
        relationship = START if i == 0 else classify_hop(by_id[path[i - 1]], person)
        segments.append({
            "person_id": person_id,
            "person_name": person.name,
            "relationship": relationship,
        })

    return segments
