"""
Rebuilds one nested family tree from the flat persons table.

Input is the full record list (ORM rows or anything with the same
attributes), read once by the caller. Nothing here touches the database.

Known gap: a parent_id chain that loops back on itself is not detected.
Such records are never root candidates, but asking for a root inside the
loop produces a cyclic structure.
"""
from __future__ import annotations

from collections import deque
from typing import Any, Iterable, Optional

from app.core.errors import EmptyTreeError, NotFoundError
from app.models.person import DESCRIPTIVE_FIELDS, Placement

# Rows written before placement existed stored this in parent_id
SPOUSE_SENTINEL = "SPOUSE"


# ============================================================
# RECORD HELPERS
# ============================================================

def is_spouse_only(record: Any) -> bool:
    placement = getattr(record, "placement", None)
    return placement == Placement.SPOUSE or getattr(record, "parent_id", None) == SPOUSE_SENTINEL


def hierarchical_parent_id(record: Any) -> Optional[str]:
    """Parent reference to follow, or None for roots and spouse-only rows."""
    if is_spouse_only(record):
        return None
    return getattr(record, "parent_id", None) or None


def describe(record: Any) -> dict[str, Any]:
    out = {"id": record.id}
    for field in DESCRIPTIVE_FIELDS:
        out[field] = getattr(record, field, None)
    return out


def _placement_of(record: Any) -> str:
    if is_spouse_only(record):
        return Placement.SPOUSE.value
    if hierarchical_parent_id(record):
        return Placement.CHILD.value
    return Placement.ROOT.value


def _new_node(record: Any) -> dict[str, Any]:
    node = describe(record)
    node.update({
        "parent_id": hierarchical_parent_id(record),
        "spouse_id": getattr(record, "spouse_id", None),
        "placement": _placement_of(record),
        "children": [],
        "spouse": None,
        "collapsed": False,
    })
    return node


# ============================================================
# LINKING
# ============================================================

def link_records(records: Iterable[Any]) -> tuple[list[Any], dict[str, dict], set[str]]:
    """
    Returns (records, nodes_by_id, child_ids).

    child_ids holds every record that names a hierarchical parent, whether
    or not that parent still exists; such records are never root candidates.
    """
    records = list(records)
    nodes: dict[str, dict] = {}
    child_ids: set[str] = set()

    for r in records:
        nodes[r.id] = _new_node(r)
        if hierarchical_parent_id(r):
            child_ids.add(r.id)

    for r in records:
        node = nodes[r.id]

        # spouse snapshot: descriptive fields only, each side independently
        spouse_id = getattr(r, "spouse_id", None)
        if spouse_id and spouse_id in nodes:
            spouse_node = nodes[spouse_id]
            node["spouse"] = {field: spouse_node[field] for field in ("id",) + DESCRIPTIVE_FIELDS}

        parent_id = hierarchical_parent_id(r)
        if parent_id and parent_id in nodes:
            nodes[parent_id]["children"].append(node)

    return records, nodes, child_ids


def subtree_size(node: dict[str, Any]) -> int:
    """Count of ``node`` plus everything reachable through ``children``."""
    count = 0
    stack = [node]
    while stack:
        current = stack.pop()
        count += 1
        stack.extend(current["children"])
    return count


# ============================================================
# ROOT SELECTION
# ============================================================

def _select_root(records: list[Any], nodes: dict[str, dict], child_ids: set[str]) -> dict:
    candidates = [
        nodes[r.id]
        for r in records
        if r.id not in child_ids and not is_spouse_only(r)
    ]

    if not candidates:
        # corrupted store or a lone spouse-only row: take anything there is
        if records:
            return nodes[records[0].id]
        raise EmptyTreeError(
            "Root person not found in the database. The tree structure may be corrupted."
        )

    if len(candidates) == 1:
        return candidates[0]

    # Several fragments: the head of the largest one wins, first seen on ties
    root = None
    best = 0
    for candidate in candidates:
        size = subtree_size(candidate)
        if size > best:
            best = size
            root = candidate
    return root


def infer_root_id(records: Iterable[Any]) -> str:
    """Id of the root that ``build_tree`` picks when none is requested."""
    records, nodes, child_ids = link_records(records)
    if not records:
        raise EmptyTreeError("No persons found in the database.")
    return _select_root(records, nodes, child_ids)["id"]


def _mark_collapsed(root: dict[str, Any], collapse_depth: int):
    queue = deque([(root, 0)])
    while queue:
        node, depth = queue.popleft()
        if depth >= collapse_depth:
            node["collapsed"] = bool(node["children"])
            continue
        for child in node["children"]:
            queue.append((child, depth + 1))


def build_tree(
    records: Iterable[Any],
    root_id: Optional[str] = None,
    collapse_depth: Optional[int] = None,
) -> dict[str, Any]:
    """
    Link the flat records and return the nested node for the chosen root.

    With ``root_id`` the tree is anchored there (NotFoundError if unknown).
    Without it the root is inferred from the records that are neither
    children nor spouse-only.

    ``collapse_depth`` flags nodes at that generation (root is 0) as
    collapsed. Their children stay in place.
    """
    records, nodes, child_ids = link_records(records)

    if not records:
        raise EmptyTreeError("No persons found in the database.")

    if root_id:
        root = nodes.get(root_id)
        if root is None:
            raise NotFoundError(f"Person with id {root_id} not found.")
    else:
        root = _select_root(records, nodes, child_ids)

    if collapse_depth is not None:
        _mark_collapsed(root, collapse_depth)

    return root
