"""
Rebuild the nested comment thread of a partner from the flat rows returned by
the partner_comment_tree SQL function.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Set
from app.database.supabase_client import parse_timestamp
import logging

logger = logging.getLogger(__name__)


def _created_key(row: Dict[str, Any]):
    value = row.get("created_at")
    if value is None:
        return datetime.min.replace(tzinfo=timezone.utc), row["id"]
    return parse_timestamp(value), row["id"]


def build_comment_tree(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Return the top-level comments, newest first, each carrying a "replies" list
    of the same shape (newest first at every level).

    Rows whose parent is not among the rows are left out of the tree.
    """
    ordered = sorted(rows, key=_created_key, reverse=True)
    nodes = {row["id"]: {**row, "replies": []} for row in ordered}

    roots = []
    for row in ordered:
        node = nodes[row["id"]]
        parent_id = row.get("parent_id")
        if parent_id is None:
            roots.append(node)
        elif parent_id in nodes:
            nodes[parent_id]["replies"].append(node)
        else:
            logger.debug(f"Comment {row['id']} dropped: parent {parent_id} not found")
    return roots


def collect_subtree_ids(rows: Iterable[Dict[str, Any]], root_id: int) -> Set[int]:
    """Ids of root_id and every comment below it."""
    children: Dict[int, List[int]] = {}
    for row in rows:
        if row.get("parent_id") is not None:
            children.setdefault(row["parent_id"], []).append(row["id"])

    found = {root_id}
    pending = [root_id]
    while pending:
        for child_id in children.get(pending.pop(), []):
            if child_id not in found:
                found.add(child_id)
                pending.append(child_id)
    return found
