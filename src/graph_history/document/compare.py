"""Semantic equality used to decide whether a snapshot is a new edit."""

from __future__ import annotations

from typing import Any, Dict, List

from .models import Edge, Node, Snapshot

NODE_TRANSIENT_FIELDS = ("selected", "width", "height")
EDGE_TRANSIENT_FIELDS = ("selected",)
DATA_TRANSIENT_KEYS = ("editing", "zenMaster")


def _strip(payload: Dict[str, Any], fields: tuple[str, ...]) -> Dict[str, Any]:
    for name in fields:
        payload.pop(name, None)
    data = payload.get("data")
    if isinstance(data, dict):
        payload["data"] = {k: v for k, v in data.items() if k not in DATA_TRANSIENT_KEYS}
    return payload


def comparable_node(node: Node) -> Dict[str, Any]:
    return _strip(node.to_dict(), NODE_TRANSIENT_FIELDS)


def comparable_edge(edge: Edge) -> Dict[str, Any]:
    return _strip(edge.to_dict(), EDGE_TRANSIENT_FIELDS)


def comparable(snapshot: Snapshot) -> Dict[str, List[Dict[str, Any]]]:
    """Project a snapshot onto the fields that count as document content.

    Buddy elements are dropped, render-derived and transient flags are
    removed, and the viewport is left out. Sequence order is kept.
    """

    return {
        "nodes": [
            comparable_node(node)
            for node in snapshot.nodes
            if not node.is_buddy
        ],
        "edges": [
            comparable_edge(edge)
            for edge in snapshot.edges
            if not edge.is_buddy
        ],
    }


def equal_across_time(past: Snapshot, present: Snapshot) -> bool:
    return comparable(past) == comparable(present)


__all__ = [
    "DATA_TRANSIENT_KEYS",
    "EDGE_TRANSIENT_FIELDS",
    "NODE_TRANSIENT_FIELDS",
    "comparable",
    "comparable_edge",
    "comparable_node",
    "equal_across_time",
]
