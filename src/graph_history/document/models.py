"""Snapshot data model exchanged with the host canvas.

A :class:`Snapshot` is the full document as the canvas reports it: ordered
nodes, ordered edges and the viewport. Snapshots are treated as immutable
values by convention; anything that stores one takes a deep copy first.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

BUDDY_FLAG = "zenBuddy"
EDITING_FLAG = "editing"


class SnapshotError(ValueError):
    """Raised when a host payload cannot be decoded into a snapshot."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message if path is None else f"{path}: {message}")
        self.path = path


def _require_mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise SnapshotError(f"expected an object, got {type(value).__name__}", path=path)
    return value


def _require_str(data: Mapping[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise SnapshotError(f"missing '{key}'", path=path)
    return value


def _optional_mapping(
    data: Mapping[str, Any], key: str, path: str
) -> Mapping[str, Any]:
    """Missing or null decodes as empty; anything else must be a mapping."""

    value = data.get(key)
    if value is None:
        return {}
    return _require_mapping(value, path)


def _payload(data: Mapping[str, Any], path: str) -> Dict[str, Any]:
    raw = data.get("data")
    if raw is None:
        return {}
    return copy.deepcopy(dict(_require_mapping(raw, f"{path}.data")))


def _put_optional(target: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


@dataclass(slots=True)
class XYPosition:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "XYPosition":
        return cls(x=data.get("x", 0.0), y=data.get("y", 0.0))


@dataclass(slots=True)
class Viewport:
    """Pan offset and zoom factor of the canvas."""

    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "zoom": self.zoom}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Viewport":
        return cls(
            x=data.get("x", 0.0), y=data.get("y", 0.0), zoom=data.get("zoom", 1.0)
        )


@dataclass(slots=True)
class Node:
    """A graph node.

    ``selected``, ``dragging``, ``width`` and ``height`` are set by the canvas
    while rendering; ``None`` means the canvas has not reported the flag yet.
    The text-editing flag lives in ``data["editing"]``.
    """

    id: str
    position: XYPosition = field(default_factory=XYPosition)
    type: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    selected: Optional[bool] = None
    dragging: Optional[bool] = None
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def is_buddy(self) -> bool:
        return bool(self.data.get(BUDDY_FLAG))

    @property
    def is_editing(self) -> bool:
        return bool(self.data.get(EDITING_FLAG))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id, "position": self.position.to_dict()}
        _put_optional(result, "type", self.type)
        result["data"] = copy.deepcopy(self.data)
        _put_optional(result, "selected", self.selected)
        _put_optional(result, "dragging", self.dragging)
        _put_optional(result, "width", self.width)
        _put_optional(result, "height", self.height)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, path: str = "node") -> "Node":
        data = _require_mapping(data, path)
        position = _optional_mapping(data, "position", f"{path}.position")
        return cls(
            id=_require_str(data, "id", path),
            position=XYPosition.from_dict(position),
            type=data.get("type"),
            data=_payload(data, path),
            selected=data.get("selected"),
            dragging=data.get("dragging"),
            width=data.get("width"),
            height=data.get("height"),
        )


@dataclass(slots=True)
class Edge:
    """A directed connection between two node handles."""

    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    type: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    selected: Optional[bool] = None

    @property
    def is_buddy(self) -> bool:
        return bool(self.data.get(BUDDY_FLAG))

    @property
    def is_editing(self) -> bool:
        return bool(self.data.get(EDITING_FLAG))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
        }
        _put_optional(result, "sourceHandle", self.source_handle)
        _put_optional(result, "targetHandle", self.target_handle)
        _put_optional(result, "type", self.type)
        result["data"] = copy.deepcopy(self.data)
        _put_optional(result, "selected", self.selected)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, path: str = "edge") -> "Edge":
        data = _require_mapping(data, path)
        return cls(
            id=_require_str(data, "id", path),
            source=_require_str(data, "source", path),
            target=_require_str(data, "target", path),
            source_handle=data.get("sourceHandle"),
            target_handle=data.get("targetHandle"),
            type=data.get("type"),
            data=_payload(data, path),
            selected=data.get("selected"),
        )


@dataclass(slots=True)
class Snapshot:
    """Full document state: ordered nodes, ordered edges and the viewport."""

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    viewport: Viewport = field(default_factory=Viewport)

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    def copy(self) -> "Snapshot":
        """Return an independent deep copy; no sub-object is shared."""

        return copy.deepcopy(self)

    @property
    def is_settled(self) -> bool:
        """False while a node is being dragged or any label is being edited."""

        if any(node.dragging for node in self.nodes):
            return False
        if any(node.is_editing for node in self.nodes):
            return False
        return not any(edge.is_editing for edge in self.edges)

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edges_for_node(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.source == node_id or e.target == node_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "viewport": self.viewport.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Snapshot":
        data = _require_mapping(data, "snapshot")
        viewport = _optional_mapping(data, "viewport", "snapshot.viewport")
        return cls(
            nodes=[
                Node.from_dict(item, path=f"nodes[{index}]")
                for index, item in enumerate(_sequence(data, "nodes"))
            ],
            edges=[
                Edge.from_dict(item, path=f"edges[{index}]")
                for index, item in enumerate(_sequence(data, "edges"))
            ],
            viewport=Viewport.from_dict(viewport),
        )


def _sequence(data: Mapping[str, Any], key: str) -> Iterable[Any]:
    value = data.get(key)
    if value is None:
        return ()
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise SnapshotError("expected a list", path=key)
    return value


__all__ = [
    "BUDDY_FLAG",
    "EDITING_FLAG",
    "Edge",
    "Node",
    "Snapshot",
    "SnapshotError",
    "Viewport",
    "XYPosition",
]
