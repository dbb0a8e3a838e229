"""In-memory reference host with batched change notifications."""

from __future__ import annotations

import copy
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional

from graph_history.document import Edge, Node, Snapshot, Viewport, XYPosition

from .protocol import SnapshotListener, Update, resolve_update


def generate_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class InMemoryGraphHost:
    """Owns live nodes, edges and viewport and notifies listeners on change.

    Every setter call counts as a change, even when the new value equals the
    old one. Inside ``batch()`` notifications are held back and a single one
    is delivered when the outermost batch exits.
    """

    def __init__(self, snapshot: Optional[Snapshot] = None) -> None:
        initial = (snapshot or Snapshot.empty()).copy()
        self._nodes: List[Node] = initial.nodes
        self._edges: List[Edge] = initial.edges
        self._viewport: Viewport = initial.viewport
        self._listeners: List[SnapshotListener] = []
        self._batch_depth = 0
        self._dirty = False
        self.last_transition_ms: int = 0
        self.notifications = 0

    def get_snapshot(self) -> Snapshot:
        return Snapshot(
            nodes=list(self._nodes), edges=list(self._edges), viewport=self._viewport
        ).copy()

    def set_nodes(self, nodes: Update[List[Node]]) -> None:
        self._nodes = list(resolve_update(nodes, self._nodes))
        self._changed()

    def set_edges(self, edges: Update[List[Edge]]) -> None:
        self._edges = list(resolve_update(edges, self._edges))
        self._changed()

    def set_viewport(self, viewport: Viewport, *, duration_ms: int = 0) -> None:
        self._viewport = Viewport(x=viewport.x, y=viewport.y, zoom=viewport.zoom)
        self.last_transition_ms = duration_ms
        self._changed()

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @contextmanager
    def batch(self) -> Iterator["InMemoryGraphHost"]:
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._emit()

    # direct manipulation -------------------------------------------------

    def add_node(
        self,
        *,
        x: float = 0.0,
        y: float = 0.0,
        node_id: Optional[str] = None,
        node_type: str = "custom",
        **data: Any,
    ) -> Node:
        """Append a node and return a detached copy of it."""

        node = Node(
            id=node_id or generate_id("node"),
            position=XYPosition(x=x, y=y),
            type=node_type,
            data=dict(data),
        )
        self.set_nodes(lambda nodes: [*nodes, node])
        return copy.deepcopy(node)

    def remove_node(self, node_id: str) -> None:
        self._find_node(node_id)
        with self.batch():
            self.set_nodes(lambda nodes: [n for n in nodes if n.id != node_id])
            self.set_edges(
                lambda edges: [
                    e for e in edges if e.source != node_id and e.target != node_id
                ]
            )

    def move_node(self, node_id: str, x: float, y: float) -> None:
        node = self._find_node(node_id)
        node.position = XYPosition(x=x, y=y)
        self.set_nodes(self._nodes)

    def begin_drag(self, node_id: str) -> None:
        self._find_node(node_id).dragging = True
        self.set_nodes(self._nodes)

    def drag_to(self, node_id: str, x: float, y: float) -> None:
        node = self._find_node(node_id)
        node.dragging = True
        node.position = XYPosition(x=x, y=y)
        self.set_nodes(self._nodes)

    def end_drag(self, node_id: str) -> None:
        self._find_node(node_id).dragging = False
        self.set_nodes(self._nodes)

    def update_node_data(self, node_id: str, **changes: Any) -> None:
        self._find_node(node_id).data.update(changes)
        self.set_nodes(self._nodes)

    def add_edge(
        self,
        source: str,
        target: str,
        *,
        edge_id: Optional[str] = None,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
        **data: Any,
    ) -> Edge:
        self._find_node(source)
        self._find_node(target)
        edge = Edge(
            id=edge_id or generate_id("edge"),
            source=source,
            target=target,
            source_handle=source_handle,
            target_handle=target_handle,
            type="custom",
            data=dict(data),
        )
        self.set_edges(lambda edges: [*edges, edge])
        return copy.deepcopy(edge)

    def remove_edge(self, edge_id: str) -> None:
        self._find_edge(edge_id)
        self.set_edges(lambda edges: [e for e in edges if e.id != edge_id])

    def update_edge_data(self, edge_id: str, **changes: Any) -> None:
        self._find_edge(edge_id).data.update(changes)
        self.set_edges(self._edges)

    def select(self, *element_ids: str) -> None:
        """Select exactly ``element_ids`` (nodes or edges); clear everything else."""

        wanted = set(element_ids)
        with self.batch():
            for node in self._nodes:
                node.selected = node.id in wanted
            for edge in self._edges:
                edge.selected = edge.id in wanted
            self.set_nodes(self._nodes)
            self.set_edges(self._edges)

    def pan(self, dx: float, dy: float, *, zoom: Optional[float] = None) -> None:
        current = self._viewport
        self.set_viewport(
            Viewport(
                x=current.x + dx,
                y=current.y + dy,
                zoom=current.zoom if zoom is None else zoom,
            )
        )

    def _find_node(self, node_id: str) -> Node:
        for node in self._nodes:
            if node.id == node_id:
                return node
        raise KeyError(f"Node '{node_id}' is not on the canvas")

    def _find_edge(self, edge_id: str) -> Edge:
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        raise KeyError(f"Edge '{edge_id}' is not on the canvas")

    def _changed(self) -> None:
        if self._batch_depth:
            self._dirty = True
            return
        self._emit()

    def _emit(self) -> None:
        self._dirty = False
        self.notifications += 1
        snapshot = self.get_snapshot()
        for listener in list(self._listeners):
            listener(snapshot)


__all__ = ["InMemoryGraphHost", "generate_id"]
