"""Room graphs: the authored parent/child layout the builder walks."""

from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable, Iterator, List, Optional

import networkx as nx

from dungeon_constants import MAX_CHILD_CORRIDORS
from dungeon_models import RoomGraphNode, RoomType

logger = logging.getLogger(__name__)


class RoomGraph:
    """Read-only directed graph of typed room nodes.

    Each node other than the entrance has exactly one parent. Nodes that
    arrive with several parents keep only the first one.
    """

    def __init__(self, nodes: Iterable[RoomGraphNode], name: str = "") -> None:
        self.name = name
        self._nodes: Dict[str, RoomGraphNode] = {}
        for node in nodes:
            if node.node_id in self._nodes:
                logger.warning("Room graph %r: duplicate node id %s ignored", name, node.node_id)
                continue
            if len(node.parent_ids) > 1:
                logger.warning(
                    "Room graph %r: node %s has %d parents, keeping only %s",
                    name,
                    node.node_id,
                    len(node.parent_ids),
                    node.parent_ids[0],
                )
                node = RoomGraphNode(
                    node_id=node.node_id,
                    room_type=node.room_type,
                    parent_ids=node.parent_ids[:1],
                    child_ids=node.child_ids,
                )
            self._nodes[node.node_id] = node

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[RoomGraphNode]:
        return iter(self._nodes.values())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return f"RoomGraph(name={self.name!r}, nodes={len(self._nodes)})"

    @property
    def nodes(self) -> List[RoomGraphNode]:
        return list(self._nodes.values())

    def node(self, node_id: str) -> Optional[RoomGraphNode]:
        return self._nodes.get(node_id)

    def entrance(self) -> Optional[RoomGraphNode]:
        """Return the first entrance-typed node, or None if the graph has none."""
        for node in self._nodes.values():
            if node.is_entrance:
                return node
        return None

    def children(self, node: RoomGraphNode) -> List[RoomGraphNode]:
        """Child nodes in authored order; ids that do not resolve are skipped."""
        result: List[RoomGraphNode] = []
        for child_id in node.child_ids:
            child = self._nodes.get(child_id)
            if child is not None:
                result.append(child)
        return result

    def parent_of(self, node: RoomGraphNode) -> Optional[RoomGraphNode]:
        parent_id = node.parent_id
        if parent_id is None:
            return None
        return self._nodes.get(parent_id)

    def room_types(self) -> set[RoomType]:
        return {node.room_type for node in self._nodes.values()}

    def to_networkx(self) -> nx.DiGraph:
        """Return a ``networkx`` view with edges pointing from parent to child."""
        graph = nx.DiGraph(name=self.name)
        for node in self._nodes.values():
            graph.add_node(node.node_id, room_type=node.room_type)
        for node in self._nodes.values():
            for child_id in node.child_ids:
                if child_id in self._nodes:
                    graph.add_edge(node.node_id, child_id)
        return graph

    def validate(self) -> List[str]:
        """Return human-readable problems; an empty list means the graph is usable."""
        problems: List[str] = []
        entrances = [node for node in self._nodes.values() if node.is_entrance]
        if not entrances:
            problems.append("graph has no entrance node")
        elif len(entrances) > 1:
            problems.append(f"graph has {len(entrances)} entrance nodes")

        for node in self._nodes.values():
            for child_id in node.child_ids:
                child = self._nodes.get(child_id)
                if child is None:
                    problems.append(f"node {node.node_id} links to unknown child {child_id}")
                elif child.parent_id != node.node_id:
                    problems.append(
                        f"node {child_id} is a child of {node.node_id} but lists parent {child.parent_id}"
                    )
            parent_id = node.parent_id
            if parent_id is not None:
                parent = self._nodes.get(parent_id)
                if parent is None:
                    problems.append(f"node {node.node_id} has unknown parent {parent_id}")
                elif node.node_id not in parent.child_ids:
                    problems.append(
                        f"node {node.node_id} lists parent {parent_id} which does not list it as a child"
                    )
            if node.is_entrance and parent_id is not None:
                problems.append(f"entrance {node.node_id} has a parent")

        connected_bosses = [
            node for node in self._nodes.values() if node.room_type.is_boss_room and node.parent_ids
        ]
        if len(connected_bosses) > 1:
            problems.append(f"graph connects {len(connected_bosses)} boss rooms")

        if len(entrances) == 1 and not problems:
            graph = self.to_networkx()
            reachable = nx.descendants(graph, entrances[0].node_id) | {entrances[0].node_id}
            unreachable = sorted(set(self._nodes) - reachable)
            if unreachable:
                problems.append(f"nodes unreachable from the entrance: {', '.join(unreachable)}")
            elif not nx.is_arborescence(graph):
                problems.append("graph is not a tree rooted at the entrance")
        return problems

    @staticmethod
    def builder(name: str = "", max_child_corridors: int = MAX_CHILD_CORRIDORS) -> RoomGraphBuilder:
        return RoomGraphBuilder(name=name, max_child_corridors=max_child_corridors)


class _NodeDraft:
    """Mutable node used while a graph is being assembled."""

    def __init__(self, node_id: str, room_type: RoomType) -> None:
        self.node_id = node_id
        self.room_type = room_type
        self.parent_ids: List[str] = []
        self.child_ids: List[str] = []


class RoomGraphBuilder:
    """Assembles a room graph while enforcing the authoring connection rules."""

    def __init__(self, name: str = "", max_child_corridors: int = MAX_CHILD_CORRIDORS) -> None:
        if max_child_corridors < 0:
            raise ValueError("max_child_corridors cannot be negative")
        self.name = name
        self.max_child_corridors = max_child_corridors
        self._drafts: Dict[str, _NodeDraft] = {}

    def add_node(self, room_type: RoomType, node_id: Optional[str] = None) -> str:
        if node_id is None:
            node_id = str(uuid.uuid4())
        if node_id in self._drafts:
            raise ValueError(f"Room graph {self.name!r} already has node {node_id}")
        self._drafts[node_id] = _NodeDraft(node_id, room_type)
        return node_id

    def _has_connected_boss(self) -> bool:
        return any(
            draft.room_type.is_boss_room and draft.parent_ids for draft in self._drafts.values()
        )

    def can_connect(self, parent_id: str, child_id: str) -> bool:
        parent = self._drafts.get(parent_id)
        child = self._drafts.get(child_id)
        if parent is None or child is None:
            return False
        if child.room_type.is_boss_room and self._has_connected_boss():
            return False
        if child.room_type.is_none or child.room_type.is_entrance:
            return False
        if child_id in parent.child_ids or parent_id == child_id:
            return False
        if child_id in parent.parent_ids:
            return False
        if child.parent_ids:
            return False
        if child.room_type.is_corridor and parent.room_type.is_corridor:
            return False
        if child.room_type.is_corridor and len(parent.child_ids) >= self.max_child_corridors:
            return False
        # Rooms connect through corridors, so a non-corridor child must be the only child.
        if not child.room_type.is_corridor and parent.child_ids:
            return False
        return True

    def connect(self, parent_id: str, child_id: str) -> bool:
        """Link ``child_id`` under ``parent_id``; returns False if the link breaks a rule."""
        if not self.can_connect(parent_id, child_id):
            logger.debug("Room graph %r: rejected link %s -> %s", self.name, parent_id, child_id)
            return False
        self._drafts[parent_id].child_ids.append(child_id)
        self._drafts[child_id].parent_ids.append(parent_id)
        return True

    def disconnect(self, parent_id: str, child_id: str) -> bool:
        parent = self._drafts.get(parent_id)
        child = self._drafts.get(child_id)
        if parent is None or child is None or child_id not in parent.child_ids:
            return False
        parent.child_ids.remove(child_id)
        if parent_id in child.parent_ids:
            child.parent_ids.remove(parent_id)
        return True

    def remove_node(self, node_id: str) -> bool:
        draft = self._drafts.pop(node_id, None)
        if draft is None:
            return False
        for child_id in draft.child_ids:
            child = self._drafts.get(child_id)
            if child is not None and node_id in child.parent_ids:
                child.parent_ids.remove(node_id)
        for parent_id in draft.parent_ids:
            parent = self._drafts.get(parent_id)
            if parent is not None and node_id in parent.child_ids:
                parent.child_ids.remove(node_id)
        return True

    def build(self) -> RoomGraph:
        nodes = [
            RoomGraphNode(
                node_id=draft.node_id,
                room_type=draft.room_type,
                parent_ids=tuple(draft.parent_ids),
                child_ids=tuple(draft.child_ids),
            )
            for draft in self._drafts.values()
        ]
        return RoomGraph(nodes, name=self.name)
