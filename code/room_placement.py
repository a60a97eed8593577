"""Breadth-first room placement for a single generation attempt."""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Optional

from dungeon_geometry import GridPos
from dungeon_layout import DungeonLayout
from dungeon_models import Doorway, PlacedRoom, RoomGraphNode, RoomType
from room_graph import RoomGraph
from template_catalog import TemplateCatalog

logger = logging.getLogger(__name__)


class PlacementFailure(Enum):
    """Expected reasons a generation attempt or a whole build can fail."""

    NO_ENTRANCE_NODE = "no_entrance_node"
    NO_VIABLE_PARENT_DOORWAY = "no_viable_parent_doorway"
    TEMPLATE_NOT_FOUND = "template_not_found"
    GENERATION_EXHAUSTED = "generation_exhausted"


@dataclass
class AttemptResult:
    """Outcome of walking a room graph once."""

    layout: DungeonLayout
    failure: Optional[PlacementFailure] = None
    failed_node_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.failure is None


def aligned_lower_bounds(
    parent_room: PlacedRoom,
    parent_doorway: Doorway,
    room: PlacedRoom,
    doorway: Doorway,
) -> GridPos:
    """Lower bounds that put ``doorway`` one cell beyond ``parent_doorway``."""
    parent_doorway_position = parent_room.world_doorway_position(parent_doorway)
    adjustment = doorway.orientation.opposite().unit_offset()
    return parent_doorway_position + adjustment + room.template_lower_bounds - doorway.position


class RoomPlacer:
    """Places every node of a room graph next to its parent, one attempt at a time."""

    def __init__(
        self,
        catalog: TemplateCatalog,
        rng: random.Random,
        layout: Optional[DungeonLayout] = None,
    ) -> None:
        self.catalog = catalog
        self.rng = rng
        self.layout = layout if layout is not None else DungeonLayout()

    def attempt(self, graph: RoomGraph) -> AttemptResult:
        """Walk ``graph`` breadth-first and place each node; stops at the first failure."""
        entrance = graph.entrance()
        if entrance is None:
            logger.error("Room graph %r has no entrance node", graph.name)
            return AttemptResult(self.layout, PlacementFailure.NO_ENTRANCE_NODE)

        open_nodes: Deque[RoomGraphNode] = deque([entrance])
        queued = {entrance.node_id}
        while open_nodes:
            node = open_nodes.popleft()
            for child in graph.children(node):
                # A malformed graph may loop back; each node is placed once.
                if child.node_id not in queued:
                    queued.add(child.node_id)
                    open_nodes.append(child)

            if node.node_id == entrance.node_id:
                failure = self.place_entrance(node)
            elif node.is_entrance:
                # Only the graph's own entrance is anchored at its template bounds.
                logger.warning("Room graph %r has a second entrance node %s", graph.name, node.node_id)
                failure = PlacementFailure.NO_VIABLE_PARENT_DOORWAY
            else:
                parent_room = self.layout.room(node.parent_id) if node.parent_id else None
                if parent_room is None:
                    # Child link that the node's own parent id does not confirm.
                    logger.warning("Node %s has no placed parent room", node.node_id)
                    failure = PlacementFailure.NO_VIABLE_PARENT_DOORWAY
                else:
                    failure = self.place_room(node, parent_room)

            if failure is not None:
                logger.debug("Attempt failed at node %s: %s", node.node_id, failure.value)
                return AttemptResult(self.layout, failure, node.node_id)

        return AttemptResult(self.layout)

    def place_entrance(self, node: RoomGraphNode) -> Optional[PlacementFailure]:
        template = self.catalog.random_template(RoomType.ENTRANCE, self.rng)
        if template is None:
            logger.warning("No entrance room template available for node %s", node.node_id)
            return PlacementFailure.TEMPLATE_NOT_FOUND
        room = PlacedRoom.from_template(template, node)
        room.is_positioned = True
        self.layout.register_room(room)
        return None

    def place_room(self, node: RoomGraphNode, parent_room: PlacedRoom) -> Optional[PlacementFailure]:
        """Attach ``node`` to ``parent_room`` through a matching doorway pair.

        Every parent doorway that fails (no opposite doorway on the chosen
        template, or the resulting room overlaps) is marked unavailable, so
        the loop ends once the parent runs out of doorways.
        """
        while True:
            candidates = parent_room.available_doorways()
            if not candidates:
                return PlacementFailure.NO_VIABLE_PARENT_DOORWAY

            parent_doorway = candidates[self.rng.randrange(len(candidates))]
            template = self.catalog.template_for(node, parent_doorway.orientation, self.rng)
            if template is None:
                return PlacementFailure.TEMPLATE_NOT_FOUND

            room = PlacedRoom.from_template(template, node)
            if self._try_position(parent_room, parent_doorway, room):
                room.is_positioned = True
                self.layout.register_room(room)
                return None

    def _try_position(self, parent_room: PlacedRoom, parent_doorway: Doorway, room: PlacedRoom) -> bool:
        doorway = room.find_doorway(parent_doorway.orientation.opposite())
        if doorway is None:
            parent_doorway.is_unavailable = True
            return False

        room.place_at(aligned_lower_bounds(parent_room, parent_doorway, room, doorway))

        overlapping = self.layout.find_overlap(room)
        if overlapping is not None:
            logger.debug(
                "Room %s (%s) overlaps %s", room.room_id, room.template_id, overlapping.room_id
            )
            parent_doorway.is_unavailable = True
            return False

        parent_doorway.is_connected = True
        parent_doorway.is_unavailable = True
        doorway.is_connected = True
        doorway.is_unavailable = True
        return True
