"""Lookup of room templates by identifier and by room type."""

from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, List, Optional, Set

from dungeon_geometry import Orientation
from dungeon_models import RoomGraphNode, RoomTemplate, RoomType
from room_graph import RoomGraph

logger = logging.getLogger(__name__)


class TemplateCatalog:
    """Read-only collection of room templates.

    Templates keep their load order, so a seeded RNG always sees the same
    candidate list for a given room type.
    """

    def __init__(self) -> None:
        self._templates: List[RoomTemplate] = []
        self._by_id: Dict[str, RoomTemplate] = {}
        self._by_type: Dict[RoomType, List[RoomTemplate]] = {room_type: [] for room_type in RoomType}

    @classmethod
    def load(cls, templates: Iterable[RoomTemplate]) -> TemplateCatalog:
        """Index ``templates``; for duplicate identifiers the first one wins."""
        catalog = cls()
        for template in templates:
            if template.template_id in catalog._by_id:
                logger.warning("Room template already loaded: %s", template.template_id)
                continue
            catalog._templates.append(template)
            catalog._by_id[template.template_id] = template
            catalog._by_type[template.room_type].append(template)
        return catalog

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self):
        return iter(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._by_id

    @property
    def templates(self) -> List[RoomTemplate]:
        return list(self._templates)

    def template(self, template_id: str) -> Optional[RoomTemplate]:
        return self._by_id.get(template_id)

    def templates_of_type(self, room_type: RoomType) -> List[RoomTemplate]:
        return list(self._by_type[room_type])

    def random_template(self, room_type: RoomType, rng: random.Random) -> Optional[RoomTemplate]:
        """Uniformly pick a template of ``room_type``; None when the catalog has none."""
        matching = self._by_type[room_type]
        if not matching:
            return None
        return matching[rng.randrange(len(matching))]

    def template_for(
        self,
        node: RoomGraphNode,
        parent_orientation: Orientation,
        rng: random.Random,
    ) -> Optional[RoomTemplate]:
        """Pick a template for ``node`` attached through a parent doorway facing ``parent_orientation``."""
        room_type = node.room_type
        if room_type is RoomType.CORRIDOR:
            room_type = RoomType.corridor_for(parent_orientation)
        template = self.random_template(room_type, rng)
        if template is None:
            logger.warning(
                "No room template of type %s for node %s", room_type.display_name, node.node_id
            )
        return template

    def missing_room_types(self, graph: RoomGraph) -> Set[RoomType]:
        """Room types ``graph`` needs that have no template in this catalog."""
        required: Set[RoomType] = set()
        for node in graph:
            if node.room_type is RoomType.CORRIDOR:
                required.update((RoomType.CORRIDOR_NS, RoomType.CORRIDOR_EW))
            elif not node.room_type.is_none:
                required.add(node.room_type)
        return {room_type for room_type in required if not self._by_type[room_type]}
