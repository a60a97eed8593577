"""Configuration containers for the dungeon builder."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from dungeon_constants import (
    MAX_CHILD_CORRIDORS,
    MAX_DUNGEON_BUILD_ATTEMPTS,
    MAX_DUNGEON_REBUILD_ATTEMPTS_FOR_GRAPH,
)
from dungeon_models import RoomTemplate, RoomType
from room_graph import RoomGraph
from template_catalog import TemplateCatalog


@dataclass
class DungeonSettings:
    """Aggregates the tunable limits of dungeon generation."""

    # Number of times a random room graph is selected before giving up.
    max_dungeon_build_attempts: int = MAX_DUNGEON_BUILD_ATTEMPTS
    # Rebuilds of the selected graph after its first attempt.
    max_dungeon_rebuild_attempts_for_graph: int = MAX_DUNGEON_REBUILD_ATTEMPTS_FOR_GRAPH
    # Only enforced while authoring graphs.
    max_child_corridors: int = MAX_CHILD_CORRIDORS
    random_seed: int | None = None
    collect_metrics: bool = False
    # Optional wall-clock ceiling, checked before each graph selection.
    max_build_seconds: float | None = None

    def __post_init__(self) -> None:
        if self.max_dungeon_build_attempts <= 0:
            raise ValueError("DungeonSettings max_dungeon_build_attempts must be positive")
        if self.max_dungeon_rebuild_attempts_for_graph < 0:
            raise ValueError(
                "DungeonSettings max_dungeon_rebuild_attempts_for_graph cannot be negative"
            )
        if self.max_child_corridors < 0:
            raise ValueError("DungeonSettings max_child_corridors cannot be negative")
        if self.max_build_seconds is not None and self.max_build_seconds <= 0:
            raise ValueError("DungeonSettings max_build_seconds must be positive or None")

    @property
    def attempts_per_graph(self) -> int:
        return self.max_dungeon_rebuild_attempts_for_graph + 1

    @property
    def max_total_attempts(self) -> int:
        return self.max_dungeon_build_attempts * self.attempts_per_graph

    def make_rng(self) -> random.Random:
        return random.Random(self.random_seed)


@dataclass
class DungeonLevel:
    """One level: the room templates it may use and its alternative room graphs."""

    level_name: str
    room_templates: Sequence[RoomTemplate]
    room_graphs: Sequence[RoomGraph]

    def __post_init__(self) -> None:
        if not self.level_name or not self.level_name.strip():
            raise ValueError("DungeonLevel requires a level_name")
        self.room_templates = tuple(self.room_templates)
        self.room_graphs = tuple(self.room_graphs)
        if not self.room_templates:
            raise ValueError(f"DungeonLevel {self.level_name} requires at least one room template")
        if not self.room_graphs:
            raise ValueError(f"DungeonLevel {self.level_name} requires at least one room graph")

    def build_catalog(self) -> TemplateCatalog:
        return TemplateCatalog.load(self.room_templates)

    def validate(self, catalog: Optional[TemplateCatalog] = None) -> List[str]:
        """Return authoring warnings; generation may still succeed when some are present."""
        catalog = catalog if catalog is not None else self.build_catalog()
        warnings: List[str] = []
        for room_type in (RoomType.ENTRANCE, RoomType.CORRIDOR_NS, RoomType.CORRIDOR_EW):
            if not catalog.templates_of_type(room_type):
                warnings.append(f"{self.level_name}: no {room_type.display_name} template")

        for index, graph in enumerate(self.room_graphs):
            label = graph.name or f"graph {index}"
            for problem in graph.validate():
                warnings.append(f"{self.level_name}:{label}: {problem}")
            missing = catalog.missing_room_types(graph)
            for room_type in sorted(missing, key=lambda rt: rt.display_name):
                warnings.append(
                    f"{self.level_name}:{label}: missing room template type {room_type.display_name}"
                )
        return warnings
