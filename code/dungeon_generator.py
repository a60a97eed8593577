"""DungeonBuilder drives the retry loops around single placement attempts."""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from time import perf_counter
from typing import Dict, Optional, Sequence

from dungeon_config import DungeonLevel, DungeonSettings
from dungeon_layout import DungeonLayout
from dungeon_models import PlacedRoom, RoomTemplate
from metrics import BuildMetrics
from room_graph import RoomGraph
from room_placement import AttemptResult, PlacementFailure, RoomPlacer
from template_catalog import TemplateCatalog

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of a ``generate`` call.

    ``rooms`` holds the layout of the successful attempt and is empty when
    generation failed.
    """

    success: bool
    rooms: Dict[str, PlacedRoom] = field(default_factory=dict)
    graph: Optional[RoomGraph] = None
    attempts: int = 0
    failure: Optional[PlacementFailure] = None
    failure_counts: Counter[PlacementFailure] = field(default_factory=Counter)

    def room(self, room_id: str) -> Optional[PlacedRoom]:
        return self.rooms.get(room_id)


def _graph_label(graph: RoomGraph, index: int) -> str:
    return graph.name or f"graph_{index}"


def generate_dungeon(
    graphs: Sequence[RoomGraph],
    catalog: TemplateCatalog,
    settings: DungeonSettings,
    rng: random.Random,
    metrics: Optional[BuildMetrics] = None,
) -> BuildResult:
    """Build a layout from one of ``graphs`` with bounded retries.

    Up to ``settings.max_dungeon_build_attempts`` times a random graph is
    chosen and rebuilt up to ``settings.attempts_per_graph`` times, each
    rebuild starting from an empty layout. Failure is reported through the
    result, never raised.
    """
    if not graphs:
        raise ValueError("generate_dungeon requires at least one room graph")

    if all(graph.entrance() is None for graph in graphs):
        logger.error("None of the %d room graphs has an entrance node", len(graphs))
        return BuildResult(success=False, failure=PlacementFailure.NO_ENTRANCE_NODE)

    start = perf_counter()
    result = BuildResult(success=False)

    for build_attempt in range(settings.max_dungeon_build_attempts):
        if (
            settings.max_build_seconds is not None
            and perf_counter() - start >= settings.max_build_seconds
        ):
            logger.warning(
                "Stopping after %d graph selections: time limit of %.2fs reached",
                build_attempt,
                settings.max_build_seconds,
            )
            break

        graph_index = rng.randrange(len(graphs))
        graph = graphs[graph_index]
        label = _graph_label(graph, graph_index)
        if metrics is not None:
            metrics.record_graph_selection(label)

        for _ in range(settings.attempts_per_graph):
            attempt_start = perf_counter()
            attempt = RoomPlacer(catalog, rng, DungeonLayout()).attempt(graph)
            result.attempts += 1
            if metrics is not None:
                metrics.record_attempt(
                    label,
                    perf_counter() - attempt_start,
                    attempt.failure.value if attempt.failure else None,
                    len(attempt.layout),
                )

            if attempt.success:
                return _finish(result, attempt, graph, start, metrics)

            result.failure_counts[attempt.failure] += 1
            if attempt.failure is PlacementFailure.NO_ENTRANCE_NODE:
                break

    logger.info(
        "Dungeon generation exhausted after %d attempts (%s)",
        result.attempts,
        ", ".join(f"{kind.value}={count}" for kind, count in result.failure_counts.items()),
    )
    result.failure = PlacementFailure.GENERATION_EXHAUSTED
    if metrics is not None:
        metrics.total_time += perf_counter() - start
    return result


def _finish(
    result: BuildResult,
    attempt: AttemptResult,
    graph: RoomGraph,
    start: float,
    metrics: Optional[BuildMetrics],
) -> BuildResult:
    result.success = True
    result.rooms = dict(attempt.layout.rooms)
    result.graph = graph
    logger.info(
        "Built dungeon from graph %r with %d rooms after %d attempts",
        graph.name,
        len(result.rooms),
        result.attempts,
    )
    if metrics is not None:
        metrics.total_time += perf_counter() - start
    return result


class DungeonBuilder:
    """Generates dungeon layouts for levels and exposes the last result."""

    def __init__(
        self,
        settings: Optional[DungeonSettings] = None,
        rng: Optional[random.Random] = None,
        catalog: Optional[TemplateCatalog] = None,
    ) -> None:
        self.settings = settings if settings is not None else DungeonSettings()
        self.rng = rng if rng is not None else self.settings.make_rng()
        self.catalog = catalog
        self.metrics = BuildMetrics() if self.settings.collect_metrics else None
        self.last_result: Optional[BuildResult] = None

    @property
    def rooms(self) -> Dict[str, PlacedRoom]:
        if self.last_result is None:
            return {}
        return self.last_result.rooms

    def generate(self, level: DungeonLevel) -> BuildResult:
        """Generate a layout for ``level`` using the level's own templates."""
        self.catalog = level.build_catalog()
        for warning in level.validate(self.catalog):
            logger.warning(warning)
        return self.generate_from(level.room_graphs, self.catalog)

    def generate_from(self, graphs: Sequence[RoomGraph], catalog: TemplateCatalog) -> BuildResult:
        self.catalog = catalog
        self.last_result = generate_dungeon(graphs, catalog, self.settings, self.rng, self.metrics)
        return self.last_result

    def template(self, template_id: str) -> Optional[RoomTemplate]:
        if self.catalog is None:
            return None
        return self.catalog.template(template_id)

    def room(self, room_id: str) -> Optional[PlacedRoom]:
        return self.rooms.get(room_id)
