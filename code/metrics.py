"""Helpers for collecting instrumentation data during dungeon generation."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class GraphMetrics:
    """Aggregated attempt statistics for a single room graph."""

    name: str
    selections: int = 0
    attempts: int = 0
    successes: int = 0
    total_time: float = 0.0

    def record(self, duration: float, success: bool) -> None:
        self.attempts += 1
        self.total_time += duration
        if success:
            self.successes += 1

    def to_dict(self) -> Dict[str, float | int]:
        average_time = self.total_time / self.attempts if self.attempts else 0.0
        return {
            "selections": self.selections,
            "attempts": self.attempts,
            "successes": self.successes,
            "total_time": self.total_time,
            "average_time": average_time,
        }


@dataclass
class BuildMetrics:
    """Container for attempt metrics recorded during one ``generate`` call."""

    graphs: Dict[str, GraphMetrics] = field(default_factory=dict)
    failures: Counter[str] = field(default_factory=Counter)
    total_attempts: int = 0
    rooms_placed: int = 0
    total_time: float = 0.0

    def _graph(self, name: str) -> GraphMetrics:
        metrics = self.graphs.get(name)
        if metrics is None:
            metrics = GraphMetrics(name=name)
            self.graphs[name] = metrics
        return metrics

    def record_graph_selection(self, name: str) -> None:
        self._graph(name).selections += 1

    def record_attempt(
        self,
        name: str,
        duration: float,
        failure: str | None,
        rooms_placed: int,
    ) -> None:
        self.total_attempts += 1
        self.rooms_placed += rooms_placed
        self._graph(name).record(duration, failure is None)
        if failure is not None:
            self.failures[failure] += 1

    def snapshot(self) -> Dict[str, object]:
        return {
            "total_attempts": self.total_attempts,
            "rooms_placed": self.rooms_placed,
            "total_time": self.total_time,
            "failures": dict(self.failures),
            "graphs": {name: metrics.to_dict() for name, metrics in self.graphs.items()},
        }
