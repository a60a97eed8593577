#!/usr/bin/env python3

# Runs the dungeon builder many times on the sample level and reports how long builds take,
# how many attempts they need and what shape the resulting layouts have.

from __future__ import annotations

import argparse
import datetime
import json
import logging
import math
import os
import random
import statistics
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import networkx as nx

from dungeon_config import DungeonSettings
from dungeon_generator import DungeonBuilder
from dungeon_models import PlacedRoom
from room_templates import build_sample_level


@dataclass
class BuildRun:
    seed: int
    success: bool
    duration: float
    attempts: int
    graph_name: Optional[str]
    room_count: int
    bbox_area: int
    room_coverage: float
    depth: int
    leaves: int
    diameter: int
    templates: Counter[str]
    failures: Dict[str, int] = field(default_factory=dict)


def gini_coefficient(counts: List[int]) -> float:
    """Inequality of positive ``counts``: 0 for a uniform spread, towards 1 when one value dominates."""
    ordered = sorted(value for value in counts if value > 0)
    n = len(ordered)
    total = sum(ordered)
    if n == 0 or total == 0:
        return 0.0
    return sum((2 * rank - n - 1) * value for rank, value in enumerate(ordered, start=1)) / (n * total)


def summarize(values: List[float]) -> Dict[str, Optional[float]]:
    """Mean, spread and deciles of ``values``; entries are None where undefined."""
    if not values:
        return {key: None for key in ("mean", "median", "min", "max", "stdev", "p10", "p90")}
    if len(values) > 1:
        deciles = statistics.quantiles(values, n=10, method="inclusive")
        p10, p90 = deciles[0], deciles[-1]
        stdev: Optional[float] = statistics.stdev(values)
    else:
        p10 = p90 = values[0]
        stdev = None
    return {
        "mean": statistics.fmean(values),
        "median": statistics.median(values),
        "min": min(values),
        "max": max(values),
        "stdev": stdev,
        "p10": p10,
        "p90": p90,
    }


def seconds_label(value: float) -> str:
    return f"{value:.3f}s" if value >= 1.0 else f"{value * 1000:.1f}ms"


def print_summary(title: str, values: List[float], fmt: Callable[[float], str]) -> None:
    print(f"{title}:")
    stats = summarize(values)
    if stats["mean"] is None:
        print("  (no data)")
        return
    parts = [
        f"{key} {fmt(value) if value is not None and not math.isnan(value) else '-'}"
        for key, value in stats.items()
    ]
    print(f"  n={len(values)}, " + ", ".join(parts))


def build_room_tree(rooms: Mapping[str, PlacedRoom]) -> nx.DiGraph:
    """Directed parent -> child graph of a generated layout."""
    tree = nx.DiGraph()
    tree.add_nodes_from(rooms)
    tree.add_edges_from(
        (room.parent_room_id, room.room_id)
        for room in rooms.values()
        if room.parent_room_id in rooms
    )
    return tree


def layout_area(rooms: Mapping[str, PlacedRoom]) -> tuple[int, float]:
    """Bounding-box area of the layout and the fraction of it covered by rooms."""
    placed = list(rooms.values())
    if not placed:
        return 0, 0.0
    bounds = placed[0].bounds
    for room in placed[1:]:
        bounds = bounds.union(room.bounds)
    area = bounds.width * bounds.height
    covered = sum(room.bounds.width * room.bounds.height for room in placed)
    return area, covered / area


def tree_shape(rooms: Mapping[str, PlacedRoom]) -> tuple[int, int, int]:
    """Depth below the entrance, leaf count and undirected diameter of the room tree."""
    tree = build_room_tree(rooms)
    entrance = next((room.room_id for room in rooms.values() if room.is_entrance), None)
    if entrance is None:
        return 0, 0, 0
    depth = max(nx.single_source_shortest_path_length(tree, entrance).values())
    leaves = sum(1 for node in tree if tree.out_degree(node) == 0)
    undirected = tree.to_undirected()
    diameter = nx.diameter(undirected) if nx.is_connected(undirected) else 0
    return depth, leaves, diameter


def run_once(seed: int, overrides: Dict[str, Any]) -> BuildRun:
    builder = DungeonBuilder(DungeonSettings(random_seed=seed, collect_metrics=True, **overrides))

    started = time.perf_counter()
    result = builder.generate(build_sample_level())
    duration = time.perf_counter() - started

    area, coverage = layout_area(result.rooms)
    depth, leaves, diameter = tree_shape(result.rooms)
    return BuildRun(
        seed=seed,
        success=result.success,
        duration=duration,
        attempts=result.attempts,
        graph_name=result.graph.name if result.graph is not None else None,
        room_count=len(result.rooms),
        bbox_area=area,
        room_coverage=coverage,
        depth=depth,
        leaves=leaves,
        diameter=diameter,
        templates=Counter(room.template_id for room in result.rooms.values()),
        failures=dict(builder.metrics.failures) if builder.metrics is not None else {},
    )


def run_benchmark(runs: int, seed: Optional[int], overrides: Dict[str, Any]) -> List[BuildRun]:
    """Derive one seed per run from ``seed`` so a whole benchmark can be replayed."""
    seeds = random.Random(seed)
    return [run_once(seeds.randint(0, 1_000_000), overrides) for _ in range(runs)]


def run_to_json(index: int, run: BuildRun) -> Dict[str, Any]:
    return {
        "run": index,
        "seed": run.seed,
        "success": run.success,
        "graph": run.graph_name,
        "attempts": run.attempts,
        "seconds": run.duration,
        "failures": run.failures,
        "layout": {
            "rooms": run.room_count,
            "bbox_area": run.bbox_area,
            "room_coverage": run.room_coverage,
            "depth": run.depth,
            "leaves": run.leaves,
            "diameter": run.diameter,
        },
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark dungeon generation on the sample level.")
    parser.add_argument("-n", "--runs", type=int, default=20, help="Number of builds (default: 20)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the per-run seed sequence")
    parser.add_argument(
        "--rebuild-attempts",
        type=int,
        default=None,
        help="Override the number of rebuilds per selected graph",
    )
    parser.add_argument("--save", action="store_true", help="Write a JSON report to benchmarks/")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log build outcomes")
    args = parser.parse_args()
    if args.runs <= 0:
        raise SystemExit("--runs must be positive")

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides: Dict[str, Any] = {}
    if args.rebuild_attempts is not None:
        overrides["max_dungeon_rebuild_attempts_for_graph"] = args.rebuild_attempts

    runs = run_benchmark(args.runs, args.seed, overrides)
    for index, run in enumerate(runs, start=1):
        status = f"built via {run.graph_name}" if run.success else "FAILED"
        print(
            f"Run {index:02d}: {seconds_label(run.duration)} (seed {run.seed}) {status}, "
            f"{run.attempts} attempts, {run.room_count} rooms, depth {run.depth}, leaves {run.leaves}"
        )

    built = [run for run in runs if run.success]
    print()
    print(f"Successful builds: {len(built)}/{len(runs)}")

    reported = {
        "seconds": ("Build time", [run.duration for run in runs], seconds_label),
        "attempts": ("Attempts", [float(run.attempts) for run in runs], lambda v: f"{v:.1f}"),
        "room_coverage": ("Room coverage", [run.room_coverage for run in built], lambda v: f"{v:.1%}"),
        "diameter": ("Layout diameter", [float(run.diameter) for run in built], lambda v: f"{v:.0f}"),
    }
    for title, values, fmt in reported.values():
        print()
        print_summary(title, values, fmt)

    failures: Counter[str] = Counter()
    templates: Counter[str] = Counter()
    for run in runs:
        failures.update(run.failures)
        templates.update(run.templates)

    if failures:
        print()
        print("Failed attempts by reason:")
        for reason, count in failures.most_common():
            print(f"  {reason}: {count}")

    placed = sum(templates.values())
    if placed:
        print()
        print("Template usage:")
        for template_id, count in templates.most_common():
            print(f"  {template_id}: {count} ({count / placed:.1%})")
        print(f"  Diversity (1 - Gini): {1.0 - gini_coefficient(list(templates.values())):.3f}")

    if not args.save:
        return

    now = datetime.datetime.now(datetime.timezone.utc)
    out_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), os.pardir, "benchmarks")
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.abspath(os.path.join(out_dir, f"benchmark-{now:%Y%m%dT%H%M%SZ}.json"))
    report = {
        "timestamp": now.replace(microsecond=0).isoformat(),
        "parameters": {"runs": args.runs, "seed": args.seed, **overrides},
        "summary": {key: summarize(values) for key, (_, values, _) in reported.items()},
        "failures": dict(failures),
        "templates": dict(templates),
        "runs": [run_to_json(index, run) for index, run in enumerate(runs, start=1)],
    }
    with open(out_path, "w", encoding="utf-8") as handle:
        json.dump(report, handle, indent=2)
        handle.write("\n")
    print(f"\nSaved benchmark report to {os.path.relpath(out_path)}")


if __name__ == "__main__":
    main()
