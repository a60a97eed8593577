#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import random

from dungeon_config import DungeonSettings
from dungeon_constants import RANDOM_SEED
from dungeon_generator import DungeonBuilder
from grid_renderer import GridRenderer
from room_templates import build_sample_level


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate and print a sample dungeon layout.")
    parser.add_argument("--seed", type=int, default=RANDOM_SEED, help="Random seed (default: random)")
    parser.add_argument(
        "--build-attempts",
        type=int,
        default=None,
        help="Override the number of room graph selections",
    )
    parser.add_argument(
        "--rebuild-attempts",
        type=int,
        default=None,
        help="Override the number of rebuilds per selected graph",
    )
    parser.add_argument("--spawns", action="store_true", help="Mark spawn positions on the grid")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log attempt details")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    seed = args.seed
    if seed is None:
        # Pick a random seed randomly and print it, so we can reproduce bugs by passing --seed next run.
        seed = random.randint(0, 1000000)
    print(f"Using random seed {seed}")

    overrides = {}
    if args.build_attempts is not None:
        overrides["max_dungeon_build_attempts"] = args.build_attempts
    if args.rebuild_attempts is not None:
        overrides["max_dungeon_rebuild_attempts_for_graph"] = args.rebuild_attempts
    settings = DungeonSettings(random_seed=seed, collect_metrics=True, **overrides)

    level = build_sample_level()
    builder = DungeonBuilder(settings)
    result = builder.generate(level)
    if not result.success:
        print(f"Failed to build {level.level_name} after {result.attempts} attempts.")
        raise SystemExit(1)

    print(
        f"Built {level.level_name} from graph {result.graph.name!r} "
        f"with {len(result.rooms)} rooms after {result.attempts} attempt(s)."
    )
    for room in result.rooms.values():
        print(
            f"  {room.room_id:<14} {room.room_type.display_name:<12} {room.template_id:<20} "
            f"{room.lower_bounds.to_tuple()} -> {room.upper_bounds.to_tuple()}"
        )

    renderer = GridRenderer(result.rooms)
    renderer.draw(show_spawns=args.spawns)
    renderer.print_grid()

if __name__ == "__main__":
    main()
