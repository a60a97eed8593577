"""Shared constants for the dungeon builder."""

from __future__ import annotations

MAX_DUNGEON_BUILD_ATTEMPTS = 10  # Number of times a random room graph is picked for a level.
MAX_DUNGEON_REBUILD_ATTEMPTS_FOR_GRAPH = 1000  # Extra full rebuilds of the same graph after the first attempt.

MAX_CHILD_CORRIDORS = 3  # Corridor children a single room node may have in an authored graph.

RANDOM_SEED = None  # Set to a number for reproducible behavior (for debugging); set to None to produce a different dungeon on every run.
