"""Render a generated layout to an ASCII grid for debugging."""

from __future__ import annotations

from typing import Iterable, List, Mapping

from dungeon_geometry import Bounds, GridPos
from dungeon_models import PlacedRoom, RoomType

ROOM_CHARS = {
    RoomType.ENTRANCE: "E",
    RoomType.CORRIDOR_NS: ":",
    RoomType.CORRIDOR_EW: "=",
    RoomType.NORMAL: ".",
    RoomType.BOSS: "B",
}
CONNECTED_DOORWAY_CHAR = "+"
SEALED_DOORWAY_CHAR = "#"
SPAWN_CHAR = "s"


class GridRenderer:
    """Draws placed rooms, doorways and spawn points onto a character grid.

    Row 0 of the output is the northern edge of the layout, so the printout
    matches the y-up world coordinates.
    """

    def __init__(self, rooms: Mapping[str, PlacedRoom] | Iterable[PlacedRoom], margin: int = 1) -> None:
        if isinstance(rooms, Mapping):
            rooms = rooms.values()
        self.rooms: List[PlacedRoom] = [room for room in rooms if room.is_positioned]
        self.margin = margin
        self.bounds = self._compute_bounds()
        self.grid: List[List[str]] = []

    def _compute_bounds(self) -> Bounds:
        if not self.rooms:
            return Bounds(GridPos(0, 0), GridPos(0, 0))
        bounds = self.rooms[0].bounds
        for room in self.rooms[1:]:
            bounds = bounds.union(room.bounds)
        offset = GridPos(self.margin, self.margin)
        return Bounds(bounds.lower - offset, bounds.upper + offset)

    def _set(self, pos: GridPos, char: str) -> None:
        column = pos.x - self.bounds.lower.x
        row = self.bounds.upper.y - pos.y
        self.grid[row][column] = char

    def draw(self, show_spawns: bool = False) -> List[str]:
        """Render the rooms and return the grid as a list of strings, north first."""
        self.grid = [[" " for _ in range(self.bounds.width)] for _ in range(self.bounds.height)]
        for room in self.rooms:
            char = ROOM_CHARS.get(room.room_type, "?")
            for y in range(room.lower_bounds.y, room.upper_bounds.y + 1):
                for x in range(room.lower_bounds.x, room.upper_bounds.x + 1):
                    self._set(GridPos(x, y), char)
        if show_spawns:
            for room in self.rooms:
                for pos in room.world_spawn_positions():
                    if self.bounds.contains(pos):
                        self._set(pos, SPAWN_CHAR)
        for room in self.rooms:
            for doorway in room.doorways:
                pos = room.world_doorway_position(doorway)
                if self.bounds.contains(pos):
                    char = CONNECTED_DOORWAY_CHAR if doorway.is_connected else SEALED_DOORWAY_CHAR
                    self._set(pos, char)
        return ["".join(row) for row in self.grid]

    def print_grid(self, horizontal_sep: str = "") -> None:
        """Prints the ASCII grid to the console."""
        if not self.grid:
            self.draw()
        for row in self.grid:
            print(horizontal_sep.join(row))
