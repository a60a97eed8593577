"""Data container for the rooms placed during one generation attempt."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from dungeon_geometry import Bounds
from dungeon_models import PlacedRoom


class DungeonLayout:
    """Maps room ids to placed rooms for a single attempt.

    A layout is never reused across attempts; the builder starts every
    attempt from a fresh instance.
    """

    def __init__(self) -> None:
        self.rooms: Dict[str, PlacedRoom] = {}

    def __len__(self) -> int:
        return len(self.rooms)

    def __iter__(self) -> Iterator[PlacedRoom]:
        return iter(self.rooms.values())

    def __contains__(self, room_id: object) -> bool:
        return room_id in self.rooms

    def register_room(self, room: PlacedRoom) -> None:
        if room.room_id in self.rooms:
            raise ValueError(f"Room {room.room_id} is already placed")
        self.rooms[room.room_id] = room

    def room(self, room_id: str) -> Optional[PlacedRoom]:
        return self.rooms.get(room_id)

    def positioned_rooms(self) -> List[PlacedRoom]:
        return [room for room in self.rooms.values() if room.is_positioned]

    def find_overlap(self, candidate: PlacedRoom) -> Optional[PlacedRoom]:
        """Return the first positioned room whose bounds intersect ``candidate``."""
        for room in self.rooms.values():
            if room.room_id == candidate.room_id or not room.is_positioned:
                continue
            if room.overlaps(candidate):
                return room
        return None

    def has_overlap(self, candidate: PlacedRoom) -> bool:
        return self.find_overlap(candidate) is not None

    def overall_bounds(self) -> Optional[Bounds]:
        """Smallest rectangle covering every positioned room."""
        result: Optional[Bounds] = None
        for room in self.positioned_rooms():
            result = room.bounds if result is None else result.union(room.bounds)
        return result

    def clear(self) -> None:
        self.rooms.clear()
