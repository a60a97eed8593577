"""Core dataclasses used by the dungeon builder."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from dungeon_geometry import Bounds, GridPos, Orientation


class RoomType(Enum):
    """Classifies graph nodes and room templates."""

    ENTRANCE = "Entrance"
    CORRIDOR = "Corridor"  # Graph-level only; resolved to NS or EW when placed.
    CORRIDOR_NS = "Corridor NS"
    CORRIDOR_EW = "Corridor EW"
    NORMAL = "Normal Room"
    BOSS = "Boss Room"
    NONE = "None"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def is_entrance(self) -> bool:
        return self is RoomType.ENTRANCE

    @property
    def is_corridor(self) -> bool:
        return self in (RoomType.CORRIDOR, RoomType.CORRIDOR_NS, RoomType.CORRIDOR_EW)

    @property
    def is_corridor_ns(self) -> bool:
        return self is RoomType.CORRIDOR_NS

    @property
    def is_corridor_ew(self) -> bool:
        return self is RoomType.CORRIDOR_EW

    @property
    def is_boss_room(self) -> bool:
        return self is RoomType.BOSS

    @property
    def is_none(self) -> bool:
        return self is RoomType.NONE

    @property
    def display_in_graph_editor(self) -> bool:
        return self not in (RoomType.CORRIDOR_NS, RoomType.CORRIDOR_EW, RoomType.NONE)

    @staticmethod
    def corridor_for(orientation: Orientation) -> RoomType:
        """Corridor subtype that fits against a parent doorway facing ``orientation``."""
        if orientation.is_vertical:
            return RoomType.CORRIDOR_NS
        return RoomType.CORRIDOR_EW

    @classmethod
    def from_name(cls, name: str) -> RoomType:
        key = name.strip().upper().replace(" ", "_")
        try:
            return cls[key]
        except KeyError as exc:
            raise ValueError(f"Unknown room type {name!r}") from exc


@dataclass
class Doorway:
    """Doorway on a room footprint, in template-local coordinates.

    ``copy_start``, ``copy_tile_width`` and ``copy_tile_height`` describe the
    tiles a renderer copies over the opening to seal an unused doorway; they
    are carried through untouched.
    """

    position: GridPos
    orientation: Orientation
    is_connected: bool = False
    is_unavailable: bool = False
    copy_start: GridPos = GridPos(0, 0)
    copy_tile_width: int = 0
    copy_tile_height: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.position, GridPos):
            self.position = GridPos.from_tuple(self.position)
        if not isinstance(self.copy_start, GridPos):
            self.copy_start = GridPos.from_tuple(self.copy_start)
        if not isinstance(self.orientation, Orientation):
            if isinstance(self.orientation, str):
                self.orientation = Orientation.from_name(self.orientation)
            else:
                self.orientation = Orientation.from_tuple(tuple(int(v) for v in self.orientation))
        if self.copy_tile_width < 0 or self.copy_tile_height < 0:
            raise ValueError("Doorway copy tile dimensions cannot be negative")

    @property
    def is_available(self) -> bool:
        return not self.is_connected and not self.is_unavailable

    def copy(self) -> Doorway:
        """Return an independent doorway with the same geometry and state."""
        return replace(self)


@dataclass(frozen=True)
class RoomTemplate:
    """Immutable master data for one room shape.

    Bounds are inclusive: a template spanning cells 0..9 on x has
    ``lower_bounds.x == 0`` and ``upper_bounds.x == 9``. ``doorways`` is the
    master list and is never handed to a placed room directly.
    """

    template_id: str
    room_type: RoomType
    lower_bounds: GridPos
    upper_bounds: GridPos
    doorways: Tuple[Doorway, ...]
    spawn_positions: Tuple[GridPos, ...] = ()
    asset: Any = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "lower_bounds", GridPos.from_tuple(tuple(self.lower_bounds)))
        object.__setattr__(self, "upper_bounds", GridPos.from_tuple(tuple(self.upper_bounds)))
        object.__setattr__(self, "doorways", tuple(self.doorways))
        object.__setattr__(
            self,
            "spawn_positions",
            tuple(GridPos.from_tuple(tuple(pos)) for pos in self.spawn_positions),
        )
        self.validate()

    def validate(self) -> None:
        if not self.template_id:
            raise ValueError("Room template requires a non-empty template_id")
        if not isinstance(self.room_type, RoomType):
            raise ValueError(f"Room template {self.template_id} has invalid room type {self.room_type!r}")
        if (
            self.upper_bounds.x < self.lower_bounds.x
            or self.upper_bounds.y < self.lower_bounds.y
        ):
            raise ValueError(
                f"Room template {self.template_id} upper bounds {self.upper_bounds} "
                f"below lower bounds {self.lower_bounds}"
            )
        for index, doorway in enumerate(self.doorways):
            if not isinstance(doorway, Doorway):
                raise ValueError(f"Room template {self.template_id} doorway {index} is not a Doorway")

    @classmethod
    def from_tile_bounds(
        cls,
        template_id: str,
        room_type: RoomType,
        tile_min: Tuple[int, int],
        tile_max_exclusive: Tuple[int, int],
        doorways: Sequence[Doorway],
        spawn_positions: Sequence[Tuple[int, int]] = (),
        asset: Any = None,
    ) -> RoomTemplate:
        """Build a template from tilemap cell bounds whose maximum is exclusive."""
        upper = GridPos(tile_max_exclusive[0] - 1, tile_max_exclusive[1] - 1)
        return cls(
            template_id=template_id,
            room_type=room_type,
            lower_bounds=GridPos.from_tuple(tile_min),
            upper_bounds=upper,
            doorways=tuple(doorways),
            spawn_positions=tuple(GridPos.from_tuple(pos) for pos in spawn_positions),
            asset=asset,
        )

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.lower_bounds, self.upper_bounds)

    def instantiate_doorways(self) -> List[Doorway]:
        """Deep-copy the master doorway list for a new room instance."""
        return [doorway.copy() for doorway in self.doorways]


@dataclass(frozen=True)
class RoomGraphNode:
    """Logical room slot in an authored room graph."""

    node_id: str
    room_type: RoomType
    parent_ids: Tuple[str, ...] = ()
    child_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "parent_ids", tuple(self.parent_ids))
        object.__setattr__(self, "child_ids", tuple(self.child_ids))
        if not self.node_id:
            raise ValueError("Room graph node requires a non-empty node_id")

    @property
    def is_entrance(self) -> bool:
        return self.room_type.is_entrance

    @property
    def parent_id(self) -> Optional[str]:
        return self.parent_ids[0] if self.parent_ids else None


@dataclass
class PlacedRoom:
    """Room instance created for one graph node during a generation attempt."""

    room_id: str
    template_id: str
    room_type: RoomType
    lower_bounds: GridPos
    upper_bounds: GridPos
    template_lower_bounds: GridPos
    template_upper_bounds: GridPos
    doorways: List[Doorway]
    spawn_positions: Tuple[GridPos, ...] = ()
    parent_room_id: str = ""
    child_room_ids: List[str] = field(default_factory=list)
    is_positioned: bool = False
    # Gameplay state, written by collaborators after generation.
    is_lit: bool = False
    is_cleared_of_enemies: bool = False
    is_previously_visited: bool = False
    asset: Any = field(default=None, compare=False, repr=False)

    @classmethod
    def from_template(cls, template: RoomTemplate, node: RoomGraphNode) -> PlacedRoom:
        """Create an unpositioned room sitting on the template's own bounds."""
        parent_id = node.parent_id
        return cls(
            room_id=node.node_id,
            template_id=template.template_id,
            room_type=template.room_type,
            lower_bounds=template.lower_bounds,
            upper_bounds=template.upper_bounds,
            template_lower_bounds=template.lower_bounds,
            template_upper_bounds=template.upper_bounds,
            doorways=template.instantiate_doorways(),
            spawn_positions=template.spawn_positions,
            parent_room_id=parent_id if parent_id is not None else "",
            child_room_ids=list(node.child_ids),
            is_previously_visited=parent_id is None,
            asset=template.asset,
        )

    @property
    def is_entrance(self) -> bool:
        return self.room_type.is_entrance

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.lower_bounds, self.upper_bounds)

    @property
    def world_offset(self) -> GridPos:
        """Translation from template-local coordinates to world coordinates."""
        return self.lower_bounds - self.template_lower_bounds

    def place_at(self, lower_bounds: GridPos) -> None:
        """Move the room so its lower corner sits on ``lower_bounds``."""
        self.lower_bounds = lower_bounds
        self.upper_bounds = lower_bounds + (self.template_upper_bounds - self.template_lower_bounds)

    def world_doorway_position(self, doorway: Doorway) -> GridPos:
        return self.lower_bounds + doorway.position - self.template_lower_bounds

    def world_spawn_positions(self) -> List[GridPos]:
        offset = self.world_offset
        return [pos + offset for pos in self.spawn_positions]

    def available_doorways(self) -> List[Doorway]:
        """Doorways that are neither connected nor excluded from placement."""
        return [doorway for doorway in self.doorways if doorway.is_available]

    def connected_doorways(self) -> List[Doorway]:
        return [doorway for doorway in self.doorways if doorway.is_connected]

    def find_doorway(self, orientation: Orientation) -> Optional[Doorway]:
        """Return the first doorway facing ``orientation``, if any."""
        for doorway in self.doorways:
            if doorway.orientation is orientation:
                return doorway
        return None

    def overlaps(self, other: PlacedRoom) -> bool:
        return self.bounds.overlaps(other.bounds)
