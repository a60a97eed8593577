"""Prototype room templates and room graphs for manual runs, benchmarks and tests."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from dungeon_config import DungeonLevel
from dungeon_geometry import GridPos, Orientation
from dungeon_models import Doorway, RoomTemplate, RoomType
from room_graph import RoomGraph


def _doorway(x: int, y: int, orientation: Orientation, width: int = 2) -> Doorway:
    # Sealing copies a strip of wall tiles across the opening, just inside the room.
    if orientation.is_vertical:
        return Doorway(
            position=GridPos(x, y),
            orientation=orientation,
            copy_start=GridPos(x - 1, y),
            copy_tile_width=width + 1,
            copy_tile_height=1,
        )
    return Doorway(
        position=GridPos(x, y),
        orientation=orientation,
        copy_start=GridPos(x, y + 1),
        copy_tile_width=1,
        copy_tile_height=width + 1,
    )


def _rect_room(
    template_id: str,
    room_type: RoomType,
    lower: Tuple[int, int],
    upper: Tuple[int, int],
    orientations: Sequence[Orientation] = tuple(Orientation),
    spawn_positions: Sequence[Tuple[int, int]] = (),
) -> RoomTemplate:
    """Rectangular room with a doorway centred on each requested side."""
    (lx, ly), (ux, uy) = lower, upper
    mid_x = (lx + ux) // 2
    mid_y = (ly + uy) // 2
    positions = {
        Orientation.NORTH: (mid_x, uy),
        Orientation.SOUTH: (mid_x, ly),
        Orientation.EAST: (ux, mid_y),
        Orientation.WEST: (lx, mid_y),
    }
    doorways = [_doorway(*positions[orientation], orientation) for orientation in orientations]
    return RoomTemplate(
        template_id=template_id,
        room_type=room_type,
        lower_bounds=GridPos(*lower),
        upper_bounds=GridPos(*upper),
        doorways=tuple(doorways),
        spawn_positions=tuple(GridPos(*pos) for pos in spawn_positions),
    )


def build_default_room_templates() -> List[RoomTemplate]:
    return [
        _rect_room("entrance_16x12", RoomType.ENTRANCE, (-8, -6), (7, 5)),
        _rect_room(
            "corridor_ns_4x10",
            RoomType.CORRIDOR_NS,
            (0, 0),
            (3, 9),
            orientations=(Orientation.NORTH, Orientation.SOUTH),
        ),
        _rect_room(
            "corridor_ns_4x6",
            RoomType.CORRIDOR_NS,
            (0, 0),
            (3, 5),
            orientations=(Orientation.NORTH, Orientation.SOUTH),
        ),
        _rect_room(
            "corridor_ew_10x4",
            RoomType.CORRIDOR_EW,
            (0, 0),
            (9, 3),
            orientations=(Orientation.EAST, Orientation.WEST),
        ),
        _rect_room(
            "corridor_ew_6x4",
            RoomType.CORRIDOR_EW,
            (0, 0),
            (5, 3),
            orientations=(Orientation.EAST, Orientation.WEST),
        ),
        _rect_room(
            "room_12x10_4doors",
            RoomType.NORMAL,
            (-6, -5),
            (5, 4),
            spawn_positions=((-3, -2), (2, 1), (0, 0)),
        ),
        _rect_room(
            "room_18x14_4doors",
            RoomType.NORMAL,
            (0, 0),
            (17, 13),
            spawn_positions=((4, 4), (12, 9), (8, 6), (14, 3)),
        ),
        _rect_room(
            "room_10x16_3doors",
            RoomType.NORMAL,
            (0, 0),
            (9, 15),
            orientations=(Orientation.NORTH, Orientation.SOUTH, Orientation.EAST),
            spawn_positions=((4, 4), (4, 11)),
        ),
        _rect_room(
            "boss_20x16",
            RoomType.BOSS,
            (-10, -8),
            (9, 7),
            spawn_positions=((0, 0),),
        ),
    ]


def build_linear_graph(name: str = "linear") -> RoomGraph:
    """entrance - corridor - room - corridor - room - corridor - boss."""
    builder = RoomGraph.builder(name)
    previous = builder.add_node(RoomType.ENTRANCE, "entrance")
    chain = [
        (RoomType.CORRIDOR, "corridor_1"),
        (RoomType.NORMAL, "room_1"),
        (RoomType.CORRIDOR, "corridor_2"),
        (RoomType.NORMAL, "room_2"),
        (RoomType.CORRIDOR, "corridor_3"),
        (RoomType.BOSS, "boss"),
    ]
    for room_type, node_id in chain:
        builder.add_node(room_type, node_id)
        builder.connect(previous, node_id)
        previous = node_id
    return builder.build()


def build_branching_graph(name: str = "branching") -> RoomGraph:
    """An entrance with three corridor branches; the third branch leads on to the boss."""
    builder = RoomGraph.builder(name)
    builder.add_node(RoomType.ENTRANCE, "entrance")
    for branch in range(1, 4):
        corridor_id = builder.add_node(RoomType.CORRIDOR, f"corridor_{branch}")
        room_id = builder.add_node(RoomType.NORMAL, f"room_{branch}")
        builder.connect("entrance", corridor_id)
        builder.connect(corridor_id, room_id)

    for branch in range(1, 3):
        corridor_id = builder.add_node(RoomType.CORRIDOR, f"corridor_{branch}_a")
        room_id = builder.add_node(RoomType.NORMAL, f"room_{branch}_a")
        builder.connect(f"room_{branch}", corridor_id)
        builder.connect(corridor_id, room_id)

    builder.add_node(RoomType.CORRIDOR, "corridor_boss")
    builder.add_node(RoomType.BOSS, "boss")
    builder.connect("room_3", "corridor_boss")
    builder.connect("corridor_boss", "boss")
    return builder.build()


def build_sample_level(level_name: str = "Level 1") -> DungeonLevel:
    return DungeonLevel(
        level_name=level_name,
        room_templates=build_default_room_templates(),
        room_graphs=[build_linear_graph(), build_branching_graph()],
    )
