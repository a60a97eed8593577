import random
import sys
from pathlib import Path
from typing import Callable, Sequence

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
CODE_DIR = ROOT_DIR / "code"
if str(CODE_DIR) not in sys.path:
    sys.path.insert(0, str(CODE_DIR))

from dungeon_config import DungeonSettings
from dungeon_geometry import GridPos, Orientation
from dungeon_models import Doorway, RoomTemplate, RoomType
from room_graph import RoomGraph
from room_templates import build_default_room_templates
from template_catalog import TemplateCatalog


def make_template(
    template_id: str,
    room_type: RoomType,
    lower: tuple[int, int],
    upper: tuple[int, int],
    doorways: Sequence[tuple[tuple[int, int], Orientation]],
) -> RoomTemplate:
    return RoomTemplate(
        template_id=template_id,
        room_type=room_type,
        lower_bounds=GridPos(*lower),
        upper_bounds=GridPos(*upper),
        doorways=tuple(Doorway(GridPos(*pos), orientation) for pos, orientation in doorways),
    )


@pytest.fixture
def template_factory() -> Callable[..., RoomTemplate]:
    return make_template


@pytest.fixture
def entrance_template() -> RoomTemplate:
    return make_template(
        "entrance_5x5",
        RoomType.ENTRANCE,
        (0, 0),
        (4, 4),
        [((4, 2), Orientation.EAST)],
    )


@pytest.fixture
def corridor_ew_template() -> RoomTemplate:
    return make_template(
        "corridor_ew_4x3",
        RoomType.CORRIDOR_EW,
        (0, 0),
        (3, 2),
        [((0, 1), Orientation.WEST), ((3, 1), Orientation.EAST)],
    )


@pytest.fixture
def corridor_ns_template() -> RoomTemplate:
    return make_template(
        "corridor_ns_3x4",
        RoomType.CORRIDOR_NS,
        (0, 0),
        (2, 3),
        [((1, 0), Orientation.SOUTH), ((1, 3), Orientation.NORTH)],
    )


@pytest.fixture
def normal_template() -> RoomTemplate:
    return make_template(
        "room_6x6",
        RoomType.NORMAL,
        (0, 0),
        (5, 5),
        [((0, 3), Orientation.WEST), ((5, 3), Orientation.EAST)],
    )


@pytest.fixture
def small_catalog(
    entrance_template, corridor_ew_template, corridor_ns_template, normal_template
) -> TemplateCatalog:
    return TemplateCatalog.load(
        [entrance_template, corridor_ew_template, corridor_ns_template, normal_template]
    )


@pytest.fixture
def default_room_templates() -> list[RoomTemplate]:
    return build_default_room_templates()


@pytest.fixture
def default_catalog(default_room_templates) -> TemplateCatalog:
    return TemplateCatalog.load(default_room_templates)


@pytest.fixture
def make_chain_graph() -> Callable[..., RoomGraph]:
    """Builds a single-branch graph from a list of room types, entrance first."""

    def _make_chain_graph(*room_types: RoomType, name: str = "chain") -> RoomGraph:
        builder = RoomGraph.builder(name)
        previous = builder.add_node(RoomType.ENTRANCE, "entrance")
        for index, room_type in enumerate(room_types, start=1):
            node_id = builder.add_node(room_type, f"node_{index}")
            assert builder.connect(previous, node_id)
            previous = node_id
        return builder.build()

    return _make_chain_graph


@pytest.fixture
def settings() -> DungeonSettings:
    return DungeonSettings(
        max_dungeon_build_attempts=3,
        max_dungeon_rebuild_attempts_for_graph=4,
        random_seed=1234,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
