import pytest

from dungeon_geometry import GridPos, Orientation
from dungeon_layout import DungeonLayout
from dungeon_models import PlacedRoom, RoomGraphNode, RoomType
from room_graph import RoomGraph
from room_placement import PlacementFailure, RoomPlacer, aligned_lower_bounds
from template_catalog import TemplateCatalog


@pytest.fixture
def placer(small_catalog, rng):
    return RoomPlacer(small_catalog, rng, DungeonLayout())


def test_aligned_lower_bounds_puts_doorways_on_adjacent_cells(entrance_template, corridor_ew_template):
    parent = PlacedRoom.from_template(entrance_template, RoomGraphNode("entrance", RoomType.ENTRANCE))
    child = PlacedRoom.from_template(
        corridor_ew_template, RoomGraphNode("c", RoomType.CORRIDOR, parent_ids=("entrance",))
    )
    parent_doorway = parent.doorways[0]
    child_doorway = child.find_doorway(Orientation.WEST)

    lower = aligned_lower_bounds(parent, parent_doorway, child, child_doorway)
    child.place_at(lower)

    assert lower == GridPos(5, 1)
    assert child.upper_bounds == GridPos(8, 3)
    assert (
        parent.world_doorway_position(parent_doorway) + parent_doorway.orientation.unit_offset()
        == child.world_doorway_position(child_doorway)
    )


def test_aligned_lower_bounds_accounts_for_template_origin(template_factory):
    parent_template = template_factory(
        "centered", RoomType.ENTRANCE, (-4, -4), (3, 3), [((0, 3), Orientation.NORTH)]
    )
    child_template = template_factory(
        "offset", RoomType.NORMAL, (-2, -1), (2, 3), [((1, -1), Orientation.SOUTH)]
    )
    parent = PlacedRoom.from_template(parent_template, RoomGraphNode("p", RoomType.ENTRANCE))
    parent.place_at(GridPos(10, 10))
    child = PlacedRoom.from_template(child_template, RoomGraphNode("c", RoomType.NORMAL, parent_ids=("p",)))

    child.place_at(aligned_lower_bounds(parent, parent.doorways[0], child, child.doorways[0]))

    assert parent.world_doorway_position(parent.doorways[0]) == GridPos(14, 17)
    assert child.world_doorway_position(child.doorways[0]) == GridPos(14, 18)
    assert not child.overlaps(parent)


def test_attempt_places_chain_with_paired_doorways(placer, make_chain_graph):
    graph = make_chain_graph(RoomType.CORRIDOR, RoomType.NORMAL)

    result = placer.attempt(graph)

    assert result.success
    rooms = result.layout.rooms
    assert list(rooms) == ["entrance", "node_1", "node_2"]
    assert rooms["node_1"].room_type is RoomType.CORRIDOR_EW
    assert rooms["node_1"].lower_bounds == GridPos(5, 1)
    assert rooms["node_2"].lower_bounds == GridPos(9, -1)
    assert rooms["node_2"].upper_bounds == GridPos(14, 4)
    assert all(room.is_positioned for room in rooms.values())

    entrance_door = rooms["entrance"].doorways[0]
    corridor_west = rooms["node_1"].find_doorway(Orientation.WEST)
    corridor_east = rooms["node_1"].find_doorway(Orientation.EAST)
    room_west = rooms["node_2"].find_doorway(Orientation.WEST)
    for doorway in (entrance_door, corridor_west, corridor_east, room_west):
        assert doorway.is_connected and doorway.is_unavailable
    assert rooms["node_2"].find_doorway(Orientation.EAST).is_available


def test_corridor_axis_follows_parent_doorway(template_factory, corridor_ns_template, corridor_ew_template, rng, make_chain_graph):
    entrance = template_factory("north_exit", RoomType.ENTRANCE, (0, 0), (4, 4), [((2, 4), Orientation.NORTH)])
    catalog = TemplateCatalog.load([entrance, corridor_ns_template, corridor_ew_template])

    result = RoomPlacer(catalog, rng).attempt(make_chain_graph(RoomType.CORRIDOR))

    corridor = result.layout.room("node_1")
    assert result.success
    assert corridor.room_type is RoomType.CORRIDOR_NS
    assert corridor.template_id == "corridor_ns_3x4"
    assert corridor.lower_bounds == GridPos(1, 5)


def test_overlap_marks_parent_doorway_unavailable(placer, normal_template, make_chain_graph):
    graph = make_chain_graph(RoomType.CORRIDOR)
    assert placer.place_entrance(graph.entrance()) is None
    blocker = PlacedRoom.from_template(normal_template, RoomGraphNode("blocker", RoomType.NORMAL))
    blocker.place_at(GridPos(6, 0))
    blocker.is_positioned = True
    placer.layout.register_room(blocker)
    entrance_room = placer.layout.room("entrance")

    failure = placer.place_room(graph.node("node_1"), entrance_room)

    assert failure is PlacementFailure.NO_VIABLE_PARENT_DOORWAY
    assert entrance_room.doorways[0].is_unavailable
    assert not entrance_room.doorways[0].is_connected
    assert "node_1" not in placer.layout


def test_missing_opposite_doorway_exhausts_parent(template_factory, entrance_template, rng, make_chain_graph):
    north_only = template_factory("north_only", RoomType.NORMAL, (0, 0), (3, 3), [((1, 3), Orientation.NORTH)])
    catalog = TemplateCatalog.load([entrance_template, north_only])

    result = RoomPlacer(catalog, rng).attempt(make_chain_graph(RoomType.NORMAL))

    assert result.failure is PlacementFailure.NO_VIABLE_PARENT_DOORWAY
    assert result.failed_node_id == "node_1"
    assert result.layout.room("entrance").doorways[0].is_unavailable


def test_missing_template_fails_the_attempt(placer, make_chain_graph):
    result = placer.attempt(make_chain_graph(RoomType.CORRIDOR, RoomType.BOSS))

    assert result.failure is PlacementFailure.TEMPLATE_NOT_FOUND
    assert result.failed_node_id == "node_2"
    assert len(result.layout) == 2


def test_missing_entrance_template(corridor_ew_template, rng, make_chain_graph):
    catalog = TemplateCatalog.load([corridor_ew_template])

    result = RoomPlacer(catalog, rng).attempt(make_chain_graph(RoomType.CORRIDOR))

    assert result.failure is PlacementFailure.TEMPLATE_NOT_FOUND
    assert result.failed_node_id == "entrance"


def test_graph_without_entrance(placer):
    graph = RoomGraph([RoomGraphNode("room", RoomType.NORMAL)])

    result = placer.attempt(graph)

    assert result.failure is PlacementFailure.NO_ENTRANCE_NODE
    assert len(result.layout) == 0


def test_child_whose_parent_was_never_placed(placer):
    graph = RoomGraph(
        [
            RoomGraphNode("entrance", RoomType.ENTRANCE, child_ids=("stray",)),
            RoomGraphNode("stray", RoomType.NORMAL, parent_ids=("elsewhere",)),
        ]
    )

    result = placer.attempt(graph)

    assert result.failure is PlacementFailure.NO_VIABLE_PARENT_DOORWAY
    assert result.failed_node_id == "stray"


def test_cyclic_links_place_each_node_once(placer):
    graph = RoomGraph(
        [
            RoomGraphNode("entrance", RoomType.ENTRANCE, child_ids=("c",)),
            RoomGraphNode("c", RoomType.CORRIDOR, parent_ids=("entrance",), child_ids=("entrance",)),
        ]
    )

    result = placer.attempt(graph)

    assert result.success
    assert list(result.layout.rooms) == ["entrance", "c"]


def test_second_entrance_node_fails_the_attempt(placer):
    graph = RoomGraph(
        [
            RoomGraphNode("entrance", RoomType.ENTRANCE, child_ids=("e2",)),
            RoomGraphNode("e2", RoomType.ENTRANCE, parent_ids=("entrance",)),
        ]
    )

    result = placer.attempt(graph)

    assert result.failure is PlacementFailure.NO_VIABLE_PARENT_DOORWAY
    assert result.failed_node_id == "e2"
    assert list(result.layout.rooms) == ["entrance"]
