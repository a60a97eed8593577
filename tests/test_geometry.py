import pytest

from dungeon_geometry import Bounds, GridPos, Orientation, intervals_overlap


@pytest.mark.parametrize(
    "orientation,expected",
    [
        (Orientation.NORTH, Orientation.SOUTH),
        (Orientation.SOUTH, Orientation.NORTH),
        (Orientation.EAST, Orientation.WEST),
        (Orientation.WEST, Orientation.EAST),
    ],
)
def test_opposite_orientation(orientation, expected):
    assert orientation.opposite() is expected
    assert orientation.is_opposite(expected)
    assert orientation.opposite().opposite() is orientation


def test_unit_offsets_are_y_up():
    assert Orientation.NORTH.unit_offset() == GridPos(0, 1)
    assert Orientation.SOUTH.unit_offset() == GridPos(0, -1)
    assert Orientation.EAST.unit_offset() == GridPos(1, 0)
    assert Orientation.WEST.unit_offset() == GridPos(-1, 0)
    assert Orientation.NORTH.is_vertical
    assert not Orientation.EAST.is_vertical


def test_orientation_parsing_rejects_unknown_values():
    assert Orientation.from_name(" west ") is Orientation.WEST
    assert Orientation.from_tuple((0, -1)) is Orientation.SOUTH

    with pytest.raises(ValueError):
        Orientation.from_name("up")
    with pytest.raises(ValueError):
        Orientation.from_tuple((1, 1))


def test_grid_pos_arithmetic_and_unpacking():
    pos = GridPos(3, -2) + GridPos(1, 5) - GridPos(2, 2)

    assert pos == GridPos(2, 1)
    x, y = pos
    assert (x, y) == pos.to_tuple() == (2, 1)
    assert pos[1] == 1
    with pytest.raises(IndexError):
        pos[2]


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ((0, 3), (3, 5), True),
        ((0, 3), (4, 5), False),
        ((2, 2), (0, 4), True),
        ((-5, -1), (-1, 0), True),
        ((5, 6), (0, 4), False),
    ],
)
def test_intervals_overlap_is_inclusive(a, b, expected):
    assert intervals_overlap(a[0], a[1], b[0], b[1]) is expected
    assert intervals_overlap(b[0], b[1], a[0], a[1]) is expected


@pytest.mark.parametrize(
    "rect_a,rect_b,expected",
    [
        (((0, 0), (3, 3)), ((3, 3), (5, 5)), True),
        (((0, 0), (3, 3)), ((4, 0), (6, 3)), False),
        (((0, 0), (3, 3)), ((0, 4), (3, 6)), False),
        (((0, 0), (9, 9)), ((2, 2), (3, 3)), True),
        (((0, 0), (3, 3)), ((3, 4), (5, 5)), False),
    ],
)
def test_bounds_overlap(rect_a, rect_b, expected):
    bounds_a = Bounds(GridPos(*rect_a[0]), GridPos(*rect_a[1]))
    bounds_b = Bounds(GridPos(*rect_b[0]), GridPos(*rect_b[1]))

    assert bounds_a.overlaps(bounds_b) is expected
    assert bounds_b.overlaps(bounds_a) is expected


def test_bounds_dimensions_and_union():
    bounds = Bounds(GridPos(-2, 0), GridPos(1, 4))

    assert bounds.width == 4
    assert bounds.height == 5
    assert bounds.size == GridPos(3, 4)
    assert bounds.contains(GridPos(-2, 4))
    assert not bounds.contains(GridPos(2, 4))
    assert bounds.translate(GridPos(2, -1)).to_tuple() == (0, -1, 3, 3)

    merged = bounds.union(Bounds(GridPos(5, -3), GridPos(6, 0)))
    assert merged.to_tuple() == (-2, -3, 6, 4)


def test_bounds_reject_inverted_corners():
    with pytest.raises(ValueError):
        Bounds(GridPos(2, 0), GridPos(1, 4))
