import pytest

from benchmark_generation import build_room_tree, gini_coefficient, layout_area, summarize, tree_shape
from dungeon_generator import DungeonBuilder
from dungeon_config import DungeonSettings
from metrics import BuildMetrics
from room_templates import build_sample_level


def test_build_metrics_aggregates_per_graph():
    metrics = BuildMetrics()
    metrics.record_graph_selection("linear")
    metrics.record_attempt("linear", 0.5, "template_not_found", 3)
    metrics.record_attempt("linear", 0.25, None, 7)

    snapshot = metrics.snapshot()

    assert snapshot["total_attempts"] == 2
    assert snapshot["rooms_placed"] == 10
    assert snapshot["failures"] == {"template_not_found": 1}
    assert snapshot["graphs"]["linear"] == {
        "selections": 1,
        "attempts": 2,
        "successes": 1,
        "total_time": 0.75,
        "average_time": 0.375,
    }


def test_gini_and_summary_helpers():
    assert gini_coefficient([]) == 0.0
    assert gini_coefficient([5, 5, 5]) == pytest.approx(0.0)
    assert gini_coefficient([0, 0, 10]) == pytest.approx(0.0)
    assert gini_coefficient([1, 9]) == pytest.approx(0.4)
    stats = summarize([1.0, 2.0, 3.0, 4.0])
    assert stats["median"] == pytest.approx(2.5)
    assert stats["min"] == 1.0 and stats["max"] == 4.0
    assert stats["p10"] == pytest.approx(1.3)
    assert summarize([])["mean"] is None
    assert summarize([2.0])["stdev"] is None


def test_room_tree_matches_generated_layout():
    result = DungeonBuilder(DungeonSettings(random_seed=21)).generate(build_sample_level())
    assert result.success

    tree = build_room_tree(result.rooms)
    area, fraction = layout_area(result.rooms)

    assert tree.number_of_nodes() == len(result.graph)
    assert tree.number_of_edges() == len(result.graph) - 1
    assert set(tree.edges) == set(result.graph.to_networkx().edges)
    assert area > 0
    assert 0.0 < fraction <= 1.0

    depth, leaves, diameter = tree_shape(result.rooms)
    assert depth >= 1
    assert leaves >= 1
    assert diameter >= depth
