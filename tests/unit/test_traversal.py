"""Unit tests for downstream propagation."""

import pytest

from itiac.graph.traversal import (
    compute_downstream_impact,
    get_downstream,
    offline_root_ids,
    traverse_downstream,
)


@pytest.mark.unit
class TestTraverseDownstream:
    """Test cases for multi-source propagation."""

    def test_linear_chain(self):
        """Test everything after the root is reached."""
        adjacency = {"a": ["b"], "b": ["c"], "c": ["d"]}

        assert traverse_downstream(["a"], adjacency) == {"b", "c", "d"}

    def test_root_never_in_result(self):
        """Test roots are excluded even when a cycle leads back to them."""
        adjacency = {"a": ["b"], "b": ["a"]}

        impacted = traverse_downstream(["a"], adjacency)

        assert "a" not in impacted
        assert impacted == {"b"}

    def test_self_loop_on_root(self):
        """Test a root pointing at itself does not impact itself."""
        assert traverse_downstream(["a"], {"a": ["a"]}) == set()

    def test_terminates_on_cycles(self):
        """Test traversal terminates on a strongly connected graph."""
        nodes = [f"n{i}" for i in range(50)]
        adjacency = {n: [m for m in nodes if m != n] for n in nodes}

        impacted = traverse_downstream(["n0"], adjacency)

        assert impacted == set(nodes) - {"n0"}

    def test_stop_ids_not_reported_or_expanded(self):
        """Test stop-set members block propagation through them."""
        adjacency = {"a": ["b", "x"], "b": ["c"], "x": ["y"]}

        impacted = traverse_downstream(["a"], adjacency, stop_ids={"x"})

        assert impacted == {"b", "c"}

    def test_multiple_roots_union(self):
        """Test the result is the union of each root's reach."""
        adjacency = {"a": ["b"], "c": ["d"]}

        assert traverse_downstream(["a", "c"], adjacency) == {"b", "d"}

    def test_roots_do_not_impact_each_other(self):
        """Test a root downstream of another root is excluded but still propagates."""
        adjacency = {"a": ["b"], "b": ["c"], "c": ["d"]}

        impacted = traverse_downstream(["a", "c"], adjacency, stop_ids={"a", "c"})

        assert impacted == {"b", "d"}
        assert "c" not in impacted

    def test_no_roots(self):
        """Test nothing is impacted without roots."""
        assert traverse_downstream([], {"a": ["b"]}) == set()

    def test_unknown_root(self):
        """Test a root missing from the adjacency reaches nothing."""
        assert traverse_downstream(["zzz"], {"a": ["b"]}) == set()

    def test_parallel_edges(self):
        """Test parallel edges do not double count."""
        assert traverse_downstream(["a"], {"a": ["b", "b"]}) == {"b"}

    def test_monotone_in_edges(self):
        """Test adding an edge never shrinks the impacted set."""
        adjacency = {"a": ["b"], "c": ["d"]}
        before = traverse_downstream(["a"], adjacency)

        adjacency["b"] = ["c"]
        after = traverse_downstream(["a"], adjacency)

        assert before <= after
        assert after == {"b", "c", "d"}

    def test_monotone_in_roots_without_stop_set(self):
        """Test adding a root never shrinks the impacted set."""
        adjacency = {"a": ["b"], "c": ["d"], "e": ["f"]}

        before = traverse_downstream(["a"], adjacency)
        after = traverse_downstream(["a", "e"], adjacency)

        assert before <= after


@pytest.mark.unit
class TestGetDownstream:
    """Test cases for single-source traversal with depth and paths."""

    def test_depth_and_paths(self):
        """Test each node records its hop depth and shortest path."""
        adjacency = {"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": ["e"]}

        result = get_downstream(adjacency, "a")

        assert result.root_id == "a"
        assert result.node_ids == ["b", "c", "d", "e"]
        by_id = {n.component_id: n for n in result.nodes}
        assert by_id["b"].depth == 1
        assert by_id["d"].depth == 2
        assert by_id["d"].path == ["a", "b", "d"]
        assert by_id["e"].depth == 3
        assert result.max_depth == 3

    def test_start_excluded_on_cycle(self):
        """Test the start node is never part of its own downstream."""
        result = get_downstream({"a": ["b"], "b": ["a"]}, "a")

        assert result.node_ids == ["b"]

    def test_max_depth_limit(self):
        """Test nodes beyond the hop limit are not reached."""
        adjacency = {"a": ["b"], "b": ["c"], "c": ["d"]}

        result = get_downstream(adjacency, "a", max_depth=2)

        assert result.node_ids == ["b", "c"]
        assert result.max_depth == 2

    def test_at_depth(self):
        """Test filtering nodes by depth."""
        result = get_downstream({"a": ["b", "c"], "b": ["d"]}, "a")

        assert [n.component_id for n in result.at_depth(1)] == ["b", "c"]
        assert [n.component_id for n in result.at_depth(2)] == ["d"]

    def test_isolated_node(self):
        """Test a node with no successors has empty downstream."""
        result = get_downstream({}, "a")

        assert result.nodes == []
        assert result.max_depth == 0


@pytest.mark.unit
class TestComputeDownstreamImpact:
    """Test cases for the snapshot-level propagation entry point."""

    def test_scenario_a_source_to_target(self, make_component, make_dependency):
        """Test S1 -> S2 -> S3 with S2 offline impacts only S3."""
        components = [
            make_component("S1"),
            make_component("S2", status="offline"),
            make_component("S3"),
        ]
        dependencies = [make_dependency("S1", "S2"), make_dependency("S2", "S3")]

        impacted = compute_downstream_impact(components, dependencies)

        assert impacted == {"S3"}

    def test_scenario_b_disjoint_roots(self, make_component, make_dependency):
        """Test two disjoint offline roots give the union of their subgraphs."""
        components = [
            make_component("r1", status="offline"),
            make_component("a1"),
            make_component("a2"),
            make_component("r2", status="offline"),
            make_component("b1"),
        ]
        dependencies = [
            make_dependency("r1", "a1"),
            make_dependency("a1", "a2"),
            make_dependency("r2", "b1"),
        ]

        assert compute_downstream_impact(components, dependencies) == {"a1", "a2", "b1"}

    def test_no_offline_components(self, make_component, make_dependency):
        """Test nothing is impacted when everything is online."""
        components = [make_component("a"), make_component("b")]

        assert compute_downstream_impact(components, [make_dependency("a", "b")]) == set()

    def test_offline_root_downstream_of_other_root(self, make_component, make_dependency):
        """Test offline components are causes and never impacted."""
        components = [
            make_component("a", status="offline"),
            make_component("b", status="offline"),
            make_component("c"),
        ]
        dependencies = [make_dependency("a", "b"), make_dependency("b", "c")]

        assert compute_downstream_impact(components, dependencies) == {"c"}

    def test_warning_and_maintenance_are_not_roots(self, make_component, make_dependency):
        """Test only offline status starts propagation."""
        components = [
            make_component("a", status="warning"),
            make_component("b", status="maintenance"),
            make_component("c"),
        ]
        dependencies = [make_dependency("a", "c"), make_dependency("b", "c")]

        assert compute_downstream_impact(components, dependencies) == set()

    def test_visible_ids_restrict_roots_and_edges(self, make_component, make_dependency):
        """Test hidden components neither start nor carry propagation."""
        components = [
            make_component("a", status="offline"),
            make_component("b"),
            make_component("c"),
            make_component("h", status="offline"),
            make_component("z"),
        ]
        dependencies = [
            make_dependency("a", "b"),
            make_dependency("b", "c"),
            make_dependency("h", "z"),
        ]

        impacted = compute_downstream_impact(components, dependencies, visible_ids={"a", "b", "z"})

        assert impacted == {"b"}

    def test_dangling_dependency_tolerated(self, make_component, make_dependency):
        """Test edges to unknown ids do not break propagation."""
        components = [make_component("a", status="offline")]

        impacted = compute_downstream_impact(components, [make_dependency("a", "ghost")])

        assert impacted == {"ghost"}


@pytest.mark.unit
def test_offline_root_ids_snapshot_order(make_component):
    """Test roots come back in snapshot order."""
    components = [
        make_component("z", status="offline"),
        make_component("m"),
        make_component("a", status="offline"),
    ]

    assert offline_root_ids(components) == ["z", "a"]
    assert offline_root_ids(components, visible_ids={"a"}) == ["a"]
