"""Tests for the search graph."""

import pytest

from mctsgraph.mcts import Edge, Node, SearchGraph, SearchDepthExceeded


class TestEdge:
    def test_running_average_counts_seed(self):
        edge = Edge(action=0, player=0, total_val=1.5, n_visits=2)
        assert edge.avg_val == pytest.approx(0.5)

    def test_fresh_edge(self):
        edge = Edge(action=3, player=1)
        assert edge.avg_val == 0.0
        assert edge.child_key is None


class TestNode:
    def test_get_edge(self):
        node = Node(key="k", children=[Edge("a", 0), Edge("b", 0)])
        assert node.get_edge("b").action == "b"
        assert node.get_edge("z") is None
        assert node.is_expanded

    def test_unexpanded(self):
        assert not Node(key="k").is_expanded


class TestSearchGraph:
    def test_same_key_same_node(self):
        graph = SearchGraph("root")
        first = graph.get_node("x")
        assert graph.get_node("x") is first
        assert len(graph) == 2
        assert "x" in graph

    def test_invalid_depth(self):
        with pytest.raises(ValueError):
            SearchGraph("root", max_depth=0)

    def test_set_root_keeps_nodes(self):
        graph = SearchGraph("root")
        old_root = graph.root
        old_root.n_visits = 7
        graph.traversal_push(Edge("a", 0))

        new_root = graph.set_root("child")

        assert graph.root is new_root
        assert graph.depth == 0
        assert graph.get_node("root") is old_root
        assert old_root.n_visits == 7

    def test_push_past_max_depth_raises(self):
        graph = SearchGraph("root", max_depth=2)
        graph.traversal_push(Edge("a", 0))
        graph.traversal_push(Edge("b", 1))
        with pytest.raises(SearchDepthExceeded, match=r"maximum \(2\)"):
            graph.traversal_push(Edge("c", 0))

    def test_parent_and_traceback(self):
        graph = SearchGraph("root")
        assert graph.parent() is None
        first, second = Edge("a", 0), Edge("b", 1)
        graph.traversal_push(first)
        graph.traversal_push(second)
        assert graph.parent() is second
        assert graph.traceback() == ["a", "b"]

    def test_backpropagate_alternating_players(self):
        graph = SearchGraph("root")
        edges = [Edge(i, i % 2) for i in range(4)]
        for edge in edges:
            graph.traversal_push(edge)

        # Reward 0.8 for player 0, who is to move after the last edge
        graph.backpropagate(0.8, 0)

        assert graph.depth == 0
        assert [e.n_visits for e in edges] == [1, 1, 1, 1]
        # Deepest edge was played by player 1
        assert edges[3].total_val == pytest.approx(0.2)
        assert edges[2].total_val == pytest.approx(0.8)
        assert edges[1].total_val == pytest.approx(0.2)
        assert edges[0].total_val == pytest.approx(0.8)
        # Consecutive plies by different players split the reward
        for upper, lower in zip(edges, edges[1:]):
            assert upper.total_val + lower.total_val == pytest.approx(1.0)

    def test_backpropagate_same_player_keeps_reward(self):
        graph = SearchGraph("root")
        edges = [Edge(i, 0) for i in range(3)]
        for edge in edges:
            graph.traversal_push(edge)
        graph.backpropagate(0.3, 0)
        assert all(e.total_val == pytest.approx(0.3) for e in edges)

    def test_best_val_tracks_max(self):
        graph = SearchGraph("root")
        edge = Edge("a", 0)
        for reward in (0.2, 0.9, 0.4):
            graph.traversal_push(edge)
            graph.backpropagate(reward, 0)
        assert edge.best_val == pytest.approx(0.9)
        assert edge.n_visits == 3

    def test_to_dict_nests_known_children(self):
        graph = SearchGraph("root")
        edge = Edge("a", 0, total_val=1.0, n_visits=1, child_key="A")
        graph.root.children.append(edge)
        graph.root.children.append(Edge("b", 0))
        graph.get_node("A").children.append(Edge("c", 1))

        view = graph.to_dict(max_depth=2)

        assert view["key"] == "root"
        assert [c["action"] for c in view["children"]] == ["a", "b"]
        assert view["children"][0]["avg_val"] == pytest.approx(0.5)
        assert view["children"][0]["node"]["children"][0]["action"] == "c"
        assert "node" not in view["children"][1]

    def test_to_dict_depth_one_has_no_nesting(self):
        graph = SearchGraph("root")
        graph.root.children.append(Edge("a", 0, child_key="A"))
        graph.get_node("A")
        assert "node" not in graph.to_dict(max_depth=1)["children"][0]
