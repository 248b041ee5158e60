"""
Search graph: transposition table of nodes plus a bounded traversal stack.

Nodes are keyed by the state's key(), so move orders that transpose into
the same position share one Node. Each node stores:
- n_visits: how many times the search passed through or expanded it
- children: one Edge per action, in expansion order

Each edge stores, from the point of view of the player who made its move:
- total_val: sum of rewards (seeded with the expansion rollout estimate)
- best_val: best single reward seen
- n_visits: number of backpropagations through the edge

Because the seed estimate is stored without a visit, the running average
of an edge is total_val / (n_visits + 1).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Optional


class SearchDepthExceeded(RuntimeError):
    """Raised when a traversal goes deeper than the configured maximum."""


@dataclass
class Edge:
    """Statistics for one action out of a node."""

    action: Any
    player: Any  # Player who made the move
    total_val: float = 0.0
    best_val: float = 0.0
    n_visits: int = 0

    # Key of the node this edge leads to, known once it has been traversed
    child_key: Optional[Hashable] = None

    @property
    def avg_val(self) -> float:
        """Running average reward, counting the seed estimate."""
        return self.total_val / (self.n_visits + 1.0)

    def __repr__(self) -> str:
        return (
            f"Edge(action={self.action!r}, player={self.player!r}, "
            f"avg={self.avg_val:.3f}, visits={self.n_visits})"
        )


@dataclass
class Node:
    """A position in the search graph."""

    key: Hashable
    n_visits: int = 0
    children: list[Edge] = field(default_factory=list)

    @property
    def is_expanded(self) -> bool:
        return bool(self.children)

    def get_edge(self, action: Any) -> Optional[Edge]:
        """Get the edge for action, if it exists."""
        for edge in self.children:
            if edge.action == action:
                return edge
        return None

    def __repr__(self) -> str:
        return f"Node(key={self.key!r}, visits={self.n_visits}, children={len(self.children)})"


class SearchGraph:
    """
    Hash-keyed search graph with a bounded edge stack.

    The table only ever grows: nodes are never removed, so a Node held by
    the caller stays valid for the lifetime of the graph, and statistics
    gathered from an old root remain available after the root moves.

    Args:
        root_key: Key of the initial root position
        max_depth: Maximum number of edges on the traversal stack
    """

    def __init__(self, root_key: Hashable, max_depth: int = 128):
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.max_depth = max_depth
        self._table: dict[Hashable, Node] = {}
        self._stack: list[Edge] = []
        self._root = self.get_node(root_key)

    def get_node(self, key: Hashable) -> Node:
        """Return the node for key, creating an unvisited one if needed."""
        node = self._table.get(key)
        if node is None:
            node = Node(key=key)
            self._table[key] = node
        return node

    @property
    def root(self) -> Node:
        return self._root

    def set_root(self, key: Hashable) -> Node:
        """Move the active root to the node for key and clear the stack."""
        self._root = self.get_node(key)
        self._stack.clear()
        return self._root

    @property
    def depth(self) -> int:
        return len(self._stack)

    def traversal_push(self, edge: Edge) -> None:
        """Record that the current traversal went through edge."""
        if len(self._stack) >= self.max_depth:
            raise SearchDepthExceeded(
                f"search depth exceeded configured maximum ({self.max_depth})"
            )
        self._stack.append(edge)

    def parent(self) -> Optional[Edge]:
        """Return the edge that led to the current node, or None at the root."""
        return self._stack[-1] if self._stack else None

    def traceback(self) -> list:
        """Actions from the root to the current node."""
        return [edge.action for edge in self._stack]

    def reset_traversal(self) -> None:
        self._stack.clear()

    def backpropagate(self, reward: float, player: Any) -> None:
        """
        Add reward to every edge on the stack, deepest first.

        reward is expressed from player's point of view. Whenever an edge
        was played by someone else, the reward is complemented (1 - reward)
        and the point of view switches to that edge's player, so every
        edge accumulates rewards for the player who made its move.
        The stack is empty afterwards.
        """
        while self._stack:
            edge = self._stack.pop()

            if edge.player != player:
                player = edge.player
                reward = 1.0 - reward

            edge.total_val += reward
            edge.best_val = max(edge.best_val, reward)
            edge.n_visits += 1

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._table

    def __iter__(self):
        """Iterate over all nodes, in insertion order."""
        return iter(self._table.values())

    def to_dict(self, max_depth: int = 2, node: Optional[Node] = None) -> dict:
        """
        Nested, JSON-ready view of the graph below node (default: root).

        Edges never traversed have no known child and are listed as leaves.
        Transpositions are expanded once per path, so keep max_depth small.
        """
        if node is None:
            node = self._root

        result: dict = {
            "key": str(node.key),
            "n_visits": node.n_visits,
            "children": [],
        }
        for edge in node.children:
            entry: dict = {
                "action": str(edge.action),
                "player": str(edge.player),
                "avg_val": round(edge.avg_val, 4),
                "best_val": round(edge.best_val, 4),
                "n_visits": edge.n_visits,
            }
            if max_depth > 1 and edge.child_key in self._table:
                entry["node"] = self.to_dict(max_depth - 1, self._table[edge.child_key])
            result["children"].append(entry)
        return result
