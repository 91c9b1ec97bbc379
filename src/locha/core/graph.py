"""
Link Graph implementation backed by rustworkx.

An undirected graph over feature ids. Every update link with two distinct
endpoints becomes an edge; creations, deletions and loaded features
without links become isolated nodes.

It manages:
- The bimap between feature ids and rustworkx integer indices.
- Symmetric neighbor lookups used by grouping and selection.
"""

import logging
from typing import Any, Dict, Iterable, List, Set

import rustworkx as rx

from .types import Link

logger = logging.getLogger(__name__)


class LinkGraph:
    """
    Undirected adjacency structure over feature ids.

    Features:
    - O(1) node lookup via id-to-index bimap
    - Duplicate edges collapse into one
    - Self-loops are never stored
    """

    def __init__(self):
        self._graph = rx.PyGraph(multigraph=False)
        self._id_to_idx: Dict[int, int] = {}
        self._idx_to_id: Dict[int, int] = {}

    def add_node(self, feature_id: int) -> None:
        """Ensure a node exists for `feature_id`."""
        if feature_id in self._id_to_idx:
            return
        idx = self._graph.add_node(feature_id)
        self._id_to_idx[feature_id] = idx
        self._idx_to_id[idx] = feature_id

    def add_edge(self, a: int, b: int) -> None:
        """Add an undirected edge; both endpoints are created if missing."""
        if a == b:
            return
        self.add_node(a)
        self.add_node(b)
        u = self._id_to_idx[a]
        v = self._id_to_idx[b]
        if not self._graph.has_edge(u, v):
            self._graph.add_edge(u, v, None)

    def has_node(self, feature_id: int) -> bool:
        return feature_id in self._id_to_idx

    def has_edge(self, a: int, b: int) -> bool:
        if a not in self._id_to_idx or b not in self._id_to_idx:
            return False
        return self._graph.has_edge(self._id_to_idx[a], self._id_to_idx[b])

    def neighbors(self, feature_id: int) -> Set[int]:
        """Ids directly linked to `feature_id` (empty for unknown ids)."""
        idx = self._id_to_idx.get(feature_id)
        if idx is None:
            return set()
        return {self._idx_to_id[n] for n in self._graph.neighbors(idx)}

    def node_ids(self) -> List[int]:
        """Node ids in insertion order."""
        return list(self._id_to_idx)

    def adjacency(self) -> Dict[int, Set[int]]:
        """Plain mapping of every node to its neighbor set."""
        return {feature_id: self.neighbors(feature_id) for feature_id in self._id_to_idx}

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def get_stats(self) -> Dict[str, Any]:
        isolated = sum(1 for idx in self._graph.node_indices() if self._graph.degree(idx) == 0)
        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "isolated": isolated,
            "backend": "rustworkx",
        }

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._id_to_idx

    def __len__(self) -> int:
        return self.node_count


def build_link_graph(links: Iterable[Link], feature_ids: Iterable[int] = ()) -> LinkGraph:
    """
    Build the link graph for a set of links.

    Args:
        links: Links to convert. Links with neither endpoint are ignored.
        feature_ids: Ids that must exist as nodes even when no link
            touches them.

    Returns:
        The populated LinkGraph.
    """
    graph = LinkGraph()

    for feature_id in feature_ids:
        graph.add_node(feature_id)

    for link in links:
        if link.is_self_loop:
            logger.debug("Dropping self-loop link on feature %s", link.before)
            continue
        if link.is_update:
            graph.add_edge(link.before, link.after)
        elif link.is_deletion:
            graph.add_node(link.before)
        elif link.is_creation:
            graph.add_node(link.after)

    return graph
