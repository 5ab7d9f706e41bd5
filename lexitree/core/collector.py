"""Data collection strategies for LexiTree.

DataCollectors define what information is extracted from each entity
visited by a traversal, so one traversal can produce ids, feature
snapshots, paths or aggregates.
"""

from abc import ABC, abstractmethod
from numbers import Number
from typing import Any, Dict, List
from .node import TreeNode
from .adapter import TreeAdapter


class DataCollector(ABC):
    """Abstract base class for data collection strategies."""

    def __init__(self, adapter: TreeAdapter):
        """Initialize collector with an adapter.

        Args:
            adapter: TreeAdapter for additional node operations
        """
        self.adapter = adapter

    @abstractmethod
    def collect(self, node: TreeNode, depth: int) -> Any:
        """Collect data from a node.

        Args:
            node: The node to collect data from
            depth: Current depth in traversal

        Returns:
            Collected data (type depends on collector)
        """
        pass


class IdentifierCollector(DataCollector):
    """Collects only entity ids."""

    def collect(self, node: TreeNode, depth: int) -> Any:
        return node.id


class FeatureCollector(DataCollector):
    """Collects a snapshot of each entity's features.

    Plain TreeNodes without a feature store report their metadata instead.
    """

    def collect(self, node: TreeNode, depth: int) -> Dict[str, Any]:
        features = getattr(node, 'features', None)
        if features is None:
            return node.metadata()
        return dict(features.items())


class FullNodeCollector(DataCollector):
    """Collects the entity itself."""

    def collect(self, node: TreeNode, depth: int) -> TreeNode:
        return node


class ChildCountCollector(DataCollector):
    """Collects structural information with the immediate child count."""

    def collect(self, node: TreeNode, depth: int) -> Dict[str, Any]:
        child_count = sum(1 for _ in self.adapter.get_children(node))
        return {
            'id': node.id,
            'depth': depth,
            'child_count': child_count,
            'is_leaf': node.is_leaf()
        }


class PathCollector(DataCollector):
    """Collects the ids from the tree root down to each entity.

    Paths are rebuilt on every call; the tree may change between
    traversals.
    """

    def collect(self, node: TreeNode, depth: int) -> List[Any]:
        path = [node.id]
        current = node
        while True:
            parent = self.adapter.get_parent(current)
            if parent is None:
                break
            path.insert(0, parent.id)
            current = parent
        return path


class SumCollector(DataCollector):
    """Sums a numeric feature over each entity's subtree.

    Non-numeric and missing values count as zero.
    """

    def __init__(self, adapter: TreeAdapter, feature: str):
        super().__init__(adapter)
        self.feature = feature

    def _own_value(self, node: TreeNode) -> Any:
        features = getattr(node, 'features', None)
        value = features.get(self.feature) if features is not None else None
        if isinstance(value, Number) and not isinstance(value, bool):
            return value
        return 0

    def collect(self, node: TreeNode, depth: int) -> Dict[str, Any]:
        own = self._own_value(node)
        total = own
        stack = list(self.adapter.get_children(node))
        while stack:
            current = stack.pop()
            total += self._own_value(current)
            stack.extend(self.adapter.get_children(current))
        return {
            'id': node.id,
            'depth': depth,
            'own_value': own,
            'aggregated': total
        }


class CustomCollector(DataCollector):
    """Collector that uses a user-provided function(node, depth)."""

    def __init__(self, adapter: TreeAdapter, collect_func):
        super().__init__(adapter)
        self.collect_func = collect_func

    def collect(self, node: TreeNode, depth: int) -> Any:
        return self.collect_func(node, depth)
