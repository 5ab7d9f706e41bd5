"""Walking strategies over entity trees.

A traverser turns a root into a lazy stream of ``(node, depth)`` pairs,
depth being relative to the starting node. Depth bounds come from a
DepthConfig; an optional ``explore`` check can veto descending into a
node's children (used for pruning). All strategies are iterative, so
arbitrarily deep documents never hit the recursion limit.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Type, Union

from .._common.config import DepthConfig, TraversalStrategy
from .adapter import TreeAdapter
from .node import TreeNode

ExploreCheck = Optional[Callable[[TreeNode], bool]]
Visit = Tuple[TreeNode, int]

_UNBOUNDED = DepthConfig()


class TreeTraverser(ABC):
    """Base class: one subclass per TraversalStrategy."""

    strategy: TraversalStrategy

    def __init__(self, adapter: TreeAdapter):
        self.adapter = adapter

    @abstractmethod
    def traverse(self,
                 root: TreeNode,
                 depth: Optional[DepthConfig] = None,
                 explore: ExploreCheck = None) -> Iterator[Visit]:
        """Yield ``(node, depth)`` pairs starting at ``root`` (depth 0).

        Args:
            root: Node the walk starts from
            depth: Depth window; nodes outside it are not yielded and
                nothing below ``max_depth`` is visited
            explore: Returns False for nodes whose children must be skipped
        """

    def _children(self,
                  node: TreeNode,
                  level: int,
                  depth: DepthConfig,
                  explore: ExploreCheck) -> List[TreeNode]:
        if node.is_leaf() or not depth.should_explore(level):
            return []
        if explore is not None and not explore(node):
            return []
        return list(self.adapter.get_children(node))


class BreadthFirstTraverser(TreeTraverser):
    """All nodes at depth N before any node at depth N+1."""

    strategy = TraversalStrategy.BREADTH_FIRST

    def traverse(self, root, depth=None, explore=None):
        depth = depth or _UNBOUNDED
        queue = deque([(root, 0)])
        while queue:
            node, level = queue.popleft()
            if depth.should_yield(level):
                yield (node, level)
            queue.extend((child, level + 1)
                         for child in self._children(node, level, depth, explore))


class DepthFirstPreOrderTraverser(TreeTraverser):
    """Parent before children; for entity trees this is document order."""

    strategy = TraversalStrategy.DEPTH_FIRST_PRE

    def traverse(self, root, depth=None, explore=None):
        depth = depth or _UNBOUNDED
        stack = [(root, 0)]
        while stack:
            node, level = stack.pop()
            if depth.should_yield(level):
                yield (node, level)
            children = self._children(node, level, depth, explore)
            stack.extend((child, level + 1) for child in reversed(children))


class DepthFirstPostOrderTraverser(TreeTraverser):
    """Children before parent, siblings left to right."""

    strategy = TraversalStrategy.DEPTH_FIRST_POST

    def traverse(self, root, depth=None, explore=None):
        depth = depth or _UNBOUNDED
        # Each frame holds a node and the children still to visit
        stack = [(root, 0, iter(self._children(root, 0, depth, explore)))]
        while stack:
            node, level, pending = stack[-1]
            child = next(pending, None)
            if child is not None:
                children = self._children(child, level + 1, depth, explore)
                stack.append((child, level + 1, iter(children)))
                continue
            stack.pop()
            if depth.should_yield(level):
                yield (node, level)


class LevelOrderTraverser(TreeTraverser):
    """Walks level by level; ``levels`` exposes each level as a list."""

    strategy = TraversalStrategy.LEVEL_ORDER

    def levels(self,
               root: TreeNode,
               depth: Optional[DepthConfig] = None,
               explore: ExploreCheck = None) -> Iterator[Tuple[int, List[TreeNode]]]:
        """Yield ``(depth, nodes)`` for every level inside the depth window."""
        depth = depth or _UNBOUNDED
        level, current = 0, [root]
        while current:
            if depth.should_yield(level):
                yield (level, current)
            current = [child
                       for node in current
                       for child in self._children(node, level, depth, explore)]
            level += 1

    def traverse(self, root, depth=None, explore=None):
        for level, nodes in self.levels(root, depth, explore):
            for node in nodes:
                yield (node, level)


TRAVERSERS: Dict[TraversalStrategy, Type[TreeTraverser]] = {
    cls.strategy: cls
    for cls in (BreadthFirstTraverser, DepthFirstPreOrderTraverser,
                DepthFirstPostOrderTraverser, LevelOrderTraverser)
}

_ALIASES = {
    'breadth_first': TraversalStrategy.BREADTH_FIRST,
    'dfs': TraversalStrategy.DEPTH_FIRST_PRE,
    'depth_first_pre': TraversalStrategy.DEPTH_FIRST_PRE,
    'depth_first_post': TraversalStrategy.DEPTH_FIRST_POST,
    'level_order': TraversalStrategy.LEVEL_ORDER,
}


def parse_strategy(strategy: Union[TraversalStrategy, str]) -> TraversalStrategy:
    """Accept a TraversalStrategy, its value (``"bfs"``) or a long alias.

    Raises:
        ValueError: If the name is not recognised
    """
    if isinstance(strategy, TraversalStrategy):
        return strategy
    name = str(strategy).lower()
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return TraversalStrategy(name)
    except ValueError:
        known = sorted({s.value for s in TraversalStrategy} | set(_ALIASES))
        raise ValueError(
            f"Unknown traversal strategy: {strategy}. Choose from: {', '.join(known)}"
        ) from None


def create_traverser(strategy: Union[TraversalStrategy, str], adapter: TreeAdapter) -> TreeTraverser:
    """Instantiate the traverser for ``strategy`` over ``adapter``."""
    return TRAVERSERS[parse_strategy(strategy)](adapter)
