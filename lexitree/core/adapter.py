"""TreeAdapter abstraction for LexiTree.

Traversers and collectors navigate through an adapter rather than touching
node internals. EntityAdapter is the adapter for in-memory entity trees.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional
from .node import TreeNode


class TreeAdapter(ABC):
    """Abstract adapter for navigating a tree structure."""

    @abstractmethod
    def get_children(self, node: TreeNode) -> Iterator[TreeNode]:
        """Get an iterator of child nodes for the given node.

        Args:
            node: The parent node

        Returns:
            Iterator yielding child nodes in order
        """
        pass

    @abstractmethod
    def get_parent(self, node: TreeNode) -> Optional[TreeNode]:
        """Get the parent node of the given node.

        Args:
            node: The child node

        Returns:
            Parent node or None if node is root
        """
        pass

    def get_depth(self, node: TreeNode) -> int:
        """Calculate the depth of a node in the tree (root = 0)."""
        depth = 0
        current = node
        while True:
            parent = self.get_parent(current)
            if parent is None:
                break
            depth += 1
            current = parent
        return depth

    def get_siblings(self, node: TreeNode) -> Iterator[TreeNode]:
        """Get siblings of the given node (excluding the node itself)."""
        parent = self.get_parent(node)
        if parent is None:
            return
        for child in self.get_children(parent):
            if child is not node:
                yield child

    def estimated_size(self, node: TreeNode) -> Optional[int]:
        """Estimate the number of nodes in the subtree, or None."""
        return None


class EntityAdapter(TreeAdapter):
    """Adapter over in-memory TreeNode/Entity trees.

    Children are read from a snapshot so callers may mutate the tree
    between two restarts of a traversal without invalidating iterators
    already handed out.
    """

    def get_children(self, node: TreeNode) -> Iterator[TreeNode]:
        return iter(node.children)

    def get_parent(self, node: TreeNode) -> Optional[TreeNode]:
        return node.parent

    def get_depth(self, node: TreeNode) -> int:
        return node.depth

    def estimated_size(self, node: TreeNode) -> Optional[int]:
        return sum(1 for _ in node.iter_subtree())
