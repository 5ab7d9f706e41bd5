"""TreeNode primitive for LexiTree.

The TreeNode is intentionally kept simple - it's a rooted tree node with an
identity, a value slot and parent/children links. It knows nothing about
registries, features or entity types; those live on Entity, which builds on
this class.

Children are owned by their parent. The parent link is a weak reference so
that a subtree never keeps its container alive.
"""

import weakref
from typing import Any, Dict, Hashable, Iterator, Optional, Tuple

from ..errors import StructuralError


class TreeNode:
    """Generic node of a rooted, ordered tree.

    Navigation used by traversals goes through a TreeAdapter; the node
    itself only provides the structural primitives (append, detach) and
    the minimal interface the adapter needs (identifier, is_leaf, metadata).
    """

    def __init__(self, value: str = '', id: Optional[Hashable] = None):
        """Initialize node with its value and identifier.

        Args:
            value: Payload string
            id: Unique identifier (callers normally let Entity assign one)
        """
        self._id = id
        self._value = value
        self._parent_ref: Optional[weakref.ReferenceType] = None
        self._children = []

    @property
    def id(self) -> Hashable:
        return self._id

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str) -> None:
        self._value = value

    @property
    def parent(self) -> Optional['TreeNode']:
        """Owning node, or None at the root."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def children(self) -> Tuple['TreeNode', ...]:
        """Read-only snapshot of the owned children, in insertion order."""
        return tuple(self._children)

    @property
    def root(self) -> 'TreeNode':
        node = self
        while True:
            parent = node.parent
            if parent is None:
                return node
            node = parent

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.iter_ancestors())

    def identifier(self) -> str:
        """Return the identifier as a string, for adapters and collectors."""
        return str(self._id)

    def metadata(self) -> Dict[str, Any]:
        """Return lightweight information about this node."""
        return {
            'id': self._id,
            'value': self._value,
            'children': len(self._children),
        }

    def is_leaf(self) -> bool:
        return not self._children

    def has_children(self) -> bool:
        return bool(self._children)

    def has_parent(self) -> bool:
        return self.parent is not None

    def iter_ancestors(self) -> Iterator['TreeNode']:
        """Yield ancestors nearest first, excluding self."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def is_ancestor_of(self, node: 'TreeNode') -> bool:
        return any(ancestor is self for ancestor in node.iter_ancestors())

    def iter_subtree(self) -> Iterator['TreeNode']:
        """Yield self and all descendants, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def append_child(self, node: 'TreeNode') -> 'TreeNode':
        """Attach ``node`` as the last child.

        The node must be a root; move nodes by detaching them first.

        Raises:
            StructuralError: If node already has a parent or the edit would
                create a cycle
        """
        if node.parent is not None:
            raise StructuralError(f"{node!r} already has a parent")
        if node is self or node.is_ancestor_of(self):
            raise StructuralError(f"Cannot add {node!r} under its own descendant {self!r}")
        node._parent_ref = weakref.ref(self)
        self._children.append(node)
        return node

    def remove_child(self, node: 'TreeNode') -> 'TreeNode':
        """Detach a direct child and return it.

        Raises:
            StructuralError: If node is not a child of this node
        """
        for index, child in enumerate(self._children):
            if child is node:
                del self._children[index]
                node._parent_ref = None
                return node
        raise StructuralError(f"{node!r} is not a child of {self!r}")

    def detach(self) -> 'TreeNode':
        """Detach this node (and its subtree) from its parent.

        Raises:
            StructuralError: If the node is a root
        """
        parent = self.parent
        if parent is None:
            raise StructuralError(f"Cannot detach root {self!r}")
        return parent.remove_child(self)

    def __getstate__(self) -> Dict[str, Any]:
        """State for pickle and deepcopy; the weak parent link is not part of it.

        A copied or unpickled node is a root unless it is restored as the
        child of a copied parent, which relinks it in ``__setstate__``.
        """
        state = self.__dict__.copy()
        state['_parent_ref'] = None
        return state

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self.__dict__.update(state)
        self._children = list(self._children)
        for child in self._children:
            # Children still owned elsewhere (shallow copies) keep their parent
            if child.parent is None:
                child._parent_ref = weakref.ref(self)

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}(id={self._id!r})"

    def __eq__(self, other: object) -> bool:
        """Nodes are equal if they have the same identifier."""
        if not isinstance(other, TreeNode):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        """Hash based on identifier for use in sets and dicts."""
        return hash(self._id)
