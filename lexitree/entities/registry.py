"""Root-scoped index of the entities in a tree.

A Registry belongs to the root entity of a tree. It keeps:

- the ordered leaf index: every terminal entity attached under the root,
  in registration order, each exactly once;
- the id index: every entity in the tree, used to reject
  id collisions and to answer ``contains_id``/``contains_type``.

Registration is root-local and migrates with subtrees: detaching a
subtree removes its entities from the old root's registry, and attaching
a subtree merges its entities (leaves in document order) into the new
root's registry. Entries are appended, never reordered: a leaf keeps the
position it was given on registration until it leaves the registry, so
positions may have gaps after removals.
"""

import itertools
import weakref
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional

import structlog

from ..errors import ConstructionError

logger = structlog.get_logger()


class Registry:
    """Ordered leaf index and id index for one tree."""

    def __init__(self, owner):
        """Create the registry of ``owner`` and index its current subtree.

        Args:
            owner: Root entity of the tree
        """
        self._owner_ref = weakref.ref(owner)
        self._leaves: Dict[Hashable, Any] = {}
        self._ids: Dict[Hashable, Any] = {}
        self._positions: Dict[Hashable, int] = {}
        self._next_position = itertools.count()
        self.absorb(owner)

    @property
    def owner(self):
        """Root entity holding this registry (weakly referenced)."""
        return self._owner_ref()

    def _lookup(self, entity_id: Hashable) -> Optional[Any]:
        owner = self.owner
        if owner is not None and owner.id == entity_id:
            return owner
        return self._ids.get(entity_id)

    # Registration

    def register(self, entity) -> None:
        """Append a leaf to the leaf index. Re-registering is a no-op.

        Raises:
            ConstructionError: If a different entity already uses the id
        """
        if entity is self.owner:
            return
        self._claim_id(entity)
        if entity.id in self._leaves:
            return
        self._leaves[entity.id] = entity
        self._positions[entity.id] = position = next(self._next_position)
        logger.debug("entity_registered", id=entity.id, type=entity.type,
                     root=self.owner.id, position=position)

    def unregister(self, entity) -> None:
        """Drop an entity from the leaf index (the id stays claimed)."""
        if self._leaves.get(entity.id) is entity:
            del self._leaves[entity.id]
            del self._positions[entity.id]

    def absorb(self, subtree_root) -> None:
        """Index every entity of a subtree; its leaves are registered in document order.

        The registry owner is never registered as a leaf.
        """
        owner = self.owner
        for node in subtree_root.iter_subtree():
            if node is owner:
                continue
            if node.is_leaf():
                self.register(node)
            else:
                self._claim_id(node)

    def discard(self, subtree_root) -> int:
        """Remove every entity of a subtree from both indexes.

        Returns:
            Number of leaves removed from the leaf index
        """
        removed = 0
        for node in subtree_root.iter_subtree():
            if self._ids.get(node.id) is node:
                del self._ids[node.id]
            if self._leaves.get(node.id) is node:
                del self._leaves[node.id]
                del self._positions[node.id]
                removed += 1
        return removed

    def check_ids(self, subtree_root, claimed: Optional[Dict[Hashable, Any]] = None) -> None:
        """Verify a subtree can join this registry without id collisions.

        Args:
            subtree_root: Root of the incoming subtree
            claimed: Ids already claimed by other incoming subtrees of the same batch

        Raises:
            ConstructionError: On the first colliding id
        """
        for node in subtree_root.iter_subtree():
            for existing in (self._lookup(node.id), (claimed or {}).get(node.id)):
                if existing is not None and existing is not node:
                    logger.debug("id_collision", id=node.id, root=self.owner.id)
                    raise ConstructionError(
                        f"Entity id {node.id!r} is already used by {existing!r} "
                        f"in the tree rooted at {self.owner!r}",
                        entity_id=node.id,
                    )
            if claimed is not None:
                claimed[node.id] = node

    def _claim_id(self, entity) -> None:
        existing = self._lookup(entity.id)
        if existing is not None and existing is not entity:
            raise ConstructionError(
                f"Entity id {entity.id!r} is already used by {existing!r}",
                entity_id=entity.id,
            )
        self._ids[entity.id] = entity

    # Queries

    def position_of(self, entity) -> Optional[int]:
        """0-based registration position of a leaf, or None if not registered.

        The position is fixed when the leaf is registered; removing other
        leaves does not shift it.
        """
        if self._leaves.get(entity.id) is not entity:
            return None
        return self._positions[entity.id]

    def position_from_end_of(self, entity) -> Optional[int]:
        """Number of registered leaves that were registered after ``entity``."""
        position = self.position_of(entity)
        if position is None:
            return None
        return sum(1 for other in self._positions.values() if other > position)

    def frequency_of(self, predicate: Callable[[Any], bool]) -> int:
        """Count registered leaves satisfying ``predicate``."""
        return sum(1 for leaf in self._leaves.values() if predicate(leaf))

    def frequency_of_value(self, value: str) -> int:
        """Count registered leaves whose value matches, ignoring case."""
        wanted = value.lower()
        return self.frequency_of(lambda leaf: leaf.value.lower() == wanted)

    def leaves(self) -> List[Any]:
        return list(self._leaves.values())

    def get(self, entity_id: Hashable) -> Optional[Any]:
        """Return the entity with ``entity_id`` anywhere in the tree."""
        return self._lookup(entity_id)

    def contains_id(self, entity_id: Hashable) -> bool:
        return self._lookup(entity_id) is not None

    def contains_type(self, entity_type: str) -> bool:
        return bool(self.entities_of_type(entity_type))

    def entities_of_type(self, entity_type: str) -> List[Any]:
        owner = self.owner
        entities = ([owner] if owner is not None else []) + list(self._ids.values())
        return [entity for entity in entities if entity.type == entity_type]

    def __len__(self) -> int:
        return len(self._leaves)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._leaves.values()))

    def __contains__(self, entity: object) -> bool:
        entity_id = getattr(entity, 'id', None)
        return self._leaves.get(entity_id) is entity

    def __repr__(self) -> str:
        return f"Registry(owner={self.owner!r}, leaves={len(self._leaves)}, entities={len(self._ids) + 1})"
