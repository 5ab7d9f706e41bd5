"""The Entity node: a typed linguistic unit in a document tree.

An Entity is a TreeNode that adds an immutable ``type`` tag, a private
FeatureStore and membership in its root's Registry. Attribute-style access
to anything that is not a declared attribute falls back, in order, to the
entity's features and then to derived ("magic") accessors; see
``lexitree.entities.resolution``.

Entities are identified by ``id``: two entities are the same entity iff
their ids match (``==``, ``is_same``). Comparing content is a separate
operation, ``structurally_equal``.
"""

import itertools
import re
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional, Union

import structlog

from ..core.node import TreeNode
from ..errors import ArityError, ConstructionError, FeatureError, StructuralError
from .. import api
from .._common.config import ANY
from .features import FeatureStore
from .registry import Registry

logger = structlog.get_logger()

# Process-wide source of generated ids; never reused within a process
_id_sequence = itertools.count(1)

STRUCTURAL_FIELDS = ('id', 'value', 'type', 'parent', 'children')


def type_tag(cls: type) -> str:
    """Return the type tag of an entity class: its own TYPE, or its snake_cased name."""
    tag = cls.__dict__.get('TYPE')
    if tag:
        return tag
    return re.sub(r'(?<!^)(?=[A-Z])', '_', cls.__name__).lower()


class Entity(TreeNode):
    """A node representing a linguistic unit.

    Subclasses only need to exist: the type tag is derived from the class
    name (``Word`` -> ``"word"``) unless the class sets ``TYPE``. ``RANK``
    orders kinds by size (see ``lexitree.entities.kinds``).
    """

    RANK = 0

    def __init__(self,
                 value: str = '',
                 id: Optional[Hashable] = None,
                 features: Optional[Dict[str, Any]] = None):
        """Initialize the entity with its value and (optionally) an id.

        Args:
            value: Surface text for terminal entities
            id: Unique identifier; generated when omitted
            features: Initial features

        Raises:
            ConstructionError: If value is not a string
        """
        if not isinstance(value, str):
            raise ConstructionError(
                f"{type(self).__name__} value must be a string, got {type(value).__name__}",
                entity_id=id,
            )
        if id is None:
            id = next(_id_sequence)
        super().__init__(value, id)
        self._type = type_tag(type(self))
        self._features = FeatureStore(features)
        self._registry: Optional[Registry] = None

    # Structural fields

    @property
    def type(self) -> str:
        return self._type

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"value must be a string, got {type(value).__name__}")
        if value and self._children:
            raise StructuralError(f"{self!r} has children and cannot hold a value")
        self._value = value

    @property
    def features(self) -> FeatureStore:
        return self._features

    @property
    def registry(self) -> Registry:
        """The registry of this entity's tree, held by the root."""
        root = self.root
        if root._registry is None:
            root._registry = Registry(root)
        return root._registry

    # Features

    def get(self, name: str, default: Any = None) -> Any:
        return self._features.get(name, default)

    def set(self, name: str, value: Any) -> 'Entity':
        self._features.set(name, value)
        return self

    def has(self, name: str) -> bool:
        return self._features.has(name)

    def unset(self, name: str) -> Any:
        return self._features.unset(name)

    # Structural composition

    def add(self, entities: Union['Entity', Iterable['Entity']]) -> Optional['Entity']:
        """Add one entity or a sequence of entities as the last children.

        Entities that already have a parent are moved. Every terminal
        entity of each added subtree is registered in the root registry,
        and the receiver's value is cleared once it has children.

        Returns:
            The first entity added, or None for an empty sequence

        Raises:
            StructuralError: If an entity is the receiver or one of its
                ancestors, appears twice, or is not an Entity
            ConstructionError: If an incoming id is already used by a
                different entity in the receiving tree
        """
        if isinstance(entities, TreeNode):
            batch = [entities]
        elif isinstance(entities, (str, bytes)) or not isinstance(entities, Iterable):
            raise StructuralError(f"Only entities can be added, got {type(entities).__name__}")
        else:
            batch = list(entities)
        if not batch:
            return None

        self._check_additions(batch)

        for entity in batch:
            if entity.parent is not None:
                entity.detach()
            registry = self.registry
            was_leaf = self.is_leaf()
            super().append_child(entity)
            entity._registry = None
            if was_leaf:
                registry.unregister(self)
            registry.absorb(entity)
            logger.debug("entity_added", id=entity.id, type=entity.type,
                         parent=self.id, root=registry.owner.id)

        self._value = ''
        return batch[0]

    def append_child(self, node: TreeNode) -> TreeNode:
        """Same as ``add(node)``: registration and value clearing always apply."""
        return self.add(node)

    def _check_additions(self, batch: List['Entity']) -> None:
        registry = self.registry
        root = self.root
        seen = set()
        claimed: Dict[Hashable, Entity] = {}
        for entity in batch:
            if not isinstance(entity, Entity):
                raise StructuralError(f"Only entities can be added, got {type(entity).__name__}")
            if entity is self or entity.is_ancestor_of(self):
                logger.debug("cycle_rejected", id=entity.id, parent=self.id)
                raise StructuralError(f"Cannot add {entity!r} under itself or its descendant {self!r}")
            if id(entity) in seen:
                raise StructuralError(f"{entity!r} appears more than once in the same add")
            seen.add(id(entity))
            if entity.root is not root:
                registry.check_ids(entity, claimed)

    def remove_child(self, node: TreeNode) -> TreeNode:
        """Detach a direct child; its subtree leaves this tree's registry.

        Raises:
            StructuralError: If node is not a child of this entity
        """
        registry = self.registry
        super().remove_child(node)
        removed = registry.discard(node)
        if self.is_leaf() and self.parent is not None:
            registry.register(self)
        node._registry = None
        logger.debug("subtree_detached", id=node.id, parent=self.id,
                     root=registry.owner.id, leaves=removed)
        return node

    def remove(self, child: 'Entity') -> 'Entity':
        return self.remove_child(child)

    def copy(self) -> 'Entity':
        """Deep-copy this subtree with fresh ids and independent feature stores."""
        duplicate = type(self)(self._value if self.is_leaf() else '',
                               features=dict(self._features.items()))
        if self._children:
            duplicate.add([child.copy() for child in self._children])
        return duplicate

    def copy_into(self, target: 'Entity') -> 'Entity':
        """Add a copy of this subtree under ``target`` and return the copy."""
        return target.add(self.copy())

    # Identity and comparison

    def is_same(self, other: object) -> bool:
        return isinstance(other, TreeNode) and self._id == other._id

    def structurally_equal(self, other: object) -> bool:
        """Same type, value, features and structurally equal children; ids ignored."""
        if not isinstance(other, Entity):
            return False
        if (self._type, self._value) != (other._type, other._value):
            return False
        if self._features != other._features:
            return False
        if len(self._children) != len(other._children):
            return False
        return all(mine.structurally_equal(theirs)
                   for mine, theirs in zip(self._children, other._children))

    def compare_with(self, other: Union['Entity', type, str]) -> int:
        """Compare kind sizes: 1 if this kind is bigger, -1 if smaller, 0 if equal."""
        other_rank = self._rank_of(other)
        return (self.RANK > other_rank) - (self.RANK < other_rank)

    def is_bigger_than(self, other: Union['Entity', type, str]) -> bool:
        return self.compare_with(other) > 0

    def is_smaller_than(self, other: Union['Entity', type, str]) -> bool:
        return self.compare_with(other) < 0

    @staticmethod
    def _rank_of(other: Union['Entity', type, str]) -> int:
        if isinstance(other, str):
            from .kinds import DEFAULT_KINDS
            return DEFAULT_KINDS.get(other).rank
        return other.RANK

    # Registry-backed counts

    def register(self, entity: 'Entity') -> None:
        """Register ``entity`` as a leaf in this tree's registry."""
        self.registry.register(entity)

    def position(self) -> Optional[int]:
        """Position among the leaves of the root registry, or None."""
        return self.registry.position_of(self)

    def position_from_end(self) -> Optional[int]:
        return self.registry.position_from_end_of(self)

    def frequency(self) -> int:
        """How many leaves of the whole tree share this entity's value."""
        if self._children:
            return 0
        if self.parent is None:
            return 1
        return self.registry.frequency_of_value(self._value)

    def frequency_of(self, value: str) -> int:
        return self.registry.frequency_of_value(value)

    def frequency_in(self, entity_type: str) -> Optional[int]:
        """Occurrences of this value among the leaves of the nearest ``entity_type`` ancestor."""
        ancestor = self.ancestor_with_type(entity_type)
        if ancestor is None:
            return None
        wanted = self._value.lower()
        return sum(1 for leaf in api.get_leaf_entities(ancestor)
                   if leaf.value.lower() == wanted)

    def frequency_in_parent(self) -> Optional[int]:
        """Siblings (self included) whose value matches this one, ignoring case."""
        parent = self.parent
        if parent is None:
            return None
        wanted = self._value.lower()
        return sum(1 for child in parent.children if child.value.lower() == wanted)

    def position_in_parent(self) -> Optional[int]:
        parent = self.parent
        if parent is None:
            return None
        for position, child in enumerate(parent.children):
            if child is self:
                return position
        return None

    def contains_id(self, entity_id: Hashable) -> bool:
        return self.registry.contains_id(entity_id)

    def contains_type(self, entity_type: str) -> bool:
        return self.registry.contains_type(entity_type)

    # Traversal and queries

    def each_entity(self, *types: str, predicate=None, **features) -> Iterator['Entity']:
        """Lazily yield this entity and its descendants in document order.

        Args:
            *types: Only yield entities of these type tags
            predicate: Only yield entities for which predicate(entity) is true
            **features: Only yield entities whose features match (ANY = present)
        """
        return api.traverse_tree(self,
                                 types=types or None,
                                 features=features,
                                 include_filter=predicate)

    def entities_with_type(self, *types: str) -> List['Entity']:
        return list(self.each_entity(*types))

    def entities_with_feature(self, name: str, value: Any = ANY) -> List['Entity']:
        return list(self.each_entity(**{name: value}))

    def entities_with_category(self, category: str, resolver=None) -> List['Entity']:
        """Entities whose category feature equals ``category``.

        The feature name comes from the resolver's configuration, so this
        agrees with ``is_<category>`` accessors of the same resolver.
        """
        if resolver is None:
            from .resolution import DEFAULT_RESOLVER
            resolver = DEFAULT_RESOLVER
        return list(api.traverse_tree(self, category=category,
                                      category_feature=resolver.config.category_feature))

    def leaves(self) -> List['Entity']:
        return list(api.get_leaf_entities(self))

    def ancestors_with_type(self, entity_type: str) -> List['Entity']:
        """Ancestors of the given type, nearest first, self excluded."""
        return [ancestor for ancestor in self.iter_ancestors()
                if ancestor.type == entity_type]

    def ancestor_with_type(self, entity_type: str) -> Optional['Entity']:
        for ancestor in self.iter_ancestors():
            if ancestor.type == entity_type:
                return ancestor
        return None

    def num_children_with_feature(self, name: str) -> int:
        return sum(1 for child in self._children if child.has(name))

    # Checks

    def check_has(self, name: str) -> Any:
        """Return the feature value, raising FeatureError when it is missing."""
        if not self._features.has(name):
            raise FeatureError(
                f"Feature '{name}' is required but has not been set on this {self._type}.",
                feature=name,
                entity_type=self._type,
            )
        return self._features.get(name)

    def check_hasnt_children(self) -> None:
        if self._children:
            raise StructuralError(f"{self!r} must not have children")

    # Dynamic attribute resolution

    def invoke(self, name: str, *args, **kwargs) -> Any:
        """Call-style access: declared methods, structural fields, features or magic.

        Raises:
            ArityError: If a structural field or feature is given arguments
            UnsupportedOperationError: For known operations that don't apply here
            UnknownAttributeError: When nothing matches
        """
        if not name.startswith('_') and name not in STRUCTURAL_FIELDS:
            declared = getattr(type(self), name, None)
            if callable(declared):
                return getattr(self, name)(*args, **kwargs)
            if declared is not None:
                if args or kwargs:
                    raise ArityError(
                        f"'{name}' is an attribute of this {self._type} and takes no arguments.",
                        name, self._type,
                    )
                return getattr(self, name)
        from .resolution import DEFAULT_RESOLVER
        return DEFAULT_RESOLVER.invoke(self, name, *args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails; structural fields always win
        if name.startswith('_'):
            raise AttributeError(name)
        from .resolution import DEFAULT_RESOLVER
        return DEFAULT_RESOLVER.resolve(self, name).unwrap()

    def __getstate__(self) -> Dict[str, Any]:
        # The registry holds weak references; copies rebuild it lazily
        state = super().__getstate__()
        state['_registry'] = None
        return state

    def __repr__(self) -> str:
        if self._children:
            return f"{self.__class__.__name__}(id={self._id!r})"
        return f"{self.__class__.__name__}(id={self._id!r}, value={self._value!r})"
