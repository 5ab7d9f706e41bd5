"""Construction of entities by kind tag."""

from typing import Any, Dict, Hashable, Iterable, Optional

import structlog

from .entity import Entity
from .kinds import KindRegistry, DEFAULT_KINDS

logger = structlog.get_logger()


class Builder:
    """Builds entities from type tags using an explicit KindRegistry.

    Example:
        >>> builder = Builder()
        >>> sentence = builder.build_tree("sentence", [
        ...     builder.build("word", "The"),
        ...     builder.build("word", "cat"),
        ... ])
    """

    def __init__(self, kinds: Optional[KindRegistry] = None):
        self.kinds = kinds or DEFAULT_KINDS

    def build(self,
              tag: str,
              value: str = '',
              id: Optional[Hashable] = None,
              features: Optional[Dict[str, Any]] = None) -> Entity:
        """Construct one entity of kind ``tag``.

        Raises:
            ConstructionError: If the kind is unknown or the value invalid
        """
        kind = self.kinds.get(tag)
        return kind.cls(value, id=id, features=features)

    def build_tree(self,
                   tag: str,
                   children: Iterable[Entity],
                   id: Optional[Hashable] = None,
                   features: Optional[Dict[str, Any]] = None) -> Entity:
        """Construct an entity of kind ``tag`` holding ``children``."""
        parent = self.build(tag, id=id, features=features)
        parent.add(list(children))
        logger.debug("tree_built", type=tag, id=parent.id, children=len(parent.children))
        return parent
