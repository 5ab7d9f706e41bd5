"""Exception taxonomy for LexiTree.

Every failure raised by the entity tree is a subclass of LexiTreeError.
Attribute-resolution failures additionally subclass AttributeError so that
``hasattr``, ``getattr(entity, name, default)``, ``copy`` and ``pickle``
behave normally on entities.
"""

from typing import Optional, Sequence


class LexiTreeError(Exception):
    """Base class for all LexiTree errors."""
    pass


class ConstructionError(LexiTreeError):
    """Raised when an entity cannot be built or its id collides in a registry scope."""

    def __init__(self, message: str, entity_id: Optional[object] = None):
        super().__init__(message)
        self.entity_id = entity_id


class StructuralError(LexiTreeError):
    """Raised when a tree edit would break the tree (cycles, invalid detach)."""
    pass


class FeatureError(LexiTreeError):
    """Raised when an entity is required to carry a feature it does not have."""

    def __init__(self, message: str, feature: str, entity_type: Optional[str] = None):
        super().__init__(message)
        self.feature = feature
        self.entity_type = entity_type


class ResolutionError(LexiTreeError, AttributeError):
    """Base for failures of dynamic attribute resolution."""

    def __init__(self, message: str, name: str, entity_type: Optional[str] = None):
        super().__init__(message)
        self.name = name
        self.entity_type = entity_type


class UnknownAttributeError(ResolutionError):
    """No structural field, feature or derived accessor matches the name."""

    def __init__(self,
                 message: str,
                 name: str,
                 entity_type: Optional[str] = None,
                 suggestions: Sequence[str] = ()):
        super().__init__(message, name, entity_type)
        self.suggestions = tuple(suggestions)


class UnsupportedOperationError(ResolutionError):
    """The name is a known operation that does not apply to the entity's type."""
    pass


class ArityError(ResolutionError):
    """A stored feature was accessed call-style with arguments."""
    pass


class CapabilityMismatchError(LexiTreeError):
    """Raised when a traversal configuration cannot be executed."""
    pass
