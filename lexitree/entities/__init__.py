"""Entity model for LexiTree.

Entities are typed tree nodes with a feature store and a root-scoped
registry of terminal entities.
"""

from .features import FeatureStore
from .registry import Registry
from .entity import Entity, STRUCTURAL_FIELDS, type_tag
from .kinds import (
    Collection,
    Document,
    Section,
    Zone,
    Title,
    Paragraph,
    Sentence,
    Fragment,
    Phrase,
    Group,
    Token,
    Word,
    Number,
    Punctuation,
    Symbol,
    Enclitic,
    Url,
    Email,
    Unknown,
    EntityKind,
    KindRegistry,
    DEFAULT_KINDS,
    compare_kinds,
)
from .operations import Operation, OperationRegistry, DEFAULT_OPERATIONS
from .resolution import (
    Resolution,
    ResolutionKind,
    MagicRegistry,
    Resolver,
    DEFAULT_RESOLVER,
    resolve,
)
from .builder import Builder

__all__ = [
    'FeatureStore',
    'Registry',
    'Entity',
    'STRUCTURAL_FIELDS',
    'type_tag',
    'Collection',
    'Document',
    'Section',
    'Zone',
    'Title',
    'Paragraph',
    'Sentence',
    'Fragment',
    'Phrase',
    'Group',
    'Token',
    'Word',
    'Number',
    'Punctuation',
    'Symbol',
    'Enclitic',
    'Url',
    'Email',
    'Unknown',
    'EntityKind',
    'KindRegistry',
    'DEFAULT_KINDS',
    'compare_kinds',
    'Operation',
    'OperationRegistry',
    'DEFAULT_OPERATIONS',
    'Resolution',
    'ResolutionKind',
    'MagicRegistry',
    'Resolver',
    'DEFAULT_RESOLVER',
    'resolve',
    'Builder',
]
