"""LexiTree - typed entity trees for linguistic documents.

LexiTree models a document as a tree of typed entities (documents,
sentences, words, ...). Each entity carries a bag of features, terminal
entities are tracked in order by a registry held at the tree root, and
features and derived values are reachable with attribute-style access.

    from lexitree import Sentence, Word

    sentence = Sentence()
    sentence.add([Word("The"), Word("cat"), Word("sat")])
    [w.value for w in sentence.words()]

Thread safety: trees and registries are plain mutable objects with no
locking. Serialize structural edits externally or keep one tree per worker.
"""

__version__ = "0.1.0"

from .errors import (
    LexiTreeError,
    ConstructionError,
    StructuralError,
    FeatureError,
    ResolutionError,
    UnknownAttributeError,
    UnsupportedOperationError,
    ArityError,
    CapabilityMismatchError,
)
from ._common.config import (
    ANY,
    TraversalConfig,
    TraversalStrategy,
    DataRequirement,
    FilterConfig,
    DepthConfig,
    ResolutionConfig,
)
from .entities import (
    FeatureStore,
    Registry,
    Entity,
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
    Operation,
    OperationRegistry,
    DEFAULT_OPERATIONS,
    Resolution,
    ResolutionKind,
    Resolver,
    resolve,
    Builder,
)
from .planning import ExecutionPlan
from .api import (
    traverse_tree,
    collect_tree_data,
    count_entities,
    find_entities,
    get_tree_paths,
    get_leaf_entities,
    get_tree_stats,
)

__all__ = [
    "__version__",
    "LexiTreeError",
    "ConstructionError",
    "StructuralError",
    "FeatureError",
    "ResolutionError",
    "UnknownAttributeError",
    "UnsupportedOperationError",
    "ArityError",
    "CapabilityMismatchError",
    "ANY",
    "TraversalConfig",
    "TraversalStrategy",
    "DataRequirement",
    "FilterConfig",
    "DepthConfig",
    "ResolutionConfig",
    "ExecutionPlan",
    "traverse_tree",
    "collect_tree_data",
    "count_entities",
    "find_entities",
    "get_tree_paths",
    "get_leaf_entities",
    "get_tree_stats",
    "FeatureStore",
    "Registry",
    "Entity",
    "Collection",
    "Document",
    "Section",
    "Zone",
    "Title",
    "Paragraph",
    "Sentence",
    "Fragment",
    "Phrase",
    "Group",
    "Token",
    "Word",
    "Number",
    "Punctuation",
    "Symbol",
    "Enclitic",
    "Url",
    "Email",
    "Unknown",
    "EntityKind",
    "KindRegistry",
    "DEFAULT_KINDS",
    "compare_kinds",
    "Operation",
    "OperationRegistry",
    "DEFAULT_OPERATIONS",
    "Resolution",
    "ResolutionKind",
    "Resolver",
    "resolve",
    "Builder",
]
