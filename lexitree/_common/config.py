"""Configuration system for LexiTree.

This module defines how callers specify what a query over an entity tree
should visit (strategy, depth, filters), what to collect from each entity,
and how dynamic attribute resolution behaves.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Callable, Set, Any, Dict, List, Tuple


class _Any:
    """Sentinel matching any feature value (presence check only)."""

    def __repr__(self) -> str:
        return "ANY"


ANY = _Any()


class DataRequirement(Enum):
    """Specifies what data is collected from each visited entity."""
    IDENTIFIER_ONLY = "identifier"      # Just entity ids (most efficient)
    FEATURES = "features"               # Copy of the feature store
    CHILDREN_COUNT = "children_count"   # Number of immediate children
    FULL_NODE = "full"                  # The entity itself
    PATH = "path"                       # Ids from root to entity
    CUSTOM = "custom"                   # User-defined collection


class TraversalStrategy(Enum):
    """How to traverse the tree."""
    DEPTH_FIRST_PRE = "dfs_pre"     # Parent before children (document order)
    DEPTH_FIRST_POST = "dfs_post"   # Children before parent
    BREADTH_FIRST = "bfs"           # Level by level
    LEVEL_ORDER = "level"           # Grouped by level


@dataclass
class FilterConfig:
    """Configuration for filtering entities during traversal."""

    # Entity type tags to include (None = all types)
    types: Optional[Set[str]] = None

    # Feature constraints: name -> required value, or ANY for presence
    features: Dict[str, Any] = field(default_factory=dict)

    # Category shortcut, matched against ``category_feature``
    category: Optional[str] = None
    category_feature: str = "category"

    # Custom filter functions
    include_filter: Optional[Callable[[Any], bool]] = None
    exclude_filter: Optional[Callable[[Any], bool]] = None

    # Don't descend below excluded entities
    prune_on_exclude: bool = False

    def should_include(self, entity) -> bool:
        """Check if an entity passes every configured filter.

        Args:
            entity: Entity to check

        Returns:
            True if entity passes all filters
        """
        # Exclusion takes precedence
        if self.exclude_filter and self.exclude_filter(entity):
            return False

        if self.types is not None and entity.type not in self.types:
            return False

        for name, expected in self.features.items():
            if not entity.features.has(name):
                return False
            if expected is not ANY and entity.features.get(name) != expected:
                return False

        if self.category is not None:
            if entity.features.get(self.category_feature) != self.category:
                return False

        if self.include_filter:
            return bool(self.include_filter(entity))

        return True

    def should_explore_children(self, entity) -> bool:
        """Check if children of an entity should be visited.

        Args:
            entity: Entity to check

        Returns:
            True if children should be explored
        """
        if not self.prune_on_exclude:
            return True
        return not (self.exclude_filter and self.exclude_filter(entity))


@dataclass
class DepthConfig:
    """Configuration for depth-based filtering."""

    min_depth: int = 0                          # Minimum depth to yield
    max_depth: Optional[int] = None            # Maximum depth to traverse

    def should_yield(self, depth: int) -> bool:
        """Check if entities at this depth should be yielded."""
        if depth < self.min_depth:
            return False
        if self.max_depth is not None and depth > self.max_depth:
            return False
        return True

    def should_explore(self, depth: int) -> bool:
        """Check if children at this depth should be explored."""
        if self.max_depth is not None:
            return depth < self.max_depth
        return True


@dataclass
class TraversalConfig:
    """Complete configuration for a query over an entity tree.

    The ExecutionPlan validates this configuration and assembles the
    traverser and collector that satisfy it.
    """

    strategy: TraversalStrategy = TraversalStrategy.DEPTH_FIRST_PRE
    depth: DepthConfig = field(default_factory=DepthConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    data_requirements: DataRequirement = DataRequirement.FULL_NODE
    custom_collector: Optional[Any] = None
    include_root: bool = True

    @classmethod
    def of_type(cls, *types: str) -> 'TraversalConfig':
        """Create config visiting only entities of the given type tags."""
        return cls(filter=FilterConfig(types=set(types)))

    @classmethod
    def leaves_only(cls) -> 'TraversalConfig':
        """Create config visiting only terminal entities, in document order."""
        return cls(filter=FilterConfig(include_filter=lambda entity: entity.is_leaf()))

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.depth.min_depth < 0:
            errors.append("min_depth cannot be negative")

        if self.depth.max_depth is not None:
            if self.depth.max_depth < 0:
                errors.append("max_depth cannot be negative")
            if self.depth.max_depth < self.depth.min_depth:
                errors.append("max_depth cannot be less than min_depth")

        if self.filter.types is not None and not self.filter.types:
            errors.append("types filter cannot be empty")

        if self.data_requirements == DataRequirement.CUSTOM and self.custom_collector is None:
            errors.append("custom_collector required when data_requirements is CUSTOM")

        return errors


DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "adjective", "adverb", "conjunction", "determiner", "interjection",
    "noun", "number", "preposition", "pronoun", "punctuation", "symbol",
    "verb",
)


@dataclass(frozen=True)
class ResolutionConfig:
    """How attribute-style access on entities falls back.

    Attributes:
        category_feature: Feature consulted by ``is_<category>`` accessors
        categories: Category names recognised by ``is_<category>``
        suggestion_cutoff: difflib similarity cutoff for "did you mean"
        max_suggestions: Maximum number of suggestions reported
        enable_magic: Resolve derived accessors at all
    """

    category_feature: str = "category"
    categories: Tuple[str, ...] = DEFAULT_CATEGORIES
    suggestion_cutoff: float = 0.75
    max_suggestions: int = 3
    enable_magic: bool = True

    def validate(self) -> List[str]:
        """Validate configuration for consistency."""
        errors = []
        if not 0.0 <= self.suggestion_cutoff <= 1.0:
            errors.append("suggestion_cutoff must be between 0 and 1")
        if self.max_suggestions < 0:
            errors.append("max_suggestions cannot be negative")
        if not self.category_feature:
            errors.append("category_feature cannot be empty")
        return errors


DEFAULT_RESOLUTION = ResolutionConfig()
