"""Core abstractions for LexiTree.

This package contains the tree primitive and the machinery that walks it:
adapters, traversers and collectors.
"""

from .node import TreeNode
from .adapter import TreeAdapter, EntityAdapter
from .traverser import (
    TreeTraverser,
    BreadthFirstTraverser,
    DepthFirstPreOrderTraverser,
    DepthFirstPostOrderTraverser,
    LevelOrderTraverser,
    TRAVERSERS,
    create_traverser,
    parse_strategy,
)
from .collector import (
    DataCollector,
    IdentifierCollector,
    FeatureCollector,
    FullNodeCollector,
    ChildCountCollector,
    PathCollector,
    SumCollector,
    CustomCollector,
)

__all__ = [
    "TreeNode",
    "TreeAdapter",
    "EntityAdapter",
    "TreeTraverser",
    "BreadthFirstTraverser",
    "DepthFirstPreOrderTraverser",
    "DepthFirstPostOrderTraverser",
    "LevelOrderTraverser",
    "TRAVERSERS",
    "create_traverser",
    "parse_strategy",
    "DataCollector",
    "IdentifierCollector",
    "FeatureCollector",
    "FullNodeCollector",
    "ChildCountCollector",
    "PathCollector",
    "SumCollector",
    "CustomCollector",
]
