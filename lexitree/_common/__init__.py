"""Common components shared across LexiTree.

This internal package contains configuration and pure data structures.
It must NEVER import from ``lexitree.entities`` to avoid circular
dependencies.
"""

from .config import (
    ANY,
    TraversalConfig,
    TraversalStrategy,
    DataRequirement,
    FilterConfig,
    DepthConfig,
    ResolutionConfig,
    DEFAULT_RESOLUTION,
    DEFAULT_CATEGORIES,
)

__all__ = [
    'ANY',
    'TraversalConfig',
    'TraversalStrategy',
    'DataRequirement',
    'FilterConfig',
    'DepthConfig',
    'ResolutionConfig',
    'DEFAULT_RESOLUTION',
    'DEFAULT_CATEGORIES',
]
