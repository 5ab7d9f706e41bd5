"""High-level API for LexiTree.

This module provides simple, functional interfaces for common queries over
entity trees. They wrap TraversalConfig/ExecutionPlan for the common cases;
Entity's query methods are built on top of them.
"""

from typing import Iterator, Optional, Callable, Any, Union, Tuple, List, Dict, Iterable

from .core.node import TreeNode
from .core.adapter import TreeAdapter
from .core.traverser import parse_strategy
from ._common.config import (
    TraversalConfig,
    TraversalStrategy,
    DataRequirement,
    DepthConfig,
    FilterConfig,
)
from .planning import ExecutionPlan


def build_config(
    strategy: Union[TraversalStrategy, str] = TraversalStrategy.DEPTH_FIRST_PRE,
    max_depth: Optional[int] = None,
    min_depth: int = 0,
    types: Optional[Iterable[str]] = None,
    features: Optional[Dict[str, Any]] = None,
    category: Optional[str] = None,
    category_feature: str = "category",
    include_filter: Optional[Callable[[TreeNode], bool]] = None,
    exclude_filter: Optional[Callable[[TreeNode], bool]] = None,
    prune_on_exclude: bool = False,
    include_root: bool = True,
    data_requirement: DataRequirement = DataRequirement.FULL_NODE,
    custom_collector: Optional[Any] = None,
) -> TraversalConfig:
    """Build a TraversalConfig from keyword options."""
    return TraversalConfig(
        strategy=parse_strategy(strategy),
        depth=DepthConfig(min_depth=min_depth, max_depth=max_depth),
        filter=FilterConfig(
            types=set(types) if types is not None else None,
            features=dict(features or {}),
            category=category,
            category_feature=category_feature,
            include_filter=include_filter,
            exclude_filter=exclude_filter,
            prune_on_exclude=prune_on_exclude,
        ),
        data_requirements=data_requirement,
        custom_collector=custom_collector,
        include_root=include_root,
    )


def collect_tree_data(
    root: TreeNode,
    data_requirement: DataRequirement = DataRequirement.FULL_NODE,
    adapter: Optional[TreeAdapter] = None,
    **kwargs
) -> Iterator[Tuple[TreeNode, Any]]:
    """Traverse the tree and collect the requested data.

    Args:
        root: Starting entity
        data_requirement: What data to collect
        adapter: Tree adapter (defaults to EntityAdapter)
        **kwargs: Options accepted by build_config

    Yields:
        Tuples of (entity, collected_data)

    Example:
        >>> for entity, path in collect_tree_data(doc, DataRequirement.PATH, types=["word"]):
        ...     print(entity.value, path)
    """
    config = build_config(data_requirement=data_requirement, **kwargs)
    plan = ExecutionPlan(config, adapter)
    for node, data, _ in plan.execute(root):
        yield (node, data)


def traverse_tree(
    root: TreeNode,
    adapter: Optional[TreeAdapter] = None,
    **kwargs
) -> Iterator[TreeNode]:
    """Lazily yield the entities under ``root`` that match the options.

    The default is a depth-first pre-order (document order) walk that
    includes the root itself.

    Example:
        >>> for word in traverse_tree(sentence, types=["word"]):
        ...     print(word.value)
    """
    for node, _ in collect_tree_data(root, DataRequirement.FULL_NODE, adapter, **kwargs):
        yield node


def count_entities(root: TreeNode, adapter: Optional[TreeAdapter] = None, **kwargs) -> int:
    """Count entities under ``root`` that match the options."""
    return sum(1 for _ in traverse_tree(root, adapter, **kwargs))


def find_entities(
    root: TreeNode,
    predicate: Callable[[TreeNode], bool],
    adapter: Optional[TreeAdapter] = None,
    **kwargs
) -> Iterator[TreeNode]:
    """Find entities that match a predicate.

    Example:
        >>> nouns = list(find_entities(doc, lambda e: e.get("category") == "noun"))
    """
    kwargs['include_filter'] = predicate
    yield from traverse_tree(root, adapter, **kwargs)


def get_tree_paths(root: TreeNode, adapter: Optional[TreeAdapter] = None, **kwargs) -> Iterator[List[Any]]:
    """Yield the id path from the tree root to each matching entity."""
    for _, path in collect_tree_data(root, DataRequirement.PATH, adapter, **kwargs):
        yield path


def get_leaf_entities(root: TreeNode, adapter: Optional[TreeAdapter] = None, **kwargs) -> Iterator[TreeNode]:
    """Yield terminal entities in document order."""
    for node in traverse_tree(root, adapter, **kwargs):
        if node.is_leaf():
            yield node


def get_tree_stats(root: TreeNode, adapter: Optional[TreeAdapter] = None, **kwargs) -> Dict[str, Any]:
    """Get statistics about a tree.

    Returns:
        Dictionary with total/leaf/internal counts, max depth, per-depth
        counts and per-type counts

    Example:
        >>> stats = get_tree_stats(doc)
        >>> stats['types']['word']
        12
    """
    stats = {
        'total_nodes': 0,
        'leaf_nodes': 0,
        'max_depth': 0,
        'depths': {},
        'types': {}
    }

    config = build_config(data_requirement=DataRequirement.IDENTIFIER_ONLY, **kwargs)
    for node, _, depth in ExecutionPlan(config, adapter).execute(root):
        stats['total_nodes'] += 1

        if node.is_leaf():
            stats['leaf_nodes'] += 1

        stats['max_depth'] = max(stats['max_depth'], depth)
        stats['depths'][depth] = stats['depths'].get(depth, 0) + 1

        node_type = getattr(node, 'type', None)
        if node_type is not None:
            stats['types'][node_type] = stats['types'].get(node_type, 0) + 1

    stats['internal_nodes'] = stats['total_nodes'] - stats['leaf_nodes']
    stats['average_branching'] = (
        (stats['total_nodes'] - 1) / stats['internal_nodes']
        if stats['internal_nodes'] > 0 else 0
    )

    return stats

