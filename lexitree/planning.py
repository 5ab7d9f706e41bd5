"""Execution planning for LexiTree.

The ExecutionPlan validates a TraversalConfig and assembles the traverser
and collector that carry it out.
"""

from typing import Iterator, Tuple, Any, Dict, Optional

from .core.node import TreeNode
from .core.adapter import TreeAdapter, EntityAdapter
from .core.traverser import TreeTraverser, create_traverser
from .core.collector import (
    DataCollector,
    IdentifierCollector,
    FeatureCollector,
    FullNodeCollector,
    ChildCountCollector,
    PathCollector,
)
from ._common.config import TraversalConfig, DataRequirement
from .errors import CapabilityMismatchError


class ExecutionPlan:
    """Validated execution plan for a query over an entity tree.

    A plan can be executed any number of times; each execution is an
    independent lazy sequence.
    """

    def __init__(self, config: TraversalConfig, adapter: Optional[TreeAdapter] = None):
        """Create and validate an execution plan.

        Args:
            config: Traversal configuration
            adapter: Tree adapter (defaults to EntityAdapter)

        Raises:
            CapabilityMismatchError: If the configuration is invalid
        """
        self.config = config
        self.adapter = adapter or EntityAdapter()

        config_errors = config.validate()
        if config_errors:
            raise CapabilityMismatchError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.traverser = self._select_traverser()
        self.collector = self._select_collector()

    def _select_traverser(self) -> TreeTraverser:
        return create_traverser(self.config.strategy, self.adapter)

    def _select_collector(self) -> DataCollector:
        if self.config.data_requirements == DataRequirement.CUSTOM:
            return self.config.custom_collector

        collector_map = {
            DataRequirement.IDENTIFIER_ONLY: IdentifierCollector,
            DataRequirement.FEATURES: FeatureCollector,
            DataRequirement.FULL_NODE: FullNodeCollector,
            DataRequirement.CHILDREN_COUNT: ChildCountCollector,
            DataRequirement.PATH: PathCollector,
        }

        collector_class = collector_map[self.config.data_requirements]
        return collector_class(self.adapter)

    def execute(self, root: TreeNode) -> Iterator[Tuple[TreeNode, Any, int]]:
        """Execute the plan from ``root``.

        Args:
            root: Entity to start from (depth 0)

        Yields:
            Tuples of (node, collected_data, depth)
        """
        filter_config = self.config.filter
        for node, depth in self.traverser.traverse(
            root,
            depth=self.config.depth,
            explore=filter_config.should_explore_children,
        ):
            if depth == 0 and not self.config.include_root:
                continue
            if not filter_config.should_include(node):
                continue
            yield (node, self.collector.collect(node, depth), depth)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of execution plan, for debugging and logging."""
        return {
            'strategy': self.config.strategy.value,
            'data_requirements': self.config.data_requirements.value,
            'max_depth': self.config.depth.max_depth,
            'min_depth': self.config.depth.min_depth,
            'include_root': self.config.include_root,
            'adapter': self.adapter.__class__.__name__,
            'traverser': self.traverser.__class__.__name__,
            'collector': self.collector.__class__.__name__,
        }
