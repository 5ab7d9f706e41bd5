"""Test fixtures for LexiTree consumers.

These fixtures give tests a stable view of registry state without
reaching into private attributes.
"""

from typing import Any, Dict, Hashable, List

from ..entities.entity import Entity
from ..entities.kinds import Sentence, Word


class RegistryTestHelper:
    """Public test fixture for registry verification.

    Example:
        helper = RegistryTestHelper(sentence)
        assert helper.leaf_values() == ["The", "cat", "sat"]
        helper.assert_consistent()
    """

    def __init__(self, entity: Entity):
        """Initialize with any entity of the tree to inspect.

        Args:
            entity: Entity whose root registry is inspected
        """
        self._entity = entity

    @property
    def registry(self):
        return self._entity.registry

    def leaf_ids(self) -> List[Hashable]:
        return [leaf.id for leaf in self.registry.leaves()]

    def leaf_values(self) -> List[str]:
        return [leaf.value for leaf in self.registry.leaves()]

    def get_summary(self) -> Dict[str, Any]:
        """Return high-level registry state.

        Returns:
            Dictionary containing:
            - root_id: Id of the registry owner
            - leaf_count: Registered terminal entities
            - tree_leaf_count: Terminal entities actually in the tree
            - entity_count: Entities in the tree, root included
        """
        root = self._entity.root
        nodes = list(root.iter_subtree())
        return {
            'root_id': root.id,
            'leaf_count': len(self.registry),
            'tree_leaf_count': sum(1 for node in nodes if node is not root and node.is_leaf()),
            'entity_count': len(nodes),
        }

    def assert_consistent(self) -> None:
        """Check that registered leaves are exactly the tree's leaves, once each.

        Raises:
            AssertionError: Describing the first inconsistency found
        """
        root = self._entity.root
        registered = self.registry.leaves()
        tree_leaves = [node for node in root.iter_subtree()
                       if node is not root and node.is_leaf()]

        registered_ids = [id(leaf) for leaf in registered]
        assert len(registered_ids) == len(set(registered_ids)), "a leaf is registered twice"
        assert set(registered_ids) == {id(leaf) for leaf in tree_leaves}, (
            f"registry {self.leaf_ids()} does not match tree leaves "
            f"{[leaf.id for leaf in tree_leaves]}"
        )
        for node in root.iter_subtree():
            if node.has_children():
                assert node.value == '', f"{node!r} has children and a value"


def sentence_of(*words: str) -> Sentence:
    """Build a Sentence holding one Word per string."""
    sentence = Sentence()
    sentence.add([Word(word) for word in words])
    return sentence
