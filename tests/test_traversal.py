"""Tests for traversal strategies, filters, collectors and the functional API."""

import pytest

from lexitree import (
    ANY,
    Document,
    Paragraph,
    Sentence,
    Word,
    Punctuation,
    DataRequirement,
    TraversalConfig,
    TraversalStrategy,
    ExecutionPlan,
    CapabilityMismatchError,
    traverse_tree,
    collect_tree_data,
    count_entities,
    find_entities,
    get_tree_paths,
    get_leaf_entities,
    get_tree_stats,
)
from lexitree.api import build_config
from lexitree.core import EntityAdapter, SumCollector, CustomCollector, create_traverser


@pytest.fixture
def doc():
    """doc[p1[s1[a, b]], p2[s2[c]]] with a few features set."""
    doc = Document(id="doc")
    p1, p2 = Paragraph(id="p1"), Paragraph(id="p2")
    s1, s2 = Sentence(id="s1"), Sentence(id="s2")
    s1.add([Word("a", id="a", features={"category": "noun", "count": 2}),
            Word("b", id="b", features={"category": "verb", "count": 3})])
    s2.add(Punctuation("c", id="c", features={"count": 5}))
    p1.add(s1)
    p2.add(s2)
    doc.add([p1, p2])
    return doc


def ids(entities):
    return [entity.id for entity in entities]


class TestStrategies:

    def test_default_is_document_order(self, doc):
        assert ids(traverse_tree(doc)) == ["doc", "p1", "s1", "a", "b", "p2", "s2", "c"]

    def test_post_order(self, doc):
        result = ids(traverse_tree(doc, strategy="dfs_post"))
        assert result == ["a", "b", "s1", "p1", "c", "s2", "p2", "doc"]

    def test_breadth_first(self, doc):
        result = ids(traverse_tree(doc, strategy=TraversalStrategy.BREADTH_FIRST))
        assert result == ["doc", "p1", "p2", "s1", "s2", "a", "b", "c"]

    def test_level_order(self, doc):
        assert ids(traverse_tree(doc, strategy="level")) == ids(traverse_tree(doc, strategy="bfs"))

    def test_levels(self, doc):
        traverser = create_traverser("level", EntityAdapter())
        levels = [(level, ids(nodes)) for level, nodes in traverser.levels(doc)]
        assert levels == [(0, ["doc"]), (1, ["p1", "p2"]), (2, ["s1", "s2"]), (3, ["a", "b", "c"])]

    def test_post_order_respects_depth_window(self, doc):
        result = ids(traverse_tree(doc, strategy="dfs_post", min_depth=1, max_depth=2))
        assert result == ["s1", "p1", "s2", "p2"]

    def test_unknown_strategy(self, doc):
        with pytest.raises(ValueError):
            list(traverse_tree(doc, strategy="sideways"))
        with pytest.raises(ValueError):
            create_traverser("sideways", EntityAdapter())

    def test_traversal_is_lazy_and_restartable(self, doc):
        walk = doc.each_entity("word")
        assert next(walk).id == "a"
        assert ids(doc.each_entity("word")) == ["a", "b"]
        assert next(walk).id == "b"


class TestDepthAndFilters:

    def test_max_depth(self, doc):
        assert ids(traverse_tree(doc, max_depth=1)) == ["doc", "p1", "p2"]

    def test_min_depth(self, doc):
        assert ids(traverse_tree(doc, min_depth=3)) == ["a", "b", "c"]

    def test_include_root(self, doc):
        assert ids(traverse_tree(doc, max_depth=1, include_root=False)) == ["p1", "p2"]

    def test_type_filter(self, doc):
        assert ids(traverse_tree(doc, types=["sentence", "punctuation"])) == ["s1", "s2", "c"]

    def test_feature_filter(self, doc):
        assert ids(traverse_tree(doc, features={"category": ANY})) == ["a", "b"]
        assert ids(traverse_tree(doc, features={"category": "verb"})) == ["b"]

    def test_category_filter(self, doc):
        assert ids(traverse_tree(doc, category="noun")) == ["a"]

    def test_exclude_without_prune_still_visits_children(self, doc):
        result = ids(traverse_tree(doc, exclude_filter=lambda e: e.id == "p1"))
        assert "p1" not in result
        assert "a" in result

    def test_exclude_with_prune(self, doc):
        result = ids(traverse_tree(doc, exclude_filter=lambda e: e.id == "p1",
                                   prune_on_exclude=True))
        assert result == ["doc", "p2", "s2", "c"]

    def test_find_entities(self, doc):
        found = find_entities(doc, lambda e: e.get("count", 0) > 2)
        assert ids(found) == ["b", "c"]

    def test_count_entities(self, doc):
        assert count_entities(doc) == 8
        assert count_entities(doc, types=["word"]) == 2


class TestEntityQueries:

    def test_each_entity_by_type_and_feature(self, doc):
        assert ids(doc.each_entity("word", category="noun")) == ["a"]
        assert ids(doc.each_entity(predicate=lambda e: e.value == "c")) == ["c"]

    def test_each_entity_includes_receiver_when_it_matches(self, doc):
        sentence = doc.children[0].children[0]
        assert ids(sentence.each_entity("sentence")) == ["s1"]

    def test_entities_with(self, doc):
        assert ids(doc.entities_with_type("word", "punctuation")) == ["a", "b", "c"]
        assert ids(doc.entities_with_feature("count")) == ["a", "b", "c"]
        assert ids(doc.entities_with_feature("count", 3)) == ["b"]
        assert ids(doc.entities_with_category("verb")) == ["b"]

    def test_leaves(self, doc):
        assert ids(doc.leaves()) == ["a", "b", "c"]
        assert ids(get_leaf_entities(doc)) == ["a", "b", "c"]

    def test_ancestors(self, doc):
        a = doc.children[0].children[0].children[0]
        assert ids(a.ancestors_with_type("paragraph")) == ["p1"]
        assert a.ancestor_with_type("document") is doc
        assert a.ancestor_with_type("word") is None
        assert a.ancestors_with_type("section") == []


class TestCollectors:

    def test_identifier(self, doc):
        data = [d for _, d in collect_tree_data(doc, DataRequirement.IDENTIFIER_ONLY, max_depth=1)]
        assert data == ["doc", "p1", "p2"]

    def test_features(self, doc):
        data = dict((e.id, d) for e, d in collect_tree_data(doc, DataRequirement.FEATURES,
                                                            types=["word"]))
        assert data["a"] == {"category": "noun", "count": 2}

    def test_child_count(self, doc):
        data = [d for _, d in collect_tree_data(doc, DataRequirement.CHILDREN_COUNT, max_depth=0)]
        assert data == [{"id": "doc", "depth": 0, "child_count": 2, "is_leaf": False}]

    def test_paths(self, doc):
        paths = list(get_tree_paths(doc, types=["punctuation"]))
        assert paths == [["doc", "p2", "s2", "c"]]

    def test_paths_from_subtree_start_at_tree_root(self, doc):
        sentence = doc.children[1].children[0]
        paths = list(get_tree_paths(sentence, include_root=False))
        assert paths == [["doc", "p2", "s2", "c"]]

    def test_sum_collector(self, doc):
        adapter = EntityAdapter()
        collector = SumCollector(adapter, "count")
        config = build_config(data_requirement=DataRequirement.CUSTOM,
                              custom_collector=collector, types=["document", "sentence"])
        results = {node.id: data for node, data, _ in ExecutionPlan(config, adapter).execute(doc)}
        assert results["doc"]["aggregated"] == 10
        assert results["s1"]["aggregated"] == 5
        assert results["s1"]["own_value"] == 0

    def test_custom_collector(self, doc):
        adapter = EntityAdapter()
        collector = CustomCollector(adapter, lambda node, depth: (node.value, depth))
        data = [d for _, d in collect_tree_data(doc, DataRequirement.CUSTOM,
                                                custom_collector=collector, types=["word"])]
        assert data == [("a", 3), ("b", 3)]


class TestExecutionPlan:

    def test_invalid_configuration(self):
        config = build_config(min_depth=3, max_depth=1)
        with pytest.raises(CapabilityMismatchError, match="max_depth"):
            ExecutionPlan(config)

    def test_custom_without_collector(self):
        with pytest.raises(CapabilityMismatchError):
            ExecutionPlan(TraversalConfig(data_requirements=DataRequirement.CUSTOM))

    def test_plan_is_reusable(self, doc):
        plan = ExecutionPlan(TraversalConfig.of_type("word"))
        first = [node.id for node, _, _ in plan.execute(doc)]
        second = [node.id for node, _, _ in plan.execute(doc)]
        assert first == second == ["a", "b"]

    def test_leaves_only_config(self, doc):
        plan = ExecutionPlan(TraversalConfig.leaves_only())
        assert [node.id for node, _, _ in plan.execute(doc)] == ["a", "b", "c"]

    def test_summary(self):
        summary = ExecutionPlan(TraversalConfig()).get_summary()
        assert summary["strategy"] == "dfs_pre"
        assert summary["traverser"] == "DepthFirstPreOrderTraverser"
        assert summary["collector"] == "FullNodeCollector"
        assert summary["adapter"] == "EntityAdapter"


class TestTreeStats:

    def test_stats(self, doc):
        stats = get_tree_stats(doc)
        assert stats["total_nodes"] == 8
        assert stats["leaf_nodes"] == 3
        assert stats["internal_nodes"] == 5
        assert stats["max_depth"] == 3
        assert stats["depths"] == {0: 1, 1: 2, 2: 2, 3: 3}
        assert stats["types"]["paragraph"] == 2
        assert stats["average_branching"] == pytest.approx(1.4)

    def test_single_entity(self):
        word = Word("alone")
        stats = get_tree_stats(word)
        assert stats["total_nodes"] == 1
        assert stats["average_branching"] == 0


@pytest.mark.slow
def test_deep_tree_does_not_hit_recursion_limit():
    root = Sentence()
    current = root
    for _ in range(3000):
        child = Sentence()
        current.add(child)
        current = child
    current.add(Word("bottom"))
    assert [leaf.value for leaf in root.leaves()] == ["bottom"]


@pytest.mark.slow
def test_deep_tree_post_order():
    root = Sentence()
    current = root
    for _ in range(3000):
        child = Sentence()
        current.add(child)
        current = child
    order = list(traverse_tree(root, strategy="dfs_post"))
    assert order[0] is current
    assert order[-1] is root
