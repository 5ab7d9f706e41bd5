"""Tests for structural composition: add, move, remove and id collisions."""

import pytest

from lexitree import (
    Document,
    Paragraph,
    Sentence,
    Word,
    ConstructionError,
    StructuralError,
)
from lexitree.testing import RegistryTestHelper, sentence_of


class TestAdd:

    def test_add_single_entity_returns_it(self):
        sentence = Sentence()
        word = Word("cat")
        assert sentence.add(word) is word
        assert word.parent is sentence
        assert sentence.children == (word,)

    def test_add_list_returns_first(self):
        sentence = Sentence()
        words = [Word("The"), Word("cat")]
        assert sentence.add(words) is words[0]
        assert sentence.children == tuple(words)

    def test_add_empty_list(self):
        sentence = Sentence("untouched")
        assert sentence.add([]) is None
        assert sentence.value == "untouched"
        assert sentence.children == ()

    def test_add_clears_receiver_value(self):
        sentence = Sentence("The cat sat")
        sentence.add(Word("The"))
        assert sentence.value == ""

    def test_value_cannot_be_set_on_internal_entity(self):
        sentence = sentence_of("a")
        with pytest.raises(StructuralError):
            sentence.value = "text"
        sentence.value = ""

    def test_add_preserves_ids(self):
        sentence = Sentence()
        word = Word("cat", id="w-cat")
        sentence.add(word)
        assert sentence.children[0].id == "w-cat"

    def test_add_rejects_non_entities(self):
        sentence = Sentence()
        with pytest.raises(StructuralError):
            sentence.add(["cat"])
        assert sentence.children == ()

    @pytest.mark.parametrize("value", [None, 42, "cat"])
    def test_add_rejects_non_iterables_and_strings(self, value):
        sentence = Sentence("kept")
        with pytest.raises(StructuralError, match="Only entities can be added"):
            sentence.add(value)
        assert sentence.value == "kept"
        assert sentence.children == ()

    def test_append_child_goes_through_add(self):
        sentence = Sentence("raw text")
        sentence.registry
        word = sentence.append_child(Word("cat"))

        assert sentence.value == ""
        assert word.parent is sentence
        assert list(sentence.registry) == [word]
        assert word.position() == 0
        RegistryTestHelper(sentence).assert_consistent()

    def test_append_child_checks_ids(self):
        sentence = Sentence()
        sentence.add(Word("a", id="w-dup"))
        with pytest.raises(ConstructionError):
            sentence.append_child(Word("b", id="w-dup"))
        assert len(sentence.children) == 1


class TestCycles:

    def test_add_self(self):
        sentence = Sentence()
        with pytest.raises(StructuralError):
            sentence.add(sentence)

    def test_add_ancestor(self):
        doc = Document()
        paragraph = Paragraph()
        sentence = Sentence()
        doc.add(paragraph)
        paragraph.add(sentence)

        with pytest.raises(StructuralError):
            sentence.add(doc)
        with pytest.raises(StructuralError):
            sentence.add([Word("ok"), paragraph])

        # Batch validation runs before any mutation
        assert sentence.children == ()
        assert paragraph.parent is doc
        assert doc.parent is None

    def test_duplicate_in_batch(self):
        sentence = Sentence()
        word = Word("cat")
        with pytest.raises(StructuralError):
            sentence.add([word, word])
        assert word.parent is None


class TestMoves:

    def test_moving_keeps_id_and_changes_parent(self):
        doc = Document()
        first, second = Sentence(), Sentence()
        doc.add([first, second])
        word = Word("cat", id="w-move")
        first.add(word)

        second.add(word)

        assert word.id == "w-move"
        assert word.parent is second
        assert first.children == ()
        assert second.children == (word,)
        RegistryTestHelper(doc).assert_consistent()

    def test_move_between_trees_migrates_registration(self):
        source = sentence_of("The", "cat")
        target = sentence_of("A")
        cat = source.children[1]

        target.add(cat)

        assert [leaf.value for leaf in source.registry] == ["The"]
        assert [leaf.value for leaf in target.registry] == ["A", "cat"]
        assert cat.position() == 1
        RegistryTestHelper(source).assert_consistent()
        RegistryTestHelper(target).assert_consistent()


class TestRemove:

    def test_remove_child(self):
        sentence = sentence_of("The", "cat", "sat")
        cat = sentence.children[1]

        removed = sentence.remove(cat)

        assert removed is cat
        assert cat.parent is None
        assert [w.value for w in sentence.children] == ["The", "sat"]
        assert [leaf.value for leaf in sentence.registry] == ["The", "sat"]
        assert cat.position() is None

    def test_detach_builds_fresh_registry(self):
        doc = Document()
        sentence = sentence_of("The", "cat")
        doc.add(sentence)
        assert len(doc.registry) == 2

        sentence.detach()

        assert len(doc.registry) == 0
        assert [leaf.value for leaf in sentence.registry] == ["The", "cat"]
        assert sentence.registry.owner is sentence

    def test_emptied_parent_becomes_a_leaf(self):
        doc = Document()
        sentence = sentence_of("cat")
        doc.add(sentence)

        sentence.children[0].detach()

        assert sentence.is_leaf()
        assert sentence in doc.registry
        RegistryTestHelper(doc).assert_consistent()

    def test_remove_non_child(self):
        sentence = Sentence()
        with pytest.raises(StructuralError):
            sentence.remove(Word("stray"))

    def test_detach_root(self):
        with pytest.raises(StructuralError):
            Sentence().detach()


class TestIdCollisions:

    def test_colliding_id_rejected_on_attach(self):
        sentence = Sentence()
        sentence.add(Word("cat", id="dup"))

        with pytest.raises(ConstructionError) as info:
            sentence.add(Word("dog", id="dup"))

        assert info.value.entity_id == "dup"
        assert [w.value for w in sentence.children] == ["cat"]
        assert len(sentence.registry) == 1

    def test_collision_with_root_id(self):
        sentence = Sentence(id="root-id")
        with pytest.raises(ConstructionError):
            sentence.add(Word("x", id="root-id"))

    def test_collision_inside_incoming_subtree(self):
        doc = Document()
        doc.add(Sentence(id="s-1"))
        incoming = Paragraph()
        incoming.add(Sentence(id="s-1"))

        with pytest.raises(ConstructionError):
            doc.add(incoming)
        assert incoming.parent is None

    def test_collision_within_batch(self):
        sentence = Sentence()
        with pytest.raises(ConstructionError):
            sentence.add([Word("a", id="same"), Word("b", id="same")])
        assert sentence.children == ()

    def test_same_id_allowed_in_separate_trees(self):
        first = Sentence()
        second = Sentence()
        first.add(Word("a", id="shared"))
        second.add(Word("b", id="shared"))
        assert first.contains_id("shared")
        assert second.contains_id("shared")

    def test_move_within_tree_is_not_a_collision(self):
        doc = Document()
        first, second = Sentence(), Sentence()
        doc.add([first, second])
        first.add(Word("cat", id="w"))
        second.add(first.children[0])
        assert doc.contains_id("w")
