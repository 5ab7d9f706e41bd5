"""Tests for entity kinds, the builder and the operations catalogue."""

import unittest

from lexitree import (
    Builder,
    ConstructionError,
    DEFAULT_KINDS,
    DEFAULT_OPERATIONS,
    EntityKind,
    KindRegistry,
    Operation,
    OperationRegistry,
    Paragraph,
    Sentence,
    Title,
    Word,
    compare_kinds,
)


class TestKindRegistry(unittest.TestCase):

    def test_lookup_by_tag_and_plural(self):
        kind = DEFAULT_KINDS.get("word")
        self.assertIs(kind.cls, Word)
        self.assertEqual(kind.plural, "words")
        self.assertEqual(DEFAULT_KINDS.from_plural("entities").cls.__name__, "Entity")
        self.assertIsNone(DEFAULT_KINDS.find("chapter"))

    def test_unknown_tag(self):
        with self.assertRaises(ConstructionError):
            DEFAULT_KINDS.get("chapter")

    def test_membership(self):
        self.assertIn("paragraph", DEFAULT_KINDS)
        self.assertIn("sentences", DEFAULT_KINDS.plurals())
        self.assertEqual(len(DEFAULT_KINDS), len(DEFAULT_KINDS.tags()))

    def test_zone_subkinds_share_rank(self):
        self.assertEqual(Title.RANK, Paragraph.RANK)
        self.assertEqual(DEFAULT_KINDS.get("title").rank, DEFAULT_KINDS.get("zone").rank)

    def test_duplicate_kinds_rejected(self):
        with self.assertRaises(ConstructionError):
            KindRegistry([EntityKind.of(Word), EntityKind.of(Word)])

    def test_ambiguous_plural_rejected(self):
        with self.assertRaises(ConstructionError):
            KindRegistry([EntityKind.of(Word), EntityKind.of(Sentence, plural="words")])


class TestCompareKinds(unittest.TestCase):

    def test_ordering(self):
        self.assertEqual(compare_kinds("document", "word"), 1)
        self.assertEqual(compare_kinds("token", "sentence"), -1)
        self.assertEqual(compare_kinds("word", "number"), 0)
        self.assertEqual(compare_kinds("collection", "document"), 1)

    def test_unknown_kind(self):
        with self.assertRaises(ConstructionError):
            compare_kinds("word", "chapter")


class TestBuilder(unittest.TestCase):

    def setUp(self):
        self.builder = Builder()

    def test_build(self):
        word = self.builder.build("word", "cat", id="w-b", features={"category": "noun"})
        self.assertIsInstance(word, Word)
        self.assertEqual((word.id, word.value, word.category), ("w-b", "cat", "noun"))

    def test_build_unknown_kind(self):
        with self.assertRaises(ConstructionError):
            self.builder.build("chapter")

    def test_build_tree(self):
        sentence = self.builder.build_tree("sentence", [
            self.builder.build("word", "The"),
            self.builder.build("word", "cat"),
        ])
        self.assertIsInstance(sentence, Sentence)
        self.assertEqual([leaf.value for leaf in sentence.registry], ["The", "cat"])

    def test_restricted_registry(self):
        builder = Builder(KindRegistry([EntityKind.of(Word)]))
        builder.build("word", "ok")
        with self.assertRaises(ConstructionError):
            builder.build("sentence")


class TestOperations(unittest.TestCase):

    def test_applies_to(self):
        self.assertTrue(DEFAULT_OPERATIONS.applies_to("stem", "word"))
        self.assertFalse(DEFAULT_OPERATIONS.applies_to("stem", "sentence"))
        self.assertTrue(DEFAULT_OPERATIONS.applies_to("tokenize", "paragraph"))
        self.assertTrue(DEFAULT_OPERATIONS.applies_to("language", "document"))
        self.assertFalse(DEFAULT_OPERATIONS.applies_to("unknown_op", "word"))

    def test_lookup(self):
        self.assertEqual(DEFAULT_OPERATIONS.lookup("parse").name, "parse")
        self.assertIsNone(DEFAULT_OPERATIONS.lookup("fly"))
        self.assertIn("segment", DEFAULT_OPERATIONS)
        self.assertIn("chunk", DEFAULT_OPERATIONS.names())

    def test_custom_registry(self):
        registry = OperationRegistry([Operation("spell", frozenset({"word"}))])
        self.assertEqual(len(registry), 1)
        self.assertTrue(registry.applies_to("spell", "word"))


if __name__ == '__main__':
    unittest.main()
