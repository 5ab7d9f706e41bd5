"""Catalogue of processing operations and the entity kinds they apply to.

The operations themselves (tokenizers, taggers, parsers, ...) live outside
LexiTree and populate features. Attribute resolution consults this
catalogue only to explain why a name is unavailable on an entity.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Iterable, Optional, Tuple

TOKENS = frozenset({"token", "word", "number", "punctuation", "symbol", "enclitic", "url", "email"})
ZONES = frozenset({"zone", "title", "paragraph"})
SENTENCE_LEVEL = frozenset({"sentence", "fragment", "phrase", "group"})
ALL_KINDS = (frozenset({"entity", "collection", "document", "section", "unknown"})
             | ZONES | SENTENCE_LEVEL | TOKENS)


@dataclass(frozen=True)
class Operation:
    name: str
    applies_to: FrozenSet[str]
    description: str = ''


class OperationRegistry:
    """Immutable lookup of operations by name."""

    def __init__(self, operations: Iterable[Operation]):
        self._operations = MappingProxyType({op.name: op for op in operations})

    def lookup(self, name: str) -> Optional[Operation]:
        return self._operations.get(name)

    def applies_to(self, name: str, entity_type: str) -> bool:
        operation = self._operations.get(name)
        return operation is not None and entity_type in operation.applies_to

    def names(self) -> Tuple[str, ...]:
        return tuple(self._operations)

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __len__(self) -> int:
        return len(self._operations)


DEFAULT_OPERATIONS = OperationRegistry([
    Operation("chunk", frozenset({"document", "section"}), "split into sections and zones"),
    Operation("segment", frozenset({"document", "section"}) | ZONES, "split into sentences"),
    Operation("tokenize", ZONES | SENTENCE_LEVEL, "split into tokens"),
    Operation("parse", SENTENCE_LEVEL, "build a syntactic tree"),
    Operation("tag", SENTENCE_LEVEL | TOKENS, "part-of-speech tags"),
    Operation("category", frozenset({"phrase"}) | TOKENS, "lexical category"),
    Operation("sense", frozenset({"word"}), "word senses"),
    Operation("stem", frozenset({"word"}), "stemming"),
    Operation("lemma", frozenset({"word"}), "lemmatisation"),
    Operation("conjugate", frozenset({"word"}), "verb conjugation"),
    Operation("declense", frozenset({"word"}), "noun declension"),
    Operation("ordinal", frozenset({"number"}), "ordinal form"),
    Operation("cardinal", frozenset({"number"}), "cardinal form"),
    Operation("language", ALL_KINDS, "language detection"),
    Operation("topics", frozenset({"collection", "document", "section"}) | ZONES, "topic extraction"),
    Operation("keywords", frozenset({"document", "section"}) | ZONES, "keyword extraction"),
    Operation("name_tag", SENTENCE_LEVEL, "named entity tagging"),
    Operation("tf_idf", frozenset({"word"}), "term frequency - inverse document frequency"),
    Operation("index", frozenset({"collection"}), "search indexing"),
    Operation("search", frozenset({"collection"}), "full-text search"),
])
