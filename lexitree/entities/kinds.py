"""Concrete entity kinds and the registry describing them.

Each kind is an Entity subclass; its type tag is derived from the class
name. ``RANK`` orders kinds from the largest unit (collection) down to
tokens, and backs ``Entity.compare_with``.

The KindRegistry is built once from a fixed list of EntityKind
descriptors and is immutable afterwards. Builders and the magic accessor
table are constructed from it explicitly.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Optional, Tuple, Type

from ..errors import ConstructionError
from .entity import Entity, type_tag


class Collection(Entity):
    """A set of documents."""
    RANK = 8


class Document(Entity):
    RANK = 7


class Section(Entity):
    RANK = 6


class Zone(Entity):
    """A block of text inside a section."""
    RANK = 5


class Title(Zone):
    pass


class Paragraph(Zone):
    pass


class Sentence(Entity):
    RANK = 4


class Fragment(Entity):
    """A sentence-level unit that is not a complete sentence."""
    RANK = 4


class Phrase(Entity):
    RANK = 3


class Group(Entity):
    """A group of tokens that is not a syntactic phrase."""
    RANK = 3


class Token(Entity):
    RANK = 2


class Word(Token):
    pass


class Number(Token):
    pass


class Punctuation(Token):
    pass


class Symbol(Token):
    pass


class Enclitic(Token):
    pass


class Url(Token):
    pass


class Email(Token):
    pass


class Unknown(Entity):
    RANK = 1


@dataclass(frozen=True)
class EntityKind:
    """Descriptor of an entity kind: tag, class, plural name and rank."""

    tag: str
    cls: Type[Entity]
    plural: str
    rank: int

    @classmethod
    def of(cls, entity_class: Type[Entity], plural: Optional[str] = None) -> 'EntityKind':
        tag = type_tag(entity_class)
        return cls(tag=tag,
                   cls=entity_class,
                   plural=plural or f"{tag}s",
                   rank=entity_class.RANK)


class KindRegistry:
    """Immutable lookup of entity kinds by type tag and by plural."""

    def __init__(self, kinds: Iterable[EntityKind]):
        by_tag: Dict[str, EntityKind] = {}
        by_plural: Dict[str, EntityKind] = {}
        for kind in kinds:
            if kind.tag in by_tag:
                raise ConstructionError(f"Entity kind '{kind.tag}' is declared twice")
            if kind.plural in by_plural or kind.plural in by_tag:
                raise ConstructionError(f"Plural '{kind.plural}' of '{kind.tag}' is ambiguous")
            by_tag[kind.tag] = kind
            by_plural[kind.plural] = kind
        self._by_tag = MappingProxyType(by_tag)
        self._by_plural = MappingProxyType(by_plural)

    def get(self, tag: str) -> EntityKind:
        """Return the kind for ``tag``.

        Raises:
            ConstructionError: If the tag is unknown
        """
        try:
            return self._by_tag[tag]
        except KeyError:
            raise ConstructionError(f"Unknown entity kind '{tag}'") from None

    def find(self, tag: str) -> Optional[EntityKind]:
        return self._by_tag.get(tag)

    def from_plural(self, plural: str) -> Optional[EntityKind]:
        return self._by_plural.get(plural)

    def tags(self) -> Tuple[str, ...]:
        return tuple(self._by_tag)

    def plurals(self) -> Tuple[str, ...]:
        return tuple(self._by_plural)

    def __contains__(self, tag: object) -> bool:
        return tag in self._by_tag

    def __iter__(self) -> Iterator[EntityKind]:
        return iter(self._by_tag.values())

    def __len__(self) -> int:
        return len(self._by_tag)


def compare_kinds(first: str, second: str, kinds: Optional[KindRegistry] = None) -> int:
    """Compare two kinds by size: 1 if ``first`` is bigger, -1 if smaller, 0 if equal."""
    kinds = kinds or DEFAULT_KINDS
    a, b = kinds.get(first).rank, kinds.get(second).rank
    return (a > b) - (a < b)


DEFAULT_KINDS = KindRegistry([
    EntityKind.of(Entity, plural="entities"),
    EntityKind.of(Collection),
    EntityKind.of(Document),
    EntityKind.of(Section),
    EntityKind.of(Zone),
    EntityKind.of(Title),
    EntityKind.of(Paragraph),
    EntityKind.of(Sentence),
    EntityKind.of(Fragment),
    EntityKind.of(Phrase),
    EntityKind.of(Group),
    EntityKind.of(Token),
    EntityKind.of(Word),
    EntityKind.of(Number),
    EntityKind.of(Punctuation),
    EntityKind.of(Symbol),
    EntityKind.of(Enclitic),
    EntityKind.of(Url),
    EntityKind.of(Email),
    EntityKind.of(Unknown),
])
