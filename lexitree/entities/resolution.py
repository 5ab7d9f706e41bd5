"""Dynamic attribute resolution for entities.

Resolving a name on an entity runs an ordered chain of lookups and
returns a tagged Resolution instead of raising, so every branch can be
inspected and tested on its own:

1. STRUCTURAL - one of the fixed fields (id, value, type, parent, children)
2. FEATURE    - a key of the entity's feature store
3. DERIVED    - a magic accessor computed from the tree (``words``,
                ``word_count``, ``first_sentence``, ``is_noun``, ...)
4. UNSUPPORTED - a known processing operation that does not apply to
                the entity's type
5. UNKNOWN    - nothing matched; carries "did you mean" suggestions

Resolution is read-only: it never mutates the entity or its tree.
``Resolution.unwrap`` turns a failed resolution into the matching
exception; ``Entity.__getattr__`` and ``Entity.invoke`` are built on it.
"""

import difflib
import re
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Pattern, Tuple

import structlog

from .._common.config import ANY, ResolutionConfig, DEFAULT_RESOLUTION
from ..errors import ArityError, UnknownAttributeError, UnsupportedOperationError
from .entity import Entity, STRUCTURAL_FIELDS
from .kinds import KindRegistry, DEFAULT_KINDS
from .operations import OperationRegistry, DEFAULT_OPERATIONS

logger = structlog.get_logger()


class ResolutionKind(Enum):
    STRUCTURAL = "structural"
    FEATURE = "feature"
    DERIVED = "derived"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one name on one entity."""

    kind: ResolutionKind
    name: str
    entity_type: str
    value: Any = None
    message: str = ''
    suggestions: Tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.kind in (ResolutionKind.STRUCTURAL,
                             ResolutionKind.FEATURE,
                             ResolutionKind.DERIVED)

    def unwrap(self) -> Any:
        """Return the resolved value, or raise the matching error."""
        if self.kind == ResolutionKind.UNSUPPORTED:
            raise UnsupportedOperationError(self.message, self.name, self.entity_type)
        if self.kind == ResolutionKind.UNKNOWN:
            raise UnknownAttributeError(self.message, self.name, self.entity_type,
                                        self.suggestions)
        return self.value


Accessor = Callable[..., Any]


class MagicRegistry:
    """Fixed table of derived accessors, built from a KindRegistry.

    Each entry pairs a name pattern with a factory producing the accessor
    bound to an entity. Patterns are tried in order; the first match wins.
    """

    def __init__(self,
                 kinds: KindRegistry = DEFAULT_KINDS,
                 config: ResolutionConfig = DEFAULT_RESOLUTION):
        self.kinds = kinds
        self.config = config

        tags = _alternation(kinds.tags())
        plurals = _alternation(kinds.plurals())
        categories = _alternation(config.categories)

        self._patterns: List[Tuple[Pattern, Callable[[Entity, Any], Accessor]]] = [
            (re.compile(rf'^each_({tags})$'), self._each),
            (re.compile(rf'^({tags})_count$'), self._count),
            (re.compile(rf'^num_({plurals})$'), self._count_plural),
            (re.compile(rf'^(first|last)_({tags})$'), self._first_or_last),
            (re.compile(rf'^nth_({tags})$'), self._nth),
            (re.compile(rf'^({plurals})_with_(\w+)$'), self._with_feature),
            (re.compile(rf'^({tags})_frequency$'), self._frequency),
            (re.compile(rf'^({plurals})$'), self._all),
            (re.compile(rf'^({tags})$'), self._nearest),
        ]
        if config.categories:
            self._patterns.append((re.compile(rf'^is_({categories})$'), self._is_category))

    def lookup(self, entity: Entity, name: str) -> Optional[Accessor]:
        """Return the accessor for ``name`` bound to ``entity``, or None."""
        for pattern, factory in self._patterns:
            match = pattern.match(name)
            if match:
                return factory(entity, match)
        return None

    def names(self) -> List[str]:
        """Concrete accessor names, used for suggestions."""
        names = []
        for kind in self.kinds:
            names.extend([
                f"each_{kind.tag}", f"{kind.tag}_count", f"num_{kind.plural}",
                f"first_{kind.tag}", f"last_{kind.tag}", f"nth_{kind.tag}",
                f"{kind.tag}_frequency", kind.plural, kind.tag,
            ])
        names.extend(f"is_{category}" for category in self.config.categories)
        return names

    # Factories

    def _each(self, entity: Entity, match) -> Accessor:
        tag = match.group(1)
        return lambda: entity.each_entity(tag)

    def _count(self, entity: Entity, match) -> Accessor:
        tag = match.group(1)
        return lambda: sum(1 for _ in entity.each_entity(tag))

    def _count_plural(self, entity: Entity, match) -> Accessor:
        tag = self.kinds.from_plural(match.group(1)).tag
        return lambda: sum(1 for _ in entity.each_entity(tag))

    def _first_or_last(self, entity: Entity, match) -> Accessor:
        which, tag = match.group(1), match.group(2)
        if which == 'first':
            return lambda: next(entity.each_entity(tag), None)

        def last():
            tail = deque(entity.each_entity(tag), maxlen=1)
            return tail[0] if tail else None
        return last

    def _nth(self, entity: Entity, match) -> Accessor:
        tag = match.group(1)

        def nth(n: int):
            if n < 0:
                found = list(entity.each_entity(tag))
                return found[n] if -n <= len(found) else None
            for index, found in enumerate(entity.each_entity(tag)):
                if index == n:
                    return found
            return None
        return nth

    def _with_feature(self, entity: Entity, match) -> Accessor:
        tag = self.kinds.from_plural(match.group(1)).tag
        feature = match.group(2)
        return lambda value=ANY: list(entity.each_entity(tag, **{feature: value}))

    def _frequency(self, entity: Entity, match) -> Accessor:
        tag = match.group(1)

        def frequency(value: str) -> int:
            wanted = value.lower()
            return sum(1 for found in entity.each_entity(tag)
                       if found.value.lower() == wanted)
        return frequency

    def _all(self, entity: Entity, match) -> Accessor:
        tag = self.kinds.from_plural(match.group(1)).tag
        return lambda: list(entity.each_entity(tag))

    def _nearest(self, entity: Entity, match) -> Accessor:
        tag = match.group(1)
        return lambda: entity.ancestor_with_type(tag) or next(entity.each_entity(tag), None)

    def _is_category(self, entity: Entity, match) -> Accessor:
        category = match.group(1)
        feature = self.config.category_feature
        return lambda: entity.get(feature) == category


class Resolver:
    """Runs the resolution chain with an explicit set of collaborators."""

    def __init__(self,
                 kinds: KindRegistry = DEFAULT_KINDS,
                 operations: OperationRegistry = DEFAULT_OPERATIONS,
                 config: ResolutionConfig = DEFAULT_RESOLUTION):
        self.kinds = kinds
        self.operations = operations
        self.config = config
        self.magic = MagicRegistry(kinds, config)

    def resolve(self, entity: Entity, name: str) -> Resolution:
        """Resolve ``name`` on ``entity`` without raising."""
        entity_type = entity.type

        if name in STRUCTURAL_FIELDS:
            return Resolution(ResolutionKind.STRUCTURAL, name, entity_type,
                              value=getattr(entity, name))

        if entity.features.has(name):
            return Resolution(ResolutionKind.FEATURE, name, entity_type,
                              value=entity.features.get(name))

        if self.config.enable_magic:
            accessor = self.magic.lookup(entity, name)
            if accessor is not None:
                return Resolution(ResolutionKind.DERIVED, name, entity_type, value=accessor)

        operation = self.operations.lookup(name)
        if operation is not None and entity_type not in operation.applies_to:
            logger.debug("resolution_failed", name=name, type=entity_type, reason="unsupported")
            return Resolution(
                ResolutionKind.UNSUPPORTED, name, entity_type,
                message=f"Method '{name}' cannot be called on a {entity_type}.",
            )

        if operation is not None:
            message = (f"Method '{name}' applies to a {entity_type}, "
                       f"but no '{name}' feature has been computed.")
            suggestions: Tuple[str, ...] = ()
        else:
            suggestions = self.suggest(entity, name)
            message = f"Method '{name}' does not exist on a {entity_type}."
            if suggestions:
                message += f" Did you mean {', '.join(repr(s) for s in suggestions)}?"
        logger.debug("resolution_failed", name=name, type=entity_type, reason="unknown")
        return Resolution(ResolutionKind.UNKNOWN, name, entity_type,
                          message=message, suggestions=suggestions)

    def invoke(self, entity: Entity, name: str, *args, **kwargs) -> Any:
        """Call-style resolution: derived accessors receive the arguments.

        Raises:
            ArityError: If arguments are given for a structural field or feature
        """
        resolution = self.resolve(entity, name)
        if resolution.kind == ResolutionKind.DERIVED:
            return resolution.value(*args, **kwargs)
        if resolution.found and (args or kwargs):
            raise ArityError(
                f"'{name}' is a {resolution.kind.value} of this {entity.type} "
                f"and takes no arguments.",
                name, entity.type,
            )
        return resolution.unwrap()

    def suggest(self, entity: Entity, name: str) -> Tuple[str, ...]:
        """Nearest known accessor names for a misspelt ``name``."""
        if self.config.max_suggestions == 0:
            return ()
        candidates = set(STRUCTURAL_FIELDS)
        candidates.update(entity.features.keys())
        candidates.update(self.operations.names())
        candidates.update(attr for attr in dir(type(entity)) if not attr.startswith('_'))
        if self.config.enable_magic:
            candidates.update(self.magic.names())
        return tuple(difflib.get_close_matches(name, sorted(candidates),
                                               n=self.config.max_suggestions,
                                               cutoff=self.config.suggestion_cutoff))


def _alternation(words) -> str:
    # Longest first so "words" is tried before "word"
    ordered = sorted(words, key=len, reverse=True)
    return '|'.join(re.escape(word) for word in ordered) or r'(?!)'


DEFAULT_RESOLVER = Resolver()


def resolve(entity: Entity, name: str) -> Resolution:
    """Resolve ``name`` on ``entity`` with the default collaborators."""
    return DEFAULT_RESOLVER.resolve(entity, name)
