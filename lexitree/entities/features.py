"""Per-entity feature storage."""

from typing import Any, Dict, Iterator, ItemsView, KeysView, Optional


class FeatureStore:
    """Mapping from feature name to an arbitrary value.

    Each entity owns exactly one store; stores are never shared, and
    ``copy`` produces an independent (shallow) copy. Values are stored as
    given, without coercion.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        if initial:
            for name, value in initial.items():
                self.set(name, value)

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def set(self, name: str, value: Any) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Feature names must be strings, got {type(name).__name__}")
        self._data[name] = value

    def has(self, name: str) -> bool:
        return name in self._data

    def unset(self, name: str) -> Any:
        """Remove a feature and return its value.

        Raises:
            KeyError: If the feature is not set
        """
        return self._data.pop(name)

    def copy(self) -> 'FeatureStore':
        return FeatureStore(self._data)

    def keys(self) -> KeysView:
        return self._data.keys()

    def items(self) -> ItemsView:
        return self._data.items()

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        del self._data[name]

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FeatureStore):
            return self._data == other._data
        if isinstance(other, dict):
            return self._data == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"FeatureStore({self._data!r})"
