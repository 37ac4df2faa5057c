from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, MutableSequence
from pathlib import Path
from typing import Any, Generic, TypeVar

from .entity import BuildEnv, Entity

E = TypeVar("E", bound=Entity)


class Context(Mapping[str, Any]):
    """Immutable mapping of names visible to templates.

    ``insert`` returns an extended copy, so a binding added on one branch
    of the tree never shows up in the caller or in a sibling.
    """

    __slots__ = ("_bindings",)

    def __init__(self, bindings: Mapping[str, Any] | None = None, **kwargs: Any):
        self._bindings = dict(bindings or {})
        self._bindings.update(kwargs)

    def __getitem__(self, key: str) -> Any:
        return self._bindings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def insert(self, name: str, value: Any) -> Context:
        bindings = dict(self._bindings)
        bindings[name] = value
        return Context(bindings)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._bindings)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"Context({sorted(self._bindings)})"


class EntityList(Entity, MutableSequence[E], Generic[E]):
    """Ordered collection of entities that is itself an entity.

    ``parse`` and ``render`` visit members in order and stop at the first
    exception; members after the failing one are never visited.
    """

    def __init__(self, items: Iterable[E] = ()):
        self._items: list[E] = list(items)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return EntityList(self._items[index])
        return self._items[index]

    def __setitem__(self, index, value) -> None:
        self._items[index] = value

    def __delitem__(self, index) -> None:
        del self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[E]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EntityList):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def insert(self, index: int, value: E) -> None:
        self._items.insert(index, value)

    def sort_by(self, key: Callable[[E], Any]) -> None:
        """Sort members in place; equal keys keep their current order."""
        self._items.sort(key=key)

    def parse(self, env: BuildEnv, source: Path) -> None:
        for item in self._items:
            item.parse(env, source)

    def render(self, env: BuildEnv, context: Context, dest: Path) -> None:
        for item in self._items:
            item.render(env, context, dest)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"EntityList({self._items!r})"
