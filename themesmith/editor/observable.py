# themesmith/editor/observable.py
"""
An explicit state holder for the ThemeConfiguration being edited.

Listeners subscribe to the holder rather than to the mapping itself, so the
storage shape stays a plain nested dict and the notification mechanism is
visible at the call site.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Tuple

from themesmith.utils.logger import setup_logger

logger = setup_logger(__name__)

ThemePath = Tuple[str, ...]


@dataclass(frozen=True)
class ThemeChange:
    path: ThemePath
    old: Any
    new: Any

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


Listener = Callable[[ThemeChange], None]


def parse_path(path: Any) -> ThemePath:
    """Accepts `("colors", "primary", "50")` or `"colors.primary.50"`."""
    if isinstance(path, str):
        parts = tuple(path.split("."))
    else:
        parts = tuple(str(p) for p in path)
    if not parts or any(not p for p in parts):
        raise KeyError(f"Invalid theme path: {path!r}")
    return parts


class ObservableTheme:
    """A nested theme mapping that notifies subscribers on every mutation."""

    def __init__(self, initial: Mapping[str, Any]):
        self._data: Dict[str, Any] = copy.deepcopy(dict(initial))
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers `listener`; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _container(self, path: ThemePath) -> Dict[str, Any]:
        node: Any = self._data
        for key in path[:-1]:
            if not isinstance(node, dict) or key not in node:
                raise KeyError(".".join(path))
            node = node[key]
        if not isinstance(node, dict) or path[-1] not in node:
            raise KeyError(".".join(path))
        return node

    def get(self, path: Any) -> Any:
        parts = parse_path(path)
        return self._container(parts)[parts[-1]]

    def set(self, path: Any, value: Any) -> bool:
        """Writes a leaf value in place.

        Keys are fixed by the initial configuration; only existing leaves can
        be written. Returns False (and notifies nobody) when the value is
        unchanged.
        """
        parts = parse_path(path)
        container = self._container(parts)
        old = container[parts[-1]]
        if isinstance(old, dict):
            raise KeyError(f"'{'.'.join(parts)}' is a group, not a value.")
        if old == value:
            return False
        container[parts[-1]] = value
        self._notify(ThemeChange(parts, old, value))
        return True

    def _notify(self, change: ThemeChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception(f"Theme listener failed for change at '{change.dotted}'.")

    def snapshot(self) -> Dict[str, Any]:
        """A deep copy safe to serialize while edits continue."""
        return copy.deepcopy(self._data)

    def leaves(self) -> Iterator[Tuple[ThemePath, Any]]:
        """Yields `(path, value)` for every editable leaf, in insertion order."""

        def walk(prefix: ThemePath, node: Any) -> Iterator[Tuple[ThemePath, Any]]:
            if isinstance(node, dict):
                for key, child in node.items():
                    yield from walk(prefix + (str(key),), child)
            else:
                yield prefix, node

        yield from walk((), self._data)
