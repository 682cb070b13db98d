# src/raci_tracker/tracker/roster.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

logger = logging.getLogger(__name__)

RosterListener = Callable[["Roster"], None]


class Roster:
    """
    Known assignee names offered by the role pickers.

    Names are de-duplicated (case-sensitive, exact match) and kept sorted.
    Removing a name does not touch tasks that already reference it.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: list[str] = sorted({str(n).strip() for n in names if str(n).strip()})
        self._listeners: list[RosterListener] = []

    def subscribe(self, listener: RosterListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    @property
    def names(self) -> list[str]:
        return list(self._names)

    def add(self, name: str) -> bool:
        clean = (name or "").strip()
        if not clean or clean in self._names:
            return False
        self._names.append(clean)
        self._names.sort()
        logger.debug("Roster add name=%r total=%d", clean, len(self._names))
        self._notify()
        return True

    def remove(self, name: str) -> bool:
        if name not in self._names:
            return False
        self._names.remove(name)
        logger.debug("Roster remove name=%r total=%d", name, len(self._names))
        self._notify()
        return True

    def replace_all(self, names: Iterable[str]) -> None:
        self._names = sorted({str(n).strip() for n in names if str(n).strip()})
        self._notify()
