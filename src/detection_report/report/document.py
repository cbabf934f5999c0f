from __future__ import annotations

import threading
from typing import Iterable

from detection_report.report.sections import SectionRegistry


class Document:
    """Section id -> markdown fragments, shared by every producer of a run.

    A single lock covers both ``append`` and ``snapshot``; an append holds it
    for the whole fetch-or-create and extend so concurrent writers never
    overwrite each other's fragments.
    """

    def __init__(self, registry: SectionRegistry | None = None) -> None:
        self._registry = registry if registry is not None else SectionRegistry()
        order, empty = self._registry.initial()
        self._order = order
        self._sections: dict[str, list[str]] = empty
        self._lock = threading.Lock()

    @property
    def registry(self) -> SectionRegistry:
        return self._registry

    def sections(self) -> tuple[str, ...]:
        return self._order

    def append(self, section: str, fragments: Iterable[str]) -> None:
        with self._lock:
            self._sections.setdefault(section, []).extend(fragments)

    def snapshot(self) -> dict[str, list[str]]:
        with self._lock:
            return {section: list(fragments) for section, fragments in self._sections.items()}
