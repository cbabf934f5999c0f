from __future__ import annotations

import logging
import threading
from typing import Iterable, Literal

from detection_report.report.document import Document

LOGGER = logging.getLogger(__name__)

UnknownSectionPolicy = Literal["warn", "extend"]


class Appender:
    """Entry point producers use to contribute markdown fragments to a section.

    Section ids missing from the document's registry are handled by
    ``unknown_section_policy``:

    - ``"warn"`` drops the fragments and logs a warning once per section id.
    - ``"extend"`` keeps them and adds the section after the registered ones
      in :meth:`render_order`, in first-seen order.
    """

    def __init__(
        self,
        document: Document,
        unknown_section_policy: UnknownSectionPolicy = "warn",
    ) -> None:
        if unknown_section_policy not in ("warn", "extend"):
            raise ValueError(f"Unsupported unknown section policy: {unknown_section_policy}")
        self._document = document
        self._policy = unknown_section_policy
        self._unknown: list[str] = []
        self._unknown_lock = threading.Lock()

    @property
    def document(self) -> Document:
        return self._document

    def add(self, section_id: str, fragments: Iterable[str]) -> None:
        fragments = list(fragments)
        if section_id not in self._document.registry and not self._accept_unknown(section_id):
            return
        self._document.append(section_id, fragments)

    def render_order(self) -> tuple[str, ...]:
        with self._unknown_lock:
            extra = tuple(self._unknown) if self._policy == "extend" else ()
        return self._document.sections() + extra

    def _accept_unknown(self, section_id: str) -> bool:
        with self._unknown_lock:
            first_seen = section_id not in self._unknown
            if first_seen:
                self._unknown.append(section_id)
        if self._policy == "extend":
            if first_seen:
                LOGGER.info(
                    "Adding unregistered report section %r after registered sections",
                    section_id,
                )
            return True
        if first_seen:
            LOGGER.warning(
                "Ignoring fragments for unregistered report section %r; registered sections: %s",
                section_id,
                ", ".join(self._document.sections()),
            )
        return False
