from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from detection_report.config import DEFAULT_SECTIONS

_ANCHOR_SUFFIX = re.compile(r"^(?P<title>.*?)\s*\{#(?P<slug>[^{}\s]+)\}\s*$")


@dataclass(frozen=True, slots=True)
class SectionHeading:
    title: str
    slug: str | None = None

    def to_markdown(self) -> str:
        if self.slug:
            return f"## {self.title} {{#{self.slug}}}\n"
        return f"## {self.title}\n"


def parse_section_id(section_id: str) -> SectionHeading:
    """Split ``"Title {#slug}"`` into its display title and anchor slug."""
    match = _ANCHOR_SUFFIX.match(section_id)
    if match is None:
        return SectionHeading(title=section_id.strip())
    return SectionHeading(title=match.group("title").strip(), slug=match.group("slug"))


class SectionRegistry:
    """Fixed render order of report sections."""

    def __init__(self, sections: Iterable[str] | None = None) -> None:
        order = tuple(DEFAULT_SECTIONS if sections is None else sections)
        if len(set(order)) != len(order):
            raise ValueError("section registry must not contain duplicate section ids")
        self._order = order

    @property
    def order(self) -> tuple[str, ...]:
        return self._order

    def __contains__(self, section_id: object) -> bool:
        return section_id in self._order

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def initial(self) -> tuple[tuple[str, ...], dict[str, list[str]]]:
        return self._order, {section: [] for section in self._order}
