from __future__ import annotations

from typing import Mapping, Protocol, Sequence

import markdown

from detection_report.report.sections import parse_section_id

EMPTY_SECTION_TEXT = "not found data.\n"

MARKDOWN_EXTENSIONS = ("tables", "footnotes", "attr_list")


class MarkdownRenderer(Protocol):
    def render(self, text: str) -> str: ...


class PythonMarkdownRenderer:
    """Markdown to HTML with table, footnote and ``{#id}`` heading support."""

    def __init__(self, extensions: Sequence[str] = MARKDOWN_EXTENSIONS) -> None:
        self.extensions = list(extensions)

    def render(self, text: str) -> str:
        # New converter per call: footnote ids and other converter state reset.
        converter = markdown.Markdown(extensions=self.extensions, output_format="html")
        return converter.convert(text)


def build_markdown(order: Sequence[str], snapshot: Mapping[str, Sequence[str]]) -> str:
    blocks: list[str] = []
    for section_id in order:
        blocks.append(parse_section_id(section_id).to_markdown())
        fragments = snapshot.get(section_id) or []
        if not fragments:
            blocks.append(EMPTY_SECTION_TEXT)
        else:
            body = "\n".join(fragments)
            # The next heading must open its own block or a trailing table swallows it.
            if not body.endswith("\n"):
                body += "\n"
            blocks.append(body)
    return "\n".join(blocks)


def render_document(
    order: Sequence[str],
    snapshot: Mapping[str, Sequence[str]],
    markdown_renderer: MarkdownRenderer | None = None,
) -> str:
    """Render sections in ``order`` to an HTML fragment.

    Only ids in ``order`` are visited; anything else in ``snapshot`` is left
    out of the output.
    """
    renderer = markdown_renderer or PythonMarkdownRenderer()
    return renderer.render(build_markdown(order, snapshot))
