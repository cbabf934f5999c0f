from __future__ import annotations

from detection_report.report.render import (
    EMPTY_SECTION_TEXT,
    PythonMarkdownRenderer,
    build_markdown,
    render_document,
)

GENERAL = "General Overview {#general_overview}"
RESULTS = "Results Summary {#results_summary}"
ORDER = (GENERAL, RESULTS)

GENERAL_DATA = [
    "- Analyzed event files: 581",
    "- Total file size: 148.5 MB",
    "- Excluded rules: 12",
    "- Noisy rules: 5 (Disabled)",
    "- Experimental rules: 1935 (65.97%)",
    "- Stable rules: 215 (7.33%)",
    "- Test rules: 783 (26.70%)",
    "- Hayabusa rules: 138",
    "- Sigma rules: 2795",
    "- Total enabled detection rules: 2933",
    "- Elapsed Time: 00:00:29.035",
    "",
]


def test_build_markdown_emits_headings_and_fallback_in_order() -> None:
    text = build_markdown(ORDER, {GENERAL: ["- one", "- two"], RESULTS: []})

    assert text == (
        "## General Overview {#general_overview}\n"
        "\n"
        "- one\n- two\n"
        "\n"
        "## Results Summary {#results_summary}\n"
        "\n"
        f"{EMPTY_SECTION_TEXT}"
    )


def test_render_general_overview_with_empty_results_summary() -> None:
    html = render_document(ORDER, {GENERAL: list(GENERAL_DATA), RESULTS: []})

    items = "</li>\n<li>".join(line[2:] for line in GENERAL_DATA[:-1])
    expected = (
        '<h2 id="general_overview">General Overview</h2>\n'
        f"<ul>\n<li>{items}</li>\n</ul>\n"
        '<h2 id="results_summary">Results Summary</h2>\n'
        "<p>not found data.</p>"
    )
    assert html.rstrip("\n") == expected


def test_table_at_end_of_section_does_not_absorb_next_heading() -> None:
    snapshot = {GENERAL: ["| a | b |", "| --- | --- |", "| 1 | 2 |"], RESULTS: ["x"]}

    html = render_document(ORDER, snapshot)

    assert '<h2 id="results_summary">Results Summary</h2>' in html
    assert "## Results Summary" not in html
    assert html.index("</table>") < html.index('id="results_summary"')
    assert html.index('id="results_summary"') < html.index("<p>x</p>")


def test_fragments_ending_in_blank_line_are_not_padded_twice() -> None:
    text = build_markdown((GENERAL,), {GENERAL: ["- one", ""]})

    assert text == "## General Overview {#general_overview}\n\n- one\n"


def test_missing_section_in_snapshot_uses_fallback() -> None:
    html = render_document(ORDER, {})

    assert html.count("<p>not found data.</p>") == 2


def test_heading_order_follows_registry_not_append_order() -> None:
    snapshot = {RESULTS: ["results first"], GENERAL: ["general second"]}

    html = render_document(ORDER, snapshot)

    assert html.index('id="general_overview"') < html.index('id="results_summary"')
    assert html.index("general second") < html.index("results first")


def test_sections_outside_order_are_not_rendered() -> None:
    snapshot = {GENERAL: ["kept"], RESULTS: [], "Hidden {#hidden}": ["dropped"]}

    html = render_document(ORDER, snapshot)

    assert "kept" in html
    assert "dropped" not in html
    assert 'id="hidden"' not in html


def test_heading_without_anchor_has_no_id() -> None:
    html = render_document(("Plain Title",), {"Plain Title": ["body"]})

    assert "<h2>Plain Title</h2>" in html


def test_tables_and_footnotes_are_supported() -> None:
    snapshot = {
        GENERAL: [
            "| Level | Count |",
            "| --- | ---: |",
            "| high | 3 |",
            "",
            "See the rule notes.[^rules]",
            "",
            "[^rules]: Counts exclude noisy rules.",
            "",
        ],
        RESULTS: [],
    }

    html = render_document(ORDER, snapshot)

    assert "<table>" in html
    assert "<th>Level</th>" in html
    assert "<td>high</td>" in html
    assert 'class="footnote"' in html
    assert "Counts exclude noisy rules." in html


def test_render_is_deterministic() -> None:
    snapshot = {GENERAL: ["note[^1]", "", "[^1]: footnote text", ""], RESULTS: ["- a"]}

    first = render_document(ORDER, snapshot)
    second = render_document(ORDER, snapshot)

    assert first == second


def test_custom_markdown_renderer_is_used() -> None:
    class _EchoRenderer:
        def render(self, text: str) -> str:
            return f"<pre>{text}</pre>"

    html = render_document(ORDER, {}, markdown_renderer=_EchoRenderer())

    assert html.startswith("<pre>## General Overview {#general_overview}")


def test_python_markdown_renderer_reports_extensions() -> None:
    renderer = PythonMarkdownRenderer()

    assert renderer.extensions == ["tables", "footnotes", "attr_list"]
