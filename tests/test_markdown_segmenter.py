import pytest

from marketing_toolkit.models.blocks import Heading, LabeledLine, Paragraph, Spacer
from marketing_toolkit.services.markdown_segmenter import (
    classify_line,
    format_inline,
    reconstruct,
    render_html,
    segment,
)

ANALYSIS = """**Executive Summary**
The market is *shifting* fast & wide.

### Key Strategic Insights
* **Action / Insight:** Automate customs with **AI**.
* Recommendation: Lead with visibility.
- dash point
1. Numbered point
**Marketing Strategy**: Own the *compliance* story.
"""


def test_empty_input_has_no_blocks():
    assert segment("") == []


@pytest.mark.parametrize(
    "line,level,html",
    [
        ("# Title", 1, "Title"),
        ("## Sub title", 2, "Sub title"),
        ("###No space", 3, "No space"),
        ("###### Deep", 4, "Deep"),
        ("## **Bold** heading", 2, "<strong>Bold</strong> heading"),
        ("**Executive Summary**", 4, "Executive Summary"),
    ],
)
def test_headings(line, level, html):
    assert classify_line(line) == Heading(level=level, html=html)


def test_line_with_two_bold_spans_is_not_a_heading():
    block = classify_line("**a** and **b**")
    assert block == Paragraph(html="<strong>a</strong> and <strong>b</strong>")


@pytest.mark.parametrize(
    "line,label,html,marker",
    [
        ("* **Action / Insight:** Invest in AI", "Action / Insight:", "Invest in AI", "*"),
        ("Recommendation: Do *this*", "Recommendation:", "Do <em>this</em>", ""),
        ("**Marketing Strategy**: Own it", "Marketing Strategy:", "Own it", ""),
        ("- insight: lower case", "Insight:", "lower case", "-"),
        (
            "2. **Recommendation / Marketing Strategy:** Bundle",
            "Recommendation / Marketing Strategy:",
            "Bundle",
            "2.",
        ),
        ("Action:", "Action:", "", ""),
    ],
)
def test_labeled_lines(line, label, html, marker):
    assert classify_line(line) == LabeledLine(label=label, html=html, marker=marker)


def test_label_must_open_the_line():
    block = classify_line("Our Insight: later in the line")
    assert isinstance(block, Paragraph)


def test_list_items_keep_their_marker():
    assert classify_line("- plain item") == Paragraph(html="plain item", marker="-")
    assert classify_line("3. third") == Paragraph(html="third", marker="3.")


@pytest.mark.parametrize("line", ["", "   ", "\t"])
def test_blank_lines_are_spacers(line):
    assert classify_line(line) == Spacer()


def test_inline_formatting_escapes_html():
    assert format_inline("a < b & <script>") == "a &lt; b &amp; &lt;script&gt;"


def test_inline_emphasis():
    assert format_inline("*emphasis* here") == "<em>emphasis</em> here"
    assert format_inline("**x** then *y*") == "<strong>x</strong> then <em>y</em>"


@pytest.mark.parametrize(
    "text,html",
    [
        ("***a** b*", "<em><strong>a</strong> b</em>"),
        ("***x***", "<em><strong>x</strong></em>"),
        ("*a **b** c*", "<em>a <strong>b</strong> c</em>"),
        ("**bold *em* text**", "<strong>bold <em>em</em> text</strong>"),
        ("**a *b**", "<strong>a *b</strong>"),
    ],
)
def test_nested_emphasis_is_well_formed(text, html):
    assert format_inline(text) == html


def test_unpaired_markers_stay_literal():
    assert classify_line("**oops") == Paragraph(html="**oops")
    assert format_inline("5 * 3") == "5 * 3"


def test_segment_one_block_per_line():
    blocks = segment(ANALYSIS)

    assert len(blocks) == len(ANALYSIS.splitlines())
    assert blocks[0] == Heading(level=4, html="Executive Summary")
    assert blocks[1] == Paragraph(html="The market is <em>shifting</em> fast &amp; wide.")
    assert blocks[2] == Spacer()
    assert blocks[3] == Heading(level=3, html="Key Strategic Insights")
    assert blocks[4] == LabeledLine(
        label="Action / Insight:",
        html="Automate customs with <strong>AI</strong>.",
        marker="*",
    )
    assert isinstance(blocks[5], LabeledLine)
    assert blocks[8] == LabeledLine(
        label="Marketing Strategy:", html="Own the <em>compliance</em> story."
    )


def test_segment_never_raises_on_odd_input():
    text = "***\n**\n* \n#\n<b>&amp;</b>\n" + "*" * 50
    blocks = segment(text)
    assert len(blocks) == len(text.splitlines())


def test_reconstruct_round_trip():
    blocks = segment(ANALYSIS)
    assert segment(reconstruct(blocks)) == blocks


@pytest.mark.parametrize(
    "text",
    [
        "\n",
        "#\n",
        "a &amp; b",
        "x <strong>literal</strong> y",
        "**Only bold**\n\n\n",
        "***a** b* and *c**d*",
    ],
)
def test_reconstruct_round_trip_edge_cases(text):
    blocks = segment(text)
    assert segment(reconstruct(blocks)) == blocks


def test_render_html_groups_list_items():
    html = render_html(segment("# Title\n* one\n* Action: two\nafter\n\n"))

    assert html.splitlines() == [
        "<h1>Title</h1>",
        "<ul><li>one</li><li><strong>Action:</strong> two</li></ul>",
        "<p>after</p>",
        '<div class="spacer"></div>',
    ]


def test_bold_heading_followed_by_labeled_bullet():
    assert segment("**Title**\n* Action: do X") == [
        Heading(level=4, html="Title"),
        LabeledLine(label="Action:", html="do X", marker="*"),
    ]
