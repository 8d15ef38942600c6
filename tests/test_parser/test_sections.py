"""Unit tests for section segmentation (atlas.parser.sections).

Tests cover:
- classify_heading for every category and unclassified headings
- extract_work_items checkbox matching
- segment_sections boundaries, rendered content and work item identity
"""

from __future__ import annotations

import pytest

from atlas.parser.blocks import (
    BulletList,
    CodeBlock,
    Heading,
    OtherBlock,
    Paragraph,
    parse_blocks,
)
from atlas.parser.models import WorkItemType
from atlas.parser.sections import (
    classify_heading,
    extract_work_items,
    render_list,
    segment_sections,
)


# ---------------------------------------------------------------------------
# classify_heading
# ---------------------------------------------------------------------------


class TestClassifyHeading:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "heading, expected",
        [
            ("Features", WorkItemType.FEATURES),
            ("Feature Done", WorkItemType.FEATURES),
            ("features in progress", WorkItemType.FEATURES),
            ("Enhancements", WorkItemType.ENHANCEMENTS),
            ("  Enhancement ideas", WorkItemType.ENHANCEMENTS),
            ("Known Issues", WorkItemType.BUGS),
            ("Issues", WorkItemType.BUGS),
            ("Active Bugs", WorkItemType.BUGS),
            ("Bugs", WorkItemType.BUGS),
            ("Outstanding Tasks", WorkItemType.TASKS),
            ("Tasks", WorkItemType.TASKS),
            ("TODO", WorkItemType.TASKS),
        ],
    )
    def test_categories(self, heading, expected):
        assert classify_heading(heading) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "heading", ["Overview", "Notes", "Architecture", "Roadmap", ""]
    )
    def test_unclassified(self, heading):
        assert classify_heading(heading) is None

    @pytest.mark.unit
    def test_unanchored_alternatives_match_anywhere(self):
        assert classify_heading("Recent bugs") == WorkItemType.BUGS
        assert classify_heading("My todo list") == WorkItemType.TASKS

    @pytest.mark.unit
    def test_first_match_wins(self):
        # Starts with "features" so the bugs pattern is never consulted.
        assert classify_heading("Features and bugs") == WorkItemType.FEATURES


# ---------------------------------------------------------------------------
# extract_work_items
# ---------------------------------------------------------------------------


class TestExtractWorkItems:
    @pytest.mark.unit
    def test_checkbox_lines(self):
        content = "- [x] Ship it\n- [ ] Test it\n- plain bullet\n"
        items = extract_work_items(content, "Tasks", WorkItemType.TASKS)
        assert [(i.content, i.completed) for i in items] == [
            ("Ship it", True),
            ("Test it", False),
        ]
        assert all(i.section == "Tasks" and i.type == WorkItemType.TASKS for i in items)

    @pytest.mark.unit
    def test_uppercase_x_is_not_matched(self):
        assert extract_work_items("- [X] Loud\n", "Bugs", WorkItemType.BUGS) == []

    @pytest.mark.unit
    def test_empty_label_is_skipped(self):
        assert extract_work_items("- [ ]\n", "Bugs", WorkItemType.BUGS) == []

    @pytest.mark.unit
    def test_content_is_trimmed(self):
        items = extract_work_items("- [ ]   spaced out   \n", "Bugs", WorkItemType.BUGS)
        assert items[0].content == "spaced out"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRenderList:
    @pytest.mark.unit
    def test_items_rendered_with_dash(self):
        assert render_list(BulletList(("[x] a", "b"))) == "- [x] a\n- b\n"

    @pytest.mark.unit
    def test_empty_item_renders_bare_dash(self):
        assert render_list(BulletList(("",))) == "-\n"


# ---------------------------------------------------------------------------
# segment_sections
# ---------------------------------------------------------------------------


class TestSegmentSections:
    @pytest.mark.unit
    def test_no_section_headings(self):
        sections, items = segment_sections(parse_blocks("# Title\n\nJust text.\n"))
        assert sections == []
        assert items == []

    @pytest.mark.unit
    def test_content_before_first_section_is_dropped(self):
        nodes = [Paragraph("preamble"), Heading(2, "Overview"), Paragraph("body")]
        sections, _ = segment_sections(nodes)
        assert len(sections) == 1
        assert sections[0].content == "body\n\n"

    @pytest.mark.unit
    def test_rendering_of_each_block(self):
        nodes = [
            Heading(2, "Notes"),
            Heading(3, "Sub"),
            Paragraph("text"),
            BulletList(("one", "two")),
            CodeBlock("sh", "ls"),
            OtherBlock(""),
            OtherBlock("quote"),
        ]
        sections, _ = segment_sections(nodes)
        assert sections[0].content == (
            "### Sub\n\n"
            "text\n\n"
            "- one\n- two\n"
            "```sh\nls\n```\n\n"
            "quote\n\n"
        )

    @pytest.mark.unit
    def test_empty_section(self):
        sections, _ = segment_sections([Heading(2, "A"), Heading(2, "B")])
        assert [s.heading for s in sections] == ["A", "B"]
        assert all(s.content == "" and s.level == 2 for s in sections)

    @pytest.mark.unit
    def test_deeper_headings_stay_inside_section(self):
        sections, _ = segment_sections(
            [Heading(2, "A"), Heading(4, "Deep"), Heading(1, "Top")]
        )
        assert len(sections) == 1
        assert sections[0].content == "#### Deep\n\n# Top\n\n"

    @pytest.mark.unit
    def test_work_items_only_in_categorised_sections(self):
        nodes = [
            Heading(2, "Notes"),
            BulletList(("[ ] not tracked",)),
            Heading(2, "Bugs"),
            BulletList(("[x] Fix crash",)),
        ]
        sections, items = segment_sections(nodes)
        assert sections[0].work_items == []
        assert len(items) == 1
        item = items[0]
        assert item.type == WorkItemType.BUGS
        assert item.content == "Fix crash"
        assert item.completed is True
        assert item.section == "Bugs"

    @pytest.mark.unit
    def test_flat_list_is_concatenation_with_shared_identity(self):
        nodes = [
            Heading(2, "Features"),
            BulletList(("[x] one", "[ ] two")),
            Heading(2, "Tasks"),
            BulletList(("[ ] three",)),
            Paragraph("between"),
            BulletList(("[x] four",)),
        ]
        sections, items = segment_sections(nodes)
        concatenated = [i for s in sections for i in s.work_items]
        assert len(items) == len(concatenated) == 4
        assert all(a is b for a, b in zip(items, concatenated))
        assert [i.content for i in items] == ["one", "two", "three", "four"]

    @pytest.mark.unit
    def test_checkbox_in_paragraph_is_not_a_work_item(self):
        nodes = [Heading(2, "Tasks"), Paragraph("- [ ] inline mention")]
        _, items = segment_sections(nodes)
        assert items == []
