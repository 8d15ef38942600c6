"""Section segmentation and work item classification.

Folds the top-level block nodes of a project document into ``##`` sections
and, for sections whose heading names a work item category, turns checkbox
list lines into typed work items.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from functools import reduce
from typing import Optional

from .blocks import BlockNode, BulletList, CodeBlock, Heading
from .models import Section, WorkItem, WorkItemType


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SECTION_DEPTH = 2

# Ordered, first match wins. Only the first alternative of the bugs and
# tasks patterns is anchored.
_CATEGORY_PATTERNS: tuple[tuple[re.Pattern[str], WorkItemType], ...] = (
    (re.compile(r"^features?\s*(done|completed|in progress|in-progress)?"), WorkItemType.FEATURES),
    (re.compile(r"^enhancements?"), WorkItemType.ENHANCEMENTS),
    (re.compile(r"^(known\s+)?issues?|(active\s+)?bugs?|open\s+issues?"), WorkItemType.BUGS),
    (re.compile(r"^(outstanding\s+)?tasks?|todo"), WorkItemType.TASKS),
)

_CHECKBOX_PATTERN = re.compile(r"^-\s*\[([ x])\]\s*(.+)$")


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify_heading(heading: str) -> Optional[WorkItemType]:
    """Return the work item category a section heading denotes, if any."""
    normalized = heading.lower().strip()
    for pattern, category in _CATEGORY_PATTERNS:
        if pattern.search(normalized):
            return category
    return None


def extract_work_items(
    content: str, section: str, category: WorkItemType
) -> list[WorkItem]:
    """Scan rendered list *content* line by line for checkbox items.

    Only a lowercase ``x`` marks an item completed.
    """
    items: list[WorkItem] = []
    for line in content.splitlines():
        match = _CHECKBOX_PATTERN.match(line)
        if match:
            items.append(WorkItem(
                type=category,
                content=match.group(2).strip(),
                completed=match.group(1) == "x",
                section=section,
            ))
    return items


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_list(node: BulletList) -> str:
    """Render a list back to a literal ``- item`` block."""
    return "".join(f"{('- ' + item).strip()}\n" for item in node.items)


def _render_block(node: BlockNode) -> str:
    if isinstance(node, Heading):
        return "#" * node.depth + " " + node.text + "\n\n"
    if isinstance(node, BulletList):
        return render_list(node)
    if isinstance(node, CodeBlock):
        return f"```{node.lang}\n{node.body}\n```\n\n"
    # Paragraph and OtherBlock
    return node.text + "\n\n" if node.text.strip() else ""


# ---------------------------------------------------------------------------
# Fold
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _OpenSection:
    heading: str
    category: Optional[WorkItemType]
    content: str = ""
    work_items: tuple[WorkItem, ...] = ()

    def close(self) -> Section:
        return Section(
            heading=self.heading,
            level=SECTION_DEPTH,
            content=self.content,
            work_items=list(self.work_items),
        )


@dataclass(frozen=True)
class _Walk:
    sections: tuple[Section, ...] = ()
    current: Optional[_OpenSection] = None

    def flushed(self) -> tuple[Section, ...]:
        if self.current is None:
            return self.sections
        return self.sections + (self.current.close(),)


def _step(walk: _Walk, node: BlockNode) -> _Walk:
    if isinstance(node, Heading) and node.depth == SECTION_DEPTH:
        return _Walk(
            sections=walk.flushed(),
            current=_OpenSection(heading=node.text, category=classify_heading(node.text)),
        )

    current = walk.current
    if current is None:
        # Content before the first section has nowhere to go.
        return walk

    rendered = _render_block(node)
    items: tuple[WorkItem, ...] = ()
    if isinstance(node, BulletList) and current.category is not None:
        items = tuple(extract_work_items(rendered, current.heading, current.category))

    return replace(
        walk,
        current=replace(
            current,
            content=current.content + rendered,
            work_items=current.work_items + items,
        ),
    )


def segment_sections(nodes: list[BlockNode]) -> tuple[list[Section], list[WorkItem]]:
    """Fold block nodes into sections and the flat work item list.

    The flat list is the in-order concatenation of every section's own
    work items and shares their identity.
    """
    sections = list(reduce(_step, nodes, _Walk()).flushed())
    work_items = [item for section in sections for item in section.work_items]
    return sections, work_items
