"""Markdown block structure for section segmentation.

Tokenises markdown with markdown-it-py (CommonMark) and reduces the token
stream to a closed set of top-level block nodes. Each node carries only
what the segmenter needs: flattened text, heading depth, list item lines,
or a code block's language and body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .errors import SectionParseError


# ---------------------------------------------------------------------------
# Block nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Heading:
    depth: int
    text: str


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class BulletList:
    """A list (bullet or ordered); ``items`` holds each item's first-block text."""

    items: tuple[str, ...]


@dataclass(frozen=True)
class CodeBlock:
    lang: str
    body: str


@dataclass(frozen=True)
class OtherBlock:
    """Any other block (blockquote, thematic break, raw HTML, ...)."""

    text: str


BlockNode = Union[Heading, Paragraph, BulletList, CodeBlock, OtherBlock]

_LIST_OPENERS = ("bullet_list_open", "ordered_list_open")

_md = MarkdownIt("commonmark")


# ---------------------------------------------------------------------------
# Text flattening
# ---------------------------------------------------------------------------

def inline_text(token: Token) -> str:
    """Concatenate the literal text under an ``inline`` token.

    Only plain text survives: formatting marks, inline code, hard breaks,
    images and raw inline HTML contribute nothing. Soft breaks stay as the
    ``\\n`` they were in the source.
    """
    parts: list[str] = []
    for child in token.children or []:
        if child.type in ("text", "text_special"):
            parts.append(child.content)
        elif child.type == "softbreak":
            parts.append("\n")
    return "".join(parts)


def _flatten(tokens: list[Token]) -> str:
    return "".join(inline_text(t) for t in tokens if t.type == "inline")


# ---------------------------------------------------------------------------
# Token grouping
# ---------------------------------------------------------------------------

def _group_blocks(tokens: list[Token], level: int) -> list[list[Token]]:
    """Split *tokens* into consecutive blocks opened at *level*.

    A container block runs from its ``*_open`` token to the matching
    ``*_close`` at the same level; leaf blocks (fences, rules, raw HTML)
    are single tokens.
    """
    groups: list[list[Token]] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.level != level or token.nesting == -1:
            index += 1
            continue
        if token.nesting == 0:
            groups.append([token])
            index += 1
            continue
        end = index + 1
        while end < len(tokens) and not (
            tokens[end].nesting == -1 and tokens[end].level == level
        ):
            end += 1
        groups.append(tokens[index:end + 1])
        index = end + 1
    return groups


def _list_items(group: list[Token]) -> tuple[str, ...]:
    """Render each item of a list group as the text of its first block."""
    item_level = group[0].level + 1
    items: list[str] = []
    for item in _group_blocks(group[1:-1], item_level):
        children = _group_blocks(item[1:-1], item_level + 1)
        text = _flatten(children[0]) if children else ""
        items.append(text)
    return tuple(items)


def _code_body(token: Token) -> str:
    content = token.content
    return content[:-1] if content.endswith("\n") else content


def _to_node(group: list[Token]) -> BlockNode:
    first = group[0]
    if first.type == "heading_open":
        return Heading(depth=int(first.tag[1:]), text=_flatten(group))
    if first.type == "paragraph_open":
        return Paragraph(text=_flatten(group))
    if first.type in _LIST_OPENERS:
        return BulletList(items=_list_items(group))
    if first.type in ("fence", "code_block"):
        info = first.info.strip().split()
        return CodeBlock(lang=info[0] if info else "", body=_code_body(first))
    return OtherBlock(text=_flatten(group))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_blocks(markdown: str) -> list[BlockNode]:
    """Parse *markdown* into its top-level block nodes, in document order.

    Raises:
        SectionParseError: If the tokeniser fails on the input.
    """
    try:
        tokens = _md.parse(markdown)
    except Exception as exc:  # noqa: BLE001
        raise SectionParseError(f"Failed to parse markdown structure: {exc}") from exc
    return [_to_node(group) for group in _group_blocks(tokens, 0)]
