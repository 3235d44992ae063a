#!/usr/bin/env python3
"""
Markdown AST Parser and Block Extractor

This module turns markdown text into a flat stream of top-level blocks
(headings, paragraphs, fenced code blocks and bullet lists) using
markdown-it-py for tokenization.

Key Features:
- Parse markdown to AST using markdown-it-py
- Reduce the token stream to top-level blocks with source line numbers
- Render inline tokens to plain text (markup removed)
"""

from dataclasses import dataclass, field
from typing import List, Union

from markdown_it import MarkdownIt
from markdown_it.token import Token


@dataclass
class Heading:
    """
    A top-level ATX or setext heading.

    Attributes:
        level: Heading level (1 for H1, 2 for H2, etc.)
        text: Plain heading text
        line: Starting line number (0-based)
    """
    level: int
    text: str
    line: int


@dataclass
class Paragraph:
    """A top-level paragraph rendered to plain text."""
    text: str
    line: int


@dataclass
class FencedCodeBlock:
    """
    A fenced code block.

    Attributes:
        language: First word of the fence info string ("" when absent)
        body: Code block contents, including the trailing newline
        line: Starting line number (0-based)
    """
    language: str
    body: str
    line: int


@dataclass
class ListItem:
    """First paragraph of a bullet list item, as raw inline source and plain text."""
    source: str
    text: str
    line: int


@dataclass
class BulletList:
    """A top-level bullet list."""
    items: List[ListItem] = field(default_factory=list)
    line: int = 0


Block = Union[Heading, Paragraph, FencedCodeBlock, BulletList]


# Module-level markdown-it instance shared by all parses
_md = MarkdownIt()


def parse_markdown(text: str) -> List[Token]:
    """
    Parse markdown text to AST tokens.

    Args:
        text: Markdown text to parse

    Returns:
        List of markdown-it-py tokens representing the AST

    Example:
        >>> tokens = parse_markdown("# Title\\n\\nParagraph text.")
        >>> len(tokens) > 0
        True
    """
    return _md.parse(text)


def inline_text(token: Token) -> str:
    """
    Render an inline token to plain text.

    Emphasis, link and code span markers are dropped; code span contents,
    text and inline HTML are kept; line breaks become single spaces.

    Example:
        >>> tokens = parse_markdown("Import `aws_thing` using the **id**.")
        >>> inline_text(tokens[1])
        'Import aws_thing using the id.'
    """
    parts = []
    for child in token.children or []:
        if child.type in ("text", "code_inline", "html_inline"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
        elif child.type == "image":
            parts.append(inline_text(child))
    return "".join(parts).strip()


def _line(token: Token) -> int:
    return token.map[0] if token.map else 0


def extract_blocks(tokens: List[Token]) -> List[Block]:
    """
    Reduce a token stream to its top-level blocks in document order.

    Only blocks at nesting level 0 are returned: paragraphs inside list
    items or blockquotes are part of their container, not blocks of their
    own. Bullet lists carry the first paragraph of each of their items.

    Args:
        tokens: Markdown AST tokens from parse_markdown()

    Returns:
        List of Heading, Paragraph, FencedCodeBlock and BulletList objects

    Example:
        >>> blocks = extract_blocks(parse_markdown("## Args\\n\\nByline.\\n\\n* `a` - A."))
        >>> [type(b).__name__ for b in blocks]
        ['Heading', 'Paragraph', 'BulletList']
    """
    blocks: List[Block] = []
    index = 0

    while index < len(tokens):
        token = tokens[index]

        if token.level != 0:
            index += 1
            continue

        if token.type == "heading_open":
            # heading_open, inline, heading_close
            blocks.append(Heading(
                level=int(token.tag[1]),
                text=inline_text(tokens[index + 1]),
                line=_line(token),
            ))
            index += 3
        elif token.type == "paragraph_open":
            blocks.append(Paragraph(text=inline_text(tokens[index + 1]), line=_line(token)))
            index += 3
        elif token.type == "fence":
            info = token.info.strip()
            blocks.append(FencedCodeBlock(
                language=info.split()[0] if info else "",
                body=token.content,
                line=_line(token),
            ))
            index += 1
        elif token.type == "bullet_list_open":
            bullet_list, index = _extract_bullet_list(tokens, index)
            blocks.append(bullet_list)
        else:
            index += 1

    return blocks


def _extract_bullet_list(tokens: List[Token], start: int):
    """Collect a top-level bullet list starting at tokens[start]; return it and the next index."""
    bullet_list = BulletList(line=_line(tokens[start]))
    awaiting_item_text = False
    index = start + 1

    while index < len(tokens):
        token = tokens[index]

        if token.type == "bullet_list_close" and token.level == 0:
            return bullet_list, index + 1

        if token.type == "list_item_open" and token.level == 1:
            awaiting_item_text = True
        elif token.type == "inline" and awaiting_item_text:
            bullet_list.items.append(ListItem(
                source=token.content,
                text=inline_text(token),
                line=_line(token),
            ))
            awaiting_item_text = False

        index += 1

    return bullet_list, index


def parse_blocks(text: str) -> List[Block]:
    """Parse markdown text straight to top-level blocks."""
    return extract_blocks(parse_markdown(text))
