"""
Markdown-lite renderer for assistant replies.

Handles the subset the assistant is prompted to produce:
  - # / ## / ### headings
  - "- " / "* " bullet lists
  - "1. " numbered lists
  - paragraphs, with **bold**, *italic* and `code` inline

Lines are processed once, top to bottom, tracking which list (if any) is
currently open. Blank lines are skipped without closing the list; any other
non-list line closes it.
"""

import re
import html
from enum import Enum
from dataclasses import dataclass, field
from typing import List


class ListState(Enum):
    """Which list the parser is currently inside."""
    NONE      = "none"
    UNORDERED = "ul"
    ORDERED   = "ol"


class BlockKind(Enum):
    HEADING        = "heading"
    UNORDERED_LIST = "ul"
    ORDERED_LIST   = "ol"
    PARAGRAPH      = "p"


@dataclass
class Block:
    kind: BlockKind
    # HEADING and PARAGRAPH hold one line, lists hold one entry per item
    lines: List[str] = field(default_factory=list)
    level: int = 0


# Longest marker first so "### x" is not read as "# ## x"
_HEADING_PREFIXES = (("### ", 3), ("## ", 2), ("# ", 1))
_BULLET_RE = re.compile(r'^[-*]\s')
_NUMBERED_RE = re.compile(r'^\d+\.\s')

_BOLD_RE = re.compile(r'\*\*(.*?)\*\*')
_ITALIC_RE = re.compile(r'\*(.*?)\*')
_CODE_RE = re.compile(r'`(.*?)`')

_LIST_BLOCK = {
    ListState.UNORDERED: BlockKind.UNORDERED_LIST,
    ListState.ORDERED: BlockKind.ORDERED_LIST,
}


def parse_blocks(text: str) -> List[Block]:
    """Split text into heading, list and paragraph blocks."""
    blocks: List[Block] = []
    state = ListState.NONE

    for line in text.split("\n"):
        heading = _match_heading(line)
        if heading:
            state = ListState.NONE
            level, content = heading
            blocks.append(Block(BlockKind.HEADING, [content], level))
            continue

        if _BULLET_RE.match(line):
            wanted, item = ListState.UNORDERED, _BULLET_RE.sub('', line, count=1)
        elif _NUMBERED_RE.match(line):
            wanted, item = ListState.ORDERED, _NUMBERED_RE.sub('', line, count=1)
        else:
            wanted, item = ListState.NONE, None

        if wanted is not ListState.NONE:
            if state is not wanted:
                blocks.append(Block(_LIST_BLOCK[wanted]))
                state = wanted
            blocks[-1].lines.append(item)
            continue

        if not line.strip():
            continue

        state = ListState.NONE
        blocks.append(Block(BlockKind.PARAGRAPH, [line]))

    return blocks


def _match_heading(line: str):
    for prefix, level in _HEADING_PREFIXES:
        if line.startswith(prefix):
            return level, line[len(prefix):]
    return None


def format_inline(text: str) -> str:
    """Apply bold, then italic, then code spans."""
    text = _BOLD_RE.sub(r'<strong>\1</strong>', text)
    text = _ITALIC_RE.sub(r'<em>\1</em>', text)
    return _CODE_RE.sub(r'<code>\1</code>', text)


def render_markdown(text: str) -> str:
    """
    Convert markdown-lite text into an HTML fragment.

    &, < and > are escaped before any pattern runs, so markup in the input
    is shown literally. Heading text is emitted without the inline pass.
    """
    if not text:
        return ""

    escaped = html.escape(text, quote=False)
    parts = []
    for block in parse_blocks(escaped):
        if block.kind is BlockKind.HEADING:
            parts.append(f"<h{block.level}>{block.lines[0]}</h{block.level}>")
        elif block.kind is BlockKind.PARAGRAPH:
            parts.append(f"<p>{format_inline(block.lines[0])}</p>")
        else:
            tag = block.kind.value
            items = "".join(f"<li>{format_inline(item)}</li>" for item in block.lines)
            parts.append(f"<{tag}>{items}</{tag}>")
    return "".join(parts)
