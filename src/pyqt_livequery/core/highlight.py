"""Split result labels into matched / unmatched segments for rendering."""

import html
import re
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class HighlightSegment:
    text: str
    is_match: bool


def split_highlight(text: str, query: str) -> List[HighlightSegment]:
    """
    Split text around case-insensitive occurrences of query.

    Args:
        text: Label to render
        query: Raw user query (regex characters are matched literally)

    Returns:
        Segments in order; concatenating their text yields the input text
    """
    needle = query.strip()
    if not needle or not text:
        return [HighlightSegment(text, False)] if text else []

    pattern = re.compile(re.escape(needle), re.IGNORECASE)
    segments = []
    pos = 0
    for match in pattern.finditer(text):
        if match.start() > pos:
            segments.append(HighlightSegment(text[pos:match.start()], False))
        segments.append(HighlightSegment(match.group(0), True))
        pos = match.end()
    if pos < len(text):
        segments.append(HighlightSegment(text[pos:], False))
    return segments


def highlight_html(text: str, query: str, tag: str = "b") -> str:
    """Render text as escaped rich text with matches wrapped in <tag>."""
    parts = []
    for segment in split_highlight(text, query):
        escaped = html.escape(segment.text)
        parts.append(f"<{tag}>{escaped}</{tag}>" if segment.is_match else escaped)
    return "".join(parts)
