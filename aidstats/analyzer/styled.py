"""
Styled text segments produced by the report assembler.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from rich.text import Text


@dataclass(frozen=True)
class SegmentStyle:
    """Font emphasis and color of a text segment."""

    bold: bool = False
    underline: bool = False
    color: Optional[str] = None

    @property
    def rich_style(self) -> str:
        """Get the equivalent rich style string ("" for plain text)."""
        parts = []
        if self.bold:
            parts.append("bold")
        if self.underline:
            parts.append("underline")
        if self.color:
            parts.append(self.color)
        return " ".join(parts)


PLAIN = SegmentStyle()
NAME_STYLE = SegmentStyle(bold=True, color="blue")
TITLE_STYLE = SegmentStyle(bold=True, color="blue")
ALERT_TITLE_STYLE = SegmentStyle(bold=True, color="red")
HEADER_STYLE = SegmentStyle(bold=True, underline=True)
TOTAL_STYLE = SegmentStyle(bold=True)


@dataclass(frozen=True)
class StyledSegment:
    text: str
    style: SegmentStyle = PLAIN


class SegmentBuilder:
    """Accumulates styled segments, merging adjacent plain text."""

    def __init__(self):
        self.segments: List[StyledSegment] = []

    def append(self, text: str, style: SegmentStyle = PLAIN) -> "SegmentBuilder":
        if not text:
            return self
        if style == PLAIN and self.segments and self.segments[-1].style == PLAIN:
            self.segments[-1] = StyledSegment(self.segments[-1].text + text, PLAIN)
        else:
            self.segments.append(StyledSegment(text, style))
        return self

    def line(self, text: str = "", style: SegmentStyle = PLAIN) -> "SegmentBuilder":
        """Append text followed by a newline; the newline itself is unstyled."""
        self.append(text, style)
        return self.append("\n")

    def __len__(self) -> int:
        return len(self.segments)


def to_rich_text(segments: Iterable[StyledSegment]) -> Text:
    """Render segments as a single rich Text document."""
    text = Text()
    for segment in segments:
        text.append(segment.text, style=segment.style.rich_style or None)
    return text


def to_plain_text(segments: Iterable[StyledSegment]) -> str:
    return "".join(segment.text for segment in segments)
