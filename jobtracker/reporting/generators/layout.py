"""
Page layout for the PDF renderer.

layout() decides where every line goes before anything is drawn, so page
breaks can be tested without a PDF. Positions are measured downward from the
top edge of the page.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit


@dataclass(frozen=True)
class TextStyle:
    font: str = "Helvetica"
    size: float = 10
    leading: float = 13
    align: str = "left"  # left | center
    indent: float = 0
    underline: bool = False


@dataclass(frozen=True)
class Paragraph:
    text: str
    style: TextStyle
    space_before: float = 0
    space_after: float = 0


@dataclass
class Block:
    """
    A logical unit (section, insight). Headings are kept on the same page as
    the first body line. break_if_below forces a new page when the block would
    start lower than that offset from the top.
    """
    headings: List[Paragraph] = field(default_factory=list)
    body: List[Paragraph] = field(default_factory=list)
    break_if_below: Optional[float] = None
    space_after: float = 0


@dataclass(frozen=True)
class PlacedLine:
    text: str
    x: float
    baseline: float
    style: TextStyle


@dataclass
class Page:
    number: int
    lines: List[PlacedLine] = field(default_factory=list)


@dataclass(frozen=True)
class PageGeometry:
    width: float = A4[0]
    height: float = A4[1]
    margin_top: float = 50
    margin_bottom: float = 50
    margin_left: float = 50
    margin_right: float = 50

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_bottom(self) -> float:
        return self.height - self.margin_bottom


WrapFn = Callable[[str, TextStyle, float], List[str]]


def wrap_text(text: str, style: TextStyle, width: float) -> List[str]:
    """Split text into lines that fit width using the font's real metrics."""
    lines: List[str] = []
    for raw_line in (text or "").splitlines() or [""]:
        lines.extend(simpleSplit(raw_line, style.font, style.size, width) or [""])
    return lines


def _paragraph_height(lines: List[str], paragraph: Paragraph) -> float:
    return paragraph.space_before + len(lines) * paragraph.style.leading + paragraph.space_after


def layout(blocks: List[Block], geometry: PageGeometry = PageGeometry(), wrap: WrapFn = wrap_text) -> List[Page]:
    """
    Assign every line of every block to a page position.

    Returns:
        Pages in order, numbered from 1. Always at least one page.
    """
    pages = [Page(number=1)]
    cursor = geometry.margin_top

    def new_page():
        nonlocal cursor
        pages.append(Page(number=len(pages) + 1))
        cursor = geometry.margin_top

    for block in blocks:
        headings = [(p, wrap(p.text, p.style, geometry.content_width - p.style.indent)) for p in block.headings]
        body = [(p, wrap(p.text, p.style, geometry.content_width - p.style.indent)) for p in block.body]

        at_top = cursor == geometry.margin_top
        if block.break_if_below is not None and cursor > block.break_if_below and not at_top:
            new_page()
            at_top = True

        # Lookahead: headings plus the first body line must fit together
        needed = sum(_paragraph_height(lines, p) for p, lines in headings)
        if body:
            needed += body[0][0].space_before + body[0][0].style.leading
        if cursor + needed > geometry.content_bottom and not at_top:
            new_page()

        for paragraph, lines in headings + body:
            cursor += paragraph.space_before
            for text in lines:
                if cursor + paragraph.style.leading > geometry.content_bottom and cursor > geometry.margin_top:
                    new_page()
                pages[-1].lines.append(PlacedLine(
                    text=text,
                    x=geometry.margin_left + paragraph.style.indent,
                    baseline=cursor + paragraph.style.size,
                    style=paragraph.style,
                ))
                cursor += paragraph.style.leading
            cursor += paragraph.space_after

        cursor += block.space_after

    return pages
