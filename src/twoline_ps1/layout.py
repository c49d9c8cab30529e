"""
Composition of fixed-width status lines out of colored segments

A line is described by a *plan*: an ordered list of `Segment`\\s, each
carrying both a plain and a colored rendition of the same text, interspersed
with `Filler` placeholders that stretch to take up whatever width the fixed
segments leave over.  `compose()` resolves the fillers and concatenates both
renditions side by side so that the colored line, once stripped of its escape
sequences, is identical to the plain one.
"""

from __future__ import annotations
from dataclasses import dataclass
from .styles import Painter
from .styles import StyleClass as SC
from .util import strip_ansi, visible_width


@dataclass(frozen=True)
class Segment:
    #: The text as it occupies the terminal
    plain: str

    #: The same text with color escape sequences embedded
    decorated: str

    def __post_init__(self) -> None:
        if visible_width(self.decorated) != len(self.plain):
            raise ValueError(
                f"Decorated text {self.decorated!r} does not have the same"
                f" width as plain text {self.plain!r}"
            )

    @classmethod
    def painted(cls, s: str, paint: Painter, klass: SC) -> Segment:
        return cls(s, paint(s, klass))

    @classmethod
    def from_colored(cls, s: str, paint: Painter) -> Segment:
        """
        Construct a segment from text that was colored by an external program
        """
        return cls(strip_ansi(s), paint.passthrough(s))

    @property
    def width(self) -> int:
        return len(self.plain)

    def __bool__(self) -> bool:
        return self.plain != ""

    def __add__(self, other: Segment) -> Segment:
        return Segment(self.plain + other.plain, self.decorated + other.decorated)

    def __mul__(self, n: int) -> Segment:
        return Segment(self.plain * n, self.decorated * n)


#: A segment with no content; omitted from any line it is placed in
EMPTY = Segment("", "")


@dataclass(frozen=True)
class Filler:
    """
    A run of ``glyph`` repeated as many times as needed to pad a line out to
    its full width.  A filler is always at least one glyph long.
    """

    glyph: Segment


PlanItem = Segment | Filler


@dataclass(frozen=True)
class Glyphs:
    """The single-column decorations used to frame the fields of the prompt"""

    spacer: Segment
    lbracket: Segment
    rbracket: Segment
    lbrace: Segment
    rbrace: Segment
    langle: Segment
    rangle: Segment
    space: Segment

    @classmethod
    def build(cls, paint: Painter) -> Glyphs:
        """
        Paint the glyphs once; this must happen after the color mode has been
        decided
        """

        def glyph(c: str) -> Segment:
            return Segment.painted(c, paint, SC.DEFAULT)

        return cls(
            spacer=glyph("-"),
            lbracket=glyph("["),
            rbracket=glyph("]"),
            lbrace=glyph("{"),
            rbrace=glyph("}"),
            langle=glyph("<"),
            rangle=glyph(">"),
            space=Segment(" ", " "),
        )


def fixed_width(items: list[PlanItem]) -> int:
    """Return the total width of all non-filler items in a plan"""
    return sum(item.width for item in items if isinstance(item, Segment))


def filler_counts(width: int, items: list[PlanItem]) -> list[int]:
    """
    Determine how many glyphs each filler in ``items`` expands to so that the
    line is ``width`` columns wide.  The leftover width is split evenly among
    the fillers, with the leftmost ones taking any remainder, and every filler
    gets at least one glyph even if the line then overflows.
    """
    n = sum(1 for item in items if isinstance(item, Filler))
    if n == 0:
        return []
    slack = width - fixed_width(items)
    base, extra = divmod(max(slack, 0), n)
    return [max(1, base + (1 if i < extra else 0)) for i in range(n)]


def compose(width: int, items: list[PlanItem]) -> Segment:
    """
    Lay out a plan as a single line ``width`` columns wide, returning the
    plain and colored renditions of the line as a `Segment`.  Empty segments
    are dropped.  Content that is too wide by itself is never cut; callers
    must truncate fields before composing, and any overflow simply wraps.
    """
    items = [item for item in items if isinstance(item, Filler) or item]
    counts = iter(filler_counts(width, items))
    line = EMPTY
    for item in items:
        if isinstance(item, Filler):
            line += item.glyph * next(counts)
        else:
            line += item
    return line
