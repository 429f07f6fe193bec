"""
Input sites: points and segments, their text format and cell lookups.

Sites keep their insertion order. The diagram builder receives all points
first and all segments after them, so a cell's source index is a flat index
into ``[points..., segments...]``. ``SiteRetriever`` turns that index back
into coordinates.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, NamedTuple, Tuple

import structlog

from ..errors import DiagramContractError, SiteFileError
from .diagram import SourceCategory, VoronoiDiagram

logger = structlog.get_logger()


class Point(NamedTuple):
    """Input point or resolved diagram coordinate."""
    x: float
    y: float


class Segment(NamedTuple):
    """Input segment with ordered endpoints."""
    low: Point
    high: Point

    @classmethod
    def from_endpoints(cls, a: Point, b: Point) -> "Segment":
        """Build a segment whose ``low`` endpoint sorts first (x, then y)."""
        if (b.x, b.y) < (a.x, a.y):
            a, b = b, a
        return cls(Point(*a), Point(*b))


@dataclass
class SiteStore:
    """Ordered input sites for one build."""
    points: List[Point] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)

    @property
    def point_count(self) -> int:
        return len(self.points)

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.points and not self.segments

    def iter_coordinates(self) -> Iterator[Point]:
        """Yield every input coordinate: points, then segment endpoints."""
        yield from self.points
        for segment in self.segments:
            yield segment.low
            yield segment.high


def _take_ints(tokens: List[str], position: int, count: int, what: str) -> Tuple[List[int], int]:
    end = position + count
    if end > len(tokens):
        raise SiteFileError(f"Unexpected end of input while reading {what}")
    try:
        values = [int(token) for token in tokens[position:end]]
    except ValueError as e:
        raise SiteFileError(f"Malformed number while reading {what}: {e}") from e
    return values, end


def parse_sites(text: str) -> SiteStore:
    """
    Parse the whitespace separated site format.

    The stream holds a point count followed by that many ``x y`` pairs, then
    a segment count followed by that many ``x1 y1 x2 y2`` quadruples. A
    missing segment count is read as zero segments.

    Args:
        text: Raw file contents

    Returns:
        SiteStore with points and normalized segments

    Raises:
        SiteFileError: on non-integer tokens, negative counts or short input
    """
    tokens = text.split()
    store = SiteStore()
    position = 0

    if not tokens:
        return store

    (num_points,), position = _take_ints(tokens, position, 1, "point count")
    if num_points < 0:
        raise SiteFileError(f"Negative point count: {num_points}")
    for i in range(num_points):
        (x, y), position = _take_ints(tokens, position, 2, f"point {i}")
        store.points.append(Point(x, y))

    if position == len(tokens):
        return store

    (num_segments,), position = _take_ints(tokens, position, 1, "segment count")
    if num_segments < 0:
        raise SiteFileError(f"Negative segment count: {num_segments}")
    for i in range(num_segments):
        (x1, y1, x2, y2), position = _take_ints(tokens, position, 4, f"segment {i}")
        store.segments.append(Segment.from_endpoints(Point(x1, y1), Point(x2, y2)))

    if position != len(tokens):
        logger.warning("Ignoring trailing tokens", count=len(tokens) - position)

    return store


def read_sites(path) -> SiteStore:
    """Read and parse a site file; unreadable files raise ``SiteFileError``."""
    path = Path(path)
    try:
        text = path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise SiteFileError(f"Unable to open file {path}: {e}") from e

    store = parse_sites(text)
    logger.info("Sites loaded", path=str(path),
                points=store.point_count, segments=store.segment_count)
    return store


class SiteRetriever:
    """Resolves diagram cells back to the sites that produced them."""

    def __init__(self, store: SiteStore, diagram: VoronoiDiagram):
        self.store = store
        self.diagram = diagram

    def _segment_at(self, cell: int) -> Segment:
        index = int(self.diagram.cell_source_index[cell]) - self.store.point_count
        if not 0 <= index < self.store.segment_count:
            raise DiagramContractError(
                f"Cell {cell} refers to segment {index}, "
                f"store holds {self.store.segment_count}")
        return self.store.segments[index]

    def resolve_point(self, cell: int) -> Point:
        """Return the point site of ``cell`` (a point or a segment endpoint)."""
        category = int(self.diagram.cell_source_category[cell])

        if category == SourceCategory.SINGLE_POINT:
            index = int(self.diagram.cell_source_index[cell])
            if not 0 <= index < self.store.point_count:
                raise DiagramContractError(
                    f"Cell {cell} refers to point {index}, "
                    f"store holds {self.store.point_count}")
            return self.store.points[index]

        segment = self._segment_at(cell)
        if category == SourceCategory.SEGMENT_START_POINT:
            return segment.low
        if category == SourceCategory.SEGMENT_END_POINT:
            return segment.high
        raise DiagramContractError(f"Cell {cell} does not contain a point (category {category})")

    def resolve_segment(self, cell: int) -> Segment:
        """Return the segment site of ``cell``; point cells are a contract breach."""
        category = int(self.diagram.cell_source_category[cell])
        if category != SourceCategory.SEGMENT:
            raise DiagramContractError(f"Cell {cell} does not contain a segment (category {category})")
        return self._segment_at(cell)
