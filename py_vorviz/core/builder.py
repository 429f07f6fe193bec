"""
Diagram construction.

The sweep-line construction itself is delegated to ``pyvoronoi`` (Python
bindings for Boost.Polygon's Voronoi builder). This module feeds it the
sites in store order and converts its vertex, edge and cell lists into a
``VoronoiDiagram``.
"""

import pyvoronoi
import structlog

from .diagram import NO_INDEX, SourceCategory, VoronoiDiagram
from .sites import SiteStore

logger = structlog.get_logger()

# Builder source categories past the endpoint kinds all describe segments.
_CATEGORY_MAP = {
    0: SourceCategory.SINGLE_POINT,
    1: SourceCategory.SEGMENT_START_POINT,
    2: SourceCategory.SEGMENT_END_POINT,
}


def _cell_category(cell) -> SourceCategory:
    if cell.contains_segment:
        return SourceCategory.SEGMENT
    category = cell.source_category
    # Newer bindings expose the category as an enum member.
    category = getattr(category, 'value', category)
    return _CATEGORY_MAP[int(category)]


def _vertex_index(index) -> int:
    return NO_INDEX if index is None or index < 0 else int(index)


def construct_voronoi(store: SiteStore, scaling_factor: int = 1) -> VoronoiDiagram:
    """
    Build the Voronoi diagram of the store's points and segments.

    Args:
        store: Input sites; points are inserted before segments
        scaling_factor: Input multiplier applied by the builder for integer snapping

    Returns:
        Linked VoronoiDiagram with clean exterior tags
    """
    if store.is_empty:
        return VoronoiDiagram.empty()

    logger.info("Constructing Voronoi diagram",
                points=store.point_count, segments=store.segment_count)

    pv = pyvoronoi.Pyvoronoi(scaling_factor)
    for point in store.points:
        pv.AddPoint([point.x, point.y])
    for segment in store.segments:
        pv.AddSegment([[segment.low.x, segment.low.y], [segment.high.x, segment.high.y]])
    pv.Construct()

    vertices = pv.GetVertices()
    edges = pv.GetEdges()
    cells = pv.GetCells()

    diagram = VoronoiDiagram.from_cell_cycles(
        vertex_coordinates=[[v.X, v.Y] for v in vertices],
        cells=[(int(c.site), _cell_category(c)) for c in cells],
        edges=[(int(e.cell), int(e.twin), _vertex_index(e.start), _vertex_index(e.end),
                bool(e.is_primary), not bool(e.is_linear)) for e in edges],
        cell_edges=[[int(e) for e in c.edges] for c in cells],
    )

    logger.info("Voronoi diagram constructed",
                vertices=diagram.num_vertices, edges=diagram.num_edges, cells=diagram.num_cells)
    return diagram
