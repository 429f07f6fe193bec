"""
Edge geometry: turns half-edges into finite polylines.

Finite straight edges pass through unchanged. Unbounded edges are clipped
to a point beyond the bounding region. Curved edges (between a point site
and a segment site) are sampled along their parabolic arc.
"""

import numpy as np

from ..errors import DiagramContractError
from .bounding import BoundingRegion
from .diagram import NO_INDEX, VoronoiDiagram
from .discretize import discretize_parabola
from .sites import SiteRetriever


def clip_infinite_edge(diagram: VoronoiDiagram, edge: int,
                       region: BoundingRegion, retriever: SiteRetriever) -> np.ndarray:
    """
    Clip an unbounded half-edge.

    The missing endpoints are placed along the edge's asymptotic ray far
    enough to lie outside ``region``; existing vertices are kept.

    Returns:
        ``(2, 2)`` array ``[start, end]``
    """
    cell1 = int(diagram.edge_cell[edge])
    cell2 = int(diagram.edge_cell[diagram.edge_twin[edge]])

    # Two segment sites never produce an unbounded edge.
    if diagram.contains_point(cell1) and diagram.contains_point(cell2):
        p1 = retriever.resolve_point(cell1)
        p2 = retriever.resolve_point(cell2)
        origin = np.array([(p1.x + p2.x) * 0.5, (p1.y + p2.y) * 0.5], dtype=np.float64)
        direction = np.array([p1.y - p2.y, p2.x - p1.x], dtype=np.float64)
    elif diagram.contains_point(cell1) or diagram.contains_point(cell2):
        point_cell, segment_cell = (cell2, cell1) if diagram.contains_segment(cell1) else (cell1, cell2)
        point = retriever.resolve_point(point_cell)
        segment = retriever.resolve_segment(segment_cell)
        origin = np.array(point, dtype=np.float64)
        dx = float(segment.high.x - segment.low.x)
        dy = float(segment.high.y - segment.low.y)
        if (segment.low == point) ^ diagram.contains_point(cell1):
            direction = np.array([dy, -dx])
        else:
            direction = np.array([-dy, dx])
    else:
        raise DiagramContractError(f"Unbounded half-edge {edge} separates two segment cells")

    extent = np.max(np.abs(direction))
    if extent == 0:
        raise DiagramContractError(f"Unbounded half-edge {edge} has coincident sites")
    koef = region.width / extent

    start = int(diagram.edge_start[edge])
    end = int(diagram.edge_end[edge])
    clipped = np.empty((2, 2), dtype=np.float64)
    clipped[0] = origin - direction * koef if start == NO_INDEX else diagram.vertex(start)
    clipped[1] = origin + direction * koef if end == NO_INDEX else diagram.vertex(end)
    return clipped


def sample_curved_edge(diagram: VoronoiDiagram, edge: int, region: BoundingRegion,
                       retriever: SiteRetriever, curve_tolerance: float = 1e-3) -> np.ndarray:
    """Sample a finite curved half-edge to within ``curve_tolerance * region.width``."""
    max_dist = curve_tolerance * region.width
    cell = int(diagram.edge_cell[edge])
    twin_cell = int(diagram.edge_cell[diagram.edge_twin[edge]])

    if diagram.contains_point(cell):
        point = retriever.resolve_point(cell)
        segment = retriever.resolve_segment(twin_cell)
    else:
        point = retriever.resolve_point(twin_cell)
        segment = retriever.resolve_segment(cell)

    return discretize_parabola(point, segment,
                               diagram.vertex(int(diagram.edge_start[edge])),
                               diagram.vertex(int(diagram.edge_end[edge])),
                               max_dist)


def resolve_edge(diagram: VoronoiDiagram, edge: int, region: BoundingRegion,
                 retriever: SiteRetriever, curve_tolerance: float = 1e-3) -> np.ndarray:
    """
    Resolve a half-edge into an ordered polyline.

    Args:
        diagram: Diagram holding the edge
        edge: Half-edge index
        region: Bounding region used for clipping and sampling tolerance
        retriever: Lookup from cells to input sites
        curve_tolerance: Arc deviation bound relative to the region width

    Returns:
        ``(n, 2)`` float64 array from the edge's start to its end, ``n >= 2``
    """
    if not diagram.is_finite(edge):
        return clip_infinite_edge(diagram, edge, region, retriever)

    if diagram.edge_is_curved[edge]:
        return sample_curved_edge(diagram, edge, region, retriever, curve_tolerance)

    return np.array([diagram.vertex(int(diagram.edge_start[edge])),
                     diagram.vertex(int(diagram.edge_end[edge]))], dtype=np.float64)
