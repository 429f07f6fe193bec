"""
Half-edge Voronoi diagram stored as index arrays.

Vertices, cells and half-edges are addressed by integer indices. All
connectivity lives in parallel numpy arrays and ``-1`` stands for "none"
(a vertex at infinity, or a missing link). The two tag arrays,
``edge_exterior`` and ``vertex_exterior``, are the only state the geometry
pipeline writes.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from ..errors import DiagramContractError

NO_INDEX = -1


class SourceCategory(IntEnum):
    """Which part of an input site produced a cell."""
    SINGLE_POINT = 0
    SEGMENT_START_POINT = 1
    SEGMENT_END_POINT = 2
    SEGMENT = 8


@dataclass
class VoronoiDiagram:
    """Voronoi diagram arena.

    Edge ``e`` runs from ``edge_start[e]`` to ``edge_end[e]`` along the
    boundary of ``edge_cell[e]``; its twin borders the neighbouring cell in
    the opposite direction. ``edge_rot_next[e]`` is the next half-edge
    leaving the same start vertex.
    """
    # Vertex data
    vertex_coordinates: np.ndarray    # (n_vertices, 2) float64
    vertex_incident_edge: np.ndarray  # one half-edge leaving each vertex

    # Cell data
    cell_source_index: np.ndarray     # flat index into [points..., segments...]
    cell_source_category: np.ndarray  # SourceCategory values

    # Half-edge data
    edge_cell: np.ndarray
    edge_twin: np.ndarray
    edge_start: np.ndarray            # NO_INDEX when the edge starts at infinity
    edge_end: np.ndarray              # NO_INDEX when the edge ends at infinity
    edge_is_primary: np.ndarray
    edge_is_curved: np.ndarray
    edge_rot_next: np.ndarray

    # Mutable tags
    edge_exterior: np.ndarray = field(init=False)
    vertex_exterior: np.ndarray = field(init=False)

    def __post_init__(self):
        self.vertex_coordinates = np.asarray(self.vertex_coordinates, dtype=np.float64).reshape(-1, 2)
        for name in ('vertex_incident_edge', 'cell_source_index', 'edge_cell', 'edge_twin',
                     'edge_start', 'edge_end', 'edge_rot_next'):
            setattr(self, name, np.asarray(getattr(self, name), dtype=np.int64))
        self.cell_source_category = np.asarray(self.cell_source_category, dtype=np.int8)
        self.edge_is_primary = np.asarray(self.edge_is_primary, dtype=bool)
        self.edge_is_curved = np.asarray(self.edge_is_curved, dtype=bool)
        self.reset_tags()

    @classmethod
    def empty(cls) -> "VoronoiDiagram":
        ints = np.zeros(0, dtype=np.int64)
        return cls(
            vertex_coordinates=np.zeros((0, 2)),
            vertex_incident_edge=ints,
            cell_source_index=ints,
            cell_source_category=ints,
            edge_cell=ints,
            edge_twin=ints,
            edge_start=ints,
            edge_end=ints,
            edge_is_primary=np.zeros(0, dtype=bool),
            edge_is_curved=np.zeros(0, dtype=bool),
            edge_rot_next=ints,
        )

    @classmethod
    def from_cell_cycles(cls,
                         vertex_coordinates: Sequence[Sequence[float]],
                         cells: Sequence[Tuple[int, int]],
                         edges: Sequence[Tuple[int, int, int, int, bool, bool]],
                         cell_edges: Sequence[Sequence[int]]) -> "VoronoiDiagram":
        """
        Build a diagram from per-cell boundary cycles.

        Rotation links are derived from the cycles: ``rot_next(e)`` is the
        twin of the edge preceding ``e`` around its cell.

        Args:
            vertex_coordinates: ``[x, y]`` per vertex
            cells: ``(source_index, source_category)`` per cell
            edges: ``(cell, twin, start, end, is_primary, is_curved)`` per half-edge
            cell_edges: half-edge indices of each cell in boundary order

        Returns:
            Linked VoronoiDiagram

        Raises:
            DiagramContractError: if twins are not mutual or consecutive
                boundary edges do not share an endpoint
        """
        n_edges = len(edges)
        n_vertices = len(vertex_coordinates)

        if n_edges:
            cell, twin, start, end, primary, curved = (list(column) for column in zip(*edges))
        else:
            cell, twin, start, end, primary, curved = [], [], [], [], [], []

        for e in range(n_edges):
            if not 0 <= twin[e] < n_edges or twin[twin[e]] != e:
                raise DiagramContractError(f"Half-edge {e} has no mutual twin")

        prev = [NO_INDEX] * n_edges
        for cell_index, cycle in enumerate(cell_edges):
            for position, e in enumerate(cycle):
                if cell[e] != cell_index:
                    raise DiagramContractError(f"Half-edge {e} listed under cell {cell_index}, owned by {cell[e]}")
                following = cycle[(position + 1) % len(cycle)]
                if end[e] != start[following]:
                    raise DiagramContractError(
                        f"Half-edges {e} and {following} of cell {cell_index} are not connected")
                prev[following] = e

        rot_next = [twin[prev[e]] if prev[e] != NO_INDEX else NO_INDEX for e in range(n_edges)]

        incident = [NO_INDEX] * n_vertices
        for e in range(n_edges):
            if start[e] != NO_INDEX and incident[start[e]] == NO_INDEX:
                incident[start[e]] = e

        return cls(
            vertex_coordinates=np.asarray(vertex_coordinates, dtype=np.float64).reshape(-1, 2),
            vertex_incident_edge=incident,
            cell_source_index=[source_index for source_index, _ in cells],
            cell_source_category=[int(category) for _, category in cells],
            edge_cell=cell,
            edge_twin=twin,
            edge_start=start,
            edge_end=end,
            edge_is_primary=primary,
            edge_is_curved=curved,
            edge_rot_next=rot_next,
        )

    @property
    def num_vertices(self) -> int:
        return len(self.vertex_coordinates)

    @property
    def num_cells(self) -> int:
        return len(self.cell_source_index)

    @property
    def num_edges(self) -> int:
        return len(self.edge_cell)

    def reset_tags(self) -> None:
        """Clear the exterior tags on all edges and vertices."""
        self.edge_exterior = np.zeros(self.num_edges, dtype=bool)
        self.vertex_exterior = np.zeros(self.num_vertices, dtype=bool)

    def is_finite(self, edge: int) -> bool:
        return self.edge_start[edge] != NO_INDEX and self.edge_end[edge] != NO_INDEX

    def infinite_edges(self) -> List[int]:
        """Indices of half-edges with at least one endpoint at infinity."""
        mask = (self.edge_start == NO_INDEX) | (self.edge_end == NO_INDEX)
        return np.flatnonzero(mask).tolist()

    def contains_point(self, cell: int) -> bool:
        return self.cell_source_category[cell] != SourceCategory.SEGMENT

    def contains_segment(self, cell: int) -> bool:
        return self.cell_source_category[cell] == SourceCategory.SEGMENT

    def vertex(self, index: int) -> np.ndarray:
        return self.vertex_coordinates[index]

    def rotation(self, vertex: int) -> Iterator[int]:
        """Yield the half-edges leaving ``vertex`` in ``rot_next`` order."""
        first = int(self.vertex_incident_edge[vertex])
        if first == NO_INDEX:
            return

        edge = first
        for _ in range(self.num_edges):
            yield edge
            edge = int(self.edge_rot_next[edge])
            if edge == first:
                return
            if edge == NO_INDEX or self.edge_start[edge] != vertex:
                raise DiagramContractError(f"Rotation ring of vertex {vertex} is broken at half-edge {edge}")
        raise DiagramContractError(f"Rotation ring of vertex {vertex} does not close")
