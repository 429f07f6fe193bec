"""Shared fixtures: small hand-built diagrams with known geometry."""

import pytest

from py_vorviz.config import Settings
from py_vorviz.core.diagram import NO_INDEX, SourceCategory, VoronoiDiagram
from py_vorviz.core.sites import Point, Segment, SiteStore

SP = SourceCategory.SINGLE_POINT


@pytest.fixture
def test_settings():
    """Settings independent of the environment."""
    return Settings(log_level="WARNING", viewport_size_px=600, point_radius_px=4.5,
                    vertex_radius_px=3.0, circle_segments=20, region_bloat_factor=1.2,
                    curve_tolerance=1e-3)


@pytest.fixture
def square_store():
    """Four corners of a 10x10 square, no segments."""
    return SiteStore(points=[Point(0, 0), Point(10, 0), Point(0, 10), Point(10, 10)])


def build_square_diagram():
    """Voronoi diagram of the square corners: one vertex at (5, 5), four rays.

    Each cell is walked counter-clockwise; rays arrive from or leave to
    infinity along x = 5 and y = 5.
    """
    return VoronoiDiagram.from_cell_cycles(
        vertex_coordinates=[[5.0, 5.0]],
        cells=[(0, SP), (1, SP), (2, SP), (3, SP)],
        edges=[
            (0, 3, NO_INDEX, 0, True, False),  # 0: x=5 below, up to the vertex
            (0, 6, 0, NO_INDEX, True, False),  # 1: y=5 leaving to the left
            (1, 5, NO_INDEX, 0, True, False),  # 2: y=5 arriving from the right
            (1, 0, 0, NO_INDEX, True, False),  # 3: x=5 leaving downwards
            (3, 7, NO_INDEX, 0, True, False),  # 4: x=5 arriving from above
            (3, 2, 0, NO_INDEX, True, False),  # 5: y=5 leaving to the right
            (2, 1, NO_INDEX, 0, True, False),  # 6: y=5 arriving from the left
            (2, 4, 0, NO_INDEX, True, False),  # 7: x=5 leaving upwards
        ],
        cell_edges=[[0, 1], [2, 3], [6, 7], [4, 5]],
    )


@pytest.fixture
def square_diagram():
    return build_square_diagram()


@pytest.fixture
def segment_store():
    """A single horizontal segment from (0, 0) to (10, 0)."""
    return SiteStore(segments=[Segment(Point(0, 0), Point(10, 0))])


@pytest.fixture
def segment_diagram():
    """Secondary ray between the segment's start point and the segment itself."""
    return VoronoiDiagram(
        vertex_coordinates=[[0.0, 0.0]],
        vertex_incident_edge=[1],
        cell_source_index=[0, 0],
        cell_source_category=[SourceCategory.SEGMENT_START_POINT, SourceCategory.SEGMENT],
        edge_cell=[0, 1],
        edge_twin=[1, 0],
        edge_start=[NO_INDEX, 0],
        edge_end=[0, NO_INDEX],
        edge_is_primary=[False, False],
        edge_is_curved=[False, False],
        edge_rot_next=[NO_INDEX, 1],
    )


@pytest.fixture
def chain_diagram():
    """A primary ray into vertex A, then a non-primary edge from A to B."""
    return VoronoiDiagram(
        vertex_coordinates=[[0.0, 0.0], [1.0, 0.0]],
        vertex_incident_edge=[1, 3],
        cell_source_index=[0],
        cell_source_category=[SP],
        edge_cell=[0, 0, 0, 0],
        edge_twin=[1, 0, 3, 2],
        edge_start=[NO_INDEX, 0, 0, 1],
        edge_end=[0, NO_INDEX, 1, 0],
        edge_is_primary=[True, True, False, False],
        edge_is_curved=[False, False, False, False],
        edge_rot_next=[NO_INDEX, 2, 1, 3],
    )


@pytest.fixture
def curved_store():
    """Point above the middle of a horizontal segment."""
    return SiteStore(points=[Point(0, 5)], segments=[Segment(Point(-10, 0), Point(10, 0))])


@pytest.fixture
def curved_diagram():
    """Parabolic arc y = (x^2 + 25) / 10 between x = -10 and x = 10."""
    return VoronoiDiagram(
        vertex_coordinates=[[-10.0, 12.5], [10.0, 12.5]],
        vertex_incident_edge=[0, 1],
        cell_source_index=[0, 1],
        cell_source_category=[SP, SourceCategory.SEGMENT],
        edge_cell=[0, 1],
        edge_twin=[1, 0],
        edge_start=[0, 1],
        edge_end=[1, 0],
        edge_is_primary=[True, True],
        edge_is_curved=[True, True],
        edge_rot_next=[0, 1],
    )
