"""
Voronoi visualizer component.

Owns the sites, the diagram and the render cache for one drawing surface.
``build`` recomputes everything from an input file; the edge filters only
rebuild the vertex and edge buffers; ``frame`` is what a redraw tick reads.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

import structlog

from .config import Settings, settings as default_settings
from .core.bounding import BoundingRegion, ViewportMapper, compute_bounding_region
from .core.diagram import VoronoiDiagram
from .core.exterior import mark_exterior
from .core.sites import SiteStore, read_sites
from .render.buffers import HostMemoryBackend, Primitive, RenderBackend
from .render.cache import DiagramScene, RenderGeometryCache

logger = structlog.get_logger()

DiagramBuilder = Callable[[SiteStore], VoronoiDiagram]


def construct_diagram(store: SiteStore) -> VoronoiDiagram:
    """Default builder: the Boost.Polygon sweep line through pyvoronoi."""
    from .core.builder import construct_voronoi
    return construct_voronoi(store)


class EdgeFilter(str, Enum):
    """Visibility filters that can be toggled from the host."""
    PRIMARY_ONLY = "primary_only"
    INTERNAL_ONLY = "internal_only"


@dataclass
class RenderFrame:
    """Snapshot of the cache for one redraw."""
    viewport: ViewportMapper
    points: List[Primitive]
    segments: List[Primitive]
    vertices: List[Primitive]
    edges: List[Primitive]

    def groups(self) -> Dict[str, List[Primitive]]:
        return {
            "points": self.points,
            "segments": self.segments,
            "vertices": self.vertices,
            "edges": self.edges,
        }


class VoronoiVisualizer:
    """Builds diagrams from site files and serves their render buffers."""

    def __init__(self, backend: Optional[RenderBackend] = None,
                 settings: Optional[Settings] = None,
                 builder: Optional[DiagramBuilder] = None):
        self.settings = settings or default_settings
        self.backend = backend if backend is not None else HostMemoryBackend()
        self.builder = builder or construct_diagram
        self.primary_edges_only = False
        self.internal_edges_only = False

        self.store = SiteStore()
        self.region: Optional[BoundingRegion] = None
        self.diagram: Optional[VoronoiDiagram] = None
        self.viewport = ViewportMapper.identity()
        self.cache = RenderGeometryCache(self.backend, self.settings)

    def clear(self) -> None:
        """Drop the current diagram and release all buffers."""
        self.store = SiteStore()
        self.region = None
        self.diagram = None
        self.viewport = ViewportMapper.identity()
        self.cache.reset(None)

    def build(self, file_path) -> None:
        """
        Rebuild everything from a site file.

        The file is read before any state is touched, so an unreadable or
        malformed file leaves the current diagram in place.

        Raises:
            SiteFileError: if the file cannot be read or parsed
        """
        store = read_sites(file_path)
        self.build_sites(store)

    def build_sites(self, store: SiteStore) -> None:
        """Rebuild everything from in-memory sites; no sites clears the view."""
        self.clear()
        if store.is_empty:
            logger.info("No sites to build")
            return

        region = compute_bounding_region(store, self.settings.region_bloat_factor)
        diagram = self.builder(store)
        mark_exterior(diagram)

        self.store = store
        self.region = region
        self.diagram = diagram
        self.viewport = ViewportMapper.from_region(region)
        self.cache.reset(DiagramScene(store=store, region=region, diagram=diagram, viewport=self.viewport))

        logger.info("Diagram built", points=store.point_count, segments=store.segment_count,
                    vertices=diagram.num_vertices, edges=diagram.num_edges)

    def toggle(self, edge_filter: EdgeFilter) -> None:
        """Flip one visibility filter."""
        edge_filter = EdgeFilter(edge_filter)
        if edge_filter is EdgeFilter.PRIMARY_ONLY:
            self.primary_edges_only = not self.primary_edges_only
        else:
            self.internal_edges_only = not self.internal_edges_only
        self.cache.set_filters(self.primary_edges_only, self.internal_edges_only)
        logger.debug("Filter toggled", filter=edge_filter.value,
                     primary_edges_only=self.primary_edges_only,
                     internal_edges_only=self.internal_edges_only)

    def show_primary_edges_only(self) -> None:
        self.toggle(EdgeFilter.PRIMARY_ONLY)

    def show_internal_edges_only(self) -> None:
        self.toggle(EdgeFilter.INTERNAL_ONLY)

    @property
    def view_transform(self):
        """Current 4x4 view matrix."""
        return self.viewport.matrix

    def frame(self) -> RenderFrame:
        """Cached primitives for the next redraw, built on first use."""
        return RenderFrame(
            viewport=self.viewport,
            points=self.cache.points(),
            segments=self.cache.segments(),
            vertices=self.cache.vertices(),
            edges=self.cache.edges(),
        )

    def close(self) -> None:
        self.cache.close()
