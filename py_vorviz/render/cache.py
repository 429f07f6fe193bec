"""
Render geometry cache.

Four buffer groups are built lazily: input points, input segments, diagram
vertices and diagram edges. Each group remembers the generation it was
built for; bumping a group's generation releases its buffers and the next
read rebuilds it. A new scene bumps every group, a filter change bumps only
the vertex and edge groups.
"""

from contextlib import ExitStack
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
import structlog

from ..config import Settings, settings as default_settings
from ..core.bounding import BoundingRegion, ViewportMapper
from ..core.diagram import VoronoiDiagram
from ..core.geometry import resolve_edge
from ..core.sites import SiteRetriever, SiteStore
from .buffers import BufferHandle, Primitive, PrimitiveKind, RenderBackend

logger = structlog.get_logger()


@dataclass
class DiagramScene:
    """Everything a build produces that the cache renders from."""
    store: SiteStore
    region: BoundingRegion
    diagram: VoronoiDiagram
    viewport: ViewportMapper

    def __post_init__(self):
        self.retriever = SiteRetriever(self.store, self.diagram)


def polyline_to_line_list(polyline: np.ndarray) -> np.ndarray:
    """Expand ``[p0, p1, p2, ...]`` into segment pairs ``[p0, p1, p1, p2, ...]``."""
    polyline = np.asarray(polyline).reshape(-1, 2)
    if len(polyline) <= 2:
        return polyline
    pairs = np.empty((2 * (len(polyline) - 1), 2), dtype=polyline.dtype)
    pairs[0::2] = polyline[:-1]
    pairs[1::2] = polyline[1:]
    return pairs


class CacheGroup:
    """Lazily built list of primitives tied to a generation number.

    States: empty (never built or released), built (matches the current
    generation) and stale (built for an older generation).
    """

    def __init__(self, name: str, factory: Callable[[ExitStack], List[Primitive]]):
        self.name = name
        self.generation = 0
        self._factory = factory
        self._built_generation: Optional[int] = None
        self._primitives: List[Primitive] = []
        self._resources = ExitStack()

    @property
    def state(self) -> str:
        if self._built_generation is None:
            return "empty"
        return "built" if self._built_generation == self.generation else "stale"

    def invalidate(self) -> None:
        self.generation += 1
        self.release()

    def release(self) -> None:
        self._resources.close()
        self._resources = ExitStack()
        self._primitives = []
        self._built_generation = None

    def get(self) -> List[Primitive]:
        if self._built_generation == self.generation:
            return self._primitives

        self.release()
        with ExitStack() as stack:
            primitives = self._factory(stack)
            self._resources = stack.pop_all()
        self._primitives = primitives
        self._built_generation = self.generation
        logger.debug("Render group built", group=self.name,
                     generation=self.generation, primitives=len(primitives))
        return primitives


class RenderGeometryCache:
    """Owns the buffers for one visualizer."""

    def __init__(self, backend: RenderBackend, settings: Settings = None):
        self.backend = backend
        self.settings = settings or default_settings
        self.scene: Optional[DiagramScene] = None
        self.primary_edges_only = False
        self.internal_edges_only = False

        self.points_group = CacheGroup("points", self._build_points)
        self.segments_group = CacheGroup("segments", self._build_segments)
        self.vertices_group = CacheGroup("vertices", self._build_vertices)
        self.edges_group = CacheGroup("edges", self._build_edges)

    @property
    def groups(self) -> List[CacheGroup]:
        return [self.points_group, self.segments_group, self.vertices_group, self.edges_group]

    def reset(self, scene: Optional[DiagramScene]) -> None:
        """Switch to a new scene (or none), releasing every cached buffer."""
        self.scene = scene
        for group in self.groups:
            group.invalidate()

    def set_filters(self, primary_edges_only: bool, internal_edges_only: bool) -> None:
        """Update edge filters; only the vertex and edge groups depend on them."""
        if (primary_edges_only == self.primary_edges_only
                and internal_edges_only == self.internal_edges_only):
            return
        self.primary_edges_only = primary_edges_only
        self.internal_edges_only = internal_edges_only
        self.vertices_group.invalidate()
        self.edges_group.invalidate()

    def close(self) -> None:
        for group in self.groups:
            group.release()

    def points(self) -> List[Primitive]:
        """Circle fans around input points and segment endpoints."""
        return self.points_group.get()

    def segments(self) -> List[Primitive]:
        """A single line list holding every input segment."""
        return self.segments_group.get()

    def vertices(self) -> List[Primitive]:
        """Circle fans around diagram vertices that pass the filters."""
        return self.vertices_group.get()

    def edges(self) -> List[Primitive]:
        """One line list per half-edge that passes the filters."""
        return self.edges_group.get()

    def _primitive(self, stack: ExitStack, kind: PrimitiveKind, points: np.ndarray) -> Primitive:
        points = np.asarray(points, dtype=np.float32).reshape(-1, 2)
        handle = stack.enter_context(BufferHandle(self.backend, points))
        return Primitive(kind=kind, points=points, handle=handle)

    def _circle_fan(self, stack: ExitStack, center: np.ndarray, radius_px: float) -> Primitive:
        region = self.scene.region
        size = self.settings.viewport_size_px
        x_radius = radius_px * region.width / size
        y_radius = radius_px * region.height / size

        count = self.settings.circle_segments
        angles = np.arange(count + 1) * (2.0 * np.pi / count)
        fan = np.empty((count + 2, 2), dtype=np.float64)
        fan[0] = center
        fan[1:, 0] = center[0] + np.sin(angles) * x_radius
        fan[1:, 1] = center[1] + np.cos(angles) * y_radius
        return self._primitive(stack, PrimitiveKind.TRIANGLE_FAN, fan)

    def _build_points(self, stack: ExitStack) -> List[Primitive]:
        if self.scene is None:
            return []
        viewport = self.scene.viewport
        coordinates = list(self.scene.store.iter_coordinates())
        if not coordinates:
            return []
        centers = viewport.recenter(np.array(coordinates, dtype=np.float64))
        return [self._circle_fan(stack, center, self.settings.point_radius_px) for center in centers]

    def _build_segments(self, stack: ExitStack) -> List[Primitive]:
        if self.scene is None or not self.scene.store.segments:
            return []
        endpoints = np.array([[s.low.x, s.low.y, s.high.x, s.high.y] for s in self.scene.store.segments],
                             dtype=np.float64).reshape(-1, 2)
        return [self._primitive(stack, PrimitiveKind.LINE_LIST, self.scene.viewport.recenter(endpoints))]

    def _build_vertices(self, stack: ExitStack) -> List[Primitive]:
        if self.scene is None:
            return []
        diagram = self.scene.diagram
        keep = np.ones(diagram.num_vertices, dtype=bool)
        if self.internal_edges_only:
            keep &= ~diagram.vertex_exterior
        centers = self.scene.viewport.recenter(diagram.vertex_coordinates[keep])
        return [self._circle_fan(stack, center, self.settings.vertex_radius_px) for center in centers]

    def _build_edges(self, stack: ExitStack) -> List[Primitive]:
        if self.scene is None:
            return []
        scene = self.scene
        diagram = scene.diagram
        primitives = []
        for edge in range(diagram.num_edges):
            if self.primary_edges_only and not diagram.edge_is_primary[edge]:
                continue
            if self.internal_edges_only and diagram.edge_exterior[edge]:
                continue
            samples = resolve_edge(diagram, edge, scene.region, scene.retriever,
                                   self.settings.curve_tolerance)
            line_list = polyline_to_line_list(scene.viewport.recenter(samples))
            primitives.append(self._primitive(stack, PrimitiveKind.LINE_LIST, line_list))
        return primitives
