"""
Bounding region and view transform.

The bounding region is a square around all input sites. Its centre doubles
as the shift applied to geometry before rendering, and its width sets the
clipping length for unbounded edges and the sampling tolerance for curved
ones.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import structlog

from .sites import SiteStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class BoundingRegion:
    """Axis-aligned rectangle ``[xl, xh] x [yl, yh]``."""
    xl: float
    yl: float
    xh: float
    yh: float

    @property
    def width(self) -> float:
        return self.xh - self.xl

    @property
    def height(self) -> float:
        return self.yh - self.yl

    @property
    def center(self) -> Tuple[float, float]:
        return (self.xl + self.xh) * 0.5, (self.yl + self.yh) * 0.5

    def contains(self, x: float, y: float) -> bool:
        return self.xl <= x <= self.xh and self.yl <= y <= self.yh

    def encompass(self, x: float, y: float) -> "BoundingRegion":
        """Smallest rectangle containing this one and ``(x, y)``."""
        return BoundingRegion(min(self.xl, x), min(self.yl, y), max(self.xh, x), max(self.yh, y))

    def shifted(self, dx: float, dy: float) -> "BoundingRegion":
        return BoundingRegion(self.xl + dx, self.yl + dy, self.xh + dx, self.yh + dy)


def compute_bounding_region(store: SiteStore, bloat_factor: float = 1.2) -> BoundingRegion:
    """
    Compute the square bounding region of all sites.

    The tight box around every coordinate is collapsed to its centre and
    grown by ``side * bloat_factor`` in each direction, where ``side`` is the
    larger of the box's width and height.

    Args:
        store: Input sites
        bloat_factor: Half-extent of the square relative to ``side``

    Returns:
        Square BoundingRegion centred on the sites

    Raises:
        ValueError: if the store holds no sites
    """
    coordinates = store.iter_coordinates()
    first = next(coordinates, None)
    if first is None:
        raise ValueError("Cannot compute a bounding region without sites")

    region = BoundingRegion(first.x, first.y, first.x, first.y)
    for point in coordinates:
        region = region.encompass(point.x, point.y)

    side = max(region.width, region.height)
    if side <= 0:
        # All sites coincide; keep a unit extent so the region has a margin.
        side = 1.0

    cx, cy = region.center
    half = side * bloat_factor
    bounded = BoundingRegion(cx - half, cy - half, cx + half, cy + half)

    logger.debug("Bounding region computed", xl=bounded.xl, yl=bounded.yl,
                 xh=bounded.xh, yh=bounded.yh)
    return bounded


@dataclass(frozen=True)
class ViewportMapper:
    """Maps recentred diagram coordinates onto the ``[-1, 1]`` square."""
    shift: Tuple[float, float]
    matrix: np.ndarray  # 4x4 orthographic projection, row-major

    @classmethod
    def from_region(cls, region: BoundingRegion) -> "ViewportMapper":
        shift = region.center
        view = region.shifted(-shift[0], -shift[1])
        width = np.float32(view.width)
        height = np.float32(view.height)

        matrix = np.zeros((4, 4), dtype=np.float32)
        matrix[0, 0] = 2.0 / width
        matrix[1, 1] = 2.0 / height
        matrix[2, 2] = -1.0
        matrix[3, 3] = 1.0
        matrix[0, 3] = -(view.xl + view.xh) / width
        matrix[1, 3] = -(view.yl + view.yh) / height
        return cls(shift=shift, matrix=matrix)

    @classmethod
    def identity(cls) -> "ViewportMapper":
        return cls(shift=(0.0, 0.0), matrix=np.eye(4, dtype=np.float32))

    def as_gl(self) -> np.ndarray:
        """16 floats in column-major order, as uniform upload expects."""
        return self.matrix.flatten(order='F')

    def recenter(self, points: np.ndarray) -> np.ndarray:
        """Subtract the shift from an ``(n, 2)`` array of diagram coordinates."""
        return np.asarray(points, dtype=np.float64) - np.asarray(self.shift, dtype=np.float64)

    def to_ndc(self, points: np.ndarray) -> np.ndarray:
        """Project recentred ``(n, 2)`` points into normalized device coordinates."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        homogeneous = np.column_stack([points, np.zeros(len(points)), np.ones(len(points))])
        return (homogeneous @ self.matrix.T.astype(np.float64))[:, :2]
