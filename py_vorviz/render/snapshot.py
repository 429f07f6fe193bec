"""Snapshot export of a render frame using matplotlib."""

from pathlib import Path
from typing import Sequence, Tuple

import structlog
from matplotlib.collections import LineCollection, PolyCollection
from matplotlib.figure import Figure

from ..config import Settings, settings as default_settings
from .buffers import Primitive, PrimitiveKind

logger = structlog.get_logger()

SITE_COLOR = (0.0, 0.5, 1.0, 1.0)
DIAGRAM_COLOR = (0.0, 0.0, 0.0, 1.0)

SEGMENT_LINE_WIDTH = 2.7
EDGE_LINE_WIDTH = 1.7


def _add_primitives(ax, primitives: Sequence[Primitive], viewport,
                    color: Tuple[float, ...], line_width: float) -> None:
    fans = []
    lines = []
    for primitive in primitives:
        ndc = viewport.to_ndc(primitive.points)
        if primitive.kind is PrimitiveKind.TRIANGLE_FAN:
            # Boundary of the fan, centre excluded.
            fans.append(ndc[1:])
        else:
            lines.extend(ndc[i:i + 2] for i in range(0, len(ndc) - 1, 2))

    if fans:
        ax.add_collection(PolyCollection(fans, facecolors=[color], edgecolors='none'))
    if lines:
        ax.add_collection(LineCollection(lines, colors=[color], linewidths=line_width))


def render_snapshot(frame, path, settings: Settings = None) -> Path:
    """
    Draw a frame to a PNG file.

    Args:
        frame: RenderFrame from the visualizer
        path: Output image path
        settings: Viewport size and dpi

    Returns:
        Path of the written image
    """
    settings = settings or default_settings
    path = Path(path)
    inches = settings.viewport_size_px / settings.snapshot_dpi

    fig = Figure(figsize=(inches, inches), dpi=settings.snapshot_dpi, facecolor='white')
    ax = fig.add_axes([0.0, 0.0, 1.0, 1.0])
    ax.set_xlim(-1.0, 1.0)
    ax.set_ylim(-1.0, 1.0)
    ax.set_aspect('equal')
    ax.set_axis_off()

    viewport = frame.viewport
    _add_primitives(ax, frame.points, viewport, SITE_COLOR, SEGMENT_LINE_WIDTH)
    _add_primitives(ax, frame.segments, viewport, SITE_COLOR, SEGMENT_LINE_WIDTH)
    _add_primitives(ax, frame.vertices, viewport, DIAGRAM_COLOR, EDGE_LINE_WIDTH)
    _add_primitives(ax, frame.edges, viewport, DIAGRAM_COLOR, EDGE_LINE_WIDTH)

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=settings.snapshot_dpi, facecolor='white')

    logger.info("Snapshot saved", path=str(path),
                primitives=sum(len(group) for group in frame.groups().values()))
    return path
