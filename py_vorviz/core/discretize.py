"""Parabolic arc discretization."""

from typing import List, Sequence

import numpy as np


def _parabola_y(x: float, a: float, b: float) -> float:
    # Parabola equidistant from (a, b) and the x axis.
    return ((x - a) * (x - a) + b * b) / (b + b)


def _projection(point: Sequence[float], low: Sequence[float], high: Sequence[float]) -> float:
    """Projection of ``point`` onto the segment direction, scaled by the segment length squared."""
    vec_x = high[0] - low[0]
    vec_y = high[1] - low[1]
    return (point[0] - low[0]) * vec_x + (point[1] - low[1]) * vec_y


def discretize_parabola(point: Sequence[float],
                        segment: Sequence[Sequence[float]],
                        start: Sequence[float],
                        end: Sequence[float],
                        max_dist: float) -> np.ndarray:
    """
    Sample the arc equidistant from ``point`` and ``segment``.

    Works in a frame where the segment starts at the origin and runs along
    the positive x axis, scaled by the segment length. There the arc is
    ``y = ((x - a)^2 + b^2) / 2b`` and each chord is split at the arc point
    furthest from it until the deviation is within ``max_dist``.

    Args:
        point: Point site ``(x, y)``
        segment: Segment site ``((x1, y1), (x2, y2))``
        start: Arc start, a point of the parabola
        end: Arc end, a point of the parabola
        max_dist: Maximum distance between the arc and any chord

    Returns:
        ``(n, 2)`` array from ``start`` to ``end`` inclusive
    """
    low, high = segment
    low = (float(low[0]), float(low[1]))
    high = (float(high[0]), float(high[1]))
    start = (float(start[0]), float(start[1]))
    end = (float(end[0]), float(end[1]))

    segm_vec_x = high[0] - low[0]
    segm_vec_y = high[1] - low[1]
    sqr_segment_length = segm_vec_x * segm_vec_x + segm_vec_y * segm_vec_y

    point_vec_x = float(point[0]) - low[0]
    point_vec_y = float(point[1]) - low[1]
    rot_x = segm_vec_x * point_vec_x + segm_vec_y * point_vec_y
    rot_y = segm_vec_x * point_vec_y - segm_vec_y * point_vec_x

    if sqr_segment_length == 0 or rot_y == 0:
        # Point on the segment's supporting line: the arc is a straight line.
        return np.array([start, end], dtype=np.float64)

    projection_start = _projection(start, low, high)
    projection_end = _projection(end, low, high)

    max_dist_transformed = max_dist * max_dist * sqr_segment_length

    samples: List[tuple] = [start]
    stack = [projection_end]
    cur_x = projection_start
    cur_y = _parabola_y(cur_x, rot_x, rot_y)

    while stack:
        new_x = stack[-1]
        new_y = _parabola_y(new_x, rot_x, rot_y)
        dx = new_x - cur_x
        dy = new_y - cur_y

        if dx == 0:
            dist = 0.0
            mid_x = new_x
        else:
            # Tangent parallel to the chord touches the arc at mid_x.
            mid_x = dy / dx * rot_y + rot_x
            mid_y = _parabola_y(mid_x, rot_x, rot_y)
            dist = dy * (mid_x - cur_x) - dx * (mid_y - cur_y)
            dist = dist * dist / (dy * dy + dx * dx)

        if dist <= max_dist_transformed:
            stack.pop()
            inter_x = (segm_vec_x * new_x - segm_vec_y * new_y) / sqr_segment_length + low[0]
            inter_y = (segm_vec_x * new_y + segm_vec_y * new_x) / sqr_segment_length + low[1]
            samples.append((inter_x, inter_y))
            cur_x = new_x
            cur_y = new_y
        else:
            stack.append(mid_x)

    # The last sample is the transformed end; keep the exact vertex instead.
    samples[-1] = end
    return np.array(samples, dtype=np.float64)
