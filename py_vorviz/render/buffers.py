"""
Drawable primitives and the buffers backing them.

A backend stores vertex data and hands back integer buffer ids. Every id is
owned by a ``BufferHandle`` which releases it exactly once, either when the
handle is closed explicitly or when the stack that owns it unwinds.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Protocol

import numpy as np
import structlog

logger = structlog.get_logger()


class PrimitiveKind(str, Enum):
    """How the submission layer assembles a primitive's points."""
    TRIANGLE_FAN = "triangle_fan"
    LINE_LIST = "line_list"


class RenderBackend(Protocol):
    """Buffer storage used by the render cache."""

    def upload(self, points: np.ndarray) -> int:
        ...

    def release(self, buffer_id: int) -> None:
        ...


class HostMemoryBackend:
    """Backend keeping buffers in process memory."""

    def __init__(self):
        self._buffers: Dict[int, np.ndarray] = {}
        self._next_id = 1

    def upload(self, points: np.ndarray) -> int:
        buffer_id = self._next_id
        self._next_id += 1
        self._buffers[buffer_id] = np.array(points, dtype=np.float32).reshape(-1, 2)
        return buffer_id

    def release(self, buffer_id: int) -> None:
        if self._buffers.pop(buffer_id, None) is None:
            raise KeyError(f"Buffer {buffer_id} is not allocated")

    def read(self, buffer_id: int) -> np.ndarray:
        return self._buffers[buffer_id]

    @property
    def live_buffers(self) -> int:
        return len(self._buffers)


class BufferHandle:
    """Owns one backend buffer."""

    def __init__(self, backend: RenderBackend, points: np.ndarray):
        self.backend = backend
        self.buffer_id = backend.upload(points)

    @property
    def released(self) -> bool:
        return self.buffer_id is None

    def release(self) -> None:
        if self.buffer_id is None:
            return
        buffer_id, self.buffer_id = self.buffer_id, None
        self.backend.release(buffer_id)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()
        return False


@dataclass
class Primitive:
    """One drawable unit: a point sequence plus how to assemble it."""
    kind: PrimitiveKind
    points: np.ndarray  # (n, 2) float32, recentred coordinates
    handle: BufferHandle

    @property
    def vertex_count(self) -> int:
        return len(self.points)
