"""
Render buffers, the geometry cache and snapshot export.
"""

from .buffers import BufferHandle, HostMemoryBackend, Primitive, PrimitiveKind, RenderBackend
from .cache import CacheGroup, DiagramScene, RenderGeometryCache, polyline_to_line_list

__all__ = ['BufferHandle', 'HostMemoryBackend', 'Primitive', 'PrimitiveKind', 'RenderBackend',
           'CacheGroup', 'DiagramScene', 'RenderGeometryCache', 'polyline_to_line_list']
