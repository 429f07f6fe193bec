"""
Voronoi diagram visualizer for point and segment inputs.

The package turns a text file of sites into a Voronoi diagram, marks the
parts of the diagram reachable from infinity, resolves every edge into a
finite polyline and caches renderable buffers for the drawing layer.
"""

from .visualizer import EdgeFilter, RenderFrame, VoronoiVisualizer

__version__ = "0.1.0"

__all__ = ['EdgeFilter', 'RenderFrame', 'VoronoiVisualizer', '__version__']
