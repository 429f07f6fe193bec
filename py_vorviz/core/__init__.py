"""
Core diagram geometry.
"""

from .sites import Point, Segment, SiteStore, SiteRetriever, parse_sites, read_sites
from .diagram import NO_INDEX, SourceCategory, VoronoiDiagram
from .bounding import BoundingRegion, ViewportMapper, compute_bounding_region
from .exterior import mark_exterior
from .geometry import clip_infinite_edge, resolve_edge, sample_curved_edge
from .discretize import discretize_parabola

__all__ = ['Point', 'Segment', 'SiteStore', 'SiteRetriever', 'parse_sites', 'read_sites',
           'NO_INDEX', 'SourceCategory', 'VoronoiDiagram',
           'BoundingRegion', 'ViewportMapper', 'compute_bounding_region',
           'mark_exterior', 'clip_infinite_edge', 'resolve_edge', 'sample_curved_edge',
           'discretize_parabola']
