"""
Configuration for the visualizer.
"""

from .config import Settings, settings

__all__ = ['Settings', 'settings']
