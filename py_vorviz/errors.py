"""Exception types raised by the visualizer."""


class VisualizerError(Exception):
    """Base class for all visualizer errors."""


class SiteFileError(VisualizerError, ValueError):
    """Input file could not be read or does not follow the site format."""


class DiagramContractError(VisualizerError, RuntimeError):
    """The diagram handed to the geometry pipeline breaks an invariant.

    These are not recoverable: they mean the diagram builder and the
    pipeline disagree about the graph layout.
    """
