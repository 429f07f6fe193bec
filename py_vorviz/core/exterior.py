"""
Exterior marking.

Edges reachable from infinity through primary edges form the outer part of
the diagram. Marking floods from every unbounded half-edge: the edge and its
twin are tagged, and if the edge is primary the flood continues through the
vertex it ends at, visiting every half-edge leaving that vertex. Non-primary
edges stop the flood, which keeps the medial axis inside closed segment
loops untagged.
"""

import structlog

from .diagram import NO_INDEX, VoronoiDiagram

logger = structlog.get_logger()


def _flood_from(diagram: VoronoiDiagram, seed: int) -> None:
    # Children are pushed in reverse rotation order and checked when popped,
    # which visits edges in the same order as a depth-first recursion.
    stack = [seed]
    while stack:
        edge = stack.pop()
        if diagram.edge_exterior[edge]:
            continue

        diagram.edge_exterior[edge] = True
        diagram.edge_exterior[diagram.edge_twin[edge]] = True

        vertex = int(diagram.edge_end[edge])
        if vertex == NO_INDEX or not diagram.edge_is_primary[edge]:
            continue

        diagram.vertex_exterior[vertex] = True
        stack.extend(reversed(list(diagram.rotation(vertex))))


def mark_exterior(diagram: VoronoiDiagram) -> None:
    """
    Tag the edges and vertices of ``diagram`` that are reachable from infinity.

    Already tagged edges are skipped, so calling this again on a marked
    diagram changes nothing.

    Args:
        diagram: Diagram whose ``edge_exterior``/``vertex_exterior`` tags are updated in place
    """
    for edge in diagram.infinite_edges():
        _flood_from(diagram, edge)

    logger.info("Exterior marked",
                edges=int(diagram.edge_exterior.sum()),
                vertices=int(diagram.vertex_exterior.sum()),
                total_edges=diagram.num_edges)
