from __future__ import annotations

from typing import List, Tuple

from esper import World

from tilefall.components.grid import Grid
from tilefall.constants import BLAST_RADIUS

Position = Tuple[int, int]


def collect_cells_in_radius(
    world: World,
    grid: Grid,
    origin: Position,
    radius: float = BLAST_RADIUS,
) -> Tuple[List[int], List[Position]]:
    """Return every slot with ``dx*dx + dy*dy <= radius*radius`` from ``origin``.

    Cell types are ignored and there is no minimum size, so the origin always
    matches. Scans the whole grid (O(W*H)); boards are small.
    """
    ox, oy = origin
    if not grid.in_bounds(ox, oy):
        return [], []
    squared_radius = radius * radius
    cells: List[int] = []
    coords: List[Position] = []
    for x, y in grid.coordinates():
        dx = ox - x
        dy = oy - y
        if dx * dx + dy * dy <= squared_radius:
            cells.append(grid.get(x, y))
            coords.append((x, y))
    return cells, coords
