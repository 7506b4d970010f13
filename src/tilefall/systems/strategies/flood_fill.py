from __future__ import annotations

from typing import List, Set, Tuple

from esper import World

from tilefall.components.cell import Cell
from tilefall.components.grid import Grid
from tilefall.constants import EMPTY_TYPE, MIN_MATCH

Position = Tuple[int, int]

# up, down, left, right
NEIGHBOUR_OFFSETS: Tuple[Position, ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


def collect_equal_cells(
    world: World,
    grid: Grid,
    origin: Position,
    min_match: int = MIN_MATCH,
    *,
    empty_type: str = EMPTY_TYPE,
) -> Tuple[List[int], List[Position]]:
    """Return the 4-connected group of cells sharing the origin cell's type.

    Visited slots are tracked by coordinate. The origin is always the first
    entry. Groups smaller than ``min_match`` and empty origins yield two empty
    lists.
    """
    ox, oy = origin
    if not grid.in_bounds(ox, oy):
        return [], []
    origin_type = world.component_for_entity(grid.get(ox, oy), Cell).type_name
    if origin_type == empty_type:
        return [], []

    cells: List[int] = []
    coords: List[Position] = []
    visited: Set[Position] = {origin}
    pending: List[Position] = [origin]
    while pending:
        x, y = pending.pop()
        entity = grid.get(x, y)
        cells.append(entity)
        coords.append((x, y))
        for dx, dy in NEIGHBOUR_OFFSETS:
            nx, ny = x + dx, y + dy
            if (nx, ny) in visited or not grid.in_bounds(nx, ny):
                continue
            neighbour = grid.get(nx, ny)
            if world.component_for_entity(neighbour, Cell).type_name != origin_type:
                continue
            visited.add((nx, ny))
            pending.append((nx, ny))

    if len(cells) < min_match:
        return [], []
    return cells, coords
