"""Group-selection strategies.

Each strategy maps (world, grid, origin) to matched cell entities and their
coordinates without mutating anything. ``run_strategy`` dispatches on the
configured strategy kind.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from esper import World

from tilefall.components.cell_types import FloodFill, RadiusBlast, Strategy
from tilefall.components.grid import Grid
from tilefall.constants import EMPTY_TYPE
from tilefall.systems.strategies.flood_fill import collect_equal_cells
from tilefall.systems.strategies.radius_blast import collect_cells_in_radius

Position = Tuple[int, int]

__all__ = [
    "collect_cells_in_radius",
    "collect_equal_cells",
    "run_strategy",
]


def run_strategy(
    world: World,
    grid: Grid,
    strategy: Optional[Strategy],
    origin: Position,
    *,
    empty_type: str = EMPTY_TYPE,
) -> Tuple[List[int], List[Position]]:
    if isinstance(strategy, FloodFill):
        return collect_equal_cells(world, grid, origin, strategy.min_match, empty_type=empty_type)
    if isinstance(strategy, RadiusBlast):
        return collect_cells_in_radius(world, grid, origin, strategy.radius)
    return [], []
