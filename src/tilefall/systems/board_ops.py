from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from esper import World

from tilefall.components.cell import Cell, Spawned
from tilefall.components.cell_types import CellTypes, RadiusBlast
from tilefall.components.grid import Grid
from tilefall.systems.cell_pool import acquire_cell, release_cell
from tilefall.systems.strategies import run_strategy
from tilefall.utils.type_generator import WeightedTypeGenerator

Position = Tuple[int, int]
TypeEntry = Tuple[int, int, str]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    type_name: str


def get_cell_types(world: World) -> CellTypes:
    for _, registry in world.get_component(CellTypes):
        return registry
    raise RuntimeError("CellTypes definitions not found")


def find_grid(world: World) -> Optional[Grid]:
    for _, grid in world.get_component(Grid):
        return grid
    return None


def get_grid(world: World) -> Grid:
    grid = find_grid(world)
    if grid is None:
        raise RuntimeError("Grid not found")
    return grid


def type_of(world: World, entity: int) -> str:
    return world.component_for_entity(entity, Cell).type_name


def cell_type_at(world: World, x: int, y: int) -> str:
    return type_of(world, get_grid(world).get(x, y))


def is_empty(world: World, entity: int, registry: CellTypes | None = None) -> bool:
    registry = registry or get_cell_types(world)
    return type_of(world, entity) == registry.empty_type


def create_grid(world: World, width: int, height: int) -> Grid:
    """Create the grid with a distinct empty cell in every slot.

    An existing grid is dismantled first and its cells returned to the pool.
    """
    for entity, old in list(world.get_component(Grid)):
        for x, y in old.coordinates():
            release_cell(world, old.get(x, y))
        world.delete_entity(entity, immediate=True)
    empty_type = get_cell_types(world).empty_type
    slots = [[acquire_cell(world, empty_type) for _ in range(width)] for _ in range(height)]
    grid = Grid(cols=width, rows=height, slots=slots)
    world.create_entity(grid)
    return grid


def clear_positions(world: World, positions: List[Position]) -> List[TypeEntry]:
    """Return matched cells to the pool and seat a fresh empty cell in each slot."""
    grid = get_grid(world)
    empty_type = get_cell_types(world).empty_type
    cleared: List[TypeEntry] = []
    for x, y in positions:
        entity = grid.get(x, y)
        type_name = type_of(world, entity)
        grid.set(x, y, acquire_cell(world, empty_type))
        release_cell(world, entity)
        cleared.append((x, y, type_name))
    return cleared


def compact_column(world: World, x: int) -> List[GravityMove]:
    """Drop surviving cells of column ``x`` onto the lowest free slots.

    Scans bottom (row ``rows - 1``) to top. Survivors keep their relative
    order; each empty cell displaced by a falling survivor is re-seated in the
    slot the survivor left.
    """
    grid = get_grid(world)
    registry = get_cell_types(world)
    moves: List[GravityMove] = []
    column = grid.column(x)
    target_row = grid.rows - 1
    for row in range(grid.rows - 1, -1, -1):
        entity = column[row]
        if is_empty(world, entity, registry):
            continue
        if row != target_row:
            displaced = grid.get(x, target_row)
            grid.set(x, target_row, entity)
            grid.set(x, row, displaced)
            moves.append(GravityMove(source=(x, row), target=(x, target_row), type_name=type_of(world, entity)))
        target_row -= 1
    return moves


def apply_gravity(world: World) -> List[GravityMove]:
    grid = get_grid(world)
    moves: List[GravityMove] = []
    for x in range(grid.cols):
        moves.extend(compact_column(world, x))
    return moves


def empty_rows(world: World, x: int) -> List[int]:
    """Rows of column ``x`` holding empty cells, bottom-most first."""
    grid = get_grid(world)
    registry = get_cell_types(world)
    column = grid.column(x)
    return [row for row in range(grid.rows - 1, -1, -1) if is_empty(world, column[row], registry)]


def refill_column(world: World, x: int, generator: WeightedTypeGenerator) -> List[TypeEntry]:
    """Fill every empty slot of column ``x`` from the generator, bottom-most first."""
    grid = get_grid(world)
    rows = empty_rows(world, x)
    placed: List[TypeEntry] = []
    for row, type_name in zip(rows, generator.take(len(rows))):
        old = grid.get(x, row)
        entity = acquire_cell(world, type_name)
        grid.set(x, row, entity)
        release_cell(world, old)
        world.add_component(entity, Spawned(pos=(x, row)))
        placed.append((x, row, type_name))
    return placed


def refill_board(world: World, generator: WeightedTypeGenerator) -> List[TypeEntry]:
    grid = get_grid(world)
    placed: List[TypeEntry] = []
    for x in range(grid.cols):
        placed.extend(refill_column(world, x, generator))
    return placed


def fill_board(world: World, generator: WeightedTypeGenerator) -> List[TypeEntry]:
    """Recycle every placed cell, then draw a fresh type for each slot."""
    grid = get_grid(world)
    clear_spawn_markers(world)
    clear_positions(world, list(grid.coordinates()))
    return refill_board(world, generator)


def clear_spawn_markers(world: World) -> None:
    for entity, _ in list(world.get_component(Spawned)):
        world.remove_component(entity, Spawned)


def spawned_positions(world: World) -> List[Position]:
    return sorted(marker.pos for _, marker in world.get_component(Spawned))


def grid_type_snapshot(world: World) -> List[List[str]]:
    """Return rows (top to bottom) of type names."""
    grid = get_grid(world)
    return [[type_of(world, grid.get(x, y)) for x in range(grid.cols)] for y in range(grid.rows)]


def find_available_moves(world: World) -> List[Position]:
    """Return one origin per selectable group currently on the board."""
    grid = get_grid(world)
    registry = get_cell_types(world)
    covered: set[Position] = set()
    moves: List[Position] = []
    for x, y in grid.coordinates():
        if (x, y) in covered:
            continue
        strategy = registry.strategy_for(type_of(world, grid.get(x, y)))
        if strategy is None:
            continue
        if isinstance(strategy, RadiusBlast):
            moves.append((x, y))
            continue
        _, coords = run_strategy(world, grid, strategy, (x, y), empty_type=registry.empty_type)
        if coords:
            moves.append((x, y))
            covered.update(coords)
    return moves
