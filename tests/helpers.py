from __future__ import annotations

import random
from typing import Dict, List, Sequence, Tuple

from esper import World

from tilefall.components.cell import Cell, Pooled
from tilefall.config import parse_cell_types
from tilefall.events.bus import EventBus
from tilefall.systems.board_ops import create_grid, get_cell_types, get_grid
from tilefall.systems.cell_pool import acquire_cell, release_cell
from tilefall.systems.resolution import ResolutionSystem
from tilefall.utils.type_generator import WeightedTypeGenerator
from tilefall.world import create_world

TEST_TABLE = {
    "blue": {"amount": 0.45, "strategy": "equals"},
    "red": {"amount": 0.45, "strategy": "equals"},
    "green": {"amount": 0.05, "strategy": "equals"},
    "bomb": {"amount": 0.05, "strategy": {"kind": "explosion", "radius": 1}},
    "stone": {"amount": 0.0},
}

# Single-letter shorthand for board layouts.
LETTERS: Dict[str, str] = {
    "b": "blue",
    "r": "red",
    "g": "green",
    "*": "bomb",
    "s": "stone",
    ".": "empty",
}


def build_board(
    rows: Sequence[str],
    table: Dict | None = None,
    *,
    target_score: int = 1000,
    max_moves: int = 50,
    seed: int = 0,
) -> Tuple[World, EventBus]:
    """Create a world whose grid matches ``rows`` (top row first, one letter per cell)."""
    bus = EventBus()
    world = create_world(
        bus,
        cell_types=parse_cell_types(table or TEST_TABLE),
        target_score=target_score,
        max_moves=max_moves,
        rng=random.Random(seed),
    )
    create_grid(world, len(rows[0]), len(rows))
    set_board(world, rows)
    return world, bus


def set_board(world: World, rows: Sequence[str]) -> None:
    for y, row in enumerate(rows):
        for x, letter in enumerate(row):
            place_type(world, x, y, LETTERS[letter])


def place_type(world: World, x: int, y: int, type_name: str) -> int:
    grid = get_grid(world)
    old = grid.get(x, y)
    entity = acquire_cell(world, type_name)
    grid.set(x, y, entity)
    release_cell(world, old)
    return entity


def make_resolution(world: World, bus: EventBus, *, seed: int = 0, **kwargs) -> ResolutionSystem:
    grid = get_grid(world)
    generator = WeightedTypeGenerator(
        get_cell_types(world).weights(),
        grid.cols * grid.rows,
        rng=random.Random(seed),
    )
    return ResolutionSystem(world, bus, generator, **kwargs)


def board_letters(world: World) -> List[str]:
    reverse = {name: letter for letter, name in LETTERS.items()}
    grid = get_grid(world)
    return [
        "".join(reverse[world.component_for_entity(grid.get(x, y), Cell).type_name] for x in range(grid.cols))
        for y in range(grid.rows)
    ]


def grid_entities(world: World) -> List[int]:
    grid = get_grid(world)
    return [grid.get(x, y) for x, y in grid.coordinates()]


def assert_board_full(world: World) -> None:
    """Every slot holds a distinct, non-pooled, non-empty cell."""
    empty_type = get_cell_types(world).empty_type
    entities = grid_entities(world)
    assert len(set(entities)) == len(entities), "a cell occupies more than one slot"
    for entity in entities:
        assert not world.has_component(entity, Pooled), "pooled cell still on the grid"
        assert world.component_for_entity(entity, Cell).type_name != empty_type


def assert_cells_partitioned(world: World) -> None:
    """Every cell entity is either on the grid or in the pool, never both."""
    on_grid = set(grid_entities(world))
    pooled = {entity for entity, _ in world.get_component(Pooled)}
    every_cell = {entity for entity, _ in world.get_component(Cell)}
    assert not on_grid & pooled
    assert on_grid | pooled == every_cell
