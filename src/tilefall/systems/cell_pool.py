"""Acquire/release of cell entities through the CellPool component."""
from __future__ import annotations

from esper import World

from tilefall.components.cell import Cell, Pooled, Spawned
from tilefall.components.cell_pool import CellPool


def get_or_create_cell_pool(world: World) -> CellPool:
    """Return the shared CellPool component, creating it if absent."""
    for _, pool in world.get_component(CellPool):
        return pool
    pool = CellPool()
    world.create_entity(pool)
    return pool


def acquire_cell(world: World, type_name: str) -> int:
    """Lend a cell of ``type_name``: a recycled entity when available, else a new one."""
    pool = get_or_create_cell_pool(world)
    entity = pool.take(type_name)
    if entity is None:
        return world.create_entity(Cell(type_name=type_name))
    world.remove_component(entity, Pooled)
    # Recycled cells keep their type; reassert it in case the bucket was fed by hand.
    world.component_for_entity(entity, Cell).type_name = type_name
    return entity


def release_cell(world: World, entity: int) -> None:
    """Park ``entity`` in the bucket of its own type.

    The caller detaches the cell from the grid first. Releasing a cell that is
    already pooled does nothing.
    """
    if world.has_component(entity, Pooled):
        return
    cell: Cell = world.component_for_entity(entity, Cell)
    if world.has_component(entity, Spawned):
        world.remove_component(entity, Spawned)
    world.add_component(entity, Pooled())
    get_or_create_cell_pool(world).put(cell.type_name, entity)


def pooled_count(world: World, type_name: str | None = None) -> int:
    return get_or_create_cell_pool(world).count(type_name)


def is_pooled(world: World, entity: int) -> bool:
    return world.has_component(entity, Pooled)
