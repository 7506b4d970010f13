import random

from esper import World

from tilefall.components.cell_pool import CellPool
from tilefall.components.cell_types import CellTypes
from tilefall.components.round_state import RoundState
from tilefall.config import CELLS_CONFIG, parse_cell_types
from tilefall.constants import MAX_MOVES, TARGET_SCORE
from tilefall.events.bus import EventBus


def create_world(
    event_bus: EventBus,
    *,
    cell_types: CellTypes | None = None,
    target_score: int = TARGET_SCORE,
    max_moves: int = MAX_MOVES,
    rng: random.Random | None = None,
) -> World:
    """Create a world holding the cell type registry, the pool and the round state.

    The grid itself is created by ``board_ops.create_grid`` once dimensions are
    known.
    """
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "event_bus", event_bus)

    registry = cell_types if cell_types is not None else parse_cell_types(CELLS_CONFIG)
    world.create_entity(registry)
    world.create_entity(CellPool())
    world.create_entity(RoundState(target_score=target_score, max_moves=max_moves))
    return world
