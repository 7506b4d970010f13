from esper import World

from tilefall.components.round_state import RoundState
from tilefall.constants import MAX_MOVES, TARGET_SCORE


def get_round_state(world: World) -> RoundState | None:
    for _, state in world.get_component(RoundState):
        return state
    return None


def get_or_create_round_state(world: World) -> RoundState:
    """Return the shared RoundState component, creating it if absent."""
    existing = get_round_state(world)
    if existing is not None:
        return existing
    state = RoundState(target_score=TARGET_SCORE, max_moves=MAX_MOVES)
    world.create_entity(state)
    return state
