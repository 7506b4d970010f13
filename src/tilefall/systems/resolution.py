"""Turn resolution: select, clear, compact, refill, score."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from esper import World

from tilefall.components.round_state import Outcome
from tilefall.errors import InvalidCoordinate
from tilefall.events.bus import (
    EventBus,
    EVENT_BOARD_FILLED,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CELL_SELECT,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_ROUND_OUTCOME,
    EVENT_ROUND_RESTART,
    EVENT_ROUND_STARTED,
    EVENT_SCORE_CHANGED,
    EVENT_SELECTION_IGNORED,
    EVENT_TURN_RESOLVED,
)
from tilefall.systems.board_ops import (
    GravityMove,
    TypeEntry,
    apply_gravity,
    clear_positions,
    clear_spawn_markers,
    fill_board,
    find_available_moves,
    get_cell_types,
    get_grid,
    refill_board,
    type_of,
)
from tilefall.systems.strategies import run_strategy
from tilefall.utils.round_state import get_or_create_round_state
from tilefall.utils.type_generator import WeightedTypeGenerator

logger = logging.getLogger(__name__)

Position = Tuple[int, int]
ScoringFn = Callable[[int, Sequence[str]], int]


def score_by_match_size(match_size: int, cleared_types: Sequence[str]) -> int:
    return match_size


@dataclass(slots=True)
class TurnResult:
    """Snapshot of one resolved turn for presentation layers."""
    origin: Position
    cleared: List[TypeEntry]
    gravity_moves: List[GravityMove]
    refills: List[TypeEntry]
    score: int
    score_delta: int
    moves_remaining: int
    outcome: Outcome
    reshuffled: bool = False
    reshuffle_placements: List[TypeEntry] = field(default_factory=list)

    @property
    def cleared_coordinates(self) -> List[Position]:
        return [(x, y) for x, y, _ in self.cleared]

    @property
    def match_size(self) -> int:
        return len(self.cleared)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "origin": self.origin,
            "cleared_coordinates": self.cleared_coordinates,
            "match_size": self.match_size,
            "refills": _serialize_placements(self.refills),
            "gravity_moves": _serialize_gravity_moves(self.gravity_moves),
            "score": self.score,
            "score_delta": self.score_delta,
            "moves_remaining": self.moves_remaining,
            "outcome": self.outcome.value,
            "reshuffled": self.reshuffled,
            "reshuffle_placements": _serialize_placements(self.reshuffle_placements),
        }


def _serialize_placements(placements: List[TypeEntry]) -> List[Dict[str, Any]]:
    return [{"x": x, "y": y, "new_type": t} for x, y, t in placements]


def _serialize_gravity_moves(moves: List[GravityMove]) -> List[Dict[str, Any]]:
    return [{"from": move.source, "to": move.target, "type_name": move.type_name} for move in moves]


class ResolutionSystem:
    """Runs the turn algorithm for a selected cell and drives the round state."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        generator: WeightedTypeGenerator,
        *,
        scoring: Optional[ScoringFn] = None,
        reset_on_stalemate: bool = False,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.generator = generator
        self.scoring: ScoringFn = scoring or score_by_match_size
        self.reset_on_stalemate = reset_on_stalemate
        self.last_result: Optional[TurnResult] = None
        self.event_bus.subscribe(EVENT_CELL_SELECT, self.on_cell_select)
        self.event_bus.subscribe(EVENT_ROUND_RESTART, self.on_restart)

    def detach(self) -> None:
        self.event_bus.unsubscribe(EVENT_CELL_SELECT, self.on_cell_select)
        self.event_bus.unsubscribe(EVENT_ROUND_RESTART, self.on_restart)

    def on_cell_select(self, sender, **kwargs):
        x = kwargs.get("x")
        y = kwargs.get("y")
        if x is None or y is None:
            return
        self.select(x, y)

    def on_restart(self, sender, **kwargs):
        self.restart(reason=kwargs.get("reason") or "restart")

    def restart(self, *, reason: str = "restart") -> List[TypeEntry]:
        """Reset the round and refill the whole grid with fresh cells."""
        state = get_or_create_round_state(self.world)
        state.reset()
        placed = fill_board(self.world, self.generator)
        self.last_result = None
        grid = get_grid(self.world)
        logger.debug("round restarted (%s): %dx%d, target %d in %d moves",
                     reason, grid.cols, grid.rows, state.target_score, state.max_moves)
        self.event_bus.emit(EVENT_BOARD_FILLED, reason=reason, width=grid.cols, height=grid.rows)
        self.event_bus.emit(EVENT_ROUND_STARTED, target_score=state.target_score, max_moves=state.max_moves)
        return placed

    def select(self, x: int, y: int) -> Optional[TurnResult]:
        """Resolve a selection at (x, y); returns None for a no-op."""
        grid = get_grid(self.world)
        state = get_or_create_round_state(self.world)
        if not grid.in_bounds(x, y):
            raise InvalidCoordinate(x, y, grid.cols, grid.rows)
        if state.is_over:
            self._ignore(x, y, f"round {state.outcome.value}")
            return None

        registry = get_cell_types(self.world)
        strategy = registry.strategy_for(type_of(self.world, grid.get(x, y)))
        if strategy is None:
            self._ignore(x, y, "not selectable")
            return None
        _, coords = run_strategy(self.world, grid, strategy, (x, y), empty_type=registry.empty_type)
        if not coords:
            self._ignore(x, y, "no match")
            return None
        self.event_bus.emit(EVENT_MATCH_FOUND, origin=(x, y), positions=list(coords), size=len(coords))

        clear_spawn_markers(self.world)
        cleared = clear_positions(self.world, coords)
        moves = apply_gravity(self.world)
        refills = refill_board(self.world, self.generator)

        previous_outcome = state.outcome
        points = max(0, int(self.scoring(len(cleared), [t for _, _, t in cleared])))
        outcome = state.record_move(points)

        result = TurnResult(
            origin=(x, y),
            cleared=cleared,
            gravity_moves=moves,
            refills=refills,
            score=state.score,
            score_delta=points,
            moves_remaining=state.moves_remaining,
            outcome=outcome,
        )
        if outcome is Outcome.PLAYING and self.reset_on_stalemate and not find_available_moves(self.world):
            logger.debug("no selectable groups left; refilling board")
            result.reshuffled = True
            result.reshuffle_placements = fill_board(self.world, self.generator)

        self._emit_turn(result, previous_outcome)
        self.last_result = result
        return result

    def _ignore(self, x: int, y: int, reason: str) -> None:
        logger.debug("selection at (%s, %s) ignored: %s", x, y, reason)
        self.event_bus.emit(EVENT_SELECTION_IGNORED, x=x, y=y, reason=reason)

    def _emit_turn(self, result: TurnResult, previous_outcome: Outcome) -> None:
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=result.cleared_coordinates, types=list(result.cleared))
        self.event_bus.emit(
            EVENT_GRAVITY_APPLIED,
            moves=_serialize_gravity_moves(result.gravity_moves),
            columns=len({move.source[0] for move in result.gravity_moves}),
        )
        if result.refills:
            self.event_bus.emit(
                EVENT_REFILL_COMPLETED,
                new_tiles=_serialize_placements(result.refills),
            )
        if result.reshuffled:
            self.event_bus.emit(
                EVENT_BOARD_RESHUFFLED,
                reason="stalemate",
                placements=_serialize_placements(result.reshuffle_placements),
            )
        self.event_bus.emit(
            EVENT_SCORE_CHANGED,
            score=result.score,
            delta=result.score_delta,
            moves_remaining=result.moves_remaining,
        )
        if result.outcome is not previous_outcome:
            self.event_bus.emit(
                EVENT_ROUND_OUTCOME,
                outcome=result.outcome.value,
                score=result.score,
                moves_remaining=result.moves_remaining,
            )
        self.event_bus.emit(EVENT_TURN_RESOLVED, **result.to_payload())
