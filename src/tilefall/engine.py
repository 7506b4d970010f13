"""Entry point for the tilefall resolution engine.

``TileGame`` wires the world, event bus, weighted generator and resolution
system together and exposes the command surface a presentation layer drives:
``configure``, ``select``, ``restart`` and the ``cell_type_at`` query. Turn
results are also published on the event bus (``EVENT_TURN_RESOLVED``) for
layers that animate by event replay.
"""
from __future__ import annotations

import logging
import random
from typing import Any, List, Mapping, Optional

from esper import World

from tilefall.components.cell_types import CellTypes
from tilefall.components.round_state import RoundState
from tilefall.config import parse_cell_types, validate_cell_types
from tilefall.constants import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    EMPTY_TYPE,
    MAX_MOVES,
    MIN_MATCH,
    TARGET_SCORE,
)
from tilefall.errors import EngineNotReady, InvalidConfiguration
from tilefall.events.bus import EventBus
from tilefall.systems.board_ops import (
    cell_type_at,
    create_grid,
    get_cell_types,
    find_available_moves,
    get_grid,
    grid_type_snapshot,
    spawned_positions,
)
from tilefall.systems.resolution import ResolutionSystem, ScoringFn, TurnResult
from tilefall.utils.round_state import get_or_create_round_state
from tilefall.utils.type_generator import WeightedTypeGenerator
from tilefall.world import create_world

logger = logging.getLogger(__name__)


class TileGame:
    def __init__(self, event_bus: EventBus | None = None, *, rng: random.Random | None = None) -> None:
        self.event_bus = event_bus or EventBus()
        self.rng = rng or random.Random()
        self.world: Optional[World] = None
        self.generator: Optional[WeightedTypeGenerator] = None
        self.resolution: Optional[ResolutionSystem] = None

    @property
    def configured(self) -> bool:
        return self.resolution is not None

    def configure(
        self,
        cell_types: Mapping[str, Any] | CellTypes,
        width: int = BOARD_WIDTH,
        height: int = BOARD_HEIGHT,
        target_score: int = TARGET_SCORE,
        max_moves: int = MAX_MOVES,
        *,
        min_match: int = MIN_MATCH,
        empty_type: Optional[str] = None,
        scoring: Optional[ScoringFn] = None,
        reset_on_stalemate: bool = False,
    ) -> List[List[str]]:
        """Validate settings, build a fresh board and start a round.

        Raises InvalidConfiguration and leaves any previous configuration in
        place when the settings are unusable. Returns the initial board as
        rows of type names.
        """
        if width <= 0 or height <= 0:
            raise InvalidConfiguration(f"Board must be at least 1x1, got {width}x{height}")
        if target_score <= 0:
            raise InvalidConfiguration(f"target_score must be positive, got {target_score}")
        if max_moves <= 0:
            raise InvalidConfiguration(f"max_moves must be positive, got {max_moves}")
        if min_match < 1:
            raise InvalidConfiguration(f"min_match must be at least 1, got {min_match}")
        if isinstance(cell_types, CellTypes):
            if empty_type is not None and empty_type != cell_types.empty_type:
                raise InvalidConfiguration(
                    f"empty_type '{empty_type}' does not match the registry's '{cell_types.empty_type}'"
                )
            registry = validate_cell_types(cell_types)
        else:
            registry = parse_cell_types(cell_types, min_match=min_match, empty_type=empty_type or EMPTY_TYPE)

        generator = WeightedTypeGenerator(registry.weights(), width * height, rng=self.rng)
        world = create_world(
            self.event_bus,
            cell_types=registry,
            target_score=target_score,
            max_moves=max_moves,
            rng=self.rng,
        )
        create_grid(world, width, height)
        if self.resolution is not None:
            self.resolution.detach()
        self.world = world
        self.generator = generator
        self.resolution = ResolutionSystem(
            world,
            self.event_bus,
            generator,
            scoring=scoring,
            reset_on_stalemate=reset_on_stalemate,
        )
        logger.debug("configured %dx%d board with types %s", width, height, registry.spawnable_types())
        self.resolution.restart(reason="configure")
        return grid_type_snapshot(world)

    def select(self, x: int, y: int) -> Optional[TurnResult]:
        return self._require_ready().select(x, y)

    def restart(self) -> List[List[str]]:
        self._require_ready().restart()
        return self.snapshot()

    def cell_type_at(self, x: int, y: int) -> str:
        self._require_ready()
        return cell_type_at(self.world, x, y)

    def texture_at(self, x: int, y: int) -> Optional[str]:
        """Presentation texture of the cell at (x, y), if its type names one."""
        self._require_ready()
        return get_cell_types(self.world).texture_for(cell_type_at(self.world, x, y))

    def snapshot(self) -> List[List[str]]:
        self._require_ready()
        return grid_type_snapshot(self.world)

    def available_moves(self):
        self._require_ready()
        return find_available_moves(self.world)

    def spawned_positions(self):
        self._require_ready()
        return spawned_positions(self.world)

    @property
    def round_state(self) -> RoundState:
        self._require_ready()
        return get_or_create_round_state(self.world)

    @property
    def width(self) -> int:
        self._require_ready()
        return get_grid(self.world).width()

    @property
    def height(self) -> int:
        self._require_ready()
        return get_grid(self.world).height()

    def _require_ready(self) -> ResolutionSystem:
        if self.resolution is None:
            raise EngineNotReady("configure() must be called before issuing commands")
        return self.resolution
