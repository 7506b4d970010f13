"""Cell-type table parsing.

A cell-type table maps a type name to a node with ``amount`` (spawn weight,
a fraction of the whole distribution), ``strategy`` and an optional
``texture``. Strategies are given by name (``"equals"``, ``"explosion"``), as a
dict (``{"kind": "explosion", "radius": 1}``) or as a ready ``FloodFill`` /
``RadiusBlast`` instance. Tables may be loaded from JSON files of the same
shape.
"""
from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from tilefall.components.cell_types import CellTypeDef, CellTypes, FloodFill, RadiusBlast, Strategy
from tilefall.constants import BLAST_RADIUS, EMPTY_TYPE, MIN_MATCH, STRATEGY_EQUALS, STRATEGY_EXPLOSION
from tilefall.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

# amount applies to the whole distribution of spawned cells
CELLS_CONFIG: Dict[str, Dict[str, Any]] = {
    "blue": {"amount": 0.19, "texture": "block_blue", "strategy": STRATEGY_EQUALS},
    "green": {"amount": 0.19, "texture": "block_green", "strategy": STRATEGY_EQUALS},
    "purple": {"amount": 0.19, "texture": "block_purple", "strategy": STRATEGY_EQUALS},
    "red": {"amount": 0.19, "texture": "block_red", "strategy": STRATEGY_EQUALS},
    "yellow": {"amount": 0.19, "texture": "block_yellow", "strategy": STRATEGY_EQUALS},
    "bomb": {"amount": 0.05, "texture": "block_bomb", "strategy": STRATEGY_EXPLOSION},
}


def _number(value: Any, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidConfiguration(f"{label} must be a finite number, got {value!r}")
    return value


def parse_strategy(value: Any, *, min_match: int = MIN_MATCH) -> Optional[Strategy]:
    if value is None:
        return None
    if isinstance(value, (FloodFill, RadiusBlast)):
        return value
    options: Dict[str, Any] = {}
    if isinstance(value, Mapping):
        options = dict(value)
        kind = options.pop("kind", None)
    else:
        kind = value
    if not isinstance(kind, str):
        raise InvalidConfiguration(f"Unknown strategy {value!r}")
    kind = kind.strip().lower()
    if kind == STRATEGY_EQUALS:
        threshold = _number(options.pop("min_match", min_match), "min_match")
        if threshold != int(threshold):
            raise InvalidConfiguration(f"min_match must be a whole number, got {threshold}")
        if threshold < 1:
            raise InvalidConfiguration(f"min_match must be at least 1, got {threshold}")
        strategy: Strategy = FloodFill(min_match=int(threshold))
    elif kind == STRATEGY_EXPLOSION:
        # fractional radii are kept: 1.5 reaches the diagonal neighbours
        radius = _number(options.pop("radius", BLAST_RADIUS), "radius")
        if radius < 0:
            raise InvalidConfiguration(f"radius must not be negative, got {radius}")
        strategy = RadiusBlast(radius=radius)
    else:
        raise InvalidConfiguration(f"Unknown strategy '{kind}'")
    if options:
        raise InvalidConfiguration(f"Unexpected strategy options {sorted(options)} for '{kind}'")
    return strategy


def parse_cell_types(
    table: Mapping[str, Any],
    *,
    min_match: int = MIN_MATCH,
    empty_type: str = EMPTY_TYPE,
) -> CellTypes:
    """Validate a cell-type table and build the CellTypes registry component."""
    if not table:
        raise InvalidConfiguration("Cell type table is empty")
    definitions: Dict[str, CellTypeDef] = {}
    for name, node in table.items():
        if isinstance(node, CellTypeDef):
            definitions[name] = node
            continue
        if not isinstance(node, Mapping):
            raise InvalidConfiguration(f"Cell type '{name}' must be a mapping, got {type(node).__name__}")
        try:
            weight = float(node.get("amount", node.get("weight", 0.0)))
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"Cell type '{name}' has a non-numeric weight") from exc
        if weight < 0:
            raise InvalidConfiguration(f"Cell type '{name}' has a negative weight")
        strategy = parse_strategy(node.get("strategy"), min_match=min_match)
        definitions[name] = CellTypeDef(
            name=name,
            weight=weight,
            strategy=strategy,
            texture=node.get("texture"),
        )
    registry = CellTypes(types=definitions, empty_type=empty_type)
    return validate_cell_types(registry)


def validate_cell_types(registry: CellTypes) -> CellTypes:
    """Check a registry: the empty type never spawns or matches, and something spawns."""
    empty = registry.definition(registry.empty_type)
    if empty.weight > 0 or empty.strategy is not None:
        raise InvalidConfiguration(f"Empty type '{registry.empty_type}' cannot spawn or be selected")
    total = sum(registry.weights().values())
    if total <= 0:
        raise InvalidConfiguration("Spawn weights sum to zero")
    if total > 1.0 + 1e-9:
        logger.debug("Spawn weights sum to %.3f; treating them as relative proportions", total)
    return registry


def load_cell_types(path: Path | str, **kwargs: Any) -> CellTypes:
    """Read a JSON cell-type table from ``path``."""
    try:
        table = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise InvalidConfiguration(f"Cannot read cell type table from {path}: {exc}") from exc
    if not isinstance(table, dict):
        raise InvalidConfiguration(f"Cell type table in {path} must be a JSON object")
    return parse_cell_types(table, **kwargs)
