import json

import pytest

from tilefall.components.cell_types import CellTypeDef, CellTypes, FloodFill, RadiusBlast
from tilefall.config import CELLS_CONFIG, load_cell_types, parse_cell_types, parse_strategy, validate_cell_types
from tilefall.constants import BLAST_RADIUS, EMPTY_TYPE, MIN_MATCH
from tilefall.errors import InvalidConfiguration


def test_default_table_parses():
    registry = parse_cell_types(CELLS_CONFIG)
    assert registry.strategy_for("blue") == FloodFill(min_match=MIN_MATCH)
    assert registry.strategy_for("bomb") == RadiusBlast(radius=BLAST_RADIUS)
    assert registry.texture_for("red") == "block_red"
    assert registry.weights()["bomb"] == pytest.approx(0.05)
    assert EMPTY_TYPE in registry.types
    assert EMPTY_TYPE not in registry.spawnable_types()
    assert registry.strategy_for(EMPTY_TYPE) is None


def test_strategy_spellings():
    assert parse_strategy("EQUALS", min_match=3) == FloodFill(min_match=3)
    assert parse_strategy({"kind": "explosion", "radius": 1}) == RadiusBlast(radius=1)
    assert parse_strategy({"kind": "equals", "min_match": 4}) == FloodFill(min_match=4)
    assert parse_strategy(RadiusBlast(radius=3)) == RadiusBlast(radius=3)
    assert parse_strategy(None) is None


def test_fractional_radius_kept_and_whole_min_match_accepted():
    assert parse_strategy({"kind": "explosion", "radius": 1.5}) == RadiusBlast(radius=1.5)
    assert parse_strategy({"kind": "equals", "min_match": 3.0}) == FloodFill(min_match=3)
    assert isinstance(parse_strategy({"kind": "equals", "min_match": 3.0}).min_match, int)


@pytest.mark.parametrize(
    "value",
    ["teleport", 7, {"kind": "explosion", "radius": -1}, {"kind": "equals", "min_match": 0},
     {"kind": "explosion", "power": 2}, {"kind": "equals", "min_match": 2.5},
     {"kind": "explosion", "radius": "2"}, {"kind": "explosion", "radius": float("nan")},
     {"kind": "equals", "min_match": True}],
)
def test_bad_strategies_rejected(value):
    with pytest.raises(InvalidConfiguration):
        parse_strategy(value)


@pytest.mark.parametrize(
    "table",
    [
        {},
        {"blue": {"amount": 0.0, "strategy": "equals"}},
        {"blue": {"amount": -0.5, "strategy": "equals"}},
        {"blue": {"amount": "lots", "strategy": "equals"}},
        {"blue": "equals"},
        {"blue": {"amount": 1.0, "strategy": "equals"}, "empty": {"amount": 0.2}},
        {"blue": {"amount": 1.0, "strategy": "equals"}, "empty": {"strategy": "equals"}},
    ],
)
def test_bad_tables_rejected(table):
    with pytest.raises(InvalidConfiguration):
        parse_cell_types(table)


def test_weights_are_proportions_not_probabilities():
    registry = parse_cell_types({"a": {"amount": 2, "strategy": "equals"}, "b": {"weight": 1}})
    assert registry.weights() == {"a": 2.0, "b": 1.0}
    assert registry.strategy_for("b") is None


def test_load_cell_types_from_json(tmp_path):
    path = tmp_path / "cells.json"
    path.write_text(json.dumps({
        "blue": {"amount": 0.8, "strategy": "equals"},
        "bomb": {"amount": 0.2, "strategy": {"kind": "explosion", "radius": 1}},
    }))
    registry = load_cell_types(path, min_match=3)
    assert registry.strategy_for("blue") == FloodFill(min_match=3)
    assert registry.strategy_for("bomb") == RadiusBlast(radius=1)


def test_load_cell_types_rejects_bad_json(tmp_path):
    path = tmp_path / "cells.json"
    path.write_text("{not json")
    with pytest.raises(InvalidConfiguration):
        load_cell_types(path)
    with pytest.raises(InvalidConfiguration):
        load_cell_types(tmp_path / "missing.json")


def test_validate_cell_types_checks_prebuilt_registries():
    blue = CellTypeDef(name="blue", weight=1.0, strategy=FloodFill())
    registry = CellTypes(types={"blue": blue})
    assert validate_cell_types(registry) is registry
    with pytest.raises(InvalidConfiguration):
        validate_cell_types(CellTypes(types={"blue": blue, EMPTY_TYPE: CellTypeDef(EMPTY_TYPE, strategy=FloodFill())}))
    with pytest.raises(InvalidConfiguration):
        validate_cell_types(CellTypes(types={"blue": CellTypeDef(name="blue", strategy=FloodFill())}))
