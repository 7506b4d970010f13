from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Union

from tilefall.constants import BLAST_RADIUS, EMPTY_TYPE, MIN_MATCH, STRATEGY_EQUALS, STRATEGY_EXPLOSION


@dataclass(frozen=True, slots=True)
class FloodFill:
    """Select the 4-connected group of cells sharing the origin's type."""
    min_match: int = MIN_MATCH
    kind: ClassVar[str] = STRATEGY_EQUALS


@dataclass(frozen=True, slots=True)
class RadiusBlast:
    """Select every slot within ``radius`` (Euclidean) of the origin."""
    radius: float = BLAST_RADIUS
    kind: ClassVar[str] = STRATEGY_EXPLOSION


Strategy = Union[FloodFill, RadiusBlast]


@dataclass(frozen=True, slots=True)
class CellTypeDef:
    """Configuration for one cell type.

    weight: spawn proportion relative to the other spawnable types.
    strategy: group selection used when a cell of this type is selected; None
    makes the type unselectable.
    texture: opaque presentation reference, unused by the engine.
    """
    name: str
    weight: float = 0.0
    strategy: Optional[Strategy] = None
    texture: Optional[str] = None


@dataclass(slots=True)
class CellTypes:
    """Canonical cell type definitions stored on a single entity."""
    types: Dict[str, CellTypeDef]
    empty_type: str = EMPTY_TYPE
    _spawnable: List[str] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.empty_type not in self.types:
            self.types[self.empty_type] = CellTypeDef(name=self.empty_type)
        self._spawnable = [
            name for name, definition in self.types.items()
            if name != self.empty_type and definition.weight > 0
        ]

    def definition(self, type_name: str) -> CellTypeDef:
        return self.types[type_name]

    def strategy_for(self, type_name: str) -> Optional[Strategy]:
        if type_name == self.empty_type:
            return None
        definition = self.types.get(type_name)
        return definition.strategy if definition else None

    def texture_for(self, type_name: str) -> Optional[str]:
        definition = self.types.get(type_name)
        return definition.texture if definition else None

    def spawnable_types(self) -> List[str]:
        return list(self._spawnable)

    def weights(self) -> Dict[str, float]:
        return {name: self.types[name].weight for name in self._spawnable}
