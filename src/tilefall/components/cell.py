from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class Cell:
    """Per-cell type assignment.

    Stores only the semantic type_name. Position belongs to the grid slot the
    cell occupies, never to the cell itself.
    """
    type_name: str


@dataclass(slots=True)
class Pooled:
    """Tag marking an inert cell parked in the CellPool."""
    pass


@dataclass(slots=True)
class Spawned:
    """Marks a cell placed by the latest refill (entrance animation hint)."""
    pos: Tuple[int, int]
