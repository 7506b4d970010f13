from dataclasses import dataclass
from typing import Iterator, List, Tuple

from tilefall.errors import OutOfBounds

Position = Tuple[int, int]


@dataclass(slots=True)
class Grid:
    """Fixed-size board of cell entity ids addressed as (x, y).

    ``slots[y][x]`` holds the entity occupying column x, row y; row 0 is the
    top and row ``rows - 1`` the bottom. Every slot always holds a live cell
    entity, empty slots included.
    """
    cols: int
    rows: int
    slots: List[List[int]]

    def __post_init__(self) -> None:
        if len(self.slots) != self.rows or any(len(row) != self.cols for row in self.slots):
            raise ValueError(f"slots do not form a {self.cols}x{self.rows} grid")

    def width(self) -> int:
        return self.cols

    def height(self) -> int:
        return self.rows

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def get(self, x: int, y: int) -> int:
        self._check(x, y)
        return self.slots[y][x]

    def set(self, x: int, y: int, entity: int) -> None:
        self._check(x, y)
        self.slots[y][x] = entity

    def coordinates(self) -> Iterator[Position]:
        for y in range(self.rows):
            for x in range(self.cols):
                yield (x, y)

    def column(self, x: int) -> List[int]:
        self._check(x, 0)
        return [self.slots[y][x] for y in range(self.rows)]

    def _check(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.cols, self.rows)
