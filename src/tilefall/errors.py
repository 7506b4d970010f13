"""Exceptions raised by the tilefall engine.

Each error rejects the single call that raised it; the engine stays usable
for subsequent commands.
"""


class TilefallError(Exception):
    """Base class for engine errors."""


class OutOfBounds(TilefallError, IndexError):
    """Coordinate lies outside the grid."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(f"({x}, {y}) is outside a {width}x{height} grid")
        self.x = x
        self.y = y
        self.width = width
        self.height = height


class InvalidCoordinate(OutOfBounds):
    """A selected coordinate does not address a grid slot."""


class InvalidConfiguration(TilefallError, ValueError):
    """Cell-type table or round settings cannot be used."""


class EngineNotReady(TilefallError, RuntimeError):
    """A command arrived before ``configure``."""


class RoundOver(TilefallError, RuntimeError):
    """A move was recorded on a round that already has an outcome."""
