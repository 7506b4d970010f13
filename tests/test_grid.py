import pytest

from tilefall.components.grid import Grid
from tilefall.errors import OutOfBounds


def _grid(cols=3, rows=2):
    return Grid(cols=cols, rows=rows, slots=[[y * cols + x for x in range(cols)] for y in range(rows)])


def test_get_and_set_address_column_then_row():
    grid = _grid()
    assert grid.width() == 3 and grid.height() == 2
    assert grid.get(2, 1) == 5
    grid.set(0, 1, 99)
    assert grid.slots[1][0] == 99
    assert grid.get(0, 1) == 99


@pytest.mark.parametrize("x,y", [(-1, 0), (3, 0), (0, -1), (0, 2), (5, 5)])
def test_out_of_bounds_access_rejected(x, y):
    grid = _grid()
    with pytest.raises(OutOfBounds):
        grid.get(x, y)
    with pytest.raises(OutOfBounds):
        grid.set(x, y, 7)
    assert not grid.in_bounds(x, y)


def test_out_of_bounds_is_an_index_error():
    with pytest.raises(IndexError):
        _grid().get(3, 0)


def test_slots_must_match_dimensions():
    with pytest.raises(ValueError):
        Grid(cols=2, rows=2, slots=[[1, 2]])


def test_column_and_coordinates():
    grid = _grid()
    assert grid.column(1) == [1, 4]
    assert list(grid.coordinates())[:4] == [(0, 0), (1, 0), (2, 0), (0, 1)]
    with pytest.raises(OutOfBounds):
        grid.column(3)
