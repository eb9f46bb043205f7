"""Shared fixtures: seeded randomness and boards with hand-placed mines."""
import random

import pytest

from minefield.cell import Cell, CellValue
from minefield.engine import RevealEngine
from minefield.generator import Board, calculate_neighbors
from minefield.session import GameSession
from minefield.settings import Custom, Dimensions, FirstClickSetting, Settings


class ScriptedRandom:
    """Hands out a fixed sequence of draws."""

    def __init__(self, draws):
        self.draws = list(draws)

    def randrange(self, stop):
        value = self.draws.pop(0)
        assert 0 <= value < stop
        return value


def build_board(width, height, mine_indices):
    """A generated board with mines exactly where the test wants them."""
    mines = set(mine_indices)
    dimensions = Dimensions(width, height, len(mines))
    cells = []
    neighbors = []
    for index in range(width * height):
        cell_neighbors = calculate_neighbors(index, width, height)
        value = CellValue.MINE if index in mines else CellValue.from_count(len(cell_neighbors & mines))
        cells.append(Cell(value=value))
        neighbors.append(cell_neighbors)
    return Board(dimensions, cells, neighbors, tuple(sorted(mines)), generated=True)


def engine_with_mines(width, height, mine_indices, **settings):
    """A started engine over a hand-built board."""
    board = build_board(width, height, mine_indices)
    engine = RevealEngine(Settings(difficulty=Custom(board.dimensions), **settings), random.Random(0))
    engine.board = board
    return engine


def session_with_mines(width, height, mine_indices, **settings):
    """A session whose first click lands on a hand-built board."""
    session = GameSession(
        Settings(difficulty=Custom(Dimensions(width, height, len(set(mine_indices)))), **settings),
        rng=random.Random(0),
    )
    session.engine.board = build_board(width, height, mine_indices)
    return session


@pytest.fixture
def custom_settings():
    def make(width, height, mines, first_click=FirstClickSetting.ZERO, **kwargs):
        return Settings(difficulty=Custom(Dimensions(width, height, mines)), first_click_setting=first_click, **kwargs)
    return make
