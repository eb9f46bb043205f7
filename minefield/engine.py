"""Reveal, cascade, chord and mark logic for one game."""
from collections import deque
from enum import Enum
from typing import Deque, FrozenSet, Optional

from minefield.cell import RenderToken
from minefield.generator import Board, RandomSource, generate
from minefield.settings import Dimensions, Settings


class GameStatus(str, Enum):
    """Possible game states."""
    NOT_STARTED = 'NOT_STARTED'
    ACTIVE = 'ACTIVE'
    WON = 'WON'
    LOST = 'LOST'


class RevealEngine:
    """Owns the board and applies player actions to it.

    Every action returns whether anything changed. Rejected actions (acting
    on a finished game, clicking a flag, chording with the wrong number of
    flags) simply return False.
    """

    def __init__(self, settings: Settings, rng: RandomSource):
        self.settings = settings
        self.rng = rng
        self.board = Board.empty(settings.dimensions)
        self.status = GameStatus.NOT_STARTED
        self.revealed_count = 0
        self.detonated_index: Optional[int] = None

    def reset(self, dimensions: Optional[Dimensions] = None) -> None:
        """Start over, rebuilding the board when the size changed."""
        dimensions = dimensions or self.board.dimensions
        if dimensions != self.board.dimensions:
            self.board = Board.empty(dimensions)
        else:
            self.board.clear()
        self.status = GameStatus.NOT_STARTED
        self.revealed_count = 0
        self.detonated_index = None

    @property
    def accepts_actions(self) -> bool:
        return self.status in (GameStatus.NOT_STARTED, GameStatus.ACTIVE)

    @property
    def total_cells(self) -> int:
        return len(self.board)

    @property
    def flagged_count(self) -> int:
        return sum(1 for cell in self.board.cells if cell.is_flagged)

    def render_token(self, index: int) -> RenderToken:
        return self.board.cells[index].render_token()

    def reveal(self, index: int) -> bool:
        """Reveal a cell and potentially cascade to neighbors."""
        return self._reveal(index, targets=frozenset((index,)))

    def toggle_mark(self, index: int) -> bool:
        if not self.accepts_actions:
            return False
        cell = self.board.cells[index]
        if cell.is_revealed:
            return False
        cell.cycle_mark(self.settings.allow_question_marks)
        return True

    def chord(self, index: int) -> bool:
        """Open every neighbor of a revealed number once its flags add up."""
        if not self.accepts_actions or not self.board.generated:
            return False
        cell = self.board.cells[index]
        if not cell.is_revealed or cell.is_mine:
            return False

        neighbors = self.board.neighbors[index]
        neighboring_flags = sum(1 for n in neighbors if self.board.cells[n].is_flagged)
        neighboring_mines = sum(1 for n in neighbors if self.board.cells[n].is_mine)
        if neighboring_flags != neighboring_mines:
            return False

        changed = False
        for neighbor in sorted(neighbors):
            # A wrong flag can end the game part way through
            if self._reveal(neighbor, targets=neighbors):
                changed = True
        return changed

    def _reveal(self, index: int, targets: FrozenSet[int]) -> bool:
        if not self.accepts_actions:
            return False
        cell = self.board.cells[index]
        if cell.is_revealed or cell.is_flagged:
            return False

        if not self.board.generated:
            self._start(index)
        self.status = GameStatus.ACTIVE

        worklist: Deque[int] = deque([index])
        while worklist:
            current = worklist.popleft()
            cell = self.board.cells[current]
            if not cell.reveal():
                continue

            if cell.is_mine:
                if current in targets and self.detonated_index is None:
                    self._detonate(current)
                    return True
                continue

            self.revealed_count += 1
            if cell.is_zero_adjacency:
                worklist.extend(n for n in self.board.neighbors[current] if not self.board.cells[n].is_revealed)

        self._check_for_win()
        return True

    def _start(self, first_clicked_index: int) -> None:
        """Lay mines now that the first click is known, keeping any marks already placed."""
        marks = [cell.display for cell in self.board.cells]
        self.board = generate(
            self.board.dimensions,
            first_clicked_index,
            self.settings.first_click_setting,
            self.rng,
        )
        for cell, display in zip(self.board.cells, marks):
            cell.display = display

    def _detonate(self, index: int) -> None:
        self.detonated_index = index
        for mine_index in self.board.mine_indices:
            self.board.cells[mine_index].reveal()
        self.status = GameStatus.LOST

    def _check_for_win(self) -> None:
        if self.revealed_count + self.board.mine_count != self.total_cells:
            return
        for mine_index in self.board.mine_indices:
            self.board.cells[mine_index].flag()
        self.status = GameStatus.WON
