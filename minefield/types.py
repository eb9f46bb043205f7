"""Type definitions exchanged with the workflow and over HTTP."""
from dataclasses import dataclass, field
from typing import List, Optional

from minefield.cell import CellValue, DisplayState
from minefield.engine import GameStatus
from minefield.input_state import InputState
from minefield.session import GameSession
from minefield.settings import ChordSetting, Custom, Difficulty, Dimensions, FirstClickSetting, Preset, Settings


@dataclass
class DifficultyRequest:
    """A preset name, or a custom size when ``preset`` is empty."""
    preset: Optional[str] = Preset.BEGINNER.value
    width: int = 0
    height: int = 0
    mine_count: int = 0

    def to_difficulty(self) -> Difficulty:
        if self.preset:
            return Preset(str(self.preset).upper())
        return Custom(Dimensions(self.width, self.height, self.mine_count))

    @classmethod
    def from_difficulty(cls, difficulty: Difficulty) -> 'DifficultyRequest':
        if isinstance(difficulty, Preset):
            return cls(preset=difficulty.value)
        dimensions = difficulty.dimensions
        return cls(preset=None, width=dimensions.width, height=dimensions.height, mine_count=dimensions.mines)


@dataclass
class SessionOptions:
    """Rule policies fixed when a game is created."""
    chord_setting: str = ChordSetting.LEFT_CLICK.value
    first_click_setting: str = FirstClickSetting.ZERO.value
    allow_question_marks: bool = False
    mines_remaining_floor: int = -99

    def to_settings(self, difficulty: Difficulty) -> Settings:
        return Settings(
            difficulty=difficulty,
            chord_setting=ChordSetting(str(self.chord_setting).upper()),
            first_click_setting=FirstClickSetting(str(self.first_click_setting).upper()),
            allow_question_marks=self.allow_question_marks,
            mines_remaining_floor=self.mines_remaining_floor,
        )


@dataclass
class PointerRequest:
    """A press or release resolved to the board index under the pointer."""
    index: int
    button: str


@dataclass
class GameView:
    """Read-only snapshot of a game for the presentation layer."""
    id: str
    difficulty: str
    width: int
    height: int
    mine_count: int
    status: str
    face: str
    cells: List[str] = field(default_factory=list)
    highlighted: List[int] = field(default_factory=list)
    mines_remaining: int = 0
    elapsed_seconds: int = 0
    selected_index: Optional[int] = None
    detonated_index: Optional[int] = None
    closed: bool = False

    @classmethod
    def from_session(cls, game_id: str, session: GameSession, closed: bool = False) -> 'GameView':
        dimensions = session.dimensions
        return cls(
            id=game_id,
            difficulty=session.settings.difficulty.title,
            width=dimensions.width,
            height=dimensions.height,
            mine_count=dimensions.mines,
            status=session.status.value,
            face=session.face.value,
            cells=[token.value for token in session.render()],
            highlighted=sorted(session.highlighted_indices()),
            mines_remaining=session.mines_remaining,
            elapsed_seconds=session.elapsed_seconds,
            selected_index=session.selected_index,
            detonated_index=session.detonated_index,
            closed=closed,
        )


@dataclass
class SessionSnapshot:
    """A game in progress, carried from one workflow run into the next.

    The board's size comes from the difficulty the next run is started
    with, so only per-cell state and counters are kept here.
    """
    cell_values: List[int]
    cell_displays: List[str]
    mine_indices: List[int]
    generated: bool
    status: str
    revealed_count: int
    detonated_index: Optional[int]
    input_state: str
    selected_index: Optional[int]
    elapsed_seconds: int

    @classmethod
    def from_session(cls, session: GameSession) -> 'SessionSnapshot':
        engine = session.engine
        return cls(
            cell_values=[int(cell.value) for cell in engine.board.cells],
            cell_displays=[cell.display.value for cell in engine.board.cells],
            mine_indices=list(engine.board.mine_indices),
            generated=engine.board.generated,
            status=engine.status.value,
            revealed_count=engine.revealed_count,
            detonated_index=engine.detonated_index,
            input_state=session.input_state.value,
            selected_index=session.selected_index,
            elapsed_seconds=session.elapsed_seconds,
        )

    def restore(self, session: GameSession) -> None:
        """Load this snapshot into a fresh session built with the same settings."""
        engine = session.engine
        board = engine.board
        if len(self.cell_values) != len(board) or len(self.cell_displays) != len(board):
            raise ValueError(f"Snapshot holds {len(self.cell_values)} cells, board has {len(board)}")

        for cell, value, display in zip(board.cells, self.cell_values, self.cell_displays):
            cell.value = CellValue(value)
            cell.display = DisplayState(display)
        board.mine_indices = tuple(self.mine_indices)
        board.generated = self.generated

        engine.status = GameStatus(self.status)
        engine.revealed_count = self.revealed_count
        engine.detonated_index = self.detonated_index
        session.input_state = InputState(self.input_state)
        session.selected_index = self.selected_index
        session.elapsed_seconds = self.elapsed_seconds
