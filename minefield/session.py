"""Game session: the action surface the presentation layer talks to."""
import random
from enum import Enum
from typing import FrozenSet, List, Optional, Union

from minefield.cell import RenderToken
from minefield.engine import GameStatus, RevealEngine
from minefield.generator import RandomSource
from minefield.input_state import Button, InputState, is_chording, on_press, on_release
from minefield.settings import Custom, Difficulty, Dimensions, Settings

MAX_ELAPSED_SECONDS = 999


class Face(str, Enum):
    """Status icon shown above the board."""
    HAPPY = 'HAPPY'
    NERVOUS = 'NERVOUS'
    DEAD = 'DEAD'
    COOL = 'COOL'

    @property
    def glyph(self) -> str:
        return {
            Face.HAPPY: '\U0001F642',
            Face.NERVOUS: '\U0001F62C',
            Face.DEAD: '\U0001F635',
            Face.COOL: '\U0001F60E',
        }[self]


class GameSession:
    """Single owner of one game's board, input state and clock.

    Pointer events arrive already resolved to a board index and a button.
    The session never schedules anything: the host calls ``tick`` once a
    second for as long as the status is ACTIVE.
    """

    def __init__(self, settings: Optional[Settings] = None, rng: Optional[RandomSource] = None):
        self.settings = settings or Settings()
        self.engine = RevealEngine(self.settings, rng or random.Random())
        self.input_state = InputState.NEITHER
        self.selected_index: Optional[int] = None
        self.elapsed_seconds = 0

    @property
    def status(self) -> GameStatus:
        return self.engine.status

    @property
    def dimensions(self) -> Dimensions:
        return self.engine.board.dimensions

    @property
    def detonated_index(self) -> Optional[int]:
        return self.engine.detonated_index

    def press(self, index: int, button: Button) -> bool:
        previous = self.input_state
        self.input_state = on_press(previous, button)
        if not self.engine.accepts_actions:
            return False

        if self.input_state in (InputState.LEFT, InputState.BOTH):
            self.selected_index = index
            return True
        if self.input_state == InputState.RIGHT and previous != InputState.RIGHT:
            return self.engine.toggle_mark(index)
        return False

    def release(self, index: int, button: Button) -> bool:
        previous = self.input_state
        self.input_state = on_release(previous, button)

        changed = False
        if self.engine.accepts_actions:
            if previous == InputState.LEFT and self.input_state == InputState.NEITHER:
                target_is_revealed = self.engine.board.cells[index].is_revealed
                chord = is_chording(previous, self.settings.chord_setting, target_is_revealed)
                changed = self._complete(index, chord)
            elif previous == InputState.BOTH and self.input_state == InputState.AFTER_BOTH:
                changed = self._complete(index, chord=True)

        if self.input_state == InputState.NEITHER:
            self.selected_index = None
        return changed

    def leave(self) -> bool:
        """The pointer left the board: drop whatever press was pending."""
        if self.selected_index is None and self.input_state == InputState.NEITHER:
            return False
        self.selected_index = None
        self.input_state = InputState.NEITHER
        return True

    @property
    def clock_running(self) -> bool:
        """Whether a tick would still move the clock."""
        return self.status == GameStatus.ACTIVE and self.elapsed_seconds < MAX_ELAPSED_SECONDS

    def tick(self) -> bool:
        if not self.clock_running:
            return False
        self.elapsed_seconds += 1
        return True

    def reset(self) -> None:
        self.engine.reset(self.settings.dimensions)
        self.input_state = InputState.NEITHER
        self.selected_index = None
        self.elapsed_seconds = 0

    def set_difficulty(self, difficulty: Union[Difficulty, Dimensions]) -> None:
        if isinstance(difficulty, Dimensions):
            difficulty = Custom(difficulty)
        self.settings.difficulty = difficulty
        self.reset()

    @property
    def mines_remaining(self) -> int:
        remaining = self.dimensions.mines - self.engine.flagged_count
        return max(remaining, self.settings.mines_remaining_floor)

    @property
    def face(self) -> Face:
        if self.status == GameStatus.LOST:
            return Face.DEAD
        if self.status == GameStatus.WON:
            return Face.COOL
        if self.selected_index is not None:
            return Face.NERVOUS
        return Face.HAPPY

    def render_token(self, index: int) -> RenderToken:
        return self.engine.render_token(index)

    def render(self) -> List[RenderToken]:
        return [self.engine.render_token(index) for index in range(self.engine.total_cells)]

    def highlighted_indices(self) -> FrozenSet[int]:
        """Cells drawn pressed-in: the held cell, plus its neighbors while chording."""
        if self.selected_index is None or not self.engine.accepts_actions:
            return frozenset()
        board = self.engine.board
        selected_is_revealed = board.cells[self.selected_index].is_revealed
        indices = {self.selected_index}
        if is_chording(self.input_state, self.settings.chord_setting, selected_is_revealed):
            indices |= board.neighbors[self.selected_index]
        return frozenset(i for i in indices if not board.cells[i].is_flagged)

    def _complete(self, index: int, chord: bool) -> bool:
        if self.selected_index != index:
            # The pointer moved off the pressed cell before letting go
            return False
        if chord:
            return self.engine.chord(index)
        return self.engine.reveal(index)
