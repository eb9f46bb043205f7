"""A single tile: what it hides and what the player sees."""
from dataclasses import dataclass
from enum import Enum, IntEnum


class CellValue(IntEnum):
    """What a cell holds: a mine, or the number of adjacent mines."""
    MINE = -1
    ZERO = 0
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8

    @classmethod
    def from_count(cls, neighbor_mines: int) -> 'CellValue':
        if not 0 <= neighbor_mines <= 8:
            raise ValueError(f"Unexpected number of neighboring mines: {neighbor_mines}")
        return cls(neighbor_mines)


class DisplayState(str, Enum):
    HIDDEN = 'HIDDEN'
    FLAGGED = 'FLAGGED'
    QUESTIONED = 'QUESTIONED'
    REVEALED = 'REVEALED'


class RenderToken(str, Enum):
    """What the presentation layer should draw for a cell."""
    BLANK = 'BLANK'
    FLAG = 'FLAG'
    QUESTION = 'QUESTION'
    MINE = 'MINE'
    EMPTY = 'EMPTY'
    ONE = 'ONE'
    TWO = 'TWO'
    THREE = 'THREE'
    FOUR = 'FOUR'
    FIVE = 'FIVE'
    SIX = 'SIX'
    SEVEN = 'SEVEN'
    EIGHT = 'EIGHT'

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]

    @property
    def style(self) -> str:
        """Class name used to colour digits; empty for everything else."""
        if self in _DIGIT_TOKENS:
            return self.value.lower()
        return ''


_DIGIT_TOKENS = (
    RenderToken.ONE, RenderToken.TWO, RenderToken.THREE, RenderToken.FOUR,
    RenderToken.FIVE, RenderToken.SIX, RenderToken.SEVEN, RenderToken.EIGHT,
)

_GLYPHS = {
    RenderToken.BLANK: ' ',
    RenderToken.FLAG: '\U0001F6A9',
    RenderToken.QUESTION: '?',
    RenderToken.MINE: '*',
    RenderToken.EMPTY: ' ',
    **{token: str(number) for number, token in enumerate(_DIGIT_TOKENS, start=1)},
}


@dataclass
class Cell:
    """Represents a single cell on the minesweeper board."""
    value: CellValue = CellValue.ZERO
    display: DisplayState = DisplayState.HIDDEN

    def reset(self) -> None:
        self.value = CellValue.ZERO
        self.display = DisplayState.HIDDEN

    def reveal(self) -> bool:
        """Show the cell. Returns False when it was flagged or already shown."""
        if self.display in (DisplayState.FLAGGED, DisplayState.REVEALED):
            return False
        self.display = DisplayState.REVEALED
        return True

    def cycle_mark(self, allow_questioned: bool) -> None:
        """Hidden -> Flagged -> (Questioned) -> Hidden. Revealed cells stay put."""
        if self.display == DisplayState.HIDDEN:
            self.display = DisplayState.FLAGGED
        elif self.display == DisplayState.FLAGGED:
            self.display = DisplayState.QUESTIONED if allow_questioned else DisplayState.HIDDEN
        elif self.display == DisplayState.QUESTIONED:
            self.display = DisplayState.HIDDEN

    def flag(self) -> None:
        self.display = DisplayState.FLAGGED

    @property
    def is_revealed(self) -> bool:
        return self.display == DisplayState.REVEALED

    @property
    def is_flagged(self) -> bool:
        return self.display == DisplayState.FLAGGED

    @property
    def is_mine(self) -> bool:
        return self.value == CellValue.MINE

    @property
    def is_zero_adjacency(self) -> bool:
        return self.value == CellValue.ZERO

    def render_token(self) -> RenderToken:
        if self.display == DisplayState.HIDDEN:
            return RenderToken.BLANK
        if self.display == DisplayState.FLAGGED:
            return RenderToken.FLAG
        if self.display == DisplayState.QUESTIONED:
            return RenderToken.QUESTION
        if self.is_mine:
            return RenderToken.MINE
        if self.is_zero_adjacency:
            return RenderToken.EMPTY
        return _DIGIT_TOKENS[self.value - 1]
