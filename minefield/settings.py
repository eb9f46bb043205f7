"""Board size, difficulty presets and rule policies."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

MAX_WIDTH = 32
MAX_HEIGHT = 32
MAX_MINES = 512


@dataclass(frozen=True)
class Dimensions:
    """Validated board size and mine count.

    Out-of-range values are clamped rather than rejected: width and height
    into ``1..MAX_*``, mines into ``0..MAX_MINES`` and below the cell count so
    that at least one cell is always safe.
    """
    width: int
    height: int
    mines: int

    def __post_init__(self):
        width = min(max(self.width, 1), MAX_WIDTH)
        height = min(max(self.height, 1), MAX_HEIGHT)
        mines = min(max(self.mines, 0), MAX_MINES, width * height - 1)
        object.__setattr__(self, 'width', width)
        object.__setattr__(self, 'height', height)
        object.__setattr__(self, 'mines', mines)

    @property
    def cell_count(self) -> int:
        return self.width * self.height


class Preset(str, Enum):
    """Named difficulties."""
    BEGINNER = 'BEGINNER'
    INTERMEDIATE = 'INTERMEDIATE'
    EXPERT = 'EXPERT'

    @property
    def dimensions(self) -> Dimensions:
        return _PRESET_DIMENSIONS[self]

    @property
    def title(self) -> str:
        return self.value.title()


_PRESET_DIMENSIONS = {
    Preset.BEGINNER: Dimensions(9, 9, 10),
    Preset.INTERMEDIATE: Dimensions(16, 16, 40),
    Preset.EXPERT: Dimensions(30, 16, 99),
}


@dataclass(frozen=True)
class Custom:
    """Caller-supplied board size."""
    dimensions: Dimensions = field(default_factory=lambda: Dimensions(16, 16, 10))

    @property
    def title(self) -> str:
        return 'Custom'


Difficulty = Union[Preset, Custom]


def resolve_dimensions(difficulty: Difficulty) -> Dimensions:
    """Return the board size a difficulty stands for."""
    return difficulty.dimensions


class ChordSetting(str, Enum):
    """Which pointer gestures trigger a chord."""
    LEFT_CLICK = 'LEFT_CLICK'  # left click on a revealed number also chords
    LEFT_AND_RIGHT_CLICK = 'LEFT_AND_RIGHT_CLICK'
    DISABLED = 'DISABLED'


class FirstClickSetting(str, Enum):
    """How mine placement treats the first revealed cell."""
    ANY = 'ANY'
    SAFE = 'SAFE'
    ZERO = 'ZERO'


@dataclass
class Settings:
    """Everything a session needs to know about the rules in play."""
    difficulty: Difficulty = Preset.BEGINNER
    chord_setting: ChordSetting = ChordSetting.LEFT_CLICK
    first_click_setting: FirstClickSetting = FirstClickSetting.ZERO
    allow_question_marks: bool = False
    mines_remaining_floor: int = -99

    @property
    def dimensions(self) -> Dimensions:
        return resolve_dimensions(self.difficulty)
