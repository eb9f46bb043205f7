"""Mouse button bookkeeping that tells clicks, flags and chords apart."""
from enum import Enum

from minefield.settings import ChordSetting


class Button(str, Enum):
    LEFT = 'LEFT'
    RIGHT = 'RIGHT'
    OTHER = 'OTHER'

    @classmethod
    def from_code(cls, code: int) -> 'Button':
        """Map a DOM ``MouseEvent.button`` code; middle and extra buttons are OTHER."""
        if code == 0:
            return cls.LEFT
        if code == 2:
            return cls.RIGHT
        return cls.OTHER

    @classmethod
    def parse(cls, name: str) -> 'Button':
        try:
            return cls(str(name).upper())
        except ValueError:
            return cls.OTHER


class InputState(str, Enum):
    """Which buttons are currently held.

    AFTER_BOTH follows the release of one button of a two-button chord; the
    player has to let go of both before a single click counts again.
    """
    NEITHER = 'NEITHER'
    LEFT = 'LEFT'
    RIGHT = 'RIGHT'
    BOTH = 'BOTH'
    AFTER_BOTH = 'AFTER_BOTH'


def on_press(state: InputState, button: Button) -> InputState:
    if button == Button.OTHER:
        return state
    if state == InputState.NEITHER:
        return InputState.LEFT if button == Button.LEFT else InputState.RIGHT
    if state == InputState.LEFT:
        return InputState.BOTH if button == Button.RIGHT else state
    if state == InputState.RIGHT:
        return InputState.BOTH if button == Button.LEFT else state
    return InputState.BOTH


def on_release(state: InputState, button: Button) -> InputState:
    if button == Button.OTHER:
        return state
    if state == InputState.LEFT:
        return InputState.NEITHER if button == Button.LEFT else state
    if state == InputState.RIGHT:
        return InputState.NEITHER if button == Button.RIGHT else state
    if state == InputState.BOTH:
        return InputState.AFTER_BOTH
    return InputState.NEITHER


def is_chording(state: InputState, chord_setting: ChordSetting, target_is_revealed: bool) -> bool:
    if state == InputState.BOTH:
        return True
    return (state == InputState.LEFT
            and chord_setting == ChordSetting.LEFT_CLICK
            and target_is_revealed)
