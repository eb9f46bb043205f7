import random

import pytest

from conftest import session_with_mines
from minefield.cell import RenderToken
from minefield.engine import GameStatus
from minefield.input_state import Button, InputState
from minefield.session import GameSession
from minefield.settings import ChordSetting, Custom, Dimensions, Preset
from minefield.types import DifficultyRequest, SessionOptions, SessionSnapshot


def test_difficulty_request_resolves_presets_and_custom_sizes():
    assert DifficultyRequest(preset="expert").to_difficulty() == Preset.EXPERT
    custom = DifficultyRequest(preset=None, width=40, height=5, mine_count=7).to_difficulty()
    assert custom == Custom(Dimensions(32, 5, 7))


def test_unknown_preset_is_a_value_error():
    with pytest.raises(ValueError):
        DifficultyRequest(preset="nope").to_difficulty()


@pytest.mark.parametrize("difficulty, expected", [
    (Preset.INTERMEDIATE, DifficultyRequest(preset="INTERMEDIATE")),
    (Custom(Dimensions(12, 8, 20)), DifficultyRequest(preset=None, width=12, height=8, mine_count=20)),
])
def test_difficulty_request_from_difficulty(difficulty, expected):
    request = DifficultyRequest.from_difficulty(difficulty)

    assert request == expected
    assert request.to_difficulty() == difficulty


def test_session_options_build_settings():
    settings = SessionOptions(chord_setting="disabled").to_settings(Preset.BEGINNER)

    assert settings.chord_setting == ChordSetting.DISABLED
    assert settings.dimensions == Dimensions(9, 9, 10)
    with pytest.raises(ValueError):
        SessionOptions(first_click_setting="sometimes").to_settings(Preset.BEGINNER)


def test_snapshot_resumes_a_game_in_a_fresh_session():
    session = session_with_mines(4, 4, [0, 15])
    session.press(14, Button.LEFT)
    session.release(14, Button.LEFT)
    session.press(0, Button.RIGHT)
    session.release(0, Button.RIGHT)
    for _ in range(3):
        session.tick()
    session.press(5, Button.LEFT)

    snapshot = SessionSnapshot.from_session(session)
    difficulty = DifficultyRequest.from_difficulty(session.settings.difficulty).to_difficulty()
    resumed = GameSession(SessionOptions().to_settings(difficulty), rng=random.Random(1))
    snapshot.restore(resumed)

    assert resumed.render() == session.render()
    assert resumed.status == GameStatus.ACTIVE
    assert resumed.elapsed_seconds == 3
    assert resumed.selected_index == 5
    assert resumed.input_state == InputState.LEFT
    assert resumed.mines_remaining == 1
    assert resumed.engine.revealed_count == 1
    assert resumed.engine.board.mine_indices == (0, 15)

    # The held press completes against the restored board
    assert resumed.release(5, Button.LEFT)
    assert resumed.render_token(5) == RenderToken.ONE
    resumed.press(15, Button.LEFT)
    resumed.release(15, Button.LEFT)
    assert resumed.status == GameStatus.LOST
    assert resumed.detonated_index == 15


def test_snapshot_must_match_the_board_size():
    snapshot = SessionSnapshot.from_session(session_with_mines(4, 4, [0]))

    with pytest.raises(ValueError):
        snapshot.restore(GameSession(rng=random.Random(0)))
