"""HTTP routes against an in-memory stand-in for the Temporal client."""
import random

import pytest

from minefield import server
from minefield.input_state import Button
from minefield.session import GameSession
from minefield.types import GameView


class FakeHandle:
    def __init__(self, client, game_id):
        self.client = client
        self.game_id = game_id

    @property
    def session(self):
        if self.game_id not in self.client.sessions:
            raise RuntimeError(f"workflow {self.game_id} not found")
        return self.client.sessions[self.game_id]

    async def query(self, query_name):
        assert query_name == "get_game_state_query"
        return self._view()

    async def execute_update(self, update_name, arg=None):
        session = self.session
        if update_name == "press_update":
            session.press(arg.index, Button.parse(arg.button))
        elif update_name == "release_update":
            session.release(arg.index, Button.parse(arg.button))
        elif update_name == "leave_update":
            session.leave()
        elif update_name == "reset_update":
            session.reset()
        elif update_name == "set_difficulty_update":
            session.set_difficulty(arg.to_difficulty())
        else:
            raise AssertionError(f"unexpected update {update_name}")
        # Real query/update results come back as plain dicts
        return self._view().__dict__

    async def signal(self, signal_name):
        assert signal_name == "close_game_signal"
        self.client.closed.add(self.game_id)

    def _view(self):
        return GameView.from_session(self.game_id, self.session, closed=self.game_id in self.client.closed)


class FakeTemporalClient:
    def __init__(self):
        self.sessions = {}
        self.closed = set()
        self.started = []

    async def start_workflow(self, workflow_run, args, id, task_queue):
        game_id, difficulty, options = args
        self.started.append((id, task_queue))
        settings = options.to_settings(difficulty.to_difficulty())
        self.sessions[game_id] = GameSession(settings, rng=random.Random(0))

    def get_workflow_handle(self, game_id):
        return FakeHandle(self, game_id)


@pytest.fixture
def temporal_client(monkeypatch):
    client = FakeTemporalClient()
    monkeypatch.setattr(server, "temporal_client", client)
    return client


@pytest.fixture
def http(temporal_client):
    server.app.config["TESTING"] = True
    return server.app.test_client()


def create_game(http, **body):
    response = http.post("/api/games", json=body)
    assert response.status_code == 200
    return response.get_json()["gameState"]


def test_health(http):
    response = http.get("/api/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "OK"


def test_create_game_defaults_to_beginner(http, temporal_client):
    state = create_game(http)

    assert state["width"] == 9 and state["height"] == 9
    assert state["mineCount"] == 10
    assert state["status"] == "NOT_STARTED"
    assert state["face"] == "HAPPY"
    assert state["cells"] == ["BLANK"] * 81
    assert temporal_client.started[0][1] == server.connection_settings.task_queue


def test_create_custom_game_with_options(http, temporal_client):
    state = create_game(
        http,
        difficulty={"width": 50, "height": 5, "mineCount": 7},
        options={"chordSetting": "disabled", "firstClickSetting": "safe", "allowQuestionMarks": True},
    )

    assert (state["width"], state["height"], state["mineCount"]) == (32, 5, 7)
    assert state["difficulty"] == "Custom"
    settings = temporal_client.sessions[state["id"]].settings
    assert settings.allow_question_marks is True
    assert settings.first_click_setting.value == "SAFE"


@pytest.mark.parametrize("body", [
    {"difficulty": {"preset": "impossible"}},
    {"difficulty": {"width": "9", "height": 9, "mineCount": 10}},
    {"difficulty": {"width": True, "height": 9, "mineCount": 10}},
    {"options": {"chordSetting": "sometimes"}},
    {"options": {"minesRemainingFloor": "low"}},
    {"options": {"minesRemainingFloor": False}},
])
def test_create_game_rejects_bad_input(http, body):
    response = http.post("/api/games", json=body)

    assert response.status_code == 400
    assert "error" in response.get_json()


def test_press_and_release_reveal_a_cell(http):
    game_id = create_game(http)["id"]

    pressed = http.post(f"/api/games/{game_id}/press", json={"index": 40, "button": 0}).get_json()["gameState"]
    assert pressed["face"] == "NERVOUS"
    assert pressed["highlighted"] == [40]

    released = http.post(f"/api/games/{game_id}/release", json={"index": 40, "button": "left"}).get_json()["gameState"]
    assert released["status"] in ("ACTIVE", "WON")
    assert released["cells"][40] == "EMPTY"
    assert released["selectedIndex"] is None


def test_right_click_flags(http):
    game_id = create_game(http)["id"]

    state = http.post(f"/api/games/{game_id}/press", json={"index": 3, "button": 2}).get_json()["gameState"]

    assert state["cells"][3] == "FLAG"
    assert state["minesRemaining"] == 9


def test_pointer_event_needs_an_index(http):
    game_id = create_game(http)["id"]

    response = http.post(f"/api/games/{game_id}/press", json={"button": 0})

    assert response.status_code == 400


def test_leave_reset_and_difficulty(http):
    game_id = create_game(http)["id"]
    http.post(f"/api/games/{game_id}/press", json={"index": 4, "button": 0})

    left = http.post(f"/api/games/{game_id}/leave").get_json()["gameState"]
    assert left["selectedIndex"] is None

    reset = http.post(f"/api/games/{game_id}/reset").get_json()["gameState"]
    assert reset["status"] == "NOT_STARTED"
    assert reset["elapsedSeconds"] == 0

    expert = http.post(f"/api/games/{game_id}/difficulty", json={"preset": "expert"}).get_json()["gameState"]
    assert (expert["width"], expert["height"], expert["mineCount"]) == (30, 16, 99)
    assert expert["difficulty"] == "Expert"


def test_unknown_game(http):
    assert http.get("/api/games/missing").status_code == 404
    assert http.post("/api/games/missing/reset").status_code == 500


def test_close_game(http, temporal_client):
    game_id = create_game(http)["id"]

    assert http.delete(f"/api/games/{game_id}").get_json() == {"closed": True}
    assert http.get(f"/api/games/{game_id}").get_json()["gameState"]["closed"] is True


def test_serialize_accepts_objects_and_dicts():
    session = GameSession(rng=random.Random(0))
    view = GameView.from_session("abc", session)

    from_object = server.serialize_game_view(view)
    from_dict = server.serialize_game_view(view.__dict__)

    assert from_object == from_dict
    assert from_object["minesRemaining"] == 10
    assert server.serialize_game_view(None) is None


def test_boolean_is_not_a_cell_index(http):
    game_id = create_game(http)["id"]

    response = http.post(f"/api/games/{game_id}/press", json={"index": True, "button": 0})

    assert response.status_code == 400
