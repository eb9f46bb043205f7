"""Temporal workflow hosting one Minesweeper game."""
import asyncio
from datetime import timedelta
from typing import Optional
from temporalio import workflow
from temporalio.exceptions import ApplicationError

with workflow.unsafe.imports_passed_through():
    from minefield.engine import GameStatus
    from minefield.input_state import Button
    from minefield.session import Face, GameSession
    from minefield.types import DifficultyRequest, GameView, PointerRequest, SessionOptions, SessionSnapshot

TICK_INTERVAL = timedelta(seconds=1)
CHECK_INTERVAL = timedelta(minutes=1)
INACTIVITY_TIMEOUT = timedelta(hours=24)


@workflow.defn
class MinesweeperWorkflow:
    """Workflow that owns a single GameSession.

    Updates are applied one at a time, so the session never sees concurrent
    calls. While the clock runs the main loop delivers a tick for every
    second that passes. Long games hand their state to a fresh run through
    continue-as-new when Temporal suggests it.
    """

    def __init__(self):
        self.game_id: str = ""
        self.session: GameSession | None = None
        self.last_activity_time: float = 0
        self.should_close: bool = False

    @workflow.run
    async def run(self, game_id: str, difficulty: DifficultyRequest, options: SessionOptions,
                  snapshot: Optional[SessionSnapshot] = None,
                  last_activity_time: Optional[float] = None) -> GameView:
        """Main workflow entry point."""
        self.game_id = game_id
        self.last_activity_time = last_activity_time or workflow.time()

        try:
            settings = options.to_settings(difficulty.to_difficulty())
            # workflow.random() is seeded by Temporal, so mine placement replays identically
            self.session = GameSession(settings, rng=workflow.random())
            if snapshot:
                snapshot.restore(self.session)
        except (TypeError, ValueError) as error:
            raise ApplicationError(f"Invalid game setup: {error}", non_retryable=True) from error

        while not self.should_close:
            ticking = self.session.clock_running
            timeout = TICK_INTERVAL if ticking else CHECK_INTERVAL
            try:
                await workflow.wait_condition(
                    lambda: self.should_close or self.session.clock_running != ticking,
                    timeout=timeout.total_seconds(),
                )
            except asyncio.TimeoutError:
                if ticking:
                    self.session.tick()

            if (workflow.time() - self.last_activity_time) >= INACTIVITY_TIMEOUT.total_seconds():
                workflow.logger.info(f"Game {game_id} auto-closing due to 24 hours of inactivity")
                break

            if workflow.info().is_continue_as_new_suggested():
                await workflow.wait_condition(workflow.all_handlers_finished)
                if not self.should_close:
                    workflow.logger.info(f"Game {game_id} continuing as new")
                    workflow.continue_as_new(args=[
                        game_id,
                        DifficultyRequest.from_difficulty(self.session.settings.difficulty),
                        options,
                        SessionSnapshot.from_session(self.session),
                        self.last_activity_time,
                    ])

        self.should_close = True
        workflow.logger.info(f"Minesweeper workflow {game_id} completed with status {self.session.status.value}")
        return self._view()

    @workflow.update
    async def press_update(self, pointer: PointerRequest) -> GameView:
        session = self._active_session()
        if not self.should_close:
            session.press(pointer.index, Button.parse(pointer.button))
        return self._view()

    @workflow.update
    async def release_update(self, pointer: PointerRequest) -> GameView:
        session = self._active_session()
        if not self.should_close:
            before = session.status
            session.release(pointer.index, Button.parse(pointer.button))
            self._log_outcome(before)
        return self._view()

    @workflow.update
    async def leave_update(self) -> GameView:
        session = self._active_session()
        if not self.should_close:
            session.leave()
        return self._view()

    @workflow.update
    async def reset_update(self) -> GameView:
        session = self._active_session()
        if not self.should_close:
            session.reset()
        return self._view()

    @workflow.update
    async def set_difficulty_update(self, difficulty: DifficultyRequest) -> GameView:
        session = self._active_session()
        if not self.should_close:
            session.set_difficulty(difficulty.to_difficulty())
            workflow.logger.info(
                f"Game {self.game_id} difficulty set to {session.settings.difficulty.title}: {session.dimensions}")
        return self._view()

    @press_update.validator
    def validate_press(self, pointer: PointerRequest) -> None:
        self._validate_index(pointer.index)

    @release_update.validator
    def validate_release(self, pointer: PointerRequest) -> None:
        self._validate_index(pointer.index)

    @set_difficulty_update.validator
    def validate_set_difficulty(self, difficulty: DifficultyRequest) -> None:
        # Raises ValueError for an unknown preset
        difficulty.to_difficulty()

    @workflow.signal
    def close_game_signal(self) -> None:
        """Signal to close the game."""
        self.should_close = True

    @workflow.query
    def get_game_state_query(self) -> GameView:
        """Query to get the current game state."""
        return self._view()

    def _active_session(self) -> GameSession:
        if not self.session:
            raise ApplicationError("Game state not initialized", non_retryable=True)
        self.last_activity_time = workflow.time()
        return self.session

    def _validate_index(self, index: int) -> None:
        if not self.session:
            raise ValueError("Game state not initialized")
        if not 0 <= index < self.session.dimensions.cell_count:
            raise ValueError(f"Cell index {index} is off the board")

    def _log_outcome(self, before: GameStatus) -> None:
        status = self.session.status
        if status != before and status in (GameStatus.WON, GameStatus.LOST):
            workflow.logger.info(
                f"Game {self.game_id} {status.value} after {self.session.elapsed_seconds}s, "
                f"{self.session.engine.revealed_count} cells revealed")

    def _view(self) -> GameView:
        if not self.session:
            # Minimal valid state while initializing
            return GameView(
                id=self.game_id,
                difficulty="",
                width=0,
                height=0,
                mine_count=0,
                status=GameStatus.NOT_STARTED.value,
                face=Face.HAPPY.value,
            )
        return GameView.from_session(self.game_id, self.session, closed=self.should_close)
