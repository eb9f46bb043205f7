"""Flask server for Minesweeper games hosted on Temporal."""
import asyncio
import os
import logging
from datetime import datetime
from flask import Flask, request, jsonify
from flask_cors import CORS
from temporalio.client import Client
import uuid

from minefield.client_provider import ConnectionSettings, get_temporal_client
from minefield.input_state import Button
from minefield.settings import ChordSetting, FirstClickSetting, Preset
from minefield.types import DifficultyRequest, PointerRequest, SessionOptions
from minefield.workflows import MinesweeperWorkflow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# Global client reference
temporal_client: Client | None = None
connection_settings = ConnectionSettings()

VIEW_FIELDS = {
    'id': 'id',
    'difficulty': 'difficulty',
    'width': 'width',
    'height': 'height',
    'mine_count': 'mineCount',
    'status': 'status',
    'face': 'face',
    'cells': 'cells',
    'highlighted': 'highlighted',
    'mines_remaining': 'minesRemaining',
    'elapsed_seconds': 'elapsedSeconds',
    'selected_index': 'selectedIndex',
    'detonated_index': 'detonatedIndex',
    'closed': 'closed',
}


def serialize_game_view(game_view):
    """Convert a game view to its camelCase JSON form."""
    if not game_view:
        return None

    # Query results arrive as dicts, local views as GameView objects
    def get_attr(obj, key):
        if isinstance(obj, dict):
            return obj.get(key)
        return getattr(obj, key, None)

    return {json_key: get_attr(game_view, key) for key, json_key in VIEW_FIELDS.items()}


def is_integer(value) -> bool:
    # JSON true/false arrive as bool, which is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


def parse_difficulty(data) -> DifficultyRequest:
    """Build a DifficultyRequest from ``{"preset": ...}`` or a custom size."""
    if not isinstance(data, dict):
        raise ValueError('Invalid difficulty')
    preset = data.get('preset')
    if preset:
        if str(preset).upper() not in Preset.__members__:
            raise ValueError(f'Unknown preset: {preset}')
        return DifficultyRequest(preset=str(preset).upper())

    size = [data.get('width'), data.get('height'), data.get('mineCount')]
    if not all(is_integer(value) for value in size):
        raise ValueError('Custom difficulty needs integer width, height and mineCount')
    width, height, mine_count = size
    return DifficultyRequest(preset=None, width=width, height=height, mine_count=mine_count)


def parse_options(data) -> SessionOptions:
    options = SessionOptions()
    if not data:
        return options
    if not isinstance(data, dict):
        raise ValueError('Invalid options')

    chord_setting = str(data.get('chordSetting', options.chord_setting)).upper()
    if chord_setting not in ChordSetting.__members__:
        raise ValueError(f'Unknown chord setting: {chord_setting}')
    first_click_setting = str(data.get('firstClickSetting', options.first_click_setting)).upper()
    if first_click_setting not in FirstClickSetting.__members__:
        raise ValueError(f'Unknown first click setting: {first_click_setting}')

    options.chord_setting = chord_setting
    options.first_click_setting = first_click_setting
    options.allow_question_marks = bool(data.get('allowQuestionMarks', options.allow_question_marks))
    floor = data.get('minesRemainingFloor', options.mines_remaining_floor)
    if not is_integer(floor):
        raise ValueError('minesRemainingFloor must be an integer')
    options.mines_remaining_floor = floor
    return options


def parse_pointer(data) -> PointerRequest:
    """Accept a button name ('left') or a DOM MouseEvent.button code (0)."""
    if not isinstance(data, dict) or not is_integer(data.get('index')):
        raise ValueError('Invalid pointer event')
    button = data.get('button')
    if is_integer(button):
        button = Button.from_code(button)
    else:
        button = Button.parse(button)
    return PointerRequest(index=data['index'], button=button.value)


async def query_with_retry(handle, query_name, max_retries=5):
    """Query with retry logic for workflow initialization."""
    for i in range(max_retries):
        try:
            return await handle.query(query_name)
        except Exception as error:
            if i < max_retries - 1:
                logger.info(f"Query not ready yet, retrying in {(i + 1) * 100}ms...")
                await asyncio.sleep((i + 1) * 0.1)
                continue
            raise error


def run_update(game_id, update_name, *args):
    """Execute a workflow update and return its game view."""
    async def execute():
        handle = temporal_client.get_workflow_handle(game_id)
        return await handle.execute_update(update_name, *args)

    return asyncio.run(execute())


@app.route('/api/games', methods=['POST'])
def create_game():
    """Create a new game."""
    try:
        data = request.get_json(silent=True) or {}
        difficulty = parse_difficulty(data.get('difficulty') or {'preset': Preset.BEGINNER.value})
        options = parse_options(data.get('options'))
    except ValueError as error:
        return jsonify({'error': str(error)}), 400

    try:
        game_id = str(uuid.uuid4())

        async def start_workflow():
            await temporal_client.start_workflow(
                MinesweeperWorkflow.run,
                args=[game_id, difficulty, options],
                id=game_id,
                task_queue=connection_settings.task_queue,
            )
            handle = temporal_client.get_workflow_handle(game_id)
            return await query_with_retry(handle, "get_game_state_query")

        game_view = asyncio.run(start_workflow())
        return jsonify({'gameState': serialize_game_view(game_view)})

    except Exception as error:
        logger.error(f"Error creating game: {error}")
        return jsonify({'error': 'Failed to create game'}), 500


@app.route('/api/games/<game_id>', methods=['GET'])
def get_game_state(game_id):
    """Get game state."""
    try:
        async def query_game():
            handle = temporal_client.get_workflow_handle(game_id)
            return await query_with_retry(handle, "get_game_state_query")

        game_view = asyncio.run(query_game())
        return jsonify({'gameState': serialize_game_view(game_view)})

    except Exception as error:
        logger.error(f"Error getting game state: {error}")
        return jsonify({'error': 'Game not found'}), 404


@app.route('/api/games/<game_id>', methods=['DELETE'])
def close_game(game_id):
    """Close a game; its workflow completes."""
    try:
        async def signal_close():
            handle = temporal_client.get_workflow_handle(game_id)
            await handle.signal("close_game_signal")

        asyncio.run(signal_close())
        return jsonify({'closed': True})

    except Exception as error:
        logger.error(f"Error closing game: {error}")
        return jsonify({'error': 'Game not found'}), 404


@app.route('/api/games/<game_id>/press', methods=['POST'])
def press(game_id):
    return pointer_action(game_id, "press_update")


@app.route('/api/games/<game_id>/release', methods=['POST'])
def release(game_id):
    return pointer_action(game_id, "release_update")


def pointer_action(game_id, update_name):
    try:
        pointer = parse_pointer(request.get_json(silent=True))
    except ValueError as error:
        return jsonify({'error': str(error)}), 400

    try:
        game_view = run_update(game_id, update_name, pointer)
        return jsonify({'gameState': serialize_game_view(game_view)})

    except Exception as error:
        logger.error(f"Error applying {update_name}: {error}")
        return jsonify({'error': 'Failed to apply pointer event'}), 500


@app.route('/api/games/<game_id>/leave', methods=['POST'])
def leave(game_id):
    """The pointer left the board while a button was held."""
    try:
        game_view = run_update(game_id, "leave_update")
        return jsonify({'gameState': serialize_game_view(game_view)})

    except Exception as error:
        logger.error(f"Error leaving board: {error}")
        return jsonify({'error': 'Failed to leave board'}), 500


@app.route('/api/games/<game_id>/reset', methods=['POST'])
def reset_game(game_id):
    """Start a new game at the current size."""
    try:
        game_view = run_update(game_id, "reset_update")
        return jsonify({'gameState': serialize_game_view(game_view)})

    except Exception as error:
        logger.error(f"Error resetting game: {error}")
        return jsonify({'error': 'Failed to reset game'}), 500


@app.route('/api/games/<game_id>/difficulty', methods=['POST'])
def change_difficulty(game_id):
    """Change the board size; always starts a new game."""
    try:
        difficulty = parse_difficulty(request.get_json(silent=True))
    except ValueError as error:
        return jsonify({'error': str(error)}), 400

    try:
        game_view = run_update(game_id, "set_difficulty_update", difficulty)
        return jsonify({'gameState': serialize_game_view(game_view)})

    except Exception as error:
        logger.error(f"Error changing difficulty: {error}")
        return jsonify({'error': 'Failed to change difficulty'}), 500


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now().isoformat()
    })


async def initialize_client():
    """Initialize Temporal client."""
    global temporal_client
    temporal_client = await get_temporal_client(connection_settings)
    logger.info(f"Connected to Temporal server at {connection_settings.address}")


def main():
    """Start the Flask server."""
    try:
        asyncio.run(initialize_client())

        port = int(os.getenv("PORT", 3000))
        logger.info(f"Minesweeper server running on http://localhost:{port}")
        logger.info("Make sure to start the Temporal worker in another terminal: python -m minefield.worker")

        app.run(host='0.0.0.0', port=port, debug=False)

    except Exception as error:
        logger.error(f"Failed to start server: {error}")
        exit(1)


if __name__ == "__main__":
    main()
