from flask import Blueprint, jsonify, request, current_app
from scorekeeper.services.scoreboard.roster import INCREASE
from scorekeeper.services.scoreboard.session import SessionController


scoreboard = Blueprint('scoreboard', __name__)


def _controller() -> SessionController:
    return current_app.extensions['scoreboard']


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _state_payload(controller: SessionController) -> dict:
    """Everything the screen needs to redraw after any call."""
    try:
        limit = int(current_app.config.get('RECENT_HISTORY_LIMIT', 2))
    except (TypeError, ValueError):
        limit = 2
    session = controller.get_snapshot()
    payload = session.to_dict()
    payload['rosterSize'] = session.roster_size
    for pd in payload['players']:
        pd['recentHistory'] = [e.to_dict() for e in controller.roster.recent_history(pd['id'], limit)]
    payload['ranking'] = [entry.to_dict() for entry in controller.rank()]
    payload['quickScores'] = list(current_app.config.get('QUICK_SCORE_VALUES', [1, 2]))
    return payload


@scoreboard.route('/state', methods=['GET'])
def get_state():
    return jsonify(_state_payload(_controller()))


@scoreboard.route('/ranking', methods=['GET'])
def get_ranking():
    return jsonify([entry.to_dict() for entry in _controller().rank()])


@scoreboard.route('/resize', methods=['POST'])
def resize_roster():
    data = _json_body()
    controller = _controller()
    applied = controller.resize(data.get('size'))
    current_app.logger.info(f"[resize] size={data.get('size')!r} applied={applied} roster={controller.roster.size}")
    return jsonify(_state_payload(controller))


@scoreboard.route('/players/<int:player_id>/name', methods=['POST'])
def rename_player(player_id):
    data = _json_body()
    controller = _controller()
    applied = controller.rename(player_id, data.get('name'))
    current_app.logger.info(f"[rename] player={player_id} applied={applied}")
    return jsonify(_state_payload(controller))


@scoreboard.route('/players/<int:player_id>/score', methods=['POST'])
def adjust_player_score(player_id):
    data = _json_body()
    direction = data.get('direction') or INCREASE
    controller = _controller()
    # Custom entry arrives as raw text from the input box; quick buttons send numbers
    if 'text' in data:
        applied = controller.adjust_score_text(player_id, data.get('text'), direction)
    else:
        applied = controller.adjust_score(player_id, data.get('points'), direction)
    player = controller.roster.get(player_id)
    current_app.logger.info(
        f"[score] player={player_id} direction={direction} applied={applied} score={player.score if player else None}"
    )
    return jsonify(_state_payload(controller))


@scoreboard.route('/reset', methods=['POST'])
def reset_scores():
    data = _json_body()
    if data.get('confirm') is not True:
        return jsonify({'error': 'Reset must be confirmed'}), 400
    controller = _controller()
    controller.reset_all()
    current_app.logger.info(f"[reset] roster={controller.roster.size} phase={controller.phase}")
    return jsonify(_state_payload(controller))


@scoreboard.route('/start', methods=['POST'])
def start_game():
    controller = _controller()
    controller.start()
    current_app.logger.info(f"[phase] start roster={controller.roster.size}")
    return jsonify(_state_payload(controller))


@scoreboard.route('/setup', methods=['POST'])
def back_to_setup():
    controller = _controller()
    controller.back_to_setup()
    current_app.logger.info(f"[phase] back to setup roster={controller.roster.size}")
    return jsonify(_state_payload(controller))


@scoreboard.route('/phase', methods=['POST'])
def set_phase():
    data = _json_body()
    controller = _controller()
    applied = controller.set_phase(data.get('phase'))
    current_app.logger.info(f"[phase] requested={data.get('phase')!r} applied={applied} phase={controller.phase}")
    return jsonify(_state_payload(controller))
