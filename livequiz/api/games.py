from flask import Blueprint, current_app, jsonify

games = Blueprint('games', __name__)


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    hub = current_app.extensions['livequiz']
    with hub.lock:
        session = hub.directory.get(game_code)
        if session is None:
            return jsonify({'error': 'Game not found'}), 404
        payload = session.snapshot()
    # Include timings so clients can show countdowns
    payload['durations'] = {
        'resultsDisplay': session.results_display_sec,
        'questions': [q.time_limit for q in session.quiz.questions],
    }
    return jsonify(payload)


@games.route('/<string:game_code>/leaderboard', methods=['GET'])
def get_leaderboard(game_code):
    hub = current_app.extensions['livequiz']
    with hub.lock:
        session = hub.directory.get(game_code)
        if session is None:
            return jsonify({'error': 'Game not found'}), 404
        return jsonify({
            'gameCode': session.code,
            'status': session.status,
            'leaderboard': session.leaderboard(),
        })
