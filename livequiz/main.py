from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the LiveQuiz game server!'})


@main.route('/health')
def health():
    hub = current_app.extensions['livequiz']
    with hub.lock:
        active = len(hub.directory)
    return jsonify({'status': 'ok', 'activeGames': active})
