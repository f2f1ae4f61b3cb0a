import json

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, scheduler=None, clock=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    # app.logger is the 'livequiz' logger, so service module loggers share its handler
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS') or '*'
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One hub per app; tests inject a manual scheduler and clock
    from livequiz.hub import GameHub
    flask_app.extensions['livequiz'] = GameHub(socketio, flask_app.config, scheduler=scheduler, clock=clock)

    from livequiz.main import main
    flask_app.register_blueprint(main)

    from livequiz.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from livequiz.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('validate-quiz')
    @click.argument('quiz_file', type=click.File('r'))
    def validate_quiz_command(quiz_file):
        """Checks that a quiz JSON file would be accepted by createGame."""
        from livequiz.errors import ValidationError
        from livequiz.models import Quiz
        try:
            quiz = Quiz.from_dict(json.load(quiz_file))
        except json.JSONDecodeError as exc:
            raise click.ClickException(f'Not valid JSON: {exc}')
        except ValidationError as exc:
            raise click.ClickException(exc.message)
        click.echo(f'OK: "{quiz.title}" with {len(quiz)} question(s)')

    flask_app.cli.add_command(validate_quiz_command)

    return flask_app
