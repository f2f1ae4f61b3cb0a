import functools

from flask import current_app, request

from livequiz import events, socketio
from livequiz.errors import GameError, StateConflictError, ValidationError
from livequiz.models import Quiz, is_whole_number
from livequiz.services.games.registry import DISPLAY, HOST, PLAYER
from livequiz.services.games.session import FINISHED, WAITING


def _hub():
    return current_app.extensions['livequiz']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _game_code(data) -> str:
    if isinstance(data, dict):
        data = data.get('gameCode') or data.get('game_code')
    if not isinstance(data, str) or not data.strip():
        raise ValidationError('gameCode is required')
    return data


def _ensure_unbound(hub, sid):
    membership = hub.registry.get(sid)
    if membership is None:
        return
    session = hub.directory.get(membership.game_code)
    if session is not None and session.status != FINISHED:
        raise StateConflictError(f'Connection already belongs to game {membership.game_code}')
    # A finished or vanished game no longer holds on to its connections
    hub.registry.release(sid)
    hub.gateway.leave(sid, membership.game_code)
    if session is not None and membership.role == HOST:
        hub.end_session(session.code, 'host_left')


def dispatch(handler):
    """Run a handler under the hub lock and turn failures into a private error."""
    @functools.wraps(handler)
    def wrapper(*args):
        hub = _hub()
        sid = _get_sid()
        with hub.lock:
            try:
                return handler(hub, sid, *args)
            except GameError as exc:
                current_app.logger.info(f"[rejected] sid={sid} handler={handler.__name__} code={exc.code} message={exc.message}")
                hub.gateway.to_connection(sid, events.Error(exc.message, exc.code))
            except Exception:
                current_app.logger.exception(f"[handler-error] sid={sid} handler={handler.__name__}")
                hub.gateway.to_connection(sid, events.Error('Request failed', 'internal_error'))
    return wrapper


def handle_connect(auth=None):
    sid = _get_sid()
    current_app.logger.info(f"[connect] sid={sid}")
    _hub().gateway.to_connection(sid, events.Connected(connection_id=sid))


def handle_disconnect(reason=None):
    hub = _hub()
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    with hub.lock:
        membership = hub.registry.release(sid)
        if membership and membership.role == PLAYER:
            session = hub.directory.get(membership.game_code)
            if session is not None:
                # Lobby players simply leave; mid-game players keep their score
                if session.status == WAITING:
                    participant = session.remove_participant(sid)
                else:
                    participant = session.mark_disconnected(sid)
                if participant is not None:
                    hub.gateway.to_room(session.code, events.PlayerLeft(players=session.roster(), left_player_id=sid))
                    session.close_if_all_answered()
        for ended in hub.collect_garbage(sid):
            current_app.logger.info(f"[gc] game={ended.code} after disconnect of sid={sid}")


@dispatch
def handle_create_game(hub, sid, data=None):
    quiz = Quiz.from_dict(data)
    _ensure_unbound(hub, sid)
    code = hub.directory.create(quiz, sid)
    session = hub.directory.require(code)
    hub.registry.bind(sid, code, HOST)
    hub.gateway.join(sid, code)
    hub.gateway.to_connection(sid, events.GameCreated(game_code=code, game=session.snapshot(include_answers=True)))


@dispatch
def handle_join_game(hub, sid, data=None):
    if not isinstance(data, dict):
        raise ValidationError('gameCode and playerInfo are required')
    session = hub.directory.require(_game_code(data))
    _ensure_unbound(hub, sid)
    info = data.get('playerInfo')
    if not isinstance(info, dict):
        info = data
    joined = session.add_participant(sid, info.get('nickname'), info.get('avatar'))
    hub.registry.bind(sid, session.code, PLAYER)
    hub.gateway.join(sid, session.code)
    hub.gateway.to_room(session.code, joined)


@dispatch
def handle_watch_game(hub, sid, data=None):
    session = hub.directory.require(_game_code(data))
    _ensure_unbound(hub, sid)
    hub.registry.bind(sid, session.code, DISPLAY)
    hub.gateway.join(sid, session.code)
    hub.gateway.to_connection(sid, events.GameState(game=session.snapshot()))


@dispatch
def handle_start_game(hub, sid, data=None):
    session = hub.directory.require(_game_code(data))
    started = session.start(sid)
    hub.gateway.to_room(session.code, started)


@dispatch
def handle_submit_answer(hub, sid, data=None):
    if not isinstance(data, dict):
        raise ValidationError('gameCode and answerIndex are required')
    session = hub.directory.require(_game_code(data))
    answer = data.get('answerIndex', data.get('optionIndex'))
    if not is_whole_number(answer):
        raise ValidationError('answerIndex must be an integer')
    outcome = session.submit_answer(sid, answer)
    hub.gateway.to_connection(sid, events.AnswerResult(outcome=outcome))
    membership = hub.registry.get(sid)
    if membership is None or membership.role != PLAYER or membership.game_code != session.code:
        return
    hub.gateway.to_room(session.code, events.LeaderboardUpdate(
        leaderboard=session.leaderboard(),
        current_question=session.current_question_index,
    ))
    session.close_if_all_answered()


@dispatch
def handle_get_game_state(hub, sid, data=None):
    session = hub.directory.require(_game_code(data))
    hub.gateway.to_connection(sid, events.GameState(game=session.snapshot(include_answers=sid == session.host_id)))


@dispatch
def handle_leave_game(hub, sid, data=None):
    session = hub.directory.require(_game_code(data))
    membership = hub.registry.get(sid)
    if membership is None or membership.game_code != session.code:
        raise StateConflictError('Not a member of this game')
    hub.registry.release(sid)
    hub.gateway.leave(sid, session.code)
    hub.gateway.to_connection(sid, events.Left(game_code=session.code))
    if membership.role == HOST:
        hub.end_session(session.code, 'host_left')
        return
    if session.remove_participant(sid) is not None:
        hub.gateway.to_room(session.code, events.PlayerLeft(players=session.roster(), left_player_id=sid))
        session.close_if_all_answered()
    hub.collect_garbage(sid)


@dispatch
def handle_ping(hub, sid, data=None):
    hub.gateway.to_connection(sid, events.Pong(data=data))


HANDLERS = {
    'createGame': handle_create_game,
    'joinGame': handle_join_game,
    'watchGame': handle_watch_game,
    'startGame': handle_start_game,
    'submitAnswer': handle_submit_answer,
    'getGameState': handle_get_game_state,
    'leaveGame': handle_leave_game,
    'ping': handle_ping,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the game's Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    for name, handler in HANDLERS.items():
        socketio.on_event(name, handler, namespace=namespace)
