import threading

from livequiz import events
from livequiz.gateway import BroadcastGateway
from livequiz.services.games.directory import SessionDirectory
from livequiz.services.games.registry import ConnectionRegistry
from livequiz.services.games.scheduler import BackgroundScheduler, monotonic_clock


class GameHub:
    """Everything one server process needs to coordinate its games.

    Socket handlers, HTTP reads and timer callbacks all run while holding
    ``lock``, so session state is only ever touched by one of them at a time.
    """

    def __init__(self, socketio, config, scheduler=None, clock=None):
        self.lock = threading.RLock()
        self.namespace = config.get('SOCKETIO_NAMESPACE', '/')
        self.gateway = BroadcastGateway(socketio, namespace=self.namespace)
        self.registry = ConnectionRegistry()
        self.scheduler = scheduler or BackgroundScheduler(socketio, self.lock)
        self.directory = SessionDirectory(
            self.scheduler,
            clock=clock or monotonic_clock,
            on_event=self._relay,
            code_length=int(config.get('GAME_CODE_LENGTH', 6)),
            results_display_sec=float(config.get('RESULTS_DISPLAY_SEC', 5)),
            close_when_all_answered=bool(config.get('CLOSE_WHEN_ALL_ANSWERED', True)),
        )

    def _relay(self, session, event):
        self.gateway.to_room(session.code, event)

    def end_session(self, game_code: str, reason: str):
        """Tear a session down and tell whoever is still in its room."""
        session = self.directory.remove(game_code)
        if session is not None:
            self._announce_end(session, reason)
        return session

    def collect_garbage(self, connection_id: str):
        ended = self.directory.collect_garbage(connection_id)
        for session in ended:
            self._announce_end(session, 'host_left' if session.host_id == connection_id else 'abandoned')
        return ended

    def _announce_end(self, session, reason):
        self.gateway.to_room(session.code, events.SessionEnded(game_code=session.code, reason=reason))
        self.gateway.close(session.code)
        self.registry.release_game(session.code)
