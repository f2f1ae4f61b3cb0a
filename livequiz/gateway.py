import logging

from livequiz.events import Event

logger = logging.getLogger(__name__)


def room_name(game_code: str) -> str:
    return f"game:{game_code}"


class BroadcastGateway:
    """Pushes events to Socket.IO rooms and single connections.

    Uses the server object directly rather than the request-bound helpers so
    it also works from timer callbacks running outside a request context.
    """

    def __init__(self, socketio, namespace='/'):
        self._socketio = socketio
        self.namespace = namespace

    def join(self, connection_id: str, game_code: str) -> None:
        self._socketio.server.enter_room(connection_id, room_name(game_code), namespace=self.namespace)

    def leave(self, connection_id: str, game_code: str) -> None:
        self._socketio.server.leave_room(connection_id, room_name(game_code), namespace=self.namespace)

    def close(self, game_code: str) -> None:
        self._socketio.close_room(room_name(game_code), namespace=self.namespace)

    def to_room(self, game_code: str, event: Event) -> None:
        logger.debug(f"[emit] room={room_name(game_code)} event={event.name}")
        self._socketio.emit(event.name, event.to_payload(), to=room_name(game_code), namespace=self.namespace)

    def to_connection(self, connection_id: str, event: Event) -> None:
        self._socketio.emit(event.name, event.to_payload(), to=connection_id, namespace=self.namespace)
