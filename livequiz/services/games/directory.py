import logging
from typing import Callable, Dict, List, Optional

from livequiz.errors import NotFoundError, ValidationError
from livequiz.models import Quiz, generate_game_code, normalize_code
from .scheduler import monotonic_clock
from .session import DEFAULT_RESULTS_DISPLAY_SEC, Session

logger = logging.getLogger(__name__)


class SessionDirectory:
    """Active sessions keyed by their public game code."""

    def __init__(
        self,
        scheduler,
        clock: Callable[[], float] = monotonic_clock,
        on_event=None,
        code_length: int = 6,
        results_display_sec: float = DEFAULT_RESULTS_DISPLAY_SEC,
        close_when_all_answered: bool = True,
    ):
        self._sessions: Dict[str, Session] = {}
        self._scheduler = scheduler
        self._clock = clock
        self._on_event = on_event
        self.code_length = code_length
        self.results_display_sec = results_display_sec
        self.close_when_all_answered = close_when_all_answered

    def create(self, quiz, host_connection_id: str) -> str:
        if isinstance(quiz, dict):
            quiz = Quiz.from_dict(quiz)
        if not isinstance(quiz, Quiz):
            raise ValidationError('Quiz must be an object')
        code = generate_game_code(self._sessions, length=self.code_length)
        self._sessions[code] = Session(
            code,
            quiz,
            host_connection_id,
            scheduler=self._scheduler,
            clock=self._clock,
            on_event=self._on_event,
            results_display_sec=self.results_display_sec,
            close_when_all_answered=self.close_when_all_answered,
        )
        logger.info(f"[create] game={code} host={host_connection_id} questions={len(quiz)}")
        return code

    def get(self, code) -> Optional[Session]:
        key = normalize_code(code)
        if key is None:
            return None
        return self._sessions.get(key)

    def require(self, code) -> Session:
        session = self.get(code)
        if session is None:
            raise NotFoundError()
        return session

    def remove(self, code) -> Optional[Session]:
        key = normalize_code(code)
        session = self._sessions.pop(key, None) if key else None
        if session is not None:
            session.close()
            logger.info(f"[session-end] game={session.code}")
        return session

    def collect_garbage(self, connection_id: str) -> List[Session]:
        """Remove sessions left without a host or without any connected player."""
        doomed = [
            s for s in self._sessions.values()
            if s.host_id == connection_id or (s.ever_joined and not s.connected_participants())
        ]
        return [self.remove(s.code) for s in doomed]

    def codes(self):
        return list(self._sessions)

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, code):
        return self.get(code) is not None
