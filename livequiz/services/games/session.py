import logging
from typing import Callable, Dict, Optional, Set

from livequiz import events
from livequiz.errors import (
    GameAlreadyStartedError,
    NoParticipantsError,
    StateConflictError,
    UnauthorizedError,
)
from livequiz.models import AnswerOutcome, Participant, Question, Quiz, is_whole_number
from .scoring import points_for_answer

logger = logging.getLogger(__name__)

WAITING = 'waiting'
ACTIVE = 'active'
FINISHED = 'finished'

DEFAULT_RESULTS_DISPLAY_SEC = 5.0


class Session:
    """One running game: roster, scores, question clock and status.

    Status only moves waiting -> active -> finished. Rejected calls raise a
    ``GameError`` before touching any state. Transitions driven by the
    question clock are reported through ``on_event(session, event)``;
    everything else is returned to the caller.
    """

    def __init__(
        self,
        code: str,
        quiz: Quiz,
        host_id: str,
        scheduler,
        clock: Callable[[], float],
        on_event: Optional[Callable[['Session', events.Event], None]] = None,
        results_display_sec: float = DEFAULT_RESULTS_DISPLAY_SEC,
        close_when_all_answered: bool = True,
    ):
        self.code = code
        self.quiz = quiz
        self._host_id = host_id
        self.status = WAITING
        self.current_question_index = 0
        self.question_started_at: Optional[float] = None
        self.participants: Dict[str, Participant] = {}
        self.scores: Dict[str, int] = {}
        self.ever_joined = False
        self._answered: Set[str] = set()
        self._timer = None
        self._scheduler = scheduler
        self._clock = clock
        self._on_event = on_event
        self.results_display_sec = results_display_sec
        self.close_when_all_answered = close_when_all_answered

    @property
    def host_id(self) -> str:
        return self._host_id

    @property
    def current_question(self) -> Question:
        return self.quiz.questions[self.current_question_index]

    @property
    def accepting_answers(self) -> bool:
        return self.status == ACTIVE and self.question_started_at is not None

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None and self._timer.pending

    def connected_participants(self):
        return [p for p in self.participants.values() if p.connected]

    # ---- roster ----

    def add_participant(self, connection_id: str, nickname, avatar=None) -> events.PlayerJoined:
        if self.status != WAITING:
            raise GameAlreadyStartedError()
        if connection_id in self.participants:
            raise StateConflictError('Already joined this game')
        participant = Participant.create(connection_id, nickname, avatar)
        self.participants[connection_id] = participant
        self.scores[connection_id] = 0
        self.ever_joined = True
        logger.info(f"[join] game={self.code} player={connection_id} nickname={participant.nickname!r}")
        return events.PlayerJoined(players=self.roster(), new_player=participant.to_dict())

    def remove_participant(self, connection_id: str) -> Optional[Participant]:
        participant = self.participants.pop(connection_id, None)
        self.scores.pop(connection_id, None)
        self._answered.discard(connection_id)
        if participant:
            logger.info(f"[leave] game={self.code} player={connection_id}")
        return participant

    def mark_disconnected(self, connection_id: str) -> Optional[Participant]:
        participant = self.participants.get(connection_id)
        if participant:
            participant.connected = False
        return participant

    def roster(self):
        return [p.to_dict() for p in self.participants.values()]

    def leaderboard(self):
        # sorted() is stable, so equal scores keep join order
        entries = [dict(p.to_dict(), score=self.scores.get(pid, 0)) for pid, p in self.participants.items()]
        return sorted(entries, key=lambda entry: -entry['score'])

    # ---- lifecycle ----

    def start(self, connection_id: str) -> events.GameStarted:
        if connection_id != self._host_id:
            raise UnauthorizedError('Only the host can start the game')
        if self.status != WAITING:
            raise StateConflictError('Game has already started')
        if not self.connected_participants():
            raise NoParticipantsError()
        self.status = ACTIVE
        self.current_question_index = 0
        logger.info(f"[start] game={self.code} players={len(self.participants)} questions={len(self.quiz)}")
        self.begin_question_clock()
        return events.GameStarted(
            question_index=0,
            question=self.current_question.to_dict(include_answer=False),
            total_questions=len(self.quiz),
        )

    def begin_question_clock(self) -> None:
        self._cancel_timer()
        question = self.current_question
        self.question_started_at = self._clock()
        self._answered = set()
        self._timer = self._scheduler.call_later(
            question.time_limit,
            self._on_question_timeout,
            label=f"game={self.code} question={self.current_question_index} stage=question",
        )

    def _on_question_timeout(self) -> None:
        self._timer = None
        logger.info(f"[timeout] game={self.code} question={self.current_question_index}")
        self._close_question()

    def close_if_all_answered(self) -> bool:
        """Close the open question early once every connected player answered."""
        if not (self.close_when_all_answered and self.accepting_answers):
            return False
        connected = {p.id for p in self.connected_participants()}
        if not connected or not connected.issubset(self._answered):
            return False
        logger.info(f"[early-close] game={self.code} question={self.current_question_index}")
        self._close_question()
        return True

    def _close_question(self) -> None:
        self._cancel_timer()
        self.question_started_at = None
        question = self.current_question
        self._timer = self._scheduler.call_later(
            self.results_display_sec,
            self._advance,
            label=f"game={self.code} question={self.current_question_index} stage=results",
        )
        self._emit(events.QuestionEnded(
            question_index=self.current_question_index,
            correct_index=question.correct_index,
            explanation=question.explanation,
            leaderboard=self.leaderboard(),
            results_display_sec=self.results_display_sec,
        ))

    def _advance(self) -> None:
        self._timer = None
        if self.current_question_index + 1 < len(self.quiz):
            self.current_question_index += 1
            self.begin_question_clock()
            self._emit(events.NextQuestion(
                question_index=self.current_question_index,
                question=self.current_question.to_dict(include_answer=False),
                total_questions=len(self.quiz),
            ))
            return
        self.finish()
        self._emit(events.GameFinished(leaderboard=self.leaderboard()))

    def finish(self) -> None:
        self._cancel_timer()
        self.question_started_at = None
        if self.status != FINISHED:
            self.status = FINISHED
            logger.info(f"[finish] game={self.code}")

    def close(self) -> None:
        """Drop any pending timer; called when the session is torn down."""
        self._cancel_timer()
        self.question_started_at = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _emit(self, event: events.Event) -> None:
        if self._on_event:
            self._on_event(self, event)

    # ---- answers ----

    def submit_answer(self, connection_id: str, option_index) -> AnswerOutcome:
        if self.status != ACTIVE:
            raise StateConflictError('Game is not in progress')
        question = self.current_question
        outcome = AnswerOutcome(
            question_index=self.current_question_index,
            is_correct=False,
            points=0,
            score=self.scores.get(connection_id, 0),
            correct_index=question.correct_index,
            explanation=question.explanation,
        )
        if connection_id not in self.participants:
            return outcome
        if connection_id in self._answered:
            outcome.duplicate = True
            outcome.is_correct = self.accepting_answers and option_index == question.correct_index
            return outcome
        if not self.accepting_answers:
            return outcome

        self._answered.add(connection_id)
        elapsed = self._clock() - self.question_started_at
        in_range = is_whole_number(option_index) and 0 <= option_index < len(question.options)
        if not in_range or option_index != question.correct_index or elapsed > question.time_limit:
            return outcome

        points = points_for_answer(question.time_limit, elapsed)
        self.scores[connection_id] += points
        outcome.is_correct = True
        outcome.points = points
        outcome.score = self.scores[connection_id]
        return outcome

    # ---- views ----

    def snapshot(self, include_answers=False):
        return {
            'id': self.code,
            'status': self.status,
            'currentQuestionIndex': self.current_question_index,
            'totalQuestions': len(self.quiz),
            'acceptingAnswers': self.accepting_answers,
            'quiz': self.quiz.to_dict(include_answers=include_answers),
            'leaderboard': self.leaderboard(),
            'players': self.roster(),
        }
