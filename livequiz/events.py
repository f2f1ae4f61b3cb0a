"""Outbound Socket.IO events.

A closed set of typed messages; ``name`` is the wire event name and
``to_payload()`` the JSON body the clients read.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional


class Event(ABC):
    name: ClassVar[str] = ''

    @abstractmethod
    def to_payload(self) -> Dict[str, Any]:
        ...


@dataclass
class Connected(Event):
    name: ClassVar[str] = 'connected'
    connection_id: str

    def to_payload(self):
        return {'message': 'Connected', 'id': self.connection_id}


@dataclass
class GameCreated(Event):
    name: ClassVar[str] = 'gameCreated'
    game_code: str
    game: Dict[str, Any]

    def to_payload(self):
        return {'gameCode': self.game_code, 'game': self.game}


@dataclass
class PlayerJoined(Event):
    name: ClassVar[str] = 'playerJoined'
    players: List[Dict[str, Any]]
    new_player: Dict[str, Any]

    def to_payload(self):
        return {'players': self.players, 'newPlayer': self.new_player}


@dataclass
class PlayerLeft(Event):
    name: ClassVar[str] = 'playerLeft'
    players: List[Dict[str, Any]]
    left_player_id: str

    def to_payload(self):
        return {'players': self.players, 'leftPlayerId': self.left_player_id}


@dataclass
class GameStarted(Event):
    name: ClassVar[str] = 'gameStarted'
    question_index: int
    question: Dict[str, Any]
    total_questions: int

    def to_payload(self):
        return {
            'questionIndex': self.question_index,
            'question': self.question,
            'totalQuestions': self.total_questions,
        }


@dataclass
class NextQuestion(GameStarted):
    name: ClassVar[str] = 'nextQuestion'


@dataclass
class QuestionEnded(Event):
    name: ClassVar[str] = 'questionEnded'
    question_index: int
    correct_index: int
    explanation: Optional[str]
    leaderboard: List[Dict[str, Any]]
    results_display_sec: float

    def to_payload(self):
        return {
            'questionIndex': self.question_index,
            'correctAnswer': self.correct_index,
            'explanation': self.explanation,
            'leaderboard': self.leaderboard,
            'resultsDisplaySec': self.results_display_sec,
        }


@dataclass
class GameFinished(Event):
    name: ClassVar[str] = 'gameFinished'
    leaderboard: List[Dict[str, Any]]

    def to_payload(self):
        return {'leaderboard': self.leaderboard}


@dataclass
class LeaderboardUpdate(Event):
    name: ClassVar[str] = 'leaderboardUpdate'
    leaderboard: List[Dict[str, Any]]
    current_question: int

    def to_payload(self):
        return {'leaderboard': self.leaderboard, 'currentQuestion': self.current_question}


@dataclass
class AnswerResult(Event):
    name: ClassVar[str] = 'answerResult'
    outcome: Any

    def to_payload(self):
        return self.outcome.to_dict()


@dataclass
class GameState(Event):
    name: ClassVar[str] = 'gameState'
    game: Dict[str, Any]

    def to_payload(self):
        return {'game': self.game}


@dataclass
class Left(Event):
    name: ClassVar[str] = 'left'
    game_code: str

    def to_payload(self):
        return {'gameCode': self.game_code}


@dataclass
class SessionEnded(Event):
    name: ClassVar[str] = 'sessionEnded'
    game_code: str
    reason: str

    def to_payload(self):
        return {'gameCode': self.game_code, 'reason': self.reason}


@dataclass
class Pong(Event):
    name: ClassVar[str] = 'pong'
    data: Any

    def to_payload(self):
        return self.data if self.data is not None else {}


@dataclass
class Error(Event):
    name: ClassVar[str] = 'error'
    message: str
    code: str = 'error'

    def to_payload(self):
        return {'message': self.message, 'code': self.code}
