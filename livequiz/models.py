import random
import string
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from livequiz.errors import ValidationError

MIN_TIME_LIMIT_SEC = 10
MAX_TIME_LIMIT_SEC = 120
MAX_NICKNAME_LENGTH = 24
MAX_AVATAR_LENGTH = 16
CODE_ALPHABET = string.ascii_uppercase + string.digits


def is_whole_number(value) -> bool:
    # bool is an int subclass; True must not pass as option 1
    return isinstance(value, int) and not isinstance(value, bool)


def _require_text(data: dict, key: str, label: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{label} is required')
    return value.strip()


@dataclass(frozen=True)
class Question:
    text: str
    options: Tuple[str, ...]
    correct_index: int
    time_limit: int
    explanation: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        if len(self.options) < 2:
            raise ValidationError('A question needs at least two options')
        if not 0 <= self.correct_index < len(self.options):
            raise ValidationError('Correct answer must point at one of the options')
        if not MIN_TIME_LIMIT_SEC <= self.time_limit <= MAX_TIME_LIMIT_SEC:
            raise ValidationError(
                f'Time limit must be between {MIN_TIME_LIMIT_SEC} and {MAX_TIME_LIMIT_SEC} seconds'
            )

    @classmethod
    def from_dict(cls, data: Any, position: int = 0) -> 'Question':
        label = f'Question {position + 1}'
        if not isinstance(data, dict):
            raise ValidationError(f'{label} must be an object')
        text = _require_text(data, 'text', f'{label} text')

        options = data.get('options')
        if not isinstance(options, list):
            raise ValidationError(f'{label} options must be a list')
        if any(not isinstance(o, str) or not o.strip() for o in options):
            raise ValidationError(f'{label} options must be non-empty strings')

        correct = data.get('correctAnswer')
        if not is_whole_number(correct):
            raise ValidationError(f'{label} correctAnswer must be an integer')
        time_limit = data.get('timeLimit')
        if not is_whole_number(time_limit):
            raise ValidationError(f'{label} timeLimit must be a whole number of seconds')

        explanation = data.get('explanation')
        if explanation is not None and not isinstance(explanation, str):
            raise ValidationError(f'{label} explanation must be text')
        qid = data.get('id')

        try:
            return cls(
                text=text,
                options=tuple(o.strip() for o in options),
                correct_index=correct,
                time_limit=time_limit,
                explanation=(explanation.strip() or None) if explanation else None,
                id=str(qid) if qid is not None else None,
            )
        except ValidationError as exc:
            raise ValidationError(f'{label}: {exc.message}') from exc

    def to_dict(self, include_answer=True):
        data = {
            'id': self.id,
            'text': self.text,
            'options': list(self.options),
            'timeLimit': self.time_limit,
        }
        if include_answer:
            data['correctAnswer'] = self.correct_index
            data['explanation'] = self.explanation
        return data


@dataclass(frozen=True)
class Quiz:
    title: str
    questions: Tuple[Question, ...]
    description: str = ''

    def __post_init__(self):
        if not self.title.strip():
            raise ValidationError('Quiz title is required')
        if not self.questions:
            raise ValidationError('Quiz needs at least one question')

    @classmethod
    def from_dict(cls, data: Any) -> 'Quiz':
        """Build a quiz from the client's JSON shape, rejecting anything malformed."""
        if not isinstance(data, dict):
            raise ValidationError('Quiz must be an object')
        title = _require_text(data, 'title', 'Quiz title')
        description = data.get('description') or ''
        if not isinstance(description, str):
            raise ValidationError('Quiz description must be text')
        questions = data.get('questions')
        if not isinstance(questions, list) or not questions:
            raise ValidationError('Quiz needs at least one question')
        return cls(
            title=title,
            description=description.strip(),
            questions=tuple(Question.from_dict(q, i) for i, q in enumerate(questions)),
        )

    def __len__(self):
        return len(self.questions)

    def to_dict(self, include_answers=True):
        return {
            'title': self.title,
            'description': self.description,
            'questions': [q.to_dict(include_answer=include_answers) for q in self.questions],
        }


@dataclass
class Participant:
    id: str
    nickname: str
    avatar: str = ''
    connected: bool = True

    @classmethod
    def create(cls, connection_id: str, nickname: Any, avatar: Any = None) -> 'Participant':
        if not isinstance(nickname, str) or not nickname.strip():
            raise ValidationError('Nickname is required')
        nickname = nickname.strip()
        if len(nickname) > MAX_NICKNAME_LENGTH:
            raise ValidationError(f'Nickname must be at most {MAX_NICKNAME_LENGTH} characters')
        if avatar is None:
            avatar = ''
        if not isinstance(avatar, str) or len(avatar) > MAX_AVATAR_LENGTH:
            raise ValidationError('Invalid avatar')
        return cls(id=connection_id, nickname=nickname, avatar=avatar)

    def to_dict(self):
        return {
            'id': self.id,
            'nickname': self.nickname,
            'avatar': self.avatar,
            'connected': self.connected,
        }


def generate_game_code(taken, length=6) -> str:
    """Generate a short game code not present in ``taken``."""
    while True:
        code = ''.join(random.choices(CODE_ALPHABET, k=length))
        if code not in taken:
            return code


def normalize_code(code: Any) -> Optional[str]:
    if not isinstance(code, str):
        return None
    return code.strip().upper() or None


@dataclass
class AnswerOutcome:
    """What a player learns privately after submitting an answer."""
    question_index: int
    is_correct: bool
    points: int
    score: int
    correct_index: int
    explanation: Optional[str] = None
    duplicate: bool = False

    def to_dict(self):
        return {
            'questionIndex': self.question_index,
            'isCorrect': self.is_correct,
            'points': self.points,
            'score': self.score,
            'correctAnswer': self.correct_index,
            'explanation': self.explanation,
            'duplicate': self.duplicate,
        }


LeaderboardEntry = Dict[str, Any]
Leaderboard = List[LeaderboardEntry]
