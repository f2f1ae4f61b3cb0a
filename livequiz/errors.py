"""Typed failures raised by the game services.

Handlers convert these into a private ``error`` event for the requesting
connection; they never reach other members of the room.
"""


class GameError(Exception):
    code = 'error'
    default_message = 'Request failed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'message': self.message, 'code': self.code}


class ValidationError(GameError):
    code = 'validation_error'
    default_message = 'Invalid request'


class NotFoundError(GameError):
    code = 'not_found'
    default_message = 'Game not found'


class UnauthorizedError(GameError):
    code = 'unauthorized'
    default_message = 'Only the host may do that'


class StateConflictError(GameError):
    code = 'state_conflict'
    default_message = 'Not allowed in the current game state'


class GameAlreadyStartedError(StateConflictError):
    code = 'game_already_started'
    default_message = 'Game already started'


class NoParticipantsError(StateConflictError):
    code = 'no_participants'
    default_message = 'No players joined yet'
