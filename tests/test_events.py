from dataclasses import dataclass
from typing import ClassVar

import pytest

from livequiz import events


def test_base_event_cannot_be_built():
    with pytest.raises(TypeError):
        events.Event()


def test_event_without_payload_is_rejected():
    @dataclass
    class Shout(events.Event):
        name: ClassVar[str] = 'shout'
        text: str

    with pytest.raises(TypeError):
        Shout('hi')


def test_concrete_events_carry_wire_names():
    ended = events.SessionEnded(game_code='ABC123', reason='host_left')
    assert ended.name == 'sessionEnded'
    assert ended.to_payload() == {'gameCode': 'ABC123', 'reason': 'host_left'}
    assert events.Error('Game not found', 'not_found').to_payload() == {'message': 'Game not found', 'code': 'not_found'}
    assert events.Pong(data=None).to_payload() == {}
