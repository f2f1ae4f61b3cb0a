import pytest

from livequiz.services.games.registry import DISPLAY, HOST, PLAYER, ConnectionRegistry


def test_bind_and_release():
    registry = ConnectionRegistry()
    registry.bind('sid-1', 'ABC123', HOST)
    registry.bind('sid-2', 'ABC123', PLAYER)
    registry.bind('sid-3', 'XYZ789', DISPLAY)

    assert registry.get('sid-2').role == PLAYER
    assert registry.members('ABC123') == ['sid-1', 'sid-2']

    released = registry.release('sid-2')
    assert released.game_code == 'ABC123'
    assert registry.release('sid-2') is None
    assert registry.get('sid-2') is None


def test_release_game_drops_every_member():
    registry = ConnectionRegistry()
    registry.bind('sid-1', 'ABC123', HOST)
    registry.bind('sid-2', 'ABC123', PLAYER)
    registry.bind('sid-3', 'XYZ789', PLAYER)
    assert sorted(registry.release_game('ABC123')) == ['sid-1', 'sid-2']
    assert len(registry) == 1


def test_unknown_role_rejected():
    with pytest.raises(ValueError):
        ConnectionRegistry().bind('sid-1', 'ABC123', 'spectator')
