from dataclasses import dataclass
from typing import Dict, List, Optional

HOST = 'host'
PLAYER = 'player'
DISPLAY = 'display'
ROLES = (HOST, PLAYER, DISPLAY)


@dataclass(frozen=True)
class Membership:
    game_code: str
    role: str


class ConnectionRegistry:
    """Which session, and in which role, each live connection belongs to."""

    def __init__(self):
        self._members: Dict[str, Membership] = {}

    def bind(self, connection_id: str, game_code: str, role: str) -> Membership:
        if role not in ROLES:
            raise ValueError(f'Unknown role {role!r}')
        membership = Membership(game_code=game_code, role=role)
        self._members[connection_id] = membership
        return membership

    def get(self, connection_id: str) -> Optional[Membership]:
        return self._members.get(connection_id)

    def release(self, connection_id: str) -> Optional[Membership]:
        return self._members.pop(connection_id, None)

    def release_game(self, game_code: str) -> List[str]:
        released = [cid for cid, m in self._members.items() if m.game_code == game_code]
        for cid in released:
            del self._members[cid]
        return released

    def members(self, game_code: str) -> List[str]:
        return [cid for cid, m in self._members.items() if m.game_code == game_code]

    def __len__(self):
        return len(self._members)
