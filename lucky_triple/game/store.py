"""Registry of live game sessions."""

import asyncio
from typing import Optional

from .session import GameSession


class SessionStore:
    """Live sessions keyed by player, with a secondary game id index.

    The player map is authoritative: the game id index is only ever updated
    in the same step as the player map. Every read-modify-write of a session
    must happen while holding ``lock(player_id)``.
    """

    def __init__(self):
        self._sessions: dict[str, GameSession] = {}
        self._players_by_game: dict[str, str] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, player_id: str) -> asyncio.Lock:
        """Per-player lock shared by request handlers and sweeps."""
        lock = self._locks.get(player_id)
        if lock is None:
            lock = self._locks[player_id] = asyncio.Lock()
        return lock

    def get(self, player_id: str) -> Optional[GameSession]:
        return self._sessions.get(player_id)

    def find_player(self, game_id: str) -> Optional[str]:
        return self._players_by_game.get(game_id)

    def get_by_game(self, game_id: str) -> Optional[GameSession]:
        player_id = self._players_by_game.get(game_id)
        if player_id is None:
            return None
        return self._sessions.get(player_id)

    def replace(self, session: GameSession) -> Optional[GameSession]:
        """Install ``session`` as its player's live session.

        Any previous session for the player is discarded and returned.
        """
        previous = self._sessions.pop(session.player_id, None)
        if previous is not None:
            self._players_by_game.pop(previous.game_id, None)
        self._sessions[session.player_id] = session
        self._players_by_game[session.game_id] = session.player_id
        return previous

    def remove(self, session: GameSession) -> bool:
        """Remove ``session`` if it is still its player's live session."""
        if self._sessions.get(session.player_id) is not session:
            return False
        del self._sessions[session.player_id]
        self._players_by_game.pop(session.game_id, None)
        return True

    def sessions(self) -> list[GameSession]:
        """Point-in-time copy of all resident sessions."""
        return list(self._sessions.values())

    def player_ids(self) -> list[str]:
        return list(self._sessions)

    def prune_locks(self) -> int:
        """Drop idle locks of players with no resident session."""
        idle = [
            player_id
            for player_id, lock in self._locks.items()
            if player_id not in self._sessions and not lock.locked()
        ]
        for player_id in idle:
            del self._locks[player_id]
        return len(idle)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._sessions
