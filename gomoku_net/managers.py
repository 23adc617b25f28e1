"""Room registry and matchmaking lobby."""

from __future__ import annotations

import itertools
import logging
import threading
from collections import deque
from typing import Any

from .room import GameRoom

log = logging.getLogger(__name__)


class GameManager:
    """Keeps the running game rooms, keyed by room id."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rooms: dict[int, GameRoom] = {}
        self._ids = itertools.count(1)

    def add_room(self, player1: Any, player2: Any) -> GameRoom:
        """Create a room with player1 as black and player2 as white."""
        with self._lock:
            room_id = next(self._ids)
            room = GameRoom(room_id, player1, player2, self.remove_room)
            self._rooms[room_id] = room
            log.info("Room #%d added. Total rooms: %d", room_id, len(self._rooms))
        return room

    def remove_room(self, room_id: int) -> None:
        """Forget a room; unknown ids are ignored."""
        with self._lock:
            self._rooms.pop(room_id, None)
            log.info("Room #%d removed. Total rooms: %d", room_id, len(self._rooms))

    def get(self, room_id: int) -> GameRoom | None:
        with self._lock:
            return self._rooms.get(room_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        with self._lock:
            return room_id in self._rooms


class Lobby:
    """Sessions waiting for a game, matched first come, first served."""

    def __init__(self, game_manager: GameManager) -> None:
        self.game_manager = game_manager
        self._lock = threading.Lock()
        self._sessions: deque[Any] = deque()

    def enter(self, session: Any) -> None:
        with self._lock:
            self._sessions.append(session)
            log.info("A client entered the lobby. Total: %d", len(self._sessions))

    def leave(self, session: Any) -> None:
        with self._lock:
            self._sessions = deque(s for s in self._sessions if s is not session)
            log.info("A client left the lobby. Total: %d", len(self._sessions))

    def try_match(self) -> GameRoom | None:
        """Pair the two longest-waiting sessions into a new room and start it."""
        with self._lock:
            if len(self._sessions) < 2:
                return None
            player1 = self._sessions.popleft()
            player2 = self._sessions.popleft()

        log.info("Matching success; creating a room")
        room = self.game_manager.add_room(player1, player2)
        player1.enter_game_room(room)
        player2.enter_game_room(room)
        room.start_game()
        return room

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session: object) -> bool:
        with self._lock:
            return any(s is session for s in self._sessions)