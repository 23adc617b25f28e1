"""A single Gomoku game between two players."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from .protocol import GameStartNtf, PacketId, PlaceStoneNtf, encode_packet

BOARD_SIZE = 19
EMPTY = 0
BLACK = 1
WHITE = 2
WIN_LENGTH = 5

_DIRECTIONS = ((-1, 1), (0, 1), (1, 1), (1, 0))

log = logging.getLogger(__name__)


class Player(Protocol):
    def send_packet(self, packet: bytes) -> None: ...


class GameRoom:
    """A 19x19 board shared by a black and a white player; black moves first."""

    def __init__(
        self,
        room_id: int,
        black: Player,
        white: Player,
        on_end: Callable[[int], None] | None = None,
    ) -> None:
        self.room_id = room_id
        self.black = black
        self.white = white
        self._on_end = on_end
        self._board = [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self.is_black_turn = True
        self.finished = False
        self.winner: Player | None = None

    @property
    def board(self) -> tuple[tuple[int, ...], ...]:
        """Snapshot of the board, indexed as board[y][x]."""
        return tuple(tuple(row) for row in self._board)

    def start_game(self) -> None:
        """Tell each player which colour they play."""
        log.info("Room #%d: game started", self.room_id)
        self.black.send_packet(encode_packet(PacketId.GAME_START_NTF, GameStartNtf(True)))
        self.white.send_packet(encode_packet(PacketId.GAME_START_NTF, GameStartNtf(False)))

    def handle_place_stone(self, player: Player, x: int, y: int) -> bool:
        """Apply a move; return True if it was accepted and broadcast."""
        if self.finished:
            return False
        is_black = player is self.black
        if is_black != self.is_black_turn:
            log.debug("Room #%d: rejected move, not this player's turn", self.room_id)
            return False
        if not (0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE) or self._board[y][x] != EMPTY:
            log.debug("Room #%d: rejected move at (%d, %d)", self.room_id, x, y)
            return False

        stone = BLACK if is_black else WHITE
        self._board[y][x] = stone
        self._broadcast(encode_packet(PacketId.PLACE_STONE_NTF, PlaceStoneNtf(x, y, is_black)))

        if self.check_win(x, y, stone):
            log.info("Room #%d: %s wins", self.room_id, "Black" if is_black else "White")
            self.winner = player
            self._end_game()
        else:
            self.is_black_turn = not self.is_black_turn
        return True

    def check_win(self, x: int, y: int, stone: int) -> bool:
        """Whether the stone at (x, y) completes a line of five or more."""
        for dx, dy in _DIRECTIONS:
            count = 1 + self._run(x, y, dx, dy, stone) + self._run(x, y, -dx, -dy, stone)
            if count >= WIN_LENGTH:
                return True
        return False

    def _run(self, x: int, y: int, dx: int, dy: int, stone: int) -> int:
        count = 0
        for step in range(1, WIN_LENGTH):
            nx, ny = x + dx * step, y + dy * step
            if 0 <= nx < BOARD_SIZE and 0 <= ny < BOARD_SIZE and self._board[ny][nx] == stone:
                count += 1
            else:
                break
        return count

    def _broadcast(self, packet: bytes) -> None:
        self.black.send_packet(packet)
        self.white.send_packet(packet)

    def _end_game(self) -> None:
        self.finished = True
        log.info("Room #%d: game over", self.room_id)
        if self._on_end is not None:
            self._on_end(self.room_id)