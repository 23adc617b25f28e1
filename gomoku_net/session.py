"""Server-side connection to one player."""

from __future__ import annotations

import asyncio
import logging
import weakref
from contextlib import suppress
from typing import TYPE_CHECKING

from .protocol import HEADER_SIZE, PacketId, PlaceStoneReq, ProtocolError, decode_header

if TYPE_CHECKING:
    from .managers import Lobby
    from .room import GameRoom

log = logging.getLogger(__name__)


class Session:
    """Reads packets from one client and routes them to the lobby or its room."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        lobby: Lobby,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self.lobby = lobby
        self._room: weakref.ref[GameRoom] | None = None

    @property
    def room(self) -> GameRoom | None:
        """The room this session plays in, if it still exists."""
        return self._room() if self._room is not None else None

    async def run(self) -> None:
        """Enter the lobby and handle packets until the client disconnects."""
        self.lobby.enter(self)
        try:
            while True:
                try:
                    header = await self._reader.readexactly(HEADER_SIZE)
                except (asyncio.IncompleteReadError, ConnectionError):
                    break
                try:
                    size, packet_id = decode_header(header)
                except ProtocolError as exc:
                    log.warning("Dropping client: %s", exc)
                    break
                try:
                    body = await self._reader.readexactly(size - HEADER_SIZE)
                except (asyncio.IncompleteReadError, ConnectionError):
                    break
                try:
                    self.process_packet(packet_id, body)
                except ProtocolError as exc:
                    log.warning("Ignoring malformed packet %d: %s", packet_id, exc)
        finally:
            self.lobby.leave(self)
            self.close()
            with suppress(Exception):
                await self._writer.wait_closed()

    def enter_game_room(self, room: GameRoom) -> None:
        """Attach this session to a room without keeping the room alive."""
        self._room = weakref.ref(room)

    def send_packet(self, packet: bytes) -> None:
        """Queue a complete packet for the client."""
        if self._writer.is_closing():
            log.info("SendPacket error: connection is closed")
            return
        try:
            self._writer.write(packet)
        except (ConnectionError, RuntimeError) as exc:
            log.info("SendPacket error: %s", exc)

    def process_packet(self, packet_id: int, body: bytes) -> None:
        """Act on one received packet."""
        if packet_id == PacketId.MATCH_REQ:
            log.info("Received MATCH_REQ from a client")
            self.lobby.try_match()
        elif packet_id == PacketId.PLACE_STONE_REQ:
            room = self.room
            if room is not None:
                request = PlaceStoneReq.from_bytes(body)
                room.handle_place_stone(self, request.x, request.y)
        else:
            log.info("Unknown packet id: %d", packet_id)

    def close(self) -> None:
        """Close the connection to the client."""
        if not self._writer.is_closing():
            self._writer.close()