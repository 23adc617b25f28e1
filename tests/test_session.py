import asyncio

import pytest

from gomoku_net.managers import GameManager, Lobby
from gomoku_net.protocol import (
    GameStartNtf,
    PacketId,
    PlaceStoneNtf,
    PlaceStoneReq,
    ProtocolError,
    encode_packet,
)
from gomoku_net.session import Session


class FakeWriter:
    def __init__(self):
        self.data = bytearray()
        self.closed = False

    def write(self, data):
        self.data += data

    def is_closing(self):
        return self.closed

    def close(self):
        self.closed = True

    async def wait_closed(self):
        return None


def make_session(lobby):
    writer = FakeWriter()
    reader = asyncio.StreamReader()
    return Session(reader, writer, lobby), reader, writer


def matched_pair():
    lobby = Lobby(GameManager())
    black, _, black_out = make_session(lobby)
    white, _, white_out = make_session(lobby)
    lobby.enter(black)
    lobby.enter(white)
    black.process_packet(PacketId.MATCH_REQ, b"")
    return lobby, (black, black_out), (white, white_out)


@pytest.mark.asyncio
async def test_run_enters_lobby_and_leaves_on_eof():
    lobby = Lobby(GameManager())
    session, reader, writer = make_session(lobby)
    task = asyncio.create_task(session.run())
    await asyncio.sleep(0)
    assert session in lobby
    reader.feed_eof()
    await asyncio.wait_for(task, 1)
    assert session not in lobby
    assert writer.closed is True


@pytest.mark.asyncio
async def test_match_request_starts_game():
    lobby, (black, black_out), (white, white_out) = matched_pair()
    assert bytes(black_out.data) == encode_packet(PacketId.GAME_START_NTF, GameStartNtf(True))
    assert bytes(white_out.data) == encode_packet(PacketId.GAME_START_NTF, GameStartNtf(False))
    assert len(lobby) == 0
    assert len(lobby.game_manager) == 1
    assert black.room is white.room


@pytest.mark.asyncio
async def test_place_stone_is_broadcast():
    _, (black, black_out), (_, white_out) = matched_pair()
    black_out.data.clear()
    white_out.data.clear()
    black.process_packet(PacketId.PLACE_STONE_REQ, PlaceStoneReq(3, 4).to_bytes())
    expected = encode_packet(PacketId.PLACE_STONE_NTF, PlaceStoneNtf(3, 4, True))
    assert bytes(black_out.data) == expected
    assert bytes(white_out.data) == expected


@pytest.mark.asyncio
async def test_out_of_turn_move_is_ignored():
    _, (_, black_out), (white, white_out) = matched_pair()
    black_out.data.clear()
    white_out.data.clear()
    white.process_packet(PacketId.PLACE_STONE_REQ, PlaceStoneReq(0, 0).to_bytes())
    assert bytes(black_out.data) == b""
    assert bytes(white_out.data) == b""


@pytest.mark.asyncio
async def test_place_stone_without_room_does_nothing():
    lobby = Lobby(GameManager())
    session, _, writer = make_session(lobby)
    session.process_packet(PacketId.PLACE_STONE_REQ, PlaceStoneReq(1, 1).to_bytes())
    assert session.room is None
    assert bytes(writer.data) == b""


@pytest.mark.asyncio
async def test_short_place_stone_body_raises_in_room():
    _, (black, _), _ = matched_pair()
    with pytest.raises(ProtocolError):
        black.process_packet(PacketId.PLACE_STONE_REQ, b"\x01")


@pytest.mark.asyncio
async def test_send_packet_skips_closed_connection():
    lobby = Lobby(GameManager())
    session, _, writer = make_session(lobby)
    writer.closed = True
    session.send_packet(encode_packet(PacketId.MATCH_RES))
    assert bytes(writer.data) == b""


@pytest.mark.asyncio
async def test_run_processes_fed_match_request():
    lobby = Lobby(GameManager())
    waiting, _, waiting_out = make_session(lobby)
    lobby.enter(waiting)
    session, reader, writer = make_session(lobby)
    reader.feed_data(encode_packet(PacketId.MATCH_REQ))
    reader.feed_eof()
    await asyncio.wait_for(session.run(), 1)
    assert bytes(waiting_out.data) == encode_packet(PacketId.GAME_START_NTF, GameStartNtf(True))
    assert bytes(writer.data) == encode_packet(PacketId.GAME_START_NTF, GameStartNtf(False))


@pytest.mark.asyncio
async def test_run_survives_malformed_body_then_continues():
    lobby = Lobby(GameManager())
    waiting, _, waiting_out = make_session(lobby)
    session, reader, writer = make_session(lobby)
    lobby.enter(waiting)
    reader.feed_data(encode_packet(PacketId.MATCH_REQ))
    reader.feed_data(encode_packet(PacketId.PLACE_STONE_REQ, b""))
    reader.feed_eof()
    await asyncio.wait_for(session.run(), 1)
    # waiting is black; after the bad request nothing else was broadcast
    assert bytes(waiting_out.data) == encode_packet(PacketId.GAME_START_NTF, GameStartNtf(True))


@pytest.mark.asyncio
async def test_run_drops_client_on_bad_header():
    lobby = Lobby(GameManager())
    session, reader, writer = make_session(lobby)
    reader.feed_data(b"\x02\x00\x2d\x01")
    await asyncio.wait_for(session.run(), 1)
    assert writer.closed is True
    assert session not in lobby