"""Wire format shared by the Gomoku server and client.

Every packet starts with a four byte header: the total packet size
(header plus body) and the packet id, both little-endian unsigned 16-bit
integers. The body layout depends on the packet id.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol, Union

HEADER_SIZE = 4
MAX_PACKET_SIZE = 0xFFFF

_HEADER = struct.Struct("<HH")
_PLACE_STONE_REQ = struct.Struct("<BB")
_GAME_START_NTF = struct.Struct("<?")
_PLACE_STONE_NTF = struct.Struct("<BB?")


class ProtocolError(ValueError):
    """Raised when bytes do not form a valid packet or body."""


class PacketId(IntEnum):
    """Identifiers of all packet kinds."""

    LOGIN_REQ = 101
    LOGIN_RES = 102
    ENTER_LOBBY_REQ = 201
    ENTER_LOBBY_RES = 202
    MATCH_REQ = 301
    MATCH_RES = 302
    GAME_START_NTF = 501
    PLACE_STONE_REQ = 502
    PLACE_STONE_NTF = 503
    GAME_END_NTF = 504


class _Body(Protocol):
    def to_bytes(self) -> bytes: ...


def _pack(layout: struct.Struct, *values: object) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ProtocolError(str(exc)) from exc


def _unpack(layout: struct.Struct, data: bytes, name: str) -> tuple:
    if len(data) < layout.size:
        raise ProtocolError(
            f"{name} body needs {layout.size} bytes, got {len(data)}"
        )
    return layout.unpack_from(data)


@dataclass(frozen=True)
class PlaceStoneReq:
    """Body of PLACE_STONE_REQ: where the sender wants to place a stone."""

    x: int
    y: int

    def to_bytes(self) -> bytes:
        return _pack(_PLACE_STONE_REQ, self.x, self.y)

    @classmethod
    def from_bytes(cls, data: bytes) -> "PlaceStoneReq":
        x, y = _unpack(_PLACE_STONE_REQ, bytes(data), "PLACE_STONE_REQ")
        return cls(x, y)


@dataclass(frozen=True)
class GameStartNtf:
    """Body of GAME_START_NTF: whether the receiver plays black."""

    is_black: bool

    def to_bytes(self) -> bytes:
        return _pack(_GAME_START_NTF, self.is_black)

    @classmethod
    def from_bytes(cls, data: bytes) -> "GameStartNtf":
        (is_black,) = _unpack(_GAME_START_NTF, bytes(data), "GAME_START_NTF")
        return cls(is_black)


@dataclass(frozen=True)
class PlaceStoneNtf:
    """Body of PLACE_STONE_NTF: a stone that has been placed."""

    x: int
    y: int
    is_black: bool

    def to_bytes(self) -> bytes:
        return _pack(_PLACE_STONE_NTF, self.x, self.y, self.is_black)

    @classmethod
    def from_bytes(cls, data: bytes) -> "PlaceStoneNtf":
        x, y, is_black = _unpack(_PLACE_STONE_NTF, bytes(data), "PLACE_STONE_NTF")
        return cls(x, y, is_black)


def encode_packet(packet_id: int, body: Union[bytes, bytearray, _Body] = b"") -> bytes:
    """Build a complete packet from an id and a body (bytes or a body object)."""
    payload = bytes(body) if isinstance(body, (bytes, bytearray, memoryview)) else body.to_bytes()
    size = HEADER_SIZE + len(payload)
    if size > MAX_PACKET_SIZE:
        raise ProtocolError(f"packet of {size} bytes exceeds {MAX_PACKET_SIZE}")
    return _pack(_HEADER, size, int(packet_id)) + payload


def decode_header(data: bytes) -> tuple[int, int]:
    """Return (total size, packet id) from the first four bytes of a packet."""
    if len(data) < HEADER_SIZE:
        raise ProtocolError(f"header needs {HEADER_SIZE} bytes, got {len(data)}")
    size, packet_id = _HEADER.unpack_from(bytes(data))
    if size < HEADER_SIZE:
        raise ProtocolError(f"packet size {size} is smaller than the header")
    return size, packet_id