"""Interactive command-line client for the Gomoku server."""

from __future__ import annotations

import argparse
import re
import socket
import sys
import threading
from contextlib import suppress

from .protocol import (
    HEADER_SIZE,
    GameStartNtf,
    PacketId,
    PlaceStoneNtf,
    PlaceStoneReq,
    ProtocolError,
    decode_header,
    encode_packet,
)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 12345

# "%d %d": digits are taken greedily, so no backtracking into a number.
_PUT_ARGS = re.compile(r"\s*([+-]?\d+)(?!\d)\s*([+-]?\d+)")


class GomokuClient:
    """Blocking connection to a Gomoku server."""

    def __init__(self, sock: socket.socket | None = None) -> None:
        self._sock = sock

    def __enter__(self) -> "GomokuClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def connect(self, host: str, port: int) -> None:
        """Open a TCP connection to the server."""
        self._sock = socket.create_connection((host, port))

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise RuntimeError("client is not connected")
        return self._sock

    def send_match_req(self) -> None:
        """Ask the server to match this client with another player."""
        self._socket().sendall(encode_packet(PacketId.MATCH_REQ))

    def send_place_stone(self, x: int, y: int) -> None:
        """Ask to place a stone at (x, y)."""
        self._socket().sendall(encode_packet(PacketId.PLACE_STONE_REQ, PlaceStoneReq(x, y)))

    def _read_exactly(self, count: int) -> bytes:
        sock = self._socket()
        chunks = bytearray()
        while len(chunks) < count:
            chunk = sock.recv(count - len(chunks))
            if not chunk:
                break
            chunks += chunk
        return bytes(chunks)

    def receive(self) -> tuple[int, bytes] | None:
        """Block for the next packet; None once the server has closed the connection."""
        header = self._read_exactly(HEADER_SIZE)
        if not header:
            return None
        if len(header) < HEADER_SIZE:
            raise ConnectionError("connection closed mid-packet")
        size, packet_id = decode_header(header)
        body = self._read_exactly(size - HEADER_SIZE)
        if len(body) < size - HEADER_SIZE:
            raise ConnectionError("connection closed mid-packet")
        return packet_id, body

    def close(self) -> None:
        """Shut the connection down, waking any blocked receive."""
        if self._sock is None:
            return
        sock, self._sock = self._sock, None
        with suppress(OSError):
            sock.shutdown(socket.SHUT_RDWR)
        sock.close()


def describe_packet(packet_id: int, body: bytes) -> str:
    """A line of text telling the user what a server packet means."""
    if packet_id == PacketId.GAME_START_NTF:
        start = GameStartNtf.from_bytes(body)
        return f">> Game Started! You are {'Black' if start.is_black else 'White'}."
    if packet_id == PacketId.PLACE_STONE_NTF:
        stone = PlaceStoneNtf.from_bytes(body)
        colour = "Black" if stone.is_black else "White"
        return f">> {colour} placed a stone at ({stone.x}, {stone.y})."
    return f">> Unknown packet received. ID: {packet_id}"


def parse_command(line: str) -> tuple | None:
    """Turn an input line into ("match",), ("put", x, y) or None."""
    if line.startswith("match"):
        return ("match",)
    if line.startswith("put"):
        found = _PUT_ARGS.match(line[4:])
        if found:
            x, y = (int(value) & 0xFF for value in found.groups())
            return ("put", x, y)
    return None


def _print_incoming(client: GomokuClient) -> None:
    while True:
        try:
            packet = client.receive()
        except (OSError, ProtocolError, RuntimeError):
            packet = None
        if packet is None:
            break
        try:
            print(describe_packet(*packet), flush=True)
        except ProtocolError as exc:
            print(f">> Malformed packet: {exc}", flush=True)
    print("[Client] Connection closed by server.", flush=True)


def main(argv: list[str] | None = None) -> int:
    """Connect to the server and relay commands typed on standard input."""
    parser = argparse.ArgumentParser(description="Play Gomoku from the terminal.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    client = GomokuClient()
    try:
        client.connect(args.host, args.port)
    except OSError as exc:
        print(f"Exception: {exc}", file=sys.stderr)
        return 1
    print("[Client] Connected to server.", flush=True)

    listener = threading.Thread(target=_print_incoming, args=(client,), daemon=True)
    listener.start()
    try:
        for line in sys.stdin:
            command = parse_command(line.rstrip("\r\n"))
            if command is None:
                continue
            if command[0] == "match":
                client.send_match_req()
                print("[Client] Sent MATCH_REQ.", flush=True)
            else:
                client.send_place_stone(command[1], command[2])
    except (OSError, ProtocolError) as exc:
        print(f"Exception: {exc}", file=sys.stderr)
    finally:
        client.close()
        listener.join()
    return 0


if __name__ == "__main__":
    sys.exit(main())