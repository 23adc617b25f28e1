# gomoku-net

A two-player Gomoku (five in a row) game played over TCP on a 19×19 board.
The package provides an asyncio server that pairs waiting players into game
rooms, and a console client for playing.

## Installation

    pip install .

## Running the server

    gomoku-server [--host HOST] [--port PORT]

The server listens on `0.0.0.0`, port 12345, by default. Each connecting
client enters the lobby. When a client sends a match request and at least two
clients are waiting, the two who have waited longest are placed in a new game
room; the first becomes Black and moves first. Stop the server with Ctrl-C.

## Playing with the client

    gomoku-client [--host HOST] [--port PORT]

The client connects to `127.0.0.1:12345` by default and reads commands from
standard input, one per line:

- `match` asks the server to find an opponent.
- `put X Y` asks to place a stone at column `X`, row `Y` (both 0–18).

Other lines are ignored. Messages from the server are printed as they arrive,
for example:

    >> Game Started! You are Black.
    >> Black placed a stone at (9, 9).

The server ignores moves made out of turn, outside the board, or on an
occupied point. A game ends when a player gets five or more stones in a row
horizontally, vertically or diagonally; after that the room accepts no more
moves and is removed from the server.

## Wire format

Every packet starts with a 4-byte header: the total packet size (header plus
body) and the packet id, each an unsigned 16-bit little-endian integer.
`gomoku_net.protocol` provides `PacketId`, the body types `PlaceStoneReq`,
`GameStartNtf` and `PlaceStoneNtf` (each with `to_bytes` and `from_bytes`),
the helpers `encode_packet` and `decode_header`, and `ProtocolError`, raised
for bytes that do not form a valid header or body.

```python
from gomoku_net.protocol import PacketId, PlaceStoneReq, decode_header, encode_packet

packet = encode_packet(PacketId.PLACE_STONE_REQ, PlaceStoneReq(3, 4))
size, packet_id = decode_header(packet)   # (6, 502)
```

## Using it as a library

- `gomoku_net.server.GomokuServer(host, port)` can run inside your own asyncio
  program: `await server.start()`, `await server.serve_forever()` and
  `await server.close()`. Pass port 0 to let the system choose one, then read
  `server.port`.
- `gomoku_net.client.GomokuClient` is a blocking client with `connect`,
  `send_match_req`, `send_place_stone`, `receive` (returns `(packet_id, body)`,
  or `None` once the server closes the connection) and `close`; it also works
  as a context manager. `describe_packet` turns a received packet into the
  text the console client prints, and `parse_command` parses an input line.
- `gomoku_net.room.GameRoom` holds the rules of one game, and
  `gomoku_net.managers` has the `GameManager` room registry and the `Lobby`
  used for matchmaking.

## What it does not do

- There are no accounts or logins; the login and lobby packet ids in
  `PacketId` are defined but not handled by the server.
- The server does not send a game-over packet: when a game is won, the
  clients only see the winning stone being placed.
- The client prints moves as text and does not draw the board.
- Nothing is stored; games exist only while the server runs.

## Development

    pip install -e ".[test]"
    pytest