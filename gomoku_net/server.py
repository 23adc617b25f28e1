"""TCP server that accepts players and hands them to the lobby."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .managers import GameManager, Lobby
from .session import Session

DEFAULT_PORT = 12345

log = logging.getLogger(__name__)


class GomokuServer:
    """Accepts connections and runs one session per client."""

    def __init__(self, host: str = "0.0.0.0", port: int = DEFAULT_PORT) -> None:
        self.host = host
        self.requested_port = port
        self.game_manager = GameManager()
        self.lobby = Lobby(self.game_manager)
        self._server: asyncio.base_events.Server | None = None
        self._sessions: set[Session] = set()

    @property
    def port(self) -> int:
        """The port the server is listening on."""
        if self._server is None or not self._server.sockets:
            raise RuntimeError("server is not started")
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> "GomokuServer":
        """Bind and start accepting connections."""
        if self._server is None:
            self._server = await asyncio.start_server(
                self._handle_client, self.host, self.requested_port
            )
            log.info("Server started on port %d", self.port)
        return self

    async def serve_forever(self) -> None:
        """Accept connections until cancelled."""
        await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def close(self) -> None:
        """Stop accepting, disconnect every client and wait for shutdown."""
        if self._server is None:
            return
        server, self._server = self._server, None
        server.close()
        for session in list(self._sessions):
            session.close()
        await server.wait_closed()

    async def _handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        session = Session(reader, writer, self.lobby)
        self._sessions.add(session)
        try:
            await session.run()
        finally:
            self._sessions.discard(session)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Gomoku game server.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser.parse_args(argv)


async def _serve(host: str, port: int) -> None:
    server = GomokuServer(host, port)
    await server.start()
    print(f"Server started on port {server.port}...", flush=True)
    try:
        await server.serve_forever()
    finally:
        await server.close()


def main(argv: list[str] | None = None) -> int:
    """Run the server until interrupted."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(_serve(args.host, args.port))
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"Exception: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())