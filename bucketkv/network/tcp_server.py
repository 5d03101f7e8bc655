"""
Async TCP Server Module

Thin front end that exposes a HashMapStore over a line-oriented TCP
protocol. All store calls run synchronously on the event loop thread, so
one server instance never issues overlapping store operations.
"""

import asyncio
import logging
from asyncio import StreamReader, StreamWriter
from typing import Optional

from ..config.settings import settings
from ..protocol.commands import Command, CommandType, Response
from ..protocol.parser import ProtocolParser
from ..storage.store import HashMapStore

logger = logging.getLogger(__name__)


class KVServer:
    """
    Asynchronous TCP server for the bucketkv store.

    Each client connection is handled in its own coroutine. Connections
    are persistent: a client may send any number of commands until it
    sends QUIT or disconnects.

    Usage:
        server = KVServer(host='0.0.0.0', port=3000, store=HashMapStore())
        await server.start()  # Runs forever

    Attributes:
        host: Server bind address
        port: Server port number
        store: The HashMapStore shared by all connections
        parser: The ProtocolParser for parsing commands
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            store: HashMapStore = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            store: HashMapStore instance (creates one on settings.DATA_FILE if not provided)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.store = store if store is not None else HashMapStore()
        self.parser = ProtocolParser()

        # Server state
        self._server: Optional[asyncio.Server] = None
        self._running = False
        self._connection_count = 0
        self._total_requests = 0

    async def handle_client(
            self,
            reader: StreamReader,
            writer: StreamWriter
    ) -> None:
        """
        Handle a single client connection.

        Reads one command per line, executes it against the store and
        writes one response line, until QUIT or disconnect.
        """
        addr = writer.get_extra_info('peername')
        self._connection_count += 1
        logger.debug(f"Client connected: {addr}")

        try:
            while True:
                data = await reader.readline()
                if not data:
                    logger.debug(f"Client disconnected: {addr}")
                    break

                try:
                    raw = data.decode().rstrip('\r\n')
                except UnicodeDecodeError:
                    await self._send(writer, Response.error("invalid encoding"))
                    continue

                command = self.parser.parse_request(raw)

                if command.type == CommandType.QUIT:
                    logger.debug(f"Client requested quit: {addr}")
                    break

                if not command.is_valid:
                    response = Response.error("invalid command")
                else:
                    self._total_requests += 1
                    logger.debug(f"{command.type.name} {command.key}".rstrip())
                    response = self._execute_command(command)

                await self._send(writer, response)

        except ConnectionResetError:
            logger.debug(f"Connection reset by client: {addr}")
        except Exception as exc:  # Log unexpected errors but keep server alive
            logger.exception(f"Error handling client {addr}: {exc}")
        finally:
            try:
                writer.close()
                await writer.wait_closed()
            except OSError:
                pass

    async def _send(self, writer: StreamWriter, response: Response) -> None:
        writer.write(self.parser.format_response(response).encode())
        await writer.drain()

    def _execute_command(self, command: Command) -> Response:
        """
        Execute a parsed command, mapping unexpected failures to a generic error.

        Args:
            command: The Command object to execute

        Returns:
            Response object with the result
        """
        try:
            return self._dispatch(command)
        except Exception as exc:
            logger.exception(f"Error executing {command.type.name}: {exc}")
            return Response.error("internal server error")

    def _dispatch(self, command: Command) -> Response:
        """Route a command to the matching store operation."""
        store = self.store

        if command.type == CommandType.SET:
            if store.has(command.key):
                return Response.key_exists()
            store.set(command.key, command.value)
            return Response.created()

        if command.type == CommandType.GET:
            value = store.get(command.key)
            return Response.value_response(value) if value is not None else Response.key_not_found()

        if command.type == CommandType.UPDATE:
            updated = store.update(command.key, command.value)
            return Response.updated() if updated else Response.key_not_found()

        if command.type == CommandType.DELETE:
            deleted = store.delete(command.key)
            return Response.deleted() if deleted else Response.key_not_found()

        if command.type == CommandType.EXISTS:
            return Response.exists_response(store.has(command.key))

        if command.type == CommandType.KEYS:
            keys = store.get_all_keys()
            return Response.json_response({
                "count": len(keys),
                "keys": keys,
                "data": store.get_all(),
            })

        if command.type == CommandType.BUCKETS:
            return Response.json_response(store.visualize_buckets())

        if command.type == CommandType.BUCKET:
            return Response.json_response({
                "key": command.key,
                "bucketIndex": store.get_bucket_for_key(command.key),
                "exists": store.has(command.key),
                "value": store.get(command.key),
            })

        if command.type == CommandType.LOADFACTOR:
            return Response.json_response(store.get_load_factor_info())

        if command.type == CommandType.PREFIX:
            return Response.json_response(store.get_keys_by_prefix(command.key))

        if command.type == CommandType.USER:
            data = store.get_user_data(command.key)
            if not data:
                return Response.error("user not found")
            return Response.json_response({"userId": command.key, "data": data})

        return Response.error("invalid command")

    async def start(self) -> None:
        """
        Start the server and begin accepting connections.

        Runs until cancelled or stop() is called.

        Example:
            server = KVServer(port=3000)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
            limit=settings.READ_BUFFER_SIZE,
        )
        self._running = True

        addrs = ', '.join(str(sock.getsockname()) for sock in self._server.sockets or [])
        logger.info(f"Serving on {addrs}")

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            # Expected during shutdown/fixture cleanup
            logger.debug("Server start cancelled")
        finally:
            self._running = False

    async def stop(self) -> None:
        """Stop the server gracefully."""
        if self._server is None:
            return

        self._server.close()
        try:
            await self._server.wait_closed()
        finally:
            self._server = None
            self._running = False

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with connection and request counts plus the
            store's load factor report.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_connections": self._connection_count,
            "total_requests": self._total_requests,
            "store_stats": self.store.get_load_factor_info(),
        }
