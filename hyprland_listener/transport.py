"""Unix socket transport for the Hyprland event socket.

The listener only needs four things from a transport: connect once, wait
until readable, read a chunk (empty on close), and close.
"""

import asyncio
import logging
import socket
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from .errors import ErrorCode, TransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Byte-oriented, ordered channel consumed by the listener loop."""

    async def connect(self) -> None:
        ...

    async def readable(self) -> None:
        ...

    async def read(self, size: int) -> bytes:
        ...

    async def close(self) -> None:
        ...


class UnixSocketTransport:
    """Non-blocking AF_UNIX stream socket driven by the running event loop."""

    def __init__(self, path: Path, connect_timeout: float = 5.0) -> None:
        """Initialize transport.

        Args:
            path: Path to the event socket
            connect_timeout: Seconds to wait for the connection
        """
        self.path = Path(path)
        self.connect_timeout = connect_timeout
        self._sock: Optional[socket.socket] = None

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    async def connect(self) -> None:
        """Connect to the event socket.

        Raises:
            TransportError: If the socket is missing, refuses, or times out
        """
        loop = asyncio.get_running_loop()
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.setblocking(False)

        try:
            await asyncio.wait_for(
                loop.sock_connect(sock, str(self.path)),
                timeout=self.connect_timeout,
            )
        except asyncio.TimeoutError:
            sock.close()
            raise TransportError(
                "connect",
                f"timed out after {self.connect_timeout}s ({self.path})",
                code=ErrorCode.CONNECT_TIMEOUT,
            )
        except FileNotFoundError:
            sock.close()
            raise TransportError(
                "connect",
                f"socket not found: {self.path}",
                code=ErrorCode.SOCKET_NOT_FOUND,
                suggestion="Is Hyprland running? Check HYPRLAND_INSTANCE_SIGNATURE",
            )
        except OSError as e:
            sock.close()
            raise TransportError("connect", f"{e} ({self.path})", code=ErrorCode.CONNECT_FAILED)

        self._sock = sock
        logger.info(f"Connected to event socket {self.path}")

    async def readable(self) -> None:
        """Suspend until the socket has data or has been closed by the peer."""
        sock = self._require_socket()
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()

        def on_readable() -> None:
            if not waiter.done():
                waiter.set_result(None)

        fd = sock.fileno()
        try:
            loop.add_reader(fd, on_readable)
        except (OSError, ValueError) as e:
            raise TransportError("poll", str(e))

        try:
            await waiter
        finally:
            loop.remove_reader(fd)

    async def read(self, size: int) -> bytes:
        """Read up to size bytes; b"" means the peer closed the stream.

        Raises:
            TransportError: On socket errors
        """
        sock = self._require_socket()
        loop = asyncio.get_running_loop()
        try:
            return await loop.sock_recv(sock, size)
        except OSError as e:
            raise TransportError("read", str(e))

    async def close(self) -> None:
        """Close the socket. Safe to call more than once."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
            logger.info(f"Closed event socket {self.path}")

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("read", "not connected")
        return self._sock
