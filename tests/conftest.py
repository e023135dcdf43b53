"""Pytest configuration and fixtures for hyprland-listener tests."""

import logging
import sys
import tempfile
from pathlib import Path
from typing import Generator, Iterable, List, Union

import pytest

# Add the repository root to Python path BEFORE test collection
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from hyprland_listener.config import ListenerConfig
from hyprland_listener.listener import EventListener
from hyprland_listener.logging_config import LOGGER_NAME


class ScriptedTransport:
    """Transport that replays a fixed list of reads.

    Items are bytes (returned by read) or exceptions (raised by read). Once
    the script is exhausted every read returns b"" (graceful close).
    """

    def __init__(self, script: Iterable[Union[bytes, BaseException]]):
        self.script: List[Union[bytes, BaseException]] = list(script)
        self.connected = False
        self.closed = False
        self.readable_waits = 0
        self.read_sizes: List[int] = []

    async def connect(self) -> None:
        self.connected = True

    async def readable(self) -> None:
        self.readable_waits += 1

    async def read(self, size: int) -> bytes:
        self.read_sizes.append(size)
        if not self.script:
            return b""
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def short_tmp_dir() -> Generator[Path, None, None]:
    """Temporary directory with a path short enough for AF_UNIX sockets."""
    with tempfile.TemporaryDirectory(prefix="hl-", dir="/tmp") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def listener_config() -> ListenerConfig:
    """Config that never touches the environment."""
    return ListenerConfig(socket_path=Path("/nonexistent/.socket2.sock"))


@pytest.fixture
def make_listener(listener_config):
    """Build a listener over a ScriptedTransport.

    Usage:
        listener, transport = make_listener([b"workspace>>2\\n"])
    """

    def factory(script, config: ListenerConfig = None):
        transport = ScriptedTransport(script)
        listener = EventListener(config or listener_config, transport_factory=lambda: transport)
        return listener, transport

    return factory


@pytest.fixture
def scripted_transport():
    """Factory for ScriptedTransport instances."""
    return ScriptedTransport


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Drop handlers installed by setup_logging so they don't outlive the test's streams."""
    logger = logging.getLogger(LOGGER_NAME)
    level = logger.level
    yield
    logger.handlers.clear()
    logger.setLevel(level)
