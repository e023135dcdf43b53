"""Unit tests for listener configuration and socket path resolution."""

from pathlib import Path

import pytest

from hyprland_listener.config import EVENT_SOCKET_NAME, LEGACY_RUNTIME_ROOT, ListenerConfig
from hyprland_listener.errors import ConfigurationError, ErrorCode
from hyprland_listener.reassembler import PartialLinePolicy


class TestDefaults:
    def test_defaults(self):
        config = ListenerConfig()

        assert config.read_size == 4096
        assert config.connect_timeout == 5.0
        assert config.partial_line_policy is PartialLinePolicy.DISCARD
        assert config.socket_path is None
        assert config.max_line_length == 64 * 1024

    @pytest.mark.parametrize("field, value", [
        ("read_size", 0),
        ("read_size", 2 * 1024 * 1024),
        ("connect_timeout", 0),
        ("max_line_length", 0),
        ("instance_signature", ""),
        ("instance_signature", "../escape"),
        ("partial_line_policy", "keep"),
    ])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValueError):
            ListenerConfig(**{field: value})


class TestFromEnv:
    """Tests for ListenerConfig.from_env."""

    def test_empty_environment(self):
        config = ListenerConfig.from_env({})
        assert config.instance_signature is None
        assert config.runtime_dir is None

    def test_reads_all_variables(self):
        config = ListenerConfig.from_env({
            "HYPRLAND_INSTANCE_SIGNATURE": "sig_1234",
            "XDG_RUNTIME_DIR": "/run/user/1000",
            "HYPRLAND_EVENTS_SOCKET": "/tmp/events.sock",
            "HYPRLAND_EVENTS_READ_SIZE": "8192",
            "HYPRLAND_EVENTS_PARTIAL_LINE": "FLUSH",
        })

        assert config.instance_signature == "sig_1234"
        assert config.runtime_dir == Path("/run/user/1000")
        assert config.socket_path == Path("/tmp/events.sock")
        assert config.read_size == 8192
        assert config.partial_line_policy is PartialLinePolicy.FLUSH

    def test_overrides_win(self):
        config = ListenerConfig.from_env(
            {"HYPRLAND_EVENTS_READ_SIZE": "8192"},
            read_size=128,
            socket_path=None,
        )

        assert config.read_size == 128
        assert config.socket_path is None

    def test_uses_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("HYPRLAND_INSTANCE_SIGNATURE", "from_os")
        assert ListenerConfig.from_env().instance_signature == "from_os"

    @pytest.mark.parametrize("env", [
        {"HYPRLAND_EVENTS_READ_SIZE": "lots"},
        {"HYPRLAND_EVENTS_READ_SIZE": "-1"},
        {"HYPRLAND_EVENTS_PARTIAL_LINE": "sometimes"},
        {"HYPRLAND_INSTANCE_SIGNATURE": ".."},
    ])
    def test_invalid_environment(self, env):
        with pytest.raises(ConfigurationError) as exc_info:
            ListenerConfig.from_env(env)

        assert exc_info.value.code is ErrorCode.INVALID_CONFIG
        assert exc_info.value.context["errors"]


class TestSocketPath:
    """Tests for event socket path resolution."""

    def test_explicit_socket_path_wins(self):
        config = ListenerConfig(instance_signature="sig", socket_path=Path("/custom.sock"))
        assert config.resolve_socket_path() == Path("/custom.sock")

    def test_runtime_dir_used_when_instance_dir_exists(self, tmp_path):
        (tmp_path / "hypr" / "sig").mkdir(parents=True)
        config = ListenerConfig(instance_signature="sig", runtime_dir=tmp_path)

        assert config.resolve_socket_path() == tmp_path / "hypr" / "sig" / EVENT_SOCKET_NAME

    def test_legacy_location_when_runtime_dir_missing_instance(self, tmp_path):
        config = ListenerConfig(instance_signature="sig", runtime_dir=tmp_path)
        assert config.resolve_socket_path() == LEGACY_RUNTIME_ROOT / "sig" / ".socket2.sock"

    def test_legacy_location_without_runtime_dir(self):
        config = ListenerConfig(instance_signature="sig")
        assert config.resolve_socket_path() == Path("/tmp/hypr/sig/.socket2.sock")

    def test_missing_signature(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ListenerConfig().resolve_socket_path()

        error = exc_info.value
        assert error.code is ErrorCode.MISSING_INSTANCE_SIGNATURE
        assert "HYPRLAND_INSTANCE_SIGNATURE" in error.message
        assert error.suggestion
