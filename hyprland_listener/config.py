"""Listener configuration and event socket path resolution.

Hyprland exposes its event socket as ``.socket2.sock`` inside the instance
directory named by HYPRLAND_INSTANCE_SIGNATURE. Recent Hyprland versions keep
instance directories under ``$XDG_RUNTIME_DIR/hypr``; older ones under
``/tmp/hypr``.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError, ErrorCode
from .reassembler import DEFAULT_MAX_LINE_LENGTH, PartialLinePolicy

logger = logging.getLogger(__name__)

EVENT_SOCKET_NAME = ".socket2.sock"
LEGACY_RUNTIME_ROOT = Path("/tmp/hypr")

# Environment variables
ENV_INSTANCE_SIGNATURE = "HYPRLAND_INSTANCE_SIGNATURE"
ENV_RUNTIME_DIR = "XDG_RUNTIME_DIR"
ENV_SOCKET = "HYPRLAND_EVENTS_SOCKET"
ENV_READ_SIZE = "HYPRLAND_EVENTS_READ_SIZE"
ENV_PARTIAL_LINE = "HYPRLAND_EVENTS_PARTIAL_LINE"


class ListenerConfig(BaseModel):
    """Settings for one EventListener."""

    instance_signature: Optional[str] = Field(default=None, min_length=1)
    socket_path: Optional[Path] = Field(default=None)
    runtime_dir: Optional[Path] = Field(default=None)
    read_size: int = Field(default=4096, ge=1, le=1024 * 1024)
    connect_timeout: float = Field(default=5.0, gt=0)
    max_line_length: int = Field(default=DEFAULT_MAX_LINE_LENGTH, ge=1)
    partial_line_policy: PartialLinePolicy = Field(default=PartialLinePolicy.DISCARD)

    @field_validator('instance_signature')
    @classmethod
    def signature_is_single_path_component(cls, v: Optional[str]) -> Optional[str]:
        """Reject signatures that would escape the runtime directory."""
        if v is not None and ("/" in v or v in (".", "..")):
            raise ValueError(f"Invalid instance signature: {v!r}")
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "ListenerConfig":
        """Build a config from environment variables, then apply overrides.

        Args:
            environ: Environment mapping (default: os.environ)
            **overrides: Field values taking precedence over the environment

        Raises:
            ConfigurationError: If a value fails validation
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        if env.get(ENV_INSTANCE_SIGNATURE):
            values["instance_signature"] = env[ENV_INSTANCE_SIGNATURE]
        if env.get(ENV_RUNTIME_DIR):
            values["runtime_dir"] = env[ENV_RUNTIME_DIR]
        if env.get(ENV_SOCKET):
            values["socket_path"] = env[ENV_SOCKET]
        if env.get(ENV_READ_SIZE):
            values["read_size"] = env[ENV_READ_SIZE]
        if env.get(ENV_PARTIAL_LINE):
            values["partial_line_policy"] = env[ENV_PARTIAL_LINE].lower()

        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid listener configuration: {e.error_count()} error(s)",
                suggestion=f"Check {ENV_READ_SIZE}, {ENV_PARTIAL_LINE} and {ENV_SOCKET}",
                context={"errors": [err["msg"] for err in e.errors()]},
            )

    def instance_dir(self) -> Path:
        """Directory of the running Hyprland instance.

        Raises:
            ConfigurationError: If no instance signature is configured
        """
        if not self.instance_signature:
            raise ConfigurationError(
                f"{ENV_INSTANCE_SIGNATURE} is not set",
                code=ErrorCode.MISSING_INSTANCE_SIGNATURE,
                suggestion="Run inside a Hyprland session or pass an explicit socket path",
            )

        if self.runtime_dir is not None:
            candidate = self.runtime_dir / "hypr" / self.instance_signature
            if candidate.is_dir():
                return candidate

        return LEGACY_RUNTIME_ROOT / self.instance_signature

    def resolve_socket_path(self) -> Path:
        """Path of the event socket; an explicit socket_path wins."""
        if self.socket_path is not None:
            return self.socket_path
        path = self.instance_dir() / EVENT_SOCKET_NAME
        logger.debug(f"Resolved event socket path: {path}")
        return path
