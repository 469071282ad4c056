"""
pwaudio_lib/config.py

Environment-derived configuration.

The daemon socket is found the way libpipewire finds it:
- PIPEWIRE_REMOTE names the socket (default "pipewire-0"); an absolute path is used as-is.
- Otherwise it lives in PIPEWIRE_RUNTIME_DIR, then XDG_RUNTIME_DIR, then USERPROFILE.
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

import voluptuous as vol

from .const import DEFAULT_REMOTE
from .errors import PwConfigError
from .session import SessionConfig

ENV_REMOTE = "PIPEWIRE_REMOTE"
ENV_RUNTIME_DIRS = ("PIPEWIRE_RUNTIME_DIR", "XDG_RUNTIME_DIR", "USERPROFILE")
ENV_WIRE_LOG = "PWAUDIO_WIRE_LOG"

CONF_REMOTE = "remote"
CONF_RUNTIME_DIR = "runtime_dir"
CONF_WIRE_LOG = "wire_log"
CONF_IO_TIMEOUT = "io_timeout_s"
CONF_APPLICATION_NAME = "application_name"

_NON_EMPTY_STR = vol.All(str, vol.Length(min=1))

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_REMOTE, default=DEFAULT_REMOTE): _NON_EMPTY_STR,
        vol.Optional(CONF_RUNTIME_DIR, default=None): vol.Any(None, _NON_EMPTY_STR),
        vol.Optional(CONF_WIRE_LOG, default=False): vol.Boolean(),
        vol.Optional(CONF_IO_TIMEOUT, default=None): vol.Any(
            None, vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False))
        ),
        vol.Optional(CONF_APPLICATION_NAME, default="pwaudio"): _NON_EMPTY_STR,
    }
)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    env = os.environ if environ is None else environ
    raw: dict[str, Any] = {}
    if env.get(ENV_REMOTE):
        raw[CONF_REMOTE] = env[ENV_REMOTE]
    for name in ENV_RUNTIME_DIRS:
        if env.get(name):
            raw[CONF_RUNTIME_DIR] = env[name]
            break
    if env.get(ENV_WIRE_LOG):
        raw[CONF_WIRE_LOG] = env[ENV_WIRE_LOG]
    return raw


def validate_config(raw: Mapping[str, Any]) -> dict[str, Any]:
    try:
        return CONFIG_SCHEMA(dict(raw))
    except vol.Invalid as e:
        raise PwConfigError(f"Invalid configuration: {e}") from e


def resolve_socket_path(remote: str, runtime_dir: Optional[str]) -> str:
    if os.path.isabs(remote):
        return remote
    if not runtime_dir:
        raise PwConfigError(
            "Cannot locate the PipeWire socket: set PIPEWIRE_RUNTIME_DIR or XDG_RUNTIME_DIR, "
            "or give an absolute PIPEWIRE_REMOTE."
        )
    return os.path.join(runtime_dir, remote)


def load_session_config(
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> SessionConfig:
    """
    Build a SessionConfig from the environment plus explicit overrides.

    Overrides whose value is None are ignored so CLI defaults do not mask the environment.
    """
    raw = config_from_env(environ)
    raw.update({k: v for k, v in overrides.items() if v is not None})
    conf = validate_config(raw)
    return SessionConfig(
        socket_path=resolve_socket_path(conf[CONF_REMOTE], conf[CONF_RUNTIME_DIR]),
        io_timeout_s=conf[CONF_IO_TIMEOUT],
        wire_log=conf[CONF_WIRE_LOG],
        application_name=conf[CONF_APPLICATION_NAME],
    )
