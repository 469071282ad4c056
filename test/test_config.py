from __future__ import annotations

import pytest

from pwaudio_lib.config import config_from_env, load_session_config, resolve_socket_path
from pwaudio_lib.errors import PwConfigError


def test_socket_path_from_runtime_dir_precedence() -> None:
    env = {"PIPEWIRE_RUNTIME_DIR": "/run/pw", "XDG_RUNTIME_DIR": "/run/user/1000"}
    assert load_session_config(env).socket_path == "/run/pw/pipewire-0"

    env = {"XDG_RUNTIME_DIR": "/run/user/1000", "USERPROFILE": "C:/Users/x"}
    assert load_session_config(env).socket_path == "/run/user/1000/pipewire-0"


def test_remote_name_and_absolute_remote() -> None:
    env = {"XDG_RUNTIME_DIR": "/run/user/1000", "PIPEWIRE_REMOTE": "pipewire-1"}
    assert load_session_config(env).socket_path == "/run/user/1000/pipewire-1"

    env = {"PIPEWIRE_REMOTE": "/tmp/custom-socket"}
    assert load_session_config(env).socket_path == "/tmp/custom-socket"


def test_override_beats_environment_and_none_is_ignored() -> None:
    env = {"XDG_RUNTIME_DIR": "/run/user/1000", "PIPEWIRE_REMOTE": "pipewire-1"}
    assert load_session_config(env, remote="pipewire-2").socket_path == "/run/user/1000/pipewire-2"
    assert load_session_config(env, remote=None).socket_path == "/run/user/1000/pipewire-1"


def test_missing_runtime_dir_is_a_config_error() -> None:
    with pytest.raises(PwConfigError):
        load_session_config({})
    with pytest.raises(PwConfigError):
        resolve_socket_path("pipewire-0", None)


def test_defaults() -> None:
    cfg = load_session_config({"XDG_RUNTIME_DIR": "/run/user/1000"})
    assert cfg.io_timeout_s is None
    assert cfg.wire_log is False
    assert cfg.application_name == "pwaudio"


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("yes", True), ("off", False), ("0", False)])
def test_wire_log_from_environment(raw: str, expected: bool) -> None:
    cfg = load_session_config({"XDG_RUNTIME_DIR": "/run/user/1000", "PWAUDIO_WIRE_LOG": raw})
    assert cfg.wire_log is expected


def test_invalid_values_raise_config_error() -> None:
    env = {"XDG_RUNTIME_DIR": "/run/user/1000"}
    with pytest.raises(PwConfigError):
        load_session_config(env, io_timeout_s=0)
    with pytest.raises(PwConfigError):
        load_session_config(env, io_timeout_s="soon")
    with pytest.raises(PwConfigError):
        load_session_config(env, wire_log="maybe")
    assert load_session_config(env, io_timeout_s="2.5").io_timeout_s == 2.5


def test_config_from_env_skips_empty_values() -> None:
    raw = config_from_env({"PIPEWIRE_REMOTE": "", "PIPEWIRE_RUNTIME_DIR": "", "XDG_RUNTIME_DIR": "/run/user/1000"})
    assert raw == {"runtime_dir": "/run/user/1000"}
