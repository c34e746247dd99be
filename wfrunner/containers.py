"""Names, binds and mounts for the job container."""

from __future__ import annotations

import hashlib
import os
import re
import sys
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path

DEFAULT_DOCKER_SOCKET = "/var/run/docker.sock"
ACT_PATH = "/var/run/act"
TOOLCACHE_VOLUME = "act-toolcache"
TOOLCACHE_PATH = "/toolcache"

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_WINDOWS_DRIVE = re.compile(r"^([a-zA-Z]):\\(.*)$")


def trim_to_len(text: str, length: int) -> str:
    """Cut ``text`` down to at most ``length`` characters."""
    return text[: max(length, 0)]


def create_container_name(*args: str) -> str:
    """Build a container name from parts, made safe and suffixed with a hash."""
    name = "-".join(args)
    name = _NON_ALNUM.sub("-", name)
    name = name.replace("--", "-")
    digest = hashlib.sha256(name.encode("utf-8")).hexdigest()
    # room for the separator and the 64-character hash
    trimmed = trim_to_len(name, 63).strip("-")
    return f"{trimmed}-{digest}"


def docker_daemon_socket_mount_path(daemon_path: str) -> str:
    """Path of the daemon socket to bind into a Linux container."""
    scheme, sep, rest = daemon_path.partition("://")
    if sep:
        lowered = scheme.lower()
        if lowered == "npipe":
            # Linux container on Windows: the VM's default socket
            return DEFAULT_DOCKER_SOCKET
        if lowered == "unix":
            return rest
        if all(("a" <= c <= "z") or ("A" <= c <= "Z") for c in scheme):
            # unknown protocol
            return DEFAULT_DOCKER_SOCKET
    return daemon_path


def action_cache_dir(configured: str = "", environ: Mapping[str, str] | None = None) -> str:
    """Directory that holds downloaded actions and other cached data."""
    if configured:
        return configured
    env = os.environ if environ is None else environ
    cache = env.get("XDG_CACHE_HOME", "")
    if not cache:
        try:
            cache = os.path.join(str(Path.home()), ".cache")
        except (RuntimeError, KeyError):
            try:
                cache = os.path.abspath(".")
            except OSError:
                cache = tempfile.gettempdir()
    return os.path.join(cache, "act")


def split_volumes(volumes: Iterable[str]) -> tuple[list[str], dict[str, str]]:
    """Separate container volumes into host binds and named-volume mounts."""
    binds: list[str] = []
    mounts: dict[str, str] = {}
    for volume in volumes:
        if ":" not in volume or os.path.isabs(volume):
            # anonymous volume or host path
            binds.append(volume)
        else:
            source, target = volume.split(":", 1)
            mounts[source] = target
    return binds, mounts


def _to_container_path(path: str) -> str:
    if os.name != "nt":
        return path
    match = _WINDOWS_DRIVE.match(path)
    if match is None:
        return ""
    drive, rest = match.groups()
    return f"/mnt/{drive.lower()}/{rest.replace(chr(92), '/')}"


def _selinux_enabled() -> bool:
    try:
        with open("/sys/fs/selinux/enforce", encoding="ascii") as handle:
            handle.read()
    except OSError:
        return False
    return True


def _bind_modifiers() -> str:
    if _selinux_enabled():
        return ":z"
    if sys.platform == "darwin":
        return ":delegated"
    return ""


def binds_and_mounts(
    container_name: str,
    workdir: str,
    bind_workdir: bool = False,
    daemon_socket: str = "",
    volumes: Iterable[str] = (),
) -> tuple[list[str], dict[str, str]]:
    """Binds and volume mounts for the job container.

    An empty ``daemon_socket`` means the default socket; ``-`` means none.
    """
    socket = daemon_socket or DEFAULT_DOCKER_SOCKET
    binds: list[str] = []
    if socket != "-":
        binds.append(f"{docker_daemon_socket_mount_path(socket)}:{DEFAULT_DOCKER_SOCKET}")

    mounts: dict[str, str] = {
        TOOLCACHE_VOLUME: TOOLCACHE_PATH,
        f"{container_name}-env": ACT_PATH,
    }

    volume_binds, volume_mounts = split_volumes(volumes)
    binds.extend(volume_binds)
    mounts.update(volume_mounts)

    if bind_workdir:
        binds.append(f"{workdir}:{_to_container_path(workdir)}{_bind_modifiers()}")
    else:
        mounts[container_name] = _to_container_path(workdir)

    return binds, mounts