import os
import re
from pathlib import Path

import pytest

from wfrunner.containers import (
    action_cache_dir,
    binds_and_mounts,
    create_container_name,
    docker_daemon_socket_mount_path,
    split_volumes,
    trim_to_len,
)

HASH = re.compile(r"^[0-9a-f]{64}$")


@pytest.mark.parametrize(
    "text,length,expected",
    [("abcdef", 3, "abc"), ("abc", 10, "abc"), ("abc", -1, ""), ("abc", 0, "")],
)
def test_trim_to_len(text, length, expected):
    assert trim_to_len(text, length) == expected


def test_container_name_sanitised_and_hashed():
    name = create_container_name("act", "my workflow/job 1")
    prefix, digest = name.rsplit("-", 1)
    assert prefix == "act-my-workflow-job-1"
    assert HASH.match(digest)


def test_container_name_collapses_double_dashes():
    name = create_container_name("act", "a//b")
    assert name.startswith("act-a-b-")


def test_container_name_is_deterministic_and_distinct():
    assert create_container_name("act", "x") == create_container_name("act", "x")
    assert create_container_name("act", "x") != create_container_name("act", "y")


def test_container_name_long_is_trimmed():
    name = create_container_name("act", "a" * 200 + "/")
    prefix, digest = name.rsplit("-", 1)
    assert len(prefix) <= 63
    assert not prefix.endswith("-")
    assert HASH.match(digest)


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/var/run/docker.sock", "/var/run/docker.sock"),
        ("unix:///tmp/docker.sock", "/tmp/docker.sock"),
        ("UNIX:///tmp/docker.sock", "/tmp/docker.sock"),
        ("npipe:////./pipe/docker_engine", "/var/run/docker.sock"),
        ("tcp://localhost:2375", "/var/run/docker.sock"),
        ("ssh2://host", "ssh2://host"),
    ],
)
def test_docker_daemon_socket_mount_path(path, expected):
    assert docker_daemon_socket_mount_path(path) == expected


def test_action_cache_dir_configured():
    assert action_cache_dir("/opt/cache", {}) == "/opt/cache"


def test_action_cache_dir_xdg():
    assert action_cache_dir("", {"XDG_CACHE_HOME": "/xdg"}) == os.path.join("/xdg", "act")


def test_action_cache_dir_home_fallback():
    expected = os.path.join(str(Path.home()), ".cache", "act")
    assert action_cache_dir("", {"XDG_CACHE_HOME": ""}) == expected


@pytest.mark.parametrize(
    "volumes,want_binds,want_mounts",
    [
        (["/volume"], ["/volume"], {}),
        (["/path/to/file/on/host:/volume"], ["/path/to/file/on/host:/volume"], {}),
        (["volume-id:/volume"], [], {"volume-id": "/volume"}),
    ],
)
def test_split_volumes(volumes, want_binds, want_mounts):
    binds, mounts = split_volumes(volumes)
    assert binds == want_binds
    assert mounts == want_mounts


@pytest.mark.parametrize("workdir", ["/mnt/linux", "/mnt/path with spaces/linux"])
def test_binds_workdir_bound(workdir):
    binds, mounts = binds_and_mounts("job", workdir, bind_workdir=True)
    assert any(b.startswith(f"{workdir}:{workdir}") for b in binds)
    assert "job" not in mounts


@pytest.mark.parametrize("workdir", ["/mnt/linux", "/mnt/path with spaces/linux"])
def test_binds_workdir_mounted(workdir):
    _, mounts = binds_and_mounts("job", workdir, bind_workdir=False)
    assert mounts["job"] == workdir


def test_default_mounts_and_socket():
    binds, mounts = binds_and_mounts("job", "/w")
    assert "/var/run/docker.sock:/var/run/docker.sock" in binds
    assert mounts["act-toolcache"] == "/toolcache"
    assert mounts["job-env"] == "/var/run/act"


def test_no_socket_bind():
    binds, _ = binds_and_mounts("job", "/w", daemon_socket="-")
    assert binds == []


def test_unix_socket_bind():
    binds, _ = binds_and_mounts("job", "/w", daemon_socket="unix:///tmp/d.sock")
    assert binds == ["/tmp/d.sock:/var/run/docker.sock"]


@pytest.mark.parametrize(
    "volumes,want_bind,want_mounts",
    [
        (["/volume"], "/volume", {}),
        (["/path/to/file/on/host:/volume"], "/path/to/file/on/host:/volume", {}),
        (["volume-id:/volume"], "", {"volume-id": "/volume"}),
    ],
)
def test_container_volumes(volumes, want_bind, want_mounts):
    binds, mounts = binds_and_mounts("job", "/w", volumes=volumes)
    if want_bind:
        assert want_bind in binds
    for key, value in want_mounts.items():
        assert mounts[key] == value
    assert mounts["job"] == "/w"