"""Runner configuration and the decisions made when a plan is executed."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_PARALLEL = 4
EMPTY_EVENT = "{}"


@dataclass
class Config:
    """Settings for a run of workflows."""

    actor: str = ""
    workdir: str = ""
    action_cache_dir: str = ""
    bind_workdir: bool = False
    event_name: str = ""
    event_path: str = ""
    default_branch: str = ""
    reuse_containers: bool = False
    force_pull: bool = False
    force_rebuild: bool = False
    log_output: bool = False
    json_logger: bool = False
    env: dict[str, str] = field(default_factory=dict)
    inputs: dict[str, str] = field(default_factory=dict)
    secrets: dict[str, str] = field(default_factory=dict)
    vars: dict[str, str] = field(default_factory=dict)
    token: str = ""
    insecure_secrets: bool = False
    platforms: dict[str, str] = field(default_factory=dict)
    privileged: bool = False
    userns_mode: str = ""
    container_architecture: str = ""
    container_daemon_socket: str = ""
    container_options: str = ""
    use_git_ignore: bool = True
    github_instance: str = "github.com"
    container_cap_add: list[str] = field(default_factory=list)
    container_cap_drop: list[str] = field(default_factory=list)
    auto_remove: bool = False
    artifact_server_path: str = ""
    artifact_server_addr: str = ""
    artifact_server_port: str = ""
    no_skip_checkout: bool = False
    remote_name: str = ""
    replace_ghe_action_with_github_com: list[str] = field(default_factory=list)
    replace_ghe_action_token_with_github_com: str = ""
    matrix: dict[str, dict[str, bool]] = field(default_factory=dict)


class JobFailedError(RuntimeError):
    """Raised when a job of the plan ended with a failure result."""

    def __init__(self, job: str) -> None:
        super().__init__(f"Job '{job}' failed")
        self.job = job


def load_event_json(config: Config) -> str:
    """Event payload for the run.

    Read from ``config.event_path`` when set, otherwise built from the
    manually passed inputs, otherwise an empty object.
    """
    if config.event_path:
        logger.debug("Reading event.json from %s", config.event_path)
        with open(config.event_path, encoding="utf-8") as handle:
            return handle.read()
    if config.inputs:
        return json.dumps({"inputs": config.inputs}, sort_keys=True, separators=(",", ":"))
    return EMPTY_EVENT


def _value_text(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def select_matrixes(
    matrixes: Iterable[Mapping[str, Any]],
    allowed: Mapping[str, Mapping[str, bool]] | None,
) -> list[Mapping[str, Any]]:
    """Keep the matrix combinations whose values the user allowed.

    A key without an entry in ``allowed`` accepts any value.
    """
    allowed = allowed or {}
    return [
        matrix
        for matrix in matrixes
        if all(
            key not in allowed or _value_text(value) in allowed[key]
            for key, value in matrix.items()
        )
    ]


def check_results(runs: Iterable[tuple[str, str]]) -> None:
    """Raise :class:`JobFailedError` for the first run whose result is ``failure``.

    ``runs`` yields ``(name, result)`` pairs in plan order.
    """
    for name, result in runs:
        if result == "failure":
            raise JobFailedError(name)


def effective_max_parallel(strategy_max: int | None, matrix_count: int) -> int:
    """Number of matrix jobs run at once.

    Without a strategy the default applies; never more than there are jobs.
    """
    limit = DEFAULT_MAX_PARALLEL if strategy_max is None else strategy_max
    return min(limit, matrix_count)