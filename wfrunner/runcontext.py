"""Environment and context values that a job's run context is built from."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

DEFAULT_INSTANCE = "github.com"
DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"

STEP_FAILURE = "failure"


class ServerUrls(NamedTuple):
    """Web, REST API and GraphQL endpoints of a hosting instance."""

    server_url: str
    api_url: str
    graphql_url: str


def merge_maps(*args: Mapping[str, str] | None) -> dict[str, str]:
    """Merge mappings into a new dict; later mappings win."""
    merged: dict[str, str] = {}
    for mapping in args:
        if mapping:
            merged.update(mapping)
    return merged


def nested_map_lookup(mapping: Mapping[str, Any], *args: str) -> Any:
    """Follow ``args`` as keys through nested mappings.

    Returns None when no key is given, a key is missing, or an intermediate
    value is not a mapping.
    """
    if not args:
        return None
    current: Any = mapping
    for key in args:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current


def action_runtime_vars(
    address: str, port: str, environ: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Runtime URL and token variables for actions that talk to the artifact server.

    Non-empty values in ``environ`` take precedence over the defaults.
    """
    env = os.environ if environ is None else environ
    url = env.get("ACTIONS_RUNTIME_URL", "") or f"http://{address}:{port}/"
    runtime_token = env.get("ACTIONS_RUNTIME_TOKEN", "") or "token"
    return {"ACTIONS_RUNTIME_URL": url, "ACTIONS_RUNTIME_TOKEN": runtime_token}


def image_os(platform_name: str) -> str | None:
    """Value of ``ImageOS`` for a runner label, or None for an empty label."""
    if not platform_name:
        return None
    if platform_name == "ubuntu-latest":
        # the current ubuntu-latest cannot be discovered, so it is fixed
        return "ubuntu20"
    return platform_name.replace("-", "", 1).split(".", 1)[0]


def job_status(step_conclusions: Iterable[str]) -> str:
    """``failure`` if any step concluded with failure, else ``success``."""
    if any(conclusion == STEP_FAILURE for conclusion in step_conclusions):
        return "failure"
    return "success"


def job_environment(
    workflow_env: Mapping[str, str] | None,
    job_env: Mapping[str, str] | None,
    config_env: Mapping[str, str] | None,
) -> dict[str, str]:
    """Environment of a job: workflow, then job, then configured values, plus ``ACT``."""
    env = merge_maps(workflow_env, job_env, config_env)
    env["ACT"] = "true"
    return env


def server_urls(instance: str, config_env: Mapping[str, str] | None = None) -> ServerUrls:
    """Endpoints for ``instance``, overridable through the configured environment."""
    if instance == DEFAULT_INSTANCE:
        server, api, graphql = DEFAULT_SERVER_URL, DEFAULT_API_URL, DEFAULT_GRAPHQL_URL
    else:
        server = f"https://{instance}"
        api = f"https://{instance}/api/v3"
        graphql = f"https://{instance}/api/graphql"
    env = config_env or {}
    return ServerUrls(
        server_url=env.get("GITHUB_SERVER_URL", "") or server,
        api_url=env.get("GITHUB_API_URL", "") or api,
        graphql_url=env.get("GITHUB_GRAPHQL_URL", "") or graphql,
    )