"""References to reusable workflows kept in other repositories."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_SERVER_URL = "https://github.com"

_REMOTE_WORKFLOW = re.compile(r"^([^/]+)/([^/]+)/.github/workflows/([^@]+)@(.*)\Z")


class InvalidWorkflowReference(ValueError):
    """Raised when a ``uses`` value is not a remote reusable workflow reference."""


@dataclass
class RemoteReusableWorkflow:
    """A reusable workflow named as ``{owner}/{repo}/.github/workflows/{file}@{ref}``."""

    org: str
    repo: str
    filename: str
    ref: str
    url: str = DEFAULT_SERVER_URL

    def clone_url(self) -> str:
        """URL of the repository that holds the workflow."""
        return f"{self.url}/{self.org}/{self.repo}"


def parse_remote_reusable_workflow(uses: str) -> RemoteReusableWorkflow:
    """Parse a ``uses`` value into its parts."""
    match = _REMOTE_WORKFLOW.match(uses)
    if match is None:
        raise InvalidWorkflowReference(
            "expected format {owner}/{repo}/.github/workflows/{filename}@{ref}. "
            f"Actual '{uses}' Input string was not in a correct format"
        )
    org, repo, filename, ref = match.groups()
    return RemoteReusableWorkflow(org=org, repo=repo, filename=filename, ref=ref)