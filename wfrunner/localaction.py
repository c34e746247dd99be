"""Locations and conditions of actions kept in the workflow's own repository."""

from __future__ import annotations

import os
from typing import Any


def local_action_dir(workdir: str, uses: str) -> str:
    """Directory of a local action: ``uses`` joined to the working directory."""
    parts = [part for part in (workdir, uses) if part]
    if not parts:
        return ""
    return os.path.normpath(os.sep.join(parts))


def local_if_expression(stage_name: Any, step_if: str, post_if: str) -> str:
    """Condition of a local action step for a stage.

    The main stage uses the step's ``if``, the post stage the action's
    ``post-if``; other stages have none.
    """
    name = str(getattr(stage_name, "name", stage_name)).lower()
    if name == "main":
        return step_if
    if name == "post":
        return post_if
    return ""