import enum
import os

import pytest

from wfrunner.localaction import local_action_dir, local_if_expression


def test_action_dir_joins_and_cleans():
    assert local_action_dir("/tmp", "./path/to/action") == os.path.normpath("/tmp/path/to/action")


def test_action_dir_is_under_workdir():
    result = local_action_dir("/work", "./local/action")
    assert result.startswith(os.path.normpath("/work"))
    assert result.endswith(os.path.normpath("local/action"))


def test_action_dir_empty_parts():
    assert local_action_dir("", "") == ""
    assert local_action_dir("", "action") == "action"


@pytest.mark.parametrize(
    "stage, expected",
    [("Main", "failure()"), ("Post", "always()"), ("Pre", "")],
)
def test_if_expression_by_stage_name(stage, expected):
    assert local_if_expression(stage, "failure()", "always()") == expected


def test_if_expression_accepts_enum_members():
    class Stage(enum.Enum):
        PRE = 0
        MAIN = 1
        POST = 2

    assert local_if_expression(Stage.MAIN, "success()", "always()") == "success()"
    assert local_if_expression(Stage.POST, "success()", "always()") == "always()"
    assert local_if_expression(Stage.PRE, "success()", "always()") == ""