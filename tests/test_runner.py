import json

import pytest

from wfrunner.runner import (
    Config,
    JobFailedError,
    check_results,
    effective_max_parallel,
    load_event_json,
    select_matrixes,
)


def test_event_json_defaults_to_empty_object():
    assert load_event_json(Config()) == "{}"


def test_event_json_built_from_inputs():
    config = Config(inputs={"SOME_INPUT": "input"})
    assert json.loads(load_event_json(config)) == {"inputs": {"SOME_INPUT": "input"}}


def test_event_json_read_from_file(tmp_path):
    payload = '{"number": 123}'
    path = tmp_path / "event.json"
    path.write_text(payload, encoding="utf-8")
    config = Config(event_path=str(path), inputs={"ignored": "x"})
    assert load_event_json(config) == payload


def test_event_json_missing_file(tmp_path):
    config = Config(event_path=str(tmp_path / "missing.json"))
    with pytest.raises(FileNotFoundError):
        load_event_json(config)


def test_select_matrixes_with_user_inclusions():
    matrixes = [
        {"node": 8, "os": "ubuntu-18.04"},
        {"node": "8.x", "os": "ubuntu-18.04"},
        {"node": 10, "os": "ubuntu-18.04"},
        {"node": 8, "os": "windows-latest"},
    ]
    allowed = {"node": {"8": True, "8.x": True}, "os": {"ubuntu-18.04": True}}
    assert select_matrixes(matrixes, allowed) == matrixes[:2]


def test_select_matrixes_without_filter_keeps_all():
    matrixes = [{"a": 1}, {"a": 2}]
    assert select_matrixes(matrixes, {}) == matrixes
    assert select_matrixes(matrixes, None) == matrixes


def test_select_matrixes_boolean_values():
    matrixes = [{"flag": True}, {"flag": False}]
    assert select_matrixes(matrixes, {"flag": {"true": True}}) == [{"flag": True}]


def test_check_results_raises_for_failure():
    with pytest.raises(JobFailedError, match="Job 'test' failed") as info:
        check_results([("ok", "success"), ("test", "failure")])
    assert info.value.job == "test"


def test_check_results_passes_on_success():
    runs = [("a", "success"), ("b", "")]
    assert check_results(runs) is None


def test_max_parallel_default_is_four():
    assert effective_max_parallel(None, 10) == 4


def test_max_parallel_limited_by_matrix_count():
    assert effective_max_parallel(8, 3) == 3
    assert effective_max_parallel(None, 2) == 2


def test_max_parallel_from_strategy():
    assert effective_max_parallel(2, 10) == 2