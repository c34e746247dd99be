# wfrunner

Helpers for running CI workflow jobs on your own machine. The package has no
dependencies outside the standard library. Each module covers one concern.

## Modules

### `wfrunner.expressions`

This module handles `${{ ... }}` expressions.

- `rewrite_sub_expression(text, force_format)` turns a string that holds
  `${{ }}` parts into one `format('...', expr0, expr1, ...)` expression.
  - Literal braces are escaped with `escape_format_string`.
  - A string that is exactly one expression comes back unchanged, unless
    `force_format` is true.
  - An unclosed expression or string raises `ExpressionSyntaxError`.
- `ExpressionEvaluator(interpreter)` wraps an object that has a method
  `evaluate(expression, status_check)`. It offers three methods:
  - `evaluate` runs a bare expression.
  - `interpolate` replaces the `${{ }}` parts of a string.
    - When the interpreter raises, it logs the error and returns `""`.
    - When the result is not a string, it raises `TypeError`.
  - `evaluate_data` walks strings, dicts and lists.
    - A `${{ insert }}` key merges its mapping value into the parent dict.
    - An item that evaluates to a list is spliced into the parent list.
- `StatusCheck` lists the implied status functions: `NONE`, `SUCCESS` and
  `ALWAYS`.
- `is_truthy(value)` applies the truthiness rules of the expression language.
- `eval_bool(evaluator, expression, status_check)` evaluates a condition and
  returns whether it holds.

### `wfrunner.joblog`

This module formats job logs and masks secrets.

- `JobLogFormatter(color, colored)` is a `logging.Formatter`. It writes
  `[job] message` lines.
  - It reads the `job`, `raw_output` and `dryrun` attributes of the record.
  - It adds a `[DEBUG] ` flag to debug records.
  - ANSI colour is used when `colored` is true. When `colored` is `None`,
    `colour_enabled` decides.
- `colour_enabled(stream, environ)` honours `CLICOLOR_FORCE` and `CLICOLOR=0`.
  Otherwise it gives colour only when the stream is a terminal.
- `MaskingFilter(secrets, masks, insecure)` is a `logging.Filter`. It replaces
  secret values and masks with `***`.
  - The `masks` list is read afresh for each record.
- `next_color()` cycles through the job colours.
- `extend_step_ids(step_ids, step_id)` returns the chain of step ids with one
  more id appended.

### `wfrunner.workflow`

This module reads references to reusable workflows in other repositories.

- `parse_remote_reusable_workflow(uses)` parses
  `owner/repo/.github/workflows/file@ref` into a `RemoteReusableWorkflow`.
  - The result has `org`, `repo`, `filename`, `ref` and `url`, and a
    `clone_url()` method.
  - A value in any other form raises `InvalidWorkflowReference`.

### `wfrunner.containers`

This module builds container names, binds and mounts.

- `create_container_name(*args)` joins the parts and replaces every
  non-alphanumeric character with `-`.
  - It trims the name to 63 characters and appends the SHA-256 hash.
  - `trim_to_len` is the helper that does the trimming.
- `docker_daemon_socket_mount_path(daemon_path)` maps `unix://`, `npipe://`
  and other scheme URLs to the socket path to bind.
- `binds_and_mounts(container_name, workdir, bind_workdir, daemon_socket, volumes)`
  returns the bind list and the mount dict for a job container.
- `split_volumes(volumes)` separates host binds from named-volume mounts.
- `action_cache_dir(configured, environ)` gives the cache directory.
  - It uses `XDG_CACHE_HOME`, or `~/.cache` when that is unset, and adds
    `act` to the path.

### `wfrunner.runcontext`

This module computes values for the run context of a job.

- `job_environment` and `merge_maps` merge the workflow, job and configured
  environments. `job_environment` also sets `ACT=true`.
- `server_urls(instance, config_env)` gives the web, API and GraphQL
  endpoints for an instance.
  - `GITHUB_SERVER_URL`, `GITHUB_API_URL` and `GITHUB_GRAPHQL_URL` override
    them.
- `job_status`, `image_os`, `action_runtime_vars` and `nested_map_lookup` are
  small helpers for the run context.

### `wfrunner.runner`

This module covers run settings and plan-level decisions.

- `Config` is a dataclass that holds the settings of a run.
- `load_event_json(config)` produces the event payload. It reads the payload
  from `event_path`, builds it from `inputs`, or returns `{}`.
- `select_matrixes(matrixes, allowed)` keeps the matrix combinations whose
  values are allowed.
- `effective_max_parallel(strategy_max, matrix_count)` caps the parallelism.
  It defaults to 4.
- `check_results(runs)` raises `JobFailedError` for the first run whose
  result is `failure`.

### `wfrunner.localaction`

This module covers actions kept in the repository itself.

- `local_action_dir(workdir, uses)` gives the directory of the action.
- `local_if_expression(stage_name, step_if, post_if)` picks the condition for
  the main or post stage.

## Examples

```python
from wfrunner.expressions import rewrite_sub_expression

rewrite_sub_expression("Hello ${{ 'World' }}", False)
# "format('Hello {0}', 'World')"

rewrite_sub_expression("${{ true }}", True)
# "format('{0}', true)"
```

```python
from wfrunner.expressions import ExpressionEvaluator

class Echo:
    def evaluate(self, expression, status_check):
        return expression

ExpressionEvaluator(Echo()).interpolate("Hi ${{ name }}")
# "format('Hi {0}', name)"
```

```python
from wfrunner.workflow import parse_remote_reusable_workflow

wf = parse_remote_reusable_workflow("octo/tools/.github/workflows/ci.yml@v1")
wf.clone_url()
# "https://github.com/octo/tools"
```

```python
from wfrunner.runner import select_matrixes

select_matrixes(
    [{"os": "linux", "node": 8}, {"os": "windows", "node": 8}],
    {"os": {"linux": True}},
)
# [{"os": "linux", "node": 8}]
```

```python
from wfrunner.containers import create_container_name

create_container_name("act", "workflow/job")
# "act-workflow-job-" followed by 64 hex digits of SHA-256
```

## What the package does not do

The package provides helpers only, and several parts of a workflow runner are
not included:

- It has no command-line tool.
- It does not parse workflow files.
- It does not plan, schedule or execute jobs and steps.
- It does not start or talk to containers.
- It does not clone repositories.
- It has no expression interpreter of its own. You supply one to
  `ExpressionEvaluator`.

## Running the tests

```
pip install -e ".[test]"
pytest
```