"""Evaluation of `${{ ... }}` expressions in workflow values."""

from __future__ import annotations

import enum
import logging
import math
import re
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_EXPR_OPEN = "${{"
_EXPR_CLOSE = "}}"
_STRING_TAIL = re.compile(r"(?:''|[^'])*'")
_INSERT_DIRECTIVE = re.compile(r"\$\{\{\s*insert\s*\}\}")
_ADD_MASK = re.compile(r"::add-mask::.*")


class StatusCheck(enum.Enum):
    """Status function implied when an expression does not call one itself."""

    NONE = "none"
    SUCCESS = "success"
    ALWAYS = "always"


class ExpressionSyntaxError(ValueError):
    """Raised when a templated string has an unclosed expression or string."""


class _Interpreter(Protocol):
    def evaluate(self, expression: str, status_check: StatusCheck) -> Any: ...


def _has_expression(text: str) -> bool:
    return _EXPR_OPEN in text and _EXPR_CLOSE in text


def escape_format_string(text: str) -> str:
    """Double every brace so the text survives a format() call unchanged."""
    return text.replace("{", "{{").replace("}", "}}")


def rewrite_sub_expression(text: str, force_format: bool = False) -> str:
    """Turn a string with embedded `${{ }}` parts into one format() expression.

    A string that is exactly one expression is returned untouched unless
    ``force_format`` is set.
    """
    if not _has_expression(text):
        return text

    pos = 0
    expr_start = -1
    in_string = False
    results: list[str] = []
    parts: list[str] = []

    while pos < len(text):
        if in_string:
            match = _STRING_TAIL.match(text, pos)
            if match is None:
                raise ExpressionSyntaxError("unclosed string.")
            in_string = False
            pos = match.end()
        elif expr_start > -1:
            expr_end = text.find(_EXPR_CLOSE, pos)
            quote = text.find("'", pos)
            if expr_end > -1 and quote > -1:
                if expr_end < quote:
                    quote = -1
                else:
                    expr_end = -1
            if expr_end > -1:
                parts.append(f"{{{len(results)}}}")
                results.append(text[expr_start:expr_end].strip())
                pos = expr_end + len(_EXPR_CLOSE)
                expr_start = -1
            elif quote > -1:
                in_string = True
                pos = quote + 1
            else:
                raise ExpressionSyntaxError("unclosed expression.")
        else:
            start = text.find(_EXPR_OPEN, pos)
            if start != -1:
                parts.append(escape_format_string(text[pos:start]))
                expr_start = start + len(_EXPR_OPEN)
                pos = expr_start
            else:
                parts.append(escape_format_string(text[pos:]))
                pos = len(text)

    format_out = "".join(parts)
    if len(results) == 1 and format_out == "{0}" and not force_format:
        return text

    quoted = format_out.replace("'", "''")
    out = f"format('{quoted}', {', '.join(results)})"
    if out != text:
        logger.debug("expression '%s' rewritten to '%s'", text, out)
    return out


def is_truthy(value: Any) -> bool:
    """Truthiness as the expression language defines it."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


class ExpressionEvaluator:
    """Evaluates expressions, templated strings and nested data with an interpreter."""

    def __init__(self, interpreter: _Interpreter) -> None:
        self.interpreter = interpreter

    def evaluate(self, expression: str, status_check: StatusCheck = StatusCheck.NONE) -> Any:
        """Evaluate a bare expression and return its value."""
        logger.debug("evaluating expression '%s'", expression)
        value = self.interpreter.evaluate(expression, status_check)
        printable = _ADD_MASK.sub("::add-mask::***)", str(value))
        logger.debug("expression '%s' evaluated to '%s'", expression, printable)
        return value

    def evaluate_data(self, value: Any) -> Any:
        """Evaluate expressions inside strings, mappings and sequences.

        A mapping key matching ``${{ insert }}`` merges its (mapping) value into
        the parent, and a sequence item that evaluates to a sequence is spliced
        into the parent sequence.
        """
        if isinstance(value, str):
            if not _has_expression(value):
                return value
            return self.evaluate(rewrite_sub_expression(value, False), StatusCheck.NONE)
        if isinstance(value, dict):
            result: dict[Any, Any] = {}
            for key, item in value.items():
                evaluated = self.evaluate_data(item)
                if isinstance(key, str) and _INSERT_DIRECTIVE.search(key):
                    if not isinstance(evaluated, dict):
                        raise ValueError(
                            f"failed to insert {evaluated!r} into mapping {value!r}: "
                            f"unexpected type {type(evaluated).__name__}, expected a mapping"
                        )
                    result.update(evaluated)
                else:
                    result[self.evaluate_data(key)] = evaluated
            return result
        if isinstance(value, list):
            items: list[Any] = []
            for item in value:
                evaluated = self.evaluate_data(item)
                if isinstance(evaluated, list) and not isinstance(item, list):
                    items.extend(evaluated)
                else:
                    items.append(evaluated)
            return items
        return value

    def interpolate(self, text: str) -> str:
        """Replace every `${{ }}` part of ``text`` with its string value.

        An evaluation error is logged and yields an empty string.
        """
        if not _has_expression(text):
            return text
        expression = rewrite_sub_expression(text, True)
        try:
            value = self.evaluate(expression, StatusCheck.NONE)
        except Exception as err:  # the interpreter's errors are not typed
            logger.error("Unable to interpolate expression '%s': %s", expression, err)
            return ""
        if not isinstance(value, str):
            raise TypeError(f"Expression {expression} did not evaluate to a string")
        return value


def eval_bool(evaluator: ExpressionEvaluator, expression: str, status_check: StatusCheck) -> bool:
    """Evaluate a condition and return its truthiness."""
    rewritten = rewrite_sub_expression(expression, False)
    return is_truthy(evaluator.evaluate(rewritten, status_check))